"""
Multi-crop plan aggregation.

Runs the maturity estimator once per selected crop against one station,
planting day and first-frost day, and flattens the results into an ordered
row list that every export format is derived from.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from growbydate.core.constants import (
    ROW_LABELS, NOT_REACHED_LABEL, NOT_POSSIBLE_LABEL,
    CLIMATE_NORMALS_NOTE, LATE_PLANT_NOTE
)
from growbydate.core.types import BaseKey, DayOfYear, PlanRowType
from growbydate.data.contracts import FrostRecord, StationSeries, ToolCrop
from growbydate.data.crops import crop_icon
from growbydate.phenology.calendar import doy_to_label
from growbydate.phenology.maturity import CropEstimate, RiskAssessment, estimate_crop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanRow:
    """A crop section header or a key / value / notes row"""
    type: PlanRowType
    key: str = ""
    value: str = ""
    notes: str = ""
    crop_name: str = ""
    slug: str = ""

    @classmethod
    def header(cls, crop_name: str, slug: str) -> "PlanRow":
        return cls(type=PlanRowType.CROP_HEADER, crop_name=crop_name, slug=slug)

    @classmethod
    def detail(cls, key: str, value: str, notes: str = "") -> "PlanRow":
        return cls(type=PlanRowType.ROW, key=key, value=value, notes=notes)


@dataclass(frozen=True)
class PlanMeta:
    location: str = ""
    station_id: str = ""
    base_key: str = "varies"
    planting_label: str = ""
    first_frost_label: str = ""


@dataclass(frozen=True)
class CropPlan:
    crop: ToolCrop
    base_key: BaseKey
    estimate: CropEstimate

    @property
    def icon(self) -> str:
        return crop_icon(self.crop.site_id or self.crop.gdd_slug)

    @property
    def export_slug(self) -> str:
        return self.crop.gdd_slug or self.crop.site_id or self.crop.slug


@dataclass
class Plan:
    """Estimation results for one run; replaced wholesale by the next run"""
    meta: PlanMeta
    rows: List[PlanRow] = field(default_factory=list)
    crops: List[CropPlan] = field(default_factory=list)
    worst_risk: Optional[RiskAssessment] = None
    any_late_plant: bool = False

    @property
    def summary_label(self) -> str:
        if self.worst_risk is None:
            return ""
        if len(self.crops) > 1:
            return f"Overall: {self.worst_risk.label}"
        return self.worst_risk.label

    @property
    def summary_note(self) -> str:
        if self.worst_risk is None:
            return ""
        note = self.worst_risk.note.strip()
        if len(self.crops) > 1:
            extra = "Review each crop section above for crop-specific details."
            return f"{note} {extra}" if note else "Review each crop section above for details."
        return note

    @property
    def footnote(self) -> str:
        late = LATE_PLANT_NOTE if self.any_late_plant else ""
        return f"{late}{CLIMATE_NORMALS_NOTE}"


def crop_rows(entry: CropPlan) -> List[PlanRow]:
    """Header plus detail rows for one crop."""
    crop, estimate = entry.crop, entry.estimate
    maturity_label = (doy_to_label(estimate.maturity_doy)
                      if estimate.maturity_doy is not None else NOT_REACHED_LABEL)
    latest_label = (doy_to_label(estimate.latest_safe_doy)
                    if estimate.latest_safe_doy is not None else NOT_POSSIBLE_LABEL)

    rows = [PlanRow.header(crop.name or crop.site_id, entry.export_slug)]
    rows.append(PlanRow.detail(ROW_LABELS["maturity"], maturity_label))
    if estimate.days_to_maturity is not None:
        rows.append(PlanRow.detail(ROW_LABELS["days"], str(estimate.days_to_maturity)))
    rows.append(PlanRow.detail(ROW_LABELS["target"], str(estimate.required_gdd)))
    rows.append(PlanRow.detail(ROW_LABELS["available"], str(estimate.available_gdd)))
    if not estimate.matures_before_frost:
        rows.append(PlanRow.detail(ROW_LABELS["shortfall"], f"{estimate.shortfall_gdd} GDD"))
    rows.append(PlanRow.detail(ROW_LABELS["latest_safe"], latest_label))
    rows.append(PlanRow.detail(ROW_LABELS["assessment"], estimate.risk.label, estimate.risk.note))
    return rows


def aggregate_plan(series: StationSeries, crops: Sequence[ToolCrop],
                   planting_doy: DayOfYear, frost: FrostRecord) -> Plan:
    """
    Estimate every crop and assemble the plan.

    The summary tracks the most severe risk tier across crops (the first crop
    wins ties) and whether planting is past the latest safe day for any crop.
    """
    frost_doy = frost.first_frost_doy
    plan = Plan(meta=PlanMeta(
        location=frost.location_label,
        station_id=series.station_id,
        planting_label=doy_to_label(planting_doy),
        first_frost_label=frost.first_frost_label,
    ))

    for crop in crops:
        base_key = crop.base_key
        estimate = estimate_crop(series.for_base(base_key), crop.gdd_required,
                                 planting_doy, frost_doy)

        if plan.worst_risk is None or estimate.risk.tier > plan.worst_risk.tier:
            plan.worst_risk = estimate.risk
        if estimate.planted_late:
            plan.any_late_plant = True

        entry = CropPlan(crop=crop, base_key=base_key, estimate=estimate)
        plan.crops.append(entry)
        plan.rows.extend(crop_rows(entry))

    logger.info(
        f"Plan for station {series.station_id}: {len(plan.crops)} crops, "
        f"worst risk {plan.worst_risk.tier.name if plan.worst_risk else 'n/a'}"
    )
    return plan
