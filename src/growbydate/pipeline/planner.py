"""
GDD Planner orchestration.

Validates a request, resolves the location against the frost dataset and
the station index (concurrently), loads the station series and aggregates
the selected crops into a plan. Every failure ends in a PlanOutcome with a
user-facing message; ``run`` never raises.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

from growbydate.core.config import GrowByDateConfig, PlannerConfig, get_config
from growbydate.core.constants import RUN_MESSAGES
from growbydate.core.exceptions import (
    ErrorContext, InputError, InvalidLocationError,
    InvalidPlantingDateError, NoCropSelectedError
)
from growbydate.core.types import DayOfYear, JsonFetcher, LookupReason, RunStatus
from growbydate.data.contracts import FrostRecord, ToolCrop
from growbydate.data.crops import CropCatalog
from growbydate.data.keys import normalize_location_key
from growbydate.data.sources.base import create_fetcher
from growbydate.data.sources.frost import FrostDatasetSource
from growbydate.data.sources.stations import StationIndexSource, StationSeriesSource
from growbydate.phenology.calendar import date_value_to_doy
from growbydate.pipeline.export import build_csv, build_text_plan
from growbydate.pipeline.plan import Plan, aggregate_plan


@dataclass(frozen=True)
class PlanRequest:
    """User input for one estimate"""
    location: Optional[str]
    planting_date: Union[str, date, None]
    crop_ids: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlanOutcome:
    """Result of a planner run: a plan, or a status with an explanation"""
    status: RunStatus
    message: str = ""
    plan: Optional[Plan] = None
    frost: Optional[FrostRecord] = None
    station_id: str = ""

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.OK

    @classmethod
    def of(cls, status: RunStatus, **kwargs) -> "PlanOutcome":
        return cls(status=status, message=RUN_MESSAGES.get(status.value, ""), **kwargs)


class GddPlanner:
    """
    Multi-crop GDD maturity planner.

    The three dataset sources keep their own session caches, so one planner
    instance should live as long as the page / process session.
    """

    def __init__(self, catalog: CropCatalog,
                 frost_source: FrostDatasetSource,
                 station_index: StationIndexSource,
                 series_source: StationSeriesSource,
                 config: Optional[PlannerConfig] = None):
        self.catalog = catalog
        self.frost_source = frost_source
        self.station_index = station_index
        self.series_source = series_source
        self.config = config or get_config().planner
        self.logger = logging.getLogger("growbydate.pipeline.planner")

        self.crops: List[ToolCrop] = catalog.tool_crops(self.config.tool_slug)
        self._crops_by_id = {crop.site_id: crop for crop in self.crops}

    @classmethod
    def from_config(cls, catalog: CropCatalog,
                    config: Optional[GrowByDateConfig] = None,
                    fetcher: Optional[JsonFetcher] = None) -> "GddPlanner":
        """Wire the dataset sources from configuration."""
        config = config or get_config()
        fetcher = fetcher or create_fetcher(config.data)
        return cls(
            catalog=catalog,
            frost_source=FrostDatasetSource(fetcher, config.data.frost_dataset_path),
            station_index=StationIndexSource(fetcher, config.data.station_index_path),
            series_source=StationSeriesSource(fetcher, config.data.station_series_template),
            config=config.planner,
        )

    def validate_request(self, request: PlanRequest) -> Tuple[List[ToolCrop], DayOfYear]:
        """
        Check crops, planting date and location, in that order.

        Raises:
            NoCropSelectedError, InvalidPlantingDateError, InvalidLocationError
        """
        chosen = [self._crops_by_id[cid] for cid in request.crop_ids or ()
                  if cid in self._crops_by_id]
        if not chosen:
            raise NoCropSelectedError("No known crop selected",
                                      ErrorContext(component="planner", operation="validate"))

        planting_doy = date_value_to_doy(request.planting_date)
        if planting_doy is None:
            raise InvalidPlantingDateError(f"Invalid planting date: {request.planting_date!r}",
                                           ErrorContext(component="planner", operation="validate"))

        if not normalize_location_key(request.location):
            raise InvalidLocationError("Location is empty",
                                       ErrorContext(component="planner", operation="validate"))

        return chosen, planting_doy

    async def run(self, request: PlanRequest) -> PlanOutcome:
        try:
            return await self._run(request)
        except InputError as e:
            self.logger.info(f"Rejected request: {e}")
            try:
                status = RunStatus(e.status)
            except ValueError:
                status = RunStatus.FAILED
            return PlanOutcome.of(status)
        except Exception:
            self.logger.exception("GDD planner run failed")
            return PlanOutcome.of(RunStatus.FAILED)

    async def _run(self, request: PlanRequest) -> PlanOutcome:
        crops, planting_doy = self.validate_request(request)

        frost_result, station_result = await asyncio.gather(
            self.frost_source.lookup_detailed(request.location),
            self.station_index.lookup_detailed(request.location),
        )

        if frost_result.reason == LookupReason.MAP_LOAD_FAILED:
            return PlanOutcome.of(RunStatus.FROST_UNAVAILABLE)
        if not frost_result.found:
            return PlanOutcome.of(RunStatus.FROST_NOT_FOUND)
        frost = frost_result.record

        if station_result.reason == LookupReason.MAP_LOAD_FAILED:
            return PlanOutcome.of(RunStatus.STATION_MAP_UNAVAILABLE, frost=frost)
        if not station_result.found:
            return PlanOutcome.of(RunStatus.NO_STATION_COVERAGE, frost=frost)
        station_id = station_result.station_id

        series = await self.series_source.load(station_id)
        if series is None:
            return PlanOutcome.of(RunStatus.SERIES_MISSING, frost=frost, station_id=station_id)

        plan = aggregate_plan(series, crops, planting_doy, frost)
        return PlanOutcome(status=RunStatus.OK, plan=plan, frost=frost, station_id=station_id)

    def export_text(self, plan: Plan) -> str:
        return build_text_plan(plan, title=self.config.report_title)

    def export_csv(self, plan: Plan) -> str:
        return build_csv(plan)

    def export_files(self, plan: Plan) -> Dict[str, str]:
        """Download name -> document for both export formats"""
        return {
            self.config.text_filename: self.export_text(plan),
            self.config.csv_filename: self.export_csv(plan),
        }
