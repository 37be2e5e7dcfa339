"""
Data contracts and schemas for the GrowByDate planner.
Ensures published datasets are read consistently and provides validation.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
import numpy as np
import pandas as pd

from growbydate.core.constants import BASE_KEYS
from growbydate.core.exceptions import DataValidationError, ErrorContext
from growbydate.core.types import (
    LocationKey, StationID, MMDD, BaseKey, CumulativeArray
)
from growbydate.phenology.calendar import format_mmdd_long, mmdd_to_doy
from growbydate.phenology.maturity import pick_base_key


class FrostRecord(BaseModel):
    """One row of the published frost-date dataset (climate normals)"""
    key: LocationKey
    name: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    last_frost: Optional[MMDD] = Field(default=None, alias="lastFrost")
    first_frost: Optional[MMDD] = Field(default=None, alias="firstFrost")
    source_label: Optional[str] = Field(default=None, alias="sourceLabel")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("key", mode="before")
    @classmethod
    def coerce_key(cls, v):
        """Keys may be published as numbers (ZIP3 rows)"""
        if v is None:
            raise ValueError("frost record has no key")
        return str(v)

    @field_validator("name", "region", "country", "source_label", mode="before")
    @classmethod
    def coerce_labels(cls, v):
        """Descriptive fields are only displayed; numbers read as text"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def location_label(self) -> str:
        return ", ".join(part for part in (self.name, self.region) if part)

    @property
    def last_frost_label(self) -> str:
        return format_mmdd_long(self.last_frost)

    @property
    def first_frost_label(self) -> str:
        return format_mmdd_long(self.first_frost)

    @property
    def first_frost_doy(self) -> Optional[int]:
        return mmdd_to_doy(self.first_frost)


class SiteCrop(BaseModel):
    """Site-wide crop metadata embedded in the page"""
    id: str
    slug: Optional[str] = None
    name: Optional[str] = None
    related_tools: List[str] = Field(default_factory=list, alias="relatedTools")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("related_tools", mode="before")
    @classmethod
    def coerce_tools(cls, v):
        return v if isinstance(v, list) else []


class CropRequirement(BaseModel):
    """GDD configuration for one crop"""
    slug: str
    name: Optional[str] = None
    base_f: Optional[float] = None
    gdd_required: Optional[float] = None
    category: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def base_key(self) -> BaseKey:
        return pick_base_key(self.base_f)


class ToolCrop(CropRequirement):
    """A site crop joined with its GDD requirement"""
    site_id: str
    gdd_slug: str


@dataclass(frozen=True)
class StationSeries:
    """
    Cumulative degree-day normals for one station.

    ``bases`` maps a base-temperature key ("40", "45", "50") to the
    cumulative total through each day of year. Only keys present in the
    payload as arrays appear here.
    """
    station_id: StationID
    bases: Dict[str, CumulativeArray] = field(default_factory=dict)

    def for_base(self, base_key: BaseKey) -> Optional[CumulativeArray]:
        return self.bases.get(base_key)

    @classmethod
    def from_payload(cls, station_id: StationID, payload: Any) -> "StationSeries":
        """
        Build a series from a decoded station JSON document.

        Raises:
            DataValidationError: payload has no ``bases`` object, or no
                recognized base key holds an array
        """
        context = ErrorContext(station_id=station_id, component="station_series")
        if not isinstance(payload, dict):
            raise DataValidationError("Station payload is not an object", context)

        raw_bases = payload.get("bases")
        if not isinstance(raw_bases, dict):
            raise DataValidationError("Station payload has no 'bases' mapping", context)

        bases = {}
        for key in BASE_KEYS:
            values = raw_bases.get(key)
            if isinstance(values, list):
                bases[key] = _coerce_cumulative(values)

        if not bases:
            raise DataValidationError(
                f"Station payload has no array for any of the base keys {list(BASE_KEYS)}", context
            )

        return cls(station_id=station_id, bases=bases)


def _coerce_cumulative(values: List[Any]) -> CumulativeArray:
    """Non-numeric and non-finite entries read as zero."""
    scalars = [v if isinstance(v, (int, float, str)) else None for v in values]
    numeric = pd.to_numeric(pd.Series(scalars, dtype=object), errors="coerce")
    arr = numeric.to_numpy(dtype=float)
    arr = np.where(np.isfinite(arr), arr, 0.0)
    arr.setflags(write=False)
    return arr
