"""
Type definitions and type aliases for the GrowByDate planner.
"""
from typing import Protocol, runtime_checkable, Any, Literal
from enum import Enum
from typing_extensions import TypeAlias
import numpy as np


# Type aliases for clarity
LocationKey: TypeAlias = str  # ZIP5 / ZIP3 digits or 3-char FSA
StationID: TypeAlias = str
DayOfYear: TypeAlias = int  # 0-indexed, non-leap calendar
MMDD: TypeAlias = str  # "MM-DD"
BaseKey: TypeAlias = Literal["40", "45", "50"]
GDD: TypeAlias = float

# Cumulative degree-day totals through each day of year
CumulativeArray: TypeAlias = np.ndarray  # Shape: (365,)


class LookupReason(str, Enum):
    """Outcome of a keyed dataset lookup"""
    EMPTY = "empty"
    MAP_LOAD_FAILED = "map_load_failed"
    NOT_FOUND = "not_found"
    OK = "ok"


class RiskTier(int, Enum):
    """Maturity-versus-frost risk, ordered by severity"""
    COMFORTABLE = 0
    AT_RISK = 1
    UNLIKELY = 2


class RunStatus(str, Enum):
    """Outcome of a planner run"""
    OK = "ok"
    NO_CROPS = "no_crops"
    INVALID_DATE = "invalid_date"
    EMPTY_LOCATION = "empty_location"
    FROST_NOT_FOUND = "frost_not_found"
    FROST_UNAVAILABLE = "frost_unavailable"
    NO_STATION_COVERAGE = "no_station_coverage"
    STATION_MAP_UNAVAILABLE = "station_map_unavailable"
    SERIES_MISSING = "series_missing"
    FAILED = "failed"


class PlanRowType(str, Enum):
    """Kinds of rows in an exported plan"""
    CROP_HEADER = "cropHeader"
    ROW = "row"


# Protocol definitions for dependency injection
@runtime_checkable
class JsonFetcher(Protocol):
    """Protocol for anything that can fetch a published JSON document"""

    async def fetch_json(self, path: str) -> Any:
        """Fetch and decode the document at a site-relative path"""
        ...
