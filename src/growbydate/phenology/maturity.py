"""
Normals-based GDD maturity estimator.

Works on a station's cumulative degree-day series for one base temperature:
``cum[d]`` is the total accumulated from January 1 through day-of-year ``d``
(inclusive) in a typical year. Accumulation toward maturity starts on the
planting day, so every quantity subtracts the total accumulated before it:

    accumulated(p, d) = cum[d] - cum[p - 1]

Degree-day quantities shown to the user are rounded half away from zero and
then clamped at zero. Searches that fail within the year return ``None``;
that is an expected outcome (the crop does not mature in a typical season)
and not an error.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import numpy as np

from growbydate.core.constants import (
    DAYS_IN_YEAR, LAST_DOY, RISK_BUFFER_DAYS, DEFAULT_BASE_F
)
from growbydate.core.types import GDD, BaseKey, CumulativeArray, DayOfYear, RiskTier

logger = logging.getLogger(__name__)

SeriesLike = Union[CumulativeArray, Sequence[Any], None]


# =============================================================================
# NUMERIC HELPERS
# =============================================================================

def safe_num(value: Any, fallback: float = 0.0) -> float:
    """Finite float value of ``value``, else ``fallback``."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def pick_base_key(base_f: Any) -> BaseKey:
    """
    Choose the published base-temperature bucket for a crop base (°F).

    Rounds down to the nearest bucket: <=40 -> "40", <=45 -> "45", else "50".
    Missing or non-numeric bases use 50°F.
    """
    base = safe_num(base_f, DEFAULT_BASE_F)
    if base <= 40:
        return "40"
    if base <= 45:
        return "45"
    return "50"


def _is_doy(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) \
        and 0 <= value <= LAST_DOY


def _usable(series: SeriesLike) -> Optional[CumulativeArray]:
    """First 365 values as floats, or None when the series is too short."""
    if series is None:
        return None
    if isinstance(series, np.ndarray):
        if series.ndim != 1 or series.shape[0] < DAYS_IN_YEAR:
            return None
        arr = series[:DAYS_IN_YEAR].astype(float, copy=False)
        return np.where(np.isfinite(arr), arr, 0.0)
    if isinstance(series, (list, tuple)) and len(series) >= DAYS_IN_YEAR:
        return np.array([safe_num(v) for v in series[:DAYS_IN_YEAR]], dtype=float)
    return None


# =============================================================================
# SERIES OPERATIONS
# =============================================================================

def start_total_before_doy(series: SeriesLike, planting_doy: DayOfYear) -> GDD:
    """Cumulative total accumulated strictly before ``planting_doy`` (0 on day 0)."""
    cum = _usable(series)
    if cum is None or not _is_doy(planting_doy):
        return 0.0
    return float(cum[planting_doy - 1]) if planting_doy > 0 else 0.0


def find_maturity_doy(series: SeriesLike, planting_doy: DayOfYear,
                      required_gdd: Any) -> Optional[DayOfYear]:
    """
    First day on or after planting whose accumulation since planting reaches
    ``required_gdd``. None when it is not reached before year end.
    """
    cum = _usable(series)
    if cum is None or not _is_doy(planting_doy):
        return None

    target = start_total_before_doy(cum, planting_doy) + safe_num(required_gdd)
    hits = np.flatnonzero(cum[planting_doy:] >= target)
    if hits.size == 0:
        return None
    return int(planting_doy + hits[0])


def available_gdd_before_frost(series: SeriesLike, planting_doy: DayOfYear,
                               frost_doy: Optional[DayOfYear]) -> int:
    """
    Degree days accumulated from planting through the first-frost day.

    Zero unless frost falls strictly after planting.
    """
    cum = _usable(series)
    if cum is None or not _is_doy(planting_doy) or not _is_doy(frost_doy):
        return 0
    if frost_doy <= planting_doy:
        return 0

    start = start_total_before_doy(cum, planting_doy)
    return max(0, round_half_away(float(cum[frost_doy]) - start))


def latest_planting_doy_to_mature_before_frost(series: SeriesLike,
                                               frost_doy: Optional[DayOfYear],
                                               required_gdd: Any) -> Optional[DayOfYear]:
    """
    Latest planting day that still accumulates ``required_gdd`` by first frost.

    Scans backward from the day before frost. A requirement of zero or less
    is invalid and never satisfiable here; returns None in that case and when
    no planting day works.
    """
    cum = _usable(series)
    if cum is None or not _is_doy(frost_doy):
        return None

    required = safe_num(required_gdd)
    if not required > 0:
        return None

    for planting_doy in range(frost_doy - 1, -1, -1):
        if available_gdd_before_frost(cum, planting_doy, frost_doy) >= required:
            return planting_doy
    return None


# =============================================================================
# RISK CLASSIFICATION
# =============================================================================

@dataclass(frozen=True)
class RiskAssessment:
    """Maturity-versus-frost classification for one crop"""
    tier: RiskTier
    label: str
    note: str

    @property
    def score(self) -> int:
        return int(self.tier)


RISK_COMFORTABLE = RiskAssessment(
    RiskTier.COMFORTABLE,
    "Likely to mature before typical frost",
    "In a typical year, maturity lands comfortably before first frost.",
)
RISK_AT_RISK = RiskAssessment(
    RiskTier.AT_RISK,
    "At risk in cooler seasons",
    "Maturity is close to first frost. A cool year can push you past frost.",
)
RISK_UNLIKELY = RiskAssessment(
    RiskTier.UNLIKELY,
    "Unlikely to mature before typical frost",
    "In a typical year, first frost arrives before maturity.",
)
RISK_UNKNOWN = RiskAssessment(
    RiskTier.UNLIKELY,
    "Unlikely to mature before typical frost",
    "Not enough data to compare maturity with first frost.",
)


def risk_label(maturity_doy: Optional[DayOfYear],
               frost_doy: Optional[DayOfYear]) -> RiskAssessment:
    """
    Three-tier classification by days between maturity and first frost.

    Comfortable with at least RISK_BUFFER_DAYS to spare, at risk when maturity
    lands inside that buffer, unlikely when maturity is on or after frost or
    either day is unknown.
    """
    if maturity_doy is None or frost_doy is None:
        return RISK_UNKNOWN

    margin = frost_doy - maturity_doy
    if margin >= RISK_BUFFER_DAYS:
        return RISK_COMFORTABLE
    if margin > 0:
        return RISK_AT_RISK
    return RISK_UNLIKELY


# =============================================================================
# PER-CROP ESTIMATE
# =============================================================================

@dataclass(frozen=True)
class CropEstimate:
    """Everything the plan reports for one crop"""
    planting_doy: DayOfYear
    frost_doy: Optional[DayOfYear]
    required_gdd: int
    maturity_doy: Optional[DayOfYear]
    available_gdd: int
    shortfall_gdd: int
    latest_safe_doy: Optional[DayOfYear]
    risk: RiskAssessment

    @property
    def days_to_maturity(self) -> Optional[int]:
        """Days from planting through maturity, counting both ends"""
        if self.maturity_doy is None:
            return None
        return self.maturity_doy - self.planting_doy + 1

    @property
    def matures_before_frost(self) -> bool:
        return (self.maturity_doy is not None and self.frost_doy is not None
                and self.maturity_doy < self.frost_doy)

    @property
    def planted_late(self) -> bool:
        """Planting falls after the latest safe planting day"""
        return self.latest_safe_doy is not None and self.planting_doy > self.latest_safe_doy


def estimate_crop(series: SeriesLike, required_gdd: Any, planting_doy: DayOfYear,
                  frost_doy: Optional[DayOfYear]) -> CropEstimate:
    """Run every estimator operation for one crop against one series."""
    required = round_half_away(safe_num(required_gdd))

    maturity_doy = find_maturity_doy(series, planting_doy, required)
    available = available_gdd_before_frost(series, planting_doy, frost_doy)
    shortfall = max(0, round_half_away(required - available))
    latest_safe = latest_planting_doy_to_mature_before_frost(series, frost_doy, required)

    estimate = CropEstimate(
        planting_doy=planting_doy,
        frost_doy=frost_doy,
        required_gdd=required,
        maturity_doy=maturity_doy,
        available_gdd=available,
        shortfall_gdd=shortfall,
        latest_safe_doy=latest_safe,
        risk=risk_label(maturity_doy, frost_doy),
    )
    logger.debug(
        f"Estimate: planting={planting_doy} frost={frost_doy} required={required} "
        f"maturity={maturity_doy} available={available} latest_safe={latest_safe}"
    )
    return estimate
