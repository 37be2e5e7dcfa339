"""
GrowByDate planner core.

Growing-degree-day maturity estimates from published climate normals:
location lookup (ZIP / FSA), frost dates, GDD station series, per-crop
maturity and frost-risk estimates, and plain-text / CSV plan exports.
"""

__version__ = "0.1.0"

from growbydate.data.keys import normalize_location_key
from growbydate.data.crops import CropCatalog
from growbydate.pipeline.planner import GddPlanner, PlanRequest, PlanOutcome
from growbydate.pipeline.export import build_text_plan, build_csv

__all__ = [
    "normalize_location_key",
    "CropCatalog",
    "GddPlanner",
    "PlanRequest",
    "PlanOutcome",
    "build_text_plan",
    "build_csv",
]
