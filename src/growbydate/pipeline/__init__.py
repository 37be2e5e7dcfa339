"""
GrowByDate Pipeline Module.

Plan aggregation, exports, and the planner run.
"""

__all__ = [
    "GddPlanner",
    "PlanRequest",
    "PlanOutcome",
]


def __getattr__(name):
    """Lazy import so plan / export helpers load without the dataset sources."""
    if name in ("GddPlanner", "PlanRequest", "PlanOutcome"):
        from growbydate.pipeline import planner
        return getattr(planner, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
