"""
GrowByDate Data Package.

Provides data contracts, location keys, the crop catalog and dataset sources.
"""

from growbydate.data.contracts import (
    FrostRecord,
    SiteCrop,
    CropRequirement,
    ToolCrop,
    StationSeries,
)
from growbydate.data.keys import normalize_location_key, candidate_keys

__all__ = [
    "FrostRecord",
    "SiteCrop",
    "CropRequirement",
    "ToolCrop",
    "StationSeries",
    "normalize_location_key",
    "candidate_keys",
]
