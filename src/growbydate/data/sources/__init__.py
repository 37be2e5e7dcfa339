"""
GrowByDate Data Sources Package.

Accessors for the static JSON datasets published with the site.

Data Sources:
-------------
- Frost dates: average last spring / first fall frost by ZIP or FSA
- GDD station index: location key -> station id
- GDD station series: cumulative degree-day normals per base temperature

Usage:
------
>>> from growbydate.data.sources import LocalSiteFetcher, FrostDatasetSource
>>> frost = FrostDatasetSource(LocalSiteFetcher("./_site"))
>>> record = await frost.lookup("T5A 0A1")
"""

from growbydate.data.sources.base import (
    DatasetSource,
    PendingRequestCache,
    LocalSiteFetcher,
    HttpSiteFetcher,
    create_fetcher,
)
from growbydate.data.sources.frost import (
    FrostDatasetSource,
    FrostLookupResult,
)
from growbydate.data.sources.stations import (
    StationIndexSource,
    StationSeriesSource,
    StationLookupResult,
)

__all__ = [
    "DatasetSource",
    "PendingRequestCache",
    "LocalSiteFetcher",
    "HttpSiteFetcher",
    "create_fetcher",
    "FrostDatasetSource",
    "FrostLookupResult",
    "StationIndexSource",
    "StationSeriesSource",
    "StationLookupResult",
]
