"""
GDD station index and per-station series accessors.

The station index maps location keys to station ids; each station has its
own JSON document of cumulative degree-day normals. Both are cached per
source for the session, failures included.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

from growbydate.core.constants import STATION_INDEX_PATH, STATION_SERIES_TEMPLATE
from growbydate.core.exceptions import DataSourceError, DataValidationError
from growbydate.core.types import JsonFetcher, LocationKey, LookupReason, StationID
from growbydate.data.contracts import StationSeries
from growbydate.data.keys import normalize_location_key, candidate_keys
from growbydate.data.sources.base import DatasetSource, PendingRequestCache


@dataclass(frozen=True)
class StationIndex:
    """Key -> station id, indexed by uppercase key"""
    stations: Dict[str, StationID] = field(default_factory=dict)
    load_failed: bool = False


@dataclass(frozen=True)
class StationLookupResult:
    """Detailed station lookup outcome"""
    key: LocationKey
    station_id: StationID
    reason: LookupReason

    @property
    def found(self) -> bool:
        return self.reason == LookupReason.OK


class StationIndexSource(DatasetSource):
    """Resolves a ZIP / postal code to the nearest GDD station."""

    DATASET_KEY = "gdd-stations"

    def __init__(self, fetcher: JsonFetcher, path: str = STATION_INDEX_PATH,
                 cache: Optional[PendingRequestCache] = None):
        super().__init__("station_index", fetcher, cache)
        self.path = path

    async def load_index(self) -> StationIndex:
        return await self.cache.get_or_load(self.DATASET_KEY, self._load)

    async def _load(self) -> StationIndex:
        try:
            payload = await self._fetch_payload(self.path)
        except DataSourceError as e:
            self.logger.warning(f"GDD station map unavailable: {e}")
            return StationIndex(load_failed=True)

        if not isinstance(payload, dict):
            self.logger.warning("GDD station map is not an object; treating as empty")
            return StationIndex()

        stations: Dict[str, StationID] = {}
        for key, station_id in payload.items():
            # Blank / null ids mean no coverage for that key
            if station_id in (None, "", 0, False):
                continue
            stations.setdefault(str(key).upper(), str(station_id))

        self.logger.info(f"Indexed {len(stations)} station keys")
        return StationIndex(stations=stations)

    async def lookup_detailed(self, raw_input: Optional[str]) -> StationLookupResult:
        """
        Resolve raw input to a station id.

        Reasons: ``empty`` (no usable input), ``map_load_failed`` (index could
        not be loaded), ``not_found`` (index loaded, key absent), ``ok``.
        """
        key = normalize_location_key(raw_input)
        if not key:
            return StationLookupResult(key="", station_id="", reason=LookupReason.EMPTY)

        index = await self.load_index()
        for candidate in candidate_keys(key):
            station_id = index.stations.get(candidate.upper())
            if station_id:
                return StationLookupResult(key=candidate, station_id=station_id,
                                           reason=LookupReason.OK)

        if index.load_failed:
            return StationLookupResult(key=key, station_id="", reason=LookupReason.MAP_LOAD_FAILED)
        return StationLookupResult(key=key, station_id="", reason=LookupReason.NOT_FOUND)

    async def lookup_station_id(self, raw_input: Optional[str]) -> StationID:
        result = await self.lookup_detailed(raw_input)
        return result.station_id


class StationSeriesSource(DatasetSource):
    """Loads and validates per-station cumulative degree-day series."""

    def __init__(self, fetcher: JsonFetcher, path_template: str = STATION_SERIES_TEMPLATE,
                 cache: Optional[PendingRequestCache] = None):
        super().__init__("station_series", fetcher, cache)
        self.path_template = path_template

    def path_for(self, station_id: StationID) -> str:
        return self.path_template.format(station_id=quote(station_id, safe=""))

    async def load(self, station_id: Optional[StationID]) -> Optional[StationSeries]:
        """
        Series for ``station_id``, or None when missing or malformed.

        The result (None included) is cached per station.
        """
        sid = str(station_id or "").strip()
        if not sid:
            return None
        return await self.cache.get_or_load(sid, lambda: self._load(sid))

    async def _load(self, station_id: StationID) -> Optional[StationSeries]:
        try:
            payload = await self._fetch_payload(self.path_for(station_id))
        except DataSourceError as e:
            self.logger.warning(f"Missing station series for {station_id}: {e}")
            return None

        try:
            return StationSeries.from_payload(station_id, payload)
        except DataValidationError as e:
            self.logger.warning(f"Rejected station series: {e}")
            return None

    def get_metadata(self) -> Dict[str, Any]:
        metadata = super().get_metadata()
        metadata["path_template"] = self.path_template
        return metadata
