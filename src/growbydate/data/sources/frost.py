"""
Frost-date dataset accessor.

The dataset is a JSON array of climate-normal frost records keyed by ZIP5,
ZIP3 or Canadian FSA. It is loaded at most once per source; a failed load is
cached as an empty dataset and never retried.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from growbydate.core.constants import FROST_DATASET_PATH
from growbydate.core.exceptions import DataSourceError
from growbydate.core.types import JsonFetcher, LocationKey, LookupReason
from growbydate.data.contracts import FrostRecord
from growbydate.data.keys import normalize_location_key, candidate_keys
from growbydate.data.sources.base import DatasetSource, PendingRequestCache


@dataclass(frozen=True)
class FrostDataset:
    """Loaded frost records indexed by uppercase key"""
    records: Tuple[FrostRecord, ...] = ()
    by_key: Dict[str, FrostRecord] = field(default_factory=dict)
    load_failed: bool = False


@dataclass(frozen=True)
class FrostLookupResult:
    """Detailed frost lookup outcome"""
    key: LocationKey
    record: Optional[FrostRecord]
    reason: LookupReason

    @property
    def found(self) -> bool:
        return self.reason == LookupReason.OK


class FrostDatasetSource(DatasetSource):
    """Looks up average first/last frost dates by ZIP or postal code."""

    DATASET_KEY = "frost-dates"

    def __init__(self, fetcher: JsonFetcher, path: str = FROST_DATASET_PATH,
                 cache: Optional[PendingRequestCache] = None):
        super().__init__("frost", fetcher, cache)
        self.path = path

    async def load_dataset(self) -> FrostDataset:
        return await self.cache.get_or_load(self.DATASET_KEY, self._load)

    async def _load(self) -> FrostDataset:
        try:
            payload = await self._fetch_payload(self.path)
        except DataSourceError as e:
            self.logger.warning(f"Frost dataset unavailable: {e}")
            return FrostDataset(load_failed=True)
        return self._build(payload)

    def _build(self, payload: Any) -> FrostDataset:
        if not isinstance(payload, list):
            self.logger.warning("Frost dataset is not an array; treating as empty")
            return FrostDataset()

        records: List[FrostRecord] = []
        skipped = 0
        for row in payload:
            try:
                records.append(FrostRecord.model_validate(row))
            except ValidationError:
                skipped += 1

        if skipped:
            self.logger.warning(f"Skipped {skipped} malformed frost rows")

        by_key: Dict[str, FrostRecord] = {}
        for record in records:
            by_key.setdefault(record.key.upper(), record)

        self.logger.info(f"Indexed {len(by_key)} frost keys")
        return FrostDataset(records=tuple(records), by_key=by_key)

    async def lookup_detailed(self, raw_input: Optional[str]) -> FrostLookupResult:
        """
        Resolve raw ZIP / postal input to a frost record.

        Tries the exact key, then the ZIP3 prefix. Distinguishes a dataset
        that failed to load from a key that is not present.
        """
        key = normalize_location_key(raw_input)
        if not key:
            return FrostLookupResult(key="", record=None, reason=LookupReason.EMPTY)

        dataset = await self.load_dataset()
        for candidate in candidate_keys(key):
            record = dataset.by_key.get(candidate.upper())
            if record is not None:
                return FrostLookupResult(key=candidate, record=record, reason=LookupReason.OK)

        if dataset.load_failed:
            return FrostLookupResult(key=key, record=None, reason=LookupReason.MAP_LOAD_FAILED)
        return FrostLookupResult(key=key, record=None, reason=LookupReason.NOT_FOUND)

    async def lookup(self, raw_input: Optional[str]) -> Optional[FrostRecord]:
        result = await self.lookup_detailed(raw_input)
        return result.record
