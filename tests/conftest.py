"""
Shared fixtures for the planner tests.

Datasets are served either from memory (``DictFetcher``) or written to a
site tree under ``tmp_path`` and read with ``LocalSiteFetcher``.
"""
import asyncio
import json
from pathlib import Path

import numpy as np
import pytest

from growbydate.core.config import set_config
from growbydate.core.exceptions import DataSourceError, ErrorContext
from growbydate.data.contracts import FrostRecord, StationSeries, ToolCrop
from growbydate.data.crops import CropCatalog


class DictFetcher:
    """In-memory JsonFetcher that counts calls per path."""

    def __init__(self, documents=None, errors=None):
        self.documents = dict(documents or {})
        self.errors = dict(errors or {})
        self.calls = {}

    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def fetch_json(self, path):
        self.calls[path] = self.calls.get(path, 0) + 1
        # Yield so concurrent callers overlap
        await asyncio.sleep(0)
        if path in self.errors:
            raise self.errors[path]
        if path not in self.documents:
            raise DataSourceError(f"Dataset not found: {path}", ErrorContext(operation="fetch_json"))
        return self.documents[path]


def linear_series(per_day: float = 10.0) -> np.ndarray:
    """cum[d] = per_day * (d + 1)"""
    return per_day * np.arange(1, 366, dtype=float)


FROST_ROWS = [
    {"key": "T5A", "name": "Edmonton", "region": "AB", "country": "CA",
     "lastFrost": "05-10", "firstFrost": "10-15", "sourceLabel": "ECCC normals"},
    {"key": "90210", "name": "Beverly Hills", "region": "CA", "country": "US",
     "lastFrost": "01-15", "firstFrost": "12-20"},
    {"key": 902, "name": "Los Angeles area", "region": "CA", "country": "US",
     "lastFrost": "01-20", "firstFrost": "12-10"},
    {"key": "55401", "name": "Minneapolis", "region": "MN", "country": "US",
     "lastFrost": "05-05", "firstFrost": "10-15"},
    {"key": "T6X", "name": "Edmonton South", "region": "AB", "country": "CA",
     "lastFrost": "05-12", "firstFrost": "10-10"},
]

STATION_INDEX = {
    "T5A": "CA001",
    "902": "USW902",
    "55401": "USW554",
    "99999": None,
}

SITE_CROPS = [
    {"id": "tomatoes", "slug": "tomatoes", "name": "Tomatoes", "relatedTools": ["gdd-planner"]},
    {"id": "corn-sweet", "slug": "sweet-corn", "name": "sweet corn",
     "relatedTools": ["gdd-planner", "frost-dates"]},
    {"id": "lettuce", "slug": "lettuce", "name": "Lettuce", "relatedTools": ["gdd-planner"]},
    {"id": "carrots", "slug": "carrots", "name": "Carrots", "relatedTools": ["frost-dates"]},
    {"slug": "no-id", "name": "Broken"},
]

GDD_CROPS = [
    {"slug": "tomato", "name": "Tomato", "base_f": 50, "gdd_required": 1000, "category": "fruiting"},
    {"slug": "corn-sweet", "name": "Sweet corn", "base_f": 50, "gdd_required": 2000},
    {"slug": "carrot", "name": "Carrot", "base_f": 40, "gdd_required": 900},
]


@pytest.fixture(autouse=True)
def reset_config():
    """Each test starts from a fresh configuration singleton"""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def series():
    return StationSeries(station_id="CA001", bases={"50": linear_series(10.0)})


@pytest.fixture
def frost():
    return FrostRecord.model_validate(FROST_ROWS[0])


@pytest.fixture
def tomato():
    return ToolCrop(site_id="tomatoes", slug="tomatoes", name="Tomatoes", gdd_slug="tomato",
                    base_f=50, gdd_required=1000)


@pytest.fixture
def sweet_corn():
    return ToolCrop(site_id="corn-sweet", slug="sweet-corn", name="Sweet corn",
                    gdd_slug="corn-sweet", base_f=50, gdd_required=2000)


@pytest.fixture
def site_documents():
    """Published datasets keyed by site path"""
    series_doc = {"bases": {"50": linear_series(10.0).tolist(),
                            "40": linear_series(15.0).tolist()}}
    return {
        "/assets/data/frost-dates.json": FROST_ROWS,
        "/assets/data/gdd-stations.json": STATION_INDEX,
        "/assets/data/gdd-stations/CA001.json": series_doc,
        "/assets/data/gdd-stations/USW902.json": series_doc,
    }


@pytest.fixture
def fetcher(site_documents):
    return DictFetcher(site_documents)


@pytest.fixture
def site_root(tmp_path: Path, site_documents) -> Path:
    """The same datasets written out as a built site"""
    for path, document in site_documents.items():
        target = tmp_path / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(document), encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_fetcher():
    """Factory for in-memory fetchers with custom documents / errors"""
    return DictFetcher


@pytest.fixture
def catalog():
    return CropCatalog(SITE_CROPS, GDD_CROPS)
