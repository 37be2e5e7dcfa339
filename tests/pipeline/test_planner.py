"""
Tests for the planner run: validation order, lookup failures and the
successful path.
"""
import pytest

from growbydate.core.config import GrowByDateConfig, DataConfig, PlannerConfig
from growbydate.core.constants import RUN_MESSAGES
from growbydate.core.types import RunStatus
from growbydate.data.sources import LocalSiteFetcher
from growbydate.pipeline.planner import GddPlanner, PlanRequest, PlanOutcome

# Mark all tests in this module as asyncio
pytestmark = pytest.mark.asyncio

FROST_PATH = "/assets/data/frost-dates.json"
INDEX_PATH = "/assets/data/gdd-stations.json"


@pytest.fixture
def config():
    return GrowByDateConfig(planner=PlannerConfig(report_title="Test report"))


@pytest.fixture
def planner(catalog, config, fetcher):
    return GddPlanner.from_config(catalog, config, fetcher)


def plan_request(location="T5A 0A1", planting_date="2024-05-01", crop_ids=("tomatoes",)):
    return PlanRequest(location=location, planting_date=planting_date, crop_ids=crop_ids)


class TestValidation:

    async def test_no_crops(self, planner, fetcher):
        outcome = await planner.run(plan_request(crop_ids=()))
        assert outcome.status == RunStatus.NO_CROPS
        assert outcome.message == RUN_MESSAGES["no_crops"]
        assert fetcher.total_calls() == 0

    async def test_unknown_crops_only(self, planner):
        outcome = await planner.run(plan_request(crop_ids=("okra", "lettuce")))
        assert outcome.status == RunStatus.NO_CROPS

    async def test_crops_checked_before_date(self, planner):
        outcome = await planner.run(plan_request(planting_date="", crop_ids=()))
        assert outcome.status == RunStatus.NO_CROPS

    @pytest.mark.parametrize("planting_date", [None, "", "2024-13-01", "soon"])
    async def test_invalid_date(self, planner, planting_date):
        outcome = await planner.run(plan_request(planting_date=planting_date))
        assert outcome.status == RunStatus.INVALID_DATE
        assert outcome.message == RUN_MESSAGES["invalid_date"]

    @pytest.mark.parametrize("location", [None, "", "   ", "--"])
    async def test_empty_location(self, planner, location):
        outcome = await planner.run(plan_request(location=location))
        assert outcome.status == RunStatus.EMPTY_LOCATION
        assert not outcome.ok


class TestLookups:

    async def test_frost_not_found(self, planner):
        outcome = await planner.run(plan_request(location="10001"))
        assert outcome.status == RunStatus.FROST_NOT_FOUND
        assert outcome.frost is None

    async def test_frost_unavailable(self, catalog, config, site_documents, make_fetcher):
        del site_documents[FROST_PATH]
        planner = GddPlanner.from_config(catalog, config, make_fetcher(site_documents))
        outcome = await planner.run(plan_request())
        assert outcome.status == RunStatus.FROST_UNAVAILABLE
        assert outcome.message == RUN_MESSAGES["frost_unavailable"]

    async def test_no_station_coverage(self, planner):
        outcome = await planner.run(plan_request(location="T6X"))
        assert outcome.status == RunStatus.NO_STATION_COVERAGE
        assert outcome.frost.name == "Edmonton South"

    async def test_station_map_unavailable(self, catalog, config, site_documents, make_fetcher):
        del site_documents[INDEX_PATH]
        planner = GddPlanner.from_config(catalog, config, make_fetcher(site_documents))
        outcome = await planner.run(plan_request())
        assert outcome.status == RunStatus.STATION_MAP_UNAVAILABLE
        assert outcome.frost.key == "T5A"

    async def test_series_missing(self, planner):
        outcome = await planner.run(plan_request(location="55401"))
        assert outcome.status == RunStatus.SERIES_MISSING
        assert outcome.station_id == "USW554"

    async def test_unexpected_error_is_reported(self, catalog, config, site_documents, make_fetcher):
        fetcher = make_fetcher(site_documents, errors={FROST_PATH: RuntimeError("disk on fire")})
        planner = GddPlanner.from_config(catalog, config, fetcher)
        outcome = await planner.run(plan_request())
        assert outcome.status == RunStatus.FAILED
        assert outcome.message == RUN_MESSAGES["failed"]


class TestRun:

    async def test_plan(self, planner):
        outcome = await planner.run(plan_request(crop_ids=("tomatoes", "corn-sweet")))

        assert outcome.ok
        assert outcome.message == ""
        assert outcome.station_id == "CA001"
        assert outcome.frost.first_frost == "10-15"

        plan = outcome.plan
        assert [c.crop.site_id for c in plan.crops] == ["tomatoes", "corn-sweet"]
        assert plan.meta.planting_label == "May 1"
        assert plan.summary_label.startswith("Overall: ")

    async def test_datasets_fetched_once_per_session(self, planner, fetcher):
        await planner.run(plan_request())
        await planner.run(plan_request(location="t5a"))
        await planner.run(plan_request(location="90210"))

        assert fetcher.calls[FROST_PATH] == 1
        assert fetcher.calls[INDEX_PATH] == 1
        assert fetcher.calls["/assets/data/gdd-stations/CA001.json"] == 1

    async def test_zip3_station_fallback(self, planner):
        outcome = await planner.run(plan_request(location="90210"))
        assert outcome.ok
        assert outcome.frost.name == "Beverly Hills"
        assert outcome.station_id == "USW902"

    async def test_exports(self, planner):
        outcome = await planner.run(plan_request())
        text = planner.export_text(outcome.plan)
        csv_text = planner.export_csv(outcome.plan)

        assert text.startswith("Test report\n")
        assert "Tomatoes (tomato)" in text
        assert csv_text.startswith("Crop,Field,Value,Notes\n")

        files = planner.export_files(outcome.plan)
        assert files == {
            "growbydate-gdd-results.txt": text,
            "growbydate-gdd-results.csv": csv_text,
        }

    async def test_offered_crops(self, planner):
        assert [c.site_id for c in planner.crops] == ["corn-sweet", "tomatoes"]

    async def test_outcome_of(self):
        outcome = PlanOutcome.of(RunStatus.SERIES_MISSING, station_id="X")
        assert outcome.message == RUN_MESSAGES["series_missing"]
        assert outcome.station_id == "X"


@pytest.mark.integration
class TestSiteTree:

    async def test_run_against_built_site(self, catalog, site_root):
        config = GrowByDateConfig(data=DataConfig(site_root=site_root))
        planner = GddPlanner.from_config(catalog, config)

        assert isinstance(planner.frost_source.fetcher, LocalSiteFetcher)
        outcome = await planner.run(plan_request(location="t5a", crop_ids=("corn-sweet",)))

        assert outcome.ok
        assert outcome.plan.worst_risk.label.startswith("Unlikely")
