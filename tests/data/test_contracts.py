"""
Tests for the dataset contracts.
"""
import numpy as np
import pytest
from pydantic import ValidationError

from growbydate.core.exceptions import DataValidationError
from growbydate.data.contracts import FrostRecord, SiteCrop, CropRequirement, StationSeries


class TestFrostRecord:

    def test_aliases_and_labels(self):
        record = FrostRecord.model_validate({
            "key": "T5A", "name": "Edmonton", "region": "AB",
            "lastFrost": "05-10", "firstFrost": "10-15",
        })
        assert record.last_frost == "05-10"
        assert record.location_label == "Edmonton, AB"
        assert record.first_frost_label == "October 15"
        assert record.last_frost_label == "May 10"
        assert record.first_frost_doy == 287

    def test_numeric_key_is_coerced(self):
        record = FrostRecord.model_validate({"key": 902})
        assert record.key == "902"

    def test_numeric_labels_are_coerced(self):
        record = FrostRecord.model_validate({"key": "T5A", "name": 1234, "region": 48,
                                             "country": 1.5, "firstFrost": "10-15"})
        assert record.region == "48"
        assert record.location_label == "1234, 48"
        assert record.country == "1.5"

    def test_missing_key_is_rejected(self):
        with pytest.raises(ValidationError):
            FrostRecord.model_validate({"key": None, "firstFrost": "10-15"})

    def test_partial_label_and_bad_date(self):
        record = FrostRecord.model_validate({"key": "1", "region": "MN", "firstFrost": "late"})
        assert record.location_label == "MN"
        assert record.first_frost_label == "late"
        assert record.first_frost_doy is None


class TestCropModels:

    def test_related_tools_must_be_a_list(self):
        crop = SiteCrop.model_validate({"id": "kale", "relatedTools": "gdd-planner"})
        assert crop.related_tools == []

    @pytest.mark.parametrize("base_f, key", [
        (32, "40"), (40, "40"), (41, "45"), (45, "45"), (45.5, "50"), (86, "50"), (None, "50"),
    ])
    def test_base_key(self, base_f, key):
        assert CropRequirement(slug="x", base_f=base_f).base_key == key


class TestStationSeries:

    def test_from_payload_keeps_list_bases_only(self):
        series = StationSeries.from_payload("USW1", {
            "bases": {"50": list(range(365)), "45": None, "40": "not-a-list"},
        })
        assert set(series.bases) == {"50"}
        assert series.for_base("50")[364] == 364
        assert series.for_base("45") is None

    def test_non_numeric_entries_read_as_zero(self):
        series = StationSeries.from_payload("USW1", {"bases": {"40": ["12", None, "x", float("nan"), 7]}})
        np.testing.assert_array_equal(series.for_base("40"), [12.0, 0.0, 0.0, 0.0, 7.0])

    def test_series_is_read_only(self):
        series = StationSeries.from_payload("USW1", {"bases": {"50": [1, 2, 3]}})
        with pytest.raises(ValueError):
            series.for_base("50")[0] = 10

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {},
        {"bases": []},
        {"bases": {"60": [1, 2]}},
        {"bases": {"40": None, "45": None, "50": None}},
        {"bases": {"50": 0}},
        {"bases": {"50": "1,2,3", "45": {"0": 1}}},
    ])
    def test_rejects_unusable_payloads(self, payload):
        with pytest.raises(DataValidationError):
            StationSeries.from_payload("USW1", payload)
