"""
Tests for the crop catalog join.
"""
import json

import pytest

from growbydate.data.crops import (
    CropCatalog, load_embedded_json, gdd_slug_for_site_id, crop_icon
)


class TestEmbeddedJson:

    def test_parses_list(self):
        assert load_embedded_json('[{"id": "kale"}]') == [{"id": "kale"}]

    @pytest.mark.parametrize("text", [None, "", "not json", '{"id": "kale"}', "42"])
    def test_anything_else_is_empty(self, text):
        assert load_embedded_json(text) == []


class TestCropCatalog:

    def test_tool_crops_join_and_sort(self, catalog):
        crops = catalog.tool_crops("gdd-planner")

        # lettuce has no GDD config, carrots is not linked to the planner
        assert [c.site_id for c in crops] == ["corn-sweet", "tomatoes"]
        assert [c.name for c in crops] == ["sweet corn", "Tomatoes"]

        tomato = crops[1]
        assert tomato.gdd_slug == "tomato"
        assert tomato.gdd_required == 1000
        assert tomato.base_key == "50"
        assert tomato.slug == "tomatoes"

    def test_other_tool(self, catalog):
        crops = catalog.tool_crops("frost-dates")
        assert [c.site_id for c in crops] == ["carrots", "corn-sweet"]
        assert crops[0].base_key == "40"

    def test_malformed_site_crops_are_skipped(self, catalog):
        assert "no-id" not in {c.slug for c in catalog.site_crops}
        assert len(catalog.site_crops) == 4

    def test_from_embedded(self):
        site = json.dumps([{"id": "peppers", "name": "Peppers", "relatedTools": ["gdd-planner"]}])
        gdd = json.dumps([{"slug": "pepper", "base_f": 50, "gdd_required": 1300}])
        crops = CropCatalog.from_embedded(site, gdd).tool_crops()
        assert len(crops) == 1
        assert crops[0].gdd_slug == "pepper"
        assert crops[0].slug == "peppers"

    def test_from_embedded_garbage(self):
        catalog = CropCatalog.from_embedded("oops", None)
        assert catalog.tool_crops() == []

    def test_crop_url(self, catalog):
        assert catalog.crop_url("corn-sweet") == "/crops/sweet-corn/"
        assert catalog.crop_url("unknown", "okra") == "/crops/okra/"
        assert catalog.crop_url("unknown") == "/crops/unknown/"

    def test_tool_to_crops(self, catalog):
        mapping = catalog.tool_to_crops()
        assert [c["slug"] for c in mapping["frost-dates"]] == ["carrots", "sweet-corn"]
        assert [c["name"] for c in mapping["gdd-planner"]] == ["Lettuce", "sweet corn", "Tomatoes"]


class TestCropHelpers:

    def test_slug_aliases(self):
        assert gdd_slug_for_site_id("tomatoes") == "tomato"
        assert gdd_slug_for_site_id("beans") == "bean-bush"
        assert gdd_slug_for_site_id("okra") == "okra"

    def test_icons(self):
        assert crop_icon("tomato") == "🍅"
        assert crop_icon("okra") == "🌱"
        assert crop_icon(None) == "🌱"
