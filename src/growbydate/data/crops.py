"""
Crop catalog for the planners.

Site crop metadata and the GDD crop configuration are embedded in the page
as JSON rather than fetched. The catalog joins them by slug; a few site ids
are plural where the GDD slug is singular (``tomatoes`` -> ``tomato``).
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from growbydate.core.constants import (
    SITE_ID_TO_GDD_SLUG, CROP_ICONS, DEFAULT_CROP_ICON, GDD_TOOL_SLUG
)
from growbydate.data.contracts import SiteCrop, CropRequirement, ToolCrop

logger = logging.getLogger(__name__)


def load_embedded_json(text: Optional[str]) -> List[Any]:
    """Parse an embedded JSON list; anything unreadable is an empty list."""
    try:
        data = json.loads(text or "[]")
    except (TypeError, ValueError):
        logger.warning("Embedded crop data is not valid JSON")
        return []
    return data if isinstance(data, list) else []


def gdd_slug_for_site_id(site_id: str) -> str:
    return SITE_ID_TO_GDD_SLUG.get(site_id, site_id)


def crop_icon(slug: Optional[str]) -> str:
    return CROP_ICONS.get(slug or "", DEFAULT_CROP_ICON)


def _validate_all(model, rows: Iterable[Any], what: str) -> List[Any]:
    valid = []
    skipped = 0
    for row in rows or []:
        try:
            valid.append(model.model_validate(row))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning(f"Skipped {skipped} malformed {what} entries")
    return valid


class CropCatalog:
    """In-memory join of site crops and GDD requirements."""

    def __init__(self, site_crops: Iterable[Any], gdd_crops: Iterable[Any]):
        self.site_crops: List[SiteCrop] = _validate_all(SiteCrop, site_crops, "site crop")
        self.requirements: List[CropRequirement] = _validate_all(
            CropRequirement, gdd_crops, "GDD crop"
        )

        self.site_by_id: Dict[str, SiteCrop] = {}
        for crop in self.site_crops:
            if crop.id:
                self.site_by_id.setdefault(crop.id, crop)

        self.requirement_by_slug: Dict[str, CropRequirement] = {}
        for requirement in self.requirements:
            self.requirement_by_slug.setdefault(requirement.slug, requirement)

    @classmethod
    def from_embedded(cls, site_crops_json: Optional[str],
                      gdd_crops_json: Optional[str]) -> "CropCatalog":
        return cls(load_embedded_json(site_crops_json), load_embedded_json(gdd_crops_json))

    def tool_crops(self, tool_slug: str = GDD_TOOL_SLUG) -> List[ToolCrop]:
        """
        Site crops listed for ``tool_slug`` that have a GDD requirement,
        sorted by name (case-insensitive).
        """
        out: List[ToolCrop] = []
        for crop in self.site_crops:
            if not crop.id or tool_slug not in crop.related_tools:
                continue

            gdd_slug = gdd_slug_for_site_id(crop.id)
            requirement = self.requirement_by_slug.get(gdd_slug)
            if requirement is None:
                logger.debug(f"No GDD configuration for {crop.id} ({gdd_slug})")
                continue

            out.append(ToolCrop(
                site_id=crop.id,
                slug=crop.slug or crop.id,
                name=crop.name or requirement.name or crop.id,
                gdd_slug=gdd_slug,
                base_f=requirement.base_f,
                gdd_required=requirement.gdd_required,
                category=requirement.category,
            ))

        out.sort(key=lambda c: str(c.name).casefold())
        return out

    def crop_url(self, site_id: str, fallback_slug: Optional[str] = None) -> str:
        meta = self.site_by_id.get(site_id)
        slug = meta.slug if meta and meta.slug else (fallback_slug or site_id)
        return f"/crops/{slug}/"

    def tool_to_crops(self) -> Dict[str, List[Dict[str, str]]]:
        """Reverse map: tool slug -> [{slug, name}] sorted by name."""
        mapping: Dict[str, List[Dict[str, str]]] = {}
        for crop in self.site_crops:
            for tool_slug in crop.related_tools:
                mapping.setdefault(tool_slug, []).append({
                    "slug": crop.slug or crop.id,
                    "name": crop.name or crop.id,
                })
        for crops in mapping.values():
            crops.sort(key=lambda c: c["name"].casefold())
        return mapping
