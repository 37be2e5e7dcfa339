"""
Calendar constants, dataset defaults, and system-wide constants.
"""
from typing import Dict, Final, Tuple, List

# Calendar (fixed non-leap year; climate normals are year-independent)
DAYS_IN_YEAR: Final[int] = 365
DAYS_IN_MONTH: Final[Tuple[int, ...]] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
MONTH_NAMES: Final[Tuple[str, ...]] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
LAST_DOY: Final[int] = DAYS_IN_YEAR - 1

# Base temperature buckets (°F) published per station
BASE_KEYS: Final[Tuple[str, ...]] = ("40", "45", "50")
DEFAULT_BASE_F: Final[float] = 50.0

# Days of slack before first frost that still count as comfortable
RISK_BUFFER_DAYS: Final[int] = 14

# Published dataset locations (relative to the site root)
FROST_DATASET_PATH: Final[str] = "/assets/data/frost-dates.json"
STATION_INDEX_PATH: Final[str] = "/assets/data/gdd-stations.json"
STATION_SERIES_TEMPLATE: Final[str] = "/assets/data/gdd-stations/{station_id}.json"

GDD_TOOL_SLUG: Final[str] = "gdd-planner"

# Site crop ids that differ from the GDD configuration slug
SITE_ID_TO_GDD_SLUG: Final[Dict[str, str]] = {
    "tomatoes": "tomato",
    "peppers": "pepper",
    "carrots": "carrot",
    "beets": "beet",
    "onions": "onion",
    "peas": "pea",
    "beans": "bean-bush",
}

DEFAULT_CROP_ICON: Final[str] = "🌱"
CROP_ICONS: Final[Dict[str, str]] = {
    "tomato": "🍅",
    "tomatoes": "🍅",
    "pepper": "🫑",
    "peppers": "🫑",
    "eggplant": "🍆",
    "cucumber": "🥒",
    "zucchini": "🥒",
    "winter-squash": "🎃",
    "squash": "🎃",
    "pumpkin": "🎃",
    "corn-sweet": "🌽",
    "corn": "🌽",
    "bean-bush": "🫘",
    "beans": "🫘",
    "bean": "🫘",
    "pea": "🫛",
    "peas": "🫛",
    "carrot": "🥕",
    "carrots": "🥕",
    "beet": "🫜",
    "beets": "🫜",
    "potato": "🥔",
    "onion": "🧅",
    "onions": "🧅",
    "garlic": "🧄",
    "broccoli": "🥦",
    "cauliflower": "🥦",
    "cabbage": "🥬",
    "lettuce": "🥬",
    "spinach": "🍃",
    "kale": "🥬",
    "radish": "🌱",
    "turnip": "🌱",
    "melon": "🍈",
    "watermelon": "🍉",
    "strawberry": "🍓",
    "sunflower": "🌻",
    "basil": "🌿",
    "herb": "🌿",
}

# Report / export
REPORT_TITLE: Final[str] = "GrowByDate — GDD maturity estimate (typical year)"
CSV_COLUMNS: Final[List[str]] = ["Crop", "Field", "Value", "Notes"]
CLIMATE_NORMALS_NOTE: Final[str] = (
    "This is based on climate normals. A warm year can mature faster; "
    "a cool year can slip later."
)
LATE_PLANT_NOTE: Final[str] = (
    "You’re planting after the typical “latest safe” date "
    "for at least one selected crop. "
)

# Plan row labels
ROW_LABELS: Final[Dict[str, str]] = {
    "maturity": "Estimated maturity date",
    "days": "Days from planting",
    "target": "GDD target",
    "available": "Available GDD before typical first frost",
    "shortfall": "Estimated shortfall by frost",
    "latest_safe": "Latest typical planting date to mature before frost",
    "assessment": "Assessment",
}
NOT_REACHED_LABEL: Final[str] = "Not reached before year-end in a typical year"
NOT_POSSIBLE_LABEL: Final[str] = "Not possible in a typical year"

# User-facing messages for the planner run
RUN_MESSAGES: Final[Dict[str, str]] = {
    "no_crops": "Select at least one crop to estimate.",
    "invalid_date": "Choose a valid planting date.",
    "empty_location": (
        "Enter a 5-digit ZIP (U.S.) or the first 3 characters of your "
        "postal code (e.g., T5A)."
    ),
    "frost_not_found": (
        "No match found for that ZIP / postal code. Try a nearby ZIP (U.S.) "
        "or FSA (Canada)."
    ),
    "frost_unavailable": "We couldn’t load frost date data. Please try again.",
    "no_station_coverage": "GDD station coverage isn’t available for this location yet.",
    "station_map_unavailable": "We couldn’t load GDD station data. Please try again.",
    "series_missing": "Station series file not found for this location.",
    "failed": (
        "Something didn’t load correctly. Please try again, or try a nearby "
        "ZIP / postal code."
    ),
}
