"""
Plain-text and CSV exports of a plan.

Both formats are rendered from the plan's row list; nothing is re-estimated.
"""
import io
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from growbydate.core.constants import CSV_COLUMNS, REPORT_TITLE
from growbydate.core.types import PlanRowType
from growbydate.pipeline.plan import Plan


def build_text_plan(plan: Plan, title: Optional[str] = None) -> str:
    """Human-readable report, one line per row."""
    meta = plan.meta
    lines = [title or REPORT_TITLE, " "]
    if meta.location:
        lines.append(f"Location: {meta.location}")
    if meta.station_id:
        lines.append(f"GDD station: {meta.station_id} (Base {meta.base_key}°F)")
    if meta.planting_label:
        lines.append(f"Planting date: {meta.planting_label}")
    if meta.first_frost_label:
        lines.append(f"Average first fall frost: {meta.first_frost_label}")
    lines.append(" ")

    for row in plan.rows:
        if row.type == PlanRowType.CROP_HEADER:
            lines.append(f"{row.crop_name} ({row.slug})")
        elif row.type == PlanRowType.ROW:
            notes = f" ({row.notes})" if row.notes else ""
            lines.append(f"- {row.key}: {row.value}{notes}")

    return "\n".join(lines)


def plan_to_frame(plan: Plan) -> pd.DataFrame:
    """Detail rows as a Crop / Field / Value / Notes table."""
    records = []
    current_crop = ""
    for row in plan.rows:
        if row.type == PlanRowType.CROP_HEADER:
            current_crop = row.crop_name
            continue
        records.append([current_crop, row.key, row.value, row.notes or ""])
    return pd.DataFrame(records, columns=CSV_COLUMNS, dtype=str)


_NEEDS_QUOTES = re.compile(r'[",\n\r]')


def escape_csv_field(value: Any) -> str:
    """Quote a field containing a comma, quote, CR or LF; embedded quotes are doubled."""
    s = "" if value is None else str(value)
    if _NEEDS_QUOTES.search(s):
        return '"' + s.replace('"', '""') + '"'
    return s


def build_csv(plan: Plan) -> str:
    """
    CSV export with a ``Crop,Field,Value,Notes`` header, one record per
    newline-terminated line. Fields holding a comma, quote, CR or LF are quoted.
    """
    frame = plan_to_frame(plan)
    lines = [",".join(escape_csv_field(c) for c in frame.columns)]
    for record in frame.itertuples(index=False, name=None):
        lines.append(",".join(escape_csv_field(v) for v in record))
    return "\n".join(lines) + "\n"


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Read a CSV export back into row dicts keyed by column name."""
    frame = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    return frame.to_dict(orient="records")
