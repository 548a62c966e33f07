"""CSV rendering for audit exports."""

import csv
import io
from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence

EXPORT_COLUMNS = (
    "occurred_at",
    "event_type",
    "subject_user_id",
    "attempted_user_id",
    "succeeded",
    "source_ip",
    "user_agent",
    "error_message",
    "risk_score",
    "description",
)


def format_csv_value(value: Any) -> str:
    """Text for one cell before quoting"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def render_csv(
    rows: Iterable[Mapping[str, Any]], columns: Sequence[str] = EXPORT_COLUMNS
) -> str:
    """
    Render a header row plus one line per row, joined with newlines.

    Cells holding a comma, quote or newline are quoted with embedded quotes
    doubled; everything else is written bare.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_csv_value(row.get(col)) for col in columns])

    content = output.getvalue()
    # No terminator after the last line
    return content[:-1] if content.endswith("\n") else content
