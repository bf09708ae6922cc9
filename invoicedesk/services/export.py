"""
CSV and JSON export of list records.
"""

import csv
import io
import json
from typing import Any, Iterable, Literal, Mapping

from fastapi import Response


ExportFormat = Literal["csv", "json"]

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}


def resolve_path(record: Any, path: str) -> Any:
    """
    Look up a dot-separated key path (``shipping.city``) in nested mappings.

    Returns None as soon as a segment is missing.
    """
    value = record
    for key in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(key)
        else:
            value = getattr(value, key, None)
        if value is None:
            return None
    return value


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def to_csv(records: Iterable[Any], headers: Mapping[str, str]) -> str:
    """
    Render records as CSV.

    Args:
        records: Mappings (or objects) to export
        headers: Ordered key path -> column label

    Returns:
        CSV text with a label row first; fields containing commas, quotes or
        newlines are quoted with inner quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers.values())
    for record in records:
        writer.writerow(_cell(resolve_path(record, path)) for path in headers)
    return buffer.getvalue()


def to_json(records: Iterable[Any]) -> str:
    """Pretty-printed JSON array of the full records."""
    return json.dumps(list(records), indent=2, default=str, ensure_ascii=False)


def export_response(
    entity: str,
    records: list[dict[str, Any]],
    headers: Mapping[str, str],
    fmt: ExportFormat = "csv",
) -> Response:
    """Build a downloadable ``<entity>-export.<fmt>`` response."""
    content = to_csv(records, headers) if fmt == "csv" else to_json(records)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{entity}-export.{fmt}"'},
    )
