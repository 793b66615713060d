from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from app.core.config import settings
from app.schemas.collection import ExportPayload
from app.services.collection_errors import InvalidQueryError
from app.services.record_paths import get_path, serialize_value, value_to_text

EXPORT_FORMATS = {
    "csv": "text/csv",
    "json": "application/json",
}
CSV_LINE_END = "\r\n"


def escape_csv_value(text: str) -> str:
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def default_columns(records: Sequence[dict[str, Any]]) -> list[str]:
    keys: set[str] = set()
    for record in records:
        keys.update(str(key) for key in record.keys())
    return sorted(keys)


def records_to_csv(records: Sequence[dict[str, Any]], columns: Sequence[str] | None = None) -> str:
    header = list(columns) if columns else default_columns(records)
    if not header:
        return ""
    lines = [",".join(escape_csv_value(name) for name in header)]
    for record in records:
        lines.append(",".join(escape_csv_value(value_to_text(get_path(record, name))) for name in header))
    return CSV_LINE_END.join(lines) + CSV_LINE_END


def records_to_json(records: Sequence[dict[str, Any]]) -> str:
    return json.dumps(serialize_value(list(records)), indent=settings.EXPORT_JSON_INDENT, ensure_ascii=False)


def export_filename(resource: str, extension: str, now: datetime | None = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return f"{resource}-{moment.date().isoformat()}.{extension}"


def export_records(
    records: Sequence[dict[str, Any]],
    fmt: str,
    *,
    resource: str,
    columns: Sequence[str] | None = None,
    now: datetime | None = None,
) -> ExportPayload:
    normalized = str(fmt or "").strip().lower()
    if normalized not in EXPORT_FORMATS:
        raise InvalidQueryError("format", f"expected one of {sorted(EXPORT_FORMATS)}, got {fmt!r}")
    items = list(records)
    if normalized == "csv":
        body = records_to_csv(items, columns)
    else:
        body = records_to_json(items)
    return ExportPayload(
        data=body,
        mime_type=EXPORT_FORMATS[normalized],
        filename=export_filename(resource, normalized, now),
        total_records=len(items),
    )
