from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Iterable

from app.schemas.collection import SortSpec
from app.services.record_paths import MISSING, get_path, value_to_text

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?)?(Z|[+-]\d{2}:?\d{2})?$")
_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_iso_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or not _ISO_DATE_RE.match(text):
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_number(value: Any) -> int | float | Decimal | None:
    # ints and numeric strings stay exact; floats are only used for float input
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INT_RE.match(text):
            return int(text)
        if _NUMBER_RE.match(text):
            return Decimal(text)
    return None


def _sign(left: Any, right: Any) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def compare_values(left: Any, right: Any) -> int:
    left_dt, right_dt = parse_iso_datetime(left), parse_iso_datetime(right)
    if left_dt is not None and right_dt is not None:
        return _sign(left_dt, right_dt)
    left_num, right_num = parse_number(left), parse_number(right)
    if left_num is not None and right_num is not None:
        return _sign(left_num, right_num)
    return _sign(value_to_text(left).lower(), value_to_text(right).lower())


def _is_missing(value: Any) -> bool:
    return value is MISSING or value is None


def sort_records(records: Iterable[dict[str, Any]], spec: SortSpec | None) -> list[dict[str, Any]]:
    items = list(records)
    if spec is None or not spec.field:
        return items
    descending = spec.direction == "desc"

    def _compare(left: dict[str, Any], right: dict[str, Any]) -> int:
        left_value = get_path(left, spec.field)
        right_value = get_path(right, spec.field)
        left_missing, right_missing = _is_missing(left_value), _is_missing(right_value)
        if left_missing and right_missing:
            result = 0
        elif left_missing:
            result = 1
        elif right_missing:
            result = -1
        else:
            result = compare_values(left_value, right_value)
        return -result if descending else result

    # sorted() is stable, so equal keys keep their input order in both directions.
    return sorted(items, key=cmp_to_key(_compare))
