from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Sequence

from app.schemas.collection import StatsResult
from app.services.record_paths import get_path, value_to_text
from app.services.record_sort import parse_iso_datetime, parse_number

UNKNOWN_BUCKET = "unknown"
GROUP_KEY_SEPARATOR = "|"
_KEY_ESCAPE = "\\"


def _bucket(record: dict[str, Any], path: str) -> str:
    text = value_to_text(get_path(record, path)).strip()
    return text or UNKNOWN_BUCKET


def _escape_key_part(text: str) -> str:
    return text.replace(_KEY_ESCAPE, _KEY_ESCAPE * 2).replace(GROUP_KEY_SEPARATOR, _KEY_ESCAPE + GROUP_KEY_SEPARATOR)


def group_key(record: dict[str, Any], group_fields: Sequence[str]) -> str:
    if not group_fields:
        return "all"
    if len(group_fields) == 1:
        return _bucket(record, group_fields[0])
    # separators inside a value are escaped so distinct groups never share a key
    return GROUP_KEY_SEPARATOR.join(_escape_key_part(_bucket(record, path)) for path in group_fields)


def count_by(records: Iterable[dict[str, Any]], group_fields: Sequence[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        key = group_key(record, group_fields)
        counts[key] = counts.get(key, 0) + 1
    return counts


def aggregate_stats(
    records: Iterable[dict[str, Any]],
    group_fields: Sequence[str],
    derived: Mapping[str, Callable[[list[dict[str, Any]]], Any]] | None = None,
    breakdown_fields: Sequence[str] | None = None,
) -> StatsResult:
    items = list(records)
    summary: dict[str, Any] = {"total": len(items)}
    for name, compute in (derived or {}).items():
        summary[name] = compute(items)
    by_field = {path: count_by(items, [path]) for path in (breakdown_fields or ())}
    return StatsResult(summary=summary, by_group=count_by(items, group_fields), by_field=by_field)


# Builders for resource-specific derived totals.


def count_where(path: str, expected: Any) -> Callable[[list[dict[str, Any]]], int]:
    def _compute(items: list[dict[str, Any]]) -> int:
        return sum(1 for item in items if get_path(item, path, None) == expected)

    return _compute


def sum_of(path: str) -> Callable[[list[dict[str, Any]]], float]:
    def _compute(items: list[dict[str, Any]]) -> float:
        total = 0.0
        for item in items:
            value = get_path(item, path, None)
            if isinstance(value, (list, tuple)):
                total += len(value)
                continue
            number = parse_number(value)
            if number is not None:
                total += float(number)
        return total

    return _compute


def average_of(path: str, ndigits: int = 2) -> Callable[[list[dict[str, Any]]], float | None]:
    def _compute(items: list[dict[str, Any]]) -> float | None:
        numbers = [parse_number(get_path(item, path, None)) for item in items]
        present = [float(number) for number in numbers if number is not None]
        if not present:
            return None
        return round(sum(present) / len(present), ndigits)

    return _compute


def count_since(path: str, since: Callable[[], datetime]) -> Callable[[list[dict[str, Any]]], int]:
    def _compute(items: list[dict[str, Any]]) -> int:
        threshold = parse_iso_datetime(since())
        count = 0
        for item in items:
            moment = parse_iso_datetime(get_path(item, path, None))
            if moment is not None and threshold is not None and moment >= threshold:
                count += 1
        return count

    return _compute
