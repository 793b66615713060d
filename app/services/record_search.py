from __future__ import annotations

from typing import Any, Iterable

from app.schemas.collection import DateRange, FilterClause, SearchSpec
from app.services.record_paths import MISSING, get_path, value_to_text
from app.services.record_sort import compare_values, parse_iso_datetime


def record_matches(record: dict[str, Any], spec: SearchSpec) -> bool:
    needle = spec.term.lower()
    for field in spec.fields:
        haystack = value_to_text(get_path(record, field)).lower()
        if haystack and needle in haystack:
            return True
    return False


def search_records(records: Iterable[dict[str, Any]], spec: SearchSpec | None) -> list[dict[str, Any]]:
    items = list(records)
    if spec is None or not spec.term:
        return items
    return [record for record in items if record_matches(record, spec)]


def _equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return left == right
    return compare_values(left, right) == 0


def _clause_matches(record: dict[str, Any], clause: FilterClause) -> bool:
    value = get_path(record, clause.field)
    if value is MISSING:
        value = None
    op = clause.op
    if op == "eq":
        return _equals(value, clause.value)
    if op == "ne":
        return not _equals(value, clause.value)
    if op in {"in", "nin"}:
        candidates = clause.value if isinstance(clause.value, (list, tuple)) else [clause.value]
        found = any(_equals(value, candidate) for candidate in candidates)
        return found if op == "in" else not found
    if op == "like":
        return str(clause.value or "").lower() in value_to_text(value).lower()
    if value is None or clause.value is None:
        return False
    result = compare_values(value, clause.value)
    if op == "gt":
        return result > 0
    if op == "gte":
        return result >= 0
    if op == "lt":
        return result < 0
    if op == "lte":
        return result <= 0
    return False


def filter_records(records: Iterable[dict[str, Any]], clauses: Iterable[FilterClause]) -> list[dict[str, Any]]:
    active = list(clauses)
    items = list(records)
    if not active:
        return items
    return [record for record in items if all(_clause_matches(record, clause) for clause in active)]


def filter_date_range(records: Iterable[dict[str, Any]], date_range: DateRange | None) -> list[dict[str, Any]]:
    items = list(records)
    if date_range is None or (date_range.start is None and date_range.end is None):
        return items
    kept = []
    for record in items:
        moment = parse_iso_datetime(get_path(record, date_range.field, None))
        if moment is None:
            continue
        if date_range.start is not None and moment < parse_iso_datetime(date_range.start):
            continue
        if date_range.end is not None and moment > parse_iso_datetime(date_range.end):
            continue
        kept.append(record)
    return kept
