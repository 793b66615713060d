from __future__ import annotations

import copy
from typing import Any, Iterable, Sequence

from app.services.record_paths import MISSING, delete_path, get_path, set_path


def project_record(
    record: dict[str, Any],
    fields: Sequence[str] | None,
    exclude: Sequence[str] | None = None,
    always_include: Sequence[str] = (),
) -> dict[str, Any]:
    if fields:
        projected: dict[str, Any] = {}
        for path in list(always_include) + [path for path in fields if path not in always_include]:
            value = get_path(record, path)
            if value is not MISSING:
                set_path(projected, path, copy.deepcopy(value))
        result = projected
    elif exclude:
        result = copy.deepcopy(record)
    else:
        return record
    for path in exclude or ():
        if path not in always_include:
            delete_path(result, path)
    return result


def project_records(
    records: Iterable[dict[str, Any]],
    fields: Sequence[str] | None,
    exclude: Sequence[str] | None = None,
    always_include: Sequence[str] = (),
) -> list[dict[str, Any]]:
    if not fields and not exclude:
        return list(records)
    return [project_record(record, fields, exclude, always_include) for record in records]
