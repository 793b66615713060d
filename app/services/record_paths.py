from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    return [part for part in str(path or "").split(".") if part]


def get_path(record: Any, path: str, default: Any = MISSING) -> Any:
    current = record
    parts = split_path(path)
    if not parts:
        return default
    for part in parts:
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def set_path(target: dict[str, Any], path: str, value: Any) -> None:
    parts = split_path(path)
    if not parts:
        return
    current = target
    for part in parts[:-1]:
        nested = current.get(part)
        if not isinstance(nested, dict):
            nested = {}
            current[part] = nested
        current = nested
    current[parts[-1]] = value


def delete_path(target: dict[str, Any], path: str) -> bool:
    parts = split_path(path)
    if not parts:
        return False
    current: Any = target
    for part in parts[:-1]:
        current = current.get(part) if isinstance(current, dict) else None
        if current is None:
            return False
    if isinstance(current, dict) and parts[-1] in current:
        del current[parts[-1]]
        return True
    return False


def serialize_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def value_to_text(value: Any) -> str:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(value_to_text(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(serialize_value(value), ensure_ascii=False, separators=(",", ":"), sort_keys=True)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
