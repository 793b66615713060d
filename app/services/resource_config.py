from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel

from app.core.config import settings
from app.schemas.collection import SortSpec

DerivedStat = Callable[[list[dict[str, Any]]], Any]


@dataclass(frozen=True)
class ResourceConfig:
    name: str
    label: str
    allowed_search_fields: tuple[str, ...]
    allowed_sort_fields: tuple[str, ...]
    allowed_filter_fields: tuple[str, ...] = ()
    default_sort: Optional[SortSpec] = SortSpec(field="createdAt", direction="desc")
    id_field: str = "id"
    id_prefix: str = ""
    date_field: str = "createdAt"
    max_limit: int = field(default_factory=lambda: settings.QUERY_MAX_LIMIT)
    default_limit: int = field(default_factory=lambda: settings.QUERY_DEFAULT_LIMIT)
    stats_group_fields: tuple[str, ...] = ()
    stats_breakdown_fields: tuple[str, ...] = ()
    stats_derived: Mapping[str, DerivedStat] = field(default_factory=dict)
    create_schema: Optional[type[BaseModel]] = None
    update_schema: Optional[type[BaseModel]] = None
