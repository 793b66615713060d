from __future__ import annotations

import math
from typing import Any, Sequence

from app.schemas.collection import PaginationMeta, PaginationSpec


def build_pagination_meta(page: int, limit: int, total: int, returned: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    has_next = page < total_pages
    has_prev = page > 1
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        returned=returned,
        total_pages=total_pages,
        has_next=has_next,
        has_prev=has_prev,
        next_page=page + 1 if has_next else None,
        prev_page=page - 1 if has_prev else None,
    )


def paginate(records: Sequence[dict[str, Any]], spec: PaginationSpec) -> tuple[list[dict[str, Any]], PaginationMeta]:
    # total is the post-filter count, so totalPages only covers fetchable pages
    items = list(records)
    start = (spec.page - 1) * spec.limit
    data = items[start : start + spec.limit]
    return data, build_pagination_meta(spec.page, spec.limit, len(items), len(data))
