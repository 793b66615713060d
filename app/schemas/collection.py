from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Dir = Literal["asc", "desc"]
FilterOp = Literal["eq", "ne", "gt", "gte", "lt", "lte", "in", "nin", "like"]


class _SpecModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchSpec(_SpecModel):
    term: str
    fields: tuple[str, ...] = ()


class SortSpec(_SpecModel):
    field: str
    direction: Dir = "asc"


class PaginationSpec(_SpecModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    max_limit: int = Field(default=100, ge=1)


class FilterClause(_SpecModel):
    field: str
    op: FilterOp = "eq"
    value: Any = None


class DateRange(_SpecModel):
    field: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class QuerySpec(_SpecModel):
    search: Optional[SearchSpec] = None
    sort: Optional[SortSpec] = None
    pagination: PaginationSpec = PaginationSpec()
    fields: Optional[tuple[str, ...]] = None
    exclude: Optional[tuple[str, ...]] = None
    filters: tuple[FilterClause, ...] = ()
    date_range: Optional[DateRange] = None


class PaginationMeta(_ResultModel):
    page: int
    limit: int
    total: int
    returned: int
    total_pages: int
    has_next: bool
    has_prev: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None


class ListResult(_ResultModel):
    data: list[dict[str, Any]]
    pagination: PaginationMeta


class ExportPayload(_ResultModel):
    data: str
    mime_type: str
    filename: str
    total_records: int


class StatsResult(_ResultModel):
    summary: dict[str, Any]
    by_group: dict[str, int]
    by_field: dict[str, dict[str, int]] = {}


class BulkOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class BulkErrorKind(str, Enum):
    VALIDATION_FAILED = "ValidationFailed"
    NOT_FOUND = "NotFound"
    OPERATION_FAILED = "OperationFailed"


class BulkItemSuccess(_ResultModel):
    index: int
    status: Literal["success"] = "success"
    data: Any = None


class BulkItemFailure(_ResultModel):
    index: int
    status: Literal["failure"] = "failure"
    error: BulkErrorKind
    message: str
    item: Any = None


BulkItemResult = Annotated[Union[BulkItemSuccess, BulkItemFailure], Field(discriminator="status")]


class BulkSummary(_ResultModel):
    total: int
    successful: int
    failed: int


class BulkResult(_ResultModel):
    success: bool
    results: list[BulkItemResult]
    summary: BulkSummary


class BulkRequest(BaseModel):
    operation: str
    items: list[Any] = []
