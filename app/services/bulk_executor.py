from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Iterable

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.collection import (
    BulkErrorKind,
    BulkItemFailure,
    BulkItemSuccess,
    BulkOperation,
    BulkResult,
    BulkSummary,
)
from app.services.collection_errors import RecordNotFoundError, RecordValidationError, UnsupportedOperationError
from app.services.record_paths import serialize_value

_LOG = logging.getLogger("app.collection.bulk")

CreateCallback = Callable[[dict[str, Any]], Any]
UpdateCallback = Callable[[Any, dict[str, Any]], Any]
DeleteCallback = Callable[[Any], Any]


def resolve_operation(operation: Any) -> BulkOperation:
    if isinstance(operation, BulkOperation):
        return operation
    if isinstance(operation, str):
        try:
            return BulkOperation(operation.strip().lower())
        except ValueError:
            pass
    raise UnsupportedOperationError(operation)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "item"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts) or "validation failed"


async def _invoke(callback: Callable[..., Any], *args: Any) -> Any:
    if inspect.iscoroutinefunction(callback):
        return await callback(*args)
    result = await run_in_threadpool(callback, *args)
    if inspect.isawaitable(result):
        return await result
    return result


class BulkExecutor:
    def __init__(
        self,
        *,
        create: CreateCallback,
        update: UpdateCallback,
        delete: DeleteCallback,
        id_field: str = "id",
        max_concurrency: int | None = None,
    ):
        self._create = create
        self._update = update
        self._delete = delete
        self._id_field = id_field
        self._max_concurrency = max(1, int(max_concurrency or settings.BULK_MAX_CONCURRENCY))

    async def execute(self, operation: Any, items: Iterable[Any]) -> BulkResult:
        op = resolve_operation(operation)
        batch = list(items)
        handlers: dict[BulkOperation, Callable[[Any], Awaitable[Any]]] = {
            BulkOperation.CREATE: self._create_item,
            BulkOperation.UPDATE: self._update_item,
            BulkOperation.DELETE: self._delete_item,
        }
        handler = handlers[op]
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(index: int, item: Any):
            async with semaphore:
                return await self._settle(index, item, handler)

        settled = await asyncio.gather(*(_bounded(index, item) for index, item in enumerate(batch)))
        results = sorted(settled, key=lambda result: result.index)
        failed = sum(1 for result in results if isinstance(result, BulkItemFailure))
        summary = BulkSummary(total=len(batch), successful=len(batch) - failed, failed=failed)
        _LOG.info("bulk %s finished total=%s successful=%s failed=%s", op.value, summary.total, summary.successful, failed)
        return BulkResult(success=failed == 0, results=results, summary=summary)

    async def _settle(self, index: int, item: Any, handler: Callable[[Any], Awaitable[Any]]):
        try:
            data = await handler(item)
        except ValidationError as exc:
            return self._failure(index, item, BulkErrorKind.VALIDATION_FAILED, _validation_message(exc))
        except RecordValidationError as exc:
            return self._failure(index, item, BulkErrorKind.VALIDATION_FAILED, str(exc) or "validation failed")
        except RecordNotFoundError as exc:
            return self._failure(index, item, BulkErrorKind.NOT_FOUND, str(exc))
        except Exception as exc:
            _LOG.warning("bulk item %s failed unexpectedly", index, exc_info=True)
            return self._failure(index, item, BulkErrorKind.OPERATION_FAILED, str(exc) or type(exc).__name__)
        return BulkItemSuccess(index=index, data=serialize_value(data))

    @staticmethod
    def _failure(index: int, item: Any, kind: BulkErrorKind, message: str) -> BulkItemFailure:
        return BulkItemFailure(index=index, error=kind, message=message, item=serialize_value(item))

    def _record_id(self, item: Any) -> Any:
        if isinstance(item, Mapping):
            record_id = item.get(self._id_field, item.get("id"))
        else:
            record_id = item
        if isinstance(record_id, bool) or not isinstance(record_id, (str, int)) or record_id == "":
            raise RecordValidationError(f'item has no usable "{self._id_field}"')
        return record_id

    async def _create_item(self, item: Any) -> Any:
        if not isinstance(item, Mapping):
            raise RecordValidationError("create item must be an object")
        return await _invoke(self._create, dict(item))

    async def _update_item(self, item: Any) -> Any:
        if not isinstance(item, Mapping):
            raise RecordValidationError("update item must be an object with an id and data")
        record_id = self._record_id(item)
        if "data" in item:
            patch = item["data"]
        else:
            patch = {key: value for key, value in item.items() if key not in {self._id_field, "id"}}
        if not isinstance(patch, Mapping):
            raise RecordValidationError("update data must be an object")
        updated = await _invoke(self._update, record_id, dict(patch))
        if updated is None:
            raise RecordNotFoundError(record_id)
        return updated

    async def _delete_item(self, item: Any) -> Any:
        record_id = self._record_id(item)
        deleted = await _invoke(self._delete, record_id)
        if not deleted:
            raise RecordNotFoundError(record_id)
        return {self._id_field: record_id, "deleted": True}
