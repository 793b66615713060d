from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from app.schemas.collection import BulkResult, ExportPayload, ListResult, QuerySpec, StatsResult
from app.services.bulk_executor import BulkExecutor
from app.services.collection_errors import RecordValidationError
from app.services.document_store import DocumentStore, new_record_id
from app.services.field_projection import project_records
from app.services.pagination import paginate
from app.services.query_spec import parse_export_columns, parse_group_fields, parse_query_spec
from app.services.record_export import export_records
from app.services.record_search import filter_date_range, filter_records, search_records
from app.services.record_sort import sort_records
from app.services.record_stats import aggregate_stats
from app.services.resource_config import ResourceConfig

_LOG = logging.getLogger("app.collection.engine")


class CollectionEngine:
    def __init__(self, config: ResourceConfig, store: DocumentStore, *, max_concurrency: int | None = None):
        self.config = config
        self._store = store
        self._max_concurrency = max_concurrency

    def _fetch(self) -> list[dict[str, Any]]:
        return self._store.fetch_all(self.config.name)

    def _select(self, spec: QuerySpec) -> list[dict[str, Any]]:
        records = filter_records(self._fetch(), spec.filters)
        records = filter_date_range(records, spec.date_range)
        records = search_records(records, spec.search)
        return sort_records(records, spec.sort)

    def list(self, raw_query: Any = None) -> ListResult:
        spec = parse_query_spec(raw_query, self.config)
        selected = self._select(spec)
        page, meta = paginate(selected, spec.pagination)
        data = project_records(page, spec.fields, spec.exclude, always_include=(self.config.id_field,))
        _LOG.debug(
            "list %s matched=%s page=%s returned=%s", self.config.name, meta.total, meta.page, meta.returned
        )
        return ListResult(data=data, pagination=meta)

    def search(self, raw_query: Any = None) -> ListResult:
        return self.list(raw_query)

    def export(self, fmt: str, raw_query: Any = None, *, now: datetime | None = None) -> ExportPayload:
        spec = parse_query_spec(raw_query, self.config)
        selected = self._select(spec)
        always = (self.config.id_field,) if spec.fields else ()
        records = project_records(selected, spec.fields, spec.exclude, always_include=always)
        columns = parse_export_columns(raw_query)
        if columns is None and spec.fields:
            columns = list(always) + [name for name in spec.fields if name not in always]
        payload = export_records(records, fmt, resource=self.config.label, columns=columns, now=now)
        _LOG.info("export %s format=%s records=%s", self.config.name, fmt, payload.total_records)
        return payload

    def stats(self, raw_query: Any = None) -> StatsResult:
        spec = parse_query_spec(raw_query, self.config)
        return aggregate_stats(
            self._select(spec),
            parse_group_fields(raw_query, self.config),
            derived=self.config.stats_derived,
            breakdown_fields=self.config.stats_breakdown_fields,
        )

    async def bulk(self, operation: Any, items: Iterable[Any]) -> BulkResult:
        executor = BulkExecutor(
            create=self._create_record,
            update=self._update_record,
            delete=self._delete_record,
            id_field=self.config.id_field,
            max_concurrency=self._max_concurrency,
        )
        return await executor.execute(operation, items)

    # Mutation callbacks handed to the bulk executor.

    def _create_record(self, item: dict[str, Any]) -> dict[str, Any]:
        schema = self.config.create_schema
        if schema is not None:
            data = schema.model_validate(item).model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            data = dict(item)
        data[self.config.id_field] = new_record_id(self.config.id_prefix)
        return self._store.create_one(self.config.name, data)

    def _update_record(self, record_id: Any, patch: dict[str, Any]) -> dict[str, Any] | None:
        schema = self.config.update_schema
        if schema is not None:
            patch = schema.model_validate(patch).model_dump(mode="json", by_alias=True, exclude_unset=True)
        if not patch:
            raise RecordValidationError("update data is empty")
        return self._store.update_one(self.config.name, record_id, patch)

    def _delete_record(self, record_id: Any) -> bool:
        return self._store.delete_one(self.config.name, record_id)
