from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.core.config import settings
from app.schemas.collection import BulkRequest, ListResult, StatsResult
from app.services.collection_engine import CollectionEngine
from app.services.collection_errors import CollectionError
from app.services.document_store import DocumentStore, build_document_store
from app.services.resource_registry import get_resource_config

router = APIRouter()

_STORE: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    global _STORE
    if _STORE is None:
        _STORE = build_document_store()
    return _STORE


def get_engine(resource: str, store: DocumentStore = Depends(get_document_store)) -> CollectionEngine:
    try:
        config = get_resource_config(resource)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown resource: {resource}")
    return CollectionEngine(config, store, max_concurrency=settings.BULK_MAX_CONCURRENCY)


def _bad_request(exc: CollectionError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


@router.get("/{resource}", response_model=ListResult, response_model_by_alias=True)
def list_records(request: Request, engine: CollectionEngine = Depends(get_engine)):
    try:
        return engine.list(request.query_params)
    except CollectionError as exc:
        raise _bad_request(exc)


@router.get("/{resource}/search", response_model=ListResult, response_model_by_alias=True)
def search_records(request: Request, engine: CollectionEngine = Depends(get_engine)):
    try:
        return engine.search(request.query_params)
    except CollectionError as exc:
        raise _bad_request(exc)


@router.get("/{resource}/export")
def export_records(request: Request, format: str = "json", engine: CollectionEngine = Depends(get_engine)):
    try:
        payload = engine.export(format, request.query_params)
    except CollectionError as exc:
        raise _bad_request(exc)
    return Response(
        content=payload.data,
        media_type=payload.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{payload.filename}"',
            "X-Total-Records": str(payload.total_records),
        },
    )


@router.get("/{resource}/stats", response_model=StatsResult, response_model_by_alias=True)
def record_stats(request: Request, engine: CollectionEngine = Depends(get_engine)):
    try:
        return engine.stats(request.query_params)
    except CollectionError as exc:
        raise _bad_request(exc)


@router.post("/{resource}/bulk")
async def bulk_records(payload: BulkRequest, engine: CollectionEngine = Depends(get_engine)):
    try:
        result = await engine.bulk(payload.operation, payload.items)
    except CollectionError as exc:
        raise _bad_request(exc)
    return JSONResponse(
        status_code=200 if result.success else 207,
        content=jsonable_encoder(result.model_dump(by_alias=True, mode="json")),
    )
