from fastapi import APIRouter
from app.api.admin import collections

router = APIRouter()
router.include_router(collections.router, prefix="/collections", tags=["AdminCollections"])
