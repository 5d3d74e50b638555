"""API v1 Router — Works, speeches, collections and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from bardindex.api.v1.endpoints.collections import router as collections_router
from bardindex.api.v1.endpoints.health import router as health_router
from bardindex.api.v1.endpoints.works import router as works_router

router = APIRouter(tags=["v1"])
router.include_router(works_router)
router.include_router(collections_router)
router.include_router(health_router)
