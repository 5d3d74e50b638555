"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bardindex import __version__
from bardindex.api.deps import get_index_client
from bardindex.core.index_client import PlayIndexClient
from bardindex.typesense.transport import IndexHealth

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Service status (e.g. 'healthy')")
    version: str = Field(description="Bardindex version")
    service: str = Field(description="Service name ('bardindex')")
    typesense: IndexHealth = Field(description="Health of the Typesense service")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Service status plus a live probe of the Typesense `/health` endpoint.",
)
async def health_check(
    client: PlayIndexClient = Depends(get_index_client),
) -> HealthResponse:
    typesense = await client.transport.health_check()
    return HealthResponse(
        status="healthy" if typesense.status == "healthy" else "degraded",
        version=__version__,
        service="bardindex",
        typesense=typesense,
    )
