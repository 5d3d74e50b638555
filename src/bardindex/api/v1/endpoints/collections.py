"""Collection introspection endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from bardindex.api.deps import get_index_client
from bardindex.core.index_client import PlayIndexClient
from bardindex.models.collection import Collection
from bardindex.typesense.exceptions import QueryError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/collections",
    response_model=list[Collection],
    summary="List Collections",
    description="Schema fields and document count of every Typesense collection.",
    responses={502: {"description": "Typesense call failed"}},
)
async def list_collections(
    client: PlayIndexClient = Depends(get_index_client),
) -> list[Collection]:
    try:
        return await client.list_collections()
    except QueryError as e:
        logger.error("Listing collections failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get(
    "/collections/{name}/dump",
    response_class=PlainTextResponse,
    summary="Dump Collection",
    description="First page (up to 250) of raw hits from a collection, as indented JSON text.",
    responses={502: {"description": "Typesense call failed"}},
)
async def dump_collection(
    name: str,
    client: PlayIndexClient = Depends(get_index_client),
) -> PlainTextResponse:
    try:
        text = await client.dump_collection(name)
    except QueryError as e:
        logger.error("Dumping collection %s failed: %s", name, e)
        raise HTTPException(status_code=502, detail=str(e)) from e
    return PlainTextResponse(text, media_type="application/json")
