"""Works and speech search endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from bardindex.api.deps import get_index_client
from bardindex.core.index_client import PlayIndexClient
from bardindex.models.play import SearchResult, ShakespeareWork
from bardindex.typesense.exceptions import PlayNotFoundError, QueryError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/works",
    response_model=list[ShakespeareWork],
    summary="List Works",
    description="List plays by id and title. Only the first 250 plays are returned.",
    responses={502: {"description": "Typesense call failed"}},
)
async def list_works(
    client: PlayIndexClient = Depends(get_index_client),
) -> list[ShakespeareWork]:
    try:
        return await client.list_works()
    except QueryError as e:
        logger.error("Listing works failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get(
    "/plays/{play_id}/speeches",
    response_model=SearchResult,
    summary="Search Speeches",
    description=(
        "Full-text search over the speeches of one play. The response also "
        "carries the play record, its characters, acts and scenes.\n\n"
        "`total_pages` is `ceil(found / per_page)`."
    ),
    responses={
        404: {"description": "No play with this id"},
        502: {"description": "Typesense call failed"},
    },
)
async def search_speeches(
    play_id: str,
    q: str = Query(default="*", description="Text matched against speech content"),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=250, ge=1, le=250),
    client: PlayIndexClient = Depends(get_index_client),
) -> SearchResult:
    """Search speeches within a play.

    Args:
        play_id: Id of the play.
        q: Query text.
        page: Page of speeches to return.
        per_page: Speeches per page.
        client: The index client (injected).
    """
    try:
        return await client.search_speeches(play_id, q, page=page, per_page=per_page)
    except PlayNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except QueryError as e:
        logger.error("Speech search failed for %s: %s", play_id, e)
        raise HTTPException(status_code=502, detail=str(e)) from e
