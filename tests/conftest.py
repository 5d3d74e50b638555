"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from bardindex.config.settings import Settings
from bardindex.typesense.transport import SearchPage, SearchParams


def page_of(docs: list[dict[str, Any]], found: int | None = None, page: int = 1) -> SearchPage:
    """Build a search page whose hits wrap ``docs``."""
    hits = [{"document": d, "highlights": []} for d in docs]
    return SearchPage(found=len(docs) if found is None else found, page=page, hits=hits, raw_hits=hits)


def route(responses: dict[str, Any]) -> Callable[[str, SearchParams], Any]:
    """Side effect for a mocked ``TypesenseTransport.search`` keyed by collection."""

    async def _search(collection: str, params: SearchParams) -> SearchPage:
        responder = responses[collection]
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(params)
        return responder

    return _search


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with Typesense credentials."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        typesense={"api_key": "test-key", "host": "search.example.com"},
    )


@pytest.fixture
def hamlet() -> dict[str, Any]:
    return {
        "id": "play-hamlet",
        "title": "Hamlet",
        "playsubt": "Prince of Denmark",
        "fm": "Folger Shakespeare Library",
        "scndescr": "Elsinore",
    }


@pytest.fixture
def hamlet_characters() -> list[dict[str, Any]]:
    return [
        {
            "id": "char-hamlet",
            "play_id": "play-hamlet",
            "name": "Hamlet",
            "individual_description": "son of the late King Hamlet",
        },
        {
            "id": "char-ophelia",
            "play_id": "play-hamlet",
            "name": "Ophelia",
            "group_description": "Polonius's household",
        },
    ]


@pytest.fixture
def hamlet_acts() -> list[dict[str, Any]]:
    return [
        {"id": "hamlet-1", "play_id": "play-hamlet", "title": "Act 1"},
        {"id": "hamlet-3", "play_id": "play-hamlet", "title": "Act 3"},
    ]


@pytest.fixture
def hamlet_scenes() -> list[dict[str, Any]]:
    return [
        {"id": "hamlet-1-1", "act_id": "hamlet-1", "play_id": "play-hamlet", "title": "Scene 1"},
        {"id": "hamlet-3-1", "act_id": "hamlet-3", "play_id": "play-hamlet", "title": "Scene 1"},
    ]


@pytest.fixture
def hamlet_speeches() -> list[dict[str, Any]]:
    return [
        {
            "id": "speech-1",
            "scene_id": "hamlet-3-1",
            "speaker": "Hamlet",
            "content": "To be or not to be, that is the question",
        },
    ]


@pytest.fixture
def make_page() -> Callable[..., SearchPage]:
    return page_of


@pytest.fixture
def search_router() -> Callable[[dict[str, Any]], Callable[[str, SearchParams], Any]]:
    return route
