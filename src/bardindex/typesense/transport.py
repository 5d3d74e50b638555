"""Typesense transport — Async HTTP access to a Typesense cluster.

Talks to the Typesense `REST API`_ with ``httpx``. Only the read endpoints
needed by Bardindex are wrapped: document search, collection listing and
collection retrieval, plus the ``/health`` probe.

.. _REST API: https://typesense.org/docs/latest/api/

Usage::

    transport = TypesenseTransport(api_key="xyz", host="abc.a1.typesense.net")
    page = await transport.search(
        "plays",
        SearchParams(q="*", query_by="title", per_page=250),
    )
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bardindex.typesense.exceptions import ConfigurationError, ConnectionError, QueryError
from bardindex.typesense.filters import FilterBuilder

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-TYPESENSE-API-KEY"


class SearchParams(BaseModel):
    """Parameters of a ``documents/search`` call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    q: str = Field(default="*", description="Query text; '*' matches every document")
    query_by: str | None = Field(default=None, description="Comma-separated fields to search over")
    filter_by: FilterBuilder | None = Field(default=None, description="Structured filter expression")
    page: int | None = Field(default=None, ge=1, description="1-based page number")
    per_page: int = Field(default=250, ge=1, description="Page size")

    def to_query_params(self) -> dict[str, str | int]:
        """Render as URL query parameters, omitting empty options."""
        params: dict[str, str | int] = {"q": self.q, "per_page": self.per_page}
        if self.query_by:
            params["query_by"] = self.query_by
        if self.filter_by is not None:
            rendered = self.filter_by.build()
            if rendered:
                params["filter_by"] = rendered
        if self.page is not None:
            params["page"] = self.page
        return params


class SearchHit(BaseModel):
    """A single search hit; only the document is kept typed."""

    document: dict[str, Any]


class SearchPage(BaseModel):
    """One page of search results."""

    found: int = Field(default=0, description="Total number of matching documents server-side")
    page: int = Field(default=1, description="Page number returned")
    hits: list[SearchHit] = Field(default_factory=list)
    raw_hits: list[dict[str, Any]] = Field(default_factory=list, description="Hits exactly as returned")

    @property
    def documents(self) -> list[dict[str, Any]]:
        return [hit.document for hit in self.hits]


class IndexHealth(BaseModel):
    """Health status of the Typesense service."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health probe in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the probe")
    message: str | None = Field(default=None, description="Additional health message")


class TypesenseTransport:
    """HTTP transport for a single Typesense node.

    The underlying ``httpx.AsyncClient`` is created on first use and then
    shared by every call. It carries no per-call state, so concurrent
    operations may use the same transport.

    Args:
        api_key: Typesense API key (search-only keys are enough).
        host: Typesense host name, without scheme or port.
        port: Typesense port.
        protocol: ``"https"`` or ``"http"``.
        timeout: HTTP request timeout in seconds.

    Raises:
        ConfigurationError: If ``api_key`` or ``host`` is missing.
    """

    def __init__(
        self,
        api_key: str | None,
        host: str | None,
        port: int = 443,
        protocol: str = "https",
        timeout: float = 30.0,
    ) -> None:
        if not api_key or not host:
            raise ConfigurationError("Typesense API key and host are required")
        self._api_key = api_key
        self._base_url = f"{protocol}://{host.rstrip('/')}:{port}"
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> TypesenseTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                headers={API_KEY_HEADER: self._api_key},
            )
            logger.debug("Created Typesense HTTP client for %s", self._base_url)
        return self._client

    async def initialize(self) -> None:
        """Verify that the Typesense node answers its health probe."""
        try:
            resp = await self._get_client().get("/health")
            resp.raise_for_status()
            body = resp.json()
            if not isinstance(body, dict) or not body.get("ok"):
                raise ConnectionError(f"Typesense at {self._base_url} reports not ok")
            logger.info("Connected to Typesense at %s", self._base_url)
        except (httpx.HTTPError, ValueError) as e:
            raise ConnectionError(f"Failed to connect to Typesense: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Documents ────────────────────────────────────────────────────────

    async def search(self, collection: str, params: SearchParams) -> SearchPage:
        """Run ``GET /collections/{collection}/documents/search``."""
        data = await self._get_json(
            f"/collections/{_path(collection)}/documents/search",
            params=params.to_query_params(),
            what=f"search in '{collection}'",
        )
        if not isinstance(data, dict):
            raise QueryError(f"Malformed search response from '{collection}': expected an object")
        raw_hits = data.get("hits") or []
        try:
            return SearchPage(
                found=data.get("found") or 0,
                page=data.get("page") or params.page or 1,
                hits=raw_hits,
                raw_hits=raw_hits,
            )
        except ValidationError as e:
            raise QueryError(f"Malformed search response from '{collection}': {e}") from e

    # ── Collections ──────────────────────────────────────────────────────

    async def list_collections(self) -> list[dict[str, Any]]:
        """Run ``GET /collections``."""
        data = await self._get_json("/collections", what="list collections")
        if not isinstance(data, list):
            raise QueryError("Malformed collections response: expected a list")
        return data

    async def retrieve_collection(self, name: str) -> dict[str, Any]:
        """Run ``GET /collections/{name}``."""
        data = await self._get_json(f"/collections/{_path(name)}", what=f"retrieve collection '{name}'")
        if not isinstance(data, dict):
            raise QueryError(f"Malformed response for collection '{name}': expected an object")
        return data

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> IndexHealth:
        """Probe ``/health``; never raises."""
        try:
            start = time.monotonic()
            resp = await self._get_client().get("/health")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                ok = bool(resp.json().get("ok"))
                return IndexHealth(
                    status="healthy" if ok else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Typesense at {self._base_url}, ok: {ok}",
                )
            return IndexHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Typesense returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return IndexHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    async def _get_json(self, path: str, *, what: str, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._get_client().get(path, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Typesense {what} failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"Typesense {what} returned invalid JSON: {e}") from e


def _path(segment: str) -> str:
    return quote(segment, safe="")
