"""Play index client — Read operations over the Shakespeare collections.

Typesense has no joins, so a play is assembled client-side::

    plays ─┬─ characters   (play_id)
           └─ acts         (play_id)
                └─ scenes  (act_id in acts)
                     └─ speeches (scene_id in scenes, full-text on content)

Every call is awaited in order; nothing is fanned out in parallel.

Two failure contracts coexist:
  - Public operations are hard-fail: any upstream error aborts the call
    with a ``QueryError`` (or ``PlayNotFoundError``).
  - ``_fetch_by_ids`` is best-effort: it logs the error and returns an
    empty list.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from bardindex.models.collection import Collection, CollectionField
from bardindex.models.play import Act, Character, Play, Scene, SearchResult, ShakespeareWork, Speech
from bardindex.typesense.exceptions import PlayNotFoundError, QueryError, SearchIndexError
from bardindex.typesense.filters import FilterBuilder
from bardindex.typesense.transport import SearchParams, TypesenseTransport

if TYPE_CHECKING:
    from bardindex.config.settings import Settings

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

DEFAULT_PER_PAGE = 250
DEFAULT_MAX_SCENE_PAGES = 40

PLAYS = "plays"
CHARACTERS = "characters"
ACTS = "acts"
SCENES = "scenes"
SPEECHES = "speeches"


class PlayIndexClient:
    """Typed, read-only access to the Shakespeare collections.

    Build one per process and hand it to whatever needs it; the transport
    it wraps is safe to share between concurrent calls.

    Args:
        transport: Configured Typesense transport.
        per_page: Page size for catalogue and join queries.
        max_scene_pages: Upper bound on scene pages fetched for one play.
    """

    def __init__(
        self,
        transport: TypesenseTransport,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        max_scene_pages: int = DEFAULT_MAX_SCENE_PAGES,
    ) -> None:
        self.transport = transport
        self.per_page = per_page
        self.max_scene_pages = max_scene_pages

    @classmethod
    def from_settings(cls, settings: Settings) -> PlayIndexClient:
        """Build a client from settings.

        Raises:
            ConfigurationError: If the Typesense API key or host is not set.
        """
        ts = settings.typesense
        transport = TypesenseTransport(
            api_key=ts.api_key,
            host=ts.host,
            port=ts.port,
            protocol=ts.protocol,
            timeout=ts.timeout,
        )
        return cls(
            transport,
            per_page=settings.search.per_page,
            max_scene_pages=settings.search.max_scene_pages,
        )

    async def close(self) -> None:
        await self.transport.shutdown()

    # ──────────────────────────────────────────────────────────────────────
    # Catalogue
    # ──────────────────────────────────────────────────────────────────────

    async def list_works(self) -> list[ShakespeareWork]:
        """List plays by id and title (first page only)."""
        try:
            page = await self.transport.search(
                PLAYS,
                SearchParams(q="*", query_by="title", per_page=self.per_page),
            )
            return _parse(ShakespeareWork, page.documents)
        except (SearchIndexError, ValidationError) as e:
            raise QueryError(f"Error searching {PLAYS} collection: {e}") from e

    # ──────────────────────────────────────────────────────────────────────
    # Speech search
    # ──────────────────────────────────────────────────────────────────────

    async def search_speeches(
        self,
        play_id: str,
        query_text: str,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> SearchResult:
        """Search the speeches of one play and return them with the play's structure.

        Args:
            play_id: Id of the play.
            query_text: Free text matched against speech content ('*' for all).
            page: 1-based page of speeches to return.
            per_page: Number of speeches per page.

        Returns:
            The play, its characters, acts and scenes, and one page of speeches.

        Raises:
            PlayNotFoundError: If no play has this id.
            QueryError: If any upstream call fails.
            ValueError: If ``page`` or ``per_page`` is below 1.
        """
        if page < 1 or per_page < 1:
            raise ValueError(f"page and per_page must be >= 1 (got page={page}, per_page={per_page})")

        try:
            plays = await self._fetch_by_ids(PLAYS, [play_id], Play)
            if not plays:
                raise PlayNotFoundError(f"Play with id {play_id} not found")
            play = plays[0]

            characters = await self._search_all(
                CHARACTERS, Character, FilterBuilder().equals("play_id", play_id)
            )
            acts = await self._search_all(ACTS, Act, FilterBuilder().equals("play_id", play_id))
            scenes = await self._fetch_scenes([act.id for act in acts])

            speeches: list[Speech] = []
            found = 0
            if scenes:
                speech_page = await self.transport.search(
                    SPEECHES,
                    SearchParams(
                        q=query_text,
                        query_by="content",
                        filter_by=FilterBuilder().one_of("scene_id", [scene.id for scene in scenes]),
                        page=page,
                        per_page=per_page,
                    ),
                )
                speeches = _parse(Speech, speech_page.documents)
                found = speech_page.found
        except PlayNotFoundError:
            raise
        except (SearchIndexError, ValueError) as e:
            raise QueryError(f"Error searching play data: {e}") from e

        return SearchResult(
            play=play,
            characters=characters,
            acts=acts,
            scenes=scenes,
            speeches=speeches,
            found=found,
            page=page,
            total_pages=math.ceil(found / per_page),
        )

    async def _search_all(self, collection: str, model: type[_M], filter_by: FilterBuilder) -> list[_M]:
        """Fetch the first page of a filtered match-all query."""
        result = await self.transport.search(
            collection,
            SearchParams(q="*", filter_by=filter_by, per_page=self.per_page),
        )
        return _parse(model, result.documents)

    async def _fetch_scenes(self, act_ids: Sequence[str]) -> list[Scene]:
        """Fetch every scene belonging to the given acts, page by page.

        Stops once the accumulated count reaches the server's ``found``
        total. An empty page ends the loop early; more than
        ``max_scene_pages`` pages is an error.
        """
        if not act_ids:
            return []

        scenes: list[Scene] = []
        total = 0
        scene_page = 1
        while True:
            if scene_page > self.max_scene_pages:
                raise QueryError(
                    f"Scene pagination exceeded {self.max_scene_pages} pages "
                    f"({len(scenes)} of {total} scenes fetched)"
                )
            result = await self.transport.search(
                SCENES,
                SearchParams(
                    q="*",
                    filter_by=FilterBuilder().one_of("act_id", act_ids),
                    page=scene_page,
                    per_page=self.per_page,
                ),
            )
            batch = _parse(Scene, result.documents)
            scenes.extend(batch)
            total = result.found
            if len(scenes) >= total:
                break
            if not batch:
                logger.warning(
                    "Scene page %d was empty with %d of %d scenes fetched; stopping",
                    scene_page,
                    len(scenes),
                    total,
                )
                break
            scene_page += 1

        logger.debug("Fetched %d scenes for %d acts in %d page(s)", len(scenes), len(act_ids), scene_page)
        return scenes

    async def _fetch_by_ids(
        self,
        collection: str,
        ids: Sequence[str],
        model: type[_M],
        id_field: str = "id",
    ) -> list[_M]:
        """Fetch documents whose ``id_field`` is in ``ids``, best effort.

        Returns an empty list without calling Typesense when ``ids`` is
        empty, and an empty list (after logging) when the call fails.
        """
        if not ids:
            return []

        try:
            result = await self.transport.search(
                collection,
                SearchParams(
                    q="*",
                    filter_by=FilterBuilder().one_of(id_field, ids),
                    per_page=len(ids),
                ),
            )
            return _parse(model, result.documents)
        except Exception:
            logger.error("Error fetching related documents from %s", collection, exc_info=True)
            return []

    # ──────────────────────────────────────────────────────────────────────
    # Introspection
    # ──────────────────────────────────────────────────────────────────────

    async def list_collections(self) -> list[Collection]:
        """List collection schemas with their document counts.

        Makes one extra request per collection to read its count.
        """
        try:
            schemas = await self.transport.list_collections()
            collections: list[Collection] = []
            for schema in schemas:
                name = schema["name"]
                fields = [CollectionField(name=f["name"], type=f["type"]) for f in schema.get("fields") or []]
                info = await self.transport.retrieve_collection(name)
                collections.append(
                    Collection(
                        name=name,
                        fields=fields,
                        document_count=info.get("num_documents") or 0,
                    )
                )
                logger.debug("Collection %s: %d fields", name, len(fields))
            return collections
        except (SearchIndexError, ValidationError, KeyError, TypeError) as e:
            raise QueryError(f"Failed to retrieve collections: {e}") from e

    async def dump_collection(self, name: str) -> str:
        """Return the first page of raw hits from a collection as indented JSON.

        Meant for inspection; only the first ``per_page`` documents are shown.
        """
        try:
            result = await self.transport.search(
                name,
                SearchParams(q="*", page=1, per_page=self.per_page),
            )
        except SearchIndexError as e:
            raise QueryError(f"Failed to search collection: {e}") from e
        return json.dumps(result.raw_hits, indent=2, ensure_ascii=False)


def _parse(model: type[_M], documents: list[dict]) -> list[_M]:
    return [model.model_validate(doc) for doc in documents]
