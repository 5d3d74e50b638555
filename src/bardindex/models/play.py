"""Play data models — Snapshots of documents in the plays, characters, acts,
scenes and speeches collections.

Parent/child links are plain id strings (``play_id``, ``act_id``,
``scene_id``); they are not checked against each other.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _IndexRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Document id in its collection")


class ShakespeareWork(_IndexRecord):
    """A play as listed in the catalogue."""

    title: str = Field(description="Play title")


class Play(_IndexRecord):
    """A full play record."""

    title: str = Field(description="Play title")
    playsubt: str | None = Field(default=None, description="Subtitle")
    fm: str | None = Field(default=None, description="Front matter")
    scndescr: str | None = Field(default=None, description="Description of the scene of the play")


class Character(_IndexRecord):
    """A character appearing in a play."""

    play_id: str
    name: str
    group_description: str | None = None
    individual_description: str | None = None


class Act(_IndexRecord):
    play_id: str
    title: str


class Scene(_IndexRecord):
    act_id: str
    play_id: str
    title: str


class Speech(_IndexRecord):
    scene_id: str
    speaker: str
    content: str


class SearchResult(BaseModel):
    """A play joined with its characters, acts, scenes and matching speeches."""

    model_config = ConfigDict(frozen=True)

    play: Play
    characters: list[Character] = Field(default_factory=list)
    acts: list[Act] = Field(default_factory=list)
    scenes: list[Scene] = Field(default_factory=list)
    speeches: list[Speech] = Field(default_factory=list, description="Current page of matching speeches")
    found: int = Field(default=0, description="Total speeches matching the query")
    page: int = Field(default=1, description="Page number of ``speeches``")
    total_pages: int = Field(default=0, description="ceil(found / per_page)")
