"""Collection metadata models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CollectionField(BaseModel):
    """A field in a collection schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class Collection(BaseModel):
    """Schema and size of a Typesense collection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Collection name")
    fields: list[CollectionField] = Field(default_factory=list, description="Schema fields, in schema order")
    document_count: int = Field(default=0, description="Number of documents in the collection")
