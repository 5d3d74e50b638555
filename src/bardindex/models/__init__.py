"""Typed records returned by the index client."""

from bardindex.models.collection import Collection, CollectionField
from bardindex.models.play import Act, Character, Play, Scene, SearchResult, ShakespeareWork, Speech

__all__ = [
    "Act",
    "Character",
    "Collection",
    "CollectionField",
    "Play",
    "Scene",
    "SearchResult",
    "ShakespeareWork",
    "Speech",
]
