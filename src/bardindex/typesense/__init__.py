"""Typesense transport layer — HTTP access, filter building and errors."""

from bardindex.typesense.filters import FilterBuilder
from bardindex.typesense.transport import SearchPage, SearchParams, TypesenseTransport

__all__ = ["FilterBuilder", "SearchPage", "SearchParams", "TypesenseTransport"]
