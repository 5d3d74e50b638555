"""Core read operations."""

from bardindex.core.index_client import PlayIndexClient

__all__ = ["PlayIndexClient"]
