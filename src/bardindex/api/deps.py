"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from bardindex.core.index_client import PlayIndexClient

# Set during application lifespan
_index_client: PlayIndexClient | None = None


def set_index_client(client: PlayIndexClient | None) -> None:
    """Set the shared index client (called during app lifespan)."""
    global _index_client
    _index_client = client


def get_index_client() -> PlayIndexClient:
    """Get the shared index client.

    Raises:
        RuntimeError: If the client is not initialized.
    """
    if _index_client is None:
        raise RuntimeError("Index client not initialized. Is the server running?")
    return _index_client
