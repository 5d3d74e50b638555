"""Bardindex — Typed, read-only access to Shakespeare play data in Typesense."""

__version__ = "0.1.0"
