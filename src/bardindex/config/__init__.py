"""Configuration loading."""

from bardindex.config.settings import Settings

__all__ = ["Settings"]
