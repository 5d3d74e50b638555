"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (BARDINDEX_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class TypesenseSettings(BaseModel):
    """Connection to the Typesense service.

    ``api_key`` and ``host`` have no usable defaults; the index client
    refuses to start without them.
    """

    api_key: str = Field(default="", description="Typesense API key")
    host: str = Field(default="", description="Typesense host name, e.g. 'xyz.a1.typesense.net'")
    port: int = Field(default=443, description="Typesense port")
    protocol: str = Field(default="https", description="Protocol: https or http")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")

    @field_validator("protocol")
    @classmethod
    def _check_protocol(cls, v: str) -> str:
        v = v.lower()
        if v not in ("http", "https"):
            raise ValueError(f"Unsupported protocol: {v}")
        return v


class SearchSettings(BaseModel):
    """Query behaviour."""

    per_page: int = Field(default=250, ge=1, le=250, description="Page size for catalogue and join queries")
    max_scene_pages: int = Field(default=40, ge=1, description="Upper bound on scene pages fetched per play")


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Nested settings use double underscores::

        BARDINDEX_TYPESENSE__API_KEY=xyz
        BARDINDEX_TYPESENSE__HOST=abc.a1.typesense.net
        BARDINDEX_SEARCH__MAX_SCENE_PAGES=10
    """

    model_config = {
        "env_prefix": "BARDINDEX_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="Bardindex", description="Application name")

    typesense: TypesenseSettings = Field(default_factory=TypesenseSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
