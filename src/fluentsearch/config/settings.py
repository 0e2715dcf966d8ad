"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (FLUENTSEARCH_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_ENGINE_URL = "http://localhost:9200"


class EngineConfig(BaseModel):
    """Connection details for the search engine.

    Accepts both ``keep_alive`` and the camelCase ``keepAlive`` spelling.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str | None = Field(default=None, description="Engine endpoint URL")
    keep_alive: bool | None = Field(default=None, alias="keepAlive", description="Reuse HTTP connections")
    logging: str | list[str] | None = Field(
        default=None,
        description="Engine client log level (e.g. 'warning', 'trace') or a list of levels",
    )

    @field_validator("logging", mode="before")
    @classmethod
    def _normalize_level(cls, v: object) -> str | list[str] | None:
        if v is None or v is False:
            return None
        if isinstance(v, (list, tuple)):
            return [str(level).lower() for level in v]
        return str(v).lower()


class DocumentSettings(BaseModel):
    """How documents are stamped and paged."""

    type_field: str = Field(default="doc_type", description="Field holding the document type label")
    created_field: str = Field(default="createdAt", description="Creation timestamp field")
    updated_field: str = Field(default="updatedAt", description="Update timestamp field")
    query_size: int = Field(default=1_000_000, ge=0, description="Default page size for string/DSL queries")
    list_size: int = Field(default=1_000, ge=0, description="Default page size for get_all")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Nested settings use double underscores in environment variables.

    Example:
        FLUENTSEARCH_ENGINE__URL=http://search:9200
        FLUENTSEARCH_DOCUMENTS__TYPE_FIELD=kind
        FLUENTSEARCH_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "FLUENTSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    engine: EngineConfig = Field(default_factory=EngineConfig)
    documents: DocumentSettings = Field(default_factory=DocumentSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file win over environment variables; anything
        the file leaves out falls back to the environment, then defaults.

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
