"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (CHEF_INDEX_ prefix)
  2. ``.env`` file
  3. YAML config file or constructor arguments
  4. Default values

The active search provider lives in ``index.provider``.  It is read from the
live settings object at the start of every operation, so switching it at
runtime takes effect on the next call.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from chef_index.models.query import Backend


class IndexSettings(BaseModel):
    """Search backend connection configuration."""

    provider: Backend = Field(default=Backend.SOLR, description="Active search provider: solr or cloudsearch")
    url: str = Field(default="http://localhost:8983/solr", description="Search backend base URL")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    username: str | None = Field(default=None, description="Optional basic-auth username")
    password: str | None = Field(default=None, description="Optional basic-auth password")

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        """Solr rejects doubled '/' in request paths."""
        return v.rstrip("/")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the CHEF_INDEX_ prefix.
    Nested settings use double underscores: CHEF_INDEX_INDEX__PROVIDER=cloudsearch

    Example:
        CHEF_INDEX_INDEX__PROVIDER=solr
        CHEF_INDEX_INDEX__URL=http://solr.internal:8983/solr/chef
        CHEF_INDEX_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "CHEF_INDEX_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    index: IndexSettings = Field(default_factory=IndexSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats YAML values, which arrive as init kwargs.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

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
