"""Settings — Backend connection and logging options for searchport.

Sources, highest precedence first:
  1. A YAML file passed to ``Settings.from_yaml`` (the CLI's ``--config``)
  2. ``SEARCHPORT_``-prefixed environment variables, or a local ``.env``
  3. Defaults below

CLI flags such as ``--url`` are applied on top of the loaded settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ElasticsearchSettings(BaseModel):
    """Connection settings for the Elasticsearch backend."""

    url: str | None = Field(default=None, description="Backend URL, e.g. http://localhost:9200")
    username: str | None = Field(default=None, description="Basic-auth username")
    password: str | None = Field(default=None, description="Basic-auth password")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    verify_certs: bool = Field(default=True, description="Whether to verify TLS certificates")

    @field_validator("url", mode="before")
    @classmethod
    def _blank_url_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ObservabilitySettings(BaseModel):
    """Log output. Logs always go to stderr."""

    log_level: Literal["debug", "info", "warning", "error"] = "info"
    log_format: Literal["json", "console"] = Field(default="json", description="JSON lines, or human-readable console output")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SEARCHPORT_ prefix.
    Nested settings use double underscores: SEARCHPORT_ELASTICSEARCH__URL=http://...

    Example:
        SEARCHPORT_ELASTICSEARCH__URL=http://localhost:9200
        SEARCHPORT_ELASTICSEARCH__USERNAME=admin
        SEARCHPORT_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "SEARCHPORT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    elasticsearch: ElasticsearchSettings = Field(default_factory=ElasticsearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML file with ``elasticsearch`` and ``observability`` sections.

        Values from the file override environment variables; anything the
        file leaves out still comes from the environment.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ValueError: If the file is not a YAML mapping, or holds invalid values.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping, got {type(data).__name__}")

        return cls(**data)
