"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    if not value.strip():
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AI backend
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI Responses API (required for any election or analysis request)",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the Responses API",
    )
    openai_model: str = Field(
        default="gpt-4.1",
        description="Model used for election discovery and candidate analysis jobs",
    )
    openai_timeout: float = Field(
        default=30.0,
        description="Per-request HTTP timeout in seconds",
        gt=0,
    )

    @field_validator("openai_base_url")
    @classmethod
    def validate_openai_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "openai_base_url must be an http(s) URL"
            raise ValueError(msg)
        return v.rstrip("/")

    # Web search
    web_search_allowed_domains: str = Field(
        default="",
        description="Comma-separated domain allowlist for the web search tool (empty means unrestricted)",
    )
    election_offices: str = Field(
        default="Governor,Lieutenant Governor",
        description="Comma-separated list of offices to discover elections for",
    )

    @property
    def web_search_allowed_domain_list(self) -> list[str]:
        """Parse the web search allowlist into a lowercase list."""
        return [d.lower() for d in _split_csv(self.web_search_allowed_domains)]

    @property
    def election_office_list(self) -> list[str]:
        """Parse the configured offices into a list."""
        return _split_csv(self.election_offices)

    # Polling
    poll_max_attempts: int = Field(
        default=40,
        description="Hard cap on status polls per job",
        gt=0,
    )
    poll_fast_attempts: int = Field(
        default=5,
        description="Number of attempts that use the fast interval",
        ge=0,
    )
    poll_fast_interval: float = Field(
        default=1.0,
        description="Seconds between the first polls",
        gt=0,
    )
    poll_medium_attempts: int = Field(
        default=10,
        description="Number of attempts after the fast batch that use the medium interval",
        ge=0,
    )
    poll_medium_interval: float = Field(
        default=2.0,
        description="Seconds between polls in the medium batch",
        gt=0,
    )
    poll_slow_interval: float = Field(
        default=2.5,
        description="Steady-state seconds between polls",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_poll_schedule(self) -> "Settings":
        if not (self.poll_fast_interval <= self.poll_medium_interval <= self.poll_slow_interval):
            msg = "poll intervals must not decrease (fast <= medium <= slow)"
            raise ValueError(msg)
        return self

    # Storage
    storage_dir: str = Field(
        default="./.civic_lens",
        description="Directory holding the local persistent and session-scoped stores",
    )

    @property
    def local_storage_path(self) -> Path:
        """File backing the persistent local store."""
        return Path(self.storage_dir) / "local_storage.json"

    @property
    def session_storage_path(self) -> Path:
        """File backing the session-scoped store."""
        return Path(self.storage_dir) / "session_storage.json"

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
