"""Shared retrieval metadata schemas.

Field names use camelCase to match the JSON persisted in local storage.
"""

# ruff: noqa: N815

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_null_to_list(v: Any) -> Any:
    """Coerce explicit JSON null to empty list."""
    return v if v is not None else []


def _coerce_null_to_str(v: Any) -> Any:
    """Coerce explicit JSON null to empty string."""
    return v if v is not None else ""


def _coerce_to_text(v: Any) -> str:
    """Coerce model-emitted free text to a string.

    Null becomes an empty string, lists are joined with commas and any
    other value is rendered with ``str``.
    """
    if v is None:
        return ""
    if isinstance(v, str):
        return v
    if isinstance(v, list):
        return ", ".join(str(item) for item in v if item is not None)
    return str(v)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Source(BaseModel):
    """A web citation reported by the backend's search tool."""

    url: str
    title: str | None = None


class RetrievalMetadata(BaseModel):
    """Metadata attached to every extracted payload, successful or degraded.

    Unknown keys emitted by the model (e.g. ``analysisDate``) are preserved.
    """

    model_config = ConfigDict(extra="allow")

    fetchedAt: str = Field(default_factory=utc_now_iso)
    method: str
    sources: list[Source] = Field(default_factory=list)
    responseId: str | None = None
    error: str | None = None

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, v: Any) -> Any:
        return _coerce_null_to_list(v)
