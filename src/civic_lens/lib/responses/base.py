"""Backend interface and job bookkeeping types for long-running responses."""

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from civic_lens.lib.prompts.builder import JobSpec

# Backend status strings
STATUS_COMPLETED = "completed"
FAILED_STATUSES = frozenset({"failed", "cancelled", "incomplete"})


class JobState(enum.StrEnum):
    """Lifecycle of a submitted job as seen by the poller."""

    CREATED = "created"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"


class ResponsesBackend(Protocol):
    """Protocol for the AI backend that runs web-search jobs."""

    async def create_response(self, job_spec: JobSpec) -> dict[str, Any]:
        """Submit a job and return the backend's response object (with ``id``)."""
        ...

    async def get_response(self, response_id: str) -> dict[str, Any]:
        """Fetch the current response object for a job."""
        ...


@dataclass
class JobHandle:
    """A submitted job being driven to a terminal state."""

    response_id: str
    spec: JobSpec
    state: JobState = JobState.CREATED
    attempts: int = 0
    last_status: str | None = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class JobResult:
    """Terminal ``completed`` response for a job."""

    response_id: str
    payload: dict[str, Any]
    attempts: int
    method: str

    @property
    def output(self) -> list[dict[str, Any]]:
        output = self.payload.get("output")
        return output if isinstance(output, list) else []


def failure_reason(payload: dict[str, Any]) -> str:
    """Pull a human-readable reason from a failed response object."""
    error = payload.get("error") or {}
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    details = payload.get("incomplete_details") or {}
    if isinstance(details, dict) and details.get("reason"):
        return f"incomplete: {details['reason']}"
    return "Unknown error"
