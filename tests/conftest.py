"""Shared test fixtures: in-memory stores, a scripted backend, and sample records."""

from collections.abc import Callable
from typing import Any

import pytest

from civic_lens.core.config import Settings
from civic_lens.lib.storage.kv import InMemoryStore
from civic_lens.schemas.election import CandidateRecord, ElectionRecord
from civic_lens.schemas.survey import SurveyResponseSet


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test application settings with storage under a temp dir."""
    return Settings(
        openai_api_key="test-key",
        openai_base_url="https://backend.test/v1",
        storage_dir=str(tmp_path / "store"),
    )


@pytest.fixture
def store() -> InMemoryStore:
    """Empty persistent store."""
    return InMemoryStore()


def completed_payload(
    text: str,
    response_id: str = "resp_1",
    extra_output: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """A ``completed`` Responses API object whose final message is ``text``."""
    return {
        "id": response_id,
        "status": "completed",
        "output": [
            *(extra_output or []),
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            },
        ],
    }


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Factory for completed Responses API objects."""
    return completed_payload


class ScriptedBackend:
    """Backend double replaying a fixed sequence of poll results.

    Items in ``polls`` are either response dicts or exceptions to raise.
    Exceptions in ``submit_errors`` are raised, in order, by the first
    submissions.
    """

    def __init__(
        self,
        polls: list[Any],
        response_id: str = "resp_1",
        submit_errors: list[Exception] | None = None,
    ) -> None:
        self.response_id = response_id
        self._polls = list(polls)
        self._submit_errors = list(submit_errors or [])
        self.submitted: list[Any] = []
        self.submit_attempts = 0
        self.poll_count = 0

    async def create_response(self, job_spec) -> dict[str, Any]:
        self.submit_attempts += 1
        if self._submit_errors:
            raise self._submit_errors.pop(0)
        self.submitted.append(job_spec)
        return {"id": self.response_id, "status": "queued"}

    async def get_response(self, response_id: str) -> dict[str, Any]:
        assert response_id == self.response_id
        self.poll_count += 1
        item = self._polls.pop(0) if len(self._polls) > 1 else self._polls[0]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def scripted_backend() -> Callable[..., ScriptedBackend]:
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def no_sleep() -> Callable[[float], Any]:
    """Sleep replacement that records requested delays on ``.calls``."""

    async def _sleep(seconds: float) -> None:
        _sleep.calls.append(seconds)

    _sleep.calls = []
    return _sleep


@pytest.fixture
def sample_election() -> ElectionRecord:
    """A two-candidate governor race."""
    return ElectionRecord(
        id="california_governor_2026",
        name="California Governor Election 2026",
        electionDay="2026-11-03",
        office="Governor",
        candidates=[
            CandidateRecord(name="Jane Doe", party="Democratic", office="Governor"),
            CandidateRecord(name="John Roe", party="Republican", office="Governor"),
        ],
    )


@pytest.fixture
def sample_survey() -> SurveyResponseSet:
    """Survey with one answered priority topic."""
    return SurveyResponseSet(
        priorityTopics=["healthcare", "education", "taxes"],
        surveyResponses={"healthcare_0": 5, "healthcare_1": 2},
        sessionId="session-1",
    )
