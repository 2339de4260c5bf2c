"""Election and candidate schemas produced by election discovery.

Field names use camelCase to match the JSON requested from the backend.
"""

# ruff: noqa: N815

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civic_lens.schemas.common import RetrievalMetadata, _coerce_null_to_list, _coerce_null_to_str


class CandidateRecord(BaseModel):
    """A ballot-qualified candidate for one office."""

    model_config = ConfigDict(extra="allow")

    name: str
    party: str = ""
    office: str = ""
    candidateUrl: str | None = None
    photoUrl: str | None = None

    @field_validator("party", "office", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        return _coerce_null_to_str(v)


class ElectionRecord(BaseModel):
    """A single-office election with its candidate slate."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    electionDay: str
    office: str = ""
    candidates: list[CandidateRecord] = Field(default_factory=list)

    @field_validator("candidates", mode="before")
    @classmethod
    def _coerce_candidates(cls, v: Any) -> Any:
        return _coerce_null_to_list(v)

    @field_validator("office", mode="before")
    @classmethod
    def _coerce_office(cls, v: Any) -> Any:
        return _coerce_null_to_str(v)


class NormalizedInput(BaseModel):
    """The address as supplied by the user."""

    line1: str


class ElectionDataResult(BaseModel):
    """Result of an election discovery run for one address."""

    model_config = ConfigDict(extra="allow")

    elections: list[ElectionRecord] = Field(default_factory=list)
    metadata: RetrievalMetadata
    state: str | None = None
    normalizedInput: NormalizedInput | None = None

    @field_validator("elections", mode="before")
    @classmethod
    def _coerce_elections(cls, v: Any) -> Any:
        return _coerce_null_to_list(v)

    def find_election(self, election_id: str) -> ElectionRecord | None:
        """Return the election with the given id, if present."""
        return next((e for e in self.elections if e.id == election_id), None)
