"""Candidate alignment analysis schemas.

Field names use camelCase to match the JSON requested from the backend
and persisted in the analysis history.
"""

# ruff: noqa: N815

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civic_lens.schemas.common import RetrievalMetadata, _coerce_null_to_list, _coerce_to_text

DEFAULT_OVERALL_ASSESSMENT = "Analysis completed but overall assessment not available."


class Alignment(enum.StrEnum):
    """Ordinal match between a candidate stance and the user's preferences."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    OPPOSED = "opposed"


def parse_alignment(value: str | None) -> Alignment | None:
    """Map a raw alignment tag to an Alignment, or None if unrecognized."""
    if not value:
        return None
    try:
        return Alignment(value.strip().lower())
    except ValueError:
        return None


class CandidateAlignment(BaseModel):
    """One candidate's stance and alignment on a topic.

    ``alignment`` keeps whatever tag the model produced (trimmed and
    lower-cased); use ``recognized_alignment`` to tell the four known
    levels from anything else.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    party: str = ""
    stance: str = ""
    alignment: str = ""
    alignmentReason: str = ""

    @field_validator("party", "stance", "alignmentReason", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _coerce_to_text(v)

    @field_validator("alignment", mode="before")
    @classmethod
    def _normalize_alignment(cls, v: Any) -> str:
        # Non-string tags are kept verbatim so they stay unrecognized.
        if v is None:
            return ""
        return v.strip().lower() if isinstance(v, str) else str(v)

    @property
    def recognized_alignment(self) -> Alignment | None:
        return parse_alignment(self.alignment)


class TopicAnalysis(BaseModel):
    """Per-topic comparison of all candidates."""

    model_config = ConfigDict(extra="allow")

    topic: str
    topicTitle: str = ""
    candidates: list[CandidateAlignment] = Field(default_factory=list)

    @field_validator("candidates", mode="before")
    @classmethod
    def _coerce_candidates(cls, v: Any) -> Any:
        return _coerce_null_to_list(v)

    @field_validator("topicTitle", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        return _coerce_to_text(v)


class AnalysisResult(BaseModel):
    """Personalized candidate comparison for one election."""

    model_config = ConfigDict(extra="allow")

    overallAssessment: str = DEFAULT_OVERALL_ASSESSMENT
    topicAnalysis: list[TopicAnalysis] = Field(default_factory=list)
    metadata: RetrievalMetadata

    @field_validator("topicAnalysis", mode="before")
    @classmethod
    def _coerce_topic_analysis(cls, v: Any) -> Any:
        return _coerce_null_to_list(v)

    @field_validator("overallAssessment", mode="before")
    @classmethod
    def _coerce_assessment(cls, v: Any) -> str:
        return _coerce_to_text(v) or DEFAULT_OVERALL_ASSESSMENT
