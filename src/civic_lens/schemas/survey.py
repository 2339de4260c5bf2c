"""Survey response schemas for onboarding data."""

# ruff: noqa: N815

from pydantic import BaseModel, Field


class SurveyResponseSet(BaseModel):
    """A user's priority topics and Likert answers.

    ``surveyResponses`` keys follow ``"<topicId>_<questionIndex>"`` with
    integer values from 1 (Strongly Disagree) to 5 (Strongly Agree).
    """

    priorityTopics: list[str] = Field(default_factory=list)
    surveyResponses: dict[str, int] = Field(default_factory=dict)
    sessionId: str | None = None
