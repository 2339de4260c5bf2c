"""Analysis service — orchestrates personalized candidate alignment analysis.

Validates inputs before any backend call, then drives
context -> job -> poll -> extract.  Persistence is left to the caller
(see ``history_service``).
"""

import json
from typing import Any

from loguru import logger

from civic_lens.lib.errors import (
    InsufficientSurveyDataError,
    MalformedPayload,
    NoCandidatesError,
    NoPriorityTopicsError,
)
from civic_lens.lib.extractor.extractor import extract
from civic_lens.lib.prompts.builder import METHOD_TAGS, JobKind, build_analysis_job
from civic_lens.lib.prompts.catalog import QUESTION_BANK, QUESTIONS_PER_TOPIC, response_key
from civic_lens.lib.prompts.preferences import build_context
from civic_lens.lib.responses.poller import JobPoller
from civic_lens.schemas.analysis import AnalysisResult
from civic_lens.schemas.common import RetrievalMetadata
from civic_lens.schemas.election import ElectionRecord
from civic_lens.schemas.survey import SurveyResponseSet

NO_OUTPUT = "No output available"


def is_usable_for_analysis(survey: SurveyResponseSet) -> bool:
    """Whether survey data is sufficient to personalize an analysis.

    True iff there is at least one priority topic, at least one answer,
    and at least one priority topic has an answered question.
    """
    if not survey.priorityTopics or not survey.surveyResponses:
        return False
    return any(
        response_key(topic_id, index) in survey.surveyResponses
        for topic_id in survey.priorityTopics
        for index in range(QUESTIONS_PER_TOPIC)
    )


def validate_analysis_inputs(election: ElectionRecord, survey: SurveyResponseSet) -> None:
    """Raise the matching precondition error for unusable input.

    Raises:
        NoCandidatesError: The election has no candidates.
        NoPriorityTopicsError: The survey has no priority topics.
        InsufficientSurveyDataError: No priority topic has an answer.
    """
    if not election.candidates:
        raise NoCandidatesError
    if not survey.priorityTopics:
        raise NoPriorityTopicsError
    if not is_usable_for_analysis(survey):
        raise InsufficientSurveyDataError


def degraded_analysis(
    error: str,
    *,
    response_id: str | None = None,
    output: list[dict[str, Any]] | None = None,
) -> AnalysisResult:
    """Build the placeholder result returned when extraction fails.

    The job's serialized output is kept in ``metadata.rawResponse``.
    """
    return AnalysisResult(
        overallAssessment=f"Analysis could not be completed. Error: {error}",
        topicAnalysis=[],
        metadata=RetrievalMetadata(
            method=METHOD_TAGS[JobKind.CANDIDATE_ANALYSIS],
            responseId=response_id,
            error=error,
            rawResponse=json.dumps(output, indent=2) if output else NO_OUTPUT,
        ),
    )


async def analyze(
    poller: JobPoller,
    election: ElectionRecord,
    survey: SurveyResponseSet,
    *,
    allowed_domains: list[str] | None = None,
) -> AnalysisResult:
    """Compare an election's candidates against the user's survey answers.

    Args:
        poller: Job poller bound to the AI backend.
        election: Election with at least one candidate.
        survey: The user's priority topics and answers.
        allowed_domains: Optional web search domain allowlist.

    Returns:
        The analysis, or a degraded result carrying ``metadata.error`` when
        the backend answer could not be parsed.

    Raises:
        NoCandidatesError, NoPriorityTopicsError, InsufficientSurveyDataError:
            Before any backend call, on unusable input.
        JobFailed, JobTimedOut, TransportError, ConfigurationError:
            When the backend job cannot be completed.
    """
    validate_analysis_inputs(election, survey)
    logger.info(
        "Starting candidate analysis for {} ({} candidates, {} topics)",
        election.id,
        len(election.candidates),
        len(survey.priorityTopics),
    )

    context = build_context(survey.priorityTopics, survey.surveyResponses, QUESTION_BANK)
    job_spec = build_analysis_job(
        election,
        context,
        survey.priorityTopics,
        allowed_domains=allowed_domains or [],
    )
    job_result = await poller.run(job_spec)

    try:
        result = extract(job_result, AnalysisResult, expected_fields=("overallAssessment", "topicAnalysis"))
    except MalformedPayload as exc:
        logger.error("Failed to extract analysis data from job {}: {}", job_result.response_id, exc)
        return degraded_analysis(str(exc), response_id=job_result.response_id, output=job_result.output)

    logger.info("Candidate analysis for {} completed with {} topic(s)", election.id, len(result.topicAnalysis))
    return result
