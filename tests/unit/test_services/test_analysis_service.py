"""Unit tests for the analysis service."""

import json
from unittest.mock import AsyncMock

import pytest

from civic_lens.lib.errors import (
    AnalysisPreconditionError,
    InsufficientSurveyDataError,
    JobFailed,
    NoCandidatesError,
    NoPriorityTopicsError,
)
from civic_lens.lib.prompts.builder import JobKind
from civic_lens.lib.responses import JobPoller
from civic_lens.schemas.analysis import Alignment
from civic_lens.schemas.election import ElectionRecord
from civic_lens.schemas.survey import SurveyResponseSet
from civic_lens.services import analysis_service

_ANALYSIS = {
    "overallAssessment": "Jane Doe aligns most closely with your healthcare priorities.",
    "topicAnalysis": [
        {
            "topic": "healthcare",
            "topicTitle": "Healthcare",
            "candidates": [
                {
                    "name": "Jane Doe",
                    "party": "Democratic",
                    "stance": "Supports a public option.",
                    "alignment": "strong",
                    "alignmentReason": "You strongly support universal coverage.",
                },
                {
                    "name": "John Roe",
                    "party": "Republican",
                    "stance": "Favors private insurance markets.",
                    "alignment": "Opposed",
                    "alignmentReason": "You disagree with private-first coverage.",
                },
            ],
        }
    ],
}


class TestIsUsableForAnalysis:
    """Tests for is_usable_for_analysis."""

    @pytest.mark.parametrize(
        ("topics", "responses", "expected"),
        [
            (["healthcare"], {"healthcare_0": 5}, True),
            (["healthcare", "taxes"], {"taxes_2": 1}, True),
            ([], {"healthcare_0": 5}, False),
            (["healthcare"], {}, False),
            (["healthcare"], {"taxes_0": 3}, False),
        ],
    )
    def test_cases(self, topics, responses, expected):
        survey = SurveyResponseSet(priorityTopics=topics, surveyResponses=responses)
        assert analysis_service.is_usable_for_analysis(survey) is expected


class TestValidateAnalysisInputs:
    """Tests for precondition checks."""

    def test_no_candidates(self, sample_election, sample_survey):
        election = sample_election.model_copy(update={"candidates": []})
        with pytest.raises(NoCandidatesError, match="No candidates found in election data"):
            analysis_service.validate_analysis_inputs(election, sample_survey)

    def test_no_priority_topics(self, sample_election):
        survey = SurveyResponseSet(surveyResponses={"healthcare_0": 5})
        with pytest.raises(NoPriorityTopicsError, match="No priority topics"):
            analysis_service.validate_analysis_inputs(sample_election, survey)

    def test_insufficient_answers(self, sample_election):
        survey = SurveyResponseSet(priorityTopics=["healthcare"], surveyResponses={"taxes_0": 4})
        with pytest.raises(InsufficientSurveyDataError, match="complete the onboarding survey"):
            analysis_service.validate_analysis_inputs(sample_election, survey)

    def test_precondition_family(self):
        assert issubclass(NoCandidatesError, AnalysisPreconditionError)
        assert issubclass(InsufficientSurveyDataError, AnalysisPreconditionError)


class TestAnalyze:
    """Tests for analyze."""

    @pytest.mark.asyncio
    async def test_precondition_failure_makes_no_backend_call(self, sample_election):
        poller = AsyncMock(spec=JobPoller)
        survey = SurveyResponseSet(priorityTopics=["healthcare"], surveyResponses={})
        with pytest.raises(InsufficientSurveyDataError):
            await analysis_service.analyze(poller, sample_election, survey)
        poller.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_end_to_end(self, scripted_backend, no_sleep, make_payload, sample_election, sample_survey):
        completed = make_payload(f"```json\n{json.dumps(_ANALYSIS)}\n```", response_id="resp_7")
        backend = scripted_backend([{"id": "resp_7", "status": "in_progress"}, completed], response_id="resp_7")
        poller = JobPoller(backend, sleep=no_sleep)

        result = await analysis_service.analyze(
            poller, sample_election, sample_survey, allowed_domains=["ballotpedia.org"]
        )

        assert result.overallAssessment.startswith("Jane Doe aligns")
        candidates = result.topicAnalysis[0].candidates
        assert [c.recognized_alignment for c in candidates] == [Alignment.STRONG, Alignment.OPPOSED]
        assert result.metadata.method == "openai_responses_api_candidate_analysis"
        assert result.metadata.responseId == "resp_7"
        assert result.metadata.error is None

        job_spec = backend.submitted[0]
        assert job_spec.kind == JobKind.CANDIDATE_ANALYSIS
        assert job_spec.allowed_domains == ["ballotpedia.org"]
        assert "HEALTHCARE:" in job_spec.prompt
        assert "User response: Strongly Agree" in job_spec.prompt
        assert "EDUCATION:" not in job_spec.prompt

    @pytest.mark.asyncio
    async def test_minimal_scenario_returns_structure_unchanged(self, scripted_backend, no_sleep, make_payload):
        election = ElectionRecord(
            id="e1",
            name="Test",
            electionDay="2025-11-04",
            candidates=[{"name": "A", "party": "X"}, {"name": "B", "party": "Y"}],
        )
        survey = SurveyResponseSet(priorityTopics=["healthcare"], surveyResponses={"healthcare_0": 5})
        topic_analysis = [
            {
                "topic": "healthcare",
                "topicTitle": "Healthcare",
                "candidates": [
                    {
                        "name": "A",
                        "party": "X",
                        "stance": "supports universal coverage",
                        "alignment": "strong",
                        "alignmentReason": "matches strong agree",
                    }
                ],
            }
        ]
        text = json.dumps({"overallAssessment": "A fits best.", "topicAnalysis": topic_analysis})
        poller = JobPoller(scripted_backend([make_payload(text)]), sleep=no_sleep)

        result = await analysis_service.analyze(poller, election, survey)

        assert [t.model_dump() for t in result.topicAnalysis] == topic_analysis
        assert result.metadata.fetchedAt

    @pytest.mark.asyncio
    async def test_unparseable_answer_is_degraded(
        self, scripted_backend, no_sleep, make_payload, sample_election, sample_survey
    ):
        backend = scripted_backend([make_payload("I could not research these candidates.")])
        poller = JobPoller(backend, sleep=no_sleep)

        result = await analysis_service.analyze(poller, sample_election, sample_survey)

        assert result.overallAssessment.startswith("Analysis could not be completed. Error:")
        assert result.topicAnalysis == []
        assert "No valid JSON found" in result.metadata.error
        assert result.metadata.responseId == "resp_1"

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self, scripted_backend, no_sleep, sample_election, sample_survey):
        backend = scripted_backend([{"id": "resp_1", "status": "failed", "error": {"message": "quota"}}])
        poller = JobPoller(backend, sleep=no_sleep)

        with pytest.raises(JobFailed, match="quota"):
            await analysis_service.analyze(poller, sample_election, sample_survey)

    @pytest.mark.asyncio
    async def test_non_string_fields_do_not_degrade(
        self, scripted_backend, no_sleep, make_payload, sample_election, sample_survey
    ):
        answer = json.loads(json.dumps(_ANALYSIS))
        jane, john = answer["topicAnalysis"][0]["candidates"]
        jane["alignment"] = 3
        jane["stance"] = ["Public option", "Lower drug prices"]
        john["alignmentReason"] = 42
        poller = JobPoller(scripted_backend([make_payload(json.dumps(answer))]), sleep=no_sleep)

        result = await analysis_service.analyze(poller, sample_election, sample_survey)

        assert result.metadata.error is None
        first, second = result.topicAnalysis[0].candidates
        assert first.alignment == "3"
        assert first.recognized_alignment is None
        assert first.stance == "Public option, Lower drug prices"
        assert second.recognized_alignment is Alignment.OPPOSED
        assert second.alignmentReason == "42"

    @pytest.mark.asyncio
    async def test_degraded_result_keeps_raw_output(
        self, scripted_backend, no_sleep, make_payload, sample_election, sample_survey
    ):
        payload = make_payload("No JSON here.")
        poller = JobPoller(scripted_backend([payload]), sleep=no_sleep)

        result = await analysis_service.analyze(poller, sample_election, sample_survey)

        raw = result.metadata.model_extra["rawResponse"]
        assert json.loads(raw) == payload["output"]

    def test_degraded_without_output(self):
        result = analysis_service.degraded_analysis("boom")
        assert result.metadata.model_extra["rawResponse"] == analysis_service.NO_OUTPUT
        assert result.metadata.error == "boom"
