"""Integration tests for the civic-lens CLI commands."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from civic_lens.cli.app import app
from civic_lens.lib.errors import JobTimedOut, UnresolvableJurisdiction
from civic_lens.schemas.analysis import AnalysisResult
from civic_lens.schemas.common import RetrievalMetadata
from civic_lens.schemas.election import ElectionDataResult, NormalizedInput

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(settings):
    """Point every command at temp-dir storage and leave logging alone."""
    with (
        patch("civic_lens.core.config.get_settings", return_value=settings),
        patch("civic_lens.cli.app.get_settings", return_value=settings),
        patch("civic_lens.cli.app.setup_logging"),
    ):
        yield settings


@pytest.fixture
def election_data(sample_election) -> ElectionDataResult:
    return ElectionDataResult(
        elections=[sample_election],
        metadata=RetrievalMetadata(method="openai_responses_api_web_search"),
        state="California",
        normalizedInput=NormalizedInput(line1="Sacramento, CA"),
    )


@pytest.fixture
def analysis() -> AnalysisResult:
    return AnalysisResult.model_validate(
        {
            "overallAssessment": "Jane Doe is the closest match.",
            "topicAnalysis": [
                {
                    "topic": "healthcare",
                    "topicTitle": "Healthcare",
                    "candidates": [
                        {"name": "Jane Doe", "party": "Democratic", "alignment": "strong", "stance": "Public option"},
                        {"name": "John Roe", "party": "Republican", "alignment": "leaning"},
                    ],
                }
            ],
            "metadata": {"method": "openai_responses_api_candidate_analysis"},
        }
    )


def _complete_survey() -> None:
    assert runner.invoke(app, ["survey", "topics", "healthcare", "education", "taxes"]).exit_code == 0
    assert runner.invoke(app, ["survey", "answer", "healthcare", "0", "5"]).exit_code == 0


class TestSurveyCLI:
    """Tests for the `survey` commands."""

    def test_topics_and_answers(self, cli_settings):
        result = runner.invoke(app, ["survey", "topics", "healthcare", "education", "taxes"])
        assert result.exit_code == 0
        assert "Saved 3 priority topics: healthcare, education, taxes" in result.output

        result = runner.invoke(app, ["survey", "answer", "healthcare", "0", "5"])
        assert result.exit_code == 0
        assert "Strongly Agree" in result.output

        result = runner.invoke(app, ["survey", "show"])
        assert result.exit_code == 0
        assert "HEALTHCARE:" in result.output
        assert "Survey status: ready" in result.output

        stored = json.loads(cli_settings.local_storage_path.read_text())
        session_id = json.loads(cli_settings.session_storage_path.read_text())["user_session_id"]
        assert json.loads(stored[f"onboarding_survey_responses_{session_id}"]) == {"healthcare_0": 5}

    def test_too_few_topics(self):
        result = runner.invoke(app, ["survey", "topics", "healthcare"])
        assert result.exit_code == 1
        assert "Error: Choose between 3 and 7" in result.output

    def test_invalid_answer(self):
        result = runner.invoke(app, ["survey", "answer", "healthcare", "0", "9"])
        assert result.exit_code == 1
        assert "between 1 and 5" in result.output

    def test_show_empty(self):
        result = runner.invoke(app, ["survey", "show"])
        assert result.exit_code == 0
        assert "Priority topics: (none)" in result.output
        assert "Survey status: incomplete" in result.output

    def test_clear(self):
        _complete_survey()
        result = runner.invoke(app, ["survey", "clear"])
        assert result.exit_code == 0
        assert "Cleared 2 item(s)" in result.output


class TestElectionCLI:
    """Tests for the `election fetch` command."""

    def test_fetch_prints_and_caches(self, cli_settings, election_data):
        with patch(
            "civic_lens.services.election_service.get_election_data_by_address",
            new_callable=AsyncMock,
            return_value=election_data,
        ) as mock_fetch:
            result = runner.invoke(app, ["election", "fetch", "--address", "Sacramento, CA", "--year", "2026"])

        assert result.exit_code == 0
        assert "State: California" in result.output
        assert "[california_governor_2026]" in result.output
        assert "Jane Doe (Democratic)" in result.output
        args, kwargs = mock_fetch.call_args
        assert args[1:] == ("Sacramento, CA", 2026)
        assert kwargs["offices"] == ["Governor", "Lieutenant Governor"]

        stored = json.loads(cli_settings.local_storage_path.read_text())
        assert json.loads(stored["cached_election_data"])[0]["id"] == "california_governor_2026"

    def test_fetch_unresolvable_address(self):
        with patch(
            "civic_lens.services.election_service.get_election_data_by_address",
            new_callable=AsyncMock,
            side_effect=UnresolvableJurisdiction("London"),
        ):
            result = runner.invoke(app, ["election", "fetch", "--address", "London"])

        assert result.exit_code == 1
        assert "Error: Failed to get election data: Could not determine state from address" in result.output

    def test_fetch_requires_address(self):
        result = runner.invoke(app, ["election", "fetch"])
        assert result.exit_code != 0


class TestAnalyzeAndHistoryCLI:
    """Tests for `analyze run` and the `history` commands."""

    def _fetch(self, election_data) -> None:
        with patch(
            "civic_lens.services.election_service.get_election_data_by_address",
            new_callable=AsyncMock,
            return_value=election_data,
        ):
            assert runner.invoke(app, ["election", "fetch", "--address", "Sacramento, CA"]).exit_code == 0

    def test_analyze_unknown_election(self):
        result = runner.invoke(app, ["analyze", "run", "--election-id", "nope"])
        assert result.exit_code == 1
        assert "Election data not found" in result.output

    def test_analyze_without_survey(self, election_data):
        self._fetch(election_data)
        result = runner.invoke(app, ["analyze", "run", "--election-id", "california_governor_2026"])
        assert result.exit_code == 1
        assert "Error: Failed to analyze candidates: No priority topics" in result.output

    def test_analyze_timeout(self, election_data):
        self._fetch(election_data)
        _complete_survey()
        with patch(
            "civic_lens.services.analysis_service.analyze",
            new_callable=AsyncMock,
            side_effect=JobTimedOut("resp_1", 40),
        ):
            result = runner.invoke(app, ["analyze", "run", "--election-id", "california_governor_2026"])
        assert result.exit_code == 1
        assert "please try again" in result.output

    def test_analyze_then_history(self, election_data, analysis):
        self._fetch(election_data)
        _complete_survey()
        with patch(
            "civic_lens.services.analysis_service.analyze",
            new_callable=AsyncMock,
            return_value=analysis,
        ):
            result = runner.invoke(app, ["analyze", "run", "--election-id", "california_governor_2026"])

        assert result.exit_code == 0
        assert "Jane Doe is the closest match." in result.output
        assert "Jane Doe (Democratic): strong" in result.output
        assert "John Roe (Republican): unrecognized" in result.output
        entry_id = result.output.strip().splitlines()[-1].rsplit(" ", 1)[-1]

        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0
        assert entry_id in result.output
        assert "California Governor Election 2026" in result.output

        result = runner.invoke(app, ["history", "show"])
        assert result.exit_code == 0
        assert "Jane Doe is the closest match." in result.output

        result = runner.invoke(app, ["history", "delete", entry_id])
        assert result.exit_code == 0
        result = runner.invoke(app, ["history", "list"])
        assert "No saved analyses yet" in result.output

    def test_history_show_missing(self):
        result = runner.invoke(app, ["history", "show", "nope"])
        assert result.exit_code == 1
        assert "History entry nope not found" in result.output

    def test_history_delete_missing(self):
        result = runner.invoke(app, ["history", "delete", "nope"])
        assert result.exit_code == 1

    def test_history_rerun_missing(self):
        result = runner.invoke(app, ["history", "rerun", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.output
