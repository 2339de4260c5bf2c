"""Unit tests for the election service."""

import json
from datetime import date
from unittest.mock import AsyncMock

import pytest

from civic_lens.lib.errors import UnresolvableJurisdiction
from civic_lens.lib.responses import JobPoller
from civic_lens.services import election_service

_ELECTIONS = {
    "elections": [
        {
            "id": "california_governor_2026",
            "name": "California Governor Election 2026",
            "electionDay": "2026-11-03",
            "office": "Governor",
            "candidates": [{"name": "Jane Doe", "party": "Democratic", "office": "Governor"}],
            "verificationNotes": "Checked the Secretary of State list.",
        },
        {
            "id": "california_lieutenant_governor_2026",
            "name": "California Lieutenant Governor Election 2026",
            "electionDay": "2026-11-03",
            "office": "Lieutenant Governor",
            "candidates": [],
        },
    ]
}


class TestDefaultElectionYear:
    def test_even_year(self):
        assert election_service.default_election_year(date(2026, 3, 1)) == 2026

    def test_odd_year(self):
        assert election_service.default_election_year(date(2025, 12, 31)) == 2026


class TestGetElectionDataByAddress:
    """Tests for get_election_data_by_address."""

    @pytest.mark.asyncio
    async def test_success(self, scripted_backend, no_sleep, make_payload):
        backend = scripted_backend([make_payload(f"Here are the results: {json.dumps(_ELECTIONS)}")])
        poller = JobPoller(backend, sleep=no_sleep)
        address = "1315 10th St, Sacramento, CA 95814"

        result = await election_service.get_election_data_by_address(poller, address, 2026)

        assert result.state == "California"
        assert result.normalizedInput.line1 == address
        assert [e.office for e in result.elections] == ["Governor", "Lieutenant Governor"]
        assert result.elections[0].model_extra["verificationNotes"].startswith("Checked")
        assert result.metadata.method == "openai_responses_api_web_search"
        assert result.metadata.error is None

        prompt = backend.submitted[0].prompt
        assert "2026 California governor and lieutenant governor election" in prompt

    @pytest.mark.asyncio
    async def test_unparseable_answer_is_degraded(self, scripted_backend, no_sleep, make_payload):
        backend = scripted_backend([make_payload("No elections could be verified.")])
        poller = JobPoller(backend, sleep=no_sleep)

        result = await election_service.get_election_data_by_address(poller, "Austin, TX", 2026)

        assert result.state == "Texas"
        assert len(result.elections) == 1
        placeholder = result.elections[0]
        assert placeholder.id == "unknown_election"
        assert placeholder.name == "Election Data Unavailable"
        assert placeholder.electionDay == "2026-11-04"
        assert placeholder.candidates == []
        assert "No valid JSON found" in result.metadata.error

    @pytest.mark.asyncio
    async def test_custom_offices_and_domains(self, scripted_backend, no_sleep, make_payload):
        backend = scripted_backend([make_payload('{"elections": []}')])
        poller = JobPoller(backend, sleep=no_sleep)

        await election_service.get_election_data_by_address(
            poller,
            "Albany, New York",
            2026,
            offices=["Attorney General"],
            allowed_domains=["ballotpedia.org"],
        )

        job_spec = backend.submitted[0]
        assert "new_york_attorney_general_2026" in job_spec.prompt
        assert job_spec.allowed_domains == ["ballotpedia.org"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", ["", "   "])
    async def test_blank_address(self, address):
        poller = AsyncMock(spec=JobPoller)
        with pytest.raises(ValueError, match="non-empty"):
            await election_service.get_election_data_by_address(poller, address)
        poller.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_unresolvable_address(self):
        poller = AsyncMock(spec=JobPoller)
        with pytest.raises(UnresolvableJurisdiction):
            await election_service.get_election_data_by_address(poller, "10 Downing Street, London")
        poller.run.assert_not_called()


class TestElectionCache:
    """Tests for cache_elections and get_cached_election."""

    @pytest.mark.asyncio
    async def test_roundtrip(self, store, scripted_backend, no_sleep, make_payload):
        poller = JobPoller(scripted_backend([make_payload(json.dumps(_ELECTIONS))]), sleep=no_sleep)
        data = await election_service.get_election_data_by_address(poller, "Fresno, CA", 2026)

        await election_service.cache_elections(store, data)

        election = await election_service.get_cached_election(store, "california_governor_2026")
        assert election.candidates[0].name == "Jane Doe"
        assert await election_service.get_cached_election(store, "missing") is None

    @pytest.mark.asyncio
    async def test_empty_or_corrupt_cache(self, store):
        assert await election_service.get_cached_election(store, "x") is None
        await store.set("cached_election_data", "{oops")
        assert await election_service.get_cached_election(store, "x") is None
