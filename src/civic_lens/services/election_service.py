"""Election service — discovers upcoming statewide elections for an address."""

import json
from collections.abc import Sequence
from datetime import date

from loguru import logger

from civic_lens.lib.errors import MalformedPayload
from civic_lens.lib.extractor.extractor import extract
from civic_lens.lib.jurisdiction.resolver import resolve_state
from civic_lens.lib.prompts.builder import DEFAULT_OFFICES, METHOD_TAGS, JobKind, build_election_discovery_job
from civic_lens.lib.responses.poller import JobPoller
from civic_lens.lib.storage.keys import CACHED_ELECTION_DATA_KEY
from civic_lens.lib.storage.kv import KeyValueStore
from civic_lens.schemas.common import RetrievalMetadata
from civic_lens.schemas.election import ElectionDataResult, ElectionRecord, NormalizedInput


def default_election_year(today: date | None = None) -> int:
    """Current year if even (a general election year), else the next year."""
    year = (today or date.today()).year
    return year if year % 2 == 0 else year + 1


def degraded_election_data(error: str, year: int, *, response_id: str | None = None) -> ElectionDataResult:
    """Placeholder result returned when the discovery answer cannot be parsed."""
    return ElectionDataResult(
        elections=[
            ElectionRecord(
                id="unknown_election",
                name="Election Data Unavailable",
                electionDay=f"{year}-11-04",
                office="Governor",
                candidates=[],
            )
        ],
        metadata=RetrievalMetadata(
            method=METHOD_TAGS[JobKind.ELECTION_DISCOVERY],
            responseId=response_id,
            error=error,
        ),
    )


async def get_election_data_by_address(
    poller: JobPoller,
    address: str,
    year: int | None = None,
    *,
    offices: Sequence[str] = DEFAULT_OFFICES,
    allowed_domains: Sequence[str] = (),
) -> ElectionDataResult:
    """Find current statewide elections and candidates for an address.

    Args:
        poller: Job poller bound to the AI backend.
        address: Free-text mailing address.
        year: Election year (defaults to ``default_election_year()``).
        offices: Offices to discover, one election entry each.
        allowed_domains: Optional web search domain allowlist.

    Returns:
        Elections for the resolved state.  When the backend answer cannot
        be parsed, a single placeholder election with no candidates and
        ``metadata.error`` set.

    Raises:
        ValueError: If the address is blank.
        UnresolvableJurisdiction: If no state can be derived from the address.
        JobFailed, JobTimedOut, TransportError, ConfigurationError:
            When the backend job cannot be completed.
    """
    if not address or not address.strip():
        msg = "address must be a non-empty string"
        raise ValueError(msg)

    year = year or default_election_year()
    state = resolve_state(address)
    logger.info("Fetching {} elections for {} ({})", year, state, ", ".join(offices))

    job_spec = build_election_discovery_job(state, year, offices, allowed_domains=allowed_domains)
    job_result = await poller.run(job_spec)

    try:
        result = extract(job_result, ElectionDataResult, expected_fields=("elections",))
    except MalformedPayload as exc:
        logger.error("Failed to extract election data from job {}: {}", job_result.response_id, exc)
        result = degraded_election_data(str(exc), year, response_id=job_result.response_id)

    result.state = state
    result.normalizedInput = NormalizedInput(line1=address)
    logger.info("Found {} election(s) for {}", len(result.elections), state)
    return result


async def cache_elections(store: KeyValueStore, data: ElectionDataResult) -> None:
    """Cache fetched elections so they can be analysed later by id."""
    payload = [e.model_dump(mode="json") for e in data.elections]
    await store.set(CACHED_ELECTION_DATA_KEY, json.dumps(payload))


async def get_cached_election(store: KeyValueStore, election_id: str) -> ElectionRecord | None:
    """Look up a previously cached election by id."""
    raw = await store.get(CACHED_ELECTION_DATA_KEY)
    if not raw:
        return None
    try:
        elections = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Cached election data is not valid JSON")
        return None
    for item in elections:
        if isinstance(item, dict) and item.get("id") == election_id:
            return ElectionRecord.model_validate(item)
    return None
