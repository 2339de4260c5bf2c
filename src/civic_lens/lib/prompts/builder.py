"""Build task descriptions for long-running web-search jobs.

The expected JSON shape is described in the prompt text only; the backend
is not asked to enforce a schema, so results go through the tolerant
extractor in ``civic_lens.lib.extractor``.
"""

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from civic_lens.schemas.election import ElectionRecord

DEFAULT_OFFICES: tuple[str, ...] = ("Governor", "Lieutenant Governor")


class JobKind(StrEnum):
    """Kinds of backend job the pipeline submits."""

    ELECTION_DISCOVERY = "election_discovery"
    CANDIDATE_ANALYSIS = "candidate_analysis"


# Method tags recorded in result metadata
METHOD_TAGS: dict[JobKind, str] = {
    JobKind.ELECTION_DISCOVERY: "openai_responses_api_web_search",
    JobKind.CANDIDATE_ANALYSIS: "openai_responses_api_candidate_analysis",
}


@dataclass
class JobSpec:
    """A backend job request: task text plus web-search tool declaration."""

    kind: JobKind
    prompt: str
    allowed_domains: list[str] = field(default_factory=list)
    tool_choice: str = "auto"
    temperature: float | None = None

    @property
    def method(self) -> str:
        return METHOD_TAGS[self.kind]

    def to_request_body(self, model: str) -> dict[str, Any]:
        """Serialize into a Responses API request body.

        Args:
            model: Backend model name.

        Returns:
            JSON-serializable request body.
        """
        tool: dict[str, Any] = {"type": "web_search"}
        if self.allowed_domains:
            tool["filters"] = {"allowed_domains": list(self.allowed_domains)}

        body: dict[str, Any] = {
            "model": model,
            "tools": [tool],
            "tool_choice": self.tool_choice,
            "include": ["web_search_call.action.sources"],
            "input": self.prompt,
        }
        if self.temperature is not None:
            body["temperature"] = self.temperature
        return body


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def _election_template(state: str, year: int, office: str) -> dict[str, Any]:
    return {
        "id": f"{_slug(state)}_{_slug(office)}_{year}",
        "name": f"{state} {office} Election {year}",
        "electionDay": f"{year}-11-04",
        "office": office,
        "candidates": [
            {
                "name": "EXACT_BALLOT_NAME",
                "party": "VERIFIED_PARTY",
                "office": office,
                "candidateUrl": None,
                "photoUrl": None,
            }
        ],
        "verificationNotes": "List sources used and any uncertainties",
    }


def build_election_discovery_job(
    state: str,
    year: int,
    offices: Sequence[str] = DEFAULT_OFFICES,
    *,
    allowed_domains: Sequence[str] = (),
) -> JobSpec:
    """Build the job that discovers current candidates for statewide offices.

    One election object is requested per office; joint tickets (e.g.
    governor and lieutenant governor) are never merged.

    Args:
        state: Full state name.
        year: Election year.
        offices: Offices to discover, one election entry each.
        allowed_domains: Optional web search domain allowlist.

    Returns:
        A JobSpec for the discovery task.
    """
    office_list = list(offices) or list(DEFAULT_OFFICES)
    office_names = " and ".join(o.lower() for o in office_list)
    shape = {"elections": [_election_template(state, year, office) for office in office_list]}

    prompt = f"""Find who is running for the {year} {state} {office_names} election, and their party affiliation.

STRICT INCLUSION CRITERIA:
- Only current, ballot-qualified candidates for the {year} general election
- NO "withdrawn", "suspended", or "primary only" candidates
- NO historical or past election data
- Party affiliation confirmed from a reliable source

Return one election object PER OFFICE. Never merge offices into a single election entry, even when candidates
run on a joint ticket.

REQUIRED OUTPUT FORMAT (JSON):
{json.dumps(shape, indent=2)}

If you cannot find definitive, current candidate information for an office, return an empty candidates array for
that office and explain in verificationNotes. Better to return no data than incorrect data."""

    return JobSpec(
        kind=JobKind.ELECTION_DISCOVERY,
        prompt=prompt,
        allowed_domains=list(allowed_domains),
    )


def build_analysis_job(
    election: ElectionRecord,
    preference_context: str,
    priority_topics: Sequence[str] = (),
    *,
    allowed_domains: Sequence[str] = (),
) -> JobSpec:
    """Build the job that scores each candidate against the user's preferences.

    Args:
        election: Election whose candidates are analysed.
        preference_context: Rendered preference block from ``build_context``.
        priority_topics: Topic ids echoed back in the requested metadata.
        allowed_domains: Optional web search domain allowlist.

    Returns:
        A JobSpec for the analysis task.
    """
    candidate_list = ", ".join(f"{c.name} ({c.party})" for c in election.candidates)
    analysis_date = datetime.now(UTC).isoformat()

    prompt = f"""You are analyzing candidates for the {election.name or 'election'} to provide personalized recommendations \
based on a voter's survey responses.

CANDIDATES TO ANALYZE: {candidate_list}

USER'S PRIORITY TOPICS AND PREFERENCES:
{preference_context}

TASK: Research each candidate's detailed positions on the user's priority topics using current information from \
Ballotpedia and other reliable sources. Then provide a comprehensive analysis in this exact JSON format:

{{
  "overallAssessment": "A detailed paragraph explaining which candidates align most closely with the voter's \
expressed priorities, particularly highlighting the strongest and weakest alignments across all topics.",
  "topicAnalysis": [
    {{
      "topic": "topic-id",
      "topicTitle": "Topic Title",
      "candidates": [
        {{
          "name": "Candidate Name",
          "party": "Party",
          "stance": "Detailed description of candidate's position on this topic",
          "alignment": "strong" | "moderate" | "weak" | "opposed",
          "alignmentReason": "Explanation of why this alignment score was given based on user's survey responses"
        }}
      ]
    }}
  ],
  "metadata": {{
    "analysisDate": "{analysis_date}",
    "topicsAnalyzed": {json.dumps(list(priority_topics))},
    "candidatesAnalyzed": {len(election.candidates)}
  }}
}}

ALIGNMENT SCORING GUIDE:
- "strong": Candidate's position closely matches user's preferences (survey responses 4-5 align with candidate's stance)
- "moderate": Candidate's position partially matches user's preferences (some alignment but not complete)
- "weak": Candidate's position has minimal alignment with user's preferences
- "opposed": Candidate's position directly contradicts user's preferences (survey responses 1-2 oppose \
candidate's stance)

Focus on finding specific policy positions, voting records, and public statements for each candidate on each topic. \
Be thorough and accurate in your research."""

    return JobSpec(
        kind=JobKind.CANDIDATE_ANALYSIS,
        prompt=prompt,
        allowed_domains=list(allowed_domains),
    )
