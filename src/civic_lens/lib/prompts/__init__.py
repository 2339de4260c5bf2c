"""Prompt library — task descriptions and preference context for backend jobs.

Public API:
    - JobSpec: Task text plus web-search tool declaration
    - JobKind: Election discovery or candidate analysis
    - build_election_discovery_job: Discovery task for a state and year
    - build_analysis_job: Alignment analysis task for an election
    - build_context: Render survey answers as a preference summary
    - QUESTION_BANK / TOPIC_TITLES: Topic catalog
"""

from civic_lens.lib.prompts.builder import (
    DEFAULT_OFFICES,
    JobKind,
    JobSpec,
    build_analysis_job,
    build_election_discovery_job,
)
from civic_lens.lib.prompts.catalog import (
    LIKERT_LABELS,
    QUESTION_BANK,
    QUESTIONS_PER_TOPIC,
    TOPIC_TITLES,
    response_key,
    topic_title,
)
from civic_lens.lib.prompts.preferences import build_context, likert_label

__all__ = [
    "DEFAULT_OFFICES",
    "LIKERT_LABELS",
    "QUESTIONS_PER_TOPIC",
    "QUESTION_BANK",
    "TOPIC_TITLES",
    "JobKind",
    "JobSpec",
    "build_analysis_job",
    "build_context",
    "build_election_discovery_job",
    "likert_label",
    "response_key",
    "topic_title",
]
