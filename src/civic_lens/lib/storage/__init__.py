"""Storage library — injected key-value persistence and key naming.

Public API:
    - KeyValueStore: Async get/set/delete/keys Protocol
    - InMemoryStore: Dict-backed store (session scope, tests)
    - JsonFileStore: JSON-document store on the local device
    - priority_issues_key / survey_responses_key / analysis_history_key:
      Per-session key builders
"""

from civic_lens.lib.storage.keys import (
    CACHED_ELECTION_DATA_KEY,
    SESSION_ID_KEY,
    analysis_history_key,
    priority_issues_key,
    survey_responses_key,
)
from civic_lens.lib.storage.kv import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = [
    "CACHED_ELECTION_DATA_KEY",
    "SESSION_ID_KEY",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "analysis_history_key",
    "priority_issues_key",
    "survey_responses_key",
]
