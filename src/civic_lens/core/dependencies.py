"""Wiring of stores, backend client, and poller from settings.

Provides ``open_runtime`` for entry points (CLI commands) that need the
full pipeline with its resources closed afterwards.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from civic_lens.core.config import Settings
from civic_lens.lib.responses.client import ResponsesClient
from civic_lens.lib.responses.poller import JobPoller, PollPolicy
from civic_lens.lib.storage.kv import JsonFileStore, KeyValueStore
from civic_lens.services.history_service import HistoryStore


@dataclass
class Runtime:
    """Resources shared by one entry-point invocation."""

    settings: Settings
    local_store: KeyValueStore
    session_store: KeyValueStore
    client: ResponsesClient
    poller: JobPoller
    history: HistoryStore


def get_local_store(settings: Settings) -> KeyValueStore:
    """Persistent store for onboarding data, cached elections, and history."""
    return JsonFileStore(settings.local_storage_path)


def get_session_store(settings: Settings) -> KeyValueStore:
    """Session-scoped store holding the session token."""
    return JsonFileStore(settings.session_storage_path)


@asynccontextmanager
async def open_runtime(settings: Settings) -> AsyncGenerator[Runtime]:
    """Build a Runtime and close its HTTP client on exit."""
    local_store = get_local_store(settings)
    client = ResponsesClient.from_settings(settings)
    try:
        yield Runtime(
            settings=settings,
            local_store=local_store,
            session_store=get_session_store(settings),
            client=client,
            poller=JobPoller(client, PollPolicy.from_settings(settings)),
            history=HistoryStore(local_store),
        )
    finally:
        await client.close()
