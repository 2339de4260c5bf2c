"""History service — per-session record of completed analyses.

Each session's entries live under one key as a JSON array.  Every write
reads the whole collection, mutates it, and writes it back while holding
that collection's lock, so interleaved saves and deletes do not lose
updates.  Entries are sorted newest-first on read, never on write.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import UTC, datetime

from loguru import logger
from pydantic import ValidationError

from civic_lens.lib.responses.poller import JobPoller
from civic_lens.lib.storage.keys import analysis_history_key
from civic_lens.lib.storage.kv import KeyValueStore
from civic_lens.schemas.analysis import AnalysisResult
from civic_lens.schemas.common import utc_now_iso
from civic_lens.schemas.election import ElectionRecord
from civic_lens.schemas.history import HistoryEntry
from civic_lens.services import analysis_service, survey_service


_UNKNOWN_TIME = datetime.min.replace(tzinfo=UTC)


def _saved_at(entry: HistoryEntry) -> datetime:
    """Entry timestamp as an aware datetime; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(entry.timestamp.replace("Z", "+00:00"))
    except ValueError:
        return _UNKNOWN_TIME
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _newest_first(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    """Sort by timestamp, newest first.

    Ties go to the later-stored entry; unreadable timestamps sort last.
    """
    ordered = sorted(enumerate(entries), key=lambda pair: (_saved_at(pair[1]), pair[0]), reverse=True)
    return [entry for _, entry in ordered]


class HistoryStore:
    """Analysis history backed by a KeyValueStore.

    Selection (which entry the user is viewing) is tracked per session in
    memory only.

    Args:
        store: Persistent store holding ``analysis_history_<session>`` keys.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._locks: dict[str, asyncio.Lock] = {}
        self._selected: dict[str, str | None] = {}

    async def save(self, session_id: str, election: ElectionRecord, analysis: AnalysisResult) -> HistoryEntry:
        """Append a new entry for an election and its analysis."""
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            electionData=election,
            analysisData=analysis,
            timestamp=utc_now_iso(),
        )
        async with self._lock(session_id):
            entries = await self._read(session_id)
            entries.append(entry)
            await self._write(session_id, entries)
        logger.info("Saved analysis {} for election {} to history", entry.id, election.id)
        return entry

    async def list(self, session_id: str) -> list[HistoryEntry]:
        """Return all entries, most recent first.

        When nothing is selected yet, the most recent entry becomes selected.
        """
        entries = _newest_first(await self._read(session_id))
        if entries and self._selected.get(session_id) is None:
            self._selected[session_id] = entries[0].id
        return entries

    async def get(self, session_id: str, entry_id: str) -> HistoryEntry:
        """Return one entry.

        Raises:
            ValueError: If no entry has this id.
        """
        for entry in await self._read(session_id):
            if entry.id == entry_id:
                return entry
        msg = f"History entry {entry_id} not found"
        raise ValueError(msg)

    async def select(self, session_id: str, entry_id: str) -> HistoryEntry:
        """Mark an entry as the one being viewed and return it."""
        entry = await self.get(session_id, entry_id)
        self._selected[session_id] = entry.id
        return entry

    async def selected(self, session_id: str) -> HistoryEntry | None:
        """Return the selected entry, if any still exists."""
        entry_id = self._selected.get(session_id)
        if entry_id is None:
            return None
        try:
            return await self.get(session_id, entry_id)
        except ValueError:
            self._selected[session_id] = None
            return None

    async def update(self, session_id: str, entry_id: str, analysis: AnalysisResult) -> HistoryEntry:
        """Replace an entry's analysis and timestamp in place, keeping its election.

        Raises:
            ValueError: If no entry has this id.
        """
        async with self._lock(session_id):
            entries = await self._read(session_id)
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    updated = entry.model_copy(update={"analysisData": analysis, "timestamp": utc_now_iso()})
                    entries[index] = updated
                    await self._write(session_id, entries)
                    break
            else:
                msg = f"History entry {entry_id} not found"
                raise ValueError(msg)
        logger.info("Updated history entry {}", entry_id)
        return updated

    async def delete(self, session_id: str, entry_id: str) -> bool:
        """Remove an entry.

        If it was selected, selection moves to the most recent remaining
        entry, or to none when the collection is empty.

        Returns:
            True if an entry was removed.
        """
        async with self._lock(session_id):
            entries = await self._read(session_id)
            remaining = [e for e in entries if e.id != entry_id]
            removed = len(remaining) != len(entries)
            if removed:
                await self._write(session_id, remaining)

        if removed:
            logger.info("Deleted history entry {}", entry_id)
        if self._selected.get(session_id) == entry_id:
            newest = _newest_first(remaining)
            self._selected[session_id] = newest[0].id if newest else None
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    async def _read(self, session_id: str) -> list[HistoryEntry]:
        raw = await self._store.get(analysis_history_key(session_id))
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Analysis history for session {} is not valid JSON; ignoring it", session_id)
            return []

        entries: list[HistoryEntry] = []
        for item in items if isinstance(items, list) else []:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping unreadable history entry for session {}: {}", session_id, exc)
        return entries

    async def _write(self, session_id: str, entries: list[HistoryEntry]) -> None:
        payload = [e.model_dump(mode="json") for e in entries]
        await self._store.set(analysis_history_key(session_id), json.dumps(payload))


async def rerun_analysis(
    history: HistoryStore,
    poller: JobPoller,
    store: KeyValueStore,
    session_id: str,
    entry_id: str,
    *,
    allowed_domains: list[str] | None = None,
) -> HistoryEntry:
    """Re-run the analysis for a saved entry with the user's current answers.

    The entry's election is kept; its analysis and timestamp are replaced
    and it becomes the selected entry.

    Raises:
        ValueError: If no entry has this id.
    """
    entry = await history.get(session_id, entry_id)
    survey = await survey_service.get_user_survey_data(store, session_id)
    analysis = await analysis_service.analyze(poller, entry.electionData, survey, allowed_domains=allowed_domains)
    updated = await history.update(session_id, entry_id, analysis)
    await history.select(session_id, entry_id)
    return updated
