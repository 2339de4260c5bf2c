"""Survey service — onboarding answers and the per-session token.

Reads and writes the onboarding keys through an injected KeyValueStore so
the same code serves browser-compatible storage, files, or memory.
"""

import json
import uuid

from loguru import logger

from civic_lens.lib.prompts.catalog import QUESTION_BANK, QUESTIONS_PER_TOPIC, response_key
from civic_lens.lib.storage.keys import SESSION_ID_KEY, priority_issues_key, survey_responses_key
from civic_lens.lib.storage.kv import KeyValueStore
from civic_lens.schemas.survey import SurveyResponseSet

MIN_PRIORITY_TOPICS = 3
MAX_PRIORITY_TOPICS = 7


async def get_or_create_session_id(session_store: KeyValueStore) -> str:
    """Return the session token, generating and storing one on first use.

    Args:
        session_store: Session-scoped store (not the persistent one).

    Returns:
        The opaque session token.
    """
    session_id = await session_store.get(SESSION_ID_KEY)
    if session_id:
        return session_id
    session_id = uuid.uuid4().hex
    await session_store.set(SESSION_ID_KEY, session_id)
    logger.info("Started new session {}", session_id)
    return session_id


async def get_user_survey_data(store: KeyValueStore, session_id: str) -> SurveyResponseSet:
    """Load a session's priority topics and survey answers.

    Missing or unreadable values yield empty data rather than an error.

    Args:
        store: Persistent store.
        session_id: Session token.

    Returns:
        The session's SurveyResponseSet.
    """
    priority_topics: list[str] = []
    survey_responses: dict[str, int] = {}

    raw_topics = await store.get(priority_issues_key(session_id))
    raw_responses = await store.get(survey_responses_key(session_id))
    try:
        if raw_topics:
            priority_topics = [str(t) for t in json.loads(raw_topics)]
        if raw_responses:
            survey_responses = {str(k): int(v) for k, v in json.loads(raw_responses).items()}
    except (ValueError, TypeError, AttributeError) as exc:
        logger.error("Failed to read survey data for session {}: {}", session_id, exc)
        return SurveyResponseSet(sessionId=session_id)

    return SurveyResponseSet(
        priorityTopics=priority_topics,
        surveyResponses=survey_responses,
        sessionId=session_id,
    )


async def save_priority_topics(store: KeyValueStore, session_id: str, topics: list[str]) -> list[str]:
    """Validate and store the user's ordered priority topics.

    Args:
        store: Persistent store.
        session_id: Session token.
        topics: Topic ids in priority order.

    Returns:
        The stored topic list (duplicates removed, order kept).

    Raises:
        ValueError: If a topic is unknown or the count is outside 3-7.
    """
    unique = list(dict.fromkeys(topics))
    unknown = [t for t in unique if t not in QUESTION_BANK]
    if unknown:
        msg = f"Unknown topic(s): {', '.join(unknown)}"
        raise ValueError(msg)
    if not (MIN_PRIORITY_TOPICS <= len(unique) <= MAX_PRIORITY_TOPICS):
        msg = f"Choose between {MIN_PRIORITY_TOPICS} and {MAX_PRIORITY_TOPICS} priority topics, got {len(unique)}"
        raise ValueError(msg)

    await store.set(priority_issues_key(session_id), json.dumps(unique))
    return unique


def _validate_response(key: str, value: int) -> None:
    topic_id, _, index = key.rpartition("_")
    if topic_id not in QUESTION_BANK or not index.isdigit() or int(index) >= QUESTIONS_PER_TOPIC:
        msg = f"Invalid survey question key: {key!r}"
        raise ValueError(msg)
    if not 1 <= value <= 5:
        msg = f"Survey answer for {key!r} must be between 1 and 5, got {value}"
        raise ValueError(msg)


async def save_survey_responses(
    store: KeyValueStore,
    session_id: str,
    responses: dict[str, int],
    *,
    merge: bool = True,
) -> dict[str, int]:
    """Validate and store Likert answers.

    Args:
        store: Persistent store.
        session_id: Session token.
        responses: Answers keyed ``"<topic>_<index>"``.
        merge: Merge into existing answers instead of replacing them.

    Returns:
        The full stored answer mapping.

    Raises:
        ValueError: If a key or value is invalid.
    """
    for key, value in responses.items():
        _validate_response(key, value)

    stored: dict[str, int] = {}
    if merge:
        stored = (await get_user_survey_data(store, session_id)).surveyResponses
    stored.update(responses)
    await store.set(survey_responses_key(session_id), json.dumps(stored))
    return stored


async def answer_question(store: KeyValueStore, session_id: str, topic_id: str, index: int, value: int) -> None:
    """Store a single answer."""
    await save_survey_responses(store, session_id, {response_key(topic_id, index): value})


async def clear_session_data(store: KeyValueStore, session_id: str) -> int:
    """Remove every key belonging to a session.

    Returns:
        The number of keys removed.
    """
    if not session_id:
        return 0
    suffix = f"_{session_id}"
    session_keys = [k for k in await store.keys() if k.endswith(suffix)]
    for key in session_keys:
        await store.delete(key)
    logger.info("Cleared {} items for session {}", len(session_keys), session_id)
    return len(session_keys)
