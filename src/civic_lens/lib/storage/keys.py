"""Storage key layout shared with the web client.

These names are a compatibility contract; do not change them.
"""

SESSION_ID_KEY = "user_session_id"
CACHED_ELECTION_DATA_KEY = "cached_election_data"


def priority_issues_key(session_id: str) -> str:
    return f"onboarding_priority_issues_{session_id}"


def survey_responses_key(session_id: str) -> str:
    return f"onboarding_survey_responses_{session_id}"


def analysis_history_key(session_id: str) -> str:
    return f"analysis_history_{session_id}"
