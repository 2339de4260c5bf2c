"""Render survey answers as a natural-language preference summary."""

from collections.abc import Mapping, Sequence

from civic_lens.lib.prompts.catalog import LIKERT_LABELS, QUESTION_BANK, response_key, topic_title


def likert_label(value: int) -> str:
    """Convert a 1-5 Likert value to its label ("Unknown" outside the scale)."""
    return LIKERT_LABELS.get(value, "Unknown")


def build_context(
    priority_topics: Sequence[str],
    survey_responses: Mapping[str, int],
    question_catalog: Mapping[str, Sequence[str]] = QUESTION_BANK,
) -> str:
    """Build the preference block embedded in analysis prompts.

    Output follows ``priority_topics`` order, then catalog question order.
    Topics with no answered question are left out entirely, as are
    unanswered questions.

    Args:
        priority_topics: Ordered topic ids chosen by the user.
        survey_responses: Answers keyed ``"<topic>_<index>"``.
        question_catalog: Topic id to ordered question statements.

    Returns:
        Multi-line preference summary (empty string when nothing is answered).
    """
    blocks: list[str] = []
    for topic_id in priority_topics:
        lines: list[str] = []
        for index, question in enumerate(question_catalog.get(topic_id, [])):
            answer = survey_responses.get(response_key(topic_id, index))
            if answer is None:
                continue
            lines.append(f'- "{question}" -> User response: {likert_label(answer)}')
        if lines:
            blocks.append(f"{topic_title(topic_id).upper()}:\n" + "\n".join(lines))
    return "\n\n".join(blocks)
