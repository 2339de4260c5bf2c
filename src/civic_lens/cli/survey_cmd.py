"""CLI commands for onboarding data: priority topics and survey answers."""

import asyncio
from typing import Annotated

import typer

survey_app = typer.Typer()


@survey_app.command("topics")
def topics(
    topic_ids: Annotated[list[str], typer.Argument(help="3 to 7 topic ids in priority order")],
) -> None:
    """Set the priority topics for the current session."""
    asyncio.run(_topics_impl(topic_ids))


async def _topics_impl(topic_ids: list[str]) -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.services import survey_service

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    try:
        stored = await survey_service.save_priority_topics(get_local_store(settings), session_id, topic_ids)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Saved {len(stored)} priority topics: {', '.join(stored)}")


@survey_app.command("answer")
def answer(
    topic_id: Annotated[str, typer.Argument(help="Topic id, e.g. healthcare")],
    index: Annotated[int, typer.Argument(help="Question index (0-2)")],
    value: Annotated[int, typer.Argument(help="1=Strongly Disagree ... 5=Strongly Agree")],
) -> None:
    """Answer one survey question."""
    asyncio.run(_answer_impl(topic_id, index, value))


async def _answer_impl(topic_id: str, index: int, value: int) -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.lib.prompts.catalog import QUESTION_BANK
    from civic_lens.lib.prompts.preferences import likert_label
    from civic_lens.services import survey_service

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    try:
        await survey_service.answer_question(get_local_store(settings), session_id, topic_id, index, value)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f'"{QUESTION_BANK[topic_id][index]}" -> {likert_label(value)}')


@survey_app.command("show")
def show() -> None:
    """Show the current session's topics and answers."""
    asyncio.run(_show_impl())


async def _show_impl() -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.lib.prompts.preferences import build_context
    from civic_lens.services import survey_service
    from civic_lens.services.analysis_service import is_usable_for_analysis

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    survey = await survey_service.get_user_survey_data(get_local_store(settings), session_id)

    typer.echo(f"Session: {session_id}")
    typer.echo(f"Priority topics: {', '.join(survey.priorityTopics) or '(none)'}")
    context = build_context(survey.priorityTopics, survey.surveyResponses)
    if context:
        typer.echo(context)
    status = "ready" if is_usable_for_analysis(survey) else "incomplete"
    typer.echo(f"Survey status: {status}")


@survey_app.command("clear")
def clear() -> None:
    """Remove all stored data for the current session."""
    asyncio.run(_clear_impl())


async def _clear_impl() -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.services import survey_service

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    count = await survey_service.clear_session_data(get_local_store(settings), session_id)
    typer.echo(f"Cleared {count} item(s) for session {session_id}")
