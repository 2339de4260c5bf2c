"""CLI commands for the saved analysis history."""

import asyncio
from typing import Annotated

import typer

history_app = typer.Typer()


@history_app.command("list")
def list_entries() -> None:
    """List saved analyses, most recent first."""
    asyncio.run(_list_impl())


async def _list_impl() -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.services import survey_service
    from civic_lens.services.history_service import HistoryStore

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    entries = await HistoryStore(get_local_store(settings)).list(session_id)
    if not entries:
        typer.echo("No saved analyses yet")
        return
    for entry in entries:
        election = entry.electionData
        typer.echo(f"{entry.id}  {entry.timestamp}  {election.name} ({election.office}, {election.electionDay})")


@history_app.command("show")
def show(
    entry_id: Annotated[str | None, typer.Argument(help="Entry id (default: most recent)")] = None,
) -> None:
    """Show one saved analysis."""
    asyncio.run(_show_impl(entry_id))


async def _show_impl(entry_id: str | None) -> None:
    from civic_lens.cli.analyze_cmd import render_analysis
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.services import survey_service
    from civic_lens.services.history_service import HistoryStore

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    history = HistoryStore(get_local_store(settings))

    entries = await history.list(session_id)
    try:
        entry = await history.select(session_id, entry_id) if entry_id else await history.selected(session_id)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    if entry is None or not entries:
        typer.echo("No saved analyses yet")
        return

    typer.echo(f"{entry.electionData.name}")
    typer.echo(f"{entry.electionData.office} - {entry.electionData.electionDay}  (saved {entry.timestamp})\n")
    render_analysis(entry.analysisData)


@history_app.command("rerun")
def rerun(
    entry_id: Annotated[str, typer.Argument(help="Entry id to re-analyze")],
) -> None:
    """Re-run a saved analysis with your current survey answers."""
    asyncio.run(_rerun_impl(entry_id))


async def _rerun_impl(entry_id: str) -> None:
    from civic_lens.cli.analyze_cmd import render_analysis
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import open_runtime
    from civic_lens.lib.errors import CivicLensError
    from civic_lens.services import survey_service
    from civic_lens.services.history_service import rerun_analysis

    settings = get_settings()
    async with open_runtime(settings) as runtime:
        session_id = await survey_service.get_or_create_session_id(runtime.session_store)
        try:
            entry = await rerun_analysis(
                runtime.history,
                runtime.poller,
                runtime.local_store,
                session_id,
                entry_id,
                allowed_domains=settings.web_search_allowed_domain_list,
            )
        except (CivicLensError, ValueError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e

    render_analysis(entry.analysisData)


@history_app.command("delete")
def delete(
    entry_id: Annotated[str, typer.Argument(help="Entry id to delete")],
) -> None:
    """Delete a saved analysis."""
    asyncio.run(_delete_impl(entry_id))


async def _delete_impl(entry_id: str) -> None:
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import get_local_store, get_session_store
    from civic_lens.services import survey_service
    from civic_lens.services.history_service import HistoryStore

    settings = get_settings()
    session_id = await survey_service.get_or_create_session_id(get_session_store(settings))
    removed = await HistoryStore(get_local_store(settings)).delete(session_id, entry_id)
    if not removed:
        typer.echo(f"Error: History entry {entry_id} not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {entry_id}")
