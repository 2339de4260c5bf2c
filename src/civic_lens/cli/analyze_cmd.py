"""CLI commands for candidate alignment analysis."""

import asyncio
from typing import Annotated

import typer

from civic_lens.schemas.analysis import AnalysisResult

analyze_app = typer.Typer()


def render_analysis(analysis: AnalysisResult) -> None:
    """Print an analysis as plain text."""
    typer.echo(analysis.overallAssessment)
    for topic in analysis.topicAnalysis:
        typer.echo(f"\n{topic.topicTitle or topic.topic}")
        for candidate in topic.candidates:
            level = candidate.recognized_alignment
            label = level.value if level is not None else "unrecognized"
            typer.echo(f"  - {candidate.name} ({candidate.party}): {label}")
            if candidate.stance:
                typer.echo(f"      Stance: {candidate.stance}")
            if candidate.alignmentReason:
                typer.echo(f"      Why: {candidate.alignmentReason}")
    meta = analysis.metadata
    typer.echo(f"\nAnalysis completed on {meta.fetchedAt}")
    if meta.sources:
        typer.echo(f"Sources: {len(meta.sources)} references")


@analyze_app.command("run")
def run(
    election_id: Annotated[str, typer.Option("--election-id", help="Id of an election from `election fetch`")],
) -> None:
    """Analyze a fetched election against your survey answers and save it to history."""
    asyncio.run(_run_impl(election_id))


async def _run_impl(election_id: str) -> None:
    """Async implementation of the run command."""
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import open_runtime
    from civic_lens.lib.errors import CivicLensError
    from civic_lens.services import analysis_service, election_service, survey_service

    settings = get_settings()
    async with open_runtime(settings) as runtime:
        election = await election_service.get_cached_election(runtime.local_store, election_id)
        if election is None:
            typer.echo("Error: Election data not found. Run `election fetch` and try again.", err=True)
            raise typer.Exit(code=1)

        session_id = await survey_service.get_or_create_session_id(runtime.session_store)
        survey = await survey_service.get_user_survey_data(runtime.local_store, session_id)

        try:
            analysis = await analysis_service.analyze(
                runtime.poller,
                election,
                survey,
                allowed_domains=runtime.settings.web_search_allowed_domain_list,
            )
        except CivicLensError as e:
            typer.echo(f"Error: Failed to analyze candidates: {e}", err=True)
            raise typer.Exit(code=1) from e

        entry = await runtime.history.save(session_id, election, analysis)

    render_analysis(analysis)
    typer.echo(f"Saved to history as {entry.id}")
