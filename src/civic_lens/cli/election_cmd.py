"""CLI commands for election discovery."""

import asyncio
from typing import Annotated

import typer
from loguru import logger

election_app = typer.Typer()


@election_app.command("fetch")
def fetch(
    address: Annotated[str, typer.Option("--address", help="Mailing address including state")],
    year: Annotated[int | None, typer.Option("--year", help="Election year (default: next even year)")] = None,
) -> None:
    """Fetch upcoming statewide elections and candidates for an address."""
    asyncio.run(_fetch_impl(address, year))


async def _fetch_impl(address: str, year: int | None) -> None:
    """Async implementation of the fetch command."""
    from civic_lens.core.config import get_settings
    from civic_lens.core.dependencies import open_runtime
    from civic_lens.lib.errors import CivicLensError
    from civic_lens.services import election_service

    settings = get_settings()
    async with open_runtime(settings) as runtime:
        try:
            data = await election_service.get_election_data_by_address(
                runtime.poller,
                address,
                year,
                offices=settings.election_office_list,
                allowed_domains=settings.web_search_allowed_domain_list,
            )
        except (CivicLensError, ValueError) as e:
            typer.echo(f"Error: Failed to get election data: {e}", err=True)
            raise typer.Exit(code=1) from e

        await election_service.cache_elections(runtime.local_store, data)
        logger.debug("Cached {} election(s)", len(data.elections))

    if data.metadata.error:
        typer.echo(f"Warning: {data.metadata.error}", err=True)
    typer.echo(f"State: {data.state}")
    for election in data.elections:
        typer.echo(f"\n{election.name} [{election.id}]")
        typer.echo(f"  {election.office} - {election.electionDay}")
        if not election.candidates:
            typer.echo("  No candidates found")
        for candidate in election.candidates:
            typer.echo(f"  - {candidate.name} ({candidate.party or 'Unknown party'})")
    if data.metadata.sources:
        typer.echo(f"\nSources: {len(data.metadata.sources)} references")
