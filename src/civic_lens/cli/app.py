"""Typer CLI root application."""

import typer

from civic_lens.core.config import get_settings
from civic_lens.core.logging import setup_logging

app = typer.Typer(name="civic-lens", help="Upcoming elections and personalized candidate analysis")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from civic_lens.cli.analyze_cmd import analyze_app
    from civic_lens.cli.election_cmd import election_app
    from civic_lens.cli.history_cmd import history_app
    from civic_lens.cli.survey_cmd import survey_app

    app.add_typer(survey_app, name="survey", help="Onboarding priorities and opinion survey")
    app.add_typer(election_app, name="election", help="Election discovery commands")
    app.add_typer(analyze_app, name="analyze", help="Candidate alignment analysis")
    app.add_typer(history_app, name="history", help="Saved analysis history")


_register_subcommands()
