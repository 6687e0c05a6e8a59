from __future__ import annotations

import logging
import re

import click
import typer
from typer.core import TyperCommand

from poke_cards.core.config import settings
from poke_cards.core.errors import UsageError
from poke_cards.core.log import configure_logging
from poke_cards.pipeline import run_cards_pipeline

logger = logging.getLogger(__name__)

OPTIONS_HELP = (
    "Options:"
    "\n\t--limit [number]\tLimit results from API"
    "\n\t--debug\t\t\tRead debug JSON from file"
    "\n\nNote that parameters are mutually exclusive"
)

_integer_re = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)

app = typer.Typer(help="Fetch fire/grass rare cards (HP 90+) and print them as JSON.")


class OptionsHelpCommand(TyperCommand):
    """Reports click parse errors (unknown options, missing values, extra args) with the options text and exit 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            logger.debug("Usage error: %s", e.format_message())
            typer.echo(OPTIONS_HELP)
            raise typer.Exit(code=1) from e


def _parse_limit(limit: str | None, debug: bool) -> int | None:
    if debug and limit is not None:
        raise UsageError("--limit and --debug are mutually exclusive")
    if debug:
        return None
    if limit is None:
        raise UsageError("one of --limit or --debug is required")
    if not _integer_re.match(limit):
        raise UsageError(f"--limit must be an integer, got {limit!r}")
    value = int(limit)
    if value <= 0:
        raise UsageError(f"--limit must be positive, got {value}")
    return value


@app.command(cls=OptionsHelpCommand)
def main(
    limit: str | None = typer.Option(
        None, "--limit", help="Limit results from API (page size)."
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Read debug JSON from the fixture file instead of the API."
    ),
) -> None:
    """Fetch cards from the Pokemon TCG API and print them in the output schema."""

    configure_logging(settings.log_level)

    try:
        parsed_limit = _parse_limit(limit, debug)
    except UsageError as e:
        logger.debug("Usage error: %s", e)
        typer.echo(OPTIONS_HELP)
        raise typer.Exit(code=1) from e

    logger.info("Begin [poke-cards]")
    # Fatal errors are re-raised here and end the run.
    run = run_cards_pipeline(limit=parsed_limit, debug=debug).unwrap()
    typer.echo(run.output)
    logger.info("End [poke-cards] source=[%s] cards=[%d]", run.source, len(run.collection.cards))
