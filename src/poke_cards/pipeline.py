from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from poke_cards.core.config import Settings, settings as default_settings
from poke_cards.core.errors import EmptyPayloadError
from poke_cards.core.result import Err, Ok, Result
from poke_cards.ingestion.providers.pokemon_tcg.client import PokemonTcgClient
from poke_cards.ingestion.providers.pokemon_tcg.schemas import parse_cards_page_result
from poke_cards.transform.cards import (
    OutputCollection,
    convert_cards,
    render_cards_output,
    sort_cards_by_id,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardsRun:
    source: str
    collection: OutputCollection
    output: str


def read_fixture(path: Path) -> Result[str]:
    text = path.read_text(encoding="utf-8")
    if not text:
        return Err(EmptyPayloadError(f"Error! Debug fixture [{path}] is empty"))
    return Ok(text)


def build_cards_output(text: str) -> Result[OutputCollection]:
    """Parse, convert and sort one page of cards."""

    parsed = parse_cards_page_result(text)
    if isinstance(parsed, Err):
        return parsed

    # Results should already be sorted by the API, sort anyway so the output
    # stays deterministic if conversion ever reorders.
    return Ok(sort_cards_by_id(convert_cards(parsed.value)))


def run_cards_pipeline(
    *,
    limit: int | None = None,
    debug: bool = False,
    settings: Settings | None = None,
    client: PokemonTcgClient | None = None,
) -> Result[CardsRun]:
    """
    Load cards JSON (live or debug fixture), transform it and render the output.

    The first failing step short-circuits; no partial output is produced.
    """
    settings = settings or default_settings

    if debug:
        source = f"fixture:{settings.debug_fixture_path}"
        logger.info("Reading debug fixture [%s]", settings.debug_fixture_path)
        loaded = read_fixture(settings.debug_fixture_path)
    else:
        if limit is None:
            raise ValueError("limit is required unless debug is set")
        client = client or PokemonTcgClient.from_settings(settings)
        source = f"api:{client.base_url}"
        loaded = client.fetch_cards_json(limit)

    if isinstance(loaded, Err):
        return loaded

    logger.debug("Cards JSON [ %s ]", loaded.value)

    built = build_cards_output(loaded.value)
    if isinstance(built, Err):
        return built

    return Ok(
        CardsRun(
            source=source,
            collection=built.value,
            output=render_cards_output(built.value),
        )
    )
