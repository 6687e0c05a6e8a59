from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from poke_cards.ingestion.providers.pokemon_tcg.schemas import InputCard, InputPage

logger = logging.getLogger(__name__)

TYPE_SEPARATOR = ","


class OutputCard(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = Field(default=None, serialization_alias="ID")
    name: str | None = Field(default=None, serialization_alias="Name")
    type: str | None = Field(default=None, serialization_alias="Type")
    hp: str | None = Field(default=None, serialization_alias="HP")
    rarity: str | None = Field(default=None, serialization_alias="Rarity")


class OutputCollection(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cards: list[OutputCard] = Field(default_factory=list, serialization_alias="Cards")


def card_type_from_types(types: Sequence[str] | None) -> str | None:
    """Collapse the API's `types` list into the single `type` string consumers expect."""

    if not types:
        return None
    if len(types) == 1:
        return types[0]
    return TYPE_SEPARATOR.join(types)


def convert_card(card: InputCard) -> OutputCard:
    return OutputCard(
        id=card.id,
        name=card.name,
        type=card_type_from_types(card.types),
        hp=card.hp,
        rarity=card.rarity,
    )


def convert_cards(page: InputPage) -> OutputCollection:
    """Map an input page to output cards, keeping input order."""

    if page.data is None:
        logger.info("Input page has no data; producing an empty collection")
        return OutputCollection(cards=[])

    cards = [convert_card(card) for card in page.data]
    logger.info("Converted [%d] cards", len(cards))
    return OutputCollection(cards=cards)


def card_sort_key(card: OutputCard) -> tuple[bool, str]:
    # Absent ids sort first, ahead of an empty-string id.
    return (card.id is not None, card.id or "")


def sort_cards_by_id(collection: OutputCollection) -> OutputCollection:
    """Stable ascending sort by id. Idempotent."""

    return collection.model_copy(
        update={"cards": sorted(collection.cards, key=card_sort_key)}
    )


def render_cards_output(collection: OutputCollection) -> str:
    return collection.model_dump_json(by_alias=True, indent=2)
