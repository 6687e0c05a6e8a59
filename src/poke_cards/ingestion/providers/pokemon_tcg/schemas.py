from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from poke_cards.core.errors import DeserializationError
from poke_cards.core.result import Result, capture
from poke_cards.core.text import strip_trailing_commas

logger = logging.getLogger(__name__)


class InputCard(BaseModel):
    """One card as returned by /cards. The API schema is not guaranteed, so every field may be absent."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    hp: str | None = None
    types: list[str] | None = None
    rarity: str | None = None


class InputPage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    data: list[InputCard] | None = None
    page: int = 0
    page_size: int = Field(default=0, validation_alias="pagesize")
    count: int = 0
    total_count: int = Field(default=0, validation_alias="totalcount")


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(v) for v in value]
    return value


def parse_cards_page(text: str) -> InputPage:
    """
    Deserialize a /cards response body.

    Keys match case-insensitively, trailing commas are tolerated and unknown
    fields are ignored. Anything else raises DeserializationError.
    """
    try:
        raw = json.loads(strip_trailing_commas(text))
    except ValueError as e:
        raise DeserializationError(f"Error! Response was not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise DeserializationError(
            f"Error! Expected a JSON object, got {type(raw).__name__}"
        )

    try:
        page = InputPage.model_validate(_lower_keys(raw))
    except ValidationError as e:
        raise DeserializationError(f"Error! Unexpected card page schema: {e}") from e

    logger.debug("Parsed page with %d cards", len(page.data or []))
    return page


def parse_cards_page_result(text: str) -> Result[InputPage]:
    return capture(parse_cards_page, text)
