from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from poke_cards.core.config import Settings
from poke_cards.core.errors import (
    EmptyPayloadError,
    ProviderRateLimited,
    ProviderRequestError,
    ThrottleExhaustedError,
)
from poke_cards.core.result import Result, capture
from poke_cards.core.text import format_elapsed
from poke_cards.ingestion.providers.base.client import BaseHttpClient
from poke_cards.ingestion.providers.pokemon_tcg.query import CardQuery

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.pokemontcg.io/v2"
DEFAULT_USER_AGENT = "MyCoolPokemonCardsClient"

MAX_ATTEMPTS = 6
RETRY_DELAY_MULTIPLIER_S = 10.0


@dataclass
class PokemonTcgClient:
    """Fetches one page of filtered cards from the Pokemon TCG API.

    Throttling (HTTP 429) is retried with linear backoff: after attempt N the
    client sleeps N * 10s, and the sixth throttled attempt gives up with
    ThrottleExhaustedError. Any other failure is raised immediately.
    """

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    api_key: str | None = field(default=None, repr=False)
    timeout_s: float = 30.0
    max_attempts: int = MAX_ATTEMPTS
    retry_delay_multiplier_s: float = RETRY_DELAY_MULTIPLIER_S

    transport: httpx.BaseTransport | None = None

    _sleep: Any = field(default=time.sleep, repr=False)
    _monotonic: Any = field(default=time.monotonic, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> PokemonTcgClient:
        kwargs: dict[str, Any] = {
            "base_url": settings.pokemon_tcg_base_url,
            "user_agent": settings.pokemon_tcg_user_agent,
            "api_key": settings.pokemon_tcg_api_key,
            "timeout_s": settings.http_timeout_s,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    def _open_http(self) -> BaseHttpClient:
        return BaseHttpClient(
            base_url=self.base_url,
            timeout_s=self.timeout_s,
            headers=self._headers(),
            transport=self.transport,
        )

    def get_cards_json(self, limit: int) -> str:
        """Return the raw JSON text of the first page of matching cards."""

        query = CardQuery(limit=limit)
        logger.info("Begin [get_cards_json()] limit=[%d]", limit)

        with self._open_http() as http:
            attempts = 1
            started = self._monotonic()
            while True:
                try:
                    content = http.get_text("cards", params=query.to_params())
                    break
                except ProviderRateLimited as e:
                    logger.warning("%s", e)
                    # Throttled through every backoff step; fail fast and alert.
                    if attempts >= self.max_attempts:
                        raise ThrottleExhaustedError(attempts) from e
                    delay_s = attempts * self.retry_delay_multiplier_s
                    logger.warning(
                        "429 detected, sleeping [%g] requestCount [%d]", delay_s, attempts
                    )
                    self._sleep(delay_s)
                    attempts += 1
                except ProviderRequestError as e:
                    logger.error("%s requestCount [%d]", e, attempts)
                    raise

            elapsed = self._monotonic() - started
            logger.info(
                "Result obtained in [%s] via [%d] tries", format_elapsed(elapsed), attempts
            )

        if not content:
            raise EmptyPayloadError(
                "Error! Empty string returned from API! "
                "Expected at least some JSON with an empty Data payload."
            )

        logger.info("Content length [%d]", len(content))
        logger.info("End [get_cards_json()]")
        return content

    def fetch_cards_json(self, limit: int) -> Result[str]:
        return capture(self.get_cards_json, limit)
