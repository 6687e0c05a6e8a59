from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # pokemon tcg api
    pokemon_tcg_base_url: str = "https://api.pokemontcg.io/v2"
    pokemon_tcg_api_key: str | None = Field(default=None, repr=False)
    pokemon_tcg_user_agent: str = "MyCoolPokemonCardsClient"
    http_timeout_s: float = 30.0

    # --debug reads this file instead of calling the API
    debug_fixture_path: Path = Path("test.json")

    log_level: str = "INFO"


settings = Settings()
