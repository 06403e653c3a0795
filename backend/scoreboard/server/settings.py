"""Scoreboard server configuration via environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import field_validator
from pydantic_settings import BaseSettings

from scoring.logic.settings import DEFAULT_PLAYERS, MIN_PLAYERS
from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class ScoreboardSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREBOARD_"}

    data_file: Path = Path("backend/data/ledger.json")
    backup_file: Path | None = None  # copy read when data_file is unreadable
    log_dir: str = "backend/logs/scoreboard"
    cors_origins: list[str] = []
    default_players: list[str] = list(DEFAULT_PLAYERS)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @field_validator("default_players", mode="before")
    @classmethod
    def validate_default_players(cls, v: str | list[str]) -> list[str]:
        players = parse_string_list(v, unique=True)
        if len(players) < MIN_PLAYERS:
            raise ValueError(f"default_players needs at least {MIN_PLAYERS} names")
        return players

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)
