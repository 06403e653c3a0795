"""
Pydantic models for the score ledger.

GameRecord and OverrideStore are the persisted domain data. Ledger is the
explicit state container that every pure ledger function takes and
returns; it replaces any ambient global state.
"""

import datetime as dt
import secrets
import string
import time
from collections.abc import Iterable
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator

from scoring.logic.enums import GameVariant
from scoring.logic.settings import DEFAULT_GAME_VARIANT, DEFAULT_PLAYERS, MIN_PLAYERS

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_ID_RANDOM_LENGTH = 10


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def new_game_id() -> str:
    """Generate an opaque record id: base-36 millisecond timestamp plus random base-36 tail."""
    millis = time.time_ns() // 1_000_000
    tail = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_ID_RANDOM_LENGTH))
    return _to_base36(millis) + tail


class Duration(BaseModel):
    """Elapsed play time of one game. Display only."""

    model_config = ConfigDict(frozen=True)

    minutes: NonNegativeInt
    seconds: NonNegativeInt

    @property
    def label(self) -> str:
        return f"{self.minutes}:{self.seconds:02d}"


class GameRecord(BaseModel):
    """One played game.

    Field aliases match the stored JSON layout (``type``, ``isOpen``,
    ``trueWinner``); models accept both the alias and the field name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    seq: int = 0  # insertion sequence within the ledger; 0 until assigned
    date: dt.date
    game_type: GameVariant = Field(default=DEFAULT_GAME_VARIANT, alias="type")
    is_open: bool = Field(default=False, alias="isOpen")
    scores: dict[str, NonNegativeInt] = Field(default_factory=dict)
    duration: Duration | None = None
    true_winner: str | None = Field(default=None, alias="trueWinner")

    @field_validator("game_type", mode="before")
    @classmethod
    def _default_missing_type(cls, v: object) -> object:
        # older snapshots stored no type (or an empty one) for the default variant
        return DEFAULT_GAME_VARIANT if v in (None, "") else v

    @field_validator("is_open", mode="before")
    @classmethod
    def _null_is_closed(cls, v: object) -> object:
        return False if v is None else v

    def score_of(self, player: str) -> int:
        """Score of a player in this game; players without an entry scored zero."""
        return self.scores.get(player, 0)

    def roster_scores(self, roster: Iterable[str]) -> dict[str, int]:
        return {player: self.scores.get(player, 0) for player in roster}


class OverrideStore(BaseModel):
    """Manual tie-break directives keyed by scope key (``daily_2025-01-01``, ``yearly_2025``).

    winners holds the designated owner of a zero-tie on an aggregate row;
    rankings holds an explicit order used to break equal totals.
    """

    model_config = ConfigDict(frozen=True)

    winners: dict[str, str] = Field(default_factory=dict)
    rankings: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def winner_for(self, scope_key: str) -> str | None:
        return self.winners.get(scope_key)

    def ranking_for(self, scope_key: str) -> tuple[str, ...]:
        return self.rankings.get(scope_key, ())


class Ledger(BaseModel):
    """Complete in-memory dataset: roster, game records, fund and overrides.

    revision increases on every mutation, so callers can memoize derived
    views on (revision, year, exclude_open) without the engine caching
    anything itself.
    """

    model_config = ConfigDict(frozen=True)

    players: tuple[str, ...] = DEFAULT_PLAYERS
    games: tuple[GameRecord, ...] = ()
    fund: NonNegativeInt = 0
    last_game_type: GameVariant = DEFAULT_GAME_VARIANT
    overrides: OverrideStore = Field(default_factory=OverrideStore)
    next_seq: int = Field(default=1, ge=1)
    revision: NonNegativeInt = 0

    @model_validator(mode="after")
    def _validate_roster(self) -> Self:
        if len(self.players) < MIN_PLAYERS:
            raise ValueError(f"Roster needs at least {MIN_PLAYERS} players, got {len(self.players)}")
        if len(set(self.players)) != len(self.players):
            raise ValueError("Roster contains duplicate player names")
        if any(not name.strip() for name in self.players):
            raise ValueError("Roster contains an empty player name")
        return self

    def find_game(self, game_id: str) -> GameRecord | None:
        return next((g for g in self.games if g.id == game_id), None)
