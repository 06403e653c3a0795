"""Request bodies accepted by the scoreboard API."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from scoring.logic.enums import GameVariant


class DurationBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minutes: NonNegativeInt = 0
    seconds: int = Field(default=0, ge=0, le=59)


class RecordGameRequest(BaseModel):
    """A newly played game. Scores may be negative here; the ledger rejects them with a clear message."""

    model_config = ConfigDict(extra="forbid")

    date: dt.date
    scores: dict[str, int]
    game_type: GameVariant | None = Field(default=None, alias="type")  # None: the last used variant
    is_open: bool = Field(default=False, alias="isOpen")
    duration: DurationBody | None = None


class PlayerRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)


class WinnerRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player: str = Field(min_length=1)


class RankingOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    players: list[str]


class FundRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: int = Field(strict=True)
