"""Persistence models: the stored JSON snapshot of a ledger."""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scoring.logic.enums import GameVariant, OverrideKind
from scoring.logic.models import GameRecord, Ledger, OverrideStore
from scoring.logic.overrides import scope_key
from scoring.logic.settings import DEFAULT_GAME_VARIANT, DEFAULT_PLAYERS

_DAILY_PREFIX = f"{OverrideKind.DAILY.value}_"
_YEARLY_PREFIX = f"{OverrideKind.YEARLY.value}_"


class LedgerSnapshot(BaseModel):
    """Whole-dataset snapshot as stored on disk.

    Keeps the camelCase field names of the stored JSON. Winner
    designations are split into dailyWinners (keyed by ISO day) and
    yearlyWinner (keyed by year) in storage, while the in-memory
    OverrideStore keys both by scope key.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    players: list[str] = Field(default_factory=lambda: list(DEFAULT_PLAYERS))
    games: list[GameRecord] = Field(default_factory=list)
    fund: int = Field(default=0, ge=0)
    last_game_type: GameVariant = Field(default=DEFAULT_GAME_VARIANT, alias="lastGameType")
    ranking_overrides: dict[str, list[str]] = Field(default_factory=dict, alias="rankingOverrides")
    daily_winners: dict[str, str] = Field(default_factory=dict, alias="dailyWinners")
    yearly_winner: dict[str, str] = Field(default_factory=dict, alias="yearlyWinner")
    updated_at: dt.datetime | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_ledger(cls, ledger: Ledger, updated_at: dt.datetime | None = None) -> "LedgerSnapshot":
        winners = ledger.overrides.winners
        return cls(
            players=list(ledger.players),
            games=list(ledger.games),
            fund=ledger.fund,
            last_game_type=ledger.last_game_type,
            ranking_overrides={key: list(order) for key, order in ledger.overrides.rankings.items()},
            daily_winners={k.removeprefix(_DAILY_PREFIX): v for k, v in winners.items() if k.startswith(_DAILY_PREFIX)},
            yearly_winner={
                k.removeprefix(_YEARLY_PREFIX): v for k, v in winners.items() if k.startswith(_YEARLY_PREFIX)
            },
            updated_at=updated_at,
        )

    def to_ledger(self) -> Ledger:
        """
        Rebuild the in-memory ledger.

        Records stored without an insertion sequence (seq 0, written before
        seq existed) are numbered after the highest stored one, in stored
        order. Stored order is the order they were entered.
        """
        next_seq = max((g.seq for g in self.games), default=0) + 1
        games = []
        for game in self.games:
            if game.seq > 0:
                games.append(game)
                continue
            games.append(game.model_copy(update={"seq": next_seq}))
            next_seq += 1

        winners = {scope_key(OverrideKind.DAILY, day): name for day, name in self.daily_winners.items()}
        winners.update({scope_key(OverrideKind.YEARLY, year): name for year, name in self.yearly_winner.items()})
        overrides = OverrideStore(
            winners=winners,
            rankings={key: tuple(order) for key, order in self.ranking_overrides.items()},
        )
        return Ledger(
            players=tuple(self.players),
            games=tuple(games),
            fund=self.fund,
            last_game_type=self.last_game_type,
            overrides=overrides,
            next_seq=next_seq,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
