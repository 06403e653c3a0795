"""
Pydantic models for derived ledger data.

Contains outcome classifications, ranking entries, statistics and the
composed read models that cross the boundary to the API layer. All of
them are recomputed from a Ledger on demand and never persisted.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict

from scoring.logic.enums import CellMark, GameVariant, OverrideKind
from scoring.logic.settings import WINNING_SCORE


class Outcome(BaseModel):
    """Winner/loser classification of one row of scores.

    A row is either a single game or an aggregate (daily or yearly totals).
    designated is the manually chosen owner of a zero-tie: the record's
    true winner for a game row, the daily/yearly winner for a total row.
    """

    model_config = ConfigDict(frozen=True)

    scores: dict[str, int]
    min_score: int
    max_score: int
    zero_scorers: tuple[str, ...]
    designated: str | None = None

    @property
    def has_zero_tie(self) -> bool:
        return len(self.zero_scorers) > 1

    @property
    def needs_choice(self) -> bool:
        return self.has_zero_tie and self.designated is None

    @property
    def winners(self) -> tuple[str, ...]:
        """Players highlighted as winner on display."""
        return tuple(p for p in self.scores if self.mark(p) in (CellMark.WINNER, CellMark.CHOICE_NEEDED))

    @property
    def losers(self) -> tuple[str, ...]:
        if self.max_score == self.min_score:
            return ()
        return tuple(p for p, s in self.scores.items() if s == self.max_score)

    def mark(self, player: str) -> CellMark:
        """
        Classify one player's cell.

        In a zero-tie every zero-scorer is a provisional winner until one is
        designated; once designated, the other zero-scorers lose the
        highlight but are not turned into losers.
        """
        score = self.scores.get(player, 0)
        if self.has_zero_tie and score == WINNING_SCORE:
            if self.designated is None:
                return CellMark.CHOICE_NEEDED
            return CellMark.WINNER if self.designated == player else CellMark.NONE
        if score == self.min_score:
            return CellMark.WINNER
        if score == self.max_score and self.max_score != self.min_score:
            return CellMark.LOSER
        return CellMark.NONE

    def marks(self) -> dict[str, CellMark]:
        return {player: self.mark(player) for player in self.scores}


class WinLossCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    wins: dict[str, int]
    losses: dict[str, int]


class RankingEntry(BaseModel):
    """One row of a ranking; position 1 holds the lowest total."""

    model_config = ConfigDict(frozen=True)

    position: int
    player: str
    total: int
    is_tied: bool = False


class RankingView(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OverrideKind
    period: str  # ISO day or year
    scope_key: str
    entries: list[RankingEntry]


class PlayerCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    player: str
    count: int


class YearSummary(BaseModel):
    """Headline statistics of one year's scored games."""

    model_config = ConfigDict(frozen=True)

    total_games: int
    first_place: list[str]
    last_place: list[str]
    most_wins: list[PlayerCount]
    most_losses: list[PlayerCount]
    average_score: float


class ChartData(BaseModel):
    """Data series behind the statistics charts for a year or a single day."""

    model_config = ConfigDict(frozen=True)

    dates: list[dt.date]  # selectable days, ascending
    selected_date: dt.date | None  # None means the whole year
    game_labels: list[str]
    cumulative: dict[str, list[int]]
    wins: dict[str, int]
    losses: dict[str, int]
    averages: dict[str, float]


class ScoreRow(BaseModel):
    """A rendered row of the score table: one game or one total line."""

    model_config = ConfigDict(frozen=True)

    scores: dict[str, int]
    marks: dict[str, CellMark]
    game_id: str | None = None
    number: int | None = None  # 1-based game number within its day
    day: dt.date | None = None
    game_type: GameVariant | None = None
    duration: str = "-"
    is_open: bool = False
    true_winner: str | None = None
    designated_winner: str | None = None
    needs_choice: bool = False


class DayGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: dt.date
    game_type: GameVariant
    games: list[ScoreRow]
    total: ScoreRow | None = None  # absent when the day only has open games


class ScoreTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    players: list[str]
    game_count: int
    open_count: int
    yearly_total: ScoreRow | None = None
    daily_summaries: list[ScoreRow]
    days: list[DayGroup]
