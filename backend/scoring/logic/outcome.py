"""
Outcome classification under the "lowest score wins" house rule.

Zero is the best possible score. A row with two or more zero-scorers is a
zero-tie that an operator may resolve by designating one of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoring.logic.enums import CellMark
from scoring.logic.settings import WINNING_SCORE
from scoring.logic.types import Outcome, WinLossCounts

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from scoring.logic.models import GameRecord


def mark_scores(
    scores: Mapping[str, int],
    roster: Sequence[str],
    designated: str | None = None,
) -> Outcome:
    """
    Classify a row of per-player scores restricted to the roster.

    Works for single games and for aggregate rows alike; players missing
    from scores count as zero. An empty roster yields a zero row.
    """
    row = {player: scores.get(player, 0) for player in roster}
    values = list(row.values())
    return Outcome(
        scores=row,
        min_score=min(values, default=0),
        max_score=max(values, default=0),
        zero_scorers=tuple(p for p, s in row.items() if s == WINNING_SCORE),
        designated=designated,
    )


def classify(record: GameRecord, roster: Sequence[str]) -> Outcome:
    """Classify a single game, honoring its true-winner designation."""
    return mark_scores(record.scores, roster, record.true_winner)


def record_marks(record: GameRecord, roster: Sequence[str]) -> dict[str, CellMark]:
    """Display marks for a game row. Open games are never marked."""
    if record.is_open:
        return dict.fromkeys(roster, CellMark.NONE)
    return classify(record, roster).marks()


def count_wins_losses(records: Iterable[GameRecord], roster: Sequence[str]) -> WinLossCounts:
    """
    Count wins and losses per player.

    Every minimum-score player of a game earns a win and every maximum-score
    player a loss (only when the game's scores are not all equal).
    Designations only affect display, not these counts.
    """
    wins = dict.fromkeys(roster, 0)
    losses = dict.fromkeys(roster, 0)
    for record in records:
        outcome = mark_scores(record.scores, roster)
        for player, score in outcome.scores.items():
            if score == outcome.min_score:
                wins[player] += 1
        for player in outcome.losers:
            losses[player] += 1
    return WinLossCounts(wins=wins, losses=losses)
