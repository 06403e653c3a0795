"""
Per-player score aggregation over arbitrary record subsets.

Callers decide whether a subset holds data by counting records, never by
inspecting totals: an all-zero total is a legitimate result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoring.logic.settings import AVERAGE_DECIMALS

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoring.logic.models import GameRecord


def sum_by_player(records: Iterable[GameRecord], roster: Sequence[str]) -> dict[str, int]:
    """
    Sum each roster player's scores over the records.

    Players missing from a record's scores count as zero. An empty record
    set yields zero for every player. Keys follow roster order.
    """
    totals = dict.fromkeys(roster, 0)
    for record in records:
        for player in roster:
            totals[player] += record.scores.get(player, 0)
    return totals


def average_by_player(records: Sequence[GameRecord], roster: Sequence[str]) -> dict[str, float]:
    """Average score per game for each roster player, rounded for display."""
    if not records:
        return dict.fromkeys(roster, 0.0)
    totals = sum_by_player(records, roster)
    return {player: round(total / len(records), AVERAGE_DECIMALS) for player, total in totals.items()}


def cumulative_by_player(records: Iterable[GameRecord], roster: Sequence[str]) -> dict[str, list[int]]:
    """Running total per player after each record, in the given record order."""
    running = dict.fromkeys(roster, 0)
    series: dict[str, list[int]] = {player: [] for player in roster}
    for record in records:
        for player in roster:
            running[player] += record.scores.get(player, 0)
            series[player].append(running[player])
    return series
