"""
Year statistics and chart series.

Open games never count here. Callers pass the records of any subset;
chart_data does the year/day selection itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoring.logic.aggregate import average_by_player, cumulative_by_player, sum_by_player
from scoring.logic.outcome import count_wins_losses
from scoring.logic.selection import distinct_dates, order_by_date, records_on, select_for_year
from scoring.logic.settings import AVERAGE_DECIMALS
from scoring.logic.types import ChartData, PlayerCount, YearSummary

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Iterable, Mapping, Sequence

    from scoring.logic.models import GameRecord


def _players_at(values: Mapping[str, int], target: int) -> list[str]:
    return [player for player, value in values.items() if value == target]


def _leaders(counts: Mapping[str, int]) -> list[PlayerCount]:
    best = max(counts.values(), default=0)
    return [PlayerCount(player=p, count=c) for p, c in counts.items() if c == best]


def summarize_year(records: Sequence[GameRecord], roster: Sequence[str]) -> YearSummary | None:
    """
    Headline figures for a set of scored games, or None when there are none.

    Ties are reported in full: every player at the best total is first,
    every player at the worst total is last, and so on.
    """
    if not records or not roster:
        return None

    totals = sum_by_player(records, roster)
    counts = count_wins_losses(records, roster)
    average = sum(totals.values()) / len(roster) / len(records)

    return YearSummary(
        total_games=len(records),
        first_place=_players_at(totals, min(totals.values())),
        last_place=_players_at(totals, max(totals.values())),
        most_wins=_leaders(counts.wins),
        most_losses=_leaders(counts.losses),
        average_score=round(average, AVERAGE_DECIMALS),
    )


def chart_data(
    records: Iterable[GameRecord],
    roster: Sequence[str],
    year: int,
    day: dt.date | None = None,
) -> ChartData:
    """
    Build the chart series for a year, or for one day of it.

    Games are taken oldest first and labelled G1, G2, ... in that order.
    dates lists every day of the year with scored games, so a client can
    offer them for selection whatever day is currently shown.
    """
    year_records = order_by_date(select_for_year(records, year, exclude_open=True))
    selected = records_on(year_records, day) if day is not None else year_records
    counts = count_wins_losses(selected, roster)

    return ChartData(
        dates=distinct_dates(year_records),
        selected_date=day,
        game_labels=[f"G{i}" for i in range(1, len(selected) + 1)],
        cumulative=cumulative_by_player(selected, roster),
        wins=counts.wins,
        losses=counts.losses,
        averages=average_by_player(selected, roster),
    )
