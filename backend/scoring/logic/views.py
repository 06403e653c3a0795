"""
Read models composed from a Ledger: score table, recent games and rankings.

Everything here is recomputed from scratch on each call. Callers that
want to memoize can key on ledger.revision.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from scoring.logic.aggregate import sum_by_player
from scoring.logic.enums import CellMark, OverrideKind
from scoring.logic.outcome import mark_scores, record_marks
from scoring.logic.overrides import daily_scope, scope_key, yearly_scope
from scoring.logic.ranking import rank
from scoring.logic.selection import (
    group_by_date,
    latest_date,
    most_recent,
    records_on,
    scored_records,
    select_for_year,
)
from scoring.logic.settings import DEFAULT_GAME_VARIANT, RECENT_GAMES_LIMIT
from scoring.logic.types import DayGroup, RankingView, ScoreRow, ScoreTable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoring.logic.models import GameRecord, Ledger


def game_row(record: GameRecord, roster: Sequence[str], number: int | None = None) -> ScoreRow:
    marks = record_marks(record, roster)
    return ScoreRow(
        scores=record.roster_scores(roster),
        marks=marks,
        game_id=record.id,
        number=number,
        day=record.date,
        game_type=record.game_type,
        duration=record.duration.label if record.duration else "-",
        is_open=record.is_open,
        true_winner=record.true_winner,
        needs_choice=CellMark.CHOICE_NEEDED in marks.values(),
    )


def total_row(
    records: Sequence[GameRecord],
    roster: Sequence[str],
    designated: str | None,
    day: dt.date | None = None,
) -> ScoreRow:
    """Aggregate row (daily or yearly) marked with the scope's winner designation."""
    outcome = mark_scores(sum_by_player(records, roster), roster, designated)
    return ScoreRow(
        scores=outcome.scores,
        marks=outcome.marks(),
        day=day,
        designated_winner=designated,
        needs_choice=outcome.needs_choice,
    )


def _day_group(day: dt.date, records: list[GameRecord], ledger: Ledger) -> DayGroup:
    roster = ledger.players
    scored = scored_records(records)
    total = None
    if scored:
        total = total_row(scored, roster, ledger.overrides.winner_for(daily_scope(day)), day)
    return DayGroup(
        day=day,
        game_type=records[0].game_type if records else DEFAULT_GAME_VARIANT,
        games=[game_row(record, roster, i) for i, record in enumerate(records, start=1)],
        total=total,
    )


def score_table(ledger: Ledger, year: int, *, newest_first: bool = True) -> ScoreTable:
    """
    Build the year's score table.

    Holds the yearly total row, one summary row per day with scored games
    (oldest first) and the per-day detail groups in the requested order.
    Open games appear in the detail groups but never in a total.
    """
    roster = ledger.players
    year_records = select_for_year(ledger.games, year)
    scored = scored_records(year_records)
    by_date = group_by_date(year_records)

    yearly_total = None
    if scored:
        yearly_total = total_row(scored, roster, ledger.overrides.winner_for(yearly_scope(year)))

    summaries = []
    for day in sorted(by_date):
        day_scored = scored_records(by_date[day])
        if day_scored:
            summaries.append(total_row(day_scored, roster, ledger.overrides.winner_for(daily_scope(day)), day))

    days = [_day_group(day, by_date[day], ledger) for day in sorted(by_date, reverse=newest_first)]

    return ScoreTable(
        year=year,
        players=list(roster),
        game_count=len(year_records),
        open_count=len(year_records) - len(scored),
        yearly_total=yearly_total,
        daily_summaries=summaries,
        days=days,
    )


def recent_games(ledger: Ledger, year: int, limit: int = RECENT_GAMES_LIMIT) -> list[ScoreRow]:
    """The most recently entered games of the year, open ones included, newest first."""
    records = most_recent(select_for_year(ledger.games, year), limit)
    return [game_row(record, ledger.players) for record in records]


def _ranking_view(
    kind: OverrideKind,
    period: dt.date | int,
    records: Sequence[GameRecord],
    ledger: Ledger,
) -> RankingView:
    key = scope_key(kind, period)
    totals = sum_by_player(records, ledger.players)
    label = period.isoformat() if isinstance(period, dt.date) else str(period)
    return RankingView(kind=kind, period=label, scope_key=key, entries=rank(totals, ledger.overrides, key))


def daily_ranking(ledger: Ledger, year: int) -> RankingView | None:
    """Ranking of the latest day of the year with scored games, or None without data."""
    scored = select_for_year(ledger.games, year, exclude_open=True)
    day = latest_date(scored)
    if day is None:
        return None
    return _ranking_view(OverrideKind.DAILY, day, records_on(scored, day), ledger)


def yearly_ranking(ledger: Ledger, year: int) -> RankingView | None:
    scored = select_for_year(ledger.games, year, exclude_open=True)
    if not scored:
        return None
    return _ranking_view(OverrideKind.YEARLY, year, scored, ledger)


def ranking_for_scope(ledger: Ledger, year: int, kind: OverrideKind, period: dt.date | int) -> RankingView:
    """
    Ranking the editor starts from, with the stored override applied.

    Unlike daily_ranking and yearly_ranking this always returns a view;
    a scope without scored games ranks everyone at zero.
    """
    scored = select_for_year(ledger.games, year, exclude_open=True)
    if kind is OverrideKind.DAILY:
        if not isinstance(period, dt.date):
            raise TypeError("daily rankings need a date period")
        scored = records_on(scored, period)
    return _ranking_view(kind, period, scored, ledger)
