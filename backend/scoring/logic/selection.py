"""
Record selection: year filtering, date grouping and recency ordering.

All functions are pure and preserve input order unless they document an
ordering of their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Iterable

    from scoring.logic.models import GameRecord


def select_for_year(
    records: Iterable[GameRecord],
    year: int,
    *,
    exclude_open: bool = False,
) -> list[GameRecord]:
    """
    Return the records whose calendar date falls in the given year.

    Dates are plain calendar days, so no timezone normalization applies.
    With exclude_open, open (exhibition) games are dropped. Input order is
    preserved; callers apply their own ordering.
    """
    return [r for r in records if r.date.year == year and not (exclude_open and r.is_open)]


def scored_records(records: Iterable[GameRecord]) -> list[GameRecord]:
    """Drop open games, keeping the records that count toward totals and statistics."""
    return [r for r in records if not r.is_open]


def records_on(records: Iterable[GameRecord], day: dt.date) -> list[GameRecord]:
    return [r for r in records if r.date == day]


def group_by_date(records: Iterable[GameRecord]) -> dict[dt.date, list[GameRecord]]:
    """Group records by calendar day, keeping input order inside each day."""
    groups: dict[dt.date, list[GameRecord]] = {}
    for record in records:
        groups.setdefault(record.date, []).append(record)
    return groups


def distinct_dates(records: Iterable[GameRecord], *, newest_first: bool = False) -> list[dt.date]:
    return sorted({r.date for r in records}, reverse=newest_first)


def latest_date(records: Iterable[GameRecord]) -> dt.date | None:
    return max((r.date for r in records), default=None)


def order_by_date(records: Iterable[GameRecord], *, newest_first: bool = False) -> list[GameRecord]:
    """Sort by date, keeping input order among records of the same day in both directions."""
    if newest_first:
        # reverse=True would also flip same-day records
        return sorted(records, key=lambda r: -r.date.toordinal())
    return sorted(records, key=lambda r: r.date)


def most_recent(records: Iterable[GameRecord], n: int) -> list[GameRecord]:
    """
    Return up to n records, newest first.

    Newest is decided by date descending, then by insertion sequence
    descending for records sharing a date.
    """
    if n <= 0:
        return []
    return sorted(records, key=lambda r: (r.date, r.seq), reverse=True)[:n]
