"""
Override store operations: scope keys, winner toggles and ranking orders.

All functions return new frozen models; the input is never mutated.
Overrides never expire: one whose tie no longer exists stays stored and
is simply inert until the same scope ties again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoring.logic.enums import OverrideKind

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Iterable

    from scoring.logic.models import GameRecord, OverrideStore


def scope_key(kind: OverrideKind, period: dt.date | int | str) -> str:
    """Build the key namespacing an override, e.g. ``daily_2025-01-01`` or ``yearly_2025``."""
    label = period if isinstance(period, str | int) else period.isoformat()
    return f"{kind.value}_{label}"


def daily_scope(day: dt.date) -> str:
    return scope_key(OverrideKind.DAILY, day)


def yearly_scope(year: int) -> str:
    return scope_key(OverrideKind.YEARLY, year)


def toggle_true_winner(record: GameRecord, player: str) -> GameRecord:
    """
    Designate player as the game's true winner, or clear the designation if already set to them.

    Callers only invoke this for a multi-way zero-tie, but any player name
    is accepted; a non-zero-scorer designation just leaves no cell highlighted.
    """
    true_winner = None if record.true_winner == player else player
    return record.model_copy(update={"true_winner": true_winner})


def _toggle_winner(store: OverrideStore, key: str, player: str) -> OverrideStore:
    winners = dict(store.winners)
    if winners.get(key) == player:
        del winners[key]
    else:
        winners[key] = player
    return store.model_copy(update={"winners": winners})


def toggle_daily_winner(store: OverrideStore, day: dt.date, player: str) -> OverrideStore:
    return _toggle_winner(store, daily_scope(day), player)


def toggle_yearly_winner(store: OverrideStore, year: int, player: str) -> OverrideStore:
    return _toggle_winner(store, yearly_scope(year), player)


def set_ranking_override(store: OverrideStore, key: str, players: Iterable[str]) -> OverrideStore:
    """Replace the ranking order stored for a scope wholesale."""
    rankings = dict(store.rankings)
    rankings[key] = tuple(players)
    return store.model_copy(update={"rankings": rankings})


def clear_ranking_override(store: OverrideStore, key: str) -> OverrideStore:
    if key not in store.rankings:
        return store
    rankings = {k: v for k, v in store.rankings.items() if k != key}
    return store.model_copy(update={"rankings": rankings})
