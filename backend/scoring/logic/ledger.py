"""
Immutable ledger mutations.

Every function takes a Ledger and returns a new Ledger with the change
applied and revision bumped. Rejected operations raise a LedgerError
subclass before anything is built, so the caller's ledger stays valid.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoring.logic.enums import GameVariant
from scoring.logic.exceptions import GameNotFoundError, NoGamesError, RosterError, ScoreValidationError
from scoring.logic.models import GameRecord, new_game_id
from scoring.logic.overrides import (
    clear_ranking_override,
    set_ranking_override,
    toggle_daily_winner,
    toggle_true_winner,
    toggle_yearly_winner,
)
from scoring.logic.settings import MIN_PLAYERS

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Callable, Iterable, Mapping

    from scoring.logic.models import Duration, Ledger, OverrideStore

_VARIANT_CYCLE = tuple(GameVariant)


def _commit(ledger: Ledger, **updates: object) -> Ledger:
    return ledger.model_copy(update={**updates, "revision": ledger.revision + 1})


def _replace_game(ledger: Ledger, game_id: str, change: Callable[[GameRecord], GameRecord]) -> Ledger:
    games = list(ledger.games)
    for i, game in enumerate(games):
        if game.id == game_id:
            games[i] = change(game)
            return _commit(ledger, games=tuple(games))
    raise GameNotFoundError(game_id)


def _validate_scores(ledger: Ledger, scores: Mapping[str, int]) -> dict[str, int]:
    unknown = [p for p in scores if p not in ledger.players]
    if unknown:
        raise ScoreValidationError(f"Unknown players in scores: {', '.join(unknown)}")
    negative = [p for p, s in scores.items() if s < 0]
    if negative:
        raise ScoreValidationError(f"Scores must not be negative: {', '.join(negative)}")
    if not any(s > 0 for s in scores.values()):
        raise ScoreValidationError("No score entered")
    return {player: scores.get(player, 0) for player in ledger.players}


def record_game(  # noqa: PLR0913
    ledger: Ledger,
    day: dt.date,
    scores: Mapping[str, int],
    game_type: GameVariant,
    *,
    is_open: bool = False,
    duration: Duration | None = None,
    game_id: str | None = None,
) -> Ledger:
    """
    Append a newly entered game.

    Every roster player gets an entry (missing ones score zero). At least
    one positive score is required; a game where everyone scored zero is
    treated as nothing entered. A zero-length duration is not stored.
    """
    full_scores = _validate_scores(ledger, scores)
    if duration is not None and duration.minutes == 0 and duration.seconds == 0:
        duration = None

    record = GameRecord(
        id=game_id or new_game_id(),
        seq=ledger.next_seq,
        date=day,
        game_type=game_type,
        is_open=is_open,
        scores=full_scores,
        duration=duration,
    )
    return _commit(
        ledger,
        games=(*ledger.games, record),
        next_seq=ledger.next_seq + 1,
        last_game_type=game_type,
    )


def append_games(ledger: Ledger, records: Iterable[GameRecord]) -> Ledger:
    """Append records (tabular import) without id-based dedupe, assigning insertion sequence numbers."""
    seq = ledger.next_seq
    appended = []
    for record in records:
        appended.append(record.model_copy(update={"seq": seq}))
        seq += 1
    return _commit(ledger, games=(*ledger.games, *appended), next_seq=seq)


def merge_games(
    ledger: Ledger,
    records: Iterable[GameRecord],
    players: Iterable[str] | None = None,
) -> tuple[Ledger, int]:
    """
    Merge records from a JSON snapshot, skipping ids already present.

    When players is given it replaces the roster. Returns the new ledger
    and the number of records added.
    """
    existing = {g.id for g in ledger.games}
    seq = ledger.next_seq
    added = []
    for record in records:
        if record.id in existing:
            continue
        existing.add(record.id)
        added.append(record.model_copy(update={"seq": seq}))
        seq += 1

    updates: dict[str, object] = {"games": (*ledger.games, *added), "next_seq": seq}
    if players is not None:
        roster = tuple(players)
        _validate_roster(roster)
        updates["players"] = roster
    return _commit(ledger, **updates), len(added)


def delete_game(ledger: Ledger, game_id: str) -> Ledger:
    games = tuple(g for g in ledger.games if g.id != game_id)
    if len(games) == len(ledger.games):
        raise GameNotFoundError(game_id)
    return _commit(ledger, games=games)


def delete_games_on(ledger: Ledger, day: dt.date) -> Ledger:
    games = tuple(g for g in ledger.games if g.date != day)
    if len(games) == len(ledger.games):
        raise NoGamesError(f"No games recorded on {day.isoformat()}")
    return _commit(ledger, games=games)


def delete_games_in_year(ledger: Ledger, year: int) -> Ledger:
    games = tuple(g for g in ledger.games if g.date.year != year)
    if len(games) == len(ledger.games):
        raise NoGamesError(f"No games recorded in {year}")
    return _commit(ledger, games=games)


def clear_games(ledger: Ledger) -> Ledger:
    return _commit(ledger, games=())


def toggle_game_true_winner(ledger: Ledger, game_id: str, player: str) -> Ledger:
    return _replace_game(ledger, game_id, lambda game: toggle_true_winner(game, player))


def cycle_game_type(ledger: Ledger, game_id: str) -> Ledger:
    """Advance a game's variant to the next one in the fixed cycle."""

    def _next_variant(game: GameRecord) -> GameRecord:
        index = _VARIANT_CYCLE.index(game.game_type)
        return game.model_copy(update={"game_type": _VARIANT_CYCLE[(index + 1) % len(_VARIANT_CYCLE)]})

    return _replace_game(ledger, game_id, _next_variant)


def _validate_roster(players: tuple[str, ...]) -> None:
    if len(players) < MIN_PLAYERS:
        raise RosterError(f"At least {MIN_PLAYERS} players are required")
    if any(not p.strip() for p in players):
        raise RosterError("Player names must not be empty")
    if len(set(players)) != len(players):
        raise RosterError("Player names must be unique")


def add_player(ledger: Ledger, name: str) -> Ledger:
    player = name.strip()
    if not player:
        raise RosterError("Player name must not be empty")
    if player in ledger.players:
        raise RosterError(f"Player '{player}' already exists")
    return _commit(ledger, players=(*ledger.players, player))


def remove_player(ledger: Ledger, name: str) -> Ledger:
    """
    Drop a player from the roster.

    Stored game scores are kept; aggregation only looks at roster players,
    so the removed player's scores stop counting.
    """
    if name not in ledger.players:
        raise RosterError(f"Player '{name}' is not on the roster")
    if len(ledger.players) <= MIN_PLAYERS:
        raise RosterError(f"At least {MIN_PLAYERS} players are required")
    return _commit(ledger, players=tuple(p for p in ledger.players if p != name))


def set_fund(ledger: Ledger, amount: int) -> Ledger:
    if amount < 0:
        raise ScoreValidationError("Fund amount must not be negative")
    return _commit(ledger, fund=amount)


def _with_overrides(ledger: Ledger, overrides: OverrideStore) -> Ledger:
    return _commit(ledger, overrides=overrides)


def toggle_day_winner(ledger: Ledger, day: dt.date, player: str) -> Ledger:
    return _with_overrides(ledger, toggle_daily_winner(ledger.overrides, day, player))


def toggle_year_winner(ledger: Ledger, year: int, player: str) -> Ledger:
    return _with_overrides(ledger, toggle_yearly_winner(ledger.overrides, year, player))


def reorder_ranking(ledger: Ledger, key: str, players: Iterable[str]) -> Ledger:
    return _with_overrides(ledger, set_ranking_override(ledger.overrides, key, players))


def reset_ranking(ledger: Ledger, key: str) -> Ledger:
    return _with_overrides(ledger, clear_ranking_override(ledger.overrides, key))
