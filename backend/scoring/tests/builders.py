"""Record and ledger builders shared by the scoring tests."""

import datetime as dt
import itertools

from scoring.logic.enums import GameVariant
from scoring.logic.models import Duration, GameRecord, Ledger, OverrideStore

ROSTER = ("A", "B", "C")

_ids = itertools.count(1)


def make_game(  # noqa: PLR0913
    day: str | dt.date = "2025-01-19",
    scores: dict[str, int] | None = None,
    *,
    game_id: str | None = None,
    seq: int = 0,
    is_open: bool = False,
    game_type: GameVariant = GameVariant.PANEE,
    true_winner: str | None = None,
    duration: Duration | None = None,
) -> GameRecord:
    return GameRecord(
        id=game_id or f"g{next(_ids)}",
        seq=seq,
        date=dt.date.fromisoformat(day) if isinstance(day, str) else day,
        game_type=game_type,
        is_open=is_open,
        scores=scores if scores is not None else {"A": 0, "B": 3, "C": 5},
        true_winner=true_winner,
        duration=duration,
    )


def make_ledger(
    *games: GameRecord,
    players: tuple[str, ...] = ROSTER,
    overrides: OverrideStore | None = None,
) -> Ledger:
    """Ledger holding games in the given order, numbered 1..n by insertion."""
    numbered = tuple(g.model_copy(update={"seq": i}) for i, g in enumerate(games, start=1))
    return Ledger(
        players=players,
        games=numbered,
        overrides=overrides or OverrideStore(),
        next_seq=len(numbered) + 1,
    )
