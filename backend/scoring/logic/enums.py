"""
String enum definitions for score ledger concepts.
"""

from enum import StrEnum


class GameVariant(StrEnum):
    """House variants a game can be played under.

    Declaration order is the cycling order used when an operator flips a
    recorded game's variant.
    """

    PANEE = "パねぇ！"
    PARTY = "パーチー"
    NORMAL = "普通"


class OverrideKind(StrEnum):
    """Aggregate level an override applies to."""

    DAILY = "daily"
    YEARLY = "yearly"


class CellMark(StrEnum):
    """Display classification of one player's score in a row."""

    WINNER = "winner"
    CHOICE_NEEDED = "choice_needed"  # zero-tie without a designated winner
    LOSER = "loser"
    NONE = "none"


class TableOrder(StrEnum):
    """Date ordering for the score table detail section."""

    NEWEST_FIRST = "desc"
    OLDEST_FIRST = "asc"
