"""Ledger rule constants shared by the engine, the importers and the API."""

from scoring.logic.enums import GameVariant

MIN_PLAYERS = 2

DEFAULT_PLAYERS: tuple[str, ...] = ("百合子", "守正", "正久", "千明", "宏子", "健二")

DEFAULT_GAME_VARIANT = GameVariant.PANEE

# zero is the best possible result under the house rule
WINNING_SCORE = 0

RECENT_GAMES_LIMIT = 5

# averages shown on the summary and chart views
AVERAGE_DECIMALS = 2
