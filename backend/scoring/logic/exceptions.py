"""Typed domain exceptions for ledger operations.

Pure ledger functions raise subclasses of LedgerError instead of raw
ValueError. Aggregation, classification and ranking never raise; only
mutations and imports can fail. The API boundary converts these into
JSON error responses.
"""


class LedgerError(Exception):
    """Base exception for rejected ledger operations.

    Raised before any new state is produced, so the caller's ledger is
    left untouched.
    """


class ScoreValidationError(LedgerError):
    """Score entry or fund amount is not acceptable (no score, negative value, unknown player)."""


class RosterError(LedgerError):
    """Roster change would break roster rules (empty or duplicate name, below minimum size)."""


class GameNotFoundError(LedgerError):
    """No game record with the requested id."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game '{game_id}' not found")


class NoGamesError(LedgerError):
    """A bulk delete matched no game records."""


class ImportFormatError(LedgerError):
    """Imported text could not be parsed into ledger data."""
