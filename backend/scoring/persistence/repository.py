"""Abstract interface for ledger persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scoring.logic.models import Ledger


class SnapshotRepository(ABC):
    """Whole-dataset persistence for a ledger.

    load returns None when nothing has been stored yet and raises OSError
    when stored data exists but cannot be read. save replaces everything
    previously stored (last writer wins).
    """

    @abstractmethod
    async def load(self) -> Ledger | None: ...

    @abstractmethod
    async def save(self, ledger: Ledger) -> None: ...
