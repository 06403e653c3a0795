from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from scoring.logic.models import Ledger
from scoring.logic.settings import DEFAULT_PLAYERS

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scoring.persistence.repository import SnapshotRepository

logger = structlog.get_logger()


class LoadSource(StrEnum):
    """Where the ledger currently held by the manager came from."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
    DEFAULT = "default"


class LedgerManager:
    """Owns the current Ledger and keeps it in sync with storage.

    Mutations run through apply(), which holds a lock across computing the
    new ledger and saving it, so concurrent requests are applied one at a
    time and a failed save leaves the previous ledger in place.
    """

    def __init__(
        self,
        repository: SnapshotRepository,
        fallback: SnapshotRepository | None = None,
        default_players: Sequence[str] = DEFAULT_PLAYERS,
    ) -> None:
        self._repository = repository
        self._fallback = fallback
        self._default_players = tuple(default_players)
        self._ledger = Ledger(players=self._default_players)
        self._source = LoadSource.DEFAULT
        self._lock = asyncio.Lock()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def source(self) -> LoadSource:
        return self._source

    async def load(self) -> LoadSource:
        """
        Replace the in-memory ledger with the stored one.

        Tries the primary repository, then the fallback, then starts from a
        fresh ledger with the default roster. A read failure is logged and
        reported through the returned source instead of being raised.
        """
        async with self._lock:
            ledger, source = await self._load_first_available()
            self._ledger = ledger
            self._source = source
        logger.info("ledger ready", source=source, games=len(ledger.games), players=len(ledger.players))
        return source

    async def _load_first_available(self) -> tuple[Ledger, LoadSource]:
        candidates = [(self._repository, LoadSource.PRIMARY)]
        if self._fallback is not None:
            candidates.append((self._fallback, LoadSource.FALLBACK))

        for repository, source in candidates:
            try:
                ledger = await repository.load()
            except OSError as e:
                logger.warning("failed to load ledger", source=source, error=str(e))
                continue
            if ledger is not None:
                return ledger, source
        return Ledger(players=self._default_players), LoadSource.DEFAULT

    async def apply(self, change: Callable[[Ledger], Ledger]) -> Ledger:
        """
        Apply a pure ledger mutation and persist the result.

        LedgerError raised by change propagates with nothing modified. When
        the primary save fails the new ledger is discarded and OSError
        propagates. The fallback copy is best-effort.
        """
        async with self._lock:
            updated = change(self._ledger)
            await self._repository.save(updated)
            self._ledger = updated
            await self._mirror(updated)
        return updated

    async def _mirror(self, ledger: Ledger) -> None:
        if self._fallback is None:
            return
        try:
            await self._fallback.save(ledger)
        except OSError:
            logger.exception("failed to save fallback ledger copy")
