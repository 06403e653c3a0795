"""File-backed ledger repository storing the snapshot as JSON."""

import asyncio
import datetime as dt
import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from scoring.logic.models import Ledger
from scoring.persistence.models import LedgerSnapshot
from scoring.persistence.repository import SnapshotRepository
from shared.storage import write_text_atomic

logger = structlog.get_logger()


class FileSnapshotRepository(SnapshotRepository):
    """File-backed snapshot repository.

    Stores the whole ledger as one JSON document, rewritten atomically on
    every save. Uses asyncio.Lock so a load never observes a save halfway
    through within a single process.

    Limitation: only supports a single server instance. Several processes
    writing the same file would overwrite each other's changes.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def load(self) -> Ledger | None:
        async with self._lock:
            return self._load_from_file()

    async def save(self, ledger: Ledger) -> None:
        async with self._lock:
            self._save_to_file(ledger)

    def _load_from_file(self) -> Ledger | None:
        """Read the snapshot file.

        Returns None when the file does not exist yet. Raises OSError on
        read/parse failures for an existing file to prevent data loss from
        overwriting a file we could not read.
        """
        if not self._file_path.exists():
            return None

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load ledger from {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {self._file_path}"
            raise OSError(msg)

        try:
            ledger = LedgerSnapshot.model_validate(data).to_ledger()
        except ValidationError as exc:
            msg = f"Failed to parse ledger data from {self._file_path}"
            raise OSError(msg) from exc

        logger.info("loaded ledger", path=str(self._file_path), games=len(ledger.games))
        return ledger

    def _save_to_file(self, ledger: Ledger) -> None:
        snapshot = LedgerSnapshot.from_ledger(ledger, updated_at=dt.datetime.now(tz=dt.UTC))
        content = json.dumps(snapshot.to_json_dict(), ensure_ascii=False, indent=2)
        write_text_atomic(self._file_path, content, prefix=".ledger_")
