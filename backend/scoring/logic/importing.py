"""
Bulk import and export of ledger data.

Two import formats are accepted:
- a comma-separated score table (one game per row), typically pasted
  from a spreadsheet; bad rows are skipped and counted, the rest imported.
- a JSON snapshot as produced by export_snapshot; any problem rejects
  the whole import.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scoring.logic.enums import GameVariant
from scoring.logic.exceptions import ImportFormatError
from scoring.logic.models import GameRecord, new_game_id
from scoring.logic.settings import DEFAULT_GAME_VARIANT

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoring.logic.models import Ledger

logger = structlog.get_logger()

# header cells that label non-player columns
NON_PLAYER_COLUMNS = frozenset({"タイプ", "種類", "合計", "累計", ""})

# date cells containing any of these mark spreadsheet summary rows
SUMMARY_ROW_MARKERS = ("累計", "順位", "1位", "最下位", "差分")

# substring -> variant, checked in order against the trailing cell
VARIANT_MARKERS: tuple[tuple[str, GameVariant], ...] = (
    ("パネェ", GameVariant.PANEE),
    ("パねぇ", GameVariant.PANEE),
    ("パーチー", GameVariant.PARTY),
    ("普通", GameVariant.NORMAL),
    ("どっちも", GameVariant.NORMAL),
)

_LEADING_INT = re.compile(r"\d+")
_DATE_SHAPE = re.compile(r"\d+/\d+(?:/\d+)?")


class TableImport(BaseModel):
    """Outcome of a tabular import: the parsed records and why other rows were dropped."""

    model_config = ConfigDict(frozen=True)

    records: list[GameRecord]
    skipped_summary: int = 0
    skipped_invalid_date: int = 0
    skipped_no_score: int = 0

    @property
    def skipped(self) -> int:
        return self.skipped_summary + self.skipped_invalid_date + self.skipped_no_score


class SnapshotImport(BaseModel):
    """Parsed JSON snapshot. players is None when the snapshot carries no roster."""

    model_config = ConfigDict(frozen=True)

    players: list[str] | None = None
    games: list[GameRecord] = Field(default_factory=list)


def _split_cells(line: str) -> list[str]:
    return [cell.strip().replace('"', "") for cell in line.split(",")]


def parse_int_cell(cell: str) -> int:
    """Leading-digit integer parse; anything without leading digits is zero."""
    match = _LEADING_INT.match(cell.strip())
    return int(match.group()) if match else 0


def parse_date_cell(cell: str, year: int) -> dt.date | None:
    """
    Parse ``m/d`` (in the given year) or ``y/m/d``.

    Returns None for anything else, including impossible dates like 2/30.
    """
    parts = cell.split("/")
    if len(parts) == 2:  # noqa: PLR2004
        parts = [str(year), *parts]
    if len(parts) != 3:  # noqa: PLR2004
        return None
    try:
        y, m, d = (int(part.strip()) for part in parts)
        return dt.date(y, m, d)
    except ValueError:
        return None


def parse_variant_cell(cell: str) -> GameVariant:
    for marker, variant in VARIANT_MARKERS:
        if marker in cell:
            return variant
    return DEFAULT_GAME_VARIANT


def _looks_like_date(cell: str) -> bool:
    return _DATE_SHAPE.fullmatch(cell.strip()) is not None


def _is_summary_row(first_cell: str) -> bool:
    return not first_cell or any(marker in first_cell for marker in SUMMARY_ROW_MARKERS)


def _header_columns(cells: Sequence[str]) -> list[tuple[str, int]]:
    return [(name, i) for i, name in enumerate(cells) if i > 0 and name not in NON_PLAYER_COLUMNS]


def parse_score_table(text: str, year: int, roster: Sequence[str]) -> TableImport:
    """
    Parse a comma-separated score table into fresh game records.

    The first line is normally a header naming the player columns after
    the date column. When its first cell is shaped like a date (m/d or
    y/m/d, valid or not), the columns are taken to be the roster in order
    and that line is treated as data too. A row is imported only when a
    roster player has a positive score.
    Records get new ids; the caller appends them without merging.
    """
    lines = [line.strip() for line in text.strip().splitlines()]
    if not lines or not lines[0]:
        return TableImport(records=[])

    first = _split_cells(lines[0])
    if _looks_like_date(first[0]):
        columns = [(player, i) for i, player in enumerate(roster, start=1)]
        data_lines = lines
    else:
        columns = _header_columns(first)
        data_lines = lines[1:]

    records: list[GameRecord] = []
    skipped_summary = skipped_invalid_date = skipped_no_score = 0

    for line in data_lines:
        if not line:
            continue
        cells = _split_cells(line)
        if _is_summary_row(cells[0]):
            skipped_summary += 1
            continue
        day = parse_date_cell(cells[0], year)
        if day is None:
            skipped_invalid_date += 1
            continue
        scores = {name: parse_int_cell(cells[col]) if col < len(cells) else 0 for name, col in columns}
        if not any(scores.get(player, 0) > 0 for player in roster):
            skipped_no_score += 1
            continue
        records.append(
            GameRecord(id=new_game_id(), date=day, game_type=parse_variant_cell(cells[-1]), scores=scores),
        )

    result = TableImport(
        records=records,
        skipped_summary=skipped_summary,
        skipped_invalid_date=skipped_invalid_date,
        skipped_no_score=skipped_no_score,
    )
    logger.info(
        "parsed score table",
        imported=len(records),
        skipped_summary=skipped_summary,
        skipped_invalid_date=skipped_invalid_date,
        skipped_no_score=skipped_no_score,
    )
    return result


def parse_snapshot_import(text: str | bytes) -> SnapshotImport:
    """Parse an exported JSON snapshot. Malformed JSON or records abort the whole import."""
    try:
        return SnapshotImport.model_validate_json(text)
    except ValidationError as e:
        logger.warning("snapshot import rejected", errors=e.error_count())
        raise ImportFormatError(f"Invalid snapshot: {e.errors()[0]['msg']}") from e


def dump_game(record: GameRecord) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def export_snapshot(ledger: Ledger, now: dt.datetime | None = None) -> dict[str, Any]:
    """Export roster and games in the format parse_snapshot_import reads back."""
    exported_at = now or dt.datetime.now(tz=dt.UTC)
    return {
        "players": list(ledger.players),
        "games": [dump_game(g) for g in ledger.games],
        "exportDate": exported_at.isoformat(),
    }
