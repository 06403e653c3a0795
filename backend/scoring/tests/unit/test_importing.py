"""Unit tests for score-table and snapshot import, and export."""

import datetime as dt
import json

import pytest

from scoring.logic.enums import GameVariant
from scoring.logic.exceptions import ImportFormatError
from scoring.logic.importing import (
    export_snapshot,
    parse_date_cell,
    parse_int_cell,
    parse_score_table,
    parse_snapshot_import,
    parse_variant_cell,
)
from scoring.tests.builders import make_game, make_ledger

SHEET = """日付,百合子,守正,タイプ
1/19,0,5,パねぇ！
1/19,3,0,パーチー
2025/2/1,"2",1,普通
累計,5,6,
順位,1,2,
2/30,1,1,
,,,
1/20,0,0,パねぇ！
"""
SHEET_ROSTER = ["百合子", "守正"]


class TestParseScoreTable:
    def test_single_data_row_uses_roster_layout(self):
        result = parse_score_table('1/19,0,5,"パねぇ！"', 2025, ["P1", "P2"])

        assert len(result.records) == 1
        record = result.records[0]
        assert record.date == dt.date(2025, 1, 19)
        assert record.scores == {"P1": 0, "P2": 5}
        assert record.game_type is GameVariant.PANEE

    def test_header_names_player_columns(self):
        result = parse_score_table(SHEET, 2025, SHEET_ROSTER)

        assert [r.scores for r in result.records] == [
            {"百合子": 0, "守正": 5},
            {"百合子": 3, "守正": 0},
            {"百合子": 2, "守正": 1},
        ]
        assert [r.game_type for r in result.records] == [GameVariant.PANEE, GameVariant.PARTY, GameVariant.NORMAL]
        assert result.records[2].date == dt.date(2025, 2, 1)

    def test_skipped_rows_are_counted_by_reason(self):
        result = parse_score_table(SHEET, 2025, SHEET_ROSTER)

        assert result.skipped_summary == 3
        assert result.skipped_invalid_date == 1
        assert result.skipped_no_score == 1
        assert result.skipped == 5

    def test_records_get_fresh_unique_ids(self):
        result = parse_score_table(SHEET, 2025, SHEET_ROSTER)

        ids = [r.id for r in result.records]
        assert len(set(ids)) == len(ids)

    def test_header_skips_non_player_labels(self):
        text = "日付,A,,合計,B,種類\n3/4,1,x,9,2,普通"

        result = parse_score_table(text, 2025, ["A", "B"])

        assert result.records[0].scores == {"A": 1, "B": 2}

    def test_missing_cells_score_zero(self):
        result = parse_score_table("日付,A,B,C\n3/4,2", 2025, ["A", "B", "C"])

        assert result.records[0].scores == {"A": 2, "B": 0, "C": 0}

    def test_empty_text(self):
        assert parse_score_table("", 2025, ["A", "B"]).records == []

    def test_header_only(self):
        assert parse_score_table("日付,A,B", 2025, []).records == []

    def test_impossible_date_on_first_line_is_still_data(self):
        result = parse_score_table("2/30,0,5,3\n1/19,3,0,4", 2025, ["A", "B", "C"])

        assert result.skipped_invalid_date == 1
        assert [(r.date, r.scores) for r in result.records] == [
            (dt.date(2025, 1, 19), {"A": 3, "B": 0, "C": 4}),
        ]

    def test_rows_without_roster_scores_are_skipped(self):
        result = parse_score_table("日付,X,Y\n1/19,0,5", 2025, ["A", "B"])

        assert result.records == []
        assert result.skipped_no_score == 1

    def test_unknown_columns_do_not_count_as_scores(self):
        result = parse_score_table("日付,A,Z\n1/19,0,5\n1/20,2,0", 2025, ["A", "B"])

        assert [r.date for r in result.records] == [dt.date(2025, 1, 20)]
        assert result.skipped_no_score == 1


class TestCellParsers:
    @pytest.mark.parametrize(
        ("cell", "expected"),
        [("12", 12), ("7点", 7), (" 3 ", 3), ("abc", 0), ("", 0), ("-4", 0)],
    )
    def test_parse_int_cell(self, cell, expected):
        assert parse_int_cell(cell) == expected

    def test_parse_date_cell(self):
        assert parse_date_cell("1/19", 2025) == dt.date(2025, 1, 19)
        assert parse_date_cell("2024/12/31", 2025) == dt.date(2024, 12, 31)
        assert parse_date_cell("2/30", 2025) is None
        assert parse_date_cell("19", 2025) is None
        assert parse_date_cell("a/b", 2025) is None

    @pytest.mark.parametrize(
        ("cell", "expected"),
        [
            ("パネェ", GameVariant.PANEE),
            ("パねぇ！", GameVariant.PANEE),
            ("パーチー", GameVariant.PARTY),
            ("普通", GameVariant.NORMAL),
            ("どっちも", GameVariant.NORMAL),
            ("5", GameVariant.PANEE),
        ],
    )
    def test_parse_variant_cell(self, cell, expected):
        assert parse_variant_cell(cell) is expected


class TestParseSnapshotImport:
    def test_parses_players_and_games(self):
        text = json.dumps(
            {
                "players": ["A", "B"],
                "games": [{"id": "x", "date": "2025-01-19", "type": "普通", "scores": {"A": 1, "B": 0}}],
                "exportDate": "2025-01-20T00:00:00Z",
            },
        )

        snapshot = parse_snapshot_import(text)

        assert snapshot.players == ["A", "B"]
        assert snapshot.games[0].game_type is GameVariant.NORMAL
        assert snapshot.games[0].is_open is False

    def test_players_absent_is_none(self):
        assert parse_snapshot_import('{"games": []}').players is None

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '{"games": [{"id": "x"}]}',
            '{"games": [{"id": "x", "date": "2025-01-19", "scores": {"A": -1}}]}',
        ],
    )
    def test_malformed_input_aborts(self, text):
        with pytest.raises(ImportFormatError):
            parse_snapshot_import(text)


class TestExportSnapshot:
    def test_export_round_trips_through_import(self):
        start = make_ledger(make_game(game_id="x", true_winner="A"), make_game(game_id="y", is_open=True))
        now = dt.datetime(2025, 1, 20, 12, 0, tzinfo=dt.UTC)

        exported = export_snapshot(start, now)

        assert exported["exportDate"] == "2025-01-20T12:00:00+00:00"
        assert exported["games"][0]["trueWinner"] == "A"
        assert exported["games"][1]["isOpen"] is True
        assert "duration" not in exported["games"][0]
        again = parse_snapshot_import(json.dumps(exported))
        assert [g.id for g in again.games] == ["x", "y"]
        assert again.players == ["A", "B", "C"]
