"""Unit tests for converting between the stored snapshot and the in-memory ledger."""

import datetime as dt

from scoring.logic import ledger
from scoring.logic.enums import GameVariant
from scoring.persistence.models import LedgerSnapshot
from scoring.tests.builders import make_game, make_ledger


class TestFromLedger:
    def test_splits_winner_designations_by_kind(self):
        start = ledger.toggle_day_winner(make_ledger(), dt.date(2025, 1, 19), "A")
        start = ledger.toggle_year_winner(start, 2025, "B")
        start = ledger.reorder_ranking(start, "yearly_2025", ["B", "A"])

        data = LedgerSnapshot.from_ledger(start).to_json_dict()

        assert data["dailyWinners"] == {"2025-01-19": "A"}
        assert data["yearlyWinner"] == {"2025": "B"}
        assert data["rankingOverrides"] == {"yearly_2025": ["B", "A"]}
        assert data["lastGameType"] == "パねぇ！"
        assert "updatedAt" not in data

    def test_keeps_camel_case_game_fields(self):
        start = make_ledger(make_game(game_id="x", is_open=True, true_winner="A"))

        game = LedgerSnapshot.from_ledger(start).to_json_dict()["games"][0]

        assert game["id"] == "x"
        assert game["type"] == "パねぇ！"
        assert game["isOpen"] is True
        assert game["trueWinner"] == "A"
        assert game["seq"] == 1


class TestToLedger:
    def test_restores_overrides_and_fund(self):
        snapshot = LedgerSnapshot.model_validate(
            {
                "players": ["A", "B"],
                "fund": 300,
                "lastGameType": "普通",
                "dailyWinners": {"2025-01-19": "A"},
                "yearlyWinner": {"2025": "B"},
                "rankingOverrides": {"daily_2025-01-19": ["B", "A"]},
            },
        )

        restored = snapshot.to_ledger()

        assert restored.players == ("A", "B")
        assert restored.fund == 300
        assert restored.last_game_type is GameVariant.NORMAL
        assert restored.overrides.winners == {"daily_2025-01-19": "A", "yearly_2025": "B"}
        assert restored.overrides.ranking_for("daily_2025-01-19") == ("B", "A")
        assert restored.revision == 0

    def test_numbers_legacy_records_in_stored_order(self):
        snapshot = LedgerSnapshot.model_validate(
            {
                "games": [
                    {"id": "old1", "date": "2025-01-19", "scores": {"A": 1}},
                    {"id": "new", "date": "2025-01-19", "scores": {"A": 1}, "seq": 4},
                    {"id": "old2", "date": "2025-01-19", "scores": {"A": 1}},
                ],
            },
        )

        restored = snapshot.to_ledger()

        assert [g.seq for g in restored.games] == [5, 4, 6]
        assert restored.next_seq == 7

    def test_missing_type_and_open_flag_default(self):
        snapshot = LedgerSnapshot.model_validate(
            {"games": [{"id": "x", "date": "2025-01-19", "type": "", "isOpen": None, "scores": {}}]},
        )

        game = snapshot.to_ledger().games[0]

        assert game.game_type is GameVariant.PANEE
        assert game.is_open is False

    def test_empty_snapshot_gives_default_ledger(self):
        restored = LedgerSnapshot().to_ledger()

        assert len(restored.players) == 6
        assert restored.games == ()
        assert restored.next_seq == 1
