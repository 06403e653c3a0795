"""Unit tests for scope keys and override toggles."""

import datetime as dt

from scoring.logic.enums import OverrideKind
from scoring.logic.models import OverrideStore
from scoring.logic.overrides import (
    clear_ranking_override,
    daily_scope,
    scope_key,
    set_ranking_override,
    toggle_daily_winner,
    toggle_true_winner,
    toggle_yearly_winner,
    yearly_scope,
)
from scoring.tests.builders import make_game


class TestScopeKey:
    def test_daily_and_yearly_keys(self):
        assert daily_scope(dt.date(2025, 1, 1)) == "daily_2025-01-01"
        assert yearly_scope(2025) == "yearly_2025"
        assert scope_key(OverrideKind.YEARLY, "2025") == "yearly_2025"


class TestToggleTrueWinner:
    def test_toggle_twice_restores_unset(self):
        game = make_game(scores={"A": 0, "B": 0, "C": 2})

        once = toggle_true_winner(game, "A")
        twice = toggle_true_winner(once, "A")

        assert once.true_winner == "A"
        assert twice.true_winner is None
        assert game.true_winner is None

    def test_toggle_other_player_switches_designation(self):
        game = make_game(scores={"A": 0, "B": 0, "C": 2}, true_winner="A")

        assert toggle_true_winner(game, "B").true_winner == "B"


class TestWinnerToggles:
    def test_daily_toggle_sets_and_clears(self):
        day = dt.date(2025, 1, 19)

        store = toggle_daily_winner(OverrideStore(), day, "A")
        assert store.winner_for("daily_2025-01-19") == "A"

        store = toggle_daily_winner(store, day, "A")
        assert store.winner_for("daily_2025-01-19") is None

    def test_yearly_toggle_replaces_other_player(self):
        store = toggle_yearly_winner(OverrideStore(), 2025, "A")
        store = toggle_yearly_winner(store, 2025, "B")

        assert store.winners == {"yearly_2025": "B"}

    def test_does_not_mutate_input(self):
        original = OverrideStore()
        toggle_yearly_winner(original, 2025, "A")

        assert original.winners == {}


class TestRankingOverrides:
    def test_set_replaces_wholesale(self):
        store = set_ranking_override(OverrideStore(), "yearly_2025", ["A", "B", "C"])
        store = set_ranking_override(store, "yearly_2025", ["C", "A"])

        assert store.ranking_for("yearly_2025") == ("C", "A")

    def test_clear(self):
        store = set_ranking_override(OverrideStore(), "yearly_2025", ["A", "B"])

        assert clear_ranking_override(store, "yearly_2025").ranking_for("yearly_2025") == ()
        assert clear_ranking_override(store, "daily_2025-01-01") is store
