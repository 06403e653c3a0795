from pathlib import Path

import pytest
from pydantic import ValidationError

from scoreboard.server.settings import ScoreboardSettings
from scoring.logic.settings import DEFAULT_PLAYERS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SCOREBOARD_DATA_FILE",
        "SCOREBOARD_BACKUP_FILE",
        "SCOREBOARD_LOG_DIR",
        "SCOREBOARD_CORS_ORIGINS",
        "SCOREBOARD_DEFAULT_PLAYERS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestScoreboardSettings:
    def test_defaults(self):
        settings = ScoreboardSettings()
        assert settings.data_file == Path("backend/data/ledger.json")
        assert settings.backup_file is None
        assert settings.log_dir == "backend/logs/scoreboard"
        assert settings.cors_origins == []
        assert settings.default_players == list(DEFAULT_PLAYERS)

    def test_file_overrides(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DATA_FILE", "/srv/uno/ledger.json")
        monkeypatch.setenv("SCOREBOARD_BACKUP_FILE", "/mnt/backup/ledger.json")
        settings = ScoreboardSettings()
        assert settings.data_file == Path("/srv/uno/ledger.json")
        assert settings.backup_file == Path("/mnt/backup/ledger.json")

    def test_cors_origins_csv(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_CORS_ORIGINS", "http://x.com, http://y.com")
        assert ScoreboardSettings().cors_origins == ["http://x.com", "http://y.com"]

    def test_blank_cors_origins_rejected(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_CORS_ORIGINS", " ")
        with pytest.raises(ValidationError, match="cors_origins"):
            ScoreboardSettings()

    def test_default_players_json_array(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_PLAYERS", '["あや","けん","ゆう"]')
        assert ScoreboardSettings().default_players == ["あや", "けん", "ゆう"]

    def test_default_players_csv(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_PLAYERS", "A,B")
        assert ScoreboardSettings().default_players == ["A", "B"]

    def test_default_players_need_two(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_PLAYERS", "solo")
        with pytest.raises(ValidationError, match="default_players"):
            ScoreboardSettings()

    def test_default_players_must_be_unique(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_PLAYERS", "A,B,A")
        with pytest.raises(ValidationError, match="default_players"):
            ScoreboardSettings()

    def test_init_values_win(self, tmp_path):
        settings = ScoreboardSettings(data_file=tmp_path / "x.json", default_players=["P", "Q"])
        assert settings.data_file == tmp_path / "x.json"
        assert settings.default_players == ["P", "Q"]
