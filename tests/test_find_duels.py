"""Tests for configuration, the JSON report, notifications and the command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests

import find_duels
from duel_finder import DuelQueryResult, GameConfig, MatchSummary, ParsedDuel
from duel_finder.config import Settings, find_game, load_games
from duel_finder.export import generate_json_report
from duel_finder.notify import MAX_LISTED_FAILURES, failure_summary, notify_failures

from conftest import GAMES, FakeBgaClient

ROOT = Path(__file__).parent.parent


class TestConfig:
    def test_shipped_games(self) -> None:
        games = load_games(ROOT / "games.json")
        assert games == GAMES

    def test_find_game_by_id_or_name(self) -> None:
        assert find_game(GAMES, "79").name == "Hive"
        assert find_game(GAMES, 1131).name == "7 Wonders"
        assert find_game(GAMES, "carcassonne").id == 1

    def test_find_game_unknown(self) -> None:
        with pytest.raises(ValueError, match="Carcassonne"):
            find_game(GAMES, "Chess")

    def test_settings_from_env(self) -> None:
        settings = Settings.from_env(
            {
                "BGA_REQUEST_TOKEN": "tok",
                "BGA_COOKIE": "a=b",
                "DUEL_FINDER_CACHE_DIR": "/tmp/duels",
                "DUEL_FINDER_REQUEST_INTERVAL": "1",
            }
        )
        assert settings.credentials.headers() == {"X-Request-Token": "tok", "Cookie": "a=b"}
        assert settings.cache_dir == Path("/tmp/duels")
        assert settings.request_interval == 1.0
        assert settings.timeout == 30

    def test_settings_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.credentials.headers() == {}
        assert settings.cache_dir == Path("cache")
        assert settings.request_interval == 0.25


class TestJsonReport:
    def test_structure(self) -> None:
        match = MatchSummary(501, "https://boardgamearena.com/table?table=501", "96 - 101", "2024-04-08 09:00", 1712566800)
        results = [
            (ParsedDuel("alice", "bob"), DuelQueryResult("https://x", [match], 84000, 85000)),
            (ParsedDuel("carol", "dave"), DuelQueryResult("#", error="Player not found: dave")),
        ]
        report = generate_json_report(results, GameConfig(1, "Carcassonne"), None, "2024-04-08T12:00:00Z")

        assert report["game"] == {"id": 1, "name": "Carcassonne"}
        assert report["day"] is None
        assert report["generated_utc"] == "2024-04-08T12:00:00Z"
        first, second = report["duels"]
        assert first["player1_id"] == 84000
        assert first["matches"][0] == {
            "id": 501,
            "url": "https://boardgamearena.com/table?table=501",
            "scores": "96 - 101",
            "date": "2024-04-08 09:00",
            "timestamp": 1712566800,
            "flags": "",
        }
        assert second["error"] == "Player not found: dave"
        assert second["matches"] == []
        json.dumps(report)


CARCASSONNE = GameConfig(1, "Carcassonne")
PUSHOVER_ENV = {"PUSHOVER_USER_KEY": "u", "PUSHOVER_API_TOKEN": "t"}

MIXED_RESULTS = [
    (ParsedDuel("alice", "bob"), DuelQueryResult("https://x", [], 84000, 85000)),
    (ParsedDuel("carol", "dave"), DuelQueryResult("#", error="Player not found: dave")),
    (ParsedDuel("erin", "frank"), DuelQueryResult("#", error="GET /gamestats failed: 500")),
]


def _no_post(*args, **kwargs):
    raise AssertionError("should not post")


class TestNotify:
    def test_summary_lists_failed_duels(self) -> None:
        title, message = failure_summary(MIXED_RESULTS, CARCASSONNE, "2024-04-08")
        assert title == "Duel Finder: 2 Carcassonne duel(s) failed"
        assert message.splitlines() == [
            "1 of 3 duels found (2024-04-08)",
            "",
            "- carol - dave: Player not found: dave",
            "- erin - frank: GET /gamestats failed: 500",
        ]

    def test_summary_truncates_long_lists(self) -> None:
        results = [
            (ParsedDuel(f"p{i}", f"q{i}"), DuelQueryResult("#", error="Player not found"))
            for i in range(MAX_LISTED_FAILURES + 3)
        ]
        _, message = failure_summary(results, CARCASSONNE)
        assert "(all time)" in message
        assert message.count("Player not found") == MAX_LISTED_FAILURES
        assert message.endswith("... and 3 more")

    def test_nothing_to_report(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests, "post", _no_post)
        assert failure_summary(MIXED_RESULTS[:1], CARCASSONNE) is None
        assert notify_failures(MIXED_RESULTS[:1], CARCASSONNE, environ=PUSHOVER_ENV) is False

    def test_not_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests, "post", _no_post)
        assert notify_failures(MIXED_RESULTS, CARCASSONNE, environ={}) is False

    def test_sends(self, monkeypatch: pytest.MonkeyPatch) -> None:
        sent = {}

        class Ok:
            def raise_for_status(self) -> None:
                pass

        def fake_post(url, data, timeout):
            sent.update(data)
            return Ok()

        monkeypatch.setattr(requests, "post", fake_post)
        assert notify_failures(MIXED_RESULTS, CARCASSONNE, environ=PUSHOVER_ENV) is True
        assert sent["title"] == "Duel Finder: 2 Carcassonne duel(s) failed"
        assert "- carol - dave: Player not found: dave" in sent["message"]
        assert sent["user"] == "u"

    def test_failure_is_reported_not_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_post(*args, **kwargs):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(requests, "post", fake_post)
        assert notify_failures(MIXED_RESULTS, CARCASSONNE, environ=PUSHOVER_ENV) is False


class TestCommandLine:
    @pytest.fixture
    def fake_client(self, monkeypatch: pytest.MonkeyPatch, client: FakeBgaClient) -> FakeBgaClient:
        client.close = lambda: None
        monkeypatch.setattr(find_duels, "BgaClient", lambda *args, **kwargs: client)
        monkeypatch.setattr(find_duels, "notify_failures", lambda *args, **kwargs: False)
        for name in ("BGA_REQUEST_TOKEN", "BGA_COOKIE"):
            monkeypatch.delenv(name, raising=False)
        return client

    def _run(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, duels: str, *extra: str) -> int:
        monkeypatch.setenv("DUEL_FINDER_CACHE_DIR", str(tmp_path / "cache"))
        monkeypatch.setenv("DUEL_FINDER_REQUEST_INTERVAL", "0")
        duel_file = tmp_path / "duels.txt"
        duel_file.write_text(duels, encoding="utf-8")
        return find_duels.main(
            [
                str(duel_file),
                "--game",
                "Carcassonne",
                "--games",
                str(ROOT / "games.json"),
                "--output",
                str(tmp_path / "public"),
                *extra,
            ]
        )

    def test_writes_html_and_json(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_client: FakeBgaClient
    ) -> None:
        assert self._run(tmp_path, monkeypatch, "alice vs bob\n") == 0

        html = (tmp_path / "public" / "index.html").read_text(encoding="utf-8")
        assert "alice - bob" in html
        report = json.loads((tmp_path / "public" / "duels.json").read_text(encoding="utf-8"))
        assert report["game"]["name"] == "Carcassonne"
        assert len(report["duels"][0]["matches"]) == 4

        cached = json.loads((tmp_path / "cache" / "player_ids.json").read_text(encoding="utf-8"))
        assert set(cached) == {"playerId-alice", "playerId-bob"}

    def test_failures_exit_nonzero(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_client: FakeBgaClient, capsys
    ) -> None:
        assert self._run(tmp_path, monkeypatch, "alice - nobody\n", "--date", "2024-04-08") == 1
        out = capsys.readouterr().out
        assert "Errors encountered: 1" in out
        assert ("get_games", 1, 84000, 85000, 1712534400, 1712620800) not in fake_client.calls

    def test_failures_are_alerted(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_client: FakeBgaClient
    ) -> None:
        alerts = []
        monkeypatch.setattr(
            find_duels, "notify_failures", lambda results, game, date: alerts.append((results, game, date))
        )
        assert self._run(tmp_path, monkeypatch, "alice - bob\nalice - nobody\n", "--date", "2024-04-08") == 1

        (results, game, date), = alerts
        assert game.name == "Carcassonne"
        assert date == "2024-04-08"
        assert failure_summary(results, game, date)[0] == "Duel Finder: 1 Carcassonne duel(s) failed"

    def test_unknown_game(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        monkeypatch.setenv("DUEL_FINDER_CACHE_DIR", str(tmp_path / "cache"))
        code = find_duels.main(["--game", "Chess", "--games", str(ROOT / "games.json")])
        assert code == 1
        assert "Unsupported game" in capsys.readouterr().out
