from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from duel_finder import GameConfig
from duel_finder.cache import MemoryStore, PlayerIdCache
from duel_finder.errors import NetworkError
from duel_finder.resolver import PlayerResolver

FIXTURE_DIR = Path(__file__).parent / "fixtures"

GAMES = [
    GameConfig(id=1, name="Carcassonne"),
    GameConfig(id=79, name="Hive"),
    GameConfig(id=1131, name="7 Wonders"),
]

NOW_MS = 1_712_600_000_000


def load_fixture(filename: str) -> Any:
    return json.loads((FIXTURE_DIR / filename).read_text(encoding="utf-8"))


class FakeBgaClient:
    """In-memory stand-in for BgaClient recording every call."""

    def __init__(
        self,
        players: dict[str, int] | None = None,
        games: list[dict[str, Any]] | None = None,
        active_tables: dict[str, dict[str, Any]] | None = None,
        fail_games: bool = False,
        fail_active_tables: bool = False,
    ) -> None:
        self.players = players or {}
        self.games = games or []
        self.active_tables = active_tables or {}
        self.fail_games = fail_games
        self.fail_active_tables = fail_active_tables
        self.calls: list[tuple] = []

    async def find_player(self, name: str) -> list[dict[str, Any]]:
        self.calls.append(("find_player", name))
        return [
            {"q": username, "id": player_id}
            for username, player_id in self.players.items()
            if name.lower() in username.lower()
        ]

    async def get_games(self, game_id, player_id, opponent_id, start_date=None, end_date=None):
        self.calls.append(("get_games", game_id, player_id, opponent_id, start_date, end_date))
        if self.fail_games:
            raise NetworkError("GET /gamestats/gamestats/getGames.html failed: 500")
        return list(self.games)

    async def get_active_tables(self, player_id):
        self.calls.append(("get_active_tables", player_id))
        if self.fail_active_tables:
            raise NetworkError("POST /tablemanager/tablemanager/tableinfos.html failed: tableinfos down")
        return dict(self.active_tables)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def games() -> list[GameConfig]:
    return list(GAMES)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore) -> PlayerIdCache:
    return PlayerIdCache(store, clock=lambda: NOW_MS)


@pytest.fixture
def client() -> FakeBgaClient:
    return FakeBgaClient(
        players={"alice": 84000, "Alice2": 84001, "bob": 85000, "Bobby": 85001},
        games=load_fixture("getgames.json")["data"]["tables"],
        active_tables=load_fixture("tableinfos.json")["data"]["tables"],
    )


@pytest.fixture
def resolver(client: FakeBgaClient, cache: PlayerIdCache) -> PlayerResolver:
    return PlayerResolver(client, cache)
