"""Supported games and runtime settings."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from duel_finder import GameConfig

DEFAULT_GAMES_PATH = "games.json"
REQUEST_INTERVAL = 0.25  # seconds between duel lookups, give BGA a break
REQUEST_TIMEOUT = 30


def load_games(path: str | Path = DEFAULT_GAMES_PATH) -> list[GameConfig]:
    """Load supported games from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return [GameConfig(**g) for g in data["games"]]


def find_game(games: list[GameConfig], key: str | int) -> GameConfig:
    """Look up a game by id or case-insensitive name."""
    text = str(key).strip()
    for game in games:
        if text == str(game.id) or text.lower() == game.name.lower():
            return game
    names = ", ".join(f"{g.name} ({g.id})" for g in games)
    raise ValueError(f"Unsupported game {key!r}, expected one of: {names}")


@dataclass
class Credentials:
    """Session data a logged-in BGA page would supply."""

    request_token: str = ""
    cookie: str = ""

    def headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.request_token:
            headers["X-Request-Token"] = self.request_token
        if self.cookie:
            headers["Cookie"] = self.cookie
        return headers


@dataclass
class Settings:
    credentials: Credentials = field(default_factory=Credentials)
    cache_dir: Path = Path("cache")
    request_interval: float = REQUEST_INTERVAL
    timeout: float = REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from BGA_* and DUEL_FINDER_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            credentials=Credentials(
                request_token=env.get("BGA_REQUEST_TOKEN", ""),
                cookie=env.get("BGA_COOKIE", ""),
            ),
            cache_dir=Path(env.get("DUEL_FINDER_CACHE_DIR", "cache")),
            request_interval=float(env.get("DUEL_FINDER_REQUEST_INTERVAL", REQUEST_INTERVAL)),
            timeout=float(env.get("DUEL_FINDER_TIMEOUT", REQUEST_TIMEOUT)),
        )
