"""BGA Duel Finder — shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field

BGA_URL = "https://boardgamearena.com"

CONCEDE_FLAG = " \U0001f3f3\ufe0f "
ARENA_WIN_FLAG = " \U0001f3df\ufe0f "
IN_PROGRESS_FLAG = " \U0001f525 "


@dataclass
class GameConfig:
    """A game supported by the finder."""

    id: int
    name: str


@dataclass(frozen=True)
class CacheEntry:
    """A cached player id. ``timestamp`` is in milliseconds since epoch."""

    id: int
    timestamp: int


@dataclass(frozen=True)
class MatchSummary:
    """A single finished or in-progress table between two players."""

    id: int
    url: str
    scores: str
    date: str
    timestamp: int
    flags: str = ""


@dataclass
class DuelQueryResult:
    """Head-to-head history for one duel."""

    players_url: str
    tables: list[MatchSummary] = field(default_factory=list)
    player1_id: int | None = None
    player2_id: int | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class ParsedDuel:
    """A pair of player names taken from one line of the duel list."""

    player1: str
    player2: str

    @property
    def label(self) -> str:
        return f"{self.player1} - {self.player2}"
