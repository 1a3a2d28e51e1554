"""Errors raised while finding duels."""

from __future__ import annotations


class DuelFinderError(Exception):
    """Base class for duel finder failures."""


class PlayerNotFoundError(DuelFinderError):
    """No search result matched the player name exactly."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Player not found: {name}")
        self.name = name


class NetworkError(DuelFinderError):
    """A BGA request failed or returned an unusable payload."""


class ParseError(DuelFinderError):
    """A duel line could not be split into two player names."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Couldn't get players for {line!r}")
        self.line = line
