"""Duel list parsing."""

from __future__ import annotations

import logging
import re

from duel_finder import ParsedDuel
from duel_finder.errors import ParseError

logger = logging.getLogger(__name__)

VS_PATTERN = re.compile(r" vs ", re.IGNORECASE)


def _split_dash_spaced(line: str) -> list[str]:
    return line.split(" - ")


def _split_vs(line: str) -> list[str]:
    return VS_PATTERN.split(line)


def _split_dash(line: str) -> list[str]:
    return line.split("-")


# Tried in order, first one giving two names wins
SPLIT_STRATEGIES = (_split_dash_spaced, _split_vs, _split_dash)


def split_duel_line(line: str) -> ParsedDuel:
    """Split one line into two player names or raise ParseError."""
    for strategy in SPLIT_STRATEGIES:
        parts = strategy(line)
        if len(parts) != 2:
            continue
        player1, player2 = parts[0].strip(), parts[1].strip()
        if player1 and player2:
            return ParsedDuel(player1, player2)
    raise ParseError(line)


def parse_duel_lines(text: str) -> list[ParsedDuel]:
    """Parse a pasted duel list, one duel per line.

    Lines that can't be split are logged and skipped.
    """
    duels: list[ParsedDuel] = []
    for line in text.splitlines():
        if not line:
            continue
        try:
            duels.append(split_duel_line(line))
        except ParseError as e:
            logger.error("%s", e)
    return duels


def reflow_pasted_duels(pasted: str) -> str | None:
    """Rewrite a "player / vs / player" block into one duel per line.

    Handles clipboard text shaped like::

        player1
        vs
        player2
        player3
        vs
        player4

    Returns None when the text doesn't have that shape.
    """
    lines = pasted.split("\n")
    markers = [line for index, line in enumerate(lines) if index % 3 == 1]
    if not markers or any(marker.strip() != "vs" for marker in markers):
        return None

    pairs: list[str] = []
    for i in range(0, len(lines) - 2, 3):
        player1, player2 = lines[i].strip(), lines[i + 2].strip()
        if player1 and player2:
            pairs.append(f"{player1} vs {player2}")
    return "\n".join(pairs)
