"""Duel finder panel: view state and user actions, independent of rendering."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from duel_finder import GameConfig
from duel_finder.finder import DuelResults
from duel_finder.html_gen import generate_panel_html
from duel_finder.parser import reflow_pasted_duels

logger = logging.getLogger(__name__)

FindDuels = Callable[[str, int, int | None], Awaitable[DuelResults]]


class PanelMode(str, Enum):
    INPUT = "input"
    RESULTS = "results"


def date_to_timestamp(value: str) -> int | None:
    """Convert a ``YYYY-MM-DD`` picker value to Unix seconds at UTC midnight."""
    value = value.strip()
    if not value:
        return None
    picked = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(picked.timestamp())


@dataclass
class PanelState:
    game_id: int
    mode: PanelMode = PanelMode.INPUT
    date: str = ""
    text: str = ""
    day: int | None = None
    results: DuelResults = field(default_factory=list)
    visible: bool = True
    busy: bool = False


class DuelFinderPanel:
    """The floating finder panel.

    ``find_duels`` is called as ``find_duels(text, game_id, day)``.
    """

    def __init__(self, games: list[GameConfig], find_duels: FindDuels) -> None:
        if not games:
            raise ValueError("At least one game is required")
        self.games = games
        self.find_duels = find_duels
        self.state = PanelState(game_id=games[0].id)

    @property
    def game(self) -> GameConfig:
        return next(g for g in self.games if g.id == self.state.game_id)

    def open(self) -> PanelState:
        self.state.visible = True
        return self.state

    def close(self) -> None:
        self.state.visible = False

    def select_game(self, game_id: int) -> None:
        if game_id not in {g.id for g in self.games}:
            raise ValueError(f"Unsupported game id {game_id}")
        self.state.game_id = game_id

    def set_date(self, value: str) -> None:
        date_to_timestamp(value)
        self.state.date = value.strip()

    def set_text(self, text: str) -> None:
        self.state.text = text

    def paste(self, pasted: str, start: int | None = None, end: int | None = None) -> int:
        """Insert clipboard text at the selection and return the new cursor position.

        A "player / vs / player" block is reflowed to one duel per line first.
        """
        text = self.state.text
        start = len(text) if start is None else start
        end = start if end is None else end
        reflowed = reflow_pasted_duels(pasted)
        inserted = pasted if reflowed is None else reflowed
        self.state.text = text[:start] + inserted + text[end:]
        return start + len(inserted)

    async def find(self) -> DuelResults:
        if self.state.busy:
            logger.warning("Find already running, ignoring")
            return self.state.results

        self.state.day = date_to_timestamp(self.state.date)
        self.state.busy = True
        try:
            results = await self.find_duels(self.state.text, self.state.game_id, self.state.day)
        finally:
            self.state.busy = False
        self.state.results = results
        self.state.mode = PanelMode.RESULTS
        return results

    def back(self) -> None:
        self.state.mode = PanelMode.INPUT

    def render(self) -> str:
        return generate_panel_html(self.state, self.games)
