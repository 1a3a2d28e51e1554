"""Batch lookup of every duel in a pasted list."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from duel_finder import DuelQueryResult, ParsedDuel
from duel_finder.client import BgaClient
from duel_finder.config import REQUEST_INTERVAL
from duel_finder.duels import query_duel
from duel_finder.parser import parse_duel_lines
from duel_finder.resolver import PlayerResolver

logger = logging.getLogger(__name__)

DuelResults = list[tuple[ParsedDuel, DuelQueryResult]]


async def find_all_duels(
    text: str,
    game_id: int,
    day: int | None = None,
    *,
    client: BgaClient,
    resolver: PlayerResolver,
    request_interval: float = REQUEST_INTERVAL,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> DuelResults:
    """Look up every duel in ``text``, one at a time, in input order.

    Each lookup is preceded by a pause of ``request_interval`` seconds,
    the first one included.
    """
    duels = parse_duel_lines(text)
    logger.info("Looking up %d duel(s) for game %s", len(duels), game_id)

    results: DuelResults = []
    for duel in duels:
        await sleep(request_interval)
        result = await query_duel(client, resolver, duel.player1, duel.player2, game_id, day)
        results.append((duel, result))
    return results
