"""Head-to-head history between two players."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from duel_finder import (
    ARENA_WIN_FLAG,
    BGA_URL,
    CONCEDE_FLAG,
    IN_PROGRESS_FLAG,
    DuelQueryResult,
    MatchSummary,
)
from duel_finder.client import BgaClient
from duel_finder.resolver import PlayerResolver

logger = logging.getLogger(__name__)

DAY_SECONDS = 86400


def is_today(unix_timestamp: int, today: date | None = None) -> bool:
    """Check whether a timestamp falls on the current local calendar day."""
    given = datetime.fromtimestamp(unix_timestamp)
    today = today or date.today()
    return (given.year, given.month, given.day) == (today.year, today.month, today.day)


def format_timestamp(unix_timestamp: int) -> str:
    """Format as ``YYYY-MM-DD HH:MM`` in UTC."""
    return datetime.fromtimestamp(unix_timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def table_url(table_id: Any) -> str:
    return f"{BGA_URL}/table?table={table_id}"


def build_players_url(player1_id: int, player2_id: int, game_id: int, day: int | None = None) -> str:
    """Link to the full history of a duel on the BGA stats page, ongoing games included."""
    url = (
        f"{BGA_URL}/gamestats?player={player1_id}&opponent_id={player2_id}"
        f"&game_id={game_id}&finished=0"
    )
    if day:
        url += f"&start_date={day}&end_date={day + DAY_SECONDS}"
    return url


def _is_set(value: Any) -> bool:
    return value not in (None, "", 0, "0", False)


def summarize_table(record: dict[str, Any], player1_id: int) -> MatchSummary:
    """Turn a finished table record into a summary, player1's score first."""
    scores = record["scores"].split(",") if record.get("scores") else []
    scores += ["?"] * (2 - len(scores))
    players = str(record.get("players", "")).split(",")
    if players[0].strip() == str(player1_id):
        oriented = f"{scores[0]} - {scores[1]}"
    else:
        oriented = f"{scores[1]} - {scores[0]}"

    flags = ""
    if _is_set(record.get("concede")):
        flags += CONCEDE_FLAG
    if _is_set(record.get("arena_win")):
        flags += ARENA_WIN_FLAG

    start = int(record["start"])
    return MatchSummary(
        id=int(record["table_id"]),
        url=table_url(record["table_id"]),
        scores=oriented,
        date=format_timestamp(start),
        timestamp=start,
        flags=flags,
    )


def summarize_in_progress(table: dict[str, Any]) -> MatchSummary:
    start = int(table["gamestart"])
    return MatchSummary(
        id=int(table["id"]),
        url=table_url(table["id"]),
        scores=f"{table.get('progression', 0)}%",
        date=format_timestamp(start),
        timestamp=start,
        flags=IN_PROGRESS_FLAG,
    )


async def find_in_progress(client: BgaClient, player1_id: int, player2_id: int) -> dict[str, Any] | None:
    """Return the table both players are currently playing, if any."""
    tables = await client.get_active_tables(player1_id)
    for table in tables.values():
        if table.get("status") != "play":
            continue
        if str(player2_id) in {str(pid) for pid in (table.get("players") or {})}:
            return table
    return None


async def query_duel(
    client: BgaClient,
    resolver: PlayerResolver,
    player1: str,
    player2: str,
    game_id: int,
    day: int | None = None,
    today: date | None = None,
) -> DuelQueryResult:
    """Fetch the games between two players for a game and optional day.

    ``day`` is the Unix timestamp starting a 24 hour window; without it the
    whole history is returned. When the window is today (or unbounded) a game
    currently in progress is appended too. Any failure gives an empty result
    linking to ``#``.
    """
    try:
        player1_id = await resolver.resolve(player1)
        player2_id = await resolver.resolve(player2)

        start_date = end_date = None
        if day:
            start_date, end_date = day, day + DAY_SECONDS
        records = await client.get_games(game_id, player1_id, player2_id, start_date, end_date)
        tables = sorted(
            (summarize_table(record, player1_id) for record in records),
            key=lambda m: m.timestamp,
        )

        if not day or is_today(day, today):
            live = await find_in_progress(client, player1_id, player2_id)
            if live:
                tables.append(summarize_in_progress(live))
                tables.sort(key=lambda m: m.timestamp)

        logger.debug("Got %d tables for %s - %s", len(tables), player1, player2)
        return DuelQueryResult(
            players_url=build_players_url(player1_id, player2_id, game_id, day),
            tables=tables,
            player1_id=player1_id,
            player2_id=player2_id,
        )
    except Exception as e:
        logger.error("Couldn't get games for %s - %s: %s", player1, player2, e)
        return DuelQueryResult(players_url="#", tables=[], error=str(e))
