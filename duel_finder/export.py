"""JSON report of a duel lookup batch."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from duel_finder import DuelQueryResult, GameConfig, ParsedDuel


def duel_to_dict(duel: ParsedDuel, result: DuelQueryResult) -> dict:
    """Convert a duel and its result to a JSON-serializable dict."""
    return {
        "player1": duel.player1,
        "player2": duel.player2,
        "player1_id": result.player1_id,
        "player2_id": result.player2_id,
        "players_url": result.players_url,
        "error": result.error,
        "matches": [asdict(m) for m in result.tables],
    }


def generate_json_report(
    results: list[tuple[ParsedDuel, DuelQueryResult]],
    game: GameConfig,
    day: int | None = None,
    generated_utc: str | None = None,
) -> dict:
    if generated_utc is None:
        generated_utc = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    return {
        "game": {"id": game.id, "name": game.name},
        "day": day or None,
        "generated_utc": generated_utc,
        "duels": [duel_to_dict(duel, result) for duel, result in results],
    }
