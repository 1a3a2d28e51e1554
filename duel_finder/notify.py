"""Pushover alert listing the duels a batch couldn't look up."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

import requests

from duel_finder import GameConfig
from duel_finder.finder import DuelResults

logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"

# Pushover caps messages at 1024 characters
MAX_LISTED_FAILURES = 10


def failure_summary(results: DuelResults, game: GameConfig, date: str = "") -> tuple[str, str] | None:
    """Build the ``(title, message)`` for the failed duels of a batch.

    Returns None when every duel was looked up.
    """
    failed = [(duel, result) for duel, result in results if result.failed]
    if not failed:
        return None

    title = f"Duel Finder: {len(failed)} {game.name} duel(s) failed"
    lines = [f"{len(results) - len(failed)} of {len(results)} duels found ({date or 'all time'})", ""]
    lines += [f"- {duel.label}: {result.error}" for duel, result in failed[:MAX_LISTED_FAILURES]]
    if len(failed) > MAX_LISTED_FAILURES:
        lines.append(f"... and {len(failed) - MAX_LISTED_FAILURES} more")
    return title, "\n".join(lines)


def notify_failures(
    results: DuelResults,
    game: GameConfig,
    date: str = "",
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Send the failure summary via Pushover.

    Needs PUSHOVER_USER_KEY and PUSHOVER_API_TOKEN. Returns True if sent.
    """
    summary = failure_summary(results, game, date)
    if summary is None:
        return False

    env = os.environ if environ is None else environ
    user_key = env.get("PUSHOVER_USER_KEY", "")
    api_token = env.get("PUSHOVER_API_TOKEN", "")
    if not user_key or not api_token:
        logger.info("Pushover not configured, skipping failure alert")
        return False

    title, message = summary
    try:
        resp = requests.post(
            PUSHOVER_URL,
            data={"token": api_token, "user": user_key, "title": title, "message": message},
            timeout=10,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("Failed to send failure alert: %s", e)
        return False
    logger.info("Failure alert sent: %s", title)
    return True
