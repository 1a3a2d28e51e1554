#!/usr/bin/env python3
"""
BGA Duel Finder

Looks up head-to-head games on Board Game Arena for a list of duels and
writes the finder panel as HTML plus a JSON report.

Usage:
    python find_duels.py duels.txt --game Carcassonne --date 2024-04-08
    cat duels.txt | python find_duels.py --game 79

Duel list, one duel per line:
    estroncio - 71st
    texe1 vs TheCreep74
    MadCan-isloun

Set BGA_REQUEST_TOKEN and BGA_COOKIE from a logged-in browser session.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from functools import partial
from pathlib import Path

from duel_finder.cache import PlayerIdCache, open_store
from duel_finder.client import BgaClient
from duel_finder.config import DEFAULT_GAMES_PATH, Settings, find_game, load_games
from duel_finder.export import generate_json_report
from duel_finder.finder import DuelResults, find_all_duels
from duel_finder.notify import notify_failures
from duel_finder.panel import DuelFinderPanel
from duel_finder.resolver import PlayerResolver


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find BGA games between pairs of players.")
    parser.add_argument("duels", nargs="?", help="Duel list file (default: stdin)")
    parser.add_argument("--game", required=True, help="Game id or name")
    parser.add_argument("--date", default="", help="Day of the duels, YYYY-MM-DD (default: all time)")
    parser.add_argument("--output", default="public", help="Output directory")
    parser.add_argument("--games", default=DEFAULT_GAMES_PATH, help="Supported games JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(argv)


def print_results(results: DuelResults) -> None:
    for duel, result in results:
        if result.failed:
            print(f"\n  {duel.label}: ERROR {result.error}")
            continue
        print(f"\n  {duel.label} ({len(result.tables)} games)  {result.players_url}")
        for match in result.tables:
            print(f"    {match.date}: {match.scores}{match.flags.rstrip()}")


async def run(args: argparse.Namespace, settings: Settings) -> int:
    games = load_games(args.games)
    game = find_game(games, args.game)
    text = Path(args.duels).read_text(encoding="utf-8") if args.duels else sys.stdin.read()

    client = BgaClient(settings.credentials, timeout=settings.timeout)
    resolver = PlayerResolver(client, PlayerIdCache(open_store(settings.cache_dir)))
    panel = DuelFinderPanel(
        games,
        partial(
            find_all_duels,
            client=client,
            resolver=resolver,
            request_interval=settings.request_interval,
        ),
    )
    panel.select_game(game.id)
    panel.set_date(args.date)
    panel.set_text(text)

    print(f"Finding {game.name} duels ({args.date or 'all time'})...")
    try:
        results = await panel.find()
    finally:
        client.close()

    print_results(results)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / "index.html"
    html_path.write_text(panel.render(), encoding="utf-8")
    print(f"\nSaved {html_path}")

    report = generate_json_report(results, game, panel.state.day)
    json_path = output_dir / "duels.json"
    json_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Saved {json_path}")

    errors = [f"{duel.label}: {result.error}" for duel, result in results if result.failed]
    if errors:
        print(f"\nErrors encountered: {len(errors)}")
        for err in errors:
            print(f"  - {err}")
        notify_failures(results, game, args.date)
        return 1

    print(f"\nDone — {len(results)} duel(s) looked up")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(run(args, Settings.from_env()))
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
