"""Board Game Arena JSON endpoints used by the finder."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from duel_finder import BGA_URL
from duel_finder.config import REQUEST_TIMEOUT, Credentials
from duel_finder.errors import NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "BGADuelFinder/1.0 (head-to-head history lookup)"

FIND_PLAYER_PATH = "/player/player/findplayer.html"
GET_GAMES_PATH = "/gamestats/gamestats/getGames.html"
TABLE_INFOS_PATH = "/tablemanager/tablemanager/tableinfos.html"


class BgaClient:
    """Thin wrapper over a ``requests.Session``.

    Each endpoint is exposed as a coroutine; the blocking request runs in a
    worker thread so callers stay on one event loop.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
        base_url: str = BGA_URL,
    ) -> None:
        self.credentials = credentials or Credentials()
        self.timeout = timeout
        self.base_url = base_url
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def close(self) -> None:
        self.session.close()

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        with_token: bool = False,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = self.credentials.headers() if with_token else {}
        if not with_token and self.credentials.cookie:
            headers["Cookie"] = self.credentials.cookie
        logger.debug("%s %s %s", method, url, params or data)
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except ValueError as e:
            raise NetworkError(f"{method} {path} returned invalid JSON") from e
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if isinstance(payload, dict) and str(payload.get("status", "1")) == "0":
            raise NetworkError(f"{method} {path} rejected: {payload.get('error', 'unknown error')}")
        return payload

    async def find_player(self, name: str) -> list[dict[str, Any]]:
        """Search players by name. Returns the candidate items (``q``, ``id``)."""
        payload = await asyncio.to_thread(
            self._request_json,
            "GET",
            FIND_PLAYER_PATH,
            params={"q": name, "start": 0, "count": "Infinity"},
        )
        return list(payload.get("items") or [])

    async def get_games(
        self,
        game_id: int,
        player_id: int,
        opponent_id: int,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> list[dict[str, Any]]:
        """Finished tables between two players, optionally within a date window."""
        params: dict[str, Any] = {
            "game_id": game_id,
            "player": player_id,
            "opponent_id": opponent_id,
            "updateStats": 1,
        }
        if start_date is not None:
            params["start_date"] = start_date
        if end_date is not None:
            params["end_date"] = end_date
        payload = await asyncio.to_thread(
            self._request_json, "GET", GET_GAMES_PATH, params=params, with_token=True
        )
        return list((payload.get("data") or {}).get("tables") or [])

    async def get_active_tables(self, player_id: int) -> dict[str, dict[str, Any]]:
        """Tables currently open for a player, keyed by table id."""
        payload = await asyncio.to_thread(
            self._request_json,
            "POST",
            TABLE_INFOS_PATH,
            data={
                "playerfilter": player_id,
                "turninfo": "false",
                "matchmakingtables": "false",
            },
            with_token=True,
        )
        tables = (payload.get("data") or {}).get("tables") or {}
        # PHP encodes an empty mapping as []
        if isinstance(tables, list):
            return {str(t.get("id")): t for t in tables if isinstance(t, dict)}
        return tables
