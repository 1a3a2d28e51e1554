"""Player name to BGA id resolution."""

from __future__ import annotations

import logging

from duel_finder.cache import PlayerIdCache
from duel_finder.client import BgaClient
from duel_finder.errors import PlayerNotFoundError

logger = logging.getLogger(__name__)


class PlayerResolver:
    def __init__(self, client: BgaClient, cache: PlayerIdCache) -> None:
        self.client = client
        self.cache = cache

    async def resolve(self, name: str) -> int:
        """Return the id of the player whose username matches ``name``.

        A cached id younger than the cache duration is reused without a
        request. Otherwise the search results are scanned for an exact,
        case-insensitive username match, which is cached.
        """
        cached = self.cache.lookup(name)
        if cached is not None:
            logger.debug("Using cached id %s for %s", cached, name)
            return cached

        try:
            candidates = await self.client.find_player(name)
        except Exception as e:
            logger.error("Couldn't find user %s: %s", name, e)
            raise

        wanted = name.lower()
        for candidate in candidates:
            if str(candidate.get("q", "")).lower() == wanted:
                player_id = int(candidate["id"])
                logger.debug("Found id %s for %s", player_id, name)
                self.cache.remember(name, player_id)
                return player_id

        logger.error("Couldn't find user %s", name)
        raise PlayerNotFoundError(name)
