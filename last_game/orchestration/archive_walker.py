# last_game/orchestration/archive_walker.py
"""
Walks a player's monthly archives from the most recent to the oldest.

Both the game resolver and the previous-game finder need the same traversal:
fetch the archive index once, then fetch one month at a time, newest first,
stopping as soon as the consumer has what it needs. Exposing the walk as an
async generator keeps each fetch strictly sequential and lets callers stop
early by simply breaking out of the loop.
"""

from typing import AsyncIterator, List, Tuple

import structlog

from last_game.types import ArchiveSource, ArchiveUrl, Game, normalize_username

logger = structlog.get_logger(__name__)


class ArchiveWalker:
    """Yields `(archive_url, games)` pairs for a player, newest month first."""

    def __init__(self, source: ArchiveSource):
        self._source = source

    async def months_newest_first(self, username: str) -> AsyncIterator[Tuple[ArchiveUrl, List[Game]]]:
        """
        Iterates over a player's archive months in reverse published order.

        An empty or whitespace-only username yields nothing and performs no
        request. Empty months are skipped. Errors from the source propagate.
        """
        normalized = normalize_username(username)
        if not normalized:
            logger.debug("Skipping archive walk for empty username.")
            return

        archives = await self._source.get_archive_index(normalized)
        if not archives:
            logger.info("Player has no archives.", username=normalized)
            return

        for archive_url in reversed(archives):
            games = await self._source.get_archive_month(archive_url)
            if not games:
                continue
            yield archive_url, games
