# last_game/orchestration/game_resolver.py
"""
Finds the most recent game a player finished, optionally for one time class.
"""

from typing import Optional

import structlog

from last_game.orchestration.archive_walker import ArchiveWalker
from last_game.orchestration.game_selection import latest_by_end_time, matches_time_class
from last_game.types import ResolvedGame, TimeClass

logger = structlog.get_logger(__name__)


class GameResolver:
    """Resolves "the last game" for a player by scanning archives newest-first."""

    def __init__(self, walker: ArchiveWalker):
        self._walker = walker

    async def resolve(
        self, username: str, time_class: Optional[TimeClass] = None
    ) -> Optional[ResolvedGame]:
        """
        Locates the latest game played by `username`.

        Within each month the latest candidate (by end time) is chosen; if the
        player cannot be matched to either side of that game, the month is
        abandoned and the next older one is tried. The first match wins and no
        further months are fetched.

        Args:
            username: The Chess.com username to look up.
            time_class: Restrict the search to this time class; None means any.

        Returns:
            The resolved game and the color the player had, or None if no
            qualifying game exists.

        Raises:
            ArchiveFetchError: If any request to the API fails.
        """
        async for archive_url, games in self._walker.months_newest_first(username):
            latest = latest_by_end_time(games, lambda g: matches_time_class(g, time_class))
            if latest is None:
                continue

            color = latest.color_of(username)
            if color is None:
                logger.debug(
                    "Latest game does not involve the player; trying an older archive.",
                    archive_url=archive_url, game_url=latest.url,
                )
                continue

            logger.info(
                "Resolved last game.", username=username, game_url=latest.url,
                time_class=time_class.value if time_class else "any", color=color.value,
            )
            return ResolvedGame(game=latest, color=color, username=username)

        logger.info("No qualifying game found.", username=username,
                    time_class=time_class.value if time_class else "any")
        return None
