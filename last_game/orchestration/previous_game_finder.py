# last_game/orchestration/previous_game_finder.py
"""
Locates a player's nearest earlier game of the same time class.

Used to compute rating changes: the rating in the resolved game is compared
with the rating the player had at the end of the game before it.
"""

from typing import Optional

import structlog

from last_game.orchestration.archive_walker import ArchiveWalker
from last_game.orchestration.game_selection import latest_by_end_time
from last_game.types import Game, TimeClass

logger = structlog.get_logger(__name__)


class PreviousGameFinder:
    """Scans archives newest-first for the last game ending before a cutoff."""

    def __init__(self, walker: ArchiveWalker):
        self._walker = walker

    async def find_before(
        self, username: str, time_class: TimeClass, cutoff_end_time: int
    ) -> Optional[Game]:
        """
        Returns the latest game of `time_class` whose end time is strictly
        before `cutoff_end_time`, or None.

        Games without an end time are treated as having ended at 0. The search
        stops at the first (newest) month holding any qualifying game.

        Raises:
            ArchiveFetchError: If any request to the API fails.
        """
        def qualifies(game: Game) -> bool:
            return game.time_class is time_class and (game.end_time or 0) < cutoff_end_time

        async for archive_url, games in self._walker.months_newest_first(username):
            previous = latest_by_end_time(games, qualifies)
            if previous is not None:
                logger.debug("Found previous game.", archive_url=archive_url,
                             game_url=previous.url, end_time=previous.end_time)
                return previous
        return None
