# last_game/orchestration/game_selection.py
"""
Pure helpers shared by the archive traversals to pick a game within a month.
"""

from typing import Callable, Iterable, Optional

from last_game.types import Game, TimeClass


def matches_time_class(game: Game, time_class: Optional[TimeClass]) -> bool:
    """True if no filter is requested or the game's time class equals it."""
    return time_class is None or game.time_class is time_class


def latest_by_end_time(
    games: Iterable[Game], predicate: Callable[[Game], bool] = lambda _g: True
) -> Optional[Game]:
    """
    Returns the qualifying game with the greatest end time.

    A single running-max pass in list order: a missing end time counts as 0,
    and an earlier game is only replaced by one whose end time is strictly
    greater, so ties go to the first game seen.
    """
    latest: Optional[Game] = None
    for game in games:
        if not predicate(game):
            continue
        if latest is None or (game.end_time or 0) > (latest.end_time or 0):
            latest = game
    return latest
