# tests/conftest.py
from typing import Dict, List, Optional

import pytest

from last_game.types import Game, Side, TimeClass


class FakeArchiveSource:
    """In-memory ArchiveSource; `months` maps archive URL -> games, oldest first."""

    def __init__(self, months: Dict[str, List[Game]], fail_on: Optional[str] = None, error: Optional[Exception] = None):
        self.months = months
        self.fail_on = fail_on
        self.error = error
        self.index_calls: List[str] = []
        self.month_calls: List[str] = []

    async def get_archive_index(self, username: str) -> List[str]:
        self.index_calls.append(username)
        if self.fail_on == "index":
            raise self.error
        return list(self.months)

    async def get_archive_month(self, archive_url: str) -> List[Game]:
        self.month_calls.append(archive_url)
        if self.fail_on == archive_url:
            raise self.error
        return self.months[archive_url]


def _make_game(
    white: str = "Alice",
    black: str = "Bob",
    end_time: Optional[int] = 1_700_000_000,
    start_time: Optional[int] = None,
    time_class: Optional[TimeClass] = TimeClass.BLITZ,
    white_result: str = "win",
    black_result: str = "resigned",
    white_rating: Optional[int] = 1500,
    black_rating: Optional[int] = 1480,
    url: str = "https://www.chess.com/game/live/1",
    rated: bool = True,
    rules: str = "chess",
    pgn: Optional[str] = None,
) -> Game:
    return Game(
        white=Side(username=white, result=white_result, rating=white_rating),
        black=Side(username=black, result=black_result, rating=black_rating),
        url=url, end_time=end_time, start_time=start_time, time_class=time_class,
        rules=rules, rated=rated, pgn=pgn,
    )


@pytest.fixture
def make_game():
    return _make_game


@pytest.fixture
def fake_source():
    return FakeArchiveSource
