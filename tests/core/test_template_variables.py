# tests/core/test_template_variables.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from last_game.core.template_variables import (
    TEMPLATE_VARIABLE_KEYS, TemplateVariableBuilder, format_rating_change
)
from last_game.exceptions import ArchiveFetchError
from last_game.orchestration.previous_game_finder import PreviousGameFinder
from last_game.types import Color, FormatPatterns, ResolvedGame, TimeClass

END_TS = int(datetime(2024, 11, 23, 15, 42, tzinfo=timezone.utc).timestamp())
START_TS = END_TS - 7 * 60 - 30
UTC_PATTERNS = FormatPatterns(date_format="yyyy-MM-dd", time_format="HH:mm", tz=timezone.utc)


@pytest.fixture
def finder():
    mock = MagicMock(spec=PreviousGameFinder)
    mock.find_before = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def builder(finder):
    return TemplateVariableBuilder(finder)


def test_format_rating_change():
    assert format_rating_change(12) == "+12"
    assert format_rating_change(-12) == "-12"
    assert format_rating_change(0) == "0"
    assert format_rating_change(None) == ""

@pytest.mark.asyncio
async def test_build_produces_exactly_the_documented_keys(builder, make_game):
    game = make_game(start_time=START_TS, end_time=END_TS, pgn="1. e4 e5 2. Nf3 1-0")
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)

    assert set(variables) == set(TEMPLATE_VARIABLE_KEYS)
    assert all(isinstance(value, str) for value in variables.values())

@pytest.mark.asyncio
async def test_build_game_fields(builder, make_game):
    game = make_game(start_time=START_TS, end_time=END_TS, pgn="1. e4 e5 2. Nf3 1-0", rated=False)
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)

    assert variables["rated"] == "Unrated"
    assert variables["rules"] == "chess"
    assert variables["end_date"] == "2024-11-23"
    assert variables["end_time"] == "15:42"
    assert variables["end_timestamp"] == "2024-11-23 15:42"
    assert variables["start_time"] == "15:34"
    assert variables["moves"] == "2"
    assert variables["time"] == "00:07"
    assert variables["game_type"] == "Blitz"
    assert variables["url"] == "https://www.chess.com/game/live/1"

@pytest.mark.asyncio
async def test_build_side_winner_and_loser_fields(builder, make_game):
    game = make_game(white="Alice", black="Bob", white_result="checkmated", black_result="win")
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)

    assert variables["white"] == "Alice"
    assert variables["white_url"] == "https://www.chess.com/member/Alice"
    assert variables["white_rating"] == "1500"
    assert variables["white_result"] == "Lost"
    assert variables["black_result"] == "Won"
    assert variables["winner"] == "Bob"
    assert variables["winner_rating"] == "1480"
    assert variables["loser"] == "Alice"
    assert variables["loser_url"] == "https://www.chess.com/member/Alice"

@pytest.mark.asyncio
async def test_draw_has_no_winner_or_loser(builder, make_game):
    game = make_game(white_result="agreed", black_result="agreed")
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)

    assert variables["white_result"] == "Drew"
    assert variables["winner"] == "" and variables["winner_url"] == "" and variables["winner_rating"] == ""
    assert variables["loser"] == ""

@pytest.mark.asyncio
async def test_focus_follows_lookup_username(builder, make_game):
    game = make_game(white="Alice", black="Bob")
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "  BOB ", UTC_PATTERNS)

    assert variables["focus"] == "Bob"
    assert variables["focus_result"] == "Lost"
    assert variables["foe"] == "Alice"
    assert variables["foe_result"] == "Won"

@pytest.mark.asyncio
async def test_focus_falls_back_to_resolved_side(builder, make_game):
    game = make_game(white="Alice", black="Bob")
    variables = await builder.build(ResolvedGame(game, Color.BLACK, "bob"), "", UTC_PATTERNS)
    assert variables["focus"] == "Bob"
    assert variables["foe"] == "Alice"

    # A lookup name matching neither side keeps the resolved color.
    variables = await builder.build(ResolvedGame(game, Color.BLACK, "bob"), "carol", UTC_PATTERNS)
    assert variables["focus"] == "Bob"
    assert variables["foe_rating"] == "1500"

@pytest.mark.asyncio
@pytest.mark.parametrize("previous_rating, expected", [(1488, "+12"), (1512, "-12"), (1500, "0")])
async def test_rating_change(builder, finder, make_game, previous_rating, expected):
    game = make_game(white="Alice", black="Bob", white_rating=1500, end_time=END_TS)
    previous = make_game(white="Carol", black="alice", black_rating=previous_rating, end_time=END_TS - 600)
    finder.find_before.return_value = previous

    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)

    assert variables["rating_change"] == expected
    finder.find_before.assert_awaited_once_with("alice", TimeClass.BLITZ, END_TS)

@pytest.mark.asyncio
async def test_rating_change_without_previous_game_is_empty(builder, make_game):
    game = make_game()
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    assert variables["rating_change"] == ""

@pytest.mark.asyncio
async def test_rating_change_swallows_fetch_errors(builder, finder, make_game):
    finder.find_before.side_effect = ArchiveFetchError("https://api/x", 500)
    variables = await builder.build(ResolvedGame(make_game(), Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    assert variables["rating_change"] == ""

@pytest.mark.asyncio
async def test_rating_change_skipped_without_time_class_or_end(builder, finder, make_game):
    await builder.build(ResolvedGame(make_game(time_class=None), Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    await builder.build(ResolvedGame(make_game(end_time=None), Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    finder.find_before.assert_not_awaited()

@pytest.mark.asyncio
async def test_rating_change_requires_both_ratings(builder, finder, make_game):
    finder.find_before.return_value = make_game(white="alice", white_rating=None)
    variables = await builder.build(ResolvedGame(make_game(), Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    assert variables["rating_change"] == ""

@pytest.mark.asyncio
async def test_daily_duration_and_missing_pgn(builder, make_game):
    game = make_game(time_class=TimeClass.DAILY, start_time=END_TS - 2 * 86400, end_time=END_TS)
    variables = await builder.build(ResolvedGame(game, Color.WHITE, "alice"), "alice", UTC_PATTERNS)
    assert variables["time"] == "2 days"
    assert variables["moves"] == "N/A"
    assert variables["start_timestamp"] == "2024-11-21 15:42"
