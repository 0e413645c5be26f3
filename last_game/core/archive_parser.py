# last_game/core/archive_parser.py
"""
Translates raw Chess.com archive JSON into the application's data contracts.

This module acts as an Anti-Corruption Layer: the rest of the application
only ever sees `Game` and `Side` objects, never the API's dictionaries. It is
tolerant of missing or oddly typed fields, because the public API omits keys
freely (e.g. `start_time` is absent for most live games).
"""

from typing import Any, List, Mapping, Optional

import structlog

from last_game.exceptions import ArchivePayloadError
from last_game.types import ArchiveUrl, Game, Side, TimeClass

logger = structlog.get_logger(__name__)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_side(raw: Any) -> Side:
    """Parses a player object. A missing or malformed object becomes an empty side."""
    if not isinstance(raw, Mapping):
        return Side(username="", result="")
    return Side(
        username=str(raw.get("username") or ""),
        result=str(raw.get("result") or ""),
        rating=_optional_int(raw.get("rating")),
    )


def parse_game(raw: Mapping[str, Any]) -> Game:
    """Parses one entry of an archive month's `games` list."""
    return Game(
        url=str(raw.get("url") or ""),
        end_time=_optional_int(raw.get("end_time")),
        start_time=_optional_int(raw.get("start_time")),
        time_class=TimeClass.parse(raw.get("time_class")),
        rules=str(raw.get("rules") or ""),
        rated=bool(raw.get("rated", False)),
        pgn=raw.get("pgn") or None,
        white=parse_side(raw.get("white")),
        black=parse_side(raw.get("black")),
    )


def parse_archive_index(payload: Any, url: str) -> List[ArchiveUrl]:
    """
    Extracts the archive URL list from an index payload.

    Raises:
        ArchivePayloadError: If the payload is not a JSON object or its
            `archives` is not a list.
    """
    if not isinstance(payload, Mapping):
        raise ArchivePayloadError(f"Unexpected archive index payload from {url}")
    archives = payload.get("archives") or []
    if not isinstance(archives, list):
        raise ArchivePayloadError(f"Unexpected archive list in payload from {url}")
    return [str(archive) for archive in archives if archive]


def parse_archive_month(payload: Any, url: str) -> List[Game]:
    """
    Extracts the games of one monthly archive, preserving their published order.

    Entries that are not JSON objects are skipped.

    Raises:
        ArchivePayloadError: If the payload is not a JSON object or its
            `games` is not a list.
    """
    if not isinstance(payload, Mapping):
        raise ArchivePayloadError(f"Unexpected archive month payload from {url}")

    raw_games = payload.get("games") or []
    if not isinstance(raw_games, list):
        raise ArchivePayloadError(f"Unexpected games list in payload from {url}")

    games: List[Game] = []
    for raw_game in raw_games:
        if not isinstance(raw_game, Mapping):
            logger.debug("Skipping malformed game entry.", archive_url=url)
            continue
        games.append(parse_game(raw_game))
    return games
