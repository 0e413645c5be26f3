# last_game/types.py
"""
A central module for shared data structures and service interfaces (Protocols).
"""

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, TypeAlias, runtime_checkable

ArchiveUrl: TypeAlias = str
TemplateVariables: TypeAlias = Dict[str, str]


class TimeClass(str, Enum):
    BULLET = "bullet"; BLITZ = "blitz"; RAPID = "rapid"; DAILY = "daily"

    @classmethod
    def parse(cls, value: Any) -> Optional["TimeClass"]:
        """Case-insensitive lookup. Unknown, empty or non-string values map to None."""
        if not isinstance(value, str) or not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.value.title()


class OutcomeCategory(str, Enum):
    WIN = "win"; LOSS = "loss"; DRAW = "draw"; UNKNOWN = "unknown"


class Color(str, Enum):
    WHITE = "white"; BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class LookupStatus(str, Enum):
    FOUND = "found"; NOT_FOUND = "not_found"


def normalize_username(name: Optional[str]) -> str:
    """Trims and lowercases a username. None becomes an empty string."""
    return (name or "").strip().lower()


# --- DATA CONTRACTS ---

@dataclass(frozen=True, slots=True)
class Side:
    username: str; result: str; rating: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Game:
    white: Side; black: Side
    url: str = ""; end_time: Optional[int] = None; start_time: Optional[int] = None
    time_class: Optional[TimeClass] = None; rules: str = ""; rated: bool = False
    pgn: Optional[str] = None

    def side(self, color: Color) -> Side:
        return self.white if color is Color.WHITE else self.black

    def color_of(self, username: Optional[str]) -> Optional[Color]:
        """Returns the color played by `username`, or None if it played neither side."""
        wanted = normalize_username(username)
        if not wanted:
            return None
        if normalize_username(self.white.username) == wanted:
            return Color.WHITE
        if normalize_username(self.black.username) == wanted:
            return Color.BLACK
        return None


@dataclass(frozen=True, slots=True)
class ResolvedGame:
    game: Game; color: Color; username: str


@dataclass(frozen=True, slots=True)
class FormatPatterns:
    date_format: str = "yyyy-MM-dd"; time_format: str = "hh:mm"
    tz: Optional[tzinfo] = None


@dataclass(frozen=True)
class LookupResult:
    status: LookupStatus
    text: Optional[str] = None
    variables: Optional[TemplateVariables] = None
    resolved: Optional[ResolvedGame] = None


# --- SERVICE PROTOCOLS (INTERFACES) ---

@runtime_checkable
class ArchiveSource(Protocol):
    """Anything able to serve a player's archive index and monthly game lists."""
    async def get_archive_index(self, username: str) -> List[ArchiveUrl]: ...
    async def get_archive_month(self, archive_url: ArchiveUrl) -> List[Game]: ...
