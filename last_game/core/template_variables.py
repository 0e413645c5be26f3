# last_game/core/template_variables.py
"""
Assembles the named variables a user template can reference for one game.

The builder follows a "Prepare, Derive, Assemble" flow: it first decides who
the template is centred on (the focus player) and who the opponent is, then
derives each display field with the pure helpers of `core`, and finally lays
everything out under the fixed set of keys in `TEMPLATE_VARIABLE_KEYS`.

Only one derivation needs the network: the rating change, which looks up the
focus player's previous game of the same time class. A failure there is
recovered locally and simply leaves `rating_change` empty.
"""

from typing import TYPE_CHECKING, Optional, Tuple
from urllib.parse import quote

import structlog

from last_game.core.move_counter import count_full_moves
from last_game.core.outcome import classify_outcome, past_tense_label
from last_game.core.time_formatter import (
    format_date_only, format_duration, format_time_only, format_timestamp
)
from last_game.exceptions import LastGameError
from last_game.types import (
    Color, FormatPatterns, Game, OutcomeCategory, ResolvedGame, Side,
    TemplateVariables, normalize_username
)

if TYPE_CHECKING:
    from last_game.orchestration.previous_game_finder import PreviousGameFinder

logger = structlog.get_logger(__name__)

DEFAULT_PROFILE_BASE_URL = "https://www.chess.com/member"

TEMPLATE_VARIABLE_KEYS: Tuple[str, ...] = (
    "rated", "rules",
    "start_timestamp", "end_timestamp", "start_date", "end_date", "start_time", "end_time",
    "moves", "time", "url", "game_type",
    "white", "white_url", "white_rating", "white_result",
    "black", "black_url", "black_rating", "black_result",
    "winner", "winner_url", "winner_rating",
    "loser", "loser_url", "loser_rating",
    "focus", "focus_url", "focus_rating", "focus_result",
    "foe", "foe_url", "foe_rating", "foe_result",
    "rating_change",
)


def format_rating(rating: Optional[int]) -> str:
    return str(rating) if rating is not None else ""


def format_rating_change(delta: Optional[int]) -> str:
    """Renders a delta as "+12", "-5" or "0"; no delta renders as ""."""
    if delta is None:
        return ""
    return f"+{delta}" if delta > 0 else str(delta)


def _side_with_outcome(game: Game, category: OutcomeCategory) -> Optional[Side]:
    for color in (Color.WHITE, Color.BLACK):
        side = game.side(color)
        if classify_outcome(side.result) is category:
            return side
    return None


class TemplateVariableBuilder:
    """Builds the `TemplateVariables` mapping for a resolved game."""

    def __init__(self, previous_game_finder: "PreviousGameFinder", profile_base_url: str = DEFAULT_PROFILE_BASE_URL):
        self._previous_game_finder = previous_game_finder
        self._profile_base_url = profile_base_url.rstrip("/")

    def profile_url(self, username: Optional[str]) -> str:
        name = (username or "").strip()
        if not name:
            return ""
        return f"{self._profile_base_url}/{quote(name, safe='')}"

    # --- 1. PREPARE: focus / foe resolution ---

    @staticmethod
    def resolve_focus(resolved: ResolvedGame, lookup_username: Optional[str]) -> Tuple[str, Color]:
        """
        Decides whose perspective the template is written from.

        The focus name is the lookup username if one was given, otherwise the
        username on the side the query matched. The focus color is whichever
        side carries that name, falling back to the resolved color.

        Returns:
            A `(focus_name, focus_color)` pair.
        """
        game = resolved.game
        focus_name = (lookup_username or "").strip() or game.side(resolved.color).username or ""
        focus_color = game.color_of(focus_name) or resolved.color
        return focus_name, focus_color

    # --- 2. DERIVE: network-dependent rating change ---

    async def compute_rating_change(self, game: Game, focus_name: str, focus_color: Color) -> Optional[int]:
        """
        Computes the focus player's rating change since their previous game of
        the same time class.

        Returns:
            The signed delta, or None when it cannot be determined (no end
            time, unknown time class, no previous game, missing ratings, or an
            API failure).
        """
        if not game.end_time or game.time_class is None or not focus_name:
            return None

        current_rating = game.side(focus_color).rating
        try:
            previous = await self._previous_game_finder.find_before(focus_name, game.time_class, game.end_time)
        except LastGameError as e:
            logger.warning("Could not compute rating change.", focus=focus_name, error=str(e))
            return None

        if previous is None:
            return None

        focus_norm = normalize_username(focus_name)
        previous_side = previous.white if normalize_username(previous.white.username) == focus_norm else previous.black
        if current_rating is None or previous_side.rating is None:
            return None
        return current_rating - previous_side.rating

    # --- 3. ASSEMBLE ---

    def _player_fields(self, prefix: str, side: Optional[Side], with_result: bool = True) -> TemplateVariables:
        username = side.username if side else ""
        fields = {
            prefix: username,
            f"{prefix}_url": self.profile_url(username),
            f"{prefix}_rating": format_rating(side.rating if side else None),
        }
        if with_result:
            fields[f"{prefix}_result"] = past_tense_label(classify_outcome(side.result if side else None))
        return fields

    async def build(
        self,
        resolved: ResolvedGame,
        lookup_username: Optional[str] = None,
        patterns: Optional[FormatPatterns] = None,
    ) -> TemplateVariables:
        """
        Builds every template variable for `resolved`.

        Args:
            resolved: The game returned by the resolver and the color matched.
            lookup_username: The username the user asked about; drives focus.
            patterns: Date/time patterns and display timezone.

        Returns:
            A dict with exactly the keys of `TEMPLATE_VARIABLE_KEYS`, all strings.
        """
        patterns = patterns or FormatPatterns()
        game = resolved.game
        start, end, tz = game.start_time, game.end_time, patterns.tz

        focus_name, focus_color = self.resolve_focus(resolved, lookup_username)
        focus_side = game.side(focus_color)
        foe_side = game.side(focus_color.opposite)

        rating_change = await self.compute_rating_change(game, focus_name, focus_color)

        variables: TemplateVariables = {
            "rated": "Rated" if game.rated else "Unrated",
            "rules": game.rules or "",
            "start_timestamp": format_timestamp(start, patterns.date_format, patterns.time_format, tz),
            "end_timestamp": format_timestamp(end, patterns.date_format, patterns.time_format, tz),
            "start_date": format_date_only(start, patterns.date_format, tz),
            "end_date": format_date_only(end, patterns.date_format, tz),
            "start_time": format_time_only(start, patterns.time_format, tz),
            "end_time": format_time_only(end, patterns.time_format, tz),
            "moves": count_full_moves(game.pgn),
            "time": format_duration(start, end, game.time_class),
            "url": game.url or "",
            "game_type": game.time_class.label if game.time_class else "",
        }
        variables.update(self._player_fields("white", game.white))
        variables.update(self._player_fields("black", game.black))
        variables.update(self._player_fields("winner", _side_with_outcome(game, OutcomeCategory.WIN), with_result=False))
        variables.update(self._player_fields("loser", _side_with_outcome(game, OutcomeCategory.LOSS), with_result=False))

        focus_display = focus_side.username or focus_name
        variables.update({
            "focus": focus_display,
            "focus_url": self.profile_url(focus_display),
            "focus_rating": format_rating(focus_side.rating),
            "focus_result": past_tense_label(classify_outcome(focus_side.result)),
        })
        variables.update(self._player_fields("foe", foe_side))
        variables["rating_change"] = format_rating_change(rating_change)

        logger.debug("Built template variables.", game_url=game.url, focus=focus_display,
                     rating_change=variables["rating_change"])
        return variables
