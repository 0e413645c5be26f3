# last_game/core/move_counter.py
"""
Estimates how many full moves a game lasted from its PGN text.

This is a deliberately forgiving, regex-based pass rather than a real PGN
parser: it strips comments, variations and result markers, then counts the
tokens that look like moves. It never raises; any failure becomes "N/A".
"""

import math
import re
from typing import Final, List, Optional

NOT_AVAILABLE: Final[str] = "N/A"

# Headers and movetext are separated by a blank line.
SECTION_SEPARATOR = re.compile(r"\r?\n[ \t]*\r?\n")
COMMENT_PATTERN = re.compile(r"\{[^}]*\}")
VARIATION_PATTERN = re.compile(r"\([^)]*\)")
TRAILING_RESULT_PATTERN = re.compile(r"\s(1-0|0-1|1/2-1/2|\*)\s*$", re.MULTILINE)

# Tokens that are not moves.
MOVE_NUMBER_PATTERN = re.compile(r"^\d+\.\.\.|^\d+\.$")
NAG_PATTERN = re.compile(r"^\$\d+$")
SCORE_PATTERN = re.compile(r"^\d-\d$")
RESULT_PATTERN = re.compile(r"^(1-0|0-1|1/2-1/2|\*)$")
ANNOTATION_PATTERN = re.compile(r"^[!?+#]+$")

_NON_MOVE_PATTERNS = (NAG_PATTERN, SCORE_PATTERN, RESULT_PATTERN, ANNOTATION_PATTERN)


def _extract_movetext(pgn: str) -> str:
    sections = SECTION_SEPARATOR.split(pgn.strip())
    return sections[-1] if sections else ""


def _is_move_token(token: str) -> bool:
    if not token or MOVE_NUMBER_PATTERN.match(token):
        return False
    return not any(pattern.match(token) for pattern in _NON_MOVE_PATTERNS)


def count_plies(pgn: str) -> int:
    """Counts half-moves in the movetext of `pgn` using the token heuristic."""
    movetext = _extract_movetext(pgn)
    movetext = COMMENT_PATTERN.sub(" ", movetext)
    movetext = VARIATION_PATTERN.sub(" ", movetext)
    movetext = TRAILING_RESULT_PATTERN.sub(" ", movetext, count=1)
    tokens: List[str] = movetext.split()
    return sum(1 for token in tokens if _is_move_token(token))


def count_full_moves(pgn: Optional[str]) -> str:
    """
    Returns the number of full moves in a game as a string.

    A game with one or two plies counts as one move; an empty movetext also
    reports "1", since Chess.com only archives games that started.

    Args:
        pgn: The PGN text published with the game, headers included.

    Returns:
        The full-move count, or "N/A" when no PGN is available or it could
        not be processed.
    """
    if not pgn:
        return NOT_AVAILABLE
    try:
        plies = count_plies(pgn)
    except (TypeError, AttributeError, re.error):
        return NOT_AVAILABLE
    return str(max(1, math.ceil(plies / 2)))
