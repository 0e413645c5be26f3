# last_game/core/outcome.py
"""
Maps Chess.com per-player result codes onto a small outcome vocabulary.

Chess.com reports a result for each side rather than for the game: the winner
gets "win" and the other side gets the reason it lost or drew ("resigned",
"agreed", "timevsinsufficient", ...). These pure functions collapse that
vocabulary into win / loss / draw / unknown.
"""

from typing import Dict, Final, FrozenSet, Optional

from last_game.types import OutcomeCategory

DRAW_CODES: Final[FrozenSet[str]] = frozenset({
    "stalemate", "agreed", "repetition", "insufficient",
    "50move", "timevsinsufficient", "draw",
})

LOSS_CODES: Final[FrozenSet[str]] = frozenset({
    "checkmated", "resigned", "timeout", "abandoned", "lose",
})

PAST_TENSE_LABELS: Final[Dict[OutcomeCategory, str]] = {
    OutcomeCategory.WIN: "Won",
    OutcomeCategory.LOSS: "Lost",
    OutcomeCategory.DRAW: "Drew",
    OutcomeCategory.UNKNOWN: "",
}


def classify_outcome(result: Optional[str]) -> OutcomeCategory:
    """
    Classifies a raw Chess.com result code. The comparison is case-insensitive.

    Args:
        result: The `result` field of a player object, possibly empty or None.

    Returns:
        The matching `OutcomeCategory`; UNKNOWN for anything unrecognized.
    """
    code = (result or "").lower()
    if code == "win":
        return OutcomeCategory.WIN
    if code in DRAW_CODES:
        return OutcomeCategory.DRAW
    if code in LOSS_CODES:
        return OutcomeCategory.LOSS
    return OutcomeCategory.UNKNOWN


def past_tense_label(category: OutcomeCategory) -> str:
    """Renders a category as "Won", "Lost", "Drew" or an empty string."""
    return PAST_TENSE_LABELS.get(category, "")
