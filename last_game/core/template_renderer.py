# last_game/core/template_renderer.py
"""
Substitutes template variables into a user-written handlebar template.

Templates use `{{ name }}` placeholders (whitespace inside the braces is
allowed). Rendering is a single regex pass, so a value that itself contains
`{{something}}` is inserted literally and never expanded again.
"""

import re
from typing import Final, FrozenSet, Mapping, Optional

NOT_AVAILABLE: Final[str] = "N/A"

# Handlebars from earlier template vocabularies. They always render as N/A so
# old templates degrade instead of leaking raw placeholder text.
LEGACY_KEYS: Final[FrozenSet[str]] = frozenset({
    "start", "end", "time_class", "timeClass",
    "lookup", "lookup_url", "lookup_rating", "lookup_result",
    "other", "other_url", "other_rating", "other_result",
})

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")


def normalize_variables(variables: Mapping[str, Optional[str]]) -> dict:
    """Replaces None and empty-string values with "N/A"."""
    normalized = {}
    for key, value in variables.items():
        if value is None or value == "":
            normalized[key] = NOT_AVAILABLE
        else:
            normalized[key] = str(value)
    return normalized


def render_template(template: Optional[str], variables: Mapping[str, Optional[str]]) -> str:
    """
    Renders `template` with `variables`.

    Known keys are replaced by their (normalized) value, legacy keys by "N/A",
    and unknown placeholders are left untouched. The result is stripped.

    Args:
        template: The user template; None is treated as an empty template.
        variables: Mapping of variable name to value.

    Returns:
        The rendered text.
    """
    normalized = normalize_variables(variables)

    def _substitute(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in LEGACY_KEYS:
            return NOT_AVAILABLE
        if key in normalized:
            return normalized[key]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template or "").strip()
