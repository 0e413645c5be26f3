# last_game/core/titled_players.py
"""
Picks a random player from the Chess.com leaderboards payload.
"""

import random
import re
from typing import Any, Iterator, List, Mapping, Optional
from urllib.parse import unquote

MEMBER_URL_PATTERN = re.compile(r"/member/([^/?#]+)", re.IGNORECASE)


def _entry_username(entry: Any) -> str:
    if not isinstance(entry, Mapping):
        return ""
    raw = entry.get("username") or entry.get("player") or entry.get("url") or ""
    if not isinstance(raw, str):
        return ""
    match = MEMBER_URL_PATTERN.search(raw)
    return unquote(match.group(1)) if match else raw


def _entries(leaderboards: Mapping[str, Any]) -> Iterator[Any]:
    for bucket in leaderboards.values():
        if isinstance(bucket, list):
            yield from bucket


def collect_usernames(leaderboards: Mapping[str, Any]) -> List[str]:
    """
    Collects candidate usernames from every leaderboard category.

    Entries carrying a non-empty `title` are preferred; if no entry is titled,
    every username found is returned instead.
    """
    titled: List[str] = []
    everyone: List[str] = []
    for entry in _entries(leaderboards or {}):
        username = _entry_username(entry)
        if not username:
            continue
        everyone.append(username)
        title = entry.get("title")
        if isinstance(title, str) and title:
            titled.append(username)
    return titled or everyone


def pick_random_username(
    leaderboards: Mapping[str, Any], rng: Optional[random.Random] = None
) -> Optional[str]:
    """Returns one username chosen uniformly at random, or None if there are none."""
    usernames = collect_usernames(leaderboards)
    if not usernames:
        return None
    return (rng or random).choice(usernames)
