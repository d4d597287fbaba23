"""
Favorites list pruning.

Favorites are stored as a single pipe-delimited string of package name
fragments, e.g. ``"com.foo|com.bar"``.
"""

from __future__ import annotations
from typing import List, Optional

FAVORITES_DELIMITER = "|"


def split_favorites(favorites: Optional[str]) -> List[str]:
    if not favorites:
        return []
    return favorites.split(FAVORITES_DELIMITER)


def prune_favorites(favorites: Optional[str], package_name: str) -> Optional[str]:
    """
    Drop every favorite containing ``package_name`` (case-insensitive).

    Returns None when there is nothing stored, otherwise the surviving
    entries joined with the delimiter; an empty string means every entry
    was dropped and the setting should be cleared.
    """
    if not favorites:
        return None
    needle = package_name.lower()
    survivors = [entry for entry in split_favorites(favorites) if needle not in entry.lower()]
    return FAVORITES_DELIMITER.join(survivors)
