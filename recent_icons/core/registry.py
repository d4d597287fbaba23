"""
Ordered registry of cache keys that belong to application tasks.

Sweeps only scan this registry, so the whole cache never has to be walked
when a package changes.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional

DEFAULT_TASK_KEY_PREFIX = "task:"


class TrackedKeyRegistry:
    """Insertion-ordered set of keys starting with the task key prefix."""

    def __init__(self, prefix: str = DEFAULT_TASK_KEY_PREFIX):
        if not prefix:
            raise ValueError("Task key prefix must not be empty")
        self._prefix = prefix
        # dict keeps insertion order and gives O(1) membership
        self._keys: Dict[str, None] = {}

    @property
    def prefix(self) -> str:
        return self._prefix

    def is_tracked(self, key: Optional[str]) -> bool:
        """Whether ``key`` carries the task prefix."""
        return bool(key) and key.startswith(self._prefix)

    def add(self, key: str) -> bool:
        """Track ``key`` if it is prefixed. Re-adding keeps the first position."""
        if not self.is_tracked(key) or key in self._keys:
            return False
        self._keys[key] = None
        return True

    def discard(self, key: str) -> bool:
        if key not in self._keys:
            return False
        del self._keys[key]
        return True

    def clear(self) -> None:
        self._keys.clear()

    def matching(self, fragment: str) -> List[str]:
        """Keys containing ``fragment`` case-insensitively, in insertion order."""
        needle = fragment.lower()
        return [key for key in self._keys if needle in key.lower()]

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)
