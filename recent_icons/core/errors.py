"""Exceptions raised by the recent icons cache."""


class RecentIconsError(Exception):
    """Base class for cache errors."""


class InvalidArgumentError(RecentIconsError, ValueError):
    """An argument was rejected before any state was touched."""
