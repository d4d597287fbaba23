"""
Recent Icons
Bounded icon cache for the recents panel with package-driven invalidation.
"""

from .core.cache import IconCache, CacheStats, resource_cost
from .core.controller import CacheController, ControllerState, FAVORITES_SETTING
from .core.errors import RecentIconsError, InvalidArgumentError
from .core.events import PackageEvent, PackageEventKind
from .core.favorites import prune_favorites
from .core.registry import TrackedKeyRegistry
from .app import RecentsServices, build_services

__all__ = [
    'IconCache', 'CacheStats', 'resource_cost',
    'CacheController', 'ControllerState', 'FAVORITES_SETTING',
    'RecentIconsError', 'InvalidArgumentError',
    'PackageEvent', 'PackageEventKind',
    'prune_favorites',
    'TrackedKeyRegistry',
    'RecentsServices', 'build_services',
]

__version__ = "1.0.0"
