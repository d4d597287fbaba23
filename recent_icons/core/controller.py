"""
Cache controller for the recents panel icons.

Owns the icon cache and the registry of task keys, listens for package
lifecycle events and evicts the icons of a changed package. When a package
is removed its favorites entries are pruned as well, after the eviction.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, List, Optional
import threading

import psutil

from .cache import CacheStats, CostFunction, IconCache, resource_cost
from .errors import InvalidArgumentError
from .events import PackageEvent, PackageEventKind
from .favorites import prune_favorites
from .registry import DEFAULT_TASK_KEY_PREFIX, TrackedKeyRegistry
from ..services.interfaces import IConfigService, IEventBus, ILogger
from ..services.logging_service import NullLogger

FAVORITES_SETTING = "recents.favorites"
DEFAULT_MEMORY_FRACTION = 4

EvictionCallback = Callable[[str], None]


class ControllerState(Enum):
    ACTIVE = "active"
    DISPOSED = "disposed"


def available_memory_bytes() -> int:
    """Memory headroom reported by the operating system."""
    return int(psutil.virtual_memory().available)


def capacity_for_memory(available_memory: int, memory_fraction: int = DEFAULT_MEMORY_FRACTION) -> int:
    """Capacity in cost units (KiB) for a memory headroom given in bytes."""
    if available_memory < 0:
        raise InvalidArgumentError(f"Available memory must be >= 0, got {available_memory}")
    if memory_fraction < 1:
        raise InvalidArgumentError(f"Memory fraction must be >= 1, got {memory_fraction}")
    return (available_memory // 1024) // memory_fraction


class CacheController:
    """
    Icon cache with package-driven invalidation.

    All cache and registry mutations run under one lock owned by the
    controller. Eviction callbacks and favorites store access happen after
    the lock is released.
    """

    def __init__(self, event_bus: IEventBus, config_service: IConfigService,
                 logger: Optional[ILogger] = None,
                 eviction_callback: Optional[EvictionCallback] = None,
                 available_memory: Optional[int] = None,
                 task_key_prefix: str = DEFAULT_TASK_KEY_PREFIX,
                 memory_fraction: int = DEFAULT_MEMORY_FRACTION,
                 cost_function: CostFunction = resource_cost):
        self._event_bus = event_bus
        self._config = config_service
        self._logger = logger or NullLogger()
        self._eviction_callback = eviction_callback

        if available_memory is None:
            available_memory = available_memory_bytes()
        self._max_budget = capacity_for_memory(available_memory, memory_fraction)

        self._lock = threading.RLock()
        self._registry = TrackedKeyRegistry(task_key_prefix)
        registry = self._registry
        self._cache = IconCache(
            self._max_budget,
            cost_function=cost_function,
            on_evict=lambda key, _resource: registry.discard(key),
            lock=self._lock,
            logger=self._logger,
        )

        self._state = ControllerState.ACTIVE
        # Bound methods: the bus only holds weak references to its handlers
        self._package_handlers = {
            PackageEventKind.CHANGED: self._on_package_changed,
            PackageEventKind.ADDED: self._on_package_added,
            PackageEventKind.REMOVED: self._on_package_removed,
        }
        for kind, handler in self._package_handlers.items():
            self._event_bus.subscribe(kind.event_type, handler)

        self._logger.info("Cache controller started", capacity=self._max_budget,
                          prefix=task_key_prefix)

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is ControllerState.ACTIVE

    def dispose(self) -> None:
        """Unsubscribe from package events. Every later call is a no-op."""
        with self._lock:
            if self._state is ControllerState.DISPOSED:
                return
            self._state = ControllerState.DISPOSED
        for kind, handler in self._package_handlers.items():
            self._event_bus.unsubscribe(kind.event_type, handler)
        self._logger.info("Cache controller disposed")

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------
    # The state is read under the lock so a call racing with dispose()
    # either completes first or sees DISPOSED.
    def add_entry(self, key: str, resource: Any) -> bool:
        with self._lock:
            if not self.is_active:
                return False
            tracked = isinstance(key, str) and resource is not None and self._registry.add(key)
            stored = self._cache.put(key, resource)
            if tracked:
                if stored:
                    self._logger.debug("Tracking task key", key=key)
                else:
                    self._registry.discard(key)
            return stored

    def lookup(self, key: Optional[str]) -> Any:
        with self._lock:
            if not self.is_active:
                return None
            return self._cache.get(key)

    def remove_entry(self, key: Optional[str]) -> Any:
        if key is None:
            return None
        with self._lock:
            if not self.is_active:
                return None
            self._registry.discard(key)
            return self._cache.remove(key)

    def clear_all(self) -> None:
        with self._lock:
            if not self.is_active:
                return
            self._cache.evict_all()
            self._registry.clear()
        self._logger.debug("Cache cleared")

    def resize(self, capacity: int) -> None:
        """Change the live capacity; raises InvalidArgumentError if negative."""
        with self._lock:
            if not self.is_active:
                return
            self._cache.resize(capacity)

    def trim_to_size(self, size: int) -> None:
        with self._lock:
            if not self.is_active:
                return
            self._cache.trim_to_size(size)

    def reported_max_budget(self) -> int:
        """Capacity computed at construction; later resizes do not change it."""
        return self._max_budget

    def tracked_keys(self) -> List[str]:
        with self._lock:
            return list(self._registry)

    def stats(self) -> CacheStats:
        return self._cache.stats()

    # ------------------------------------------------------------------
    # Package events
    # ------------------------------------------------------------------
    def _on_package_changed(self, event: Any = None) -> None:
        self._handle_package_event(PackageEventKind.CHANGED, event)

    def _on_package_added(self, event: Any = None) -> None:
        self._handle_package_event(PackageEventKind.ADDED, event)

    def _on_package_removed(self, event: Any = None) -> None:
        self._handle_package_event(PackageEventKind.REMOVED, event)

    def _handle_package_event(self, kind: PackageEventKind, event: Any) -> None:
        """Sweep for a bus event; the topic it arrived on decides the kind."""
        if not isinstance(event, PackageEvent):
            self._logger.warning("Ignoring malformed package event", event=event)
            return
        if event.kind is not kind:
            self._logger.warning("Package event kind disagrees with its topic",
                                 topic=kind.event_type, payload_kind=getattr(event.kind, "name", event.kind))
        self.on_application_event(kind, event.package_name)

    def on_application_event(self, kind: PackageEventKind, package_name: Optional[str]) -> List[str]:
        """
        Evict every tracked key containing ``package_name`` and return them.

        Matching is a case-insensitive substring test against the whole key,
        so ``com.foo`` also matches keys of ``com.foobar``. On REMOVED the
        favorites list is pruned after the evictions.
        """
        if not package_name:
            return []

        with self._lock:
            if not self.is_active:
                return []
            evicted = self._registry.matching(package_name)
            for key in evicted:
                self._cache.remove(key)
                self._registry.discard(key)

        if evicted:
            self._logger.info("Evicted icons for package", package=package_name,
                              event=kind.name, count=len(evicted))
        for key in evicted:
            self._notify_evicted(key)

        if kind is PackageEventKind.REMOVED:
            self._remove_favorite_entries(package_name)
        return evicted

    def _notify_evicted(self, key: str) -> None:
        if self._eviction_callback is None:
            return
        try:
            self._eviction_callback(key)
        except Exception as e:
            self._logger.error("Eviction callback failed", exception=e, key=key)

    def _remove_favorite_entries(self, package_name: str) -> None:
        try:
            favorites = self._config.get_setting(FAVORITES_SETTING)
        except Exception as e:
            self._logger.error("Failed to read favorites", exception=e)
            return

        if favorites is not None and not isinstance(favorites, str):
            self._logger.warning("Favorites setting is not a string", value=favorites)
            return

        pruned = prune_favorites(favorites, package_name)
        if pruned is None:
            return

        try:
            saved = self._config.set_setting(FAVORITES_SETTING, pruned)
        except Exception as e:
            self._logger.error("Failed to write favorites", exception=e, package=package_name)
            return

        if saved is False:
            self._logger.error("Favorites store rejected the write", package=package_name)
        elif pruned != favorites:
            self._logger.info("Pruned favorites for removed package", package=package_name)
