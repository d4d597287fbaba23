"""
Cost-bounded LRU cache for icon resources (QImages, decoded numpy arrays,
encoded bytes, or any other opaque handle).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple
import numbers
import threading

import numpy as np
from cachetools import LRUCache

from .errors import InvalidArgumentError
from ..services.interfaces import ILogger
from ..services.logging_service import NullLogger

BYTES_PER_UNIT = 1024

CostFunction = Callable[[Any], int]
EvictionObserver = Callable[[str, Any], None]


def resource_byte_size(resource: Any) -> Optional[int]:
    """Byte size exposed by ``resource``, or None if it exposes none."""
    if isinstance(resource, np.ndarray):
        return int(resource.nbytes)
    if isinstance(resource, (bytes, bytearray)):
        return len(resource)
    for method_name in ("sizeInBytes", "byteCount"):
        method = getattr(resource, method_name, None)
        if callable(method):
            return int(method())
    nbytes = getattr(resource, "nbytes", None)
    if isinstance(nbytes, numbers.Integral):
        return int(nbytes)
    return None


def resource_cost(resource: Any) -> int:
    """Default cost: size in KiB (at least 1), or 1 for unsized resources."""
    size = resource_byte_size(resource)
    if size is None:
        return 1
    return max(1, size // BYTES_PER_UNIT)


@dataclass
class CacheStats:
    hits: int
    misses: int
    puts: int
    evictions: int
    size: int
    entry_count: int
    capacity: int


class _RecencyStore(LRUCache):
    """LRUCache that reports every capacity-driven eviction."""

    def __init__(self, maxsize: int, getsizeof: CostFunction, on_evict: Callable[[str, Any], None]):
        super().__init__(maxsize, getsizeof=getsizeof)
        self._on_evict = on_evict

    def popitem(self) -> Tuple[str, Any]:
        key, value = super().popitem()
        self._on_evict(key, value)
        return key, value

    def drain(self) -> List[Tuple[str, Any]]:
        """Remove all entries silently, least recently used first."""
        entries = []
        while self:
            entries.append(LRUCache.popitem(self))
        return entries


class IconCache:
    """
    Key to resource mapping bounded by the summed cost of its entries.

    ``get`` and ``put`` promote a key to most recently used; ``put``,
    ``resize`` and ``trim_to_size`` evict least recently used entries until
    the total cost fits. Those evictions are reported to ``on_evict``;
    ``remove`` and ``evict_all`` are not.
    """

    def __init__(self, capacity: int, cost_function: CostFunction = resource_cost,
                 on_evict: Optional[EvictionObserver] = None,
                 lock: Optional[threading.RLock] = None,
                 logger: Optional[ILogger] = None):
        if capacity < 0:
            raise InvalidArgumentError(f"Cache capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._cost_function = cost_function
        self._on_evict = on_evict
        self._lock = lock or threading.RLock()
        self._logger = logger or NullLogger()
        self._store = self._new_store(capacity)

        self._hits = 0
        self._misses = 0
        self._puts = 0
        self._evictions = 0

    def _new_store(self, capacity: int) -> _RecencyStore:
        return _RecencyStore(capacity, self._cost_function, self._evicted)

    def _evicted(self, key: str, resource: Any) -> None:
        self._evictions += 1
        self._logger.debug("Evicted least recently used entry", key=key)
        if self._on_evict is not None:
            self._on_evict(key, resource)

    @property
    def capacity(self) -> int:
        return self._capacity

    def current_capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        """Summed cost of the live entries."""
        with self._lock:
            return int(self._store.currsize)

    def put(self, key: str, resource: Any) -> bool:
        """Insert or replace ``key``; returns False if the arguments are rejected or cannot be costed."""
        if not key or not isinstance(key, str) or resource is None:
            self._logger.warning("Rejected cache put with empty key or resource", key=key)
            return False

        try:
            cost = self._cost_function(resource)
        except Exception as e:
            self._logger.error("Failed to compute resource cost", exception=e, key=key)
            return False
        with self._lock:
            self._puts += 1
            # Release the replaced resource before accounting the new cost
            self._store.pop(key, None)
            if cost > self._capacity:
                # Inserted then trimmed away: older entries go first, then this one
                self._trim(0)
                self._logger.debug("Entry larger than capacity", key=key, cost=cost,
                                   capacity=self._capacity)
                self._evicted(key, resource)
                return True
            self._store[key] = resource
        return True

    def get(self, key: Optional[str]) -> Any:
        """Resource for ``key`` promoted to most recently used, or None."""
        if key is None:
            return None
        with self._lock:
            resource = self._store.get(key)
            if resource is None:
                self._misses += 1
            else:
                self._hits += 1
            return resource

    def remove(self, key: Optional[str]) -> Any:
        """Remove ``key`` and return its resource, or None if absent."""
        if key is None:
            return None
        with self._lock:
            return self._store.pop(key, None)

    def evict_all(self) -> None:
        """Drop every entry without reporting evictions."""
        with self._lock:
            self._store = self._new_store(self._capacity)

    def resize(self, capacity: int) -> None:
        """Change the capacity and evict down to it immediately."""
        if capacity < 0:
            raise InvalidArgumentError(f"Cache capacity must be >= 0, got {capacity}")
        with self._lock:
            self._trim(capacity)
            survivors = self._store.drain()
            self._capacity = capacity
            self._store = self._new_store(capacity)
            for key, resource in survivors:
                self._store[key] = resource
        self._logger.debug("Cache resized", capacity=capacity)

    def trim_to_size(self, size: int) -> None:
        """Evict least recently used entries until the total cost is <= ``size``."""
        if size < 0:
            raise InvalidArgumentError(f"Trim size must be >= 0, got {size}")
        with self._lock:
            self._trim(size)

    def _trim(self, size: int) -> None:
        while self._store and self._store.currsize > size:
            self._store.popitem()

    def keys(self) -> List[str]:
        """Live keys, least recently used first."""
        with self._lock:
            survivors = self._store.drain()
            for key, resource in survivors:
                self._store[key] = resource
            return [key for key, _ in survivors]

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                puts=self._puts,
                evictions=self._evictions,
                size=int(self._store.currsize),
                entry_count=len(self._store),
                capacity=self._capacity,
            )

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
