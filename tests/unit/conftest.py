"""
Shared fixtures for the recent icons unit tests.
"""

from typing import Any, Dict, Optional

import numpy as np
import pytest

from recent_icons.core.controller import CacheController, FAVORITES_SETTING
from recent_icons.services.event_bus import EventBus
from recent_icons.services.interfaces import IConfigService
from recent_icons.services.logging_service import MemoryLogger


class InMemorySettings(IConfigService):
    """Settings store held in a dict, with switchable write failures."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values: Dict[str, Any] = dict(values or {})
        self.writes = []
        self.raise_on_read = False
        self.raise_on_write = False
        self.reject_writes = False

    def load_config(self) -> Dict[str, Any]:
        return dict(self.values)

    def save_config(self, config: Dict[str, Any]) -> bool:
        self.values = dict(config)
        return True

    def get_setting(self, key: str, default: Any = None) -> Any:
        if self.raise_on_read:
            raise OSError("settings provider unavailable")
        return self.values.get(key, default)

    def set_setting(self, key: str, value: Any) -> bool:
        if self.raise_on_write:
            raise OSError("settings provider unavailable")
        if self.reject_writes:
            return False
        self.values[key] = value
        self.writes.append((key, value))
        return True


class EvictionRecorder:
    def __init__(self):
        self.keys = []

    def __call__(self, key: str) -> None:
        self.keys.append(key)


def memory_for_capacity(capacity: int, fraction: int = 4) -> int:
    """Available memory (bytes) that yields ``capacity`` cost units."""
    return capacity * 1024 * fraction


def icon(kib: int = 1) -> np.ndarray:
    """An RGBA-ish buffer costing ``kib`` units."""
    return np.zeros(kib * 1024, dtype=np.uint8)


@pytest.fixture
def logger():
    return MemoryLogger()


@pytest.fixture
def event_bus(logger):
    return EventBus(logger)


@pytest.fixture
def settings():
    return InMemorySettings({FAVORITES_SETTING: "com.foo|com.bar|com.baz"})


@pytest.fixture
def recorder():
    return EvictionRecorder()


@pytest.fixture
def make_controller(event_bus, settings, logger, recorder):
    controllers = []

    def factory(capacity: int = 100, **kwargs) -> CacheController:
        kwargs.setdefault("eviction_callback", recorder)
        controller = CacheController(
            event_bus,
            settings,
            logger=logger,
            available_memory=memory_for_capacity(capacity),
            **kwargs,
        )
        controllers.append(controller)
        return controller

    yield factory

    for controller in controllers:
        controller.dispose()


@pytest.fixture
def controller(make_controller):
    return make_controller()
