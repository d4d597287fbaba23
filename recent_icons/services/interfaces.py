"""
Abstract interfaces for Recent Icons services.
These interfaces define contracts for the collaborators the cache controller
depends on, so that the platform pieces can be swapped out in tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Optional, Any, Callable


class IConfigService(ABC):
    """Interface for configuration and user settings management."""

    @abstractmethod
    def load_config(self) -> Dict[str, Any]:
        """Load application configuration."""
        pass

    @abstractmethod
    def save_config(self, config: Dict[str, Any]) -> bool:
        """Save application configuration."""
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific setting value."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any) -> bool:
        """Set and persist a specific setting value."""
        pass


class IEventBus(ABC):
    """Interface for event-driven communication between components."""

    @abstractmethod
    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Subscribe to an event type."""
        pass

    @abstractmethod
    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        """Unsubscribe from an event type."""
        pass

    @abstractmethod
    def publish(self, event_type: str, data: Any = None) -> None:
        """Publish an event."""
        pass


class ILogger(ABC):
    """Interface for logging operations."""

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log an error message."""
        pass


# Event types for the event bus
class Events:
    """Standard event types used throughout the application."""

    # Application lifecycle events, delivered by the platform
    PACKAGE_CHANGED = "package.changed"
    PACKAGE_ADDED = "package.added"
    PACKAGE_REMOVED = "package.removed"
