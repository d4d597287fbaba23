"""
Event bus implementation for Recent Icons.
Stands in for the platform broadcast mechanism: package lifecycle events are
published here and delivered to subscribers using the observer pattern.
"""

from __future__ import annotations
from typing import Dict, List, Callable, Any, Optional
from collections import defaultdict
import weakref

from .interfaces import IEventBus, ILogger


class EventBus(IEventBus):
    """Synchronous event bus holding weak references to its handlers."""

    def __init__(self, logger: ILogger):
        self._logger = logger
        self._handlers: Dict[str, List[weakref.ref]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Subscribe to an event type."""
        if not callable(handler):
            self._logger.error(f"Handler for event '{event_type}' is not callable")
            return

        # Weak references keep the bus from extending subscriber lifetimes
        if hasattr(handler, '__self__'):
            weak_handler = weakref.WeakMethod(handler, self._cleanup_handler)
        else:
            weak_handler = weakref.ref(handler, self._cleanup_handler)

        self._handlers[event_type].append(weak_handler)
        self._logger.debug(f"Subscribed to event '{event_type}'", handler=str(handler))

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        """Unsubscribe from an event type."""
        if event_type not in self._handlers:
            return

        remaining = []
        for weak_handler in self._handlers[event_type]:
            actual_handler = weak_handler()
            if actual_handler is None or actual_handler == handler:
                continue
            remaining.append(weak_handler)

        if remaining:
            self._handlers[event_type] = remaining
        else:
            del self._handlers[event_type]

        self._logger.debug(f"Unsubscribed from event '{event_type}'", handler=str(handler))

    def publish(self, event_type: str, data: Any = None) -> None:
        """Publish an event to every live handler of its type."""
        handlers = list(self._handlers.get(event_type, []))
        if not handlers:
            self._logger.debug(f"No handlers for event '{event_type}'")
            return

        delivered = 0
        for weak_handler in handlers:
            handler = weak_handler()
            if handler is None:
                continue

            try:
                if data is not None:
                    handler(data)
                else:
                    handler()
                delivered += 1
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for '{event_type}'",
                    exception=e,
                    handler=str(handler)
                )

        self._logger.debug(f"Published event '{event_type}' to {delivered} handlers")

    def _cleanup_handler(self, weak_ref) -> None:
        """Drop a handler whose referent was garbage collected."""
        for event_type, handlers in list(self._handlers.items()):
            if weak_ref in handlers:
                handlers.remove(weak_ref)
                if not handlers:
                    del self._handlers[event_type]
                break

    def get_subscriber_count(self, event_type: Optional[str] = None) -> Dict[str, int]:
        """Get count of subscribers for each event type."""
        if event_type:
            return {event_type: len(self._handlers.get(event_type, []))}

        return {et: len(handlers) for et, handlers in self._handlers.items()}
