"""
Services package for Recent Icons.
Collaborators the cache controller depends on: logging, settings and the
package event bus.
"""

# Interfaces
from .interfaces import IConfigService, IEventBus, ILogger, Events

# Concrete implementations
from .config_service import ConfigService, AppConfig, RecentsConfig
from .logging_service import LoggingService, LogLevel, NullLogger, MemoryLogger
from .event_bus import EventBus

__all__ = [
    # Interfaces
    'IConfigService', 'IEventBus', 'ILogger', 'Events',

    # Implementations
    'ConfigService', 'LoggingService', 'EventBus',

    # Configuration classes
    'AppConfig', 'RecentsConfig',

    # Logging utilities
    'LogLevel', 'NullLogger', 'MemoryLogger',
]
