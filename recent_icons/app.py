from __future__ import annotations
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.controller import CacheController, EvictionCallback
from .services import ConfigService, EventBus, LoggingService, LogLevel
from .services.interfaces import IConfigService, IEventBus, ILogger


@dataclass
class RecentsServices:
    """Services wired for one recents panel. The owner passes them down."""
    logger: ILogger
    event_bus: IEventBus
    config: IConfigService
    controller: CacheController

    def shutdown(self) -> None:
        self.logger.info("Recents panel shutting down")
        self.controller.dispose()


def build_services(config_dir: Optional[Path] = None,
                   log_file: Optional[Path] = None,
                   eviction_callback: Optional[EvictionCallback] = None,
                   available_memory: Optional[int] = None,
                   console_level: LogLevel = LogLevel.INFO) -> RecentsServices:
    """Construct the logger, settings, event bus and cache controller."""
    logger = LoggingService("RecentIcons", log_file, console_level, LogLevel.DEBUG)
    logger.log_system_info({
        "platform": platform.platform(),
        "python_version": platform.python_version(),
    })

    config = ConfigService(logger, config_dir)
    event_bus = EventBus(logger)
    recents = config.get_recents_config()

    controller = CacheController(
        event_bus,
        config,
        logger=logger,
        eviction_callback=eviction_callback,
        available_memory=available_memory,
        task_key_prefix=recents.task_key_prefix,
        memory_fraction=recents.memory_fraction,
    )
    return RecentsServices(logger=logger, event_bus=event_bus, config=config, controller=controller)
