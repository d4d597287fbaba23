"""
Package lifecycle events as delivered by the platform.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..services.interfaces import Events

PACKAGE_SCHEME = "package"


class PackageEventKind(Enum):
    CHANGED = Events.PACKAGE_CHANGED
    ADDED = Events.PACKAGE_ADDED
    REMOVED = Events.PACKAGE_REMOVED

    @property
    def event_type(self) -> str:
        return self.value


def package_name_from_locator(locator: Optional[str]) -> Optional[str]:
    """
    Extract the package name from a ``package:<name>`` locator.

    The scheme-specific part is everything after the first colon; a locator
    without a scheme is taken as the bare package name.
    """
    if not locator:
        return None
    scheme, sep, rest = locator.partition(":")
    if not sep:
        return locator
    if scheme.lower() != PACKAGE_SCHEME:
        return None
    return rest.lstrip("/") or None


@dataclass(frozen=True)
class PackageEvent:
    """Payload published on the event bus for a package lifecycle change."""
    kind: PackageEventKind
    locator: Optional[str]

    @property
    def package_name(self) -> Optional[str]:
        return package_name_from_locator(self.locator)

    @classmethod
    def for_package(cls, kind: PackageEventKind, package_name: str) -> "PackageEvent":
        return cls(kind=kind, locator=f"{PACKAGE_SCHEME}:{package_name}")
