"""
Unit tests for favorites pruning, package event locators and the task key
registry.
"""

import pytest

from recent_icons.core.events import PackageEvent, PackageEventKind, package_name_from_locator
from recent_icons.core.favorites import prune_favorites, split_favorites
from recent_icons.core.registry import TrackedKeyRegistry
from recent_icons.services.interfaces import Events


class TestPruneFavorites:

    def test_drops_matching_entry(self):
        assert prune_favorites("com.foo|com.bar|com.baz", "com.bar") == "com.foo|com.baz"

    def test_single_entry_becomes_empty_string(self):
        assert prune_favorites("com.bar", "com.bar") == ""

    @pytest.mark.parametrize("stored", [None, ""])
    def test_nothing_stored(self, stored):
        assert prune_favorites(stored, "com.bar") is None

    def test_case_insensitive_substring(self):
        assert prune_favorites("Com.Bar.Pro|com.foo", "com.bar") == "com.foo"

    def test_no_match_keeps_value(self):
        assert prune_favorites("com.foo|com.baz", "com.bar") == "com.foo|com.baz"

    def test_no_trailing_delimiter(self):
        assert prune_favorites("com.foo|com.bar", "com.bar") == "com.foo"

    def test_split(self):
        assert split_favorites("a|b") == ["a", "b"]
        assert split_favorites(None) == []


class TestPackageLocator:

    @pytest.mark.parametrize("locator, expected", [
        ("package:com.foo", "com.foo"),
        ("PACKAGE:com.foo", "com.foo"),
        ("com.foo", "com.foo"),
        ("package:", None),
        ("content:com.foo", None),
        ("", None),
        (None, None),
    ])
    def test_package_name_from_locator(self, locator, expected):
        assert package_name_from_locator(locator) == expected

    def test_for_package(self):
        event = PackageEvent.for_package(PackageEventKind.ADDED, "com.foo")

        assert event.locator == "package:com.foo"
        assert event.package_name == "com.foo"

    def test_kinds_map_to_bus_event_types(self):
        assert PackageEventKind.CHANGED.event_type == Events.PACKAGE_CHANGED
        assert PackageEventKind.ADDED.event_type == Events.PACKAGE_ADDED
        assert PackageEventKind.REMOVED.event_type == Events.PACKAGE_REMOVED


class TestTrackedKeyRegistry:

    def test_only_prefixed_keys(self):
        registry = TrackedKeyRegistry("task:")

        assert registry.add("task:a") is True
        assert registry.add("other:a") is False
        assert registry.add("") is False
        assert list(registry) == ["task:a"]

    def test_insertion_order_without_duplicates(self):
        registry = TrackedKeyRegistry("task:")
        for key in ("task:b", "task:a", "task:b"):
            registry.add(key)

        assert list(registry) == ["task:b", "task:a"]
        assert len(registry) == 2

    def test_discard_and_clear(self):
        registry = TrackedKeyRegistry("task:")
        registry.add("task:a")
        registry.add("task:b")

        assert registry.discard("task:a") is True
        assert registry.discard("task:a") is False
        assert "task:a" not in registry

        registry.clear()
        assert len(registry) == 0

    def test_matching(self):
        registry = TrackedKeyRegistry("task:")
        for key in ("task:com.foo", "task:com.bar", "task:COM.FOOBAR"):
            registry.add(key)

        assert registry.matching("com.foo") == ["task:com.foo", "task:COM.FOOBAR"]

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            TrackedKeyRegistry("")
