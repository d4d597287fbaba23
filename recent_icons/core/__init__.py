"""Icon cache, task key registry and package-driven invalidation."""
