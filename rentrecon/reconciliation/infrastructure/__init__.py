"""Infrastructure adapters (file importers)."""
