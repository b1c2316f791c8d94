"""Payment reconciliation CLI commands."""

from .reconcile_cli import app

__all__ = ["app"]
