"""Schema migrations for the tabletop bot database."""

from .runner import MigrationRunner

__all__ = ["MigrationRunner"]
