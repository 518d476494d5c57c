"""Discord bot for scheduling tabletop game days and campaigns."""

__version__ = "0.1.0"
