"""Slash command and listener extensions."""
