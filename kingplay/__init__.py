"""Offline-capable data client for The King Play Elite booking site."""

__version__ = "0.1.0"
