"""
Configuration management for the stream client.

Loads and validates settings from environment variables and an optional
JSON config file. Exposes a single source of truth for session configuration.
"""

from thorstream.config.settings import ClientSettings, get_settings, load_settings  # noqa: F401

__all__ = ["ClientSettings", "get_settings", "load_settings"]
