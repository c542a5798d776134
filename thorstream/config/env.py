"""
Environment variable loading for thorstream.

- THOR_SERVER_ADDRESS: gRPC endpoint host:port of the event publisher
- THOR_AUTH_TOKEN: bearer credential sent as `authorization` metadata
- THOR_USE_TLS: 1/true to open a TLS channel (default: plaintext)
- THOR_LOG_DIRECTORY: directory for signatures.log / account_updates.log
- THOR_CONFIG_PATH: JSON config file (default: config.json in the working dir)
- Loads .env from project root (and the working directory) when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is thorstream/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_CONFIG_FILE = "config.json"
_TRUTHY = ("1", "true", "yes", "on")


def load_stream_env() -> None:
    """Load .env from project root and cwd. Safe to call multiple times; never overrides set vars."""
    load_dotenv(_ENV_PATH)
    load_dotenv(Path.cwd() / ".env")


def _get(name: str) -> str | None:
    load_stream_env()
    raw = (os.getenv(name) or "").strip()
    return raw or None


def get_server_address() -> str | None:
    """Return THOR_SERVER_ADDRESS (legacy SERVER_ADDRESS accepted) or None."""
    return _get("THOR_SERVER_ADDRESS") or _get("SERVER_ADDRESS")


def get_auth_token() -> str | None:
    """Return THOR_AUTH_TOKEN (legacy AUTH_TOKEN accepted) or None."""
    return _get("THOR_AUTH_TOKEN") or _get("AUTH_TOKEN")


def get_use_tls() -> bool | None:
    """Return True/False when THOR_USE_TLS is set, None when unset."""
    raw = _get("THOR_USE_TLS")
    if raw is None:
        return None
    return raw.lower() in _TRUTHY


def get_log_directory() -> str | None:
    """Return THOR_LOG_DIRECTORY or None."""
    return _get("THOR_LOG_DIRECTORY")


def get_max_consecutive_mismatches() -> int | None:
    """Return THOR_MAX_CONSECUTIVE_MISMATCHES as int; None when unset or not a number."""
    raw = _get("THOR_MAX_CONSECUTIVE_MISMATCHES")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def get_config_path() -> Path:
    """Return THOR_CONFIG_PATH or config.json in the working directory."""
    raw = _get("THOR_CONFIG_PATH")
    return Path(raw) if raw else Path.cwd() / DEFAULT_CONFIG_FILE


def mask_token(token: str | None) -> str:
    """Mask a credential for startup logs."""
    if not token:
        return ""
    if len(token) <= 8:
        return "***"
    return token[:4] + "***" + token[-2:]
