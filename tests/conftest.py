"""
Pytest fixtures for thorstream tests. Isolates environment and working directory
so settings never pick up a developer's .env, config.json or THOR_* variables.
"""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "THOR_SERVER_ADDRESS",
    "SERVER_ADDRESS",
    "THOR_AUTH_TOKEN",
    "AUTH_TOKEN",
    "THOR_USE_TLS",
    "THOR_LOG_DIRECTORY",
    "THOR_CONFIG_PATH",
    "THOR_MAX_CONSECUTIVE_MISMATCHES",
)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Unset THOR_* variables and run the test from an empty temp directory."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def thor_env(clean_env, monkeypatch):
    """Minimal valid environment: server address and token."""
    monkeypatch.setenv("THOR_SERVER_ADDRESS", "localhost:50051")
    monkeypatch.setenv("THOR_AUTH_TOKEN", "test-token-123456")
    return clean_env
