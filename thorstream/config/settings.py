"""
Client settings.

Responsibilities:
- Load configuration from a JSON config file (same keys as the reference
  clients' config.json) and from environment variables / .env files.
- Apply defaults for optional settings and validate required ones.
- Expose typed settings for the transport, subscriber and sink.

Environment values win over the config file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from thorstream.config import env
from thorstream.core.exceptions import ConfigError

DEFAULT_MAX_RETRIES = 5
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_SIGNATURE_LOG_FILE = "signatures.log"
DEFAULT_ACCOUNT_LOG_FILE = "account_updates.log"


@dataclass
class ClientSettings:
    """Settings for one client session."""

    server_address: str = ""
    auth_token: str = ""
    use_tls: bool = False
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    max_retries: int = DEFAULT_MAX_RETRIES
    log_directory: str = ""
    signature_log_file: str = DEFAULT_SIGNATURE_LOG_FILE
    account_log_file: str = DEFAULT_ACCOUNT_LOG_FILE
    program_filters: list[str] = field(default_factory=list)
    include_vote: bool = True
    include_failed: bool = True
    # None: warn on every mismatch and never close the stream because of them
    max_consecutive_mismatches: int | None = None

    def log_dir(self) -> Path:
        """Absolute log directory; the working directory when unset."""
        if not self.log_directory:
            return Path.cwd()
        return Path(self.log_directory).expanduser().resolve()

    def signature_log_path(self) -> Path:
        path = Path(self.signature_log_file)
        return path if path.is_absolute() else self.log_dir() / path

    def account_log_path(self) -> Path:
        path = Path(self.account_log_file)
        return path if path.is_absolute() else self.log_dir() / path


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def settings_from_dict(data: dict[str, Any]) -> ClientSettings:
    """Build settings from config.json keys; zero/empty values fall back to defaults."""
    filters = data.get("program_filters") or []
    if not isinstance(filters, list):
        raise ConfigError("program_filters must be a list of program ids")
    mismatches = data.get("max_consecutive_mismatches")
    try:
        return ClientSettings(
            server_address=str(data.get("server_address") or "").strip(),
            auth_token=str(data.get("auth_token") or "").strip(),
            use_tls=_as_bool(data.get("use_tls"), False),
            timeout_sec=float(data.get("timeout_sec") or DEFAULT_TIMEOUT_SEC),
            max_retries=int(data.get("max_retries") or DEFAULT_MAX_RETRIES),
            log_directory=str(data.get("log_directory") or "").strip(),
            signature_log_file=str(data.get("signature_log_file") or DEFAULT_SIGNATURE_LOG_FILE),
            account_log_file=str(data.get("account_log_file") or DEFAULT_ACCOUNT_LOG_FILE),
            program_filters=[str(p).strip() for p in filters if str(p).strip()],
            include_vote=_as_bool(data.get("include_vote_transactions"), True),
            include_failed=_as_bool(data.get("include_failed_transactions"), True),
            max_consecutive_mismatches=int(mismatches) if mismatches is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value: {e}") from e


def _apply_env(settings: ClientSettings) -> ClientSettings:
    server = env.get_server_address()
    if server:
        settings.server_address = server
    token = env.get_auth_token()
    if token:
        settings.auth_token = token
    use_tls = env.get_use_tls()
    if use_tls is not None:
        settings.use_tls = use_tls
    log_dir = env.get_log_directory()
    if log_dir:
        settings.log_directory = log_dir
    mismatches = env.get_max_consecutive_mismatches()
    if mismatches is not None:
        settings.max_consecutive_mismatches = mismatches
    return settings


def load_settings(config_path: str | Path | None = None) -> ClientSettings:
    """
    Load settings from the JSON config file and environment.

    An explicitly given config_path must exist; the default path
    (THOR_CONFIG_PATH or ./config.json) is optional so env-only setups work.
    """
    env.load_stream_env()
    if config_path is not None:
        data = _read_config_file(Path(config_path))
    else:
        default_path = env.get_config_path()
        data = _read_config_file(default_path) if default_path.is_file() else {}
    return _apply_env(settings_from_dict(data))


def validate_settings(settings: ClientSettings) -> None:
    """Raise ConfigError when required settings are missing or out of range."""
    if not settings.server_address:
        raise ConfigError("server address is required")
    if not settings.auth_token:
        raise ConfigError("auth token is required")
    if settings.max_retries < 1:
        raise ConfigError("max_retries must be at least 1")
    if settings.timeout_sec <= 0:
        raise ConfigError("timeout_sec must be positive")
    if settings.max_consecutive_mismatches is not None and settings.max_consecutive_mismatches < 1:
        raise ConfigError("max_consecutive_mismatches must be positive when set")


def get_settings(config_path: str | Path | None = None) -> ClientSettings:
    """Return validated settings for the current session."""
    settings = load_settings(config_path)
    validate_settings(settings)
    return settings
