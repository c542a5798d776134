"""
Structured logging for the stream client.

Every record carries timestamp, level, logger and event_type plus keyword
context. Logs go to stderr; stdout is reserved for rendered events so
`thorstream --output json | jq` only sees events.

Events emitted by the client, by module:
- stream_listener.listener: subscription_started, frame_decode_failed,
  variant_mismatch, sink_handle_failed, subscription_mismatch_limit,
  stream_ended, stream_transport_error, sink_output_closed,
  subscription_cancelled, subscription_stopped (with the run's counters).
- stream_listener.transport: transport_connect_failed, transport_connected,
  transport_stream_cancelled, transport_closed.
- sink: persistence_append_failed, persistence_close_failed.
- main: main_config_error, main_invalid_subscription, main_session_starting,
  main_shutdown_signal, main_interrupted.

Raw identifiers (signatures, pubkeys, hashes) may be passed as bytes; they
are written as base58, the same text the presentation layer prints.

Imports stdlib logging, structlog and base58 only; nothing from thorstream.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import base58
import structlog

ROOT_LOGGER = "thorstream"


def _env_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def _env_format() -> str:
    return os.getenv("LOG_FORMAT", "json").strip().lower()


def _stamp_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """ISO 8601 UTC timestamp; structlog's 'event' becomes event_type."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _b58(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base58.b58encode(bytes(value)).decode("ascii")
    return value


def _encode_bytes(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render bytes (and lists/tuples of bytes) in the context as base58."""
    for key, value in event_dict.items():
        if isinstance(value, (list, tuple)):
            event_dict[key] = [_b58(v) for v in value]
        else:
            event_dict[key] = _b58(value)
    return event_dict


def configure_structlog(
    level: int | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog for the client.

    Defaults come from LOG_LEVEL (INFO) and LOG_FORMAT (json; anything else
    selects the console renderer) and stream to stderr.
    """
    stream = stream if stream is not None else sys.stderr
    fmt = fmt if fmt is not None else _env_format()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _stamp_event,
        _encode_bytes,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level if level is not None else _env_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Structured logger for a module; the name is bound as `logger`.

        logger = get_logger(__name__)
        logger.warning("variant_mismatch", expected="slot_status", actual="transaction")
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_subscription(mode: str) -> structlog.BoundLogger:
    """Logger for one subscription run; every event carries subscription=<mode>."""
    return get_logger(ROOT_LOGGER).bind(subscription=mode)
