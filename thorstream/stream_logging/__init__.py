"""
Structured logging for thorstream.

JSON logs with timestamp, event_type and per-event context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from thorstream.stream_logging.logger import bind_subscription, get_logger

__all__ = ["bind_subscription", "get_logger"]
