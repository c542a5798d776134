"""
Event sink: JSON-lines persistence and text presentation of decoded records.
"""

from thorstream.sink.persistence import JsonLineLog, account_update_entry, signature_entry  # noqa: F401
from thorstream.sink.sink import EventSink  # noqa: F401

__all__ = ["EventSink", "JsonLineLog", "account_update_entry", "signature_entry"]
