"""
Event sink — persist and present each decoded record.

Responsibilities:
- Append a signature-log entry per transaction and an account-log entry per
  account update (slot statuses are only presented).
- Render each record to the output stream as text, or as one JSON object
  per line in json mode.
- Report append failures as warnings and keep going.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import IO, Any

from thorstream.core.exceptions import PersistenceError
from thorstream.sink.persistence import JsonLineLog, account_update_entry, signature_entry
from thorstream.sink.presentation import render
from thorstream.stream_listener.models import AccountUpdateRecord, TransactionRecord
from thorstream.stream_listener.normalizer import record_to_dict
from thorstream.stream_logging import get_logger

logger = get_logger(__name__)

OUTPUT_FORMATS = ("text", "json")


class EventSink:
    """Persists and presents records in the order handle() is called."""

    def __init__(
        self,
        signature_log: JsonLineLog | None = None,
        account_log: JsonLineLog | None = None,
        *,
        out: IO[str] | None = None,
        output_format: str = "text",
        detailed: bool = False,
    ) -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}")
        self._signature_log = signature_log
        self._account_log = account_log
        self._out = out
        self._format = output_format
        self._detailed = detailed
        self.persistence_failures = 0

    @classmethod
    def from_paths(
        cls,
        signature_path: str | Path,
        account_path: str | Path,
        **kwargs: Any,
    ) -> "EventSink":
        return cls(JsonLineLog(signature_path), JsonLineLog(account_path), **kwargs)

    def _append(self, log: JsonLineLog | None, entry: dict[str, Any]) -> None:
        if log is None:
            return
        try:
            log.append(entry)
        except PersistenceError as e:
            self.persistence_failures += 1
            logger.warning("persistence_append_failed", path=e.path, error=str(e))

    def _present(self, record: Any) -> None:
        out = self._out if self._out is not None else sys.stdout
        if self._format == "json":
            out.write(json.dumps(record_to_dict(record)) + "\n")
        else:
            out.write(render(record, detailed=self._detailed) + "\n\n")
        out.flush()

    def handle(self, record: Any) -> None:
        if isinstance(record, TransactionRecord):
            self._append(self._signature_log, signature_entry(record))
        elif isinstance(record, AccountUpdateRecord):
            self._append(self._account_log, account_update_entry(record))
        self._present(record)

    def close(self) -> None:
        for log in (self._signature_log, self._account_log):
            if log is not None:
                log.close()
