"""
Append-only JSON-lines logs for decoded events.

Two independent logs: the signature log (one entry per transaction) and the
account-update log (one entry per account update). Each line is one JSON
object; timestamps are UTC with millisecond precision fixed at .000Z.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from thorstream.core.exceptions import PersistenceError
from thorstream.stream_listener.models import AccountUpdateRecord, TransactionRecord
from thorstream.stream_listener.normalizer import b58
from thorstream.stream_logging import get_logger

logger = get_logger(__name__)


def log_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def signature_entry(record: TransactionRecord, now: datetime | None = None) -> dict[str, Any]:
    """{timestamp, signature, slot, success}; success unless the status meta reports an error."""
    return {
        "timestamp": log_timestamp(now),
        "signature": b58(record.signature),
        "slot": record.slot,
        "success": record.success,
    }


def account_update_entry(record: AccountUpdateRecord, now: datetime | None = None) -> dict[str, Any]:
    """{timestamp, pubkey, owner, lamports, slot, executable}; slot 0 without slot info."""
    return {
        "timestamp": log_timestamp(now),
        "pubkey": b58(record.pubkey),
        "owner": b58(record.owner),
        "lamports": record.lamports,
        "slot": record.slot_number,
        "executable": record.executable,
    }


class JsonLineLog:
    """
    Append-only writer; the file is opened on first append and kept open.

    Every append is flushed so a crash loses at most the line being written.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._fh: IO[str] | None = None

    def _open(self) -> IO[str]:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("a", encoding="utf-8")
        return self._fh

    def append(self, entry: dict[str, Any]) -> None:
        """Write one JSON line. Raises PersistenceError on I/O or serialization failure."""
        try:
            line = json.dumps(entry, separators=(",", ":"))
            fh = self._open()
            fh.write(line + "\n")
            fh.flush()
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"failed to append to {self.path}: {e}", path=str(self.path)) from e

    def close(self) -> None:
        fh, self._fh = self._fh, None
        if fh is not None:
            try:
                fh.close()
            except OSError as e:
                logger.warning("persistence_close_failed", path=str(self.path), error=str(e))

    def __enter__(self) -> "JsonLineLog":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
