"""
Transaction filter for transaction subscriptions.

Drops vote and/or failed transactions when configured, and, when program ids
are given, keeps only transactions touching at least one of them.
"""

from __future__ import annotations

from collections.abc import Iterable

from thorstream.stream_listener.models import TransactionRecord
from thorstream.stream_listener.normalizer import b58

_INVOKE_MARKER = "invoke ["
_PROGRAM_PREFIX = "Program "


def extract_program_ids(record: TransactionRecord) -> set[str]:
    """
    Base58 ids a transaction may touch.

    Account keys, instruction program ids, loaded addresses of V0 messages and
    ids named in "Program <id> invoke [n]" log lines.
    """
    ids: set[str] = set()
    for key in record.account_keys:
        ids.add(b58(key))
    for ix in record.instructions:
        program = record.program_id(ix)
        if program is not None:
            ids.add(b58(program))
    if record.version == 1:
        for key in (*record.loaded_writable, *record.loaded_readonly):
            ids.add(b58(key))
    if record.meta is not None:
        for line in record.meta.log_messages:
            if _PROGRAM_PREFIX in line and _INVOKE_MARKER in line:
                tail = line.split(_PROGRAM_PREFIX, 1)[1]
                program_id = tail.split(" ", 1)[0]
                if program_id:
                    ids.add(program_id)
    return ids


class TransactionFilter:
    """Accepts everything by default."""

    def __init__(
        self,
        program_ids: Iterable[str] = (),
        *,
        include_vote: bool = True,
        include_failed: bool = True,
    ) -> None:
        self.program_ids = frozenset(p.strip() for p in program_ids if p and p.strip())
        self.include_vote = include_vote
        self.include_failed = include_failed

    @property
    def accepts_all(self) -> bool:
        return not self.program_ids and self.include_vote and self.include_failed

    def wants(self, record: TransactionRecord) -> bool:
        if record.is_vote and not self.include_vote:
            return False
        if not record.success and not self.include_failed:
            return False
        if not self.program_ids:
            return True
        return not self.program_ids.isdisjoint(extract_program_ids(record))
