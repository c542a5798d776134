"""
Data models for decoded stream events.

Responsibilities:
- Name the envelope variants (VariantKind) and transaction stream origins (StreamOrigin).
- Carry one decoded frame as an Envelope and the router's verdict as
  RoutedEvent or MismatchNotice.
- Define immutable normalized records for slot statuses, account updates and
  transactions. Raw identifiers stay bytes; base58 is applied at log/render time.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from thorstream.core.exceptions import VariantMismatch

# Transaction record flags for absent or empty parts of the payload
FLAG_TRANSACTION_MISSING = "transaction-missing"
FLAG_MESSAGE_MISSING = "message-missing"
FLAG_HEADER_MISSING = "header-missing"
FLAG_ACCOUNT_KEYS_EMPTY = "account-keys-empty"
FLAG_BLOCKHASH_EMPTY = "blockhash-empty"

SLOT_STATUS_LABELS = {
    0: "Processed",
    1: "Confirmed",
    2: "Rooted",
    3: "FirstShredReceived",
    4: "Completed",
    5: "CreatedBank",
    6: "Dead",
}
UNKNOWN_STATUS = "UNKNOWN"


def version_label(version: int) -> str:
    """Message version discriminator -> display label (0 Legacy, 1 V0, else Unknown(n))."""
    if version == 0:
        return "Legacy"
    if version == 1:
        return "V0"
    return f"Unknown({version})"


def status_label(status: int) -> str:
    """Slot status code -> label; codes outside 0..6 are UNKNOWN."""
    return SLOT_STATUS_LABELS.get(status, UNKNOWN_STATUS)


class VariantKind(str, enum.Enum):
    """Populated alternative of the MessageWrapper oneof."""

    NONE = "none"
    ACCOUNT_UPDATE = "account_update"
    SLOT_STATUS = "slot_status"
    TRANSACTION = "transaction"


class StreamOrigin(enum.IntEnum):
    """Origin tag of a transaction wrapper; values mirror the wire StreamType."""

    UNSPECIFIED = 0
    UNFILTERED = 1
    WALLET = 2
    ACCOUNT = 3

    @classmethod
    def from_wire(cls, value: int) -> "StreamOrigin":
        try:
            return cls(value)
        except ValueError:
            return cls.UNSPECIFIED


@dataclass(frozen=True)
class Envelope:
    """One decoded frame: the populated variant and its protobuf payload (None when unset)."""

    kind: VariantKind
    payload: Any = None

    @property
    def is_set(self) -> bool:
        return self.kind is not VariantKind.NONE


@dataclass(frozen=True)
class RoutedEvent:
    """Envelope accepted by the router for the subscription's expected kind."""

    kind: VariantKind
    payload: Any
    origin: StreamOrigin | None = None  # transactions only


@dataclass(frozen=True)
class MismatchNotice:
    """
    Envelope rejected by the router. Not an error: the caller warns and skips.

    reason is "kind" when the variant differs (or is unset) and "origin" when a
    transaction arrived from a stream origin the subscription does not accept.
    """

    expected: VariantKind
    actual: VariantKind
    origin: StreamOrigin | None = None
    reason: str = "kind"

    def as_error(self) -> VariantMismatch:
        return VariantMismatch(self.expected.value, self.actual.value, reason=self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "expected": self.expected.value,
            "actual": self.actual.value,
            "origin": self.origin.name if self.origin is not None else None,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SlotStatusRecord:
    slot: int
    parent: int
    status: int
    status_label: str
    block_hash: bytes | None  # None when empty (not yet confirmed)
    block_height: int


@dataclass(frozen=True)
class AccountUpdateRecord:
    """Normalized account snapshot. Arrival order is kept; write_version is not used to drop stale updates."""

    pubkey: bytes
    owner: bytes
    lamports: int
    executable: bool
    rent_epoch: int
    write_version: int
    data: bytes
    txn_signature: bytes | None = None
    slot: SlotStatusRecord | None = None

    @property
    def data_len(self) -> int:
        return len(self.data)

    @property
    def slot_number(self) -> int:
        """Slot of the nested slot info, 0 when the update carries none."""
        return self.slot.slot if self.slot is not None else 0


@dataclass(frozen=True)
class HeaderRecord:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int


@dataclass(frozen=True)
class InstructionRecord:
    """Compiled instruction: positions index into the message's account keys."""

    program_id_index: int
    accounts: tuple[int, ...]
    data: bytes
    stack_height: int | None = None  # inner instructions only

    @property
    def data_len(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class InnerInstructionGroup:
    """Inner instructions emitted while executing top-level instruction `index`."""

    index: int
    instructions: tuple[InstructionRecord, ...]


@dataclass(frozen=True)
class AddressTableLookupRecord:
    account_key: bytes
    writable_indexes: tuple[int, ...]
    readonly_indexes: tuple[int, ...]


@dataclass(frozen=True)
class BalanceChange:
    account_index: int
    pre: int
    post: int

    @property
    def delta(self) -> int:
        return self.post - self.pre


@dataclass(frozen=True)
class StatusMetaRecord:
    """Execution result of a transaction (TransactionStatusMeta)."""

    is_error: bool
    error_info: str
    fee: int
    pre_balances: tuple[int, ...] = ()
    post_balances: tuple[int, ...] = ()
    log_messages: tuple[str, ...] = ()
    inner_instructions: tuple[InnerInstructionGroup, ...] = ()

    def balance_changes(self) -> list[BalanceChange]:
        """Accounts whose lamport balance changed, in account index order."""
        changes: list[BalanceChange] = []
        for i, (pre, post) in enumerate(zip(self.pre_balances, self.post_balances)):
            if pre != post:
                changes.append(BalanceChange(account_index=i, pre=pre, post=post))
        return changes


@dataclass(frozen=True)
class TransactionRecord:
    """
    Normalized transaction event.

    account_keys keeps wire order: instruction program_id_index and account
    indexes are positions into it. flags lists absent/empty parts of the
    payload (FLAG_* constants); the decoder never fails on missing parts.
    """

    signature: bytes
    slot: int
    index: int
    is_vote: bool
    origin: StreamOrigin = StreamOrigin.UNSPECIFIED
    flags: tuple[str, ...] = ()
    version: int | None = None
    header: HeaderRecord | None = None
    account_keys: tuple[bytes, ...] = ()
    recent_blockhash: bytes | None = None
    instructions: tuple[InstructionRecord, ...] = ()
    address_table_lookups: tuple[AddressTableLookupRecord, ...] = ()
    loaded_writable: tuple[bytes, ...] = ()
    loaded_readonly: tuple[bytes, ...] = ()
    message_hash: bytes = b""
    signatures: tuple[bytes, ...] = ()
    is_simple_vote: bool = False
    meta: StatusMetaRecord | None = None

    @property
    def version_label(self) -> str | None:
        return version_label(self.version) if self.version is not None else None

    @property
    def success(self) -> bool:
        """False only when a status meta is present and reports an error."""
        return not (self.meta is not None and self.meta.is_error)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def resolve_account(self, position: int) -> bytes | None:
        """Account key at `position` in wire order; None when out of range."""
        if 0 <= position < len(self.account_keys):
            return self.account_keys[position]
        return None

    def program_id(self, instruction: InstructionRecord) -> bytes | None:
        return self.resolve_account(instruction.program_id_index)
