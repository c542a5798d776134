"""
Human-readable rendering of decoded records.

Long lists are truncated here, not in the decoders: account keys show the
first 5 and instructions the first 3, followed by a remainder count.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from thorstream.stream_listener.models import (
    FLAG_MESSAGE_MISSING,
    FLAG_TRANSACTION_MISSING,
    AccountUpdateRecord,
    InstructionRecord,
    SlotStatusRecord,
    StatusMetaRecord,
    TransactionRecord,
)
from thorstream.stream_listener.normalizer import b58, lamports_to_sol

MAX_ACCOUNT_KEYS = 5
MAX_INSTRUCTIONS = 3


def truncate(items: Sequence[Any], limit: int) -> tuple[Sequence[Any], int]:
    """First `limit` items and how many were left out."""
    if len(items) <= limit:
        return items, 0
    return items[:limit], len(items) - limit


def _instruction_lines(ix: InstructionRecord, indent: str) -> list[str]:
    lines = [
        f"{indent}├─ Program ID Index: {ix.program_id_index}",
        f"{indent}├─ Account Indexes: {list(ix.accounts)}",
    ]
    if ix.stack_height is not None:
        lines.append(f"{indent}├─ Stack Height: {ix.stack_height}")
    lines.append(f"{indent}└─ Data Length: {ix.data_len} bytes")
    return lines


def render_account_keys(record: TransactionRecord) -> list[str]:
    lines = [f"├─ Account Keys ({len(record.account_keys)}):"]
    if not record.account_keys:
        lines.append("│  No account keys!")
        return lines
    shown, rest = truncate(record.account_keys, MAX_ACCOUNT_KEYS)
    for i, key in enumerate(shown):
        lines.append(f"│  ├─ [{i}]: {b58(key)}")
    if rest:
        lines.append(f"│  └─ ... and {rest} more keys")
    return lines


def render_instructions(record: TransactionRecord) -> list[str]:
    lines = [f"├─ Instructions ({len(record.instructions)}):"]
    if not record.instructions:
        lines.append("│  No instructions!")
        return lines
    shown, rest = truncate(record.instructions, MAX_INSTRUCTIONS)
    for i, ix in enumerate(shown):
        lines.append(f"│  ├─ Instruction {i}:")
        lines.extend(_instruction_lines(ix, "│  │  "))
    if rest:
        lines.append(f"│  └─ ... and {rest} more instructions")
    return lines


def render_status_meta(meta: StatusMetaRecord) -> list[str]:
    status = f"Failed ({meta.error_info})" if meta.is_error else "Success"
    lines = [
        "├─ Status Metadata:",
        f"│  ├─ Status: {status}",
        f"│  ├─ Fee: {lamports_to_sol(meta.fee)} SOL",
    ]
    changes = meta.balance_changes()
    if changes:
        lines.append("│  ├─ Balance Changes:")
        for c in changes:
            lines.append(
                f"│  │  ├─ Account {c.account_index}: {lamports_to_sol(c.pre)} SOL → "
                f"{lamports_to_sol(c.post)} SOL (Δ {lamports_to_sol(abs(c.delta))} SOL)"
            )
    if meta.inner_instructions:
        lines.append("│  ├─ Inner Instructions:")
        for group in meta.inner_instructions:
            lines.append(f"│  │  ├─ Index: {group.index}")
            for i, ix in enumerate(group.instructions):
                lines.append(f"│  │  │  ├─ Inner Instruction {i}:")
                lines.extend(_instruction_lines(ix, "│  │  │  │  "))
    if meta.log_messages:
        lines.append("│  ├─ Log Messages:")
        for i, message in enumerate(meta.log_messages):
            lines.append(f"│  │  ├─ [{i}] {message}")
    return lines


def render_transaction(record: TransactionRecord, *, detailed: bool = False) -> str:
    lines = [
        "Transaction Debug Information:",
        f"├─ Signature: {b58(record.signature)}",
        f"├─ Slot: {record.slot}",
        f"├─ Index: {record.index}",
        f"├─ Is Vote: {record.is_vote}",
        f"├─ Success: {record.success}",
    ]
    if record.has_flag(FLAG_TRANSACTION_MISSING):
        lines.append("├─ Transaction is nil!")
    elif record.has_flag(FLAG_MESSAGE_MISSING):
        lines.append("├─ Message is nil!")
    else:
        lines.append(f"├─ Version: {record.version} ({record.version_label})")
        lines.append("├─ Header:")
        if record.header is None:
            lines.append("│  Header is nil!")
        else:
            h = record.header
            lines.append(f"│  ├─ NumRequiredSignatures: {h.num_required_signatures}")
            lines.append(f"│  ├─ NumReadonlySignedAccounts: {h.num_readonly_signed_accounts}")
            lines.append(f"│  └─ NumReadonlyUnsignedAccounts: {h.num_readonly_unsigned_accounts}")
        lines.extend(render_account_keys(record))
        lines.append("├─ Recent Blockhash:")
        if record.recent_blockhash is None:
            lines.append("│  Blockhash is empty!")
        else:
            lines.append(f"│  └─ {b58(record.recent_blockhash)}")
        lines.extend(render_instructions(record))
        if detailed and (record.loaded_writable or record.loaded_readonly):
            lines.append(
                f"├─ Loaded Addresses: {len(record.loaded_writable)} writable, "
                f"{len(record.loaded_readonly)} readonly"
            )
    if detailed and record.meta is not None:
        lines.extend(render_status_meta(record.meta))
    lines.append("└─ End Transaction")
    return "\n".join(lines)


def render_slot_status(record: SlotStatusRecord) -> str:
    lines = [
        "Slot Status:",
        f"├─ Slot: {record.slot}",
        f"├─ Parent: {record.parent}",
        f"├─ Status: {record.status_label}",
        f"├─ Block Hash: {b58(record.block_hash) if record.block_hash is not None else '(empty)'}",
        f"└─ Block Height: {record.block_height}",
    ]
    return "\n".join(lines)


def render_account_update(record: AccountUpdateRecord) -> str:
    lines = [
        "Account Update:",
        f"├─ Address: {b58(record.pubkey)}",
        f"├─ Owner: {b58(record.owner)}",
        f"├─ Lamports: {record.lamports} ({lamports_to_sol(record.lamports)} SOL)",
        f"├─ Executable: {record.executable}",
        f"├─ Rent Epoch: {record.rent_epoch}",
        f"├─ Write Version: {record.write_version}",
        f"├─ Data Length: {record.data_len} bytes",
        f"├─ Transaction Signature: {b58(record.txn_signature) if record.txn_signature else 'none'}",
    ]
    if record.slot is None:
        lines.append("└─ Slot: N/A")
    else:
        s = record.slot
        lines.append(f"└─ Slot: {s.slot} (parent {s.parent}, {s.status_label}, height {s.block_height})")
    return "\n".join(lines)


def render(record: Any, *, detailed: bool = False) -> str:
    if isinstance(record, TransactionRecord):
        return render_transaction(record, detailed=detailed)
    if isinstance(record, AccountUpdateRecord):
        return render_account_update(record)
    if isinstance(record, SlotStatusRecord):
        return render_slot_status(record)
    raise TypeError(f"unsupported record type: {type(record).__name__}")
