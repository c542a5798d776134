"""
Record normalizer — decoded records to JSON-ready dicts.

Responsibilities:
- Encode raw byte identifiers (signatures, pubkeys, hashes) as base58 text.
- Convert slot, account and transaction records into plain dicts for the
  JSON output mode and the JSON-lines logs.
"""

from __future__ import annotations

from typing import Any

import base58

from thorstream.stream_listener.models import (
    AccountUpdateRecord,
    InstructionRecord,
    SlotStatusRecord,
    StatusMetaRecord,
    TransactionRecord,
)

LAMPORTS_PER_SOL = 1_000_000_000


def b58(value: bytes | None) -> str | None:
    """Base58 text for raw bytes; None stays None."""
    if value is None:
        return None
    return base58.b58encode(bytes(value)).decode("ascii")


def lamports_to_sol(lamports: int) -> str:
    """Lamports as a SOL amount string with 9 decimals, exact for any u64/i64 value."""
    sign = "-" if lamports < 0 else ""
    whole, frac = divmod(abs(int(lamports)), LAMPORTS_PER_SOL)
    return f"{sign}{whole}.{frac:09d}"


def slot_status_to_dict(record: SlotStatusRecord) -> dict[str, Any]:
    return {
        "slot": record.slot,
        "parent": record.parent,
        "status": record.status_label,
        "block_hash": b58(record.block_hash),
        "block_height": record.block_height,
    }


def account_update_to_dict(record: AccountUpdateRecord) -> dict[str, Any]:
    return {
        "pubkey": b58(record.pubkey),
        "owner": b58(record.owner),
        "lamports": record.lamports,
        "executable": record.executable,
        "rent_epoch": record.rent_epoch,
        "write_version": record.write_version,
        "data_len": record.data_len,
        "txn_signature": b58(record.txn_signature),
        "slot": slot_status_to_dict(record.slot) if record.slot is not None else None,
    }


def _instruction_to_dict(record: TransactionRecord, ix: InstructionRecord) -> dict[str, Any]:
    out: dict[str, Any] = {
        "program_id_index": ix.program_id_index,
        "program_id": b58(record.program_id(ix)),
        "accounts": list(ix.accounts),
        "data_len": ix.data_len,
    }
    if ix.stack_height is not None:
        out["stack_height"] = ix.stack_height
    return out


def _meta_to_dict(record: TransactionRecord, meta: StatusMetaRecord) -> dict[str, Any]:
    return {
        "is_error": meta.is_error,
        "error_info": meta.error_info or None,
        "fee": meta.fee,
        "balance_changes": [
            {"account_index": c.account_index, "pre": c.pre, "post": c.post, "delta": c.delta}
            for c in meta.balance_changes()
        ],
        "inner_instructions": [
            {
                "index": group.index,
                "instructions": [_instruction_to_dict(record, ix) for ix in group.instructions],
            }
            for group in meta.inner_instructions
        ],
        "log_messages": list(meta.log_messages),
    }


def transaction_to_dict(record: TransactionRecord) -> dict[str, Any]:
    return {
        "signature": b58(record.signature),
        "slot": record.slot,
        "index": record.index,
        "is_vote": record.is_vote,
        "origin": record.origin.name,
        "success": record.success,
        "flags": list(record.flags),
        "version": record.version_label,
        "header": (
            {
                "num_required_signatures": record.header.num_required_signatures,
                "num_readonly_signed_accounts": record.header.num_readonly_signed_accounts,
                "num_readonly_unsigned_accounts": record.header.num_readonly_unsigned_accounts,
            }
            if record.header is not None
            else None
        ),
        "account_keys": [b58(k) for k in record.account_keys],
        "recent_blockhash": b58(record.recent_blockhash),
        "instructions": [_instruction_to_dict(record, ix) for ix in record.instructions],
        "loaded_writable": [b58(k) for k in record.loaded_writable],
        "loaded_readonly": [b58(k) for k in record.loaded_readonly],
        "meta": _meta_to_dict(record, record.meta) if record.meta is not None else None,
    }


def record_to_dict(record: Any) -> dict[str, Any]:
    """Dispatch on record type."""
    if isinstance(record, TransactionRecord):
        return {"type": "transaction", **transaction_to_dict(record)}
    if isinstance(record, AccountUpdateRecord):
        return {"type": "account_update", **account_update_to_dict(record)}
    if isinstance(record, SlotStatusRecord):
        return {"type": "slot_status", **slot_status_to_dict(record)}
    raise TypeError(f"unsupported record type: {type(record).__name__}")
