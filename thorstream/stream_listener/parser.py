"""
Structural decoders — protobuf payloads to normalized records.

Three total functions, one per envelope variant. Every optional part may be
absent: missing nested messages become None or a flag on the record, never an
exception. Purely structural; no presentation (base58, truncation) here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from thorstream.stream_listener.models import (
    FLAG_ACCOUNT_KEYS_EMPTY,
    FLAG_BLOCKHASH_EMPTY,
    FLAG_HEADER_MISSING,
    FLAG_MESSAGE_MISSING,
    FLAG_TRANSACTION_MISSING,
    AccountUpdateRecord,
    AddressTableLookupRecord,
    HeaderRecord,
    InnerInstructionGroup,
    InstructionRecord,
    SlotStatusRecord,
    StatusMetaRecord,
    StreamOrigin,
    TransactionRecord,
    status_label,
)


def _has(msg: Any, field_name: str) -> bool:
    return msg is not None and msg.HasField(field_name)


def decode_slot_status(slot: Any) -> SlotStatusRecord:
    """SlotStatusEvent or SlotStatus -> SlotStatusRecord (empty block hash -> None)."""
    return SlotStatusRecord(
        slot=int(slot.slot),
        parent=int(slot.parent),
        status=int(slot.status),
        status_label=status_label(int(slot.status)),
        block_hash=bytes(slot.block_hash) or None,
        block_height=int(slot.block_height),
    )


def decode_account_update(info: Any) -> AccountUpdateRecord:
    """SubscribeUpdateAccountInfo -> AccountUpdateRecord; nested slot via decode_slot_status."""
    txn_signature = bytes(info.txn_signature) if info.HasField("txn_signature") else b""
    return AccountUpdateRecord(
        pubkey=bytes(info.pubkey),
        owner=bytes(info.owner),
        lamports=int(info.lamports),
        executable=bool(info.executable),
        rent_epoch=int(info.rent_epoch),
        write_version=int(info.write_version),
        data=bytes(info.data),
        txn_signature=txn_signature or None,
        slot=decode_slot_status(info.slot) if info.HasField("slot") else None,
    )


def _instruction(ix: Any, stack_height: int | None = None) -> InstructionRecord:
    return InstructionRecord(
        program_id_index=int(ix.program_id_index),
        accounts=tuple(int(a) for a in ix.accounts),
        data=bytes(ix.data),
        stack_height=stack_height,
    )


def _lookup(lookup: Any) -> AddressTableLookupRecord:
    return AddressTableLookupRecord(
        account_key=bytes(lookup.account_key),
        writable_indexes=tuple(bytes(lookup.writable_indexes)),
        readonly_indexes=tuple(bytes(lookup.readonly_indexes)),
    )


def _byte_tuple(values: Iterable[bytes]) -> tuple[bytes, ...]:
    return tuple(bytes(v) for v in values)


def decode_status_meta(meta: Any) -> StatusMetaRecord:
    """TransactionStatusMeta -> StatusMetaRecord. Token balances and rewards are not kept."""
    groups = []
    for group in meta.inner_instructions:
        inner = []
        for item in group.instructions:
            height = int(item.stack_height) if item.HasField("stack_height") else None
            if item.HasField("instruction"):
                inner.append(_instruction(item.instruction, stack_height=height))
        groups.append(InnerInstructionGroup(index=int(group.index), instructions=tuple(inner)))
    return StatusMetaRecord(
        is_error=bool(meta.is_status_err),
        error_info=str(meta.error_info),
        fee=int(meta.fee),
        pre_balances=tuple(int(b) for b in meta.pre_balances),
        post_balances=tuple(int(b) for b in meta.post_balances),
        log_messages=tuple(str(line) for line in meta.log_messages),
        inner_instructions=tuple(groups),
    )


def decode_transaction(wrapper: Any) -> TransactionRecord:
    """
    TransactionEventWrapper -> TransactionRecord.

    Missing TransactionEvent or SanitizedTransaction -> transaction-missing;
    missing Message -> message-missing; missing header -> header-missing;
    zero keys / zero-length blockhash -> account-keys-empty / blockhash-empty.
    Account key order is kept as received.
    """
    origin = StreamOrigin.from_wire(int(wrapper.stream_type))
    event = wrapper.transaction if _has(wrapper, "transaction") else None
    base: dict[str, Any] = {
        "origin": origin,
        "signature": bytes(event.signature) if event is not None else b"",
        "slot": int(event.slot) if event is not None else 0,
        "index": int(event.index) if event is not None else 0,
        "is_vote": bool(event.is_vote) if event is not None else False,
        "meta": (
            decode_status_meta(event.transaction_status_meta)
            if _has(event, "transaction_status_meta")
            else None
        ),
    }
    if not _has(event, "transaction"):
        return TransactionRecord(flags=(FLAG_TRANSACTION_MISSING,), **base)

    tx = event.transaction
    base["message_hash"] = bytes(tx.message_hash)
    base["signatures"] = _byte_tuple(tx.signatures)
    base["is_simple_vote"] = bool(tx.is_simple_vote_transaction)
    if not tx.HasField("message"):
        return TransactionRecord(flags=(FLAG_MESSAGE_MISSING,), **base)

    message = tx.message
    flags: list[str] = []
    header = None
    if message.HasField("header"):
        h = message.header
        header = HeaderRecord(
            num_required_signatures=int(h.num_required_signatures),
            num_readonly_signed_accounts=int(h.num_readonly_signed_accounts),
            num_readonly_unsigned_accounts=int(h.num_readonly_unsigned_accounts),
        )
    else:
        flags.append(FLAG_HEADER_MISSING)
    account_keys = _byte_tuple(message.account_keys)
    if not account_keys:
        flags.append(FLAG_ACCOUNT_KEYS_EMPTY)
    blockhash = bytes(message.recent_block_hash)
    if not blockhash:
        flags.append(FLAG_BLOCKHASH_EMPTY)

    loaded_writable: tuple[bytes, ...] = ()
    loaded_readonly: tuple[bytes, ...] = ()
    if message.HasField("loaded_addresses"):
        loaded_writable = _byte_tuple(message.loaded_addresses.writable)
        loaded_readonly = _byte_tuple(message.loaded_addresses.readonly)

    return TransactionRecord(
        flags=tuple(flags),
        version=int(message.version),
        header=header,
        account_keys=account_keys,
        recent_blockhash=blockhash or None,
        instructions=tuple(_instruction(ix) for ix in message.instructions),
        address_table_lookups=tuple(_lookup(lk) for lk in message.address_table_lookups),
        loaded_writable=loaded_writable,
        loaded_readonly=loaded_readonly,
        **base,
    )
