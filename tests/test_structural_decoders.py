"""
Tests for the structural decoders (parser.decode_transaction / decode_account_update /
decode_slot_status) and the fixed version and status tables.
"""

from __future__ import annotations

import pytest

from thorstream.proto import events_pb2
from thorstream.stream_listener.models import (
    FLAG_ACCOUNT_KEYS_EMPTY,
    FLAG_BLOCKHASH_EMPTY,
    FLAG_HEADER_MISSING,
    FLAG_MESSAGE_MISSING,
    FLAG_TRANSACTION_MISSING,
    StreamOrigin,
    status_label,
    version_label,
)
from thorstream.stream_listener.parser import (
    decode_account_update,
    decode_slot_status,
    decode_transaction,
)

KEY_A = b"\x0a" * 32
KEY_B = b"\x0b" * 32
KEY_C = b"\x0c" * 32
BLOCKHASH = b"\x05" * 32


def _message(**overrides) -> events_pb2.Message:
    fields = {
        "version": 0,
        "header": events_pb2.MessageHeader(
            num_required_signatures=1, num_readonly_signed_accounts=0, num_readonly_unsigned_accounts=1
        ),
        "recent_block_hash": BLOCKHASH,
        "account_keys": [KEY_A, KEY_B, KEY_C],
        "instructions": [events_pb2.CompiledInstruction(program_id_index=1, accounts=[0, 2], data=b"\x01\x02\x03")],
    }
    fields.update(overrides)
    return events_pb2.Message(**fields)


def _wrapper(message=None, *, meta=None, with_tx=True, stream_type=events_pb2.STREAM_TYPE_FILTERED):
    event = events_pb2.TransactionEvent(slot=100, signature=b"\x09" * 64, index=4, is_vote=False)
    if with_tx:
        event.transaction.CopyFrom(
            events_pb2.SanitizedTransaction(signatures=[b"\x09" * 64], message_hash=b"\x08" * 32)
        )
        if message is not None:
            event.transaction.message.CopyFrom(message)
    if meta is not None:
        event.transaction_status_meta.CopyFrom(meta)
    return events_pb2.TransactionEventWrapper(stream_type=stream_type, transaction=event)


@pytest.mark.parametrize("version,label", [(0, "Legacy"), (1, "V0"), (7, "Unknown(7)")])
def test_version_mapping(version, label):
    assert version_label(version) == label
    record = decode_transaction(_wrapper(_message(version=version)))
    assert record.version == version
    assert record.version_label == label


@pytest.mark.parametrize(
    "status,label",
    [(0, "Processed"), (1, "Confirmed"), (2, "Rooted"), (3, "FirstShredReceived"),
     (4, "Completed"), (5, "CreatedBank"), (6, "Dead"), (7, "UNKNOWN"), (99, "UNKNOWN"), (-1, "UNKNOWN")],
)
def test_status_mapping(status, label):
    assert status_label(status) == label


def test_account_key_order_preserved():
    """Instruction program index 1 over keys [A, B, C] resolves to B."""
    record = decode_transaction(_wrapper(_message()))
    assert record.account_keys == (KEY_A, KEY_B, KEY_C)
    ix = record.instructions[0]
    assert record.program_id(ix) == KEY_B
    assert [record.resolve_account(i) for i in ix.accounts] == [KEY_A, KEY_C]
    assert record.resolve_account(3) is None


def test_transaction_fields_decoded():
    record = decode_transaction(_wrapper(_message()))
    assert record.flags == ()
    assert record.signature == b"\x09" * 64
    assert (record.slot, record.index, record.is_vote) == (100, 4, False)
    assert record.origin is StreamOrigin.UNFILTERED
    assert record.header.num_required_signatures == 1
    assert record.recent_blockhash == BLOCKHASH
    assert record.instructions[0].data_len == 3
    assert record.signatures == (b"\x09" * 64,)
    assert record.meta is None
    assert record.success is True


def test_missing_transaction_flagged():
    record = decode_transaction(_wrapper(with_tx=False))
    assert record.flags == (FLAG_TRANSACTION_MISSING,)
    assert record.slot == 100
    assert record.account_keys == ()


def test_missing_event_flagged():
    record = decode_transaction(events_pb2.TransactionEventWrapper(stream_type=events_pb2.STREAM_TYPE_WALLET))
    assert record.has_flag(FLAG_TRANSACTION_MISSING)
    assert record.signature == b""
    assert record.origin is StreamOrigin.WALLET


def test_missing_message_flagged():
    record = decode_transaction(_wrapper(message=None))
    assert record.flags == (FLAG_MESSAGE_MISSING,)
    assert record.message_hash == b"\x08" * 32
    assert record.version is None
    assert record.version_label is None


def test_missing_header_and_empty_parts_flagged():
    message = events_pb2.Message(version=1)
    record = decode_transaction(_wrapper(message))
    assert FLAG_HEADER_MISSING in record.flags
    assert FLAG_ACCOUNT_KEYS_EMPTY in record.flags
    assert FLAG_BLOCKHASH_EMPTY in record.flags
    assert record.header is None
    assert record.recent_blockhash is None
    assert record.instructions == ()


def test_loaded_addresses_and_lookups():
    message = _message(
        version=1,
        loaded_addresses=events_pb2.LoadedAddresses(writable=[b"\x11" * 32], readonly=[b"\x12" * 32]),
        address_table_lookups=[
            events_pb2.MessageAddressTableLookup(account_key=b"\x13" * 32, writable_indexes=b"\x00\x02", readonly_indexes=b"\x01")
        ],
    )
    record = decode_transaction(_wrapper(message))
    assert record.loaded_writable == (b"\x11" * 32,)
    assert record.loaded_readonly == (b"\x12" * 32,)
    lookup = record.address_table_lookups[0]
    assert lookup.writable_indexes == (0, 2)
    assert lookup.readonly_indexes == (1,)


def test_status_meta_decoded():
    meta = events_pb2.TransactionStatusMeta(
        is_status_err=True,
        error_info="InstructionError",
        fee=5000,
        pre_balances=[100, 50, 7],
        post_balances=[90, 55, 7],
        log_messages=["Program 11111111111111111111111111111111 invoke [1]"],
        inner_instructions=[
            events_pb2.InnerInstructions(
                index=0,
                instructions=[
                    events_pb2.InnerInstruction(
                        instruction=events_pb2.CompiledInstruction(program_id_index=2, data=b"\x00"),
                        stack_height=2,
                    )
                ],
            )
        ],
    )
    record = decode_transaction(_wrapper(_message(), meta=meta))
    assert record.success is False
    assert record.meta.fee == 5000
    assert record.meta.error_info == "InstructionError"
    changes = record.meta.balance_changes()
    assert [(c.account_index, c.delta) for c in changes] == [(0, -10), (1, 5)]
    inner = record.meta.inner_instructions[0]
    assert inner.index == 0
    assert inner.instructions[0].stack_height == 2


def test_account_update_optional_fields_absent():
    info = events_pb2.SubscribeUpdateAccountInfo(
        pubkey=KEY_A, owner=KEY_B, lamports=10, executable=True, rent_epoch=3, data=b"abcd", write_version=5
    )
    record = decode_account_update(info)
    assert record.pubkey == KEY_A
    assert record.owner == KEY_B
    assert record.lamports == 10
    assert record.executable is True
    assert record.rent_epoch == 3
    assert record.write_version == 5
    assert record.data_len == 4
    assert record.txn_signature is None
    assert record.slot is None
    assert record.slot_number == 0


def test_account_update_zero_length_signature_is_none():
    info = events_pb2.SubscribeUpdateAccountInfo(pubkey=KEY_A, txn_signature=b"")
    assert info.HasField("txn_signature")
    assert decode_account_update(info).txn_signature is None


def test_account_update_with_signature_and_slot():
    info = events_pb2.SubscribeUpdateAccountInfo(
        pubkey=KEY_A,
        txn_signature=b"\x09" * 64,
        slot=events_pb2.SlotStatus(slot=12, parent=11, status=6, block_hash=b"", block_height=10),
    )
    record = decode_account_update(info)
    assert record.txn_signature == b"\x09" * 64
    assert record.slot.slot == 12
    assert record.slot.status_label == "Dead"
    assert record.slot.block_hash is None
    assert record.slot_number == 12


def test_slot_status_decoded():
    record = decode_slot_status(
        events_pb2.SlotStatusEvent(slot=8, parent=7, status=99, block_hash=BLOCKHASH, block_height=4)
    )
    assert (record.slot, record.parent, record.block_height) == (8, 7, 4)
    assert record.status == 99
    assert record.status_label == "UNKNOWN"
    assert record.block_hash == BLOCKHASH
