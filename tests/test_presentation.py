"""
Tests for text rendering and truncation of long lists (sink.presentation).
"""

from __future__ import annotations

import base58
import pytest

from thorstream.sink.presentation import (
    MAX_ACCOUNT_KEYS,
    MAX_INSTRUCTIONS,
    render,
    render_account_update,
    render_slot_status,
    render_transaction,
    truncate,
)
from thorstream.stream_listener.models import (
    FLAG_MESSAGE_MISSING,
    FLAG_TRANSACTION_MISSING,
    AccountUpdateRecord,
    HeaderRecord,
    InstructionRecord,
    SlotStatusRecord,
    StatusMetaRecord,
    TransactionRecord,
)
from thorstream.stream_listener.normalizer import lamports_to_sol

SIG_B58 = base58.b58encode(b"\x09" * 64).decode()


def _keys(n: int) -> tuple[bytes, ...]:
    return tuple(bytes([i + 1]) * 32 for i in range(n))


def _tx(n_keys: int = 3, n_instructions: int = 1, **kwargs) -> TransactionRecord:
    fields = dict(
        signature=b"\x09" * 64,
        slot=10,
        index=2,
        is_vote=False,
        version=1,
        header=HeaderRecord(1, 0, 1),
        account_keys=_keys(n_keys),
        recent_blockhash=b"\x05" * 32,
        instructions=tuple(
            InstructionRecord(program_id_index=0, accounts=(0, 1), data=b"\x00" * (i + 1)) for i in range(n_instructions)
        ),
    )
    fields.update(kwargs)
    return TransactionRecord(**fields)


def _key_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith("│  ├─ [")]


def test_truncate():
    assert truncate([1, 2, 3], 5) == ([1, 2, 3], 0)
    assert truncate([1, 2, 3, 4, 5, 6, 7], 5) == ([1, 2, 3, 4, 5], 2)


@pytest.mark.parametrize("n", [6, 8, 40])
def test_account_keys_truncated_to_first_five(n):
    text = render_transaction(_tx(n_keys=n))
    lines = _key_lines(text)
    assert len(lines) == MAX_ACCOUNT_KEYS
    assert lines[0] == f"│  ├─ [0]: {base58.b58encode(_keys(n)[0]).decode()}"
    assert f"... and {n - 5} more keys" in text


@pytest.mark.parametrize("n", [1, 4, 5])
def test_account_keys_not_truncated_up_to_five(n):
    text = render_transaction(_tx(n_keys=n))
    assert len(_key_lines(text)) == n
    assert "more keys" not in text


def test_instructions_truncated_to_first_three():
    text = render_transaction(_tx(n_instructions=5))
    assert text.count("├─ Instruction ") == MAX_INSTRUCTIONS
    assert "... and 2 more instructions" in text
    assert "Data Length: 1 bytes" in text


def test_three_instructions_not_truncated():
    text = render_transaction(_tx(n_instructions=3))
    assert "more instructions" not in text


def test_render_transaction_basic_fields():
    text = render_transaction(_tx())
    assert f"Signature: {SIG_B58}" in text
    assert "Version: 1 (V0)" in text
    assert "NumRequiredSignatures: 1" in text


def test_render_missing_parts():
    assert "Transaction is nil!" in render_transaction(_tx(flags=(FLAG_TRANSACTION_MISSING,)))
    assert "Message is nil!" in render_transaction(_tx(flags=(FLAG_MESSAGE_MISSING,)))
    text = render_transaction(_tx(n_keys=0, header=None, recent_blockhash=None))
    assert "Header is nil!" in text
    assert "No account keys!" in text
    assert "Blockhash is empty!" in text


def test_render_detailed_includes_status_meta():
    meta = StatusMetaRecord(
        is_error=True,
        error_info="custom program error",
        fee=5000,
        pre_balances=(2_000_000_000,),
        post_balances=(1_000_000_000,),
        log_messages=("Program log: hi",),
    )
    record = _tx(meta=meta)
    plain = render_transaction(record)
    detailed = render_transaction(record, detailed=True)
    assert "Status Metadata" not in plain
    assert "Status: Failed (custom program error)" in detailed
    assert "Fee: 0.000005000 SOL" in detailed
    assert "Account 0: 2.000000000 SOL → 1.000000000 SOL (Δ 1.000000000 SOL)" in detailed
    assert "[0] Program log: hi" in detailed


def test_render_slot_status_empty_hash():
    text = render_slot_status(SlotStatusRecord(3, 2, 6, "Dead", None, 1))
    assert "Status: Dead" in text
    assert "Block Hash: (empty)" in text


def test_render_account_update():
    record = AccountUpdateRecord(
        pubkey=b"\x01" * 32, owner=b"\x02" * 32, lamports=1_500_000_000, executable=False,
        rent_epoch=0, write_version=9, data=b"xyz",
    )
    text = render_account_update(record)
    assert "Lamports: 1500000000 (1.500000000 SOL)" in text
    assert "Data Length: 3 bytes" in text
    assert "Transaction Signature: none" in text
    assert "Slot: N/A" in text


def test_render_rejects_unknown_record():
    with pytest.raises(TypeError):
        render(object())


@pytest.mark.parametrize(
    "lamports,sol",
    [
        (0, "0.000000000"),
        (5000, "0.000005000"),
        (1_500_000_000, "1.500000000"),
        (18446744073709551615, "18446744073.709551615"),
        (-2_000_000_001, "-2.000000001"),
    ],
)
def test_lamports_to_sol_is_exact(lamports, sol):
    assert lamports_to_sol(lamports) == sol
