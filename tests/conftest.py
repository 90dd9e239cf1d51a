"""Test fixtures and utilities."""

from typing import Sequence

import pytest

from solsign import codec
from solsign.constants import EMPTY_SIGNATURE
from solsign.crypto.keys import Keypair, PublicKey
from solsign.types.transaction import (
    CompiledInstruction,
    Message,
    MessageHeader,
    Transaction,
)

SYSTEM_PROGRAM = PublicKey(bytes(32))
BLOCKHASH = bytes(range(32))


def build_transaction(
    signers: Sequence[PublicKey],
    readonly_unsigned: Sequence[PublicKey] = (SYSTEM_PROGRAM,),
    data: bytes = b"\x02\x00\x00\x00\x40\x42\x0f\x00\x00\x00\x00\x00",
) -> Transaction:
    """Unsigned transaction requiring ``signers``, with one instruction."""
    keys = tuple(signers) + tuple(readonly_unsigned)
    program_index = len(keys) - 1
    message = Message(
        header=MessageHeader(len(signers), 0, len(readonly_unsigned)),
        account_keys=keys,
        recent_blockhash=BLOCKHASH,
        instructions=(
            CompiledInstruction(program_index, tuple(range(len(signers))), data),
        ),
    )
    return Transaction(signatures=[EMPTY_SIGNATURE] * len(signers), message=message)


@pytest.fixture
def keypair_a() -> Keypair:
    return Keypair.from_seed(b"\x01" * 32)


@pytest.fixture
def keypair_b() -> Keypair:
    return Keypair.from_seed(b"\x02" * 32)


@pytest.fixture
def keypair_c() -> Keypair:
    return Keypair.from_seed(b"\x03" * 32)


@pytest.fixture
def tx_ab(keypair_a: Keypair, keypair_b: Keypair) -> Transaction:
    """Transaction requiring A (fee payer) and B."""
    return build_transaction([keypair_a.public_key, keypair_b.public_key])


@pytest.fixture
def tx_a(keypair_a: Keypair) -> Transaction:
    """Transaction requiring only A."""
    return build_transaction([keypair_a.public_key])


@pytest.fixture
def text_ab(tx_ab: Transaction) -> str:
    return codec.encode(tx_ab)


@pytest.fixture
def text_a(tx_a: Transaction) -> str:
    return codec.encode(tx_a)
