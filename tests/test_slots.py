import pytest

from solsign import codec
from solsign.constants import EMPTY_SIGNATURE
from solsign.exceptions import SlotNotFoundError, ValidationError
from solsign.slots import (
    apply_signature,
    invalid_signers,
    is_complete,
    missing_signers,
    present_signers,
    required_signers,
    slot_index,
)


def test_required_signers_order(tx_ab, keypair_a, keypair_b):
    assert required_signers(tx_ab) == [keypair_a.public_key, keypair_b.public_key]
    assert tx_ab.message.fee_payer == keypair_a.public_key


def test_missing_and_present(tx_ab, keypair_a, keypair_b):
    assert missing_signers(tx_ab) == [keypair_a.public_key, keypair_b.public_key]
    assert present_signers(tx_ab) == []
    
    signature = keypair_b.sign(codec.message_bytes(tx_ab))
    assert apply_signature(tx_ab, keypair_b.public_key, signature) is True
    
    assert missing_signers(tx_ab) == [keypair_a.public_key]
    assert present_signers(tx_ab) == [keypair_b.public_key]
    assert tx_ab.signatures[0] == EMPTY_SIGNATURE
    assert tx_ab.signatures[1] == signature


def test_apply_signature_is_idempotent(tx_ab, keypair_a):
    payload = codec.message_bytes(tx_ab)
    first = keypair_a.sign(payload)
    apply_signature(tx_ab, keypair_a.public_key, first)
    
    assert apply_signature(tx_ab, keypair_a.public_key, b"\x09" * 64) is False
    assert apply_signature(tx_ab, keypair_a.public_key, first) is False
    assert tx_ab.signatures[0] == first


def test_apply_signature_unknown_key(tx_ab, keypair_c):
    with pytest.raises(SlotNotFoundError):
        apply_signature(tx_ab, keypair_c.public_key, b"\x01" * 64)
    with pytest.raises(SlotNotFoundError):
        slot_index(tx_ab, tx_ab.message.account_keys[-1])


def test_apply_signature_rejects_bad_length(tx_ab, keypair_a):
    with pytest.raises(ValidationError):
        apply_signature(tx_ab, keypair_a.public_key, b"\x01" * 63)


def test_completeness_is_monotonic(tx_ab, keypair_a, keypair_b):
    payload = codec.message_bytes(tx_ab)
    assert not is_complete(tx_ab)
    
    apply_signature(tx_ab, keypair_a.public_key, keypair_a.sign(payload))
    assert not is_complete(tx_ab)
    
    apply_signature(tx_ab, keypair_b.public_key, keypair_b.sign(payload))
    assert is_complete(tx_ab)
    
    for keypair in (keypair_a, keypair_b):
        apply_signature(tx_ab, keypair.public_key, b"\x03" * 64)
        assert is_complete(tx_ab)


def test_invalid_signers(tx_ab, keypair_a, keypair_b):
    payload = codec.message_bytes(tx_ab)
    apply_signature(tx_ab, keypair_a.public_key, keypair_a.sign(payload))
    assert invalid_signers(tx_ab) == []
    
    apply_signature(tx_ab, keypair_b.public_key, keypair_a.sign(payload))
    assert invalid_signers(tx_ab) == [keypair_b.public_key]


def test_slot_lookup_accepts_base58(tx_ab, keypair_b):
    assert slot_index(tx_ab, str(keypair_b.public_key)) == 1
