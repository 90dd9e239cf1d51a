"""Signature slot accounting for decoded transactions."""

import logging
from typing import List, Union

from .codec import message_bytes
from .constants import EMPTY_SIGNATURE
from .crypto.keys import PublicKey
from .exceptions import SlotNotFoundError
from .types.common import BytesLike, SignatureBytes
from .types.transaction import Transaction
from .utils.validation import validate_signature

__all__ = [
    "is_empty_slot",
    "required_signers",
    "missing_signers",
    "present_signers",
    "slot_index",
    "apply_signature",
    "is_complete",
    "invalid_signers",
]

logger = logging.getLogger(__name__)


def is_empty_slot(signature: BytesLike) -> bool:
    """An all-zero signature marks a slot nobody has signed yet."""
    return bytes(signature) == EMPTY_SIGNATURE


def required_signers(tx: Transaction) -> List[PublicKey]:
    """First ``num_required_signatures`` account keys; index 0 is the fee payer."""
    return list(tx.message.signer_keys)


def missing_signers(tx: Transaction) -> List[PublicKey]:
    """Required signers whose slot is still empty, in slot order."""
    return [
        signer
        for signer, signature in zip(tx.message.signer_keys, tx.signatures)
        if is_empty_slot(signature)
    ]


def present_signers(tx: Transaction) -> List[PublicKey]:
    """Required signers whose slot is already filled, in slot order."""
    return [
        signer
        for signer, signature in zip(tx.message.signer_keys, tx.signatures)
        if not is_empty_slot(signature)
    ]


def slot_index(tx: Transaction, pubkey: Union[PublicKey, bytes, str]) -> int:
    """
    Position of ``pubkey`` among the required signers.
    
    Raises:
        SlotNotFoundError: If ``pubkey`` is not a required signer
    """
    pubkey = PublicKey(pubkey)
    try:
        return tx.message.signer_keys.index(pubkey)
    except ValueError:
        raise SlotNotFoundError(pubkey) from None


def apply_signature(
    tx: Transaction,
    pubkey: Union[PublicKey, bytes, str],
    signature: BytesLike
) -> bool:
    """
    Write ``signature`` into ``pubkey``'s slot if that slot is empty.
    
    A filled slot is never overwritten, so applying twice is harmless.
    
    Args:
        tx: Transaction to update in place
        pubkey: Required signer the signature belongs to
        signature: 64-byte signature
        
    Returns:
        True if the slot was written, False if it was already filled
        
    Raises:
        SlotNotFoundError: If ``pubkey`` is not a required signer
        ValidationError: If ``signature`` is not 64 bytes
    """
    index = slot_index(tx, pubkey)
    signature = validate_signature(bytes(signature))
    
    if not is_empty_slot(tx.signatures[index]):
        logger.debug("Slot %d (%s) already signed; leaving it unchanged", index, pubkey)
        return False
        
    tx.signatures[index] = SignatureBytes(signature)
    return True


def is_complete(tx: Transaction) -> bool:
    """True when every signature slot is filled."""
    return all(not is_empty_slot(signature) for signature in tx.signatures)


def invalid_signers(tx: Transaction) -> List[PublicKey]:
    """
    Signers whose filled slot does not verify over the message bytes.
    
    Empty slots are not reported. A non-empty result means some earlier
    signer produced a corrupt or mismatched signature.
    """
    payload = message_bytes(tx)
    return [
        signer
        for signer, signature in zip(tx.message.signer_keys, tx.signatures)
        if not is_empty_slot(signature) and not signer.verify(signature, payload)
    ]
