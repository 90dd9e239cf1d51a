"""Transaction signing implementation for solsign."""

import logging
from typing import Callable, Iterable, List, Optional

from ..codec import message_bytes
from ..slots import apply_signature, missing_signers
from ..types.transaction import Transaction
from .keys import Keypair, PublicKey

__all__ = ["signable_keypairs", "sign_transaction"]

logger = logging.getLogger(__name__)


def signable_keypairs(tx: Transaction, keypairs: Iterable[Keypair]) -> List[Keypair]:
    """Owned keypairs whose slot in ``tx`` is still empty, in slot order."""
    by_key = {keypair.public_key: keypair for keypair in keypairs}
    return [by_key[signer] for signer in missing_signers(tx) if signer in by_key]


def sign_transaction(
    tx: Transaction,
    keypairs: Iterable[Keypair],
    authorize: Optional[Callable[[PublicKey], None]] = None
) -> List[PublicKey]:
    """
    Fill every empty slot that one of ``keypairs`` owns.
    
    Args:
        tx: Transaction to sign in place
        keypairs: Owned keys; keys that are not required signers are ignored
        authorize: Called with each signer's public key before it signs;
            raising aborts signing at that point
            
    Returns:
        Public keys that signed, in slot order
    """
    payload = message_bytes(tx)
    signed = []
    
    for keypair in signable_keypairs(tx, keypairs):
        if authorize is not None:
            authorize(keypair.public_key)
            
        signature = keypair.sign(payload)
        if apply_signature(tx, keypair.public_key, signature):
            logger.info("Signed slot for %s", keypair.public_key)
            signed.append(keypair.public_key)
            
    return signed
