"""Cryptographic utilities for solsign."""

from ..crypto.secret import SecretBytes, wipe_buffer
from ..crypto.keys import PublicKey, Keypair, verify_signature
from ..crypto.bip39 import mnemonic_to_seed, validate_mnemonic
from ..crypto.hd import HDNode, derive_keypair
from ..crypto.derivation import (
    DerivedCandidate,
    seed_from,
    derive_candidates,
    select_candidate,
    wipe_candidates,
)

__all__ = [
    # Secrets
    "SecretBytes",
    "wipe_buffer",
    
    # Keys
    "PublicKey",
    "Keypair",
    "verify_signature",
    
    # Derivation
    "mnemonic_to_seed",
    "validate_mnemonic",
    "HDNode",
    "derive_keypair",
    "DerivedCandidate",
    "seed_from",
    "derive_candidates",
    "select_candidate",
    "wipe_candidates",
]
