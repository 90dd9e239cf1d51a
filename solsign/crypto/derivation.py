"""Candidate signing keys derived from a mnemonic phrase."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..constants import DERIVATION_ACCOUNTS, SEED_LENGTH, SOLANA_COIN_TYPE
from ..exceptions import DerivationError
from ..types.common import DerivationPath
from .bip39 import mnemonic_to_seed
from .hd import derive_keypair
from .keys import Keypair, PublicKey
from .secret import SecretBytes

__all__ = [
    "DerivedCandidate",
    "account_path",
    "seed_from",
    "derive_candidates",
    "select_candidate",
    "wipe_candidates",
]

logger = logging.getLogger(__name__)


@dataclass
class DerivedCandidate:
    """One possible signing key for a mnemonic; index 0 has no path."""
    index: int
    path: Optional[DerivationPath]
    keypair: Keypair
    
    @property
    def public_key(self) -> PublicKey:
        return self.keypair.public_key
        
    def __str__(self) -> str:
        label = self.path or "(no derivation path)"
        return f"{self.index}: {self.public_key} {label}"


def account_path(account: int) -> DerivationPath:
    """BIP44 path for a Solana account, all components hardened."""
    return DerivationPath(f"m/44'/{SOLANA_COIN_TYPE}'/{account}'/0'")


def seed_from(words: str, passphrase: Optional[str] = "") -> SecretBytes:
    """
    Stretch mnemonic words and passphrase into a 64-byte BIP39 seed.
    
    Raises:
        DerivationError: If the words are empty or not a valid mnemonic
    """
    return mnemonic_to_seed(words, passphrase)


def derive_candidates(seed: SecretBytes) -> List[DerivedCandidate]:
    """
    Derive the fixed, ordered set of candidate keypairs for a seed.
    
    Candidate 0 uses the first 32 seed bytes directly as the ed25519 seed,
    as ``solana-keygen recover`` does. Candidates 1-9 use SLIP-0010 at
    ``m/44'/501'/{account}'/0'`` for accounts 0-8.
    
    Args:
        seed: BIP39 seed; not wiped here, the caller owns it
        
    Returns:
        Exactly ten candidates, in index order
    """
    candidates = [DerivedCandidate(0, None, Keypair(seed.slice(0, SEED_LENGTH)))]
    try:
        for account in range(DERIVATION_ACCOUNTS):
            path = account_path(account)
            candidates.append(DerivedCandidate(account + 1, path, derive_keypair(seed, path)))
    except Exception:
        wipe_candidates(candidates)
        raise
        
    return candidates


def wipe_candidates(candidates: Sequence[DerivedCandidate]) -> None:
    """Wipe every candidate's private material."""
    for candidate in candidates:
        candidate.keypair.wipe()


def select_candidate(
    candidates: Sequence[DerivedCandidate],
    choice: Optional[int]
) -> Optional[Keypair]:
    """
    Keep one candidate and wipe all others.
    
    Args:
        candidates: Output of ``derive_candidates``
        choice: Index of the candidate to keep, or None to keep nothing
        
    Returns:
        The selected keypair, or None
        
    Raises:
        DerivationError: If ``choice`` matches no candidate; every candidate
            is wiped in that case too
    """
    selected = None
    for candidate in candidates:
        if choice is not None and candidate.index == choice:
            selected = candidate.keypair
        else:
            candidate.keypair.wipe()
            
    if choice is not None and selected is None:
        raise DerivationError(f"No derivation candidate with index {choice}")
        
    if selected is not None:
        logger.info("Selected derived key %d: %s", choice, selected.public_key)
    return selected
