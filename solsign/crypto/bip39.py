"""BIP39 mnemonic handling for solsign."""

import hashlib
import unicodedata
from functools import lru_cache
from typing import List, Optional

from mnemonic import Mnemonic

from ..constants import BIP39_LANGUAGE, BIP39_PBKDF2_ROUNDS, BIP39_SALT_PREFIX
from ..exceptions import DerivationError
from .secret import SecretBytes, wipe_buffer

__all__ = ["normalize_mnemonic", "validate_mnemonic", "mnemonic_to_seed"]


@lru_cache(maxsize=1)
def _mnemonic() -> Mnemonic:
    return Mnemonic(BIP39_LANGUAGE)


def normalize_mnemonic(mnemonic: str) -> str:
    """NFKD-normalize, lowercase and collapse whitespace between words."""
    return " ".join(unicodedata.normalize("NFKD", mnemonic).lower().split())


def validate_mnemonic(mnemonic: str) -> List[str]:
    """
    Check mnemonic words against the English BIP39 word list and checksum.
    
    Args:
        mnemonic: Space separated words (normalized or not)
        
    Returns:
        The normalized word list
        
    Raises:
        DerivationError: If the phrase is empty, has an unknown word, a bad
            word count, or a bad checksum. Unknown words are reported by
            position only.
    """
    words = normalize_mnemonic(mnemonic).split(" ") if mnemonic.strip() else []
    if not words:
        raise DerivationError("Empty mnemonic")
        
    engine = _mnemonic()
    known = set(engine.wordlist)
    for position, word in enumerate(words, start=1):
        if word not in known:
            raise DerivationError(f"Mnemonic word {position} is not in the BIP39 word list")
            
    if len(words) not in (12, 15, 18, 21, 24):
        raise DerivationError(f"Mnemonic must have 12, 15, 18, 21 or 24 words, got {len(words)}")
        
    if not engine.check(" ".join(words)):
        raise DerivationError("Mnemonic checksum is invalid")
        
    return words


def mnemonic_to_seed(mnemonic: str, passphrase: Optional[str] = "") -> SecretBytes:
    """
    Convert mnemonic to a 64-byte seed using PBKDF2.
    
    The phrase is validated first. The returned buffer is owned by the
    caller and must be wiped once keys have been derived from it.
    
    Raises:
        DerivationError: If the mnemonic is invalid
    """
    words = validate_mnemonic(mnemonic)
    mnemonic_bytes = bytearray(" ".join(words).encode("utf-8"))
    salt = bytearray(
        (BIP39_SALT_PREFIX + unicodedata.normalize("NFKD", passphrase or "")).encode("utf-8")
    )
    
    try:
        return SecretBytes(hashlib.pbkdf2_hmac(
            "sha512",
            mnemonic_bytes,
            salt,
            BIP39_PBKDF2_ROUNDS,
            dklen=64
        ))
    finally:
        wipe_buffer(mnemonic_bytes)
        wipe_buffer(salt)
