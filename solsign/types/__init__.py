"""
Type definitions for solsign.

Transaction structures live in ``solsign.types.transaction``; they depend
on ``solsign.crypto.keys`` and are not re-exported here.
"""

from .common import (
    Base64Str,
    Base58Str,
    PublicKeyBytes,
    SignatureBytes,
    BlockhashBytes,
    DerivationPath,
    BytesLike,
)

__all__ = [
    "Base64Str",
    "Base58Str",
    "PublicKeyBytes",
    "SignatureBytes",
    "BlockhashBytes",
    "DerivationPath",
    "BytesLike",
]
