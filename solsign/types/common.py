"""Common type definitions for solsign."""

from typing import NewType, Union

__all__ = [
    "Base64Str",
    "Base58Str",
    "PublicKeyBytes",
    "SignatureBytes",
    "BlockhashBytes",
    "DerivationPath",
    "BytesLike",
]

# Text encodings
Base64Str = NewType("Base64Str", str)
"""Standard Base64 text, the transport encoding for whole transactions."""

Base58Str = NewType("Base58Str", str)
"""Base58 text, the display encoding for keys and signatures."""

# Wire values
PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""32-byte ed25519 public key."""

SignatureBytes = NewType("SignatureBytes", bytes)
"""64-byte ed25519 signature; all zeros marks an empty slot."""

BlockhashBytes = NewType("BlockhashBytes", bytes)
"""32-byte recent blockhash."""

DerivationPath = NewType("DerivationPath", str)
"""Hierarchical derivation path such as m/44'/501'/0'/0'."""

# Type aliases
BytesLike = Union[bytes, bytearray, memoryview]
"""Anything that can be read as raw bytes."""
