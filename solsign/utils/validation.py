"""Validation utilities for solsign."""

import re
from typing import Union

from ..constants import (
    PUBLIC_KEY_LENGTH,
    SEED_LENGTH,
    SIGNATURE_LENGTH,
)
from ..exceptions import ValidationError
from ..types.common import PublicKeyBytes, SignatureBytes
from ..utils.encoding import decode_base58

__all__ = [
    "is_valid_base58",
    "validate_public_key",
    "validate_signature",
    "validate_seed",
    "validate_u8",
]

BASE58_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")


def is_valid_base58(text: str) -> bool:
    """Check whether text only uses the Base58 alphabet."""
    return bool(BASE58_PATTERN.match(text))


def _fixed_length(value: Union[str, bytes, bytearray], length: int, what: str) -> bytes:
    if isinstance(value, str):
        if not is_valid_base58(value):
            raise ValidationError(f"{what} must be Base58 text")
        value = decode_base58(value)
    elif isinstance(value, (bytes, bytearray)):
        value = bytes(value)
    else:
        raise ValidationError(f"{what} must be bytes or Base58 text, got {type(value).__name__}")
        
    if len(value) != length:
        raise ValidationError(f"{what} must be {length} bytes, got {len(value)}")
    return value


def validate_public_key(key: Union[str, bytes]) -> PublicKeyBytes:
    """
    Validate public key and return as bytes.
    
    Any 32-byte value is accepted: program-derived addresses are
    deliberately off the curve and still appear as account keys.
    
    Args:
        key: Public key as Base58 string or bytes
        
    Returns:
        Public key as 32 bytes
        
    Raises:
        ValidationError: If public key is invalid
    """
    return PublicKeyBytes(_fixed_length(key, PUBLIC_KEY_LENGTH, "Public key"))


def validate_signature(signature: Union[str, bytes]) -> SignatureBytes:
    """
    Validate signature and return as bytes.
    
    Raises:
        ValidationError: If signature is not 64 bytes
    """
    return SignatureBytes(_fixed_length(signature, SIGNATURE_LENGTH, "Signature"))


def validate_seed(seed: Union[bytes, bytearray]) -> None:
    """
    Validate ed25519 seed length.
    
    Only the length is reported on failure, never the content.
    """
    if not isinstance(seed, (bytes, bytearray)):
        raise ValidationError(f"Seed must be bytes, got {type(seed).__name__}")
    if len(seed) != SEED_LENGTH:
        raise ValidationError(f"Seed must be {SEED_LENGTH} bytes, got {len(seed)}")


def validate_u8(value: int, what: str = "Value") -> int:
    """Validate that value fits in one unsigned byte."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{what} must be an integer")
    if not 0 <= value <= 0xFF:
        raise ValidationError(f"{what} must be in range 0..255, got {value}")
    return value
