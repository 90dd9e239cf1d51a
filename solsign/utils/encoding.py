"""Encoding and decoding utilities for solsign."""

import base64
import binascii
from typing import Tuple, Union

from ..constants import COMPACT_U16_MAX_BYTES, COMPACT_U16_MAX_VALUE
from ..exceptions import ValidationError
from ..types.common import Base58Str, Base64Str, BytesLike

__all__ = [
    "bytes_to_int",
    "encode_compact_u16",
    "decode_compact_u16",
    "encode_base58",
    "decode_base58",
    "encode_base64",
    "decode_base64",
]

# Constants
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def bytes_to_int(data: BytesLike, byteorder: str = "big") -> int:
    """Convert bytes to an unsigned integer."""
    return int.from_bytes(bytes(data), byteorder=byteorder)


def encode_compact_u16(n: int) -> bytes:
    """
    Encode integer as a compact-u16 length prefix.
    
    Seven bits per byte, least significant group first, high bit set on
    every byte except the last.
    
    Args:
        n: Integer in range 0..0xFFFF
        
    Returns:
        Encoded bytes (1-3 bytes)
        
    Raises:
        ValidationError: If n does not fit in 16 bits
    """
    if n < 0 or n > COMPACT_U16_MAX_VALUE:
        raise ValidationError(f"Compact-u16 value out of range: {n}")
        
    result = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            result.append(byte | 0x80)
        else:
            result.append(byte)
            return bytes(result)


def decode_compact_u16(data: BytesLike, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a compact-u16 length prefix.
    
    Args:
        data: Bytes containing the encoded value
        offset: Starting position
        
    Returns:
        Tuple of (value, new_offset)
        
    Raises:
        ValidationError: If the encoding is truncated, overflows 16 bits or
            is a non-canonical alias (a zero continuation byte)
    """
    value = 0
    for i in range(COMPACT_U16_MAX_BYTES):
        if offset + i >= len(data):
            raise ValidationError("Truncated compact-u16 value")
            
        byte = data[offset + i]
        if i == COMPACT_U16_MAX_BYTES - 1 and byte > 0x03:
            raise ValidationError("Compact-u16 value overflows 16 bits")
        if byte == 0 and i > 0:
            raise ValidationError("Non-canonical compact-u16 encoding")
            
        value |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return value, offset + i + 1
            
    raise ValidationError("Compact-u16 value longer than 3 bytes")


def encode_base58(data: BytesLike) -> Base58Str:
    """
    Encode bytes as Base58 string.
    
    Args:
        data: Bytes to encode
        
    Returns:
        Base58 encoded string
    """
    data = bytes(data)
    n = bytes_to_int(data, byteorder="big")
    
    encoded = ""
    while n:
        n, remainder = divmod(n, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded
        
    # Leading zero bytes map to leading '1's
    for byte in data:
        if byte == 0:
            encoded = "1" + encoded
        else:
            break
            
    return Base58Str(encoded)


def decode_base58(string: str) -> bytes:
    """
    Decode Base58 string to bytes.
    
    Args:
        string: Base58 string
        
    Returns:
        Decoded bytes
        
    Raises:
        ValidationError: If string contains invalid characters
    """
    n = 0
    for char in string:
        try:
            n = n * 58 + BASE58_ALPHABET.index(char)
        except ValueError:
            raise ValidationError(f"Invalid Base58 character: {char!r}") from None
            
    leading_zeros = len(string) - len(string.lstrip("1"))
    if n == 0:
        return b"\x00" * leading_zeros
        
    body = n.to_bytes((n.bit_length() + 7) // 8, "big")
    return b"\x00" * leading_zeros + body


def encode_base64(data: BytesLike) -> Base64Str:
    """Encode bytes as standard padded Base64 text."""
    return Base64Str(base64.b64encode(bytes(data)).decode("ascii"))


def decode_base64(text: Union[str, bytes]) -> bytes:
    """
    Decode standard Base64 text strictly.
    
    Surrounding whitespace is ignored; anything else outside the standard
    alphabet, or incorrect padding, is rejected.
    
    Raises:
        ValidationError: If text is not valid Base64
    """
    if isinstance(text, str):
        try:
            text = text.strip().encode("ascii")
        except UnicodeEncodeError as e:
            raise ValidationError("Base64 text contains non-ASCII characters") from e
    else:
        text = text.strip()
        
    if not text:
        raise ValidationError("Empty Base64 input")
        
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid Base64 input: {e}") from e
