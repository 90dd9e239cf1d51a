import pytest

from solsign.exceptions import ValidationError
from solsign.utils.encoding import (
    encode_compact_u16, decode_compact_u16,
    encode_base58, decode_base58, encode_base64, decode_base64,
)


@pytest.mark.parametrize("value, encoded", [
    (0, b"\x00"),
    (0x7f, b"\x7f"),
    (0x80, b"\x80\x01"),
    (0xff, b"\xff\x01"),
    (0x100, b"\x80\x02"),
    (0x3fff, b"\xff\x7f"),
    (0x4000, b"\x80\x80\x01"),
    (0xffff, b"\xff\xff\x03"),
])
def test_compact_u16_known_encodings(value, encoded):
    assert encode_compact_u16(value) == encoded
    assert decode_compact_u16(encoded) == (value, len(encoded))


def test_compact_u16_offset():
    data = b"\xaa\xbb\x80\x01\xcc"
    assert decode_compact_u16(data, 2) == (0x80, 4)


@pytest.mark.parametrize("encoded", [
    b"",              # nothing to read
    b"\x80",          # continuation bit with no next byte
    b"\xff\xff",      # still truncated after two bytes
    b"\x80\x00",      # alias of 0 in two bytes
    b"\xff\x80\x00",  # alias with a zero third byte
    b"\xff\xff\x04",  # overflows 16 bits
    b"\x80\x80\x80",  # third byte may not continue
])
def test_compact_u16_rejects_inconsistent_lengths(encoded):
    with pytest.raises(ValidationError):
        decode_compact_u16(encoded)


def test_compact_u16_out_of_range():
    with pytest.raises(ValidationError):
        encode_compact_u16(0x10000)
    with pytest.raises(ValidationError):
        encode_compact_u16(-1)


def test_base58_roundtrip():
    payload = b"hello world"
    encoded = encode_base58(payload)
    assert encoded == "StV1DL6CwTryKyV"
    assert decode_base58(encoded) == payload


def test_base58_leading_zeros():
    assert encode_base58(bytes(32)) == "1" * 32
    assert decode_base58("1" * 32) == bytes(32)
    assert decode_base58("11" + encode_base58(b"\x01")) == b"\x00\x00\x01"
    assert encode_base58(b"") == ""


def test_base58_rejects_bad_characters():
    with pytest.raises(ValidationError):
        decode_base58("0OIl")


def test_base64_strict():
    assert encode_base64(b"\x00\x01\x02") == "AAEC"
    assert decode_base64("  AAEC\n") == b"\x00\x01\x02"
    for bad in ("AAE", "AA EC", "AAEC!", "", "AAE-", "ÄAEC"):
        with pytest.raises(ValidationError):
            decode_base64(bad)
