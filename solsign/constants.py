"""Constants for solsign."""

from typing import Final

__all__ = [
    "PUBLIC_KEY_LENGTH",
    "SIGNATURE_LENGTH",
    "BLOCKHASH_LENGTH",
    "SEED_LENGTH",
    "KEYPAIR_FILE_LENGTH",
    "MESSAGE_HEADER_LENGTH",
    "COMPACT_U16_MAX_BYTES",
    "COMPACT_U16_MAX_VALUE",
    "VERSION_PREFIX_MASK",
    "SUPPORTED_MESSAGE_VERSIONS",
    "EMPTY_SIGNATURE",
    "BIP39_PBKDF2_ROUNDS",
    "BIP39_SALT_PREFIX",
    "BIP39_LANGUAGE",
    "SLIP10_ED25519_CURVE",
    "HARDENED_OFFSET",
    "SOLANA_COIN_TYPE",
    "DERIVATION_ACCOUNTS",
    "CANDIDATE_COUNT",
    "DEFAULT_CHALLENGE_ATTEMPTS",
    "LOG_LEVELS",
]

# Wire sizes
PUBLIC_KEY_LENGTH: Final = 32
SIGNATURE_LENGTH: Final = 64
BLOCKHASH_LENGTH: Final = 32
SEED_LENGTH: Final = 32
KEYPAIR_FILE_LENGTH: Final = SEED_LENGTH + PUBLIC_KEY_LENGTH
MESSAGE_HEADER_LENGTH: Final = 3

# Compact-u16 ("short vec") length prefix
COMPACT_U16_MAX_BYTES: Final = 3
COMPACT_U16_MAX_VALUE: Final = 0xFFFF

# Versioned messages set the high bit of the first message byte
VERSION_PREFIX_MASK: Final = 0x80
SUPPORTED_MESSAGE_VERSIONS: Final = frozenset({0})

EMPTY_SIGNATURE: Final = bytes(SIGNATURE_LENGTH)

# BIP39
BIP39_PBKDF2_ROUNDS: Final = 2048
BIP39_SALT_PREFIX: Final = "mnemonic"
BIP39_LANGUAGE: Final = "english"

# SLIP-0010 / BIP44
SLIP10_ED25519_CURVE: Final = b"ed25519 seed"
HARDENED_OFFSET: Final = 0x80000000
SOLANA_COIN_TYPE: Final = 501

# One direct key plus one hierarchical key per account
DERIVATION_ACCOUNTS: Final = 9
CANDIDATE_COUNT: Final = 1 + DERIVATION_ACCOUNTS

DEFAULT_CHALLENGE_ATTEMPTS: Final = 5

LOG_LEVELS: Final = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
