"""
solsign

Offline signing of Solana transactions. Signatures contributed by several
independent runs are combined into one fully signed transaction without
secret material ever leaving the process.
"""

from .config import Config
from .exceptions import (
    SolsignError,
    MalformedError,
    ValidationError,
    DerivationError,
    SlotNotFoundError,
    FileError,
    ChallengeError,
    CryptoError,
    SessionStateError,
)
from .crypto import PublicKey, Keypair, SecretBytes
from .session import (
    SigningSession,
    SessionState,
    Complete,
    Incomplete,
    Failure,
    Inspection,
    create_session,
    add_key,
    finish_key_entry,
    set_challenge,
    submit_transaction,
)

__version__ = "1.0.0"

__all__ = [
    # Session
    "SigningSession",
    "SessionState",
    "Complete",
    "Incomplete",
    "Failure",
    "Inspection",
    "create_session",
    "add_key",
    "finish_key_entry",
    "set_challenge",
    "submit_transaction",
    
    # Configuration
    "Config",
    
    # Exceptions
    "SolsignError",
    "MalformedError",
    "ValidationError",
    "DerivationError",
    "SlotNotFoundError",
    "FileError",
    "ChallengeError",
    "CryptoError",
    "SessionStateError",
    
    # Crypto
    "PublicKey",
    "Keypair",
    "SecretBytes",
]
