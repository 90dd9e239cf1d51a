"""Solsign exceptions hierarchy."""

from typing import Any, Optional

__all__ = [
    "SolsignError",
    "MalformedError",
    "ValidationError",
    "DerivationError",
    "SlotNotFoundError",
    "FileError",
    "ChallengeError",
    "CryptoError",
    "SessionStateError",
]


class SolsignError(Exception):
    """Base exception for all solsign errors."""
    
    def __init__(
        self, 
        message: str, 
        code: Optional[int] = None, 
        data: Optional[Any] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data
        
    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ValidationError(SolsignError):
    """Raised when a value has the wrong shape (length, alphabet, range)."""
    pass


class MalformedError(SolsignError):
    """Raised when transport encoding or wire structure is inconsistent."""
    pass


class DerivationError(SolsignError):
    """Raised when mnemonic input is empty or invalid."""
    pass


class SlotNotFoundError(SolsignError):
    """
    Raised when a signature targets a key outside the required signers.
    
    Correct callers only sign with keys matched against the required
    signers, so this indicates a bug rather than bad input.
    """
    
    def __init__(self, pubkey: Any, message: Optional[str] = None) -> None:
        if message is None:
            message = f"{pubkey} is not a required signer of this transaction"
        super().__init__(message)
        self.pubkey = pubkey


class FileError(SolsignError):
    """Raised when a key file cannot be read or is malformed."""
    
    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Cannot load key file {path}: {reason}")
        self.path = path
        self.reason = reason


class ChallengeError(SolsignError):
    """Raised when the challenge secret was not supplied correctly."""
    
    def __init__(
        self,
        attempts: int,
        message: Optional[str] = None
    ) -> None:
        if message is None:
            message = f"Challenge failed after {attempts} attempt(s); transaction not signed"
        super().__init__(message)
        self.attempts = attempts


class CryptoError(SolsignError):
    """Raised when a cryptographic operation fails."""
    pass


class SessionStateError(SolsignError):
    """Raised when a session operation is called in the wrong state."""
    pass
