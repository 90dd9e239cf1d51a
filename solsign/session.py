"""
Signing session: owned keys, optional challenge, per-transaction workflow.

A session moves through these states::

    COLLECTING_KEYS -> CHALLENGE_SETUP -> AWAITING_INPUT
        -> (PROCESSING -> AWAITING_INPUT)* -> TERMINATED

Keys can only be added while collecting. Each submitted transaction is
decoded, signed with every owned key that has an empty slot, re-encoded and
reported. Failures local to one transaction are returned as ``Failure``
results and leave the session usable.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from . import codec
from .config import Config
from .crypto.keys import Keypair, PublicKey
from .crypto.secret import wipe_buffer
from .crypto.transaction_signing import sign_transaction, signable_keypairs
from .exceptions import (
    ChallengeError,
    CryptoError,
    MalformedError,
    SessionStateError,
    SlotNotFoundError,
    SolsignError,
)
from .slots import invalid_signers, is_complete, missing_signers, present_signers, required_signers
from .types.common import Base58Str, Base64Str
from .types.transaction import Transaction
from .utils.encoding import encode_base58

__all__ = [
    "SessionState",
    "Complete",
    "Incomplete",
    "Failure",
    "Result",
    "Inspection",
    "SigningSession",
    "create_session",
    "add_key",
    "finish_key_entry",
    "set_challenge",
    "submit_transaction",
]

logger = logging.getLogger(__name__)

ChallengePrompt = Callable[[str], Optional[str]]


class SessionState(Enum):
    """Workflow states of a signing session."""
    COLLECTING_KEYS = "collecting_keys"
    CHALLENGE_SETUP = "challenge_setup"
    AWAITING_INPUT = "awaiting_input"
    PROCESSING = "processing"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Complete:
    """Every slot is signed."""
    text: Base64Str
    signature: Base58Str
    signed: Tuple[PublicKey, ...] = ()


@dataclass(frozen=True)
class Incomplete:
    """Some required signers have still not signed."""
    missing: Tuple[PublicKey, ...]
    text: Base64Str
    signed: Tuple[PublicKey, ...] = ()


@dataclass(frozen=True)
class Failure:
    """The transaction could not be processed; the session continues."""
    error: SolsignError


Result = Union[Complete, Incomplete, Failure]


@dataclass(frozen=True)
class Inspection:
    """Signing status of a transaction, computed without signing it."""
    transaction: Transaction
    required: Tuple[PublicKey, ...]
    present: Tuple[PublicKey, ...]
    missing: Tuple[PublicKey, ...]
    signable: Tuple[PublicKey, ...]
    invalid: Tuple[PublicKey, ...] = field(default=())
    
    @property
    def can_complete(self) -> bool:
        """Whether owned keys cover every missing signer."""
        return set(self.missing) <= set(self.signable)


class _Challenge:
    """Salted digest of the challenge secret; the secret itself is not kept."""
    
    def __init__(self, secret: str) -> None:
        self._salt = secrets.token_bytes(16)
        self._digest = self._hash(secret)
        
    def _hash(self, secret: str) -> bytes:
        encoded = bytearray(secret.encode("utf-8"))
        try:
            return hmac.new(self._salt, encoded, hashlib.sha256).digest()
        finally:
            wipe_buffer(encoded)
            
    def matches(self, candidate: str) -> bool:
        return hmac.compare_digest(self._digest, self._hash(candidate))


class SigningSession:
    """
    Orchestrates key collection, the optional challenge and transaction signing.
    
    Example:
        >>> session = create_session([keypair])
        >>> session.finish_key_entry()
        >>> session.set_challenge(None)
        >>> result = session.submit_transaction(text)
    """
    
    def __init__(
        self,
        initial_keypairs: Iterable[Keypair] = (),
        config: Optional[Config] = None,
        challenge_prompt: Optional[ChallengePrompt] = None
    ) -> None:
        """
        Initialize session in the key collection state.
        
        Args:
            initial_keypairs: Keys loaded before the session starts (key files)
            config: Runtime configuration; defaults apply when omitted
            challenge_prompt: Reads the challenge secret from the operator;
                returns None at end of input
        """
        self.config = config or Config()
        self._keypairs: Dict[PublicKey, Keypair] = {}
        self._challenge: Optional[_Challenge] = None
        self._challenge_prompt = challenge_prompt
        self._state = SessionState.COLLECTING_KEYS
        self._logger = logging.getLogger(f"{__name__}.SigningSession")
        
        for keypair in initial_keypairs:
            self.add_key(keypair)
            
    @property
    def state(self) -> SessionState:
        return self._state
        
    @property
    def public_keys(self) -> Tuple[PublicKey, ...]:
        """Owned public keys in the order they were added."""
        return tuple(self._keypairs)
        
    @property
    def has_challenge(self) -> bool:
        return self._challenge is not None
        
    def _require(self, *states: SessionState) -> None:
        if self._state not in states:
            expected = " or ".join(state.name for state in states)
            raise SessionStateError(f"Session is {self._state.name}, expected {expected}")
            
    def add_key(self, keypair: Keypair) -> bool:
        """
        Add an owned keypair.
        
        Returns:
            False if a key with the same public key was already present; the
            duplicate is wiped and the original kept
            
        Raises:
            SessionStateError: If key entry has finished
        """
        self._require(SessionState.COLLECTING_KEYS)
        if keypair.public_key in self._keypairs:
            if keypair is not self._keypairs[keypair.public_key]:
                keypair.wipe()
            self._logger.info("Key %s already loaded", keypair.public_key)
            return False
            
        self._keypairs[keypair.public_key] = keypair
        self._logger.info("Added key %s", keypair.public_key)
        return True
        
    def finish_key_entry(self) -> None:
        """Close key entry; the owned key set is read-only from now on."""
        self._require(SessionState.COLLECTING_KEYS)
        self._state = SessionState.CHALLENGE_SETUP
        self._logger.debug("Key entry finished with %d key(s)", len(self._keypairs))
        
    def set_challenge(self, secret: Optional[str]) -> None:
        """
        Record the optional challenge secret and start accepting input.
        
        Args:
            secret: Secret the operator must re-enter before each signature;
                None or an empty string disables the challenge
                
        Raises:
            SessionStateError: Outside challenge setup, or when a secret is
                given but the session has no challenge prompt to ask with
        """
        self._require(SessionState.CHALLENGE_SETUP)
        if secret:
            if self._challenge_prompt is None:
                raise SessionStateError("A challenge secret needs a challenge prompt")
            self._challenge = _Challenge(secret)
            self._logger.info("Challenge secret set")
        self._state = SessionState.AWAITING_INPUT
        
    def _authorize(self, pubkey: PublicKey) -> None:
        """Ask for the challenge secret before ``pubkey`` signs."""
        if self._challenge is None:
            return
            
        attempts = self.config.challenge_attempts
        for attempt in range(1, attempts + 1):
            answer = self._challenge_prompt(f"Challenge password to sign as {pubkey}: ")
            if answer is None:
                raise ChallengeError(attempt, "Challenge input ended; transaction not signed")
            if self._challenge.matches(answer):
                return
            self._logger.warning("Challenge mismatch (attempt %d of %d)", attempt, attempts)
            
        raise ChallengeError(attempts)
        
    def inspect(self, text: str) -> Inspection:
        """
        Decode a transaction and report its signing status without signing.
        
        Raises:
            MalformedError: If the text is not a well-formed transaction
        """
        self._require(SessionState.AWAITING_INPUT)
        tx = codec.decode(text)
        return Inspection(
            transaction=tx,
            required=tuple(required_signers(tx)),
            present=tuple(present_signers(tx)),
            missing=tuple(missing_signers(tx)),
            signable=tuple(kp.public_key for kp in signable_keypairs(tx, self._keypairs.values())),
            invalid=tuple(invalid_signers(tx)),
        )
        
    def submit_transaction(self, text: str) -> Result:
        """
        Sign one Base64 transaction with every owned key it needs.
        
        Args:
            text: Base64 encoded, possibly partially signed transaction
            
        Returns:
            ``Complete`` with the signed transaction and fee payer signature,
            ``Incomplete`` with the still missing signers and the partially
            signed transaction, or ``Failure`` for malformed input, a failed
            challenge or a signing error
            
        Raises:
            SessionStateError: If the session is not awaiting input
            SlotNotFoundError: On an internal slot matching bug
        """
        self._require(SessionState.AWAITING_INPUT)
        self._state = SessionState.PROCESSING
        try:
            return self._process(text)
        except SlotNotFoundError:
            self._logger.error("Signature slot mismatch; terminating session")
            self._state = SessionState.TERMINATED
            raise
        finally:
            if self._state is SessionState.PROCESSING:
                self._state = (
                    SessionState.TERMINATED if self.config.is_single_shot
                    else SessionState.AWAITING_INPUT
                )
                
    def _process(self, text: str) -> Result:
        try:
            tx = codec.decode(text)
        except MalformedError as e:
            self._logger.warning("Rejected input: %s", e)
            return Failure(e)
            
        invalid = invalid_signers(tx)
        if invalid:
            self._logger.warning(
                "Existing signature(s) do not verify for: %s", ", ".join(map(str, invalid))
            )
            
        try:
            signed = tuple(sign_transaction(tx, self._keypairs.values(), authorize=self._authorize))
        except (ChallengeError, CryptoError) as e:
            self._logger.warning("Transaction not signed: %s", e)
            return Failure(e)
            
        encoded = codec.encode(tx)
        if is_complete(tx):
            signature = encode_base58(tx.signatures[0])
            self._logger.info("Transaction complete, signature %s", signature)
            return Complete(text=encoded, signature=signature, signed=signed)
            
        missing = tuple(missing_signers(tx))
        self._logger.info("Transaction still needs %d signature(s)", len(missing))
        return Incomplete(missing=missing, text=encoded, signed=signed)
        
    def end_of_input(self) -> None:
        """Input stream ended; terminate the session."""
        self._require(SessionState.AWAITING_INPUT, SessionState.TERMINATED)
        self._state = SessionState.TERMINATED
        
    def close(self) -> None:
        """Wipe every owned key and the challenge, then terminate."""
        for keypair in self._keypairs.values():
            keypair.wipe()
        self._challenge = None
        self._state = SessionState.TERMINATED
        
    def __enter__(self) -> "SigningSession":
        return self
        
    def __exit__(self, *exc_info: object) -> None:
        self.close()
        
    def __repr__(self) -> str:
        return f"SigningSession(state={self._state.name}, keys={len(self._keypairs)})"


def create_session(
    initial_keypairs: Iterable[Keypair] = (),
    config: Optional[Config] = None,
    challenge_prompt: Optional[ChallengePrompt] = None
) -> SigningSession:
    """Create a session that starts collecting keys."""
    return SigningSession(initial_keypairs, config=config, challenge_prompt=challenge_prompt)


def add_key(session: SigningSession, keypair: Keypair) -> bool:
    """Add an owned keypair to ``session``."""
    return session.add_key(keypair)


def finish_key_entry(session: SigningSession) -> None:
    """Close key entry on ``session``."""
    session.finish_key_entry()


def set_challenge(session: SigningSession, secret: Optional[str]) -> None:
    """Set or skip the challenge secret on ``session``."""
    session.set_challenge(secret)


def submit_transaction(session: SigningSession, text: str) -> Result:
    """Sign one Base64 transaction within ``session``."""
    return session.submit_transaction(text)
