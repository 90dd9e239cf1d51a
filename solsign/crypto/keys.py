"""Ed25519 key management for solsign."""

import logging
from typing import Union

from nacl.exceptions import BadSignatureError, CryptoError as NaclCryptoError
from nacl.signing import SigningKey, VerifyKey

from ..constants import KEYPAIR_FILE_LENGTH, SEED_LENGTH
from ..exceptions import CryptoError, ValidationError
from ..types.common import Base58Str, BytesLike, PublicKeyBytes, SignatureBytes
from ..utils.encoding import encode_base58
from ..utils.validation import validate_public_key, validate_seed
from .secret import SecretBytes

__all__ = ["PublicKey", "Keypair", "verify_signature"]

logger = logging.getLogger(__name__)


class PublicKey:
    """
    Solana account address / ed25519 public key.
    
    A 32-byte value type: immutable, hashable and never secret. Rendered
    as Base58 by ``str()``.
    """
    
    __slots__ = ("_bytes",)
    
    def __init__(self, key: Union[bytes, bytearray, str, "PublicKey"]) -> None:
        """
        Initialize public key.
        
        Args:
            key: Public key as 32 bytes, Base58 string, or another PublicKey
            
        Raises:
            ValidationError: If key format is invalid
        """
        if isinstance(key, PublicKey):
            self._bytes = key._bytes
            return
            
        self._bytes = validate_public_key(key)
        
    @property
    def bytes(self) -> PublicKeyBytes:
        """Get public key as bytes."""
        return self._bytes
        
    def base58(self) -> Base58Str:
        """Get public key as Base58 text."""
        return encode_base58(self._bytes)
        
    def verify(self, signature: BytesLike, message: BytesLike) -> bool:
        """
        Verify an ed25519 signature over ``message``.
        
        Args:
            signature: 64-byte signature
            message: Signed bytes
            
        Returns:
            True if signature is valid
        """
        return verify_signature(self, signature, message)
        
    def __bytes__(self) -> bytes:
        return self._bytes
        
    def __str__(self) -> str:
        return self.base58()
        
    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._bytes == other._bytes
        
    def __hash__(self) -> int:
        return hash(self._bytes)
        
    def __repr__(self) -> str:
        """String representation."""
        return f"PublicKey({self.base58()})"


def verify_signature(
    public_key: Union[PublicKey, bytes],
    signature: BytesLike,
    message: BytesLike
) -> bool:
    """
    Verify an ed25519 signature.
    
    Returns False instead of raising for any bad signature or key,
    including keys that are not points on the curve.
    """
    key_bytes = bytes(public_key)
    try:
        VerifyKey(key_bytes).verify(bytes(message), bytes(signature))
        return True
    except (BadSignatureError, NaclCryptoError, ValueError, TypeError):
        return False


class Keypair:
    """
    Ed25519 signing key with scoped secret storage.
    
    The 32-byte seed is held in a ``SecretBytes`` buffer owned exclusively by
    this keypair and is zeroed by ``wipe()``, on leaving a ``with`` block, or
    on garbage collection. The libsodium signing key is only built for the
    duration of a single ``sign`` call.
    """
    
    def __init__(self, seed: SecretBytes) -> None:
        """
        Take ownership of ``seed``.
        
        Args:
            seed: 32-byte ed25519 seed; wiped together with this keypair
            
        Raises:
            ValidationError: If the seed is not 32 bytes
        """
        if not isinstance(seed, SecretBytes):
            raise ValidationError("Keypair seed must be a SecretBytes buffer")
        if len(seed) != SEED_LENGTH:
            length = len(seed)
            seed.wipe()
            raise ValidationError(f"Seed must be {SEED_LENGTH} bytes, got {length}")
            
        self._seed = seed
        signing_key = SigningKey(seed.reveal())
        self._public_key = PublicKey(signing_key.verify_key.encode())
        del signing_key
        
    @classmethod
    def from_seed(cls, seed: BytesLike) -> "Keypair":
        """
        Create keypair from a 32-byte ed25519 seed (copied).
        
        Raises:
            ValidationError: If seed length is wrong
        """
        if isinstance(seed, memoryview):
            seed = seed.tobytes()
        validate_seed(seed)
        return cls(SecretBytes(seed))
        
    @classmethod
    def from_secret_key(cls, secret_key: BytesLike) -> "Keypair":
        """
        Create keypair from the 64-byte ``seed || public key`` layout.
        
        This is the layout of Solana CLI keypair files.
        
        Raises:
            ValidationError: If length is wrong or the embedded public key does
                not belong to the seed
        """
        if len(secret_key) != KEYPAIR_FILE_LENGTH:
            raise ValidationError(
                f"Secret key must be {KEYPAIR_FILE_LENGTH} bytes, got {len(secret_key)}"
            )
            
        view = memoryview(secret_key)
        try:
            keypair = cls(SecretBytes(view[:SEED_LENGTH]))
            embedded = PublicKey(bytes(view[SEED_LENGTH:]))
        finally:
            view.release()
            
        if embedded != keypair.public_key:
            keypair.wipe()
            raise ValidationError("Embedded public key does not match the secret seed")
        return keypair
        
    @property
    def public_key(self) -> PublicKey:
        """Get corresponding public key."""
        return self._public_key
        
    @property
    def is_wiped(self) -> bool:
        """Whether the private material has been zeroed."""
        return self._seed.is_wiped
        
    def sign(self, message: BytesLike) -> SignatureBytes:
        """
        Sign message bytes.
        
        Args:
            message: Bytes to sign
            
        Returns:
            64-byte ed25519 signature
            
        Raises:
            CryptoError: If the keypair was wiped or signing fails
        """
        if self._seed.is_wiped:
            raise CryptoError(f"Keypair {self._public_key} has been wiped")
            
        try:
            signed = SigningKey(self._seed.reveal()).sign(bytes(message))
        except NaclCryptoError as e:
            raise CryptoError(f"Signing failed for {self._public_key}: {e}") from e
            
        return SignatureBytes(signed.signature)
        
    def wipe(self) -> None:
        """Zero the private material."""
        if not self._seed.is_wiped:
            logger.debug("Wiping keypair %s", self._public_key)
        self._seed.wipe()
        
    def __enter__(self) -> "Keypair":
        return self
        
    def __exit__(self, *exc_info: object) -> None:
        self.wipe()
        
    def __eq__(self, other: object) -> bool:
        """Keypairs are equal when they control the same account."""
        if not isinstance(other, Keypair):
            return NotImplemented
        return self._public_key == other._public_key
        
    def __hash__(self) -> int:
        return hash(self._public_key)
        
    def __repr__(self) -> str:
        """String representation; never includes the secret."""
        return f"Keypair({self._public_key})"
