"""Hierarchical deterministic key derivation (SLIP-0010, ed25519)."""

import hmac
import hashlib
from typing import List

from ..constants import HARDENED_OFFSET, SLIP10_ED25519_CURVE
from ..exceptions import DerivationError
from ..types.common import DerivationPath
from .keys import Keypair
from .secret import SecretBytes

__all__ = ["HDNode", "parse_path", "derive_keypair"]


def parse_path(path: str) -> List[int]:
    """
    Parse a derivation path like m/44'/501'/0'/0' into child indexes.
    
    Every component must be hardened (suffix ``'`` or ``h``); ed25519 has
    no public derivation.
    
    Raises:
        DerivationError: If the path is malformed or has a non-hardened step
    """
    if not path or path in ('m', 'M'):
        return []
        
    if not (path.startswith('m/') or path.startswith('M/')):
        raise DerivationError(f"Derivation path must start with m/: {path}")
        
    indexes = []
    for component in path[2:].split('/'):
        if not (component.endswith("'") or component.endswith("h")):
            raise DerivationError(f"Only hardened derivation is supported: {component!r} in {path}")
        number = component[:-1]
        if not number.isdigit() or int(number) >= HARDENED_OFFSET:
            raise DerivationError(f"Invalid path component {component!r} in {path}")
        indexes.append(int(number) + HARDENED_OFFSET)
        
    return indexes


class HDNode:
    """
    SLIP-0010 ed25519 node.
    
    Holds the 32-byte private key and chain code in secret buffers. Nodes
    are short-lived: derive, turn the leaf into a ``Keypair``, wipe.
    """
    
    def __init__(
        self,
        private_key: SecretBytes,
        chain_code: SecretBytes,
        depth: int = 0,
        index: int = 0
    ):
        self.private_key = private_key
        self.chain_code = chain_code
        self.depth = depth
        self.index = index
        
    @classmethod
    def from_seed(cls, seed: SecretBytes) -> "HDNode":
        """Create master node from a BIP39 seed."""
        if len(seed) < 16 or len(seed) > 64:
            raise DerivationError("Seed must be between 16 and 64 bytes")
            
        h = bytearray(hmac.new(SLIP10_ED25519_CURVE, seed.reveal(), hashlib.sha512).digest())
        return cls._from_digest(h)
        
    @classmethod
    def _from_digest(cls, h: bytearray, depth: int = 0, index: int = 0) -> "HDNode":
        with SecretBytes.take(h) as digest:
            return cls(
                private_key=digest.slice(0, 32),
                chain_code=digest.slice(32, 64),
                depth=depth,
                index=index
            )
            
    def derive(self, index: int) -> "HDNode":
        """Derive hardened child node."""
        if index < HARDENED_OFFSET:
            raise DerivationError("ed25519 derivation requires hardened indexes")
            
        data = bytearray(b'\x00' + self.private_key.reveal() + index.to_bytes(4, 'big'))
        with SecretBytes.take(data) as payload:
            h = bytearray(hmac.new(self.chain_code.reveal(), payload.reveal(), hashlib.sha512).digest())
            
        return self._from_digest(h, depth=self.depth + 1, index=index)
        
    def derive_path(self, path: str) -> "HDNode":
        """
        Derive using a hardened path like m/44'/501'/0'/0'.
        
        Intermediate nodes are wiped as soon as their child exists.
        """
        node = self
        for index in parse_path(path):
            child = node.derive(index)
            if node is not self:
                node.wipe()
            node = child
        return node
        
    def to_keypair(self) -> Keypair:
        """Build a keypair from a copy of this node's private key."""
        return Keypair(self.private_key.slice(0, len(self.private_key)))
        
    def wipe(self) -> None:
        """Zero key and chain code."""
        self.private_key.wipe()
        self.chain_code.wipe()


def derive_keypair(seed: SecretBytes, path: DerivationPath) -> Keypair:
    """Derive the keypair at ``path`` from a BIP39 seed."""
    master = HDNode.from_seed(seed)
    try:
        leaf = master.derive_path(path)
        try:
            return leaf.to_keypair()
        finally:
            if leaf is not master:
                leaf.wipe()
    finally:
        master.wipe()
