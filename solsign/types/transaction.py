"""Transaction-related type definitions for solsign."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..crypto.keys import PublicKey
from ..types.common import BlockhashBytes, SignatureBytes
from ..utils.validation import validate_u8

__all__ = [
    "MessageHeader",
    "CompiledInstruction",
    "AddressTableLookup",
    "Message",
    "Transaction",
]


@dataclass(frozen=True)
class MessageHeader:
    """Counts that partition the account key list."""
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int
    
    @property
    def bytes(self) -> bytes:
        """
        Get header as its 3 wire bytes.

        Raises:
            ValidationError: If a count does not fit in one byte
        """
        return bytes([
            validate_u8(self.num_required_signatures, "Required signature count"),
            validate_u8(self.num_readonly_signed_accounts, "Readonly signed count"),
            validate_u8(self.num_readonly_unsigned_accounts, "Readonly unsigned count"),
        ])


@dataclass(frozen=True)
class CompiledInstruction:
    """
    Instruction with accounts referenced by index.
    
    ``program_id_index`` and every entry of ``accounts`` index into the
    message's account list (static keys first, then lookup-table keys for
    versioned messages).
    """
    program_id_index: int
    accounts: Tuple[int, ...] = ()
    data: bytes = b""


@dataclass(frozen=True)
class AddressTableLookup:
    """Accounts loaded from an on-chain address lookup table (v0 messages)."""
    account_key: PublicKey
    writable_indexes: Tuple[int, ...] = ()
    readonly_indexes: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Message:
    """
    The signed part of a transaction.
    
    ``version`` is None for legacy messages and the version number for
    versioned messages, which may also carry address table lookups.
    """
    header: MessageHeader
    account_keys: Tuple[PublicKey, ...]
    recent_blockhash: BlockhashBytes
    instructions: Tuple[CompiledInstruction, ...] = ()
    version: Optional[int] = None
    address_table_lookups: Tuple[AddressTableLookup, ...] = ()
    
    @property
    def fee_payer(self) -> PublicKey:
        """Account at index 0, which pays fees."""
        return self.account_keys[0]
        
    @property
    def signer_keys(self) -> Tuple[PublicKey, ...]:
        """Accounts that must sign, in slot order."""
        return self.account_keys[:self.header.num_required_signatures]
        
    @property
    def total_account_count(self) -> int:
        """Static keys plus every key loaded through lookup tables."""
        loaded = sum(
            len(lookup.writable_indexes) + len(lookup.readonly_indexes)
            for lookup in self.address_table_lookups
        )
        return len(self.account_keys) + loaded
        
    def is_signer(self, index: int) -> bool:
        """Check if the account at ``index`` must sign."""
        return index < self.header.num_required_signatures
        
    def is_writable(self, index: int) -> bool:
        """Check if the static account at ``index`` is writable."""
        header = self.header
        if index < header.num_required_signatures:
            return index < header.num_required_signatures - header.num_readonly_signed_accounts
        return index < len(self.account_keys) - header.num_readonly_unsigned_accounts


@dataclass
class Transaction:
    """
    Decoded transaction: signature slots plus message.
    
    ``signatures`` is positionally parallel to ``message.signer_keys``; an
    all-zero entry marks a slot that has not been signed yet. Only the
    signature list is mutable.
    """
    signatures: List[SignatureBytes]
    message: Message
