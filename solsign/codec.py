"""
Transaction wire codec.

Layout of a serialized transaction::

    compact-u16 n, n x 64-byte signatures
    message:
        [version prefix byte, v0 only]
        header (3 bytes)
        compact-u16 n, n x 32-byte account keys
        32-byte recent blockhash
        compact-u16 n, n x instruction:
            u8 program id index
            compact-u16 n, n x u8 account index
            compact-u16 n, n bytes of data
        [v0 only] compact-u16 n, n x address table lookup:
            32-byte table key
            compact-u16 n, n x u8 writable index
            compact-u16 n, n x u8 readonly index

Transactions travel as standard Base64 text.
"""

import logging
from typing import List, Tuple, Union

from .constants import (
    BLOCKHASH_LENGTH,
    MESSAGE_HEADER_LENGTH,
    PUBLIC_KEY_LENGTH,
    SIGNATURE_LENGTH,
    SUPPORTED_MESSAGE_VERSIONS,
    VERSION_PREFIX_MASK,
)
from .crypto.keys import PublicKey
from .exceptions import MalformedError, ValidationError
from .types.common import Base64Str, BlockhashBytes, BytesLike, SignatureBytes
from .types.transaction import (
    AddressTableLookup,
    CompiledInstruction,
    Message,
    MessageHeader,
    Transaction,
)
from .utils.encoding import (
    decode_base64,
    decode_compact_u16,
    encode_base64,
    encode_compact_u16,
)
from .utils.validation import validate_u8

__all__ = [
    "decode",
    "encode",
    "serialize",
    "deserialize",
    "serialize_message",
    "message_bytes",
]

logger = logging.getLogger(__name__)


class _Reader:
    """Cursor over raw transaction bytes."""
    
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0
        
    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset
        
    def read(self, length: int, what: str) -> bytes:
        if length > self.remaining:
            raise ValidationError(
                f"Truncated {what}: need {length} bytes at offset {self.offset}, "
                f"have {self.remaining}"
            )
        chunk = self.data[self.offset:self.offset + length]
        self.offset += length
        return chunk
        
    def peek_u8(self, what: str) -> int:
        if not self.remaining:
            raise ValidationError(f"Truncated {what} at offset {self.offset}")
        return self.data[self.offset]
        
    def read_u8(self, what: str) -> int:
        return self.read(1, what)[0]
        
    def read_length(self, what: str) -> int:
        try:
            value, self.offset = decode_compact_u16(self.data, self.offset)
        except ValidationError as e:
            raise ValidationError(f"Bad length of {what}: {e.message}") from e
        return value
        
    def read_u8_array(self, what: str) -> Tuple[int, ...]:
        return tuple(self.read(self.read_length(what), what))


def _read_message(reader: _Reader) -> Message:
    version = None
    first = reader.peek_u8("message")
    if first & VERSION_PREFIX_MASK:
        reader.offset += 1
        version = first & 0x7F
        if version not in SUPPORTED_MESSAGE_VERSIONS:
            raise ValidationError(f"Unsupported message version {version}")
            
    header = MessageHeader(*reader.read(MESSAGE_HEADER_LENGTH, "message header"))
    
    key_count = reader.read_length("account keys")
    account_keys = tuple(
        PublicKey(reader.read(PUBLIC_KEY_LENGTH, f"account key {i}"))
        for i in range(key_count)
    )
    
    recent_blockhash = BlockhashBytes(reader.read(BLOCKHASH_LENGTH, "recent blockhash"))
    
    instructions = []
    for i in range(reader.read_length("instructions")):
        program_id_index = reader.read_u8(f"instruction {i} program index")
        accounts = reader.read_u8_array(f"instruction {i} accounts")
        data = reader.read(reader.read_length(f"instruction {i} data"), f"instruction {i} data")
        instructions.append(CompiledInstruction(program_id_index, accounts, data))
        
    lookups = []
    if version is not None:
        for i in range(reader.read_length("address table lookups")):
            table = PublicKey(reader.read(PUBLIC_KEY_LENGTH, f"lookup {i} table key"))
            writable = reader.read_u8_array(f"lookup {i} writable indexes")
            readonly = reader.read_u8_array(f"lookup {i} readonly indexes")
            lookups.append(AddressTableLookup(table, writable, readonly))
            
    return Message(
        header=header,
        account_keys=account_keys,
        recent_blockhash=recent_blockhash,
        instructions=tuple(instructions),
        version=version,
        address_table_lookups=tuple(lookups),
    )


def _sanitize(message: Message, signature_count: int) -> None:
    """Check structural consistency of a decoded message."""
    header = message.header
    key_count = len(message.account_keys)
    
    if signature_count != header.num_required_signatures:
        raise ValidationError(
            f"Transaction has {signature_count} signature slot(s) but the header "
            f"requires {header.num_required_signatures}"
        )
    if header.num_required_signatures == 0:
        raise ValidationError("Transaction has no fee payer")
    if key_count == 0:
        raise ValidationError("Message has no account keys")
    if len(set(message.account_keys)) != key_count:
        raise ValidationError("Duplicate account key")
    if header.num_required_signatures + header.num_readonly_unsigned_accounts > key_count:
        raise ValidationError(
            f"Header describes more accounts than the {key_count} account key(s) present"
        )
    if header.num_readonly_signed_accounts >= header.num_required_signatures:
        raise ValidationError("Every signer is read-only; the fee payer must be writable")
        
    total = message.total_account_count
    for i, instruction in enumerate(message.instructions):
        for index in (instruction.program_id_index, *instruction.accounts):
            if index >= total:
                raise ValidationError(
                    f"Instruction {i} references account {index}; only {total} exist"
                )


def deserialize(raw: BytesLike) -> Transaction:
    """
    Parse raw transaction bytes.
    
    Args:
        raw: Serialized transaction
        
    Returns:
        Decoded Transaction
        
    Raises:
        MalformedError: On truncation, an inconsistent compact-u16 length, a
            signature count that disagrees with the header, trailing bytes,
            or any out-of-range account reference
    """
    reader = _Reader(bytes(raw))
    try:
        signatures: List[SignatureBytes] = [
            SignatureBytes(reader.read(SIGNATURE_LENGTH, f"signature {i}"))
            for i in range(reader.read_length("signatures"))
        ]
        message = _read_message(reader)
        if reader.remaining:
            raise ValidationError(f"{reader.remaining} unexpected trailing byte(s)")
        _sanitize(message, len(signatures))
    except ValidationError as e:
        raise MalformedError(f"Malformed transaction: {e.message}") from e
        
    logger.debug(
        "Decoded transaction: %d signer(s), %d account(s), %d instruction(s)",
        message.header.num_required_signatures,
        len(message.account_keys),
        len(message.instructions),
    )
    return Transaction(signatures=signatures, message=message)


def decode(text: Union[str, bytes]) -> Transaction:
    """
    Decode a Base64 transaction.
    
    Raises:
        MalformedError: If the text is not strict Base64 or the bytes are not
            a well-formed transaction
    """
    try:
        raw = decode_base64(text)
    except ValidationError as e:
        raise MalformedError(e.message) from e
    return deserialize(raw)


def serialize_message(message: Message) -> bytes:
    """Serialize the message section."""
    s = bytearray()
    
    if message.version is not None:
        s.append(VERSION_PREFIX_MASK | message.version)
        
    s.extend(message.header.bytes)
    
    s.extend(encode_compact_u16(len(message.account_keys)))
    for key in message.account_keys:
        s.extend(key.bytes)
        
    if len(message.recent_blockhash) != BLOCKHASH_LENGTH:
        raise ValidationError(f"Blockhash must be {BLOCKHASH_LENGTH} bytes")
    s.extend(message.recent_blockhash)
    
    s.extend(encode_compact_u16(len(message.instructions)))
    for instruction in message.instructions:
        s.append(validate_u8(instruction.program_id_index, "Program id index"))
        s.extend(encode_compact_u16(len(instruction.accounts)))
        s.extend(validate_u8(index, "Account index") for index in instruction.accounts)
        s.extend(encode_compact_u16(len(instruction.data)))
        s.extend(instruction.data)
        
    if message.version is not None:
        s.extend(encode_compact_u16(len(message.address_table_lookups)))
        for lookup in message.address_table_lookups:
            s.extend(lookup.account_key.bytes)
            s.extend(encode_compact_u16(len(lookup.writable_indexes)))
            s.extend(validate_u8(index, "Lookup index") for index in lookup.writable_indexes)
            s.extend(encode_compact_u16(len(lookup.readonly_indexes)))
            s.extend(validate_u8(index, "Lookup index") for index in lookup.readonly_indexes)
            
    return bytes(s)


def message_bytes(tx: Transaction) -> bytes:
    """
    Bytes that signatures are computed and verified over.
    
    This is everything after the signature array, never the signatures.
    """
    return serialize_message(tx.message)


def serialize(tx: Transaction) -> bytes:
    """
    Serialize a transaction to wire bytes.
    
    Raises:
        ValidationError: If the signature list does not match the header or
            a value does not fit its wire field
    """
    if len(tx.signatures) != tx.message.header.num_required_signatures:
        raise ValidationError(
            f"Transaction has {len(tx.signatures)} signature slot(s) but the header "
            f"requires {tx.message.header.num_required_signatures}"
        )
        
    s = bytearray(encode_compact_u16(len(tx.signatures)))
    for signature in tx.signatures:
        if len(signature) != SIGNATURE_LENGTH:
            raise ValidationError(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
        s.extend(signature)
    s.extend(message_bytes(tx))
    return bytes(s)


def encode(tx: Transaction) -> Base64Str:
    """Serialize a transaction and encode it as Base64 text."""
    return encode_base64(serialize(tx))
