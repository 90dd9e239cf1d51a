"""Human-readable rendering of decoded transactions."""

from typing import Collection, List, Optional

from .crypto.keys import PublicKey
from .slots import is_empty_slot
from .types.transaction import Message, Transaction
from .utils.encoding import encode_base58

__all__ = ["account_label", "describe_transaction", "describe_signatures"]


def account_label(message: Message, index: int) -> str:
    """Base58 key for ``index``, or a lookup-table placeholder past the static keys."""
    if index < len(message.account_keys):
        return str(message.account_keys[index])
        
    offset = index - len(message.account_keys)
    for table_number, lookup in enumerate(message.address_table_lookups):
        for kind, indexes in (("writable", lookup.writable_indexes), ("readonly", lookup.readonly_indexes)):
            if offset < len(indexes):
                return f"{lookup.account_key}[{indexes[offset]}] ({kind}, lookup {table_number})"
            offset -= len(indexes)
    return f"<invalid account {index}>"


def describe_signatures(
    tx: Transaction,
    owned: Optional[Collection[PublicKey]] = None
) -> List[str]:
    """One line per signature slot: signer, state, and ownership."""
    owned = owned or ()
    lines = []
    for index, (signer, signature) in enumerate(zip(tx.message.signer_keys, tx.signatures)):
        state = "missing" if is_empty_slot(signature) else encode_base58(signature)
        mark = " (available)" if signer in owned else ""
        lines.append(f"  [{index}] {signer}{mark}: {state}")
    return lines


def describe_transaction(
    tx: Transaction,
    owned: Optional[Collection[PublicKey]] = None
) -> str:
    """
    Multi-line description of a decoded transaction.
    
    Args:
        tx: Decoded transaction
        owned: Public keys available for signing, marked in the output
        
    Returns:
        Text suitable for showing to the operator
    """
    message = tx.message
    header = message.header
    version = "legacy" if message.version is None else str(message.version)
    
    lines = [
        f"Version: {version}",
        f"Fee payer: {message.fee_payer}",
        f"Recent blockhash: {encode_base58(message.recent_blockhash)}",
        f"Signatures ({header.num_required_signatures} required):",
        *describe_signatures(tx, owned),
        f"Accounts ({len(message.account_keys)}):",
    ]
    
    for index, key in enumerate(message.account_keys):
        flags = []
        if message.is_signer(index):
            flags.append("signer")
        flags.append("writable" if message.is_writable(index) else "readonly")
        lines.append(f"  [{index}] {key} ({', '.join(flags)})")
        
    for number, lookup in enumerate(message.address_table_lookups):
        lines.append(
            f"Lookup table {number}: {lookup.account_key} "
            f"writable={list(lookup.writable_indexes)} readonly={list(lookup.readonly_indexes)}"
        )
        
    lines.append(f"Instructions ({len(message.instructions)}):")
    for number, instruction in enumerate(message.instructions):
        lines.append(f"  #{number} program {account_label(message, instruction.program_id_index)}")
        for position, account in enumerate(instruction.accounts):
            lines.append(f"      account {position}: {account_label(message, account)}")
        lines.append(f"      data ({len(instruction.data)} bytes): {instruction.data.hex() or '-'}")
        
    return "\n".join(lines)
