"""Loading keypairs from Solana CLI keypair files."""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Union

from .constants import KEYPAIR_FILE_LENGTH
from .crypto.keys import Keypair
from .crypto.secret import wipe_buffer
from .exceptions import FileError, ValidationError

__all__ = ["load_keypair", "load_keypairs"]

logger = logging.getLogger(__name__)


def load_keypair(path: Union[str, Path]) -> Keypair:
    """
    Load a keypair file written by ``solana-keygen``.
    
    The file holds a JSON array of 64 integers: the 32-byte seed followed
    by the 32-byte public key.
    
    Args:
        path: Keypair file location
        
    Returns:
        Loaded Keypair
        
    Raises:
        FileError: If the file cannot be read or is not a valid keypair;
            the message never contains file content
    """
    path = Path(path)
    raw = bytearray()
    secret = bytearray()
    try:
        try:
            with open(path, "rb") as handle:
                raw = bytearray(handle.read())
        except OSError as e:
            raise FileError(path, e.strerror or type(e).__name__) from None
            
        try:
            values = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise FileError(path, "not a JSON array of bytes") from None
            
        if not isinstance(values, list) or len(values) != KEYPAIR_FILE_LENGTH:
            raise FileError(path, f"expected a JSON array of {KEYPAIR_FILE_LENGTH} bytes")
        if not all(isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255 for v in values):
            raise FileError(path, "array entries must be integers in range 0..255")
            
        secret = bytearray(values)
        values[:] = [0] * len(values)
        try:
            keypair = Keypair.from_secret_key(secret)
        except ValidationError as e:
            raise FileError(path, e.message) from None
    finally:
        wipe_buffer(raw)
        wipe_buffer(secret)
        
    logger.info("Loaded key %s from %s", keypair.public_key, path)
    return keypair


def load_keypairs(paths: Iterable[Union[str, Path]]) -> List[Keypair]:
    """
    Load several keypair files, all or nothing.
    
    Raises:
        FileError: On the first unreadable file; keys loaded before it are
            wiped
    """
    keypairs: List[Keypair] = []
    try:
        for path in paths:
            keypairs.append(load_keypair(path))
    except FileError:
        for keypair in keypairs:
            keypair.wipe()
        raise
    return keypairs
