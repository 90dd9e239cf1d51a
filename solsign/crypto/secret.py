"""Scoped secret buffers that are zeroed when released."""

from typing import Optional, Union

from ..exceptions import CryptoError

__all__ = ["SecretBytes", "wipe_buffer"]


def wipe_buffer(buffer: Optional[Union[bytearray, memoryview]]) -> None:
    """Overwrite a mutable buffer with zero bytes in place."""
    if buffer is None:
        return
    buffer[:] = bytes(len(buffer))


class SecretBytes:
    """
    Mutable secret buffer with guaranteed zeroing.
    
    The content lives in a single ``bytearray`` owned by this object. It is
    overwritten with zeros by ``wipe()``, on leaving a ``with`` block and when
    the object is garbage collected, whichever comes first. ``repr`` and
    ``str`` never show the content.
    
    Example:
        >>> with SecretBytes(b"\\x01" * 32) as secret:
        ...     len(secret)
        32
    """
    
    __slots__ = ("_buffer", "_wiped")
    
    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """
        Copy ``data`` into a new owned buffer.
        
        Args:
            data: Secret content; a ``bytearray`` source is left untouched,
                use ``SecretBytes.take`` to move one in instead
        """
        self._buffer = bytearray(data)
        self._wiped = False
        
    @classmethod
    def take(cls, buffer: bytearray) -> "SecretBytes":
        """Copy ``buffer`` into a new secret and wipe the source."""
        try:
            return cls(buffer)
        finally:
            wipe_buffer(buffer)
            
    @property
    def is_wiped(self) -> bool:
        """Whether the content has already been zeroed."""
        return self._wiped
        
    def reveal(self) -> bytes:
        """
        Return the content as immutable bytes for a library call.
        
        Raises:
            CryptoError: If the secret was already wiped
        """
        if self._wiped:
            raise CryptoError("Secret material has been wiped")
        return bytes(self._buffer)
        
    def slice(self, start: int, stop: int) -> "SecretBytes":
        """Return a new secret holding a copy of ``[start:stop]``."""
        if self._wiped:
            raise CryptoError("Secret material has been wiped")
        view = memoryview(self._buffer)
        try:
            return SecretBytes(view[start:stop])
        finally:
            view.release()
            
    def wipe(self) -> None:
        """Zero the buffer. Safe to call more than once."""
        wipe_buffer(self._buffer)
        self._wiped = True
        
    def __len__(self) -> int:
        return len(self._buffer)
        
    def __enter__(self) -> "SecretBytes":
        return self
        
    def __exit__(self, *exc_info: object) -> None:
        self.wipe()
        
    def __del__(self) -> None:
        # __init__ may have failed before the buffer existed
        if getattr(self, "_buffer", None) is not None:
            self.wipe()
            
    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buffer)} bytes"
        return f"SecretBytes({state})"
        
    __str__ = __repr__
