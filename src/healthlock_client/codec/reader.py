"""
Binary Reader

Bounds-checked cursor over an account buffer, and the field decoders built on
it. All integers are little-endian; every length-prefixed field carries a u32
count.
"""

import builtins
import struct
from typing import Callable, List, Optional, TypeVar, Union

from ..runtime.errors import (
    FieldTooLargeError,
    InvalidUtf8Error,
    InvalidValueError,
    OutOfBoundsError,
)
from ..runtime.identifier import IDENTIFIER_SIZE, Identifier
from .hashes import DISCRIMINATOR_SIZE

T = TypeVar("T")

Buffer = Union[builtins.bytes, bytearray, memoryview]


class Cursor:
    """
    Position-tracked view over an immutable byte buffer.

    Every read validates ``offset + n <= len(buffer)`` before slicing, so a
    truncated or corrupt buffer surfaces as a typed error, never as an
    ``IndexError`` or ``struct.error``.
    """

    def __init__(self, buf: Buffer, offset: int = DISCRIMINATOR_SIZE):
        """
        Initialize cursor with byte buffer.

        Args:
            buf: Byte buffer to read from
            offset: Starting offset, past the discriminator by default
        """
        self._buf = builtins.bytes(buf)
        if offset < 0 or offset > len(self._buf):
            raise OutOfBoundsError(None, offset, 0, len(self._buf))
        self._off = offset
        self._field_starts = {}

    @property
    def offset(self) -> int:
        return self._off

    @property
    def length(self) -> int:
        return len(self._buf)

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    @property
    def eof(self) -> bool:
        return self._off >= len(self._buf)

    def field_offset(self, field: str) -> Optional[int]:
        """Offset where the first read of ``field`` started, if it was read."""
        return self._field_starts.get(field)

    def _require(self, n: int, field: Optional[str]) -> None:
        if field is not None:
            self._field_starts.setdefault(field, self._off)
        if n < 0 or self._off + n > len(self._buf):
            raise OutOfBoundsError(field, self._off, n, len(self._buf))

    def read_fixed(self, n: int, field: Optional[str] = None) -> builtins.bytes:
        """
        Read the next n bytes.

        Raises:
            OutOfBoundsError: if fewer than n bytes remain
        """
        self._require(n, field)
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def _unpack(self, fmt: str, size: int, field: Optional[str]) -> int:
        self._require(size, field)
        val = struct.unpack_from(fmt, self._buf, self._off)[0]
        self._off += size
        return val

    def read_u8(self, field: Optional[str] = None) -> int:
        return self._unpack("<B", 1, field)

    def read_u16_le(self, field: Optional[str] = None) -> int:
        return self._unpack("<H", 2, field)

    def read_u32_le(self, field: Optional[str] = None) -> int:
        return self._unpack("<I", 4, field)

    def read_u64_le(self, field: Optional[str] = None) -> int:
        return self._unpack("<Q", 8, field)

    def read_i64_le(self, field: Optional[str] = None) -> int:
        return self._unpack("<q", 8, field)

    def read_length_prefixed_bytes(self, field: Optional[str] = None) -> builtins.bytes:
        """
        Read a u32 byte count followed by that many bytes.

        Raises:
            FieldTooLargeError: if the declared count exceeds the bytes remaining
        """
        start = self._off
        n = self.read_u32_le(field)
        if n > self.remaining:
            raise FieldTooLargeError(field, start, n, self.remaining)
        return self.read_fixed(n, field)


class FieldReader(Cursor):
    """Typed field decoders for the account layout family."""

    def read_identifier(self, field: Optional[str] = None) -> Identifier:
        return Identifier(self.read_fixed(IDENTIFIER_SIZE, field))

    def read_bool(self, field: Optional[str] = None) -> bool:
        start = self._off
        val = self.read_u8(field)
        if val not in (0, 1):
            raise InvalidValueError(field, start, val)
        return val == 1

    def read_string(self, field: Optional[str] = None) -> str:
        """Read a length-prefixed string; invalid UTF-8 is an error, not a replacement."""
        start = self._off
        raw = self.read_length_prefixed_bytes(field)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(field, start, cause=e) from e

    def read_vector(
        self,
        element_decoder: Callable[["FieldReader"], T],
        field: Optional[str] = None,
        element_size: Optional[int] = None,
    ) -> List[T]:
        """
        Read a u32 element count followed by that many elements.

        Args:
            element_decoder: Called once per element with this reader
            field: Field name for error context
            element_size: Fixed wire width of one element, when known. Used
                to reject an absurd count before decoding any element.

        Raises:
            FieldTooLargeError: if count * element_size exceeds the bytes remaining
        """
        start = self._off
        count = self.read_u32_le(field)
        if element_size is not None and count * element_size > self.remaining:
            raise FieldTooLargeError(field, start, count * element_size, self.remaining)
        return [element_decoder(self) for _ in range(count)]
