"""
Binary Writer

Inverse of the reader: produces byte-exact account buffers. Used to build
fixtures and for round-trip checks of the decoders.
"""

import builtins
import struct
from typing import Callable, Iterable, TypeVar

from ..runtime.identifier import Identifier

T = TypeVar("T")


class AccountWriter:
    """Little-endian account writer with u32 length prefixes."""

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb = bytearray()

    def u8(self, v: int) -> None:
        self._bb.extend(struct.pack("<B", v))

    def u16le(self, v: int) -> None:
        self._bb.extend(struct.pack("<H", v))

    def u32le(self, v: int) -> None:
        self._bb.extend(struct.pack("<I", v))

    def u64le(self, v: int) -> None:
        self._bb.extend(struct.pack("<Q", v))

    def i64le(self, v: int) -> None:
        self._bb.extend(struct.pack("<q", v))

    def bool(self, v: bool) -> None:
        self.u8(1 if v else 0)

    def bytes(self, v: bytes) -> None:
        """Write raw bytes without length prefix."""
        self._bb.extend(v)

    def identifier(self, v: Identifier) -> None:
        self.bytes(v.to_bytes())

    def len_prefixed_bytes(self, v: builtins.bytes) -> None:
        self.u32le(len(v))
        self.bytes(v)

    def string(self, s: str) -> None:
        self.len_prefixed_bytes(s.encode("utf-8"))

    def vector(self, items: Iterable[T], encode_element: Callable[["AccountWriter", T], None]) -> None:
        items = list(items)
        self.u32le(len(items))
        for item in items:
            encode_element(self, item)

    def to_bytes(self) -> builtins.bytes:
        """Return accumulated bytes as immutable bytes object."""
        return builtins.bytes(self._bb)
