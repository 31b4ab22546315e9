"""Cursor over little-endian account data.

Implements the handful of Borsh primitives used by solarex layouts: fixed
width unsigned integers, bools, 32-byte keys, option tags and u32-counted
vectors. Every read is bounds checked and raises MalformedAccountError.
"""

import struct
from collections.abc import Callable
from typing import TypeVar

from solarex.domain.shared.error import MalformedAccountError
from solarex.domain.shared.model.pubkey import PUBKEY_LENGTH, PublicKeyString, pubkey_from_bytes

T = TypeVar("T")

# Byte width -> struct format for unsigned little-endian integers
_UNSIGNED_FORMATS = {1: "<B", 2: "<H", 4: "<I", 8: "<Q"}


class AccountReader:
    """Sequential reader over a byte buffer."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = data
        self.offset = offset

    def remaining(self) -> int:
        return len(self._data) - self.offset

    def _take(self, size: int) -> bytes:
        if size < 0 or self.offset + size > len(self._data):
            raise MalformedAccountError(
                f"Need {size} bytes at offset {self.offset}, have {self.remaining()}",
                offset=self.offset,
            )
        chunk = self._data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def unsigned(self, width: int) -> int:
        """Read an unsigned integer of `width` bytes (1, 2, 4 or 8)."""
        fmt = _UNSIGNED_FORMATS.get(width)
        if fmt is None:
            raise MalformedAccountError(f"Unsupported integer width {width}", offset=self.offset)
        (value,) = struct.unpack(fmt, self._take(width))
        return value

    def u8(self) -> int:
        return self.unsigned(1)

    def u32(self) -> int:
        return self.unsigned(4)

    def u64(self) -> int:
        return self.unsigned(8)

    def boolean(self) -> bool:
        return self.u8() != 0

    def pubkey(self) -> PublicKeyString:
        return pubkey_from_bytes(self._take(PUBKEY_LENGTH))

    def rest(self) -> bytes:
        """Consume and return everything left in the buffer."""
        return self._take(self.remaining())

    def option(self, read: Callable[[], T]) -> T | None:
        """Read an option tag, then the value if the tag is set."""
        tag = self.u8()
        match tag:
            case 0:
                return None
            case 1:
                return read()
            case _:
                raise MalformedAccountError(f"Invalid option tag {tag}", offset=self.offset - 1)

    def vec(self, read: Callable[[], T]) -> list[T]:
        """Read a u32 count followed by that many items."""
        count = self.u32()
        # Every item is at least one byte, a larger count cannot fit
        if count > self.remaining():
            raise MalformedAccountError(
                f"Vector length {count} exceeds remaining {self.remaining()} bytes",
                offset=self.offset,
            )
        return [read() for _ in range(count)]
