"""Fixed binary layout shared by every stored record.

Records are little-endian with an 8-byte type discriminator prefix
(`sha256("account:<TypeName>")[:8]`). Strings and lists carry a u32 length
prefix. Encoded payloads are zero-padded to the record's allocated space.
"""

from __future__ import annotations

import hashlib
import struct

from solplace.core.errors import InvalidAccount

DISCRIMINATOR_LENGTH = 8


def account_discriminator(type_name: str) -> bytes:
    """Return the 8-byte discriminator for a record type."""
    return hashlib.sha256(f"account:{type_name}".encode()).digest()[:DISCRIMINATOR_LENGTH]


class LayoutWriter:
    """Append-only encoder for record fields."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def raw(self, data: bytes) -> LayoutWriter:
        self._buffer.extend(data)
        return self

    def fixed(self, data: bytes, length: int) -> LayoutWriter:
        if len(data) != length:
            raise ValueError(f"Expected {length} bytes, got {len(data)}")
        self._buffer.extend(data)
        return self

    def u8(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<B", value))
        return self

    def u16(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<H", value))
        return self

    def u32(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<I", value))
        return self

    def u64(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<Q", value))
        return self

    def i32(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<i", value))
        return self

    def i64(self, value: int) -> LayoutWriter:
        self._buffer.extend(struct.pack("<q", value))
        return self

    def string(self, value: str) -> LayoutWriter:
        encoded = value.encode("utf-8")
        self.u32(len(encoded))
        self._buffer.extend(encoded)
        return self

    def getvalue(self, space: int | None = None) -> bytes:
        """Return the encoded bytes, zero-padded to `space` when given."""
        if space is None:
            return bytes(self._buffer)
        if len(self._buffer) > space:
            raise ValueError(f"Encoded record ({len(self._buffer)} bytes) exceeds space {space}")
        return bytes(self._buffer) + bytes(space - len(self._buffer))


class LayoutReader:
    """Sequential decoder; any short read surfaces as `InvalidAccount`."""

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    def _take(self, length: int) -> bytes:
        end = self._offset + length
        if end > len(self._data):
            raise InvalidAccount("Invalid account: record data is truncated")
        chunk = bytes(self._data[self._offset:end])
        self._offset = end
        return chunk

    def _unpack(self, fmt: str) -> int:
        size = struct.calcsize(fmt)
        (value,) = struct.unpack(fmt, self._take(size))
        return int(value)

    def expect_discriminator(self, expected: bytes) -> None:
        if self._take(DISCRIMINATOR_LENGTH) != expected:
            raise InvalidAccount()

    def fixed(self, length: int) -> bytes:
        return self._take(length)

    def u8(self) -> int:
        return self._unpack("<B")

    def u16(self) -> int:
        return self._unpack("<H")

    def u32(self) -> int:
        return self._unpack("<I")

    def u64(self) -> int:
        return self._unpack("<Q")

    def i32(self) -> int:
        return self._unpack("<i")

    def i64(self) -> int:
        return self._unpack("<q")

    def string(self, max_length: int) -> str:
        length = self.u32()
        if length > max_length:
            raise InvalidAccount("Invalid account: string field exceeds its bound")
        try:
            return self._take(length).decode("utf-8")
        except UnicodeDecodeError as err:
            raise InvalidAccount("Invalid account: string field is not UTF-8") from err

    @property
    def offset(self) -> int:
        return self._offset
