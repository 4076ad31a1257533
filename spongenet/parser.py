"""Reading and writing big-endian integers in network packets."""

from __future__ import annotations

import enum

from .buffer import Buffer


class ParseResult(enum.Enum):
    """The outcome of parsing a datagram, segment, frame or message."""

    NoError = 0
    BadChecksum = 1
    PacketTooShort = 2
    WrongIPVersion = 3
    HeaderTooShort = 4
    TruncatedPacket = 5
    Unsupported = 6

    def __str__(self) -> str:
        return self.name


class ParseError(Exception):
    """Raised when a packet cannot be parsed; carries the ParseResult."""

    def __init__(self, result, message=None):
        self.result = ParseResult(result)
        super().__init__(message if message is not None else self.result.name)


class NetParser:
    """Consumes network-byte-order integers from the front of a Buffer."""

    def __init__(self, buffer):
        self._buffer = Buffer(buffer)

    def buffer(self) -> Buffer:
        """The bytes not yet consumed."""
        return Buffer(self._buffer)

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            raise ParseError(ParseResult.PacketTooShort)

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        value = int.from_bytes(self._buffer[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u32(self) -> int:
        """Parse a 32-bit integer."""
        return self._parse_int(4)

    def u16(self) -> int:
        """Parse a 16-bit integer."""
        return self._parse_int(2)

    def u8(self) -> int:
        """Parse an 8-bit integer."""
        return self._parse_int(1)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes."""
        self._check_size(n)
        self._buffer.remove_prefix(n)


def pack_u32(value: int) -> bytes:
    """Encode the low 32 bits of ``value`` in network byte order."""
    return (value & 0xFFFFFFFF).to_bytes(4, "big")


def pack_u16(value: int) -> bytes:
    """Encode the low 16 bits of ``value`` in network byte order."""
    return (value & 0xFFFF).to_bytes(2, "big")


def pack_u8(value: int) -> bytes:
    """Encode the low 8 bits of ``value``."""
    return (value & 0xFF).to_bytes(1, "big")