"""Checksums, timing, random numbers and hex dumps."""

from __future__ import annotations

import os
import random
import sys
import time

_PROGRAM_START = time.monotonic()


def timestamp_ms() -> int:
    """Milliseconds elapsed since the module was loaded."""
    return int((time.monotonic() - _PROGRAM_START) * 1000)


def get_random_generator() -> random.Random:
    """A Mersenne Twister generator seeded from the system entropy source."""
    seed = int.from_bytes(os.urandom(624 * 4), "big")
    return random.Random(seed)


class InternetChecksum:
    """The Internet checksum, usable to compute or to verify a checksum.

    Over data holding a correct checksum field the value is zero.
    """

    def __init__(self, initial_sum: int = 0):
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data) -> None:
        """Add bytes (or anything convertible with bytes()) to the sum."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = bytes(data)
        raw = memoryview(data).cast("B")
        if self._parity:
            high, low = raw[1::2], raw[0::2]
        else:
            high, low = raw[0::2], raw[1::2]
        self._sum = (self._sum + (sum(high) << 8) + sum(low)) & 0xFFFFFFFF
        if len(raw) % 2:
            self._parity = not self._parity

    def value(self) -> int:
        """The checksum, in host byte order."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def format_hexdump(data, indent: int = 0) -> str:
    """Format bytes as a hex dump, sixteen bytes per line."""
    raw = bytes(data)
    prefix = " " * indent
    out: list[str] = []
    chars: list[str] = []
    for printed, byte in enumerate(raw):
        if printed % 16 == 0:
            if printed:
                out.append("    " + "".join(chars) + "\n")
                chars = []
            out.append(f"{prefix}{printed:08x}:    ")
        elif printed % 2 == 0:
            out.append(" ")
        out.append(f"{byte:02x}")
        chars.append(_printable(byte))
    remainder = (16 - len(raw) % 16) % 16
    out.append(" " * (2 * remainder + remainder // 2 + 4))
    out.append("".join(chars) or " ")
    out.append("\n\n")
    return "".join(out)


def hexdump(data, indent: int = 0, file=None) -> None:
    """Write a hex dump of ``data`` to ``file`` (standard output by default)."""
    stream = sys.stdout if file is None else file
    stream.write(format_hexdump(data, indent))
    stream.flush()