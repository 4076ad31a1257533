"""Ethernet addresses, headers and frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .buffer import Buffer, BufferList
from .parser import NetParser, ParseError, ParseResult, pack_u16

ETHERNET_ADDRESS_LENGTH = 6

#: The Ethernet broadcast address (ff:ff:ff:ff:ff:ff).
ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH


def ethernet_address(value) -> bytes:
    """Validate and normalise a six-byte Ethernet address."""
    raw = bytes(value)
    if len(raw) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"an Ethernet address has {ETHERNET_ADDRESS_LENGTH} bytes, got {len(raw)}")
    return raw


def read_ethernet_address(parser: NetParser) -> bytes:
    """Read a six-byte Ethernet address from a parser."""
    return bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))


def format_ethernet_address(address) -> str:
    """Printable form of an Ethernet address, e.g. ``ff:ff:ff:ff:ff:ff``."""
    return ":".join(f"{byte:02x}" for byte in bytes(address))


@dataclass
class EthernetHeader:
    """An Ethernet frame header."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPv4: ClassVar[int] = 0x800
    TYPE_ARP: ClassVar[int] = 0x806

    dst: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    src: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    type: int = 0

    def __post_init__(self):
        self.dst = ethernet_address(self.dst)
        self.src = ethernet_address(self.src)

    @classmethod
    def parse(cls, parser: NetParser) -> EthernetHeader:
        """Read the header fields from a NetParser."""
        if len(parser.buffer()) < cls.LENGTH:
            raise ParseError(ParseResult.PacketTooShort)
        dst = read_ethernet_address(parser)
        src = read_ethernet_address(parser)
        frame_type = parser.u16()
        return cls(dst=dst, src=src, type=frame_type)

    def serialize(self) -> bytes:
        """The header in wire format."""
        return self.dst + self.src + pack_u16(self.type)

    def __str__(self) -> str:
        if self.type == self.TYPE_IPv4:
            type_text = "IPv4"
        elif self.type == self.TYPE_ARP:
            type_text = "ARP"
        else:
            type_text = f"[unknown type {self.type:x}!]"
        return (
            f"dst={format_ethernet_address(self.dst)}, "
            f"src={format_ethernet_address(self.src)}, type={type_text}"
        )


@dataclass
class EthernetFrame:
    """An Ethernet frame: a header and a payload."""

    header: EthernetHeader = field(default_factory=EthernetHeader)
    payload: BufferList = field(default_factory=BufferList)

    def __post_init__(self):
        if not isinstance(self.payload, BufferList):
            self.payload = BufferList(self.payload)

    @classmethod
    def parse(cls, data) -> EthernetFrame:
        """Parse a frame from raw bytes."""
        parser = NetParser(Buffer(data))
        header = EthernetHeader.parse(parser)
        return cls(header=header, payload=BufferList(parser.buffer()))

    def serialize(self) -> BufferList:
        """The frame in wire format."""
        out = BufferList(self.header.serialize())
        out.append(self.payload)
        return out