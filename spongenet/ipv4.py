"""IPv4 headers and datagrams."""

from __future__ import annotations

import dataclasses
import ipaddress
from dataclasses import dataclass, field
from typing import ClassVar

from .buffer import Buffer, BufferList
from .parser import NetParser, ParseError, ParseResult, pack_u8, pack_u16, pack_u32
from .util import InternetChecksum


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _format_ipv4(value: int) -> str:
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


@dataclass
class IPv4Header:
    """An IPv4 datagram header; IP options are not supported."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = 5
    tos: int = 0
    len: int = 0
    id: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = 128
    proto: int = 6
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> IPv4Header:
        """Read and validate the header fields from a NetParser."""
        original = bytes(parser.buffer())
        data_size = len(original)
        if data_size < cls.LENGTH:
            raise ParseError(ParseResult.PacketTooShort)

        first_byte = parser.u8()
        tos = parser.u8()
        total_length = parser.u16()
        ident = parser.u16()
        fo_val = parser.u16()
        header = cls(
            ver=first_byte >> 4,
            hlen=first_byte & 0x0F,
            tos=tos,
            len=total_length,
            id=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=parser.u8(),
            proto=parser.u8(),
            cksum=parser.u16(),
            src=parser.u32(),
            dst=parser.u32(),
        )

        if data_size < 4 * header.hlen:
            raise ParseError(ParseResult.PacketTooShort)
        if header.ver != 4:
            raise ParseError(ParseResult.WrongIPVersion)
        if header.hlen < 5:
            raise ParseError(ParseResult.HeaderTooShort)
        if data_size != header.len:
            raise ParseError(ParseResult.TruncatedPacket)

        parser.remove_prefix(header.hlen * 4 - cls.LENGTH)

        check = InternetChecksum()
        check.add(original[: 4 * header.hlen])
        if check.value():
            raise ParseError(ParseResult.BadChecksum)
        return header

    def serialize(self) -> bytes:
        """The header in wire format; the checksum field is written as is."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")

        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        out = b"".join(
            (
                pack_u8((self.ver << 4) | (self.hlen & 0xF)),
                pack_u8(self.tos),
                pack_u16(self.len),
                pack_u16(self.id),
                pack_u16(fo_val),
                pack_u8(self.ttl),
                pack_u8(self.proto),
                pack_u16(self.cksum),
                pack_u32(self.src),
                pack_u32(self.dst),
            )
        )
        size = 4 * self.hlen
        return out[:size].ljust(size, b"\x00")

    def payload_length(self) -> int:
        """Length of the payload that the header announces."""
        return (self.len - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to a TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def __str__(self) -> str:
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.len:x}\n"
            f"IP id: {self.id:x}\n"
            f"Flags: df: {_bool_text(self.df)} mf: {_bool_text(self.mf)}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """A one-line human-readable summary of the header."""
        ttl_text = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.len:x}, protocol={self.proto:x}, {ttl_text}"
            f"src={_format_ipv4(self.src)}, dst={_format_ipv4(self.dst)}"
        )


@dataclass
class IPv4Datagram:
    """An IPv4 datagram: a header and a payload."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: BufferList = field(default_factory=BufferList)

    def __post_init__(self):
        if not isinstance(self.payload, BufferList):
            self.payload = BufferList(self.payload)

    @classmethod
    def parse(cls, data) -> IPv4Datagram:
        """Parse a datagram from raw bytes."""
        parser = NetParser(Buffer(data))
        header = IPv4Header.parse(parser)
        payload = BufferList(parser.buffer())
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PacketTooShort)
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """The datagram in wire format, with the header checksum computed."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram::serialize: payload is wrong size")

        header_out = dataclasses.replace(self.header, cksum=0)
        check = InternetChecksum()
        check.add(header_out.serialize())
        header_out.cksum = check.value()

        out = BufferList(header_out.serialize())
        out.append(self.payload)
        return out


InternetDatagram = IPv4Datagram