"""TCP segments: a header plus a payload, with checksum handling."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from .buffer import Buffer, BufferList
from .parser import NetParser, ParseError, ParseResult
from .tcp_header import TCPHeader
from .util import InternetChecksum


@dataclass
class TCPSegment:
    """A TCP segment made of a TCPHeader and a payload Buffer."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    def __post_init__(self):
        if not isinstance(self.payload, Buffer):
            self.payload = Buffer(self.payload)

    @classmethod
    def parse(cls, data, datagram_layer_checksum: int = 0) -> TCPSegment:
        """Parse a segment, verifying the checksum.

        ``datagram_layer_checksum`` is the pseudo-header sum from the
        carrying protocol (zero when there is none).
        """
        buffer = Buffer(data)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(bytes(buffer))
        if check.value():
            raise ParseError(ParseResult.BadChecksum)

        parser = NetParser(buffer)
        header = TCPHeader.parse(parser)
        return cls(header=header, payload=parser.buffer())

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """The segment in wire format, with the checksum computed."""
        header_out = dataclasses.replace(self.header, cksum=0)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(bytes(self.payload))
        header_out.cksum = check.value()

        out = BufferList(header_out.serialize())
        out.append(self.payload)
        return out

    def length_in_sequence_space(self) -> int:
        """Payload length, plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)