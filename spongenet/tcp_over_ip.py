"""Carrying TCP segments inside IPv4 datagrams, and over TUN devices."""

from __future__ import annotations

import ipaddress
from typing import Optional

from .address import Address
from .fd_adapter import FdAdapterBase
from .file_descriptor import FileDescriptor
from .ipv4 import IPv4Datagram, IPv4Header
from .parser import ParseError
from .tcp_segment import TCPSegment


def _dotted(value: int) -> str:
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Converts between TCP segments and IPv4 datagrams for one connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the TCP segment in ``ip_dgram`` if it is valid and ours.

        While listening, a SYN without RST fixes the local and peer
        addresses and ports used to filter later datagrams.
        """
        header = ip_dgram.header
        config = self.config

        # binding to 0.0.0.0 is allowed; replies then come from the address contacted
        if not self.listening and header.dst != config.source.ipv4_numeric():
            return None
        if not self.listening and header.src != config.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            segment = TCPSegment.parse(ip_dgram.payload.concatenate(), header.pseudo_cksum())
        except ParseError:
            return None

        if segment.header.dport != config.source.port():
            return None

        if self.listening:
            if segment.header.syn and not segment.header.rst:
                config.source = Address(_dotted(header.dst), config.source.port())
                config.destination = Address(_dotted(header.src), segment.header.sport)
                self.listening = False
            else:
                return None

        if segment.header.sport != config.destination.port():
            return None

        return segment

    def wrap_tcp_in_ip(self, segment: TCPSegment) -> IPv4Datagram:
        """Set the ports of ``segment`` and wrap it in an IPv4 datagram."""
        config = self.config
        segment.header.sport = config.source.port()
        segment.header.dport = config.destination.port()

        ip_dgram = IPv4Datagram()
        ip_dgram.header.src = config.source.ipv4_numeric()
        ip_dgram.header.dst = config.destination.ipv4_numeric()
        ip_dgram.header.len = (
            ip_dgram.header.hlen * 4 + segment.header.doff * 4 + len(segment.payload)
        ) & 0xFFFF

        ip_dgram.payload = segment.serialize(ip_dgram.header.pseudo_cksum())
        return ip_dgram


class TCPOverIPv4OverTunFdAdapter(TCPOverIPv4Adapter):
    """Reads and writes TCP-carrying IPv4 datagrams on a TUN device."""

    def __init__(self, tun: FileDescriptor):
        super().__init__()
        self._tun = tun

    def _file_descriptor(self) -> FileDescriptor:
        return self._tun

    def fileno(self) -> int:
        """The descriptor number of the TUN device."""
        return self._tun.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Read one datagram and return its segment if it is valid and ours."""
        try:
            ip_dgram = IPv4Datagram.parse(self._tun.read())
        except ParseError:
            return None
        return self.unwrap_tcp_in_ip(ip_dgram)

    def write(self, segment: TCPSegment) -> None:
        """Wrap ``segment`` in an IPv4 datagram and write it to the device."""
        self._tun.write(self.wrap_tcp_in_ip(segment).serialize())