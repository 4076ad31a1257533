"""Adapters that carry TCP segments over datagram sockets, optionally lossy."""

from __future__ import annotations

from typing import Optional

from .parser import ParseError
from .sockets import UDPSocket
from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment
from .util import get_random_generator


class FdAdapterBase:
    """Configuration and listening state shared by all adapters.

    ``config`` holds the addresses and loss rates; ``listening`` is true
    while the TCP connection waits for a peer to connect.
    """

    def __init__(self):
        self.config = FdAdapterConfig()
        self.listening = False

    def tick(self, ms_since_last_tick: int) -> None:
        """Called periodically as time passes; nothing to do here."""
        return None


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments carried in UDP payloads."""

    def __init__(self, sock: UDPSocket):
        super().__init__()
        self._sock = sock

    def socket(self) -> UDPSocket:
        """The underlying UDP socket."""
        return self._sock

    def _file_descriptor(self) -> UDPSocket:
        return self._sock

    def fileno(self) -> int:
        """The underlying descriptor number."""
        return self._sock.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram; return its segment if it is valid and ours.

        While listening, a SYN without RST fixes the peer as the destination
        of all later segments.
        """
        datagram = self._sock.recv()

        if not self.listening and datagram.source_address != self.config.destination:
            return None

        try:
            segment = TCPSegment.parse(datagram.payload, 0)
        except ParseError:
            return None

        if self.listening:
            if segment.header.syn and not segment.header.rst:
                self.config.destination = datagram.source_address
                self.listening = False
            else:
                return None

        return segment

    def write(self, segment: TCPSegment) -> None:
        """Set the ports of ``segment`` and send it as one UDP datagram."""
        segment.header.sport = self.config.source.port()
        segment.header.dport = self.config.destination.port()
        self._sock.sendto(self.config.destination, segment.serialize(0))


class LossyFdAdapter:
    """Wraps an adapter and drops reads and writes at random.

    The loss rates in the adapter's configuration are out of 65536.
    """

    def __init__(self, adapter, rng=None):
        self._adapter = adapter
        self._rng = rng if rng is not None else get_random_generator()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and (self._rng.getrandbits(32) & 0xFFFF) < loss

    def _file_descriptor(self):
        return self._adapter._file_descriptor()

    def fileno(self) -> int:
        """The descriptor number of the wrapped adapter."""
        return self._adapter.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, perhaps discarding the result."""
        segment = self._adapter.read()
        if self._should_drop(False):
            return None
        return segment

    def write(self, segment: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(segment)

    def set_listening(self, listening: bool) -> None:
        """Set the wrapped adapter's listening flag."""
        self._adapter.listening = listening

    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    def tick(self, ms_since_last_tick: int) -> None:
        """Pass the passage of time on to the wrapped adapter."""
        self._adapter.tick(ms_since_last_tick)