"""Wrappers around UDP, TCP and Unix-domain stream sockets."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .address import Address
from .file_descriptor import FileDescriptor, _view_list


class Socket(FileDescriptor):
    """Base class for network sockets built on a FileDescriptor."""

    def __init__(self, domain, type, fd=None):
        if fd is None:
            raw = socket.socket(domain, type)
            super().__init__(raw.detach())
            return
        super().__init__(fd)
        with self._borrow() as sock:
            if sock.family != domain:
                raise ValueError("socket domain mismatch")
            if sock.getsockopt(socket.SOL_SOCKET, socket.SO_TYPE) != type:
                raise ValueError("socket type mismatch")

    @contextmanager
    def _borrow(self) -> Iterator[socket.socket]:
        sock = socket.socket(fileno=self.fileno())
        try:
            yield sock
        finally:
            sock.detach()

    def bind(self, address: Address) -> None:
        """Bind to a local address."""
        with self._borrow() as sock:
            sock.bind(address.sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._borrow() as sock:
            sock.connect(address.sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading, writing or both (SHUT_RD, SHUT_WR, SHUT_RDWR)."""
        with self._borrow() as sock:
            sock.shutdown(how)
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise ValueError("Socket.shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        """The address the socket is bound to."""
        with self._borrow() as sock:
            return Address.from_sockaddr(sock.getsockname())

    def peer_address(self) -> Address:
        """The address of the connected peer."""
        with self._borrow() as sock:
            return Address.from_sockaddr(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner."""
        with self._borrow() as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A received UDP payload and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self, fd=None):
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM, fd)

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raise if it is larger than ``mtu``."""
        with self._borrow() as sock:
            payload, _, flags, source = sock.recvmsg(mtu)
        if flags & socket.MSG_TRUNC:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address.from_sockaddr(source), payload)

    def _send(self, payload, destination) -> None:
        views = _view_list(payload)
        with self._borrow() as sock:
            if destination is None:
                sent = sock.sendmsg(views.as_iovecs())
            else:
                sent = sock.sendmsg(views.as_iovecs(), (), 0, destination.sockaddr())
        if sent != len(views):
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()

    def sendto(self, destination: Address, payload) -> None:
        """Send a datagram to ``destination``."""
        self._send(payload, destination)

    def send(self, payload) -> None:
        """Send a datagram to the connected address."""
        self._send(payload, None)


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self, fd=None):
        super().__init__(socket.AF_INET, socket.SOCK_STREAM, fd)

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting connections."""
        with self._borrow() as sock:
            sock.listen(backlog)

    def accept(self) -> TCPSocket:
        """Block until a connection arrives and return it."""
        self._register_read()
        with self._borrow() as sock:
            conn, _ = sock.accept()
        return TCPSocket(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket built from an existing descriptor."""

    def __init__(self, fd):
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)