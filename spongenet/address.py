"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import ipaddress
import socket


def _family_of(sockaddr) -> int:
    if isinstance(sockaddr, (str, bytes)):
        return socket.AF_UNIX
    if isinstance(sockaddr, tuple) and len(sockaddr) == 2:
        return socket.AF_INET
    if isinstance(sockaddr, tuple) and len(sockaddr) == 4:
        return socket.AF_INET6
    raise ValueError(f"invalid socket address: {sockaddr!r}")


class Address:
    """A socket address, normally IPv4, with conversions and DNS lookup.

    ``Address(host, port)`` with an integer port takes a dotted-quad address
    and resolves nothing; ``Address(hostname, service)`` with a string service
    resolves both through the system resolver.
    """

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, host: str, service=0):
        if isinstance(service, int):
            flags = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
            service_text = str(service)
        else:
            flags = socket.AI_ALL
            service_text = service
        try:
            results = socket.getaddrinfo(host, service_text, socket.AF_INET, 0, 0, flags)
        except socket.gaierror as exc:
            raise socket.gaierror(
                exc.errno, f"getaddrinfo({host}, {service_text}): {exc.strerror}"
            ) from exc
        if not results:
            raise OSError("getaddrinfo returned successfully but with no results")
        family, _, _, _, sockaddr = results[0]
        self._family = family
        self._sockaddr = sockaddr

    @classmethod
    def from_sockaddr(cls, sockaddr) -> Address:
        """Build an Address from a socket-module address value."""
        address = cls.__new__(cls)
        address._family = _family_of(sockaddr)
        address._sockaddr = sockaddr
        return address

    def sockaddr(self):
        """The address in the form the socket module expects."""
        return self._sockaddr

    def ip_port(self) -> tuple[str, int]:
        """The numeric IP address string and the port."""
        if self._family not in (socket.AF_INET, socket.AF_INET6):
            raise ValueError("ip_port called on a non-IP address")
        flags = socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
        host, port = socket.getnameinfo(self._sockaddr, flags)
        return host, int(port)

    def ip(self) -> str:
        """The numeric IP address string."""
        return self.ip_port()[0]

    def port(self) -> int:
        """The port number."""
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """The IPv4 address as an integer in host byte order."""
        if self._family != socket.AF_INET:
            raise ValueError("ipv4_numeric called on non-IPV4 address")
        return int(ipaddress.IPv4Address(self._sockaddr[0]))

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> Address:
        """Build an Address (port 0) from a 32-bit numeric IPv4 address."""
        return cls.from_sockaddr((str(ipaddress.IPv4Address(ip_address & 0xFFFFFFFF)), 0))

    def __str__(self) -> str:
        host, port = self.ip_port()
        return f"{host}:{port}"

    def __repr__(self) -> str:
        return f"Address({self._sockaddr!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))