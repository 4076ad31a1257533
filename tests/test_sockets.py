import socket

import pytest

from spongenet.address import Address
from spongenet.buffer import BufferList
from spongenet.file_descriptor import FileDescriptor
from spongenet.sockets import LocalStreamSocket, ReceivedDatagram, TCPSocket, UDPSocket

LOOPBACK = "127.0.0.1"


@pytest.fixture
def closer():
    opened = []
    yield opened.append
    for fd in opened:
        if not fd.closed():
            fd.close()


def _udp_pair(closer):
    receiver = UDPSocket()
    closer(receiver)
    receiver.bind(Address(LOOPBACK, 0))
    sender = UDPSocket()
    closer(sender)
    sender.bind(Address(LOOPBACK, 0))
    return sender, receiver


def test_udp_bind_gives_port(closer):
    _, receiver = _udp_pair(closer)
    local = receiver.local_address()
    assert local.ip() == LOOPBACK
    assert local.port() > 0


def test_udp_sendto_and_recv(closer):
    sender, receiver = _udp_pair(closer)
    reads = receiver.read_count()
    writes = sender.write_count()
    sender.sendto(receiver.local_address(), b"datagram")
    got = receiver.recv()
    assert isinstance(got, ReceivedDatagram)
    assert got.payload == b"datagram"
    assert got.source_address == sender.local_address()
    assert receiver.read_count() == reads + 1
    assert sender.write_count() == writes + 1


def test_udp_sendto_buffer_list(closer):
    sender, receiver = _udp_pair(closer)
    payload = BufferList(b"head")
    payload.append(b"tail")
    sender.sendto(receiver.local_address(), payload)
    assert receiver.recv().payload == b"headtail"


def test_udp_connected_send(closer):
    sender, receiver = _udp_pair(closer)
    sender.connect(receiver.local_address())
    assert sender.peer_address() == receiver.local_address()
    sender.send(b"connected")
    assert receiver.recv().payload == b"connected"


def test_udp_oversized_datagram(closer):
    sender, receiver = _udp_pair(closer)
    sender.sendto(receiver.local_address(), b"x" * 100)
    with pytest.raises(RuntimeError):
        receiver.recv(mtu=10)


def test_tcp_connect_accept_exchange(closer):
    server = TCPSocket()
    closer(server)
    server.set_reuseaddr()
    server.bind(Address(LOOPBACK, 0))
    server.listen()
    client = TCPSocket()
    closer(client)
    client.connect(server.local_address())
    conn = server.accept()
    closer(conn)
    assert conn.peer_address() == client.local_address()
    assert client.peer_address() == server.local_address()
    client.write(b"ping")
    assert conn.read() == b"ping"
    conn.write(b"pong")
    assert client.read() == b"pong"


def test_local_stream_socket_and_shutdown(closer):
    a, b = socket.socketpair()
    left = LocalStreamSocket(FileDescriptor(a.detach()))
    right = LocalStreamSocket(FileDescriptor(b.detach()))
    closer(left)
    closer(right)
    left.write(b"hi")
    assert right.read() == b"hi"
    writes = left.write_count()
    left.shutdown(socket.SHUT_WR)
    assert left.write_count() == writes + 1
    assert right.read() == b""
    assert right.eof()


def test_shutdown_both_registers_read_and_write(closer):
    a, b = socket.socketpair()
    left = LocalStreamSocket(FileDescriptor(a.detach()))
    right = LocalStreamSocket(FileDescriptor(b.detach()))
    closer(left)
    closer(right)
    reads, writes = left.read_count(), left.write_count()
    left.shutdown(socket.SHUT_RDWR)
    assert left.read_count() == reads + 1
    assert left.write_count() == writes + 1


def test_shutdown_invalid_how(closer):
    a, b = socket.socketpair()
    left = LocalStreamSocket(FileDescriptor(a.detach()))
    closer(left)
    closer(FileDescriptor(b.detach()))
    with pytest.raises(OSError):
        left.shutdown(99)


def test_domain_mismatch(closer):
    udp = UDPSocket()
    closer(udp)
    with pytest.raises(ValueError, match="domain"):
        LocalStreamSocket(udp.duplicate())


def test_type_mismatch(closer):
    tcp = TCPSocket()
    closer(tcp)
    with pytest.raises(ValueError, match="type"):
        UDPSocket(tcp.duplicate())


def test_wrapping_existing_udp_descriptor(closer):
    raw = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    wrapped = UDPSocket(FileDescriptor(raw.detach()))
    closer(wrapped)
    wrapped.bind(Address(LOOPBACK, 0))
    assert wrapped.local_address().ip() == LOOPBACK