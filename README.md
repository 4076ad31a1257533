# spongenet

Building blocks for a user-space TCP/IP stack.

spongenet provides the parts that sit around a TCP implementation:
byte buffers whose front can be dropped without copying, network-order
parsing, the Internet checksum, and the wire formats of Ethernet, ARP, IPv4
and TCP. It also has small wrappers over file descriptors, sockets, TUN/TAP
devices and a `poll`-based event loop, and adapters that carry TCP segments
over UDP or inside IPv4 datagrams.

It has no third-party dependencies.

## Installation

```
pip install spongenet
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "spongenet[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `spongenet.buffer` | `Buffer`, `BufferList`, `BufferViewList`: shared bytes whose front can be dropped without copying |
| `spongenet.parser` | `NetParser`, `ParseResult`, `ParseError`, `pack_u8` / `pack_u16` / `pack_u32` |
| `spongenet.util` | `InternetChecksum`, `timestamp_ms`, `get_random_generator`, `format_hexdump`, `hexdump` |
| `spongenet.address` | `Address`: an IPv4 address and port, with name resolution |
| `spongenet.ethernet` | `EthernetHeader`, `EthernetFrame`, `format_ethernet_address`, `ETHERNET_BROADCAST` |
| `spongenet.arp` | `ARPMessage` |
| `spongenet.ipv4` | `IPv4Header`, `IPv4Datagram` (also available as `InternetDatagram`) |
| `spongenet.tcp_header` | `TCPHeader` |
| `spongenet.tcp_segment` | `TCPSegment` |
| `spongenet.tcp_config` | `TCPConfig`, `FdAdapterConfig` |
| `spongenet.file_descriptor` | `FileDescriptor` |
| `spongenet.sockets` | `Socket`, `UDPSocket`, `TCPSocket`, `LocalStreamSocket`, `ReceivedDatagram` |
| `spongenet.eventloop` | `EventLoop`, `Direction`, `EventLoopResult` |
| `spongenet.tun` | `TunTapFD`, `TunFD`, `TapFD` (Linux) |
| `spongenet.fd_adapter` | `FdAdapterBase`, `TCPOverUDPSocketAdapter`, `LossyFdAdapter` |
| `spongenet.tcp_over_ip` | `TCPOverIPv4Adapter`, `TCPOverIPv4OverTunFdAdapter` |
| `spongenet.tcp_state` | `TCPState`, `State`, `SenderSummary`, `ReceiverSummary` |

## Examples

Build a TCP segment, serialize it, and parse it back:

```python
from spongenet.tcp_segment import TCPSegment

seg = TCPSegment()
seg.header.syn = True
seg.header.win = 1000
wire = seg.serialize().concatenate()

again = TCPSegment.parse(wire)
assert again.header == seg.header
assert again.length_in_sequence_space() == 1
```

`serialize()` returns a `BufferList`; `concatenate()` turns it into `bytes`.
Both `serialize()` and `parse()` take an optional pseudo-header sum
(`IPv4Header.pseudo_cksum()`) when the segment travels inside IPv4.

Parsing raises `ParseError` when the input is malformed. Its `result`
attribute holds the `ParseResult` that says why, for example
`ParseResult.BadChecksum` or `ParseResult.PacketTooShort`:

```python
from spongenet.parser import ParseError, ParseResult
from spongenet.ipv4 import IPv4Datagram

try:
    IPv4Datagram.parse(b"\x45\x00")
except ParseError as exc:
    assert exc.result is ParseResult.PacketTooShort
```

Compute an Internet checksum:

```python
from spongenet.util import InternetChecksum

check = InternetChecksum()
check.add(b"\x45\x00\x00\x1c")
print(hex(check.value()))
```

Over data that already holds a correct checksum field, `value()` is zero.

Print a hex dump:

```python
from spongenet.util import format_hexdump

print(format_hexdump(b"hello, world", indent=2))
```

Addresses: `Address("10.0.0.1", 80)` takes a numeric address and an integer
port and resolves nothing; `Address("localhost", "http")` resolves the host
and service name through the system resolver.

```python
from spongenet.address import Address

addr = Address("10.0.0.1", 80)
assert str(addr) == "10.0.0.1:80"
assert addr.ipv4_numeric() == 0x0A000001
```

Compare the official TCP state names with sender and receiver summaries:

```python
from spongenet.tcp_state import State, TCPState

print(TCPState.from_state(State.ESTABLISHED).name())
```

A `TCPState` can also be built directly from a `SenderSummary`, a
`ReceiverSummary` and the `active` and `linger_after_streams_finish` flags;
an inactive state never lingers.

## Adapters and the event loop

`TCPOverUDPSocketAdapter` and `TCPOverIPv4OverTunFdAdapter` read and write
`TCPSegment` objects for one connection. Each keeps an `FdAdapterConfig` in
its `config` attribute and a `listening` flag: while listening, the first SYN
without RST fixes the peer, and later segments from anyone else are ignored.
`LossyFdAdapter` wraps either one and drops reads and writes at random, using
the `loss_rate_dn` and `loss_rate_up` values of the configuration as rates out
of 65536.

`EventLoop.add_rule` accepts a `FileDescriptor` or one of these adapters, a
`Direction`, a callback, and optional `interest` and `cancel` functions.
`wait_next_event(timeout_ms)` polls once and returns an `EventLoopResult`.
A callback that neither reads nor writes its descriptor while its rule is
still interested raises `RuntimeError`, since the loop would otherwise spin.

## What this package does not do

spongenet contains no TCP sender, receiver or connection state machine, and
no byte stream or reassembler. Nothing in it opens or runs a TCP connection
by itself: the adapters and the event loop move segments, but deciding what
to send is left to code you supply. `TCPState` can therefore only be built
from an official state name or from summaries you pass in. There is also no
Ethernet network interface with ARP resolution; `EthernetFrame` and
`ARPMessage` only parse and serialize. There is no command-line program.

## Platform notes

The socket, event-loop and TUN/TAP parts need a POSIX system. TUN/TAP devices
are Linux only, and the named device must already exist and be open to your
user.