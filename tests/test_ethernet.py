import pytest

from spongenet.buffer import Buffer
from spongenet.ethernet import (
    ETHERNET_BROADCAST,
    EthernetFrame,
    EthernetHeader,
    format_ethernet_address,
)
from spongenet.parser import NetParser, ParseError, ParseResult

SRC = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x01])
DST = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x02])


def test_format_broadcast():
    assert format_ethernet_address(ETHERNET_BROADCAST) == "ff:ff:ff:ff:ff:ff"


def test_format_pads_each_byte():
    assert format_ethernet_address(SRC) == "02:00:00:00:00:01"


def test_header_wire_bytes():
    header = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    wire = header.serialize()
    assert len(wire) == EthernetHeader.LENGTH
    assert wire == DST + SRC + b"\x08\x00"


def test_header_round_trip():
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=SRC, type=EthernetHeader.TYPE_ARP)
    parsed = EthernetHeader.parse(NetParser(Buffer(header.serialize())))
    assert parsed == header


def test_header_parse_consumes_fourteen_bytes():
    header = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    parser = NetParser(Buffer(header.serialize() + b"rest"))
    EthernetHeader.parse(parser)
    assert bytes(parser.buffer()) == b"rest"


def test_header_too_short():
    with pytest.raises(ParseError) as info:
        EthernetHeader.parse(NetParser(Buffer(b"\x00" * 13)))
    assert info.value.result is ParseResult.PacketTooShort


def test_header_str_known_types():
    ipv4 = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    arp = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_ARP)
    assert str(ipv4) == "dst=02:00:00:00:00:02, src=02:00:00:00:00:01, type=IPv4"
    assert str(arp).endswith("type=ARP")


def test_header_str_unknown_type():
    header = EthernetHeader(dst=DST, src=SRC, type=0x1234)
    assert str(header).endswith("type=[unknown type 1234!]")


def test_invalid_address_length():
    with pytest.raises(ValueError):
        EthernetHeader(dst=b"\x01\x02", src=SRC, type=0)


def test_frame_round_trip():
    header = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_IPv4)
    frame = EthernetFrame(header=header, payload=b"hello payload")
    wire = frame.serialize().concatenate()
    parsed = EthernetFrame.parse(wire)
    assert parsed.header == header
    assert parsed.payload.concatenate() == b"hello payload"


def test_frame_serialize_is_header_then_payload():
    header = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_ARP)
    frame = EthernetFrame(header=header, payload=b"xyz")
    out = frame.serialize()
    assert len(out) == EthernetHeader.LENGTH + 3
    assert out.concatenate() == header.serialize() + b"xyz"


def test_default_frame_is_zeroed():
    wire = EthernetFrame().serialize().concatenate()
    assert wire == bytes(EthernetHeader.LENGTH)


def test_frame_too_short():
    with pytest.raises(ParseError) as info:
        EthernetFrame.parse(b"\x00" * 5)
    assert info.value.result is ParseResult.PacketTooShort