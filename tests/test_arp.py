import ipaddress

import pytest

from spongenet.arp import ARPMessage
from spongenet.parser import ParseError, ParseResult

SENDER_MAC = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x01])
TARGET_MAC = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x02])
SENDER_IP = int(ipaddress.IPv4Address("10.0.0.1"))
TARGET_IP = int(ipaddress.IPv4Address("10.0.0.2"))


def make_request() -> ARPMessage:
    return ARPMessage(
        opcode=ARPMessage.OPCODE_REQUEST,
        sender_ethernet_address=SENDER_MAC,
        sender_ip_address=SENDER_IP,
        target_ethernet_address=TARGET_MAC,
        target_ip_address=TARGET_IP,
    )


def test_serialize_length_and_fixed_prefix():
    wire = make_request().serialize()
    assert len(wire) == ARPMessage.LENGTH
    assert wire[:8] == b"\x00\x01\x08\x00\x06\x04\x00\x01"


def test_serialize_address_fields():
    wire = make_request().serialize()
    assert wire[8:14] == SENDER_MAC
    assert wire[18:24] == TARGET_MAC
    assert int.from_bytes(wire[14:18], "big") == SENDER_IP
    assert int.from_bytes(wire[24:28], "big") == TARGET_IP


def test_round_trip():
    message = make_request()
    assert ARPMessage.parse(message.serialize()) == message


def test_round_trip_reply():
    message = make_request()
    message.opcode = ARPMessage.OPCODE_REPLY
    parsed = ARPMessage.parse(message.serialize())
    assert parsed.opcode == ARPMessage.OPCODE_REPLY
    assert parsed == message


def test_default_message_is_unsupported():
    message = ARPMessage()
    assert not message.supported()
    with pytest.raises(ValueError):
        message.serialize()


def test_request_is_supported():
    assert make_request().supported()


def test_parse_too_short():
    wire = make_request().serialize()
    with pytest.raises(ParseError) as info:
        ARPMessage.parse(wire[:27])
    assert info.value.result is ParseResult.PacketTooShort


def test_parse_unsupported_opcode():
    wire = bytearray(make_request().serialize())
    wire[7] = 3
    with pytest.raises(ParseError) as info:
        ARPMessage.parse(bytes(wire))
    assert info.value.result is ParseResult.Unsupported


def test_parse_unsupported_hardware_type():
    wire = bytearray(make_request().serialize())
    wire[1] = 6
    with pytest.raises(ParseError) as info:
        ARPMessage.parse(bytes(wire))
    assert info.value.result is ParseResult.Unsupported


def test_str_request():
    assert str(make_request()) == (
        "opcode=REQUEST, sender=02:00:00:00:00:01/10.0.0.1, target=02:00:00:00:00:02/10.0.0.2"
    )


def test_str_reply_and_unknown():
    message = make_request()
    message.opcode = ARPMessage.OPCODE_REPLY
    assert str(message).startswith("opcode=REPLY, ")
    message.opcode = 9
    assert str(message).startswith("opcode=(unknown type), ")


def test_invalid_ethernet_address():
    with pytest.raises(ValueError):
        ARPMessage(sender_ethernet_address=b"\x01")