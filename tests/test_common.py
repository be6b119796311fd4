import pytest

from remoteid.common import (
    BufferTooSmallError,
    Header,
    InvalidProtocolVersionError,
    MessageType,
    OutOfRangeError,
    ProtocolVersion,
    RidError,
    check_protocol_version,
    decode_header,
    encode_header,
)


def test_encode_location_header_matches_wire_byte():
    assert encode_header(ProtocolVersion.VERSION_2, MessageType.LOCATION) == b"\x12"


def test_decode_location_header():
    data = bytes.fromhex("12202d3e0420bd5c25401c190d0000c10834084a0339300100")
    assert decode_header(data) == Header(2, MessageType.LOCATION)


def test_decode_header_unknown_nibbles():
    header = decode_header(bytes([0xE3, 0xD2]))
    assert header.protocol_version == 3
    assert header.message_type == 0x0E


@pytest.mark.parametrize("version", range(16))
@pytest.mark.parametrize("message_type", list(MessageType))
def test_header_round_trip(version, message_type):
    header = decode_header(encode_header(version, message_type))
    assert header == (version, message_type)


@pytest.mark.parametrize("args", [(16, 0), (0, 16), (-1, 0)])
def test_encode_header_out_of_range(args):
    with pytest.raises(OutOfRangeError):
        encode_header(*args)


def test_decode_header_empty():
    with pytest.raises(BufferTooSmallError):
        decode_header(b"")


@pytest.mark.parametrize("version", [0, 1, 2, 0x0F])
def test_check_protocol_version_valid(version):
    assert check_protocol_version(version) == version


@pytest.mark.parametrize("version", [3, 5, 0x0E])
def test_check_protocol_version_invalid(version):
    with pytest.raises(InvalidProtocolVersionError):
        check_protocol_version(version)


def test_errors_share_base_class():
    with pytest.raises(RidError):
        encode_header(99, 0)