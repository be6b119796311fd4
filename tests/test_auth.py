import json

import pytest

from remoteid.auth import Auth
from remoteid.auth_page import (
    AUTH_EPOCH_OFFSET,
    AUTH_PAGE_0_DATA_SIZE,
    AUTH_PAGE_DATA_SIZE,
    AuthPage0,
    AuthPageX,
    AuthType,
)
from remoteid.common import (
    BufferTooLargeError,
    InvalidPageNumberError,
    InvalidProtocolVersionError,
    MessageType,
    NonEmptySignatureError,
    OutOfRangeError,
    ProtocolVersion,
    UnknownMessageTypeError,
)


def _signature(size):
    return bytes((i * 7 + 3) % 256 for i in range(size))


def test_new_auth_defaults():
    auth = Auth()
    assert auth.auth_type == AuthType.NONE
    assert auth.timestamp == 0
    assert auth.length == 0
    assert auth.page_count == 1
    assert auth.signature == b""
    assert auth.page_0.protocol_version == ProtocolVersion.VERSION_2
    assert auth.page_0.message_type == MessageType.AUTH


def test_set_and_get_type():
    auth = Auth()
    for auth_type in (
        AuthType.NONE,
        AuthType.UAS_ID_SIGNATURE,
        AuthType.OPERATOR_ID_SIGNATURE,
        AuthType.MESSAGE_SET_SIGNATURE,
        AuthType.SPECIFIC_METHOD,
    ):
        auth.set_type(auth_type)
        assert auth.auth_type == auth_type


def test_set_type_out_of_range():
    auth = Auth()
    with pytest.raises(OutOfRangeError):
        auth.set_type(0x10)


def test_network_remote_id_clears_signature():
    auth = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(64))
    auth.set_type(AuthType.NETWORK_REMOTE_ID)
    assert auth.length == 0
    assert auth.page_count == 1
    assert auth.signature == b""
    assert auth.pages() == [auth.page_0]
    assert auth.page_0.auth_data == bytes(AUTH_PAGE_0_DATA_SIZE)


@pytest.mark.parametrize("size", [0, 1, 16, 17, 18, 40, 41, 64, 109, 255])
def test_signature_round_trip(size):
    signature = _signature(size)
    auth = Auth(AuthType.UAS_ID_SIGNATURE)
    auth.set_signature(signature)
    assert auth.length == size
    assert auth.signature == signature
    assert auth.page_count == len(auth.pages())


def test_signature_fitting_page_0_uses_one_page():
    auth = Auth()
    auth.set_signature(_signature(AUTH_PAGE_0_DATA_SIZE))
    assert auth.page_count == 1
    assert auth.pages() == [auth.page_0]


def test_signature_overflowing_page_0_uses_two_pages():
    auth = Auth()
    auth.set_signature(_signature(AUTH_PAGE_0_DATA_SIZE + 1))
    assert auth.page_count == 2
    assert auth.pages()[1].auth_data[:1] == _signature(AUTH_PAGE_0_DATA_SIZE + 1)[-1:]


def test_signature_pages_are_numbered_and_typed():
    auth = Auth(AuthType.MESSAGE_SET_SIGNATURE)
    auth.set_signature(_signature(AUTH_PAGE_0_DATA_SIZE + 2 * AUTH_PAGE_DATA_SIZE + 1))
    pages = auth.pages()
    assert isinstance(pages[0], AuthPage0)
    assert all(isinstance(page, AuthPageX) for page in pages[1:])
    assert [page.page_number for page in pages[1:]] == list(range(1, len(pages)))
    assert all(page.auth_type == AuthType.MESSAGE_SET_SIGNATURE for page in pages)
    assert auth.page_0.last_page_index == len(pages) - 1


def test_sixty_four_byte_signature_needs_four_pages():
    auth = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(64))
    assert auth.page_count == 4


def test_signature_too_large():
    auth = Auth()
    with pytest.raises(BufferTooLargeError):
        auth.set_signature(bytes(256))


def test_shorter_signature_replaces_longer():
    auth = Auth(signature=_signature(100))
    auth.set_signature(_signature(10))
    assert auth.signature == _signature(10)
    assert auth.page_count == 1
    assert len(auth.pages()) == 1


def test_page_wire_header():
    auth = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(64))
    assert auth.pages()[1].to_bytes()[0] == 0x22
    assert all(len(page.to_bytes()) == 25 for page in auth.pages())


def test_set_unixtime_round_trip():
    auth = Auth()
    auth.set_unixtime(AUTH_EPOCH_OFFSET + 100)
    assert auth.timestamp == 100
    assert auth.unixtime == AUTH_EPOCH_OFFSET + 100


def test_set_unixtime_before_epoch():
    auth = Auth()
    with pytest.raises(OutOfRangeError):
        auth.set_unixtime(AUTH_EPOCH_OFFSET - 1)


def test_timestamp_round_trip():
    auth = Auth()
    for timestamp in (0, 1, 86400, 31536000, 0xFFFFFFFF):
        auth.timestamp = timestamp
        assert auth.timestamp == timestamp


def test_validate_valid_message():
    auth = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(64))
    auth.validate()
    assert auth.signature == _signature(64)


def test_validate_protocol_versions():
    auth = Auth()
    for version in (
        ProtocolVersion.VERSION_0,
        ProtocolVersion.VERSION_1,
        ProtocolVersion.VERSION_2,
        ProtocolVersion.PRIVATE_USE,
    ):
        auth.page_0.protocol_version = version
        auth.validate()
        assert auth.to_dict()["protocol_version"] == version
    auth.page_0.protocol_version = 5
    with pytest.raises(InvalidProtocolVersionError):
        auth.validate()


def test_validate_wrong_message_type():
    auth = Auth()
    auth.page_0.message_type = MessageType.LOCATION
    with pytest.raises(UnknownMessageTypeError):
        auth.validate()


def test_validate_wrong_page_number():
    auth = Auth()
    auth.page_0.page_number = 1
    with pytest.raises(InvalidPageNumberError):
        auth.validate()


def test_validate_network_remote_id_with_signature():
    auth = Auth(AuthType.NETWORK_REMOTE_ID)
    auth.page_0.length = 5
    with pytest.raises(NonEmptySignatureError):
        auth.validate()


def test_to_dict_and_json():
    signature = _signature(40)
    auth = Auth(AuthType.OPERATOR_ID_SIGNATURE, signature=signature, timestamp=12345)
    data = auth.to_dict()
    assert data["type"] == AuthType.OPERATOR_ID_SIGNATURE
    assert data["message_type"] == MessageType.AUTH
    assert data["timestamp"] == 12345
    assert data["length"] == 40
    assert data["page_count"] == auth.page_count
    assert data["signature"] == signature.hex()
    assert json.loads(auth.to_json()) == data


def test_equality():
    first = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(50), timestamp=7)
    second = Auth(AuthType.UAS_ID_SIGNATURE, signature=_signature(50), timestamp=7)
    assert first == second
    second.set_signature(_signature(51))
    assert not first == second