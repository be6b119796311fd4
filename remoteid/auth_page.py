"""Single authentication message pages: page 0 and pages 1-15."""

from __future__ import annotations

import json
import struct
from enum import IntEnum
from typing import Any, Union

from remoteid.common import (
    MESSAGE_SIZE,
    BufferTooLargeError,
    BufferTooSmallError,
    MessageType,
    OutOfRangeError,
    ProtocolVersion,
    UnknownMessageTypeError,
    decode_header,
    encode_header,
)

AUTH_EPOCH_OFFSET = 1546300800
"""Unix time of 2019-01-01 00:00:00 UTC, the epoch of auth timestamps."""

AUTH_PAGE_0_DATA_SIZE = 17
AUTH_PAGE_DATA_SIZE = 23
AUTH_MAX_PAGES = 16
AUTH_MAX_PAGE_INDEX = 15
AUTH_TYPE_MAX = 0x0F

_PAGE_0_FORMAT = struct.Struct("<BBBBI17s")
_PAGE_X_FORMAT = struct.Struct("<BB23s")


class AuthType(IntEnum):
    """Authentication type; 6-9 are reserved and 0xA-0xF private use."""

    NONE = 0
    UAS_ID_SIGNATURE = 1
    OPERATOR_ID_SIGNATURE = 2
    MESSAGE_SET_SIGNATURE = 3
    NETWORK_REMOTE_ID = 4
    SPECIFIC_METHOD = 5


def auth_type_to_string(auth_type: int) -> str:
    """Return the symbolic name of ``auth_type`` or ``"UNKNOWN"``."""
    try:
        return f"RID_AUTH_TYPE_{AuthType(auth_type).name}"
    except ValueError:
        return "UNKNOWN"


def _require_range(name: str, value: int, low: int, high: int) -> int:
    value = int(value)
    if not low <= value <= high:
        raise OutOfRangeError(f"{name} must be {low}..{high}, got {value}")
    return value


def _as_auth_type(value: int) -> int:
    try:
        return AuthType(value)
    except ValueError:
        return value


def _fill(data: bytes, size: int) -> bytes:
    data = bytes(data)
    if len(data) > size:
        raise BufferTooLargeError(f"at most {size} bytes fit, got {len(data)}")
    return data.ljust(size, b"\x00")


class _AuthPageBase:
    """Fields common to every authentication page."""

    def __init__(self, protocol_version: int, message_type: int, auth_type: int) -> None:
        self.protocol_version = protocol_version
        self.message_type = message_type
        self.auth_type = auth_type

    @property
    def protocol_version(self) -> int:
        return self._protocol_version

    @protocol_version.setter
    def protocol_version(self, value: int) -> None:
        self._protocol_version = _require_range("protocol_version", value, 0, 0x0F)

    @property
    def message_type(self) -> int:
        return self._message_type

    @message_type.setter
    def message_type(self, value: int) -> None:
        self._message_type = _require_range("message_type", value, 0, 0x0F)

    @property
    def auth_type(self) -> int:
        return _as_auth_type(self._auth_type)

    @auth_type.setter
    def auth_type(self, value: int) -> None:
        self._auth_type = _require_range("auth_type", value, 0, AUTH_TYPE_MAX)

    @property
    def auth_data(self) -> bytes:
        return self._auth_data

    def _header(self) -> bytes:
        return encode_header(self.protocol_version, self.message_type)

    def _type_byte(self, page_number: int) -> int:
        return (self._auth_type << 4) | page_number

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{key}={value!r}" for key, value in self.to_dict().items()  # type: ignore[attr-defined]
        )
        return f"{type(self).__name__}({fields})"


class AuthPage0(_AuthPageBase):
    """Authentication page 0, which carries timestamp and total length."""

    def __init__(
        self,
        auth_type: int = AuthType.NONE,
        last_page_index: int = 0,
        length: int = 0,
        timestamp: int = 0,
        auth_data: bytes = b"",
        *,
        page_number: int = 0,
        protocol_version: int = ProtocolVersion.VERSION_2,
        message_type: int = MessageType.AUTH,
    ) -> None:
        super().__init__(protocol_version, message_type, auth_type)
        self.page_number = page_number
        self.last_page_index = last_page_index
        self.length = length
        self.timestamp = timestamp
        self.set_data(auth_data)

    @property
    def page_number(self) -> int:
        return self._page_number

    @page_number.setter
    def page_number(self, value: int) -> None:
        self._page_number = _require_range("page_number", value, 0, 0x0F)

    @property
    def last_page_index(self) -> int:
        return self._last_page_index

    @last_page_index.setter
    def last_page_index(self, value: int) -> None:
        self._last_page_index = _require_range("last_page_index", value, 0, AUTH_MAX_PAGE_INDEX)

    @property
    def length(self) -> int:
        return self._length

    @length.setter
    def length(self, value: int) -> None:
        self._length = _require_range("length", value, 0, 0xFF)

    @property
    def timestamp(self) -> int:
        """Seconds since 2019-01-01 00:00:00 UTC."""
        return self._timestamp

    @timestamp.setter
    def timestamp(self, value: int) -> None:
        self._timestamp = _require_range("timestamp", value, 0, 0xFFFFFFFF)

    def set_data(self, data: bytes) -> None:
        """Store up to 17 bytes of authentication data, zero padded."""
        self._auth_data = _fill(data, AUTH_PAGE_0_DATA_SIZE)

    def to_bytes(self) -> bytes:
        """Return the 25-byte wire form of the page."""
        return _PAGE_0_FORMAT.pack(
            self._header()[0],
            self._type_byte(self.page_number),
            self.last_page_index,
            self.length,
            self.timestamp,
            self.auth_data,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> AuthPage0:
        """Decode page 0 from the first 25 bytes of ``data``."""
        if len(data) < MESSAGE_SIZE:
            raise BufferTooSmallError(f"need {MESSAGE_SIZE} bytes, got {len(data)}")
        header, type_byte, last_index, length, timestamp, auth_data = _PAGE_0_FORMAT.unpack(
            bytes(data[:MESSAGE_SIZE])
        )
        version, message_type = decode_header(bytes([header]))
        return cls(
            auth_type=type_byte >> 4,
            last_page_index=last_index & 0x0F,
            length=length,
            timestamp=timestamp,
            auth_data=auth_data,
            page_number=type_byte & 0x0F,
            protocol_version=version,
            message_type=message_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the page fields as plain values."""
        return {
            "protocol_version": int(self.protocol_version),
            "message_type": int(self.message_type),
            "page_number": self.page_number,
            "type": int(self.auth_type),
            "last_page_index": self.last_page_index,
            "length": self.length,
            "timestamp": self.timestamp,
            "data": self.auth_data.hex(),
        }

    def to_json(self) -> str:
        """Return the page as a JSON object string."""
        return json.dumps(self.to_dict())


class AuthPageX(_AuthPageBase):
    """Authentication pages 1-15, which carry only data."""

    def __init__(
        self,
        page_number: int = 1,
        auth_type: int = AuthType.NONE,
        auth_data: bytes = b"",
        *,
        protocol_version: int = ProtocolVersion.VERSION_2,
        message_type: int = MessageType.AUTH,
    ) -> None:
        super().__init__(protocol_version, message_type, auth_type)
        self.page_number = page_number
        self.set_data(auth_data)

    @property
    def page_number(self) -> int:
        return self._page_number

    @page_number.setter
    def page_number(self, value: int) -> None:
        self._page_number = _require_range("page_number", value, 1, AUTH_MAX_PAGE_INDEX)

    def set_data(self, data: bytes) -> None:
        """Store up to 23 bytes of authentication data, zero padded."""
        self._auth_data = _fill(data, AUTH_PAGE_DATA_SIZE)

    def to_bytes(self) -> bytes:
        """Return the 25-byte wire form of the page."""
        return _PAGE_X_FORMAT.pack(
            self._header()[0], self._type_byte(self.page_number), self.auth_data
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> AuthPageX:
        """Decode a page 1-15 from the first 25 bytes of ``data``."""
        if len(data) < MESSAGE_SIZE:
            raise BufferTooSmallError(f"need {MESSAGE_SIZE} bytes, got {len(data)}")
        header, type_byte, auth_data = _PAGE_X_FORMAT.unpack(bytes(data[:MESSAGE_SIZE]))
        version, message_type = decode_header(bytes([header]))
        return cls(
            page_number=type_byte & 0x0F,
            auth_type=type_byte >> 4,
            auth_data=auth_data,
            protocol_version=version,
            message_type=message_type,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the page fields as plain values."""
        return {
            "protocol_version": int(self.protocol_version),
            "message_type": int(self.message_type),
            "page_number": self.page_number,
            "type": int(self.auth_type),
            "data": self.auth_data.hex(),
        }

    def to_json(self) -> str:
        """Return the page as a JSON object string."""
        return json.dumps(self.to_dict())


AuthPage = Union[AuthPage0, AuthPageX]


def parse_auth_page(data: bytes) -> AuthPage:
    """Decode an authentication page, choosing the layout by page number."""
    if len(data) < MESSAGE_SIZE:
        raise BufferTooSmallError(f"need {MESSAGE_SIZE} bytes, got {len(data)}")
    header = decode_header(data)
    if header.message_type != MessageType.AUTH:
        raise UnknownMessageTypeError(f"message type {header.message_type} is not AUTH")
    if data[1] & 0x0F == 0:
        return AuthPage0.from_bytes(data)
    return AuthPageX.from_bytes(data)


def auth_page_to_json(data: Union[bytes, AuthPage]) -> str:
    """Format a page, given as a page object or raw bytes, as JSON."""
    page = data if isinstance(data, (AuthPage0, AuthPageX)) else parse_auth_page(data)
    return page.to_json()