"""Definitions shared by every Remote ID message: errors, header and enums."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

MESSAGE_SIZE = 25
"""Size in bytes of a single Remote ID message."""

_NIBBLE_MAX = 0x0F


class RidError(Exception):
    """Base class for every error raised by this package."""


class OutOfRangeError(RidError, ValueError):
    """A value lies outside the range the field can hold."""


class BufferTooLargeError(RidError, ValueError):
    """More data was given than the field can hold."""


class BufferTooSmallError(RidError, ValueError):
    """Less data was given than the message needs."""


class InvalidProtocolVersionError(RidError):
    """The protocol version is not 0, 1, 2 or private use."""


class UnknownMessageTypeError(RidError):
    """The message type is not the one expected."""


class InvalidPageNumberError(RidError):
    """An authentication page carries the wrong page number."""


class InvalidLastPageIndexError(RidError):
    """The last page index of an authentication message is too large."""


class NonEmptySignatureError(RidError):
    """A signature is present where the auth type requires none."""


class InvalidMessageSizeError(RidError):
    """A message pack declares a message size other than 25."""


class InvalidMessageCountError(RidError):
    """A message pack declares more messages than it may hold."""


class InvalidLatitudeError(RidError):
    """An encoded latitude lies outside -90..90 degrees."""


class InvalidLongitudeError(RidError):
    """An encoded longitude lies outside -180..180 degrees."""


class ProtocolVersion(IntEnum):
    """Protocol version carried in the low nibble of the header byte."""

    VERSION_0 = 0
    VERSION_1 = 1
    VERSION_2 = 2
    PRIVATE_USE = 0x0F


class MessageType(IntEnum):
    """Message type carried in the high nibble of the header byte."""

    BASIC_ID = 0
    LOCATION = 1
    AUTH = 2
    SELF_ID = 3
    SYSTEM = 4
    OPERATOR_ID = 5
    MESSAGE_PACK = 0x0F


class Header(NamedTuple):
    """Decoded first byte of a message."""

    protocol_version: int
    message_type: int


def encode_header(protocol_version: int, message_type: int) -> bytes:
    """Return the one-byte header for the given version and type."""
    for name, value in (("protocol_version", protocol_version), ("message_type", message_type)):
        if not 0 <= value <= _NIBBLE_MAX:
            raise OutOfRangeError(f"{name} must be 0..{_NIBBLE_MAX}, got {value}")
    return bytes([(int(message_type) << 4) | int(protocol_version)])


def decode_header(data: bytes) -> Header:
    """Split the first byte of ``data`` into protocol version and message type."""
    if not data:
        raise BufferTooSmallError("no header byte to decode")
    first = data[0]
    return Header(protocol_version=first & 0x0F, message_type=first >> 4)


def check_protocol_version(version: int) -> int:
    """Return ``version`` if it is a valid protocol version, else raise."""
    if version > ProtocolVersion.VERSION_2 and version != ProtocolVersion.PRIVATE_USE:
        raise InvalidProtocolVersionError(f"invalid protocol version {version}")
    if version < 0:
        raise InvalidProtocolVersionError(f"invalid protocol version {version}")
    return int(version)