"""Message packs: up to nine 25-byte messages carried in one frame."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from remoteid.auth_page import parse_auth_page
from remoteid.common import (
    MESSAGE_SIZE,
    BufferTooSmallError,
    InvalidMessageCountError,
    InvalidMessageSizeError,
    MessageType,
    OutOfRangeError,
    ProtocolVersion,
    UnknownMessageTypeError,
    check_protocol_version,
    decode_header,
    encode_header,
)

MESSAGE_PACK_MAX_MESSAGES = 9
MESSAGE_PACK_HEADER_SIZE = 3
MESSAGE_PACK_MIN_SIZE = 28
MESSAGE_PACK_MAX_SIZE = 228


def _message_bytes(message: Any) -> bytes:
    """Return the 25-byte wire form of a message object or bytes."""
    raw = message.to_bytes() if hasattr(message, "to_bytes") else bytes(message)
    if len(raw) < MESSAGE_SIZE:
        raise BufferTooSmallError(f"a message needs {MESSAGE_SIZE} bytes, got {len(raw)}")
    return bytes(raw[:MESSAGE_SIZE])


def _message_to_dict(raw: bytes) -> dict[str, Any]:
    header = decode_header(raw)
    if header.message_type == MessageType.AUTH:
        return parse_auth_page(raw).to_dict()
    return {
        "protocol_version": header.protocol_version,
        "message_type": header.message_type,
        "data": raw.hex(),
    }


@dataclass
class MessagePack:
    """A message pack holding up to nine messages of 25 bytes each."""

    messages: list[bytes] = field(default_factory=list)
    protocol_version: int = ProtocolVersion.VERSION_2
    message_type: int = MessageType.MESSAGE_PACK
    message_size: int = MESSAGE_SIZE

    def __post_init__(self) -> None:
        messages = list(self.messages)
        if len(messages) > MESSAGE_PACK_MAX_MESSAGES:
            raise OutOfRangeError(
                f"a pack holds at most {MESSAGE_PACK_MAX_MESSAGES} messages, got {len(messages)}"
            )
        self.messages = [_message_bytes(message) for message in messages]

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.messages)

    def __getitem__(self, index: int) -> bytes:
        return self.messages[index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.messages):
            raise OutOfRangeError(
                f"index must be 0..{len(self.messages) - 1}, got {index}"
            )

    def add(self, message: Union[bytes, Any]) -> None:
        """Append a message, given as bytes or an object with ``to_bytes``."""
        if len(self.messages) >= MESSAGE_PACK_MAX_MESSAGES:
            raise OutOfRangeError(
                f"a pack holds at most {MESSAGE_PACK_MAX_MESSAGES} messages"
            )
        self.messages.append(_message_bytes(message))

    def replace(self, index: int, message: Union[bytes, Any]) -> None:
        """Replace the message at ``index``."""
        self._check_index(index)
        self.messages[index] = _message_bytes(message)

    def delete(self, index: int) -> None:
        """Remove the message at ``index``; later messages move down."""
        self._check_index(index)
        del self.messages[index]

    def validate(self) -> None:
        """Raise a ``RidError`` if any field holds an invalid value."""
        check_protocol_version(self.protocol_version)
        if self.message_type != MessageType.MESSAGE_PACK:
            raise UnknownMessageTypeError(
                f"message type {self.message_type} is not MESSAGE_PACK"
            )
        if self.message_size != MESSAGE_SIZE:
            raise InvalidMessageSizeError(
                f"message size must be {MESSAGE_SIZE}, got {self.message_size}"
            )
        if len(self.messages) > MESSAGE_PACK_MAX_MESSAGES:
            raise InvalidMessageCountError(
                f"a pack holds at most {MESSAGE_PACK_MAX_MESSAGES} messages, "
                f"got {len(self.messages)}"
            )

    def to_bytes(self) -> bytes:
        """Return the wire form: three header bytes followed by the messages."""
        if not 0 <= self.message_size <= 0xFF:
            raise OutOfRangeError(f"message size must be 0..255, got {self.message_size}")
        return (
            encode_header(self.protocol_version, self.message_type)
            + bytes([self.message_size, len(self.messages)])
            + b"".join(self.messages)
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> MessagePack:
        """Decode a message pack from its wire form."""
        data = bytes(data)
        if len(data) < MESSAGE_PACK_HEADER_SIZE:
            raise BufferTooSmallError(
                f"need at least {MESSAGE_PACK_HEADER_SIZE} bytes, got {len(data)}"
            )
        header = decode_header(data)
        message_size, count = data[1], data[2]
        if count > MESSAGE_PACK_MAX_MESSAGES:
            raise InvalidMessageCountError(
                f"a pack holds at most {MESSAGE_PACK_MAX_MESSAGES} messages, got {count}"
            )
        needed = MESSAGE_PACK_HEADER_SIZE + count * MESSAGE_SIZE
        if len(data) < needed:
            raise BufferTooSmallError(f"need {needed} bytes for {count} messages, got {len(data)}")
        body = data[MESSAGE_PACK_HEADER_SIZE:needed]
        messages = [body[offset : offset + MESSAGE_SIZE] for offset in range(0, len(body), MESSAGE_SIZE)]
        return cls(
            messages=messages,
            protocol_version=header.protocol_version,
            message_type=header.message_type,
            message_size=message_size,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the pack and its messages as plain values."""
        return {
            "protocol_version": int(self.protocol_version),
            "message_type": int(self.message_type),
            "message_size": self.message_size,
            "message_count": len(self.messages),
            "messages": [_message_to_dict(message) for message in self.messages],
        }

    def to_json(self) -> str:
        """Return the pack as a JSON object string."""
        return json.dumps(self.to_dict())