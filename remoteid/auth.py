"""Multi-page authentication messages built on top of single auth pages."""

from __future__ import annotations

import json
from typing import Any

from remoteid.auth_page import (
    AUTH_EPOCH_OFFSET,
    AUTH_MAX_PAGE_INDEX,
    AUTH_PAGE_0_DATA_SIZE,
    AUTH_PAGE_DATA_SIZE,
    AuthPage,
    AuthPage0,
    AuthPageX,
    AuthType,
)
from remoteid.common import (
    BufferTooLargeError,
    InvalidLastPageIndexError,
    InvalidPageNumberError,
    MessageType,
    NonEmptySignatureError,
    OutOfRangeError,
    UnknownMessageTypeError,
    check_protocol_version,
)

AUTH_MAX_SIGNATURE_SIZE = 255
"""Largest signature the one-byte length field can describe."""


class Auth:
    """An authentication message whose signature spans page 0 and pages 1-15."""

    def __init__(
        self,
        auth_type: int = AuthType.NONE,
        signature: bytes = b"",
        timestamp: int = 0,
    ) -> None:
        self.page_0 = AuthPage0()
        self._pages: list[AuthPageX] = []
        self.set_type(auth_type)
        self.timestamp = timestamp
        if signature:
            self.set_signature(signature)

    @property
    def auth_type(self) -> int:
        return self.page_0.auth_type

    @property
    def timestamp(self) -> int:
        """Seconds since 2019-01-01 00:00:00 UTC."""
        return self.page_0.timestamp

    @timestamp.setter
    def timestamp(self, value: int) -> None:
        self.page_0.timestamp = value

    @property
    def unixtime(self) -> int:
        """The timestamp as seconds since the Unix epoch."""
        return self.page_0.timestamp + AUTH_EPOCH_OFFSET

    @property
    def length(self) -> int:
        """Total signature length across all pages."""
        return self.page_0.length

    @property
    def page_count(self) -> int:
        return self.page_0.last_page_index + 1

    @property
    def signature(self) -> bytes:
        """The signature reassembled from all pages."""
        length = self.page_0.length
        chunks = [self.page_0.auth_data]
        chunks.extend(page.auth_data for page in self._pages[: self.page_0.last_page_index])
        return b"".join(chunks)[:length].ljust(length, b"\x00")

    def validate(self) -> None:
        """Raise a ``RidError`` if any field holds an invalid value."""
        check_protocol_version(self.page_0.protocol_version)
        if self.page_0.message_type != MessageType.AUTH:
            raise UnknownMessageTypeError(
                f"message type {self.page_0.message_type} is not AUTH"
            )
        if self.page_0.page_number != 0:
            raise InvalidPageNumberError(
                f"first page must be page 0, got {self.page_0.page_number}"
            )
        if self.page_0.last_page_index > AUTH_MAX_PAGE_INDEX:
            raise InvalidLastPageIndexError(
                f"last page index {self.page_0.last_page_index} exceeds {AUTH_MAX_PAGE_INDEX}"
            )
        # Network Remote ID requires an empty signature.
        if self.page_0.auth_type == AuthType.NETWORK_REMOTE_ID and self.page_0.length != 0:
            raise NonEmptySignatureError("network remote ID auth must carry no signature")

    def set_type(self, auth_type: int) -> None:
        """Set the auth type; Network Remote ID also clears the signature."""
        if auth_type == AuthType.NETWORK_REMOTE_ID:
            self.page_0.set_data(b"")
            self.page_0.last_page_index = 0
            self.page_0.length = 0
            self._pages = []
        self.page_0.auth_type = auth_type

    def set_signature(self, signature: bytes) -> None:
        """Split ``signature`` over page 0 and as many further pages as needed."""
        signature = bytes(signature)
        size = len(signature)
        if size > AUTH_MAX_SIGNATURE_SIZE:
            raise BufferTooLargeError(
                f"signature may be at most {AUTH_MAX_SIGNATURE_SIZE} bytes, got {size}"
            )
        remaining = signature[AUTH_PAGE_0_DATA_SIZE:]
        last_page_index = -(-len(remaining) // AUTH_PAGE_DATA_SIZE)

        self.page_0.last_page_index = last_page_index
        self.page_0.length = size
        self.page_0.set_data(signature[:AUTH_PAGE_0_DATA_SIZE])

        self._pages = [
            AuthPageX(
                page_number=number,
                auth_type=self.page_0.auth_type,
                auth_data=remaining[offset : offset + AUTH_PAGE_DATA_SIZE],
            )
            for number, offset in enumerate(
                range(0, len(remaining), AUTH_PAGE_DATA_SIZE), start=1
            )
        ]

    def set_unixtime(self, unixtime: int) -> None:
        """Set the timestamp from seconds since the Unix epoch."""
        if unixtime < AUTH_EPOCH_OFFSET:
            raise OutOfRangeError(
                f"unixtime must not be before {AUTH_EPOCH_OFFSET}, got {unixtime}"
            )
        self.page_0.timestamp = unixtime - AUTH_EPOCH_OFFSET

    def pages(self) -> list[AuthPage]:
        """Return page 0 followed by the pages that carry the rest of the signature."""
        return [self.page_0, *self._pages]

    def to_dict(self) -> dict[str, Any]:
        """Return the message fields as plain values."""
        return {
            "protocol_version": int(self.page_0.protocol_version),
            "message_type": int(self.page_0.message_type),
            "type": int(self.auth_type),
            "page_count": self.page_count,
            "timestamp": self.timestamp,
            "length": self.length,
            "signature": self.signature.hex(),
        }

    def to_json(self) -> str:
        """Return the message as a JSON object string."""
        return json.dumps(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Auth):
            return NotImplemented
        return [page.to_bytes() for page in self.pages()] == [
            page.to_bytes() for page in other.pages()
        ]

    def __repr__(self) -> str:
        return (
            f"Auth(auth_type={self.auth_type!r}, timestamp={self.timestamp}, "
            f"signature={self.signature.hex()!r})"
        )