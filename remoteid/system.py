"""System messages: operator location, operating area and UA classification."""

from __future__ import annotations

import json
import math
import struct
from enum import IntEnum
from typing import Any

from remoteid.common import (
    MESSAGE_SIZE,
    BufferTooSmallError,
    InvalidLatitudeError,
    InvalidLongitudeError,
    MessageType,
    OutOfRangeError,
    ProtocolVersion,
    UnknownMessageTypeError,
    check_protocol_version,
    decode_header,
    encode_header,
)

AREA_COUNT_MAX = 0xFFFF
AREA_RADIUS_MAX = 2550
AREA_CEILING_MIN = -1000.0
AREA_CEILING_MAX = 31767.0
AREA_FLOOR_MIN = -1000.0
AREA_FLOOR_MAX = 31767.0
OPERATOR_ALTITUDE_INVALID = 3.4028234663852886e38
"""Marker for an unknown operator altitude (largest single precision float)."""
OPERATOR_ALTITUDE_INVALID_ENCODED = 0
SYSTEM_TIMESTAMP_EPOCH = 1546300800
"""Unix time of 2019-01-01 00:00:00 UTC, the epoch of system timestamps."""

_ALTITUDE_MIN = -1000.0
_ALTITUDE_MAX = 31767.0
_ALTITUDE_RESOLUTION = 0.5
_AREA_RADIUS_RESOLUTION = 10
_LATLON_SCALE = 10_000_000
_LATITUDE_ENCODED_MAX = 90 * _LATLON_SCALE
_LONGITUDE_ENCODED_MAX = 180 * _LATLON_SCALE

_FORMAT = struct.Struct("<BBiiHBHHBHIB")


class OperatorLocationType(IntEnum):
    """Where the reported operator location comes from."""

    TAKEOFF = 0
    DYNAMIC = 1
    FIXED = 2


class ClassificationType(IntEnum):
    """Classification scheme; 2-7 are reserved."""

    UNDECLARED = 0
    EUROPEAN_UNION = 1


class UAClassificationCategory(IntEnum):
    """UA category; 4-15 are reserved."""

    UNDEFINED = 0
    OPEN = 1
    SPECIFIC = 2
    CERTIFIED = 3


class UAClassificationClass(IntEnum):
    """UA class; 8-15 are reserved."""

    UNDEFINED = 0
    CLASS_0 = 1
    CLASS_1 = 2
    CLASS_2 = 3
    CLASS_3 = 4
    CLASS_4 = 5
    CLASS_5 = 6
    CLASS_6 = 7


_OPERATOR_LOCATION_TYPE_MAX = 3
_CLASSIFICATION_TYPE_MAX = 7
_UA_CLASSIFICATION_CATEGORY_MAX = 15
_UA_CLASSIFICATION_CLASS_MAX = 15


def _enum_string(enum_cls: type[IntEnum], value: int, prefix: str) -> str:
    try:
        member = enum_cls(value)
    except ValueError:
        return "UNKNOWN"
    return prefix + member.name


def operator_location_type_to_string(location_type: int) -> str:
    """Return the symbolic name of an operator location type or ``"UNKNOWN"``."""
    return _enum_string(OperatorLocationType, location_type, "RID_OPERATOR_LOCATION_TYPE_")


def classification_type_to_string(classification_type: int) -> str:
    """Return the symbolic name of a classification type or ``"UNKNOWN"``."""
    return _enum_string(ClassificationType, classification_type, "RID_CLASSIFICATION_TYPE_")


def ua_classification_category_to_string(category: int) -> str:
    """Return the symbolic name of a UA category or ``"UNKNOWN"``."""
    return _enum_string(UAClassificationCategory, category, "RID_UA_CLASSIFICATION_CATEGORY_")


def ua_classification_class_to_string(ua_class: int) -> str:
    """Return the symbolic name of a UA class or ``"UNKNOWN"``."""
    try:
        member = UAClassificationClass(ua_class)
    except ValueError:
        return "UNKNOWN"
    suffix = member.name[len("CLASS_"):] if member.name.startswith("CLASS_") else member.name
    return "RID_UA_CLASSIFICATION_CLASS_" + suffix


def _require_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise OutOfRangeError(f"{name} must be {low}..{high}, got {value}")


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _encode_altitude(name: str, value: float, low: float, high: float) -> int:
    _require_range(name, value, low, high)
    return _round_half_up((value - _ALTITUDE_MIN) / _ALTITUDE_RESOLUTION)


def _decode_altitude(encoded: int) -> float:
    return encoded * _ALTITUDE_RESOLUTION + _ALTITUDE_MIN


class System:
    """A System message describing the operator and the operating area."""

    def __init__(
        self,
        *,
        operator_location_type: int = OperatorLocationType.TAKEOFF,
        classification_type: int = ClassificationType.UNDECLARED,
        operator_latitude: float = 0.0,
        operator_longitude: float = 0.0,
        area_count: int = 0,
        area_radius: int = 0,
        area_ceiling: float = AREA_CEILING_MIN,
        area_floor: float = AREA_FLOOR_MIN,
        ua_classification_category: int = UAClassificationCategory.UNDEFINED,
        ua_classification_class: int = UAClassificationClass.UNDEFINED,
        operator_altitude: float = OPERATOR_ALTITUDE_INVALID,
        timestamp: int = 0,
        protocol_version: int = ProtocolVersion.VERSION_2,
        message_type: int = MessageType.SYSTEM,
    ) -> None:
        self._reserved_1 = 0
        self._reserved_2 = 0
        self.protocol_version = protocol_version
        self.message_type = message_type
        self.operator_location_type = operator_location_type
        self.classification_type = classification_type
        self.operator_latitude = operator_latitude
        self.operator_longitude = operator_longitude
        self.area_count = area_count
        self.area_radius = area_radius
        self.area_ceiling = area_ceiling
        self.area_floor = area_floor
        self.ua_classification_category = ua_classification_category
        self.ua_classification_class = ua_classification_class
        self.operator_altitude = operator_altitude
        self.timestamp = timestamp

    @property
    def protocol_version(self) -> int:
        return _as_enum(ProtocolVersion, self._protocol_version)

    @protocol_version.setter
    def protocol_version(self, value: int) -> None:
        _require_range("protocol_version", value, 0, 0x0F)
        self._protocol_version = int(value)

    @property
    def message_type(self) -> int:
        return _as_enum(MessageType, self._message_type)

    @message_type.setter
    def message_type(self, value: int) -> None:
        _require_range("message_type", value, 0, 0x0F)
        self._message_type = int(value)

    @property
    def operator_location_type(self) -> int:
        return _as_enum(OperatorLocationType, self._operator_location_type)

    @operator_location_type.setter
    def operator_location_type(self, value: int) -> None:
        _require_range("operator_location_type", value, 0, _OPERATOR_LOCATION_TYPE_MAX)
        self._operator_location_type = int(value)

    @property
    def classification_type(self) -> int:
        return _as_enum(ClassificationType, self._classification_type)

    @classification_type.setter
    def classification_type(self, value: int) -> None:
        _require_range("classification_type", value, 0, _CLASSIFICATION_TYPE_MAX)
        self._classification_type = int(value)

    @property
    def ua_classification_category(self) -> int:
        return _as_enum(UAClassificationCategory, self._ua_category)

    @ua_classification_category.setter
    def ua_classification_category(self, value: int) -> None:
        _require_range("ua_classification_category", value, 0, _UA_CLASSIFICATION_CATEGORY_MAX)
        self._ua_category = int(value)

    @property
    def ua_classification_class(self) -> int:
        return _as_enum(UAClassificationClass, self._ua_class)

    @ua_classification_class.setter
    def ua_classification_class(self, value: int) -> None:
        _require_range("ua_classification_class", value, 0, _UA_CLASSIFICATION_CLASS_MAX)
        self._ua_class = int(value)

    @property
    def operator_latitude(self) -> float:
        """Latitude in degrees; 0.0 means unknown."""
        return self._latitude / _LATLON_SCALE

    @operator_latitude.setter
    def operator_latitude(self, degrees: float) -> None:
        _require_range("operator_latitude", degrees, -90.0, 90.0)
        self._latitude = _round_half_up(degrees * _LATLON_SCALE)

    @property
    def operator_longitude(self) -> float:
        """Longitude in degrees; 0.0 means unknown."""
        return self._longitude / _LATLON_SCALE

    @operator_longitude.setter
    def operator_longitude(self, degrees: float) -> None:
        _require_range("operator_longitude", degrees, -180.0, 180.0)
        self._longitude = _round_half_up(degrees * _LATLON_SCALE)

    @property
    def operator_altitude(self) -> float:
        """Altitude in metres; -1000.0 means unknown."""
        return _decode_altitude(self._operator_altitude)

    @operator_altitude.setter
    def operator_altitude(self, value: float) -> None:
        if value == OPERATOR_ALTITUDE_INVALID:
            self._operator_altitude = OPERATOR_ALTITUDE_INVALID_ENCODED
            return
        self._operator_altitude = _encode_altitude(
            "operator_altitude", value, _ALTITUDE_MIN, _ALTITUDE_MAX
        )

    @property
    def area_count(self) -> int:
        """Number of aircraft in the operating area."""
        return self._area_count

    @area_count.setter
    def area_count(self, value: int) -> None:
        _require_range("area_count", value, 0, AREA_COUNT_MAX)
        self._area_count = int(value)

    @property
    def area_radius(self) -> int:
        """Radius of the operating area in metres, 10 m resolution."""
        return self._area_radius * _AREA_RADIUS_RESOLUTION

    @area_radius.setter
    def area_radius(self, meters: int) -> None:
        _require_range("area_radius", meters, 0, AREA_RADIUS_MAX)
        self._area_radius = min(_round_half_up(meters / _AREA_RADIUS_RESOLUTION), 0xFF)

    @property
    def area_ceiling(self) -> float:
        return _decode_altitude(self._area_ceiling)

    @area_ceiling.setter
    def area_ceiling(self, value: float) -> None:
        self._area_ceiling = _encode_altitude(
            "area_ceiling", value, AREA_CEILING_MIN, AREA_CEILING_MAX
        )

    @property
    def area_floor(self) -> float:
        return _decode_altitude(self._area_floor)

    @area_floor.setter
    def area_floor(self, value: float) -> None:
        self._area_floor = _encode_altitude("area_floor", value, AREA_FLOOR_MIN, AREA_FLOOR_MAX)

    @property
    def timestamp(self) -> int:
        """Seconds since 2019-01-01 00:00:00 UTC."""
        return self._timestamp

    @timestamp.setter
    def timestamp(self, value: int) -> None:
        _require_range("timestamp", value, 0, 0xFFFFFFFF)
        self._timestamp = int(value)

    @property
    def unixtime(self) -> int:
        """The timestamp as seconds since the Unix epoch."""
        return self._timestamp + SYSTEM_TIMESTAMP_EPOCH

    def set_unixtime(self, unixtime: int) -> None:
        """Set the timestamp from seconds since the Unix epoch."""
        if unixtime < SYSTEM_TIMESTAMP_EPOCH:
            raise OutOfRangeError(
                f"unixtime must not be before {SYSTEM_TIMESTAMP_EPOCH}, got {unixtime}"
            )
        self.timestamp = unixtime - SYSTEM_TIMESTAMP_EPOCH

    def validate(self) -> None:
        """Raise a ``RidError`` if any encoded field holds an invalid value."""
        check_protocol_version(self._protocol_version)
        if self._message_type != MessageType.SYSTEM:
            raise UnknownMessageTypeError(f"message type {self._message_type} is not SYSTEM")
        if not -_LATITUDE_ENCODED_MAX <= self._latitude <= _LATITUDE_ENCODED_MAX:
            raise InvalidLatitudeError(f"encoded latitude {self._latitude} out of range")
        if not -_LONGITUDE_ENCODED_MAX <= self._longitude <= _LONGITUDE_ENCODED_MAX:
            raise InvalidLongitudeError(f"encoded longitude {self._longitude} out of range")

    def to_bytes(self) -> bytes:
        """Return the 25-byte wire form of the message."""
        flags = (
            self._operator_location_type
            | (self._classification_type << 2)
            | (self._reserved_1 << 5)
        )
        classification = self._ua_class | (self._ua_category << 4)
        return _FORMAT.pack(
            encode_header(self._protocol_version, self._message_type)[0],
            flags,
            self._latitude,
            self._longitude,
            self._area_count,
            self._area_radius,
            self._area_ceiling,
            self._area_floor,
            classification,
            self._operator_altitude,
            self._timestamp,
            self._reserved_2,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> System:
        """Decode a System message from the first 25 bytes of ``data``."""
        if len(data) < MESSAGE_SIZE:
            raise BufferTooSmallError(f"need {MESSAGE_SIZE} bytes, got {len(data)}")
        (
            header,
            flags,
            latitude,
            longitude,
            area_count,
            area_radius,
            area_ceiling,
            area_floor,
            classification,
            operator_altitude,
            timestamp,
            reserved_2,
        ) = _FORMAT.unpack(bytes(data[:MESSAGE_SIZE]))
        version, message_type = decode_header(bytes([header]))
        system = cls(protocol_version=version, message_type=message_type)
        system._operator_location_type = flags & 0x03
        system._classification_type = (flags >> 2) & 0x07
        system._reserved_1 = flags >> 5
        system._latitude = latitude
        system._longitude = longitude
        system._area_count = area_count
        system._area_radius = area_radius
        system._area_ceiling = area_ceiling
        system._area_floor = area_floor
        system._ua_class = classification & 0x0F
        system._ua_category = classification >> 4
        system._operator_altitude = operator_altitude
        system._timestamp = timestamp
        system._reserved_2 = reserved_2
        return system

    def to_dict(self) -> dict[str, Any]:
        """Return the message fields as plain values."""
        return {
            "protocol_version": int(self.protocol_version),
            "message_type": int(self.message_type),
            "operator_location_type": int(self.operator_location_type),
            "classification_type": int(self.classification_type),
            "operator_latitude": self.operator_latitude,
            "operator_longitude": self.operator_longitude,
            "area_count": self.area_count,
            "area_radius": self.area_radius,
            "area_ceiling": self.area_ceiling,
            "area_floor": self.area_floor,
            "ua_classification_category": int(self.ua_classification_category),
            "ua_classification_class": int(self.ua_classification_class),
            "operator_altitude": self.operator_altitude,
            "timestamp": self.timestamp,
        }

    def to_json(self) -> str:
        """Return the message as a JSON object string."""
        return json.dumps(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, System):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        return f"System({fields})"