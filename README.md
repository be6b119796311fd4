# remoteid

`remoteid` is a pure Python library for drone Remote ID broadcast messages as
defined in ASTM F3411-22a. It builds, parses and validates three kinds of
message:

- authentication messages, as single pages or as signatures spread over many pages
- message packs
- System messages

Each message encodes to the 25-byte wire format and decodes back from it. Each
one can also be turned into a dictionary or a JSON string.

The library has no runtime dependencies.

## Installation

```
pip install remoteid
```

To run the tests:

```
pip install "remoteid[test]"
pytest
```

## Modules

- `remoteid.common` holds the things every message shares:
  - the error classes;
  - the `ProtocolVersion` and `MessageType` enums;
  - `encode_header` and `decode_header`, which handle the first byte of a message;
  - `check_protocol_version`, which accepts 0, 1, 2 and 0x0F (private use).
- `remoteid.auth_page` holds single authentication pages (`AuthPage0`, `AuthPageX`) and the `AuthType` enum.
- `remoteid.auth` holds `Auth`, a signature spread over several pages.
- `remoteid.message_pack` holds `MessagePack`.
- `remoteid.system` holds `System` and the enums that classify the operator and the aircraft.

## Authentication

`Auth` takes a signature of up to 255 bytes and splits it over
authentication pages. Page 0 holds 17 bytes of data. Each further page holds
23 bytes.

```python
from remoteid.auth import Auth
from remoteid.auth_page import AuthType

auth = Auth()
auth.set_type(AuthType.UAS_ID_SIGNATURE)
auth.set_unixtime(1_700_000_000)
auth.set_signature(bytes(64))
auth.validate()

print(auth.page_count)          # 4
for page in auth.pages():
    frame = page.to_bytes()     # 25 bytes each

print(auth.signature == bytes(64))
print(auth.to_json())
```

How `Auth` handles time and type:

- `timestamp` counts seconds since 2019-01-01 00:00:00 UTC.
- `unixtime` gives the same moment as seconds since the Unix epoch.
- `set_unixtime` raises `OutOfRangeError` for times before 2019.
- Setting the type to `AuthType.NETWORK_REMOTE_ID` clears the signature, because that type must carry none. `validate` raises `NonEmptySignatureError` if such a message has a signature anyway.

You can also work with single pages:

- `AuthPage0` and `AuthPageX` have `to_bytes`, `from_bytes`, `set_data`, `to_dict` and `to_json`.
- `parse_auth_page` decodes raw bytes and reads the page number to choose between page 0 and pages 1-15.
- `auth_page_to_json` renders a page object or raw page bytes as JSON.
- `auth_type_to_string` gives the symbolic name of an auth type, for example `"RID_AUTH_TYPE_UAS_ID_SIGNATURE"`. It returns `"UNKNOWN"` for other values.

## Message packs

A pack holds at most nine 25-byte messages. You can add a message as raw bytes
or as any object with a `to_bytes` method.

```python
from remoteid.message_pack import MessagePack
from remoteid.system import System

pack = MessagePack()
pack.add(System())
pack.validate()
data = pack.to_bytes()          # 3 header bytes + 25 per message
same = MessagePack.from_bytes(data)
assert same == pack
```

Working with the contents:

- `add`, `replace` and `delete` edit the pack. When a message is deleted, the messages after it move down.
- The pack supports `len()`, iteration and indexing.
- `to_dict` and `to_json` decode authentication pages into their fields. Every other message appears as its header fields and its raw bytes in hex under `"data"`.

## System messages

```python
from remoteid.system import (
    ClassificationType,
    OperatorLocationType,
    System,
    UAClassificationCategory,
    UAClassificationClass,
)

system = System()
system.operator_location_type = OperatorLocationType.TAKEOFF
system.classification_type = ClassificationType.EUROPEAN_UNION
system.ua_classification_category = UAClassificationCategory.OPEN
system.ua_classification_class = UAClassificationClass.CLASS_1
system.operator_latitude = 60.2870324
system.operator_longitude = 24.5397187
system.operator_altitude = 50.0
system.area_radius = 100
system.set_unixtime(1_700_000_000)
system.validate()

print(system.to_json())
assert System.from_bytes(system.to_bytes()) == system
```

How the fields are stored:

- Latitude and longitude are stored in units of 10⁻⁷ degrees.
- Altitudes, area ceiling and area floor have a resolution of 0.5 m and a range of -1000 to 31767 m.
- The area radius has a resolution of 10 m and a maximum of 2550 m.
- Assigning a value outside its range raises `OutOfRangeError`.
- An unknown operator altitude is stored as `OPERATOR_ALTITUDE_INVALID` and reads back as -1000.0.

`operator_location_type_to_string`, `classification_type_to_string`,
`ua_classification_category_to_string` and `ua_classification_class_to_string`
give the symbolic name of each enum value. They return `"UNKNOWN"` for values
they do not know.

## Errors

Invalid values and malformed messages raise subclasses of
`remoteid.common.RidError`. Examples are `OutOfRangeError`,
`BufferTooSmallError`, `InvalidProtocolVersionError`,
`UnknownMessageTypeError` and `InvalidLatitudeError`. `OutOfRangeError`,
`BufferTooLargeError` and `BufferTooSmallError` are also subclasses of
`ValueError`.

## What this package does not do

- It has no classes for Basic ID, Location, Self ID or Operator ID messages. A message pack carries such messages only as raw bytes.
- It has no command-line tool.
- It does not receive or send frames over Bluetooth or Wi-Fi.
- It does not create or check signatures. It only carries the signature bytes it is given.