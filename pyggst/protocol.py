# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay service wire protocol.

Every request is a MessagePack array of two elements, hex encoded and
POSTed as the form field ``data``:

    [ header, body ]

    header = [ player_id, session_token, protocol_flag, version, platform_flag ]

Replies are raw MessagePack (not hex) with the same two-element shape:

    header = [ id, int, date, version, version, version, str, str ]
    body   = [ int, int, int, [ record, ... ] ]

The caller identity in the request header is fixed per client; see
ClientIdentity in models.py.

Older service versions framed replies differently enough that the typed
decode fails on them. For those, binary.py keeps a byte-layout splitter
keyed on the sentinels defined here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar

# Protocol constants
PROTOCOL_FLAG: int = 2
PROTOCOL_VERSION: str = "0.1.0"
PLATFORM_FLAG: int = 3
FORM_FIELD: str = "data"

MAX_PAGES: int = 100
MAX_REPLAYS_PER_PAGE: int = 127

# Query placeholders
ANY_CHARACTER: int = -1  # packs as 0xFF
ANY_WINNER: int = 0

# Legacy byte layout
LEGACY_HEADER_SIZE: int = 61
RECORD_SENTINEL: bytes = b"\x01\x00\x00\x00"
PLAYER_SENTINEL: bytes = b"\x95\xb2"  # fixarray(5) + fixstr(18): player record + id
TIMESTAMP_MARKER: int = 0xB3  # fixstr(19)
MIN_INFO_SECTION: int = 3
MIN_PLAYER_SECTION: int = 20
MIN_TAIL_SECTION: int = 71
PLAYER_ID_LENGTH: int = 18
TIMESTAMP_LENGTH: int = 19

# Smallest typed reply: fixarray(2), fixarray(8) of one-byte fields, [0, 0, 0, []]
MIN_ENVELOPE_SIZE: int = 1 + 1 + 8 + 1 + 3 + 1

# Smallest legacy reply that can still carry one replay record
MIN_LEGACY_REPLY_SIZE: int = (
    LEGACY_HEADER_SIZE
    + len(RECORD_SENTINEL)
    + MIN_INFO_SECTION
    + len(PLAYER_SENTINEL)
    + MIN_PLAYER_SECTION
    + len(PLAYER_SENTINEL)
    + MIN_TAIL_SECTION
)

TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"


class RequestKind(IntEnum):
    """Request body mode selector."""

    REPLAY_LIST = 1
    USER_STATS = 7


class PlayerSearch(IntEnum):
    """Whose replays a query searches. The catalog only serves ALL."""

    ALL = 1


class Endpoint:
    """Paths on the replay service."""

    REPLAYS = "/api/catalog/get_replay"
    STATISTICS = "/api/statistics/get"


@dataclass(frozen=True)
class RequestHeader:
    """Caller identity sent ahead of every request body."""

    player_id: str
    session_token: str
    protocol_flag: int = PROTOCOL_FLAG
    version: str = PROTOCOL_VERSION
    platform_flag: int = PLATFORM_FLAG

    def to_wire(self) -> list[Any]:
        """Positional form used in the MessagePack array."""
        return [
            self.player_id,
            self.session_token,
            self.protocol_flag,
            self.version,
            self.platform_flag,
        ]


@dataclass(frozen=True)
class ReplyHeader:
    """Header of a reply. Carried through for diagnostics only."""

    id: str
    status: int
    date: str
    versions: tuple[str, str, str]
    reserved: tuple[str, str]

    FIELD_COUNT: ClassVar[int] = 8

    @classmethod
    def from_wire(cls, data: Any) -> ReplyHeader:
        """Deserialize a header from its unpacked MessagePack form."""
        if not isinstance(data, (list, tuple)) or len(data) != cls.FIELD_COUNT:
            raise ValueError(f"Invalid reply header: {data!r}")

        ident, status, date, v1, v2, v3, r1, r2 = data
        if not isinstance(status, int):
            raise ValueError(f"Invalid reply status: {status!r}")
        for value in (ident, date, v1, v2, v3, r1, r2):
            if not isinstance(value, str):
                raise ValueError(f"Invalid reply header field: {value!r}")

        return cls(
            id=ident,
            status=status,
            date=date,
            versions=(v1, v2, v3),
            reserved=(r1, r2),
        )


def to_hex(payload: bytes) -> str:
    """Render a packed request for transport."""
    return payload.hex().upper()


def from_hex(text: str) -> bytes:
    """Inverse of to_hex."""
    return bytes.fromhex(text)
