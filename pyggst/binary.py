# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay service binary encoding/decoding.

Requests and replies are MessagePack documents. MessagePack is
self-describing, so every field carries its own type/length tag and
arrays are length-prefixed; the structures below only fix the position
and type of each element.

Binary Format Conventions:
- Every structure is a positional array, never a map
- Unset character filters are sent as -1, which packs as 0xFF
- Player ids travel as 18-character decimal strings
- Timestamps travel as "YYYY-MM-DD HH:MM:SS" strings in UTC

The second half of this module is the legacy byte-layout splitter used
for reply variants that the structured decoder cannot read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

import msgpack

from .exceptions import EnvelopeDecodeError, ParsingBytesError
from .protocol import (
    ANY_CHARACTER,
    ANY_WINNER,
    LEGACY_HEADER_SIZE,
    MIN_INFO_SECTION,
    MIN_PLAYER_SECTION,
    MIN_TAIL_SECTION,
    PLAYER_ID_LENGTH,
    PLAYER_SENTINEL,
    RECORD_SENTINEL,
    TIMESTAMP_LENGTH,
    TIMESTAMP_MARKER,
    PlayerSearch,
    ReplyHeader,
    RequestHeader,
    RequestKind,
)


def _pack(obj: Any) -> bytes:
    return msgpack.packb(obj, use_bin_type=True)


def _expect_int(value: Any, name: str, *, byte: bool = False) -> int:
    # bool is an int subclass but never a valid wire integer
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name}: expected integer, got {value!r}")
    if byte and not 0 <= value <= 0xFF:
        raise ValueError(f"{name}: {value} does not fit in a byte")
    return value


def _expect_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name}: expected string, got {value!r}")
    return value


def _expect_array(value: Any, name: str, length: int | None = None) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{name}: expected array, got {type(value).__name__}")
    if length is not None and len(value) != length:
        raise ValueError(f"{name}: expected {length} elements, got {len(value)}")
    return list(value)


# =============================================================================
# Replay List Request
# =============================================================================

@dataclass
class BinaryReplayQuery:
    """Filter section of a replay list request."""
    min_floor: int
    max_floor: int
    char_1: int = ANY_CHARACTER
    char_2: int = ANY_CHARACTER
    winner: int = ANY_WINNER
    player_search: PlayerSearch = PlayerSearch.ALL
    reserved_flag: int = -1
    reserved_flag2: int = 0
    reserved_flag3: int = 1

    def to_wire(self) -> list[Any]:
        return [
            self.reserved_flag,
            int(self.player_search),
            self.min_floor,
            self.max_floor,
            [],
            self.char_1,
            self.char_2,
            self.winner,
            self.reserved_flag2,
            self.reserved_flag3,
        ]


@dataclass
class BinaryReplayRequest:
    """Binary replay list request."""
    header: RequestHeader
    page_index: int
    replays_per_page: int
    query: BinaryReplayQuery
    mode: RequestKind = RequestKind.REPLAY_LIST


def encode_replay_request(req: BinaryReplayRequest) -> bytes:
    """
    Encode replay list request to MessagePack.

    Format:
        [header, [mode, page_index, replays_per_page,
                  [reserved, search, min_floor, max_floor, [],
                   char_1, char_2, winner, reserved2, reserved3]]]
    """
    body = [
        int(req.mode),
        req.page_index,
        req.replays_per_page,
        req.query.to_wire(),
    ]
    return _pack([req.header.to_wire(), body])


# =============================================================================
# User Stats Request
# =============================================================================

@dataclass
class BinaryUserStatsRequest:
    """Binary user statistics request."""
    header: RequestHeader
    user_id: str
    mode: RequestKind = RequestKind.USER_STATS


def encode_user_stats_request(req: BinaryUserStatsRequest) -> bytes:
    """
    Encode user statistics request to MessagePack.

    Format: [header, [user_id, mode, 1, 1, -1, -1]]
    """
    body = [req.user_id, int(req.mode), 1, 1, -1, -1]
    return _pack([req.header.to_wire(), body])


# =============================================================================
# Replay List Response
# =============================================================================

@dataclass(frozen=True)
class BinaryPlayer:
    """Player entry of a replay record."""
    id: str
    name: str
    online_id: str = ""
    platform_name: str = ""
    extra: int = 0

    @classmethod
    def from_wire(cls, data: Any) -> BinaryPlayer:
        ident, name, online_id, platform_name, extra = _expect_array(data, "player", 5)
        return cls(
            id=_expect_str(ident, "player.id"),
            name=_expect_str(name, "player.name"),
            online_id=_expect_str(online_id, "player.online_id"),
            platform_name=_expect_str(platform_name, "player.platform_name"),
            extra=_expect_int(extra, "player.extra"),
        )


@dataclass(frozen=True)
class BinaryReplayRecord:
    """
    One replay record as it appears on the wire.

    Codes are raw bytes; converting them to domain values happens in
    codec.py so that a bad code only fails its own record.
    """
    floor: int
    char_1: int
    char_2: int
    player_1: BinaryPlayer
    player_2: BinaryPlayer
    winner: int
    timestamp: str
    views: int = 0
    likes: int = 0
    reserved: tuple[int, ...] = field(default=(), compare=False)

    FIELD_COUNT: ClassVar[int] = 13

    @classmethod
    def from_wire(cls, data: Any) -> BinaryReplayRecord:
        (
            r1,
            r2,
            floor,
            char_1,
            char_2,
            player_1,
            player_2,
            winner,
            timestamp,
            r3,
            views,
            r4,
            likes,
        ) = _expect_array(data, "replay", cls.FIELD_COUNT)
        return cls(
            floor=_expect_int(floor, "replay.floor", byte=True),
            char_1=_expect_int(char_1, "replay.char_1", byte=True),
            char_2=_expect_int(char_2, "replay.char_2", byte=True),
            player_1=BinaryPlayer.from_wire(player_1),
            player_2=BinaryPlayer.from_wire(player_2),
            winner=_expect_int(winner, "replay.winner", byte=True),
            timestamp=_expect_str(timestamp, "replay.timestamp"),
            views=_expect_int(views, "replay.views"),
            likes=_expect_int(likes, "replay.likes"),
            reserved=(
                _expect_int(r1, "replay.reserved"),
                _expect_int(r2, "replay.reserved"),
                _expect_int(r3, "replay.reserved"),
                _expect_int(r4, "replay.reserved"),
            ),
        )


@dataclass(frozen=True)
class BinaryReplayResponse:
    """Binary replay list response."""
    header: ReplyHeader
    counts: tuple[int, int, int]
    replays: list[BinaryReplayRecord]


def decode_replay_response(data: bytes) -> BinaryReplayResponse:
    """
    Decode replay list response.

    Format: [header(8), [int, int, int, [record(13), ...]]]

    Raises:
        EnvelopeDecodeError: If the reply is not MessagePack or does not
            have the expected shape. No partial result is returned.
    """
    try:
        document = msgpack.unpackb(data, raw=False, unicode_errors="replace")
        header_data, body = _expect_array(document, "reply", 2)
        header = ReplyHeader.from_wire(header_data)
        c1, c2, c3, replays = _expect_array(body, "body", 4)
        counts = (
            _expect_int(c1, "body.count"),
            _expect_int(c2, "body.count"),
            _expect_int(c3, "body.count"),
        )
        records = [
            BinaryReplayRecord.from_wire(entry)
            for entry in _expect_array(replays, "body.replays")
        ]
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise EnvelopeDecodeError(f"Could not decode reply envelope: {e}") from e

    return BinaryReplayResponse(header=header, counts=counts, replays=records)


# =============================================================================
# Legacy Byte Layout
# =============================================================================

_TIMESTAMP_RE = re.compile(
    re.escape(bytes([TIMESTAMP_MARKER])) + rb"([\x20-\x7e]{%d})" % TIMESTAMP_LENGTH
)


def split_legacy_records(data: bytes) -> list[bytes]:
    """
    Split a legacy reply into per-record chunks.

    The static header is dropped, the rest is split on RECORD_SENTINEL,
    and the preamble in front of the first sentinel is discarded.
    """
    if len(data) <= LEGACY_HEADER_SIZE:
        return []
    pieces = data[LEGACY_HEADER_SIZE:].split(RECORD_SENTINEL)
    return [piece for piece in pieces[1:] if piece]


def _read_str(block: bytes, pos: int, name: str) -> tuple[str, int]:
    """Read a MessagePack fixstr/str8 at pos. Returns (text, next_pos)."""
    if pos >= len(block):
        raise ParsingBytesError(f"Invalid {name} bytes: missing string header")
    tag = block[pos]
    if 0xA0 <= tag <= 0xBF:
        length, start = tag & 0x1F, pos + 1
    elif tag == 0xD9 and pos + 1 < len(block):
        length, start = block[pos + 1], pos + 2
    else:
        raise ParsingBytesError(f"Invalid {name} bytes: unexpected string tag 0x{tag:02x}")
    end = start + length
    if end > len(block):
        raise ParsingBytesError(f"Invalid {name} bytes: string runs past end of block")
    return block[start:end].decode("utf-8", errors="replace"), end


def _read_player(block: bytes) -> tuple[BinaryPlayer, int]:
    ident = block[:PLAYER_ID_LENGTH].decode("ascii", errors="replace")
    name, pos = _read_str(block, PLAYER_ID_LENGTH, "player name")
    return BinaryPlayer(id=ident, name=name), pos


def decode_legacy_record(chunk: bytes) -> BinaryReplayRecord:
    """
    Extract one replay record from a legacy chunk by byte layout.

    Layout: [.. floor char_1 char_2] 95B2 [player 1] 95B2 [player 2 .. winner B3 timestamp ..]

    Raises:
        ParsingBytesError: If a section is too short or a field is missing.
    """
    sections = chunk.split(PLAYER_SENTINEL, 2)
    if len(sections) < 3:
        raise ParsingBytesError("Invalid replay bytes: expected two player records")
    info, first, second = sections

    if len(info) < MIN_INFO_SECTION:
        raise ParsingBytesError("Invalid floor and character bytes")
    floor, char_1, char_2 = info[-3:]

    if len(first) < MIN_PLAYER_SECTION:
        raise ParsingBytesError("Invalid player 1 bytes")
    player_1, _ = _read_player(first)

    if len(second) < MIN_TAIL_SECTION:
        raise ParsingBytesError("Invalid player 2 bytes")
    player_2, pos = _read_player(second)

    # Last candidate wins: companion strings of the same length come first.
    candidates = list(_TIMESTAMP_RE.finditer(second, pos + 1))
    if not candidates:
        raise ParsingBytesError("Invalid replay bytes: timestamp not found")
    found = candidates[-1]
    winner = second[found.start() - 1]
    timestamp = found.group(1).decode("ascii")

    return BinaryReplayRecord(
        floor=floor,
        char_1=char_1,
        char_2=char_2,
        player_1=player_1,
        player_2=player_2,
        winner=winner,
        timestamp=timestamp,
    )
