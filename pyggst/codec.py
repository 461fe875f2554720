# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay wire codec.

WireCodec turns a QueryParameters value into the hex request the service
expects, and turns a binary reply back into Match values.

Decoding never raises. Every problem is reported as a ParseError in the
returned DecodeOutcome:

- A record with a bad code, id, timestamp or winner fails on its own;
  the other records in the reply still decode.
- A reply whose outer structure cannot be read produces exactly one
  ParseError carrying the raw bytes, and no matches.

When legacy fallback is enabled, a reply that fails the structured
decode is handed to the byte-layout splitter before giving up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .binary import (
    BinaryPlayer,
    BinaryReplayQuery,
    BinaryReplayRecord,
    BinaryReplayRequest,
    BinaryUserStatsRequest,
    decode_legacy_record,
    decode_replay_response,
    encode_replay_request,
    encode_user_stats_request,
    split_legacy_records,
)
from .exceptions import (
    DecodeError,
    EnvelopeDecodeError,
    InvalidPlayerIdError,
    ParseError,
    RecordConversionError,
    TimestampParseError,
)
from .models import ClientIdentity
from .protocol import ANY_CHARACTER, ANY_WINNER, MIN_LEGACY_REPLY_SIZE, TIMESTAMP_FORMAT, to_hex
from .types import Character, Floor, Match, Player, QueryParameters, Winner

logger = logging.getLogger(__name__)

_MAX_PLAYER_ID = 2**64 - 1


class DecodePath(str, Enum):
    """Which decoder served a reply."""
    TYPED = "typed"
    LEGACY = "legacy"
    FAILED = "failed"


@dataclass(frozen=True)
class DecodeOutcome:
    """Result of decoding one reply."""

    path: DecodePath
    matches: list[Match] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the reply decoded cleanly but held no records."""
        return self.path is DecodePath.TYPED and not self.matches and not self.errors


def _parse_player_id(value: str) -> int:
    if not value.isascii() or not value.isdigit():
        raise InvalidPlayerIdError(value)
    player_id = int(value)
    if player_id > _MAX_PLAYER_ID:
        raise InvalidPlayerIdError(value)
    return player_id


def _parse_timestamp(value: str) -> datetime:
    # The service sends no offset; its clock is UTC.
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        raise TimestampParseError(value) from None
    return parsed.replace(tzinfo=timezone.utc)


def _convert_player(player: BinaryPlayer, char_code: int) -> Player:
    return Player(
        id=_parse_player_id(player.id),
        name=player.name,
        character=Character.from_byte(char_code),
    )


def record_to_match(record: BinaryReplayRecord) -> Match:
    """
    Convert one wire record to a Match.

    Raises:
        RecordConversionError: If any code, id or timestamp is invalid.
    """
    return Match(
        timestamp=_parse_timestamp(record.timestamp),
        floor=Floor.from_byte(record.floor),
        players=(
            _convert_player(record.player_1, record.char_1),
            _convert_player(record.player_2, record.char_2),
        ),
        winner=Winner.from_byte(record.winner),
    )


class WireCodec:
    """
    Encoder/decoder bound to one caller identity.

    Example:
        >>> codec = WireCodec(identity)
        >>> payload = codec.encode(0, 127, QueryBuilder().build())
        >>> outcome = codec.decode(reply_bytes)
        >>> outcome.matches, outcome.errors
    """

    def __init__(self, identity: ClientIdentity, *, legacy_fallback: bool = False) -> None:
        self._identity = identity
        self._header = identity.to_header()
        self._legacy_fallback = legacy_fallback

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    @property
    def legacy_fallback(self) -> bool:
        return self._legacy_fallback

    # =========================================================================
    # Encoding
    # =========================================================================

    def encode(self, page_index: int, replays_per_page: int, params: QueryParameters) -> str:
        """
        Encode a replay list request for one page.

        Args:
            page_index: 0-based page to request.
            replays_per_page: Records per page.
            params: Query filters.

        Returns:
            Uppercase hex string ready to POST.
        """
        query = BinaryReplayQuery(
            min_floor=params.min_floor.to_byte(),
            max_floor=params.max_floor.to_byte(),
            char_1=params.char_1.to_byte() if params.char_1 is not None else ANY_CHARACTER,
            char_2=params.char_2.to_byte() if params.char_2 is not None else ANY_CHARACTER,
            winner=params.winner.to_byte() if params.winner is not None else ANY_WINNER,
        )
        req = BinaryReplayRequest(
            header=self._header,
            page_index=page_index,
            replays_per_page=replays_per_page,
            query=query,
        )
        logger.debug(
            "Encoding page %d: floors %s..%s, %d per page",
            page_index,
            params.min_floor.to_hex(),
            params.max_floor.to_hex(),
            replays_per_page,
        )
        return to_hex(encode_replay_request(req))

    def encode_user_stats(self, user_id: str) -> str:
        """Encode a statistics request for one player id."""
        req = BinaryUserStatsRequest(header=self._header, user_id=user_id)
        return to_hex(encode_user_stats_request(req))

    # =========================================================================
    # Decoding
    # =========================================================================

    def decode(self, data: bytes) -> DecodeOutcome:
        """
        Decode a replay list reply.

        Args:
            data: Raw reply body.

        Returns:
            DecodeOutcome with the matches that converted, one ParseError per
            record that did not, and the decoder path that served the reply.
        """
        try:
            response = decode_replay_response(data)
        except EnvelopeDecodeError as e:
            if self._legacy_fallback:
                outcome = self._decode_legacy(data)
                if outcome is not None:
                    logger.warning(
                        "Reply served by legacy decoder: %d matches, %d errors",
                        len(outcome.matches),
                        len(outcome.errors),
                    )
                    return outcome
            logger.warning("Could not decode reply of %d bytes: %s", len(data), e)
            return DecodeOutcome(DecodePath.FAILED, errors=[ParseError(data.hex(), e)])

        matches: list[Match] = []
        errors: list[ParseError] = []
        for record in response.replays:
            try:
                matches.append(record_to_match(record))
            except RecordConversionError as e:
                errors.append(ParseError(repr(record), e))

        logger.debug(
            "Reply served by typed decoder: %d records (counts %s), %d matches, %d errors",
            len(response.replays),
            response.counts,
            len(matches),
            len(errors),
        )
        return DecodeOutcome(DecodePath.TYPED, matches, errors)

    def _decode_legacy(self, data: bytes) -> DecodeOutcome | None:
        if len(data) < MIN_LEGACY_REPLY_SIZE:
            return None
        chunks = split_legacy_records(data)
        matches: list[Match] = []
        errors: list[ParseError] = []
        for chunk in chunks:
            try:
                matches.append(record_to_match(decode_legacy_record(chunk)))
            except DecodeError as e:
                errors.append(ParseError(chunk.hex(), e))

        if not matches:
            return None
        return DecodeOutcome(DecodePath.LEGACY, matches, errors)
