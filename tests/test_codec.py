# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""Tests for WireCodec encode/decode."""

import logging
from datetime import datetime, timezone

import msgpack
import pytest

from pyggst.binary import BinaryPlayer, BinaryReplayRecord
from pyggst.codec import DecodePath, WireCodec, record_to_match
from pyggst.exceptions import (
    EnvelopeDecodeError,
    InvalidCharacterCodeError,
    InvalidFloorCodeError,
    InvalidPlayerIdError,
    InvalidWinnerCodeError,
    ParsingBytesError,
    TimestampParseError,
)
from pyggst.protocol import MIN_LEGACY_REPLY_SIZE, from_hex
from pyggst.query import QueryBuilder
from pyggst.types import Character, Floor, Winner

from replay_fixtures import legacy_record, legacy_reply, numbered_records, player, record, reply


def _binary_record(**overrides) -> BinaryReplayRecord:
    fields = dict(
        floor=0x63,
        char_1=0x00,
        char_2=0x11,
        player_1=BinaryPlayer(id="210611132841904307", name="enemy fungus"),
        player_2=BinaryPlayer(id="18446744073709551615", name="Daru"),
        winner=2,
        timestamp="2021-10-18 23:59:01",
    )
    fields.update(overrides)
    return BinaryReplayRecord(**fields)


class TestEncode:
    """Tests for request encoding."""

    def test_output_is_uppercase_hex(self, codec: WireCodec) -> None:
        payload = codec.encode(0, 127, QueryBuilder().build())
        assert payload == payload.upper()
        bytes.fromhex(payload)

    def test_default_query(self, codec: WireCodec) -> None:
        document = msgpack.unpackb(from_hex(codec.encode(4, 50, QueryBuilder().build())))
        header, body = document
        assert header == ["210611132841904307", "61906d62687977", 2, "0.1.0", 3]
        assert body == [1, 4, 50, [-1, 1, 0x00, 0x63, [], -1, -1, 0, 0, 1]]

    def test_filters(self, codec: WireCodec) -> None:
        params = (
            QueryBuilder()
            .min_floor(Floor.F8)
            .max_floor(Floor.F10)
            .character(Character.NAGORIYUKI)
            .character(Character.GIOVANNA)
            .winner(Winner.PLAYER_2)
            .build()
        )
        query = msgpack.unpackb(from_hex(codec.encode(0, 10, params)))[1][3]
        assert query[2:4] == [0x07, 0x09]
        assert query[5:8] == [0x0B, 0x0C, 2]

    def test_unset_characters_are_ff_bytes(self, codec: WireCodec) -> None:
        raw = from_hex(codec.encode(0, 10, QueryBuilder().build()))
        # ..., [], char_1, char_2, winner, reserved2, reserved3
        assert raw.endswith(b"\x90\xff\xff\x00\x00\x01")

    def test_identity_is_injected(self, identity) -> None:
        custom = identity.model_copy(update={"version": "0.0.8", "platform_flag": 4})
        header = msgpack.unpackb(from_hex(WireCodec(custom).encode(0, 1, QueryBuilder().build())))[0]
        assert header[3:] == ["0.0.8", 4]

    def test_user_stats(self, codec: WireCodec) -> None:
        document = msgpack.unpackb(from_hex(codec.encode_user_stats("210611132841904307")))
        assert document[1][:2] == ["210611132841904307", 7]


class TestRecordToMatch:
    """Tests for record conversion."""

    def test_conversion(self) -> None:
        match = record_to_match(_binary_record())
        assert match.timestamp == datetime(2021, 10, 18, 23, 59, 1, tzinfo=timezone.utc)
        assert match.floor is Floor.CELESTIAL
        assert match.players[0].character is Character.SOL
        assert match.players[1].character is Character.HAPPY_CHAOS
        assert match.players[1].id == 2**64 - 1
        assert match.winner is Winner.PLAYER_2
        assert match.winner_player().name == "Daru"

    @pytest.mark.parametrize(
        ("overrides", "error"),
        [
            ({"char_1": 0x12}, InvalidCharacterCodeError),
            ({"char_2": 0xFF}, InvalidCharacterCodeError),
            ({"floor": 0x0A}, InvalidFloorCodeError),
            ({"winner": 0}, InvalidWinnerCodeError),
            ({"winner": 3}, InvalidWinnerCodeError),
            ({"timestamp": "2021/10/18 23:59:01"}, TimestampParseError),
            ({"timestamp": "2021-13-01 00:00:00"}, TimestampParseError),
            ({"player_1": BinaryPlayer(id="12ab", name="x")}, InvalidPlayerIdError),
            ({"player_1": BinaryPlayer(id="-1", name="x")}, InvalidPlayerIdError),
            ({"player_2": BinaryPlayer(id="18446744073709551616", name="x")}, InvalidPlayerIdError),
            ({"player_2": BinaryPlayer(id="", name="x")}, InvalidPlayerIdError),
        ],
    )
    def test_conversion_errors(self, overrides, error) -> None:
        with pytest.raises(error):
            record_to_match(_binary_record(**overrides))


class TestDecode:
    """Tests for reply decoding."""

    def test_golden_page(self, codec: WireCodec) -> None:
        """A full page of well-formed records decodes without errors."""
        outcome = codec.decode(reply(numbered_records(27)))
        assert outcome.path is DecodePath.TYPED
        assert len(outcome.matches) == 27
        assert outcome.errors == []

    def test_one_bad_winner(self, codec: WireCodec) -> None:
        """A bad record is reported and its siblings still decode."""
        records = numbered_records(5)
        records[2][7] = 0x03
        outcome = codec.decode(reply(records))
        assert len(outcome.matches) == 4
        assert len(outcome.errors) == 1
        err = outcome.errors[0]
        assert isinstance(err.inner, InvalidWinnerCodeError)
        assert "2021-10-18 12:02:00" in err.reply_content
        assert "Could not parse replay" in str(err)

    def test_several_bad_records(self, codec: WireCodec) -> None:
        records = [
            record(timestamp="2021-10-18 10:00:00"),
            record(char_1=0x30, timestamp="2021-10-18 10:01:00"),
            record(floor=0x20, timestamp="2021-10-18 10:02:00"),
            record(player_2=player(ident="not-a-number"), timestamp="2021-10-18 10:03:00"),
            record(timestamp="yesterday"),
        ]
        outcome = codec.decode(reply(records))
        assert len(outcome.matches) == 1
        assert [type(e.inner) for e in outcome.errors] == [
            InvalidCharacterCodeError,
            InvalidFloorCodeError,
            InvalidPlayerIdError,
            TimestampParseError,
        ]

    def test_decode_is_idempotent(self, codec: WireCodec) -> None:
        records = numbered_records(4)
        records[1][3] = 0x7F
        data = reply(records)
        assert codec.decode(data) == codec.decode(data)

    def test_envelope_failure(self, codec: WireCodec) -> None:
        """A broken envelope gives one error with the raw bytes and no matches."""
        data = b"\xc1" + reply(numbered_records(3))
        outcome = codec.decode(data)
        assert outcome.path is DecodePath.FAILED
        assert outcome.matches == []
        assert len(outcome.errors) == 1
        assert isinstance(outcome.errors[0].inner, EnvelopeDecodeError)
        assert outcome.errors[0].reply_content == data.hex()

    def test_legacy_reply_without_fallback(self, codec: WireCodec) -> None:
        outcome = codec.decode(legacy_reply([legacy_record()]))
        assert outcome.path is DecodePath.FAILED
        assert len(outcome.errors) == 1

    def test_legacy_reply_with_fallback(self, legacy_codec: WireCodec) -> None:
        data = legacy_reply([
            legacy_record(),
            legacy_record(char_1=0x40, timestamp="2021-09-30 08:16:00"),
            legacy_record(winner=1, timestamp="2021-09-30 08:17:00"),
        ])
        outcome = legacy_codec.decode(data)
        assert outcome.path is DecodePath.LEGACY
        assert len(outcome.matches) == 2
        assert len(outcome.errors) == 1
        assert isinstance(outcome.errors[0].inner, InvalidCharacterCodeError)
        assert outcome.matches[0].players[0].name == "Legacy One"
        assert outcome.matches[0].winner is Winner.PLAYER_2

    def test_legacy_short_chunk_is_recorded(self, legacy_codec: WireCodec) -> None:
        data = legacy_reply([legacy_record(), legacy_record()[:-30]])
        outcome = legacy_codec.decode(data)
        assert len(outcome.matches) == 1
        assert isinstance(outcome.errors[0].inner, ParsingBytesError)

    def test_legacy_fallback_with_nothing_usable(self, legacy_codec: WireCodec) -> None:
        outcome = legacy_codec.decode(b"\x00" * 300)
        assert outcome.path is DecodePath.FAILED
        assert isinstance(outcome.errors[0].inner, EnvelopeDecodeError)

    def test_typed_reply_ignores_fallback(self, legacy_codec: WireCodec) -> None:
        outcome = legacy_codec.decode(reply(numbered_records(2)))
        assert outcome.path is DecodePath.TYPED

    def test_empty_replay_list(self, codec: WireCodec) -> None:
        outcome = codec.decode(reply([]))
        assert outcome.path is DecodePath.TYPED
        assert outcome.is_empty

    def test_failed_outcome_is_not_empty(self, codec: WireCodec) -> None:
        assert not codec.decode(b"\xc1" * 20).is_empty

    def test_legacy_fallback_ignores_short_reply(self, legacy_codec: WireCodec) -> None:
        """A reply too short for one legacy record is not split."""
        data = legacy_reply([legacy_record()])[:MIN_LEGACY_REPLY_SIZE - 1]
        outcome = legacy_codec.decode(data)
        assert outcome.path is DecodePath.FAILED


class TestLogging:
    """Tests for codec debug logging."""

    def test_encode_logs_floor_range(self, codec: WireCodec, caplog) -> None:
        params = QueryBuilder().min_floor(Floor.F8).build()
        with caplog.at_level(logging.DEBUG, logger="pyggst.codec"):
            codec.encode(2, 30, params)
        assert "Encoding page 2: floors 07..63, 30 per page" in caplog.text

    def test_decode_logs_reply_counts(self, codec: WireCodec, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="pyggst.codec"):
            codec.decode(reply(numbered_records(2)))
        assert "counts (0, 2, 0)" in caplog.text
