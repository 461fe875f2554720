# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""Tests for binary request/reply structures."""

import msgpack
import pytest

from pyggst.binary import (
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
from pyggst.exceptions import EnvelopeDecodeError, ParsingBytesError
from pyggst.protocol import LEGACY_HEADER_SIZE, PLAYER_SENTINEL, RequestHeader

from replay_fixtures import legacy_record, legacy_reply, player, record, reply

HEADER = RequestHeader(player_id="210611132841904307", session_token="61906d62687977")


class TestEncodeReplayRequest:
    """Tests for replay list request encoding."""

    def test_layout(self) -> None:
        req = BinaryReplayRequest(
            header=HEADER,
            page_index=3,
            replays_per_page=127,
            query=BinaryReplayQuery(min_floor=0x00, max_floor=0x63, char_1=0x05),
        )
        document = msgpack.unpackb(encode_replay_request(req))
        assert document == [
            ["210611132841904307", "61906d62687977", 2, "0.1.0", 3],
            [1, 3, 127, [-1, 1, 0x00, 0x63, [], 0x05, -1, 0, 0, 1]],
        ]

    def test_starts_with_two_element_array(self) -> None:
        req = BinaryReplayRequest(
            header=HEADER,
            page_index=0,
            replays_per_page=10,
            query=BinaryReplayQuery(min_floor=0, max_floor=9),
        )
        assert encode_replay_request(req)[:2] == b"\x92\x95"


class TestEncodeUserStatsRequest:
    """Tests for user statistics request encoding."""

    def test_layout(self) -> None:
        req = BinaryUserStatsRequest(header=HEADER, user_id="210611132841904307")
        document = msgpack.unpackb(encode_user_stats_request(req))
        assert document[1] == ["210611132841904307", 7, 1, 1, -1, -1]


class TestDecodeReplayResponse:
    """Tests for replay list reply decoding."""

    def test_decode_records(self) -> None:
        response = decode_replay_response(reply([record(), record(winner=2)]))
        assert len(response.replays) == 2
        first = response.replays[0]
        assert first.floor == 0x09
        assert first.player_1.id == "210611132841904307"
        assert first.player_1.name == "enemy fungus"
        assert first.player_2.name == "Daru"
        assert first.timestamp == "2021-10-18 12:00:00"
        assert response.replays[1].winner == 2
        assert response.counts == (0, 2, 0)

    def test_decode_empty_page(self) -> None:
        response = decode_replay_response(reply([]))
        assert response.replays == []

    def test_invalid_codes_survive_envelope(self) -> None:
        """Out-of-range codes are left for per-record conversion."""
        response = decode_replay_response(reply([record(winner=3, char_1=0x40)]))
        assert response.replays[0].winner == 3
        assert response.replays[0].char_1 == 0x40

    def test_invalid_utf8_name_is_replaced(self) -> None:
        raw = reply([record(player_1=player(name="PLACEHOLDER"))])
        # same length, so the fixstr header stays valid
        raw = raw.replace(b"PLACEHOLDER", b"bad\xff\xfename!!")
        response = decode_replay_response(raw)
        assert "�" in response.replays[0].player_1.name

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"\xff" * 200,
            b"\x92\x91",
            msgpack.packb([1, 2]),
            msgpack.packb({"header": 1}),
        ],
    )
    def test_envelope_errors(self, data: bytes) -> None:
        with pytest.raises(EnvelopeDecodeError):
            decode_replay_response(data)

    def test_wrong_record_shape_fails_envelope(self) -> None:
        """A record that is not a 13-element array is a structural failure."""
        bad = record()[:12]
        with pytest.raises(EnvelopeDecodeError, match="replay: expected 13 elements"):
            decode_replay_response(reply([record(), bad]))

    def test_string_where_byte_expected(self) -> None:
        bad = record()
        bad[2] = "nine"
        with pytest.raises(EnvelopeDecodeError, match="replay.floor"):
            decode_replay_response(reply([bad]))

    def test_trailing_bytes(self) -> None:
        with pytest.raises(EnvelopeDecodeError):
            decode_replay_response(reply([record()]) + b"\x00")


class TestLegacyLayout:
    """Tests for the legacy byte-layout splitter."""

    def test_split_records(self) -> None:
        data = legacy_reply([legacy_record(), legacy_record(winner=1)])
        assert len(split_legacy_records(data)) == 2

    def test_split_short_reply(self) -> None:
        assert split_legacy_records(b"\x00" * LEGACY_HEADER_SIZE) == []

    def test_decode_record(self) -> None:
        parsed = decode_legacy_record(legacy_record(floor=0x63, char_1=0x11, char_2=0x02))
        assert isinstance(parsed, BinaryReplayRecord)
        assert (parsed.floor, parsed.char_1, parsed.char_2) == (0x63, 0x11, 0x02)
        assert parsed.player_1.id == "210611132841904307"
        assert parsed.player_1.name == "Legacy One"
        assert parsed.player_2.id == "210822163725369000"
        assert parsed.player_2.name == "Legacy Two"
        assert parsed.winner == 2
        assert parsed.timestamp == "2021-09-30 08:15:00"

    def test_missing_player_sentinel(self) -> None:
        with pytest.raises(ParsingBytesError, match="expected two player records"):
            decode_legacy_record(b"\x00\x01\x02" + PLAYER_SENTINEL + b"1" * 40)

    def test_short_info_section(self) -> None:
        chunk = legacy_record()
        info_end = chunk.index(PLAYER_SENTINEL)
        with pytest.raises(ParsingBytesError, match="floor and character"):
            decode_legacy_record(chunk[info_end - 2:])

    def test_short_player_two_section(self) -> None:
        chunk = legacy_record()
        with pytest.raises(ParsingBytesError, match="player 2"):
            decode_legacy_record(chunk[:-20])

    def test_missing_timestamp(self) -> None:
        chunk = legacy_record().replace(b"\xb32021-09-30 08:15:00", b"\x00" * 20)
        with pytest.raises(ParsingBytesError, match="timestamp not found"):
            decode_legacy_record(chunk)

    def test_companion_string_of_timestamp_length(self) -> None:
        """The timestamp is the last 19-character string in the block."""
        chunk = legacy_record()
        chunk = chunk.replace(b"\xb176561198045733267", b"\xb3" + b"x" * 19)
        parsed = decode_legacy_record(chunk)
        assert parsed.timestamp == "2021-09-30 08:15:00"
        assert parsed.winner == 2
