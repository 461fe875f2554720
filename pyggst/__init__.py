# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
pyggst - Python client for the Guilty Gear Strive replay catalog.

A client library for the game's replay service with support for:
- Floor range, character and winner filters
- Paginated queries with cross-page deduplication
- Partial results when individual replay records are malformed
- A fallback decoder for older reply layouts
- Player lookup by Steam id

Quick Start (Simplest):
    >>> from pyggst import connect
    >>>
    >>> client = connect("210611132841904307", "61906d62687977")
    >>> result = client.get_replays(pages=2)
    >>> for match in result:
    ...     print(match.floor, match.winner_player().name)

Filtered Queries:
    >>> from pyggst import Character, Floor, QueryBuilder, Winner
    >>>
    >>> params = (
    ...     QueryBuilder()
    ...     .min_floor(Floor.F10)
    ...     .character(Character.SOL)
    ...     .winner(Winner.PLAYER_1)
    ...     .build()
    ... )
    >>> result = client.get_replays(pages=5, replays_per_page=50, params=params)

Partial Failures:
    >>> result = client.get_replays(pages=5)
    >>> print(f"{len(result.matches)} matches, {len(result.errors)} bad records")
    >>> for err in result.errors:
    ...     print(err.inner)

Context Manager:
    >>> from pyggst import ClientIdentity, GGSTClient
    >>>
    >>> identity = ClientIdentity(player_id="210611132841904307", session_token="61906d62687977")
    >>> with GGSTClient(identity, timeout=10) as client:
    ...     user = client.user_from_steam_id("76561198045733267")
"""

from .client import GGSTClient, connect
from .codec import DecodeOutcome, DecodePath, WireCodec, record_to_match
from .exceptions import (
    DecodeError,
    EnvelopeDecodeError,
    GGSTError,
    InvalidArgumentError,
    InvalidCharacterCodeError,
    InvalidFloorCodeError,
    InvalidPlayerIdError,
    InvalidWinnerCodeError,
    ParseError,
    ParsingBytesError,
    QueryBuilderError,
    RecordConversionError,
    TimestampParseError,
    TransportError,
    TransportTimeoutError,
    UnexpectedResponseError,
)
from .models import ClientConfig, ClientIdentity
from .pagination import ReplayPaginator, ReplayResult
from .protocol import MAX_PAGES, MAX_REPLAYS_PER_PAGE, PlayerSearch, RequestKind
from .query import QueryBuilder
from .transport import RequestsTransport, Transport
from .types import (
    Character,
    CharacterStats,
    Floor,
    Match,
    MatchStats,
    Player,
    QueryParameters,
    User,
    Winner,
)

__version__ = "0.3.0"
__author__ = "The pyggst Authors"
__license__ = "Apache-2.0"

__all__ = [
    # Client
    "GGSTClient",
    "connect",
    # Query
    "QueryBuilder",
    "QueryParameters",
    # Codec
    "WireCodec",
    "DecodeOutcome",
    "DecodePath",
    "record_to_match",
    # Pagination
    "ReplayPaginator",
    "ReplayResult",
    # Transport
    "Transport",
    "RequestsTransport",
    # Protocol
    "RequestKind",
    "PlayerSearch",
    "MAX_PAGES",
    "MAX_REPLAYS_PER_PAGE",
    # Configuration (Pydantic models)
    "ClientConfig",
    "ClientIdentity",
    # Types
    "Character",
    "Floor",
    "Winner",
    "Player",
    "Match",
    "User",
    "MatchStats",
    "CharacterStats",
    # Exceptions
    "GGSTError",
    "TransportError",
    "TransportTimeoutError",
    "InvalidArgumentError",
    "QueryBuilderError",
    "UnexpectedResponseError",
    "DecodeError",
    "EnvelopeDecodeError",
    "ParsingBytesError",
    "RecordConversionError",
    "InvalidCharacterCodeError",
    "InvalidFloorCodeError",
    "InvalidWinnerCodeError",
    "InvalidPlayerIdError",
    "TimestampParseError",
    "ParseError",
]
