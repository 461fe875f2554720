# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay service client.

Usage Patterns:

    # Pattern 1: Simple usage (recommended for scripts)
    from pyggst import connect
    client = connect("210611132841904307", "61906d62687977")
    result = client.get_replays(pages=5)

    # Pattern 2: Context manager (recommended for applications)
    from pyggst import ClientIdentity, GGSTClient
    with GGSTClient(ClientIdentity(player_id=..., session_token=...)) as client:
        result = client.get_replays(pages=5, params=params)
    # HTTP session closes when exiting the block

    # Pattern 3: Custom transport
    client = GGSTClient(identity, transport=MyTransport())
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from .codec import DecodeOutcome, WireCodec
from .exceptions import UnexpectedResponseError
from .models import ClientConfig, ClientIdentity, UserIdReply, UserStatsReply
from .pagination import ReplayPaginator, ReplayResult
from .protocol import FORM_FIELD, Endpoint
from .query import QueryBuilder
from .transport import RequestsTransport, Transport
from .types import QueryParameters, User

logger = logging.getLogger(__name__)

# The statistics reply carries binary noise in front of its JSON body.
_JSON_START = re.compile(r"[^{]*\{")


class GGSTClient:
    """
    Client for the replay catalog service.

    The client handles:
    - Encoding queries with a fixed caller identity
    - Sequential page fetching with cross-page deduplication
    - Collecting per-record decode failures instead of aborting
    - The Steam id user lookup

    Example:
        >>> client = GGSTClient(identity)
        >>> params = QueryBuilder().min_floor(Floor.F10).build()
        >>> result = client.get_replays(pages=3, params=params)
        >>> for match in result:
        ...     print(match.winner_player().name)
        >>> client.close()
    """

    def __init__(
        self,
        identity: ClientIdentity,
        *,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the client.

        Args:
            identity: Caller fingerprint sent with every request.
            config: Optional ClientConfig object.
            transport: Optional HTTP transport. Defaults to RequestsTransport.
            **kwargs: Override config options (base_url, timeout, legacy_fallback, etc.)
        """
        if config is None:
            config = ClientConfig(**kwargs)
        else:
            for key, value in kwargs.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        self._config = config
        self._identity = identity
        self._codec = WireCodec(identity, legacy_fallback=config.legacy_fallback)
        self._owns_transport = transport is None
        self._transport: Transport = transport or RequestsTransport(
            timeout=config.timeout, user_agent=config.user_agent
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def codec(self) -> WireCodec:
        return self._codec

    def close(self) -> None:
        """Close the underlying transport if the client created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> GGSTClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    # =========================================================================
    # Replays
    # =========================================================================

    def _post(self, path: str, payload: str) -> bytes:
        return self._transport.post_form(f"{self._config.base_url}{path}", FORM_FIELD, payload)

    def paginator(
        self,
        pages: int,
        replays_per_page: int | None = None,
        params: QueryParameters | None = None,
    ) -> ReplayPaginator:
        """
        Create a paginator for a replay query without fetching anything yet.

        Raises:
            InvalidArgumentError: If an argument is out of range.
        """
        if replays_per_page is None:
            replays_per_page = self._config.replays_per_page
        if params is None:
            params = QueryBuilder().build()
        return ReplayPaginator(
            self._codec,
            lambda payload: self._post(Endpoint.REPLAYS, payload),
            pages=pages,
            replays_per_page=replays_per_page,
            params=params,
        )

    def get_replays(
        self,
        pages: int = 1,
        replays_per_page: int | None = None,
        params: QueryParameters | None = None,
    ) -> ReplayResult:
        """
        Fetch replays matching a query.

        Args:
            pages: Number of pages to request (0-100).
            replays_per_page: Records per page (0-127). Defaults to config.
            params: Query filters. Defaults to every floor, no filters.

        Returns:
            ReplayResult with sorted, deduplicated matches and the
            ParseErrors of every record that could not be decoded.

        Raises:
            InvalidArgumentError: If an argument is out of range. No request is sent.
            TransportError: If a request fails. Earlier pages are discarded.
        """
        paginator = self.paginator(pages, replays_per_page, params)
        result = paginator.collect()
        logger.debug(
            "Fetched %d of %d pages: %d matches, %d errors",
            result.pages_fetched,
            pages,
            len(result.matches),
            len(result.errors),
        )
        return result

    def iter_pages(
        self,
        pages: int,
        replays_per_page: int | None = None,
        params: QueryParameters | None = None,
    ) -> Iterator[DecodeOutcome]:
        """Yield the decode outcome of each page, without merging."""
        return iter(self.paginator(pages, replays_per_page, params))

    # =========================================================================
    # Users
    # =========================================================================

    def user_id_from_steam_id(self, steam_id: str) -> str:
        """
        Look up a player id in the utilities database.

        Raises:
            UnexpectedResponseError: If the entry does not exist.
            TransportError: If the request fails.
        """
        data = self._transport.get_json(f"{self._config.utils_base_url}/{steam_id}.json")
        if not isinstance(data, dict):
            raise UnexpectedResponseError(f"no user id for Steam id {steam_id}")
        try:
            return UserIdReply.model_validate(data).user_id
        except ValidationError as e:
            raise UnexpectedResponseError(f"no user id for Steam id {steam_id}") from e

    def user_from_steam_id(self, steam_id: str) -> User:
        """
        Fetch a player's profile by Steam id.

        Raises:
            UnexpectedResponseError: If either reply is missing fields.
            TransportError: If a request fails.
        """
        user_id = self.user_id_from_steam_id(steam_id)
        reply = self._post(Endpoint.STATISTICS, self._codec.encode_user_stats(user_id))

        text = _JSON_START.sub("{", reply.decode("utf-8", errors="replace"), count=1)
        try:
            stats = UserStatsReply.model_validate_json(text)
        except ValidationError as e:
            raise UnexpectedResponseError(f"statistics reply for {user_id} is malformed") from e

        return User(user_id=user_id, name=stats.nick_name, comment=stats.public_comment)


def connect(
    player_id: str,
    session_token: str,
    **kwargs: Any,
) -> GGSTClient:
    """
    Create a client for the replay service.

    This is the simplest way to get started:

        >>> from pyggst import connect
        >>> client = connect("210611132841904307", "61906d62687977")
        >>> result = client.get_replays(pages=2)

    Args:
        player_id: 18-digit player id of the calling account.
        session_token: Session token of the calling account.
        **kwargs: Config options (base_url, timeout, legacy_fallback, etc.)

    Returns:
        Configured GGSTClient.
    """
    identity = ClientIdentity(player_id=player_id, session_token=session_token)
    return GGSTClient(identity, **kwargs)
