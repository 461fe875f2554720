# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay pagination.

ReplayPaginator walks the service's pages one at a time and merges them:

- Pages are requested strictly in order, starting from page 0.
- Matches are deduplicated across pages; the same event seen twice is
  kept once.
- ParseErrors from every page are kept in the order they were found.
- A reply that decodes to an empty replay list, or one too short to be a
  reply at all, ends the walk early. That is the service's way of saying
  there is no more data, not an error.
- A TransportError aborts the walk and discards everything collected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .codec import DecodeOutcome, DecodePath, WireCodec
from .exceptions import InvalidArgumentError, ParseError
from .protocol import MAX_PAGES, MAX_REPLAYS_PER_PAGE, MIN_ENVELOPE_SIZE, MIN_LEGACY_REPLY_SIZE
from .types import Match, QueryParameters

logger = logging.getLogger(__name__)

# Sends one hex-encoded request and returns the raw reply.
Fetch = Callable[[str], bytes]


@dataclass(frozen=True)
class ReplayResult:
    """Deduplicated matches plus every record that failed to decode."""

    matches: tuple[Match, ...] = ()
    errors: list[ParseError] = field(default_factory=list)
    pages_fetched: int = 0

    def __iter__(self) -> Iterator[Match]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)


def validate_query(pages: int, replays_per_page: int, params: QueryParameters) -> None:
    """
    Check query arguments before any request is sent.

    Raises:
        InvalidArgumentError: If an argument is out of range.
    """
    if not 0 <= pages <= MAX_PAGES:
        raise InvalidArgumentError(f"pages must be between 0 and {MAX_PAGES}, got {pages}")
    if not 0 <= replays_per_page <= MAX_REPLAYS_PER_PAGE:
        raise InvalidArgumentError(
            f"replays_per_page must be between 0 and {MAX_REPLAYS_PER_PAGE}, got {replays_per_page}"
        )
    params.validate()


class ReplayPaginator:
    """
    Fetches and merges replay pages.

    Example:
        >>> paginator = ReplayPaginator(codec, fetch, pages=10, replays_per_page=127, params=params)
        >>> for outcome in paginator:
        ...     print(outcome.path, len(outcome.matches))
        >>> result = paginator.collect()
    """

    def __init__(
        self,
        codec: WireCodec,
        fetch: Fetch,
        *,
        pages: int,
        replays_per_page: int,
        params: QueryParameters,
    ) -> None:
        """
        Initialize paginator.

        Args:
            codec: Codec bound to the caller identity.
            fetch: Callable that POSTs a hex request and returns the reply bytes.
            pages: Number of pages to request (0-100).
            replays_per_page: Records per page (0-127).
            params: Query filters.

        Raises:
            InvalidArgumentError: If an argument is out of range.
        """
        validate_query(pages, replays_per_page, params)
        self._codec = codec
        self._fetch = fetch
        self._pages = pages
        self._replays_per_page = replays_per_page
        self._params = params

    @property
    def pages(self) -> int:
        return self._pages

    def __iter__(self) -> Iterator[DecodeOutcome]:
        """Yield the decode outcome of each page until the data runs out."""
        for page in range(self._pages):
            request = self._codec.encode(page, self._replays_per_page, self._params)
            logger.debug("Requesting replay page %d", page)
            reply = self._fetch(request)

            if len(reply) < MIN_ENVELOPE_SIZE:
                logger.debug("Page %d reply is %d bytes, no more replays", page, len(reply))
                return

            outcome = self._codec.decode(reply)
            if outcome.is_empty:
                logger.debug("Page %d holds no replays, stopping", page)
                return
            if outcome.path is DecodePath.FAILED and len(reply) < MIN_LEGACY_REPLY_SIZE:
                logger.debug(
                    "Page %d reply is %d bytes and not a replay list, no more replays",
                    page,
                    len(reply),
                )
                return

            logger.debug("Page %d decoded via %s path", page, outcome.path.value)
            yield outcome

    def collect(self) -> ReplayResult:
        """Fetch every page and merge the results."""
        matches: set[Match] = set()
        errors: list[ParseError] = []
        fetched = 0
        for outcome in self:
            fetched += 1
            matches.update(outcome.matches)
            errors.extend(outcome.errors)

        return ReplayResult(matches=tuple(sorted(matches)), errors=errors, pages_fetched=fetched)
