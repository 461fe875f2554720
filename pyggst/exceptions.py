# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for the pyggst SDK.

All exceptions inherit from GGSTError, making it easy to catch every
pyggst-related error with a single except clause:

    try:
        result = client.get_replays(pages=5)
    except GGSTError as e:
        print(f"Query failed: {e}")

Only two kinds of failure abort a replay query outright: TransportError
(the HTTP round trip failed) and InvalidArgumentError (the query was
rejected before any request was sent). Problems with individual replay
records are never raised; they are collected as ParseError values and
returned next to the matches that did decode:

    result = client.get_replays(pages=5)
    for err in result.errors:
        print(err)
"""

from __future__ import annotations


class GGSTError(Exception):
    """
    Base exception for all pyggst errors.

    All pyggst exceptions inherit from this class, allowing you to catch
    all pyggst-related errors with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class TransportError(GGSTError):
    """
    Raised when the HTTP round trip to the replay service fails.

    Common causes:
    - Service is down or unreachable
    - The request was rejected with an HTTP error status
    - Network issues

    A transport error aborts the current query; pages fetched before the
    failure are discarded.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        if hint is None and url:
            hint = f"Check that the service at {url} is reachable"
        super().__init__(message, hint=hint)


class TransportTimeoutError(TransportError):
    """Raised when the replay service does not answer in time."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(
            message,
            url,
            hint="Try increasing the client timeout or check network connectivity",
        )


class InvalidArgumentError(GGSTError):
    """
    Raised when a query is rejected before any request is sent.

    This happens when:
    - More than 100 pages are requested
    - More than 127 replays per page are requested
    - The minimum floor is above the maximum floor
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid argument: {message}")


class QueryBuilderError(GGSTError):
    """
    Raised when a QueryBuilder filter is set out of order or twice.

    Each builder filter may be set at most once. The winner filter also
    needs a first character to be selected.
    """


class UnexpectedResponseError(GGSTError):
    """Raised when a JSON reply from the service is missing expected fields."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Unexpected response from API, {message}")


class DecodeError(GGSTError):
    """Base exception for replay decoding errors."""


class EnvelopeDecodeError(DecodeError):
    """
    Raised when the outer reply structure cannot be decoded.

    The whole page is skipped; no individual records are extracted.
    """


class ParsingBytesError(DecodeError):
    """Raised when a legacy byte-layout section is too short to hold its fields."""


class RecordConversionError(DecodeError):
    """Base exception for a single replay record that cannot become a Match."""


class InvalidCharacterCodeError(RecordConversionError):
    """Raised when a byte or short code does not name a character."""

    def __init__(self, code: int | str) -> None:
        self.code = code
        shown = f"0x{code:02x}" if isinstance(code, int) else repr(code)
        super().__init__(f"{shown} is not a valid character code")


class InvalidFloorCodeError(RecordConversionError):
    """Raised when a byte does not name a floor."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"0x{code:02x} is not a valid floor code")


class InvalidWinnerCodeError(RecordConversionError):
    """Raised when a winner byte is neither 1 nor 2."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"0x{code:02x} is not a valid winner code")


class InvalidPlayerIdError(RecordConversionError):
    """Raised when a player id is not an unsigned 64-bit decimal number."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a valid player id")


class TimestampParseError(RecordConversionError):
    """Raised when a replay timestamp is not in 'YYYY-MM-DD HH:MM:SS' form."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Error parsing datetime: {value!r}")


class ParseError(GGSTError):
    """
    A replay record, or a whole reply, that could not be decoded.

    ParseError pairs the underlying failure with the offending content so
    that the problem can be diagnosed after the fact. It is collected and
    returned by the decoder, never raised by it.

    Attributes:
        reply_content: Debug representation of the failing record, or the
            hex dump of the raw reply when the envelope itself was broken.
        inner: The underlying decode failure.
    """

    def __init__(self, reply_content: str, inner: DecodeError) -> None:
        self.reply_content = reply_content
        self.inner = inner
        super().__init__(f"Could not parse replay: {inner}\n  bytes: {reply_content}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            self.reply_content == other.reply_content
            and type(self.inner) is type(other.inner)
            and str(self.inner) == str(other.inner)
        )

    def __hash__(self) -> int:
        return hash((self.reply_content, type(self.inner), str(self.inner)))
