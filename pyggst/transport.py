# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
HTTP transport for the replay service.

The client only needs two calls from its transport, so any object with
post_form() and get_json() can stand in for the default requests-based
one (for example to add proxies, or to serve canned replies in tests).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from .exceptions import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the client needs from an HTTP stack."""

    def post_form(self, url: str, field: str, value: str) -> bytes:
        """POST a single form field and return the raw reply body."""
        ...

    def get_json(self, url: str) -> Any:
        """GET a URL and return its decoded JSON body."""
        ...

    def close(self) -> None:
        ...


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    Timeouts map to TransportTimeoutError, and every other failure,
    including HTTP error statuses, maps to TransportError.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()
        if user_agent:
            self._session.headers["User-Agent"] = user_agent

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise TransportTimeoutError(f"Request to {url} timed out", url) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"Request to {url} failed with HTTP {status}",
                url,
                status_code=status,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url) from e
        return resp

    def post_form(self, url: str, field: str, value: str) -> bytes:
        return self._request("POST", url, data={field: value}).content

    def get_json(self, url: str) -> Any:
        resp = self._request("GET", url)
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"Reply from {url} is not JSON: {e}", url) from e

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
