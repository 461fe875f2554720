#!/usr/bin/env python3
"""
03_error_handling.py - Error Handling Patterns

This example demonstrates:
- Argument errors raised before any request is sent
- Transport errors and timeouts
- Inspecting per-record ParseErrors in a partial result
- Enabling the legacy reply decoder

Run with:
    GGST_PLAYER_ID=... GGST_SESSION_TOKEN=... python 03_error_handling.py
"""

import os

from pyggst import Floor, QueryBuilder, connect
from pyggst.exceptions import (
    InvalidArgumentError,
    QueryBuilderError,
    TransportError,
    TransportTimeoutError,
)


def argument_errors(client):
    """Rejected queries never reach the network"""
    print("Argument Errors")
    print("-" * 50)

    try:
        client.get_replays(pages=101)
    except InvalidArgumentError as e:
        print(f"✓ Caught InvalidArgumentError: {e}")

    params = QueryBuilder().min_floor(Floor.CELESTIAL).max_floor(Floor.F1).build()
    try:
        client.get_replays(pages=1, params=params)
    except InvalidArgumentError as e:
        print(f"✓ Caught InvalidArgumentError: {e}")

    try:
        QueryBuilder().min_floor(Floor.F5).min_floor(Floor.F6)
    except QueryBuilderError as e:
        print(f"✓ Caught QueryBuilderError: {e}")


def partial_results(client):
    """Bad records are collected alongside the good ones"""
    print("\nPartial Results")
    print("-" * 50)

    try:
        result = client.get_replays(pages=3)
    except TransportTimeoutError as e:
        print(f"✗ Timed out: {e}")
        return
    except TransportError as e:
        print(f"✗ Request failed: {e}")
        return

    print(f"{len(result.matches)} matches, {len(result.errors)} unreadable records")
    for err in result.errors[:5]:
        print(f"  {type(err.inner).__name__}: {err.inner}")


def main():
    with connect(
        os.environ["GGST_PLAYER_ID"],
        os.environ["GGST_SESSION_TOKEN"],
        timeout=10,
        legacy_fallback=True,
    ) as client:
        argument_errors(client)
        partial_results(client)


if __name__ == "__main__":
    main()
