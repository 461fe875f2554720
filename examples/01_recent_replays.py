#!/usr/bin/env python3
"""
01_recent_replays.py - Fetch Recent Replays

This is the foundational example for the pyggst client.

What this example demonstrates:
- Using connect() for one-liner setup
- Fetching a few pages of the newest replays
- Reading winners, floors and characters from each Match

Prerequisites:
    - A player id and session token from a game client
    - pyggst installed: pip install pyggst

Run with:
    GGST_PLAYER_ID=... GGST_SESSION_TOKEN=... python 01_recent_replays.py
"""

import logging
import os

from pyggst import connect


def main():
    logging.basicConfig(level=logging.INFO)

    player_id = os.environ["GGST_PLAYER_ID"]
    token = os.environ["GGST_SESSION_TOKEN"]

    print("Fetching the two newest pages of replays...")
    with connect(player_id, token) as client:
        result = client.get_replays(pages=2, replays_per_page=20)

    for match in result:
        p1, p2 = match.players
        print(
            f"{match.timestamp:%Y-%m-%d %H:%M} {match.floor!s:>9}  "
            f"{p1.name} ({p1.character}) vs {p2.name} ({p2.character})  "
            f"winner: {match.winner_player().name}"
        )

    print(f"\n✓ {len(result)} matches from {result.pages_fetched} pages")


if __name__ == "__main__":
    main()
