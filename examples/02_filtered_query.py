#!/usr/bin/env python3
"""
02_filtered_query.py - Filtered Replay Queries

This example demonstrates:
- Building a query with QueryBuilder
- Floor range and character filters
- Walking pages one at a time with iter_pages()

Key Concepts:
- QueryBuilder: every filter can be set once; a repeat raises QueryBuilderError
- The winner filter is best-effort, so results are checked client side

Run with:
    GGST_PLAYER_ID=... GGST_SESSION_TOKEN=... python 02_filtered_query.py
"""

import os
from collections import Counter

from pyggst import Character, Floor, QueryBuilder, Winner, connect


def main():
    params = (
        QueryBuilder()
        .min_floor(Floor.F10)
        .max_floor(Floor.CELESTIAL)
        .character(Character.SOL)
        .winner(Winner.PLAYER_1)
        .build()
    )

    with connect(os.environ["GGST_PLAYER_ID"], os.environ["GGST_SESSION_TOKEN"]) as client:
        opponents = Counter()
        for page, outcome in enumerate(client.iter_pages(pages=5, replays_per_page=50, params=params)):
            print(f"Page {page}: {len(outcome.matches)} matches via {outcome.path.value} decoding")
            for match in outcome.matches:
                if match.winner is not Winner.PLAYER_1:
                    continue
                opponents[match.players[1].character] += 1

    print("\nSol wins by opponent:")
    for character, count in opponents.most_common():
        print(f"  {character.to_code()} {character}: {count}")


if __name__ == "__main__":
    main()
