# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Replay query builder.

Every setter returns a new builder, and every filter may be set at most
once, in a fixed order:

    >>> from pyggst import Character, Floor, QueryBuilder, Winner
    >>> params = (
    ...     QueryBuilder()
    ...     .min_floor(Floor.F8)
    ...     .character(Character.SOL)
    ...     .character(Character.KY)
    ...     .winner(Winner.PLAYER_1)
    ...     .build()
    ... )

Setting a filter twice raises QueryBuilderError instead of letting the
second value silently win. The floor range itself is validated when the
query is issued, because either bound may still be unset while the
other is being chosen.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .exceptions import QueryBuilderError
from .types import Character, Floor, QueryParameters, Winner


@dataclass(frozen=True)
class QueryBuilder:
    """Immutable, one-shot builder for QueryParameters."""

    _params: QueryParameters = QueryParameters()
    _min_floor_set: bool = False
    _max_floor_set: bool = False

    def min_floor(self, floor: Floor) -> QueryBuilder:
        """Lowest floor to include (default F1)."""
        if self._min_floor_set:
            raise QueryBuilderError("min_floor has already been set")
        return replace(
            self,
            _params=replace(self._params, min_floor=Floor(floor)),
            _min_floor_set=True,
        )

    def max_floor(self, floor: Floor) -> QueryBuilder:
        """Highest floor to include (default Celestial)."""
        if self._max_floor_set:
            raise QueryBuilderError("max_floor has already been set")
        return replace(
            self,
            _params=replace(self._params, max_floor=Floor(floor)),
            _max_floor_set=True,
        )

    def character(self, character: Character) -> QueryBuilder:
        """
        Filter on a character.

        The first call selects the first character and the second call the
        opponent's character. A third call is rejected.
        """
        character = Character(character)
        if self._params.char_1 is None:
            return replace(self, _params=replace(self._params, char_1=character))
        if self._params.char_2 is None:
            return replace(self, _params=replace(self._params, char_2=character))
        raise QueryBuilderError(
            "Both characters have already been set",
            hint="A query can filter on at most two characters",
        )

    def winner(self, winner: Winner) -> QueryBuilder:
        """
        Filter on which side won.

        Only available once a first character has been chosen. The service
        does not reliably honour this filter, so treat it as best-effort.
        """
        if self._params.char_1 is None:
            raise QueryBuilderError(
                "winner requires a character",
                hint="Call character() before winner()",
            )
        if self._params.winner is not None:
            raise QueryBuilderError("winner has already been set")
        return replace(self, _params=replace(self._params, winner=Winner(winner)))

    def build(self) -> QueryParameters:
        """Finish the builder. The floor range is checked later, at query time."""
        return self._params
