# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""Type definitions for the pyggst SDK."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from .exceptions import (
    InvalidArgumentError,
    InvalidCharacterCodeError,
    InvalidFloorCodeError,
    InvalidWinnerCodeError,
)


class Character(IntEnum):
    """Playable fighters. The value is the byte code used on the wire."""

    SOL = 0x00
    KY = 0x01
    MAY = 0x02
    AXL = 0x03
    CHIPP = 0x04
    POTEMKIN = 0x05
    FAUST = 0x06
    MILLIA = 0x07
    ZATO = 0x08
    RAMLETHAL = 0x09
    LEO = 0x0A
    NAGORIYUKI = 0x0B
    GIOVANNA = 0x0C
    ANJI = 0x0D
    INO = 0x0E
    GOLDLEWIS = 0x0F
    JACKO = 0x10
    HAPPY_CHAOS = 0x11

    def to_byte(self) -> int:
        """Convert a character to its byte code."""
        return int(self)

    @classmethod
    def from_byte(cls, code: int) -> Character:
        """
        Create a character from its byte code.

        Raises:
            InvalidCharacterCodeError: If the byte does not name a character.
        """
        try:
            return cls(code)
        except ValueError:
            raise InvalidCharacterCodeError(code) from None

    def to_code(self) -> str:
        """Three-letter code used by the text based statistics endpoints."""
        return _SHORT_CODES[self]

    @classmethod
    def from_code(cls, code: str) -> Character:
        """
        Create a character from its three-letter code.

        Raises:
            InvalidCharacterCodeError: If the code does not name a character.
        """
        try:
            return _BY_SHORT_CODE[code]
        except KeyError:
            raise InvalidCharacterCodeError(code) from None

    @property
    def display_name(self) -> str:
        """Full name of the character."""
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


_SHORT_CODES: dict[Character, str] = {
    Character.SOL: "SOL",
    Character.KY: "KYK",
    Character.MAY: "MAY",
    Character.AXL: "AXL",
    Character.CHIPP: "CHP",
    Character.POTEMKIN: "POT",
    Character.FAUST: "FAU",
    Character.MILLIA: "MLL",
    Character.ZATO: "ZAT",
    Character.RAMLETHAL: "RAM",
    Character.LEO: "LEO",
    Character.NAGORIYUKI: "NAG",
    Character.GIOVANNA: "GIO",
    Character.ANJI: "ANJ",
    Character.INO: "INO",
    Character.GOLDLEWIS: "GLD",
    Character.JACKO: "JKO",
    Character.HAPPY_CHAOS: "COS",
}

_BY_SHORT_CODE: dict[str, Character] = {code: char for char, code in _SHORT_CODES.items()}

_DISPLAY_NAMES: dict[Character, str] = {
    Character.SOL: "Sol Badguy",
    Character.KY: "Ky Kiske",
    Character.MAY: "May",
    Character.AXL: "Axl Low",
    Character.CHIPP: "Chipp Zanuff",
    Character.POTEMKIN: "Potemkin",
    Character.FAUST: "Faust",
    Character.MILLIA: "Millia Rage",
    Character.ZATO: "Zato=1",
    Character.RAMLETHAL: "Ramlethal Valentine",
    Character.LEO: "Leo Whitefang",
    Character.NAGORIYUKI: "Nagoriyuki",
    Character.GIOVANNA: "Giovanna",
    Character.ANJI: "Anji Mito",
    Character.INO: "I-no",
    Character.GOLDLEWIS: "Goldlewis Dickinson",
    Character.JACKO: "Jack-o",
    Character.HAPPY_CHAOS: "Happy Chaos",
}


class Floor(IntEnum):
    """
    Matchmaking tiers, ordered from F1 (lowest) to Celestial (highest).

    The value is the byte code used on the wire. Celestial's code is not
    contiguous with F10 but still sorts after it.
    """

    F1 = 0x00
    F2 = 0x01
    F3 = 0x02
    F4 = 0x03
    F5 = 0x04
    F6 = 0x05
    F7 = 0x06
    F8 = 0x07
    F9 = 0x08
    F10 = 0x09
    CELESTIAL = 0x63

    def to_byte(self) -> int:
        """Convert a floor to its byte code."""
        return int(self)

    @classmethod
    def from_byte(cls, code: int) -> Floor:
        """
        Create a floor from its byte code.

        Raises:
            InvalidFloorCodeError: If the byte does not name a floor.
        """
        try:
            return cls(code)
        except ValueError:
            raise InvalidFloorCodeError(code) from None

    def to_hex(self) -> str:
        """Byte code as two lowercase hex digits."""
        return f"{self.value:02x}"

    def __str__(self) -> str:
        return "Celestial" if self is Floor.CELESTIAL else f"Floor {self.value + 1}"


class Winner(IntEnum):
    """Which side of a match won. There are no draws."""

    PLAYER_1 = 1
    PLAYER_2 = 2

    def to_byte(self) -> int:
        """Convert a winner to its byte code."""
        return int(self)

    @classmethod
    def from_byte(cls, code: int) -> Winner:
        """
        Create a winner from its byte code.

        Raises:
            InvalidWinnerCodeError: If the byte is neither 1 nor 2.
        """
        try:
            return cls(code)
        except ValueError:
            raise InvalidWinnerCodeError(code) from None


@dataclass(frozen=True, order=True)
class Player:
    """
    One side of a match.

    Identity is the (id, character) pair. The display name is untrusted,
    changes over time, and takes no part in equality, ordering or hashing.
    """

    id: int
    name: str = field(compare=False)
    character: Character


@dataclass(frozen=True, order=True)
class Match:
    """
    A completed match reported by the replay service.

    Matches order by timestamp, then floor, then players, then winner, so
    that the same event seen on two pages collapses in a set.
    """

    timestamp: datetime
    floor: Floor
    players: tuple[Player, Player]
    winner: Winner

    def winner_player(self) -> Player:
        """The player who won."""
        return self.players[0] if self.winner is Winner.PLAYER_1 else self.players[1]

    def loser_player(self) -> Player:
        """The player who lost."""
        return self.players[1] if self.winner is Winner.PLAYER_1 else self.players[0]


@dataclass(frozen=True)
class QueryParameters:
    """
    Validated replay query filters.

    Build these with QueryBuilder rather than directly. The floor range is
    checked by validate() at query time, not at construction.
    """

    min_floor: Floor = Floor.F1
    max_floor: Floor = Floor.CELESTIAL
    char_1: Character | None = None
    char_2: Character | None = None
    winner: Winner | None = None

    def validate(self) -> None:
        """
        Raises:
            InvalidArgumentError: If min_floor is above max_floor.
        """
        if self.min_floor > self.max_floor:
            raise InvalidArgumentError(
                f"min_floor {self.min_floor.name} is above max_floor {self.max_floor.name}"
            )


@dataclass(frozen=True)
class MatchStats:
    """Win/loss totals."""

    total: int = 0
    wins: int = 0


@dataclass(frozen=True)
class CharacterStats:
    """Per-character progression."""

    level: int = 0
    wins: int = 0


@dataclass(frozen=True)
class User:
    """A player profile as returned by the user lookup."""

    user_id: str
    name: str
    comment: str
    floor: Floor = Floor.CELESTIAL
    stats: MatchStats = field(default_factory=MatchStats)
    celestial_stats: MatchStats = field(default_factory=MatchStats)
    char_stats: dict[Character, CharacterStats] = field(default_factory=dict)
