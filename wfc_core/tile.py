'''
Copyright (C) 2025 Fadi SULTAN
fadi.sultan@outlook.com

Created by Fadi SULTAN

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see <http://www.gnu.org/licenses/>.
'''

# tile.py - Oriented tiles for the rule-map WFC
# A prototype is one modular asset; a tile is that asset placed with an orientation.

from enum import Enum, IntEnum
from typing import NamedTuple, Optional, Set, Tuple

Coordinates = Tuple[int, int]

# Letters used in saved rule maps and in debug output
_LETTERS = ("N", "E", "S", "W")

# (dx, dy) for NORTH, EAST, SOUTH, WEST
_OFFSETS = ((0, 1), (1, 0), (0, -1), (-1, 0))


class Orientation(IntEnum):
    """
    The four cardinal directions, in clockwise order.
    Used both as the facing of a tile and as the side of a cell.
    """
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @staticmethod
    def values() -> Tuple['Orientation', ...]:
        return (Orientation.NORTH, Orientation.EAST, Orientation.SOUTH, Orientation.WEST)

    def rotated(self, amount: int) -> 'Orientation':
        '''
        Returns the orientation after `amount` quarter turns (negative turns go the other way)
        '''
        return Orientation((int(self) + amount) % 4)

    @property
    def opposite(self) -> 'Orientation':
        return self.rotated(2)

    def offset(self, coordinates: Coordinates) -> Coordinates:
        '''
        Returns the grid coordinates one step away in this direction
        '''
        dx, dy = _OFFSETS[self]
        x, y = coordinates
        return x + dx, y + dy

    @property
    def letter(self) -> str:
        return _LETTERS[self]

    @staticmethod
    def from_letter(letter: str) -> 'Orientation':
        up = str(letter).strip().upper()
        if up not in _LETTERS:
            raise ValueError(f"Unknown orientation '{letter}', expected one of {', '.join(_LETTERS)}")
        return Orientation(_LETTERS.index(up))


class Equivalence(Enum):
    """
    Rotational symmetry of a tile's model.
    A symmetric model looks the same under some rotations, so those rotations
    are folded onto one canonical orientation.
    """
    NONE = "NONE"                  # 4 distinct variants
    HALF_TURN = "HALF_TURN"        # N == S, E == W: 2 variants
    QUARTER_TURN = "QUARTER_TURN"  # every rotation is the same: 1 variant

    @property
    def variant_count(self) -> int:
        return {Equivalence.NONE: 4, Equivalence.HALF_TURN: 2, Equivalence.QUARTER_TURN: 1}[self]

    def canonical(self, orientation: Orientation) -> Orientation:
        if self is Equivalence.HALF_TURN:
            if orientation in (Orientation.NORTH, Orientation.SOUTH):
                return Orientation.NORTH
            return Orientation.EAST
        if self is Equivalence.QUARTER_TURN:
            return Orientation.NORTH
        return orientation

    @staticmethod
    def parse(value) -> 'Equivalence':
        """
        Parse an equivalence from a custom property or a saved palette.
        Accepts the enum itself, its name, or the short forms "half" / "quarter".
        """
        if isinstance(value, Equivalence):
            return value
        if value is None:
            return Equivalence.NONE
        key = str(value).strip().upper().replace(" ", "_").replace("-", "_")
        aliases = {
            "": Equivalence.NONE,
            "NONE": Equivalence.NONE,
            "HALF": Equivalence.HALF_TURN,
            "HALF_TURN": Equivalence.HALF_TURN,
            "HALFTURN": Equivalence.HALF_TURN,
            "QUARTER": Equivalence.QUARTER_TURN,
            "QUARTER_TURN": Equivalence.QUARTER_TURN,
            "QUARTERTURN": Equivalence.QUARTER_TURN,
        }
        if key not in aliases:
            raise ValueError(f"Unknown equivalence '{value}'")
        return aliases[key]


class Tile(NamedTuple):
    """A prototype placed with an orientation. This is the value a cell collapses to."""
    prototype_index: int
    orientation: Orientation

    def __repr__(self):
        return f"Tile({self.prototype_index}{self.orientation.letter})"


class Prototype:
    """
    One modular asset of the palette.

    Args:
        index: Position of the prototype in the palette (tiles refer to it by this index)
        name: Asset key, used by the front end to find the model to display
        equivalence: Rotational symmetry of the model
    """

    def __init__(self, index: int, name: str = "", equivalence: Equivalence = Equivalence.NONE):
        self.index = index
        self.name = name or f"prototype_{index}"
        self.equivalence = Equivalence.parse(equivalence)

    def make_tile(self, orientation: Orientation) -> Tile:
        return Tile(self.index, orientation)

    def make_rotated_tile(self, original_orientation: Orientation, rotation: int) -> Tile:
        '''
        Rotates the orientation then folds it through the equivalence class,
        so that rotations which look identical give the same (equal, same hash) tile
        '''
        orientation = Orientation(original_orientation).rotated(rotation)
        return self.make_tile(self.equivalence.canonical(orientation))

    def variants(self) -> Set[Tile]:
        return {self.make_rotated_tile(Orientation.NORTH, k) for k in range(4)}

    def __eq__(self, other):
        if not isinstance(other, Prototype):
            return NotImplemented
        return (self.index, self.name, self.equivalence) == (other.index, other.name, other.equivalence)

    def __hash__(self):
        return hash((self.index, self.name, self.equivalence))

    def __repr__(self):
        return f"Prototype({self.index}, {self.name!r}, {self.equivalence.name})"


class TileSelection:
    """The prototype picked in the palette plus the rotation accumulated by the user."""

    def __init__(self, prototype: Optional[Prototype] = None, rotation: int = 0):
        self.prototype = prototype
        self.rotation = rotation

    def rotate(self, delta: int) -> None:
        self.rotation += delta

    def make_tile(self) -> Optional[Tile]:
        if self.prototype is None:
            return None
        return self.prototype.make_rotated_tile(Orientation.NORTH, self.rotation)

