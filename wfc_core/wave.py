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

from collections import deque
from typing import Deque, Dict, FrozenSet, Generator, Iterable, List, Set, Tuple

from .tile import Coordinates, Orientation, Tile


class Cell:
    """
    One cell of the output grid.

    wave holds every tile the cell may still become (the superposition):
    0 tiles = impossible, 1 tile = resolved, more = undecided.
    dirty is set when the wave shrank and the neighbors have not been told yet.
    """

    __slots__ = ("index", "coordinates", "wave", "dirty", "connectivity", "history")

    def __init__(self, index: int, coordinates: Coordinates, history_size: int):
        self.index = index
        self.coordinates = coordinates
        self.wave: Set[Tile] = set()
        self.dirty = False
        # side -> index of the neighboring cell, sides on the grid border are absent
        self.connectivity: Dict[Orientation, int] = {}
        # waves this cell had before each recorded guess, most recent last
        self.history: Deque[FrozenSet[Tile]] = deque(maxlen=history_size)

    @property
    def entropy(self) -> int:
        return len(self.wave)

    def __repr__(self):
        return f"Cell({self.coordinates}, entropy={self.entropy}{', dirty' if self.dirty else ''})"


class WaveGrid:
    def __init__(self, width: int, height: int, history_size: int = 0):
        if width < 1 or height < 1:
            raise ValueError(f"Output grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.history_size = history_size

        # one cell per position, addressed by a flat index (see index_of_cell)
        self.cells: List[Cell] = [
            Cell(self.index_of_cell(x, y), (x, y), history_size)
            for y in range(height)
            for x in range(width)
        ]

        # neighbors never change, so they are looked up once here
        for cell in self.cells:
            for orientation in Orientation.values():
                nx, ny = orientation.offset(cell.coordinates)
                if self.in_bounds(nx, ny):
                    cell.connectivity[orientation] = self.index_of_cell(nx, ny)

    def __len__(self):
        return len(self.cells)

    def index_of_cell(self, x: int, y: int) -> int:
        '''
        Returns the index of the cell in a given x, y position in the grid
        '''
        return x + self.width * y

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, coordinates: Coordinates) -> Cell:
        x, y = coordinates
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} output grid")
        return self.cells[self.index_of_cell(x, y)]

    def neighbors(self, index: int) -> Generator[Tuple[Orientation, int], None, None]:
        '''
        Yields (side, neighbor index) for every neighbor of the cell, in N, E, S, W order
        '''
        connectivity = self.cells[index].connectivity
        for orientation in Orientation.values():
            if orientation in connectivity:
                yield orientation, connectivity[orientation]

    def reset(self, tiles: Iterable[Tile]) -> None:
        '''
        Puts every cell back in the superposition of all the given tiles, forgets dirty flags and history
        '''
        tiles = frozenset(tiles)
        for cell in self.cells:
            cell.wave = set(tiles)
            cell.dirty = False
            cell.history.clear()

    def dirty_indices(self) -> List[int]:
        return [cell.index for cell in self.cells if cell.dirty]

    def is_stable(self) -> bool:
        '''
        True when no cell is undecided anymore (impossible cells count as settled)
        '''
        return all(cell.entropy <= 1 for cell in self.cells)

    def snapshot(self) -> List[FrozenSet[Tile]]:
        return [frozenset(cell.wave) for cell in self.cells]
