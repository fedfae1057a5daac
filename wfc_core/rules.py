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

# rules.py - The hand-painted rule map and the adjacency table learned from it

import json
import logging
from typing import Dict, Generator, List, Optional, Sequence, Set, Tuple

from .palette import prototype_for
from .tile import Coordinates, Orientation, Prototype, Tile, TileSelection

log = logging.getLogger(__name__)

# if a cell holds `tile`, its neighbor on side `orientation` must be one of table[tile][orientation]
AdjacencyTable = Dict[Tile, Dict[Orientation, Set[Tile]]]


class RuleGrid:
    """
    The exemplar map painted by the user. Each cell is either empty (None) or a tile.

    Every change bumps `generation`; the solver compares it with the last generation it
    built rules from, so an edit anywhere restarts the solve.
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Rule grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.generation = 0
        self._cells: List[List[Optional[Tile]]] = [[None] * width for _ in range(height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, coordinates: Coordinates) -> Optional[Tile]:
        '''
        Returns the tile painted at the given position, or None if the cell is empty or outside the map
        '''
        x, y = coordinates
        if not self.in_bounds(x, y):
            return None
        return self._cells[y][x]

    def set(self, coordinates: Coordinates, tile: Optional[Tile]) -> bool:
        '''
        Paints (or erases, with None) one cell. Returns True if the map changed
        '''
        x, y = coordinates
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} rule grid")
        if tile is not None:
            tile = Tile(int(tile[0]), Orientation(tile[1]))
        if self._cells[y][x] == tile:
            return False
        self._cells[y][x] = tile
        self.generation += 1
        return True

    def paint(self, coordinates: Coordinates, selection: TileSelection) -> bool:
        return self.set(coordinates, selection.make_tile())

    def clear(self) -> None:
        if any(tile is not None for _, tile in self.filled()):
            self._cells = [[None] * self.width for _ in range(self.height)]
            self.generation += 1

    def filled(self) -> Generator[Tuple[Coordinates, Tile], None, None]:
        for y, row in enumerate(self._cells):
            for x, tile in enumerate(row):
                if tile is not None:
                    yield (x, y), tile

    # --- persistence ---

    def to_dict(self) -> dict:
        cells = []
        for row in self._cells:
            cells.append([None if t is None else [t.prototype_index, t.orientation.letter] for t in row])
        return {"width": self.width, "height": self.height, "cells": cells}

    @classmethod
    def from_dict(cls, data: dict) -> 'RuleGrid':
        try:
            width, height, cells = int(data["width"]), int(data["height"]), data["cells"]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed rule grid: {e}") from e
        if len(cells) != height or any(len(row) != width for row in cells):
            raise ValueError(f"Malformed rule grid: cells do not match {width}x{height}")

        grid = cls(width, height)
        for y, row in enumerate(cells):
            for x, value in enumerate(row):
                if value is None:
                    continue
                try:
                    index, letter = value
                    grid._cells[y][x] = Tile(int(index), Orientation.from_letter(letter))
                except (TypeError, ValueError) as e:
                    raise ValueError(f"Malformed rule grid cell ({x}, {y}): {value!r}") from e
        return grid

    def save(self, path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f)

    @classmethod
    def load(cls, path) -> 'RuleGrid':
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


def extract_constraints(rule_grid: RuleGrid) -> AdjacencyTable:
    '''
    Reads the painted map: for each painted cell, records the tile painted next to it on each side.
    Empty or out-of-map neighbors add nothing. A painted tile with no painted neighbor still gets an (empty) entry
    '''
    constraints: AdjacencyTable = {}
    for coords, tile in rule_grid.filled():
        allowed = constraints.setdefault(tile, {})
        for orientation in Orientation.values():
            neighbor_tile = rule_grid.get(orientation.offset(coords))
            if neighbor_tile is not None:
                allowed.setdefault(orientation, set()).add(neighbor_tile)
    return constraints


def expand_with_rotations(constraints: AdjacencyTable, prototypes: Sequence[Prototype]) -> AdjacencyTable:
    '''
    Every rule painted once holds in the 4 rotations of the map:
    rotating a pair of neighbors by k quarter turns rotates both tiles and the side they touch.
    Tiles are canonicalised through their prototype, so symmetric prototypes merge their rotated copies
    '''
    expanded: AdjacencyTable = {}
    for tile, tile_constraints in constraints.items():
        prototype = prototype_for(prototypes, tile)
        for rotation in range(len(Orientation.values())):
            rotated_tile = prototype.make_rotated_tile(tile.orientation, rotation)
            rotated_constraints = expanded.setdefault(rotated_tile, {})

            for orientation, allowed_tiles in tile_constraints.items():
                rotated_allowed = rotated_constraints.setdefault(orientation.rotated(rotation), set())
                for allowed_tile in allowed_tiles:
                    allowed_prototype = prototype_for(prototypes, allowed_tile)
                    rotated_allowed.add(allowed_prototype.make_rotated_tile(allowed_tile.orientation, rotation))
    return expanded


def build_adjacency(rule_grid: RuleGrid, prototypes: Sequence[Prototype]) -> AdjacencyTable:
    '''
    Builds a brand new adjacency table from the rule map.
    The caller swaps it in as a whole, nothing ever sees a half-built table
    '''
    adjacency = expand_with_rotations(extract_constraints(rule_grid), prototypes)
    log.info("Built adjacency for %d tile(s) from rule grid generation %d", len(adjacency), rule_grid.generation)
    return adjacency


def allowed_neighbors(adjacency: AdjacencyTable, tile: Tile, orientation: Orientation) -> Optional[Set[Tile]]:
    '''
    Returns the tiles allowed next to `tile` on side `orientation`.
    None means `tile` was only ever painted alone, so it restricts nothing
    '''
    constraints = adjacency.get(tile)
    if not constraints:
        return None
    return constraints.get(orientation, set())
