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

# Blender-free part of the add-on: tiles, rules and the solver.

from .config import Tuning
from .generator import generate, render_ascii
from .history import Guess, GuessHistory
from .palette import DEFAULT_PALETTE, make_prototypes, prototype_for
from .rules import AdjacencyTable, RuleGrid, allowed_neighbors, build_adjacency, expand_with_rotations, extract_constraints
from .solver import CellState, Progress, SolveState, Solver
from .tile import Coordinates, Equivalence, Orientation, Prototype, Tile, TileSelection
from .wave import Cell, WaveGrid

__all__ = [
    "AdjacencyTable", "Cell", "CellState", "Coordinates", "DEFAULT_PALETTE", "Equivalence", "Guess",
    "GuessHistory", "Orientation", "Progress", "Prototype", "RuleGrid", "SolveState", "Solver", "Tile",
    "TileSelection", "Tuning", "WaveGrid", "allowed_neighbors", "build_adjacency", "expand_with_rotations",
    "extract_constraints", "generate", "make_prototypes", "prototype_for", "render_ascii",
]
