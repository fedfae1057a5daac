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

from typing import List, Sequence, Tuple

from .tile import Equivalence, Prototype, Tile

# Default modular kit: (asset name, rotational symmetry of the model)
DEFAULT_PALETTE: Tuple[Tuple[str, Equivalence], ...] = (
    ("bridge_center_wood", Equivalence.HALF_TURN),
    ("bridge_side_wood", Equivalence.NONE),
    ("bridge_wood", Equivalence.HALF_TURN),
    ("ground_grass", Equivalence.QUARTER_TURN),
    ("ground_pathBend", Equivalence.NONE),
    ("ground_pathCross", Equivalence.QUARTER_TURN),
    ("ground_pathCorner", Equivalence.NONE),
    ("ground_pathCornerSmall", Equivalence.NONE),
    ("ground_pathEndClosed", Equivalence.NONE),
    ("ground_pathOpen", Equivalence.QUARTER_TURN),
    ("ground_pathSide", Equivalence.NONE),
    ("ground_pathSideOpen", Equivalence.NONE),
    ("ground_pathSplit", Equivalence.NONE),
    ("ground_pathStraight", Equivalence.HALF_TURN),
    ("ground_pathTile", Equivalence.QUARTER_TURN),
    ("ground_riverBendBank", Equivalence.NONE),
    ("ground_riverCorner", Equivalence.NONE),
    ("ground_riverCross", Equivalence.QUARTER_TURN),
    ("ground_riverCornerSmall", Equivalence.NONE),
    ("ground_riverEndClosed", Equivalence.NONE),
    ("ground_riverOpen", Equivalence.QUARTER_TURN),
    ("ground_riverSide", Equivalence.NONE),
    ("ground_riverSideOpen", Equivalence.NONE),
    ("ground_riverSplit", Equivalence.NONE),
    ("ground_riverStraight", Equivalence.HALF_TURN),
)


def make_prototypes(palette: Sequence[Tuple[str, object]] = DEFAULT_PALETTE) -> List[Prototype]:
    """Creates one prototype per palette entry, indexed in palette order"""
    return [Prototype(index, name, Equivalence.parse(equivalence)) for index, (name, equivalence) in enumerate(palette)]


def prototype_for(prototypes: Sequence[Prototype], tile: Tile) -> Prototype:
    index = tile.prototype_index
    if not 0 <= index < len(prototypes):
        raise KeyError(f"Tile {tile!r} refers to prototype {index}, but the palette has {len(prototypes)} prototype(s)")
    return prototypes[index]
