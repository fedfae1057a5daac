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

import math
from typing import Dict, List, Tuple

import bpy
from mathutils import Vector

from wfc_core.rules import RuleGrid
from wfc_core.solver import CellState, Solver
from wfc_core.tile import Equivalence, Orientation, Prototype, Tile

QUARTER_TURN = math.pi / 2.0

# Number of grey levels used to shade undecided cells
UNDECIDED_SHADES = 10

IMPOSSIBLE_COLOR = (1.0, 0.0, 0.0, 1.0)
MARKER_MESH_NAME = "WFC_CellMarker"


def orientation_to_z(orientation: Orientation) -> float:
    """Z rotation of a tile facing `orientation`. Tiles turn clockwise seen from above, Blender's +Z is CCW."""
    return -int(orientation) * QUARTER_TURN


def z_to_rotation(z: float) -> int:
    """Number of clockwise quarter turns closest to a Z rotation"""
    return -int(round(z / QUARTER_TURN))


def equivalence_from_object(obj: bpy.types.Object) -> Equivalence:
    # object-level property wins over mesh data, like the other WFC_* properties
    for source in (obj, getattr(obj, "data", None)):
        if source and "WFC_EQUIV" in source:
            return Equivalence.parse(source["WFC_EQUIV"])
    return Equivalence.NONE


def prototype_key_of(obj: bpy.types.Object) -> str:
    '''
    Name used to match a rule object with its prototype:
    an explicit WFC_PROTO property, else the shared mesh data name, else the object name
    '''
    if "WFC_PROTO" in obj:
        return str(obj["WFC_PROTO"])
    data = getattr(obj, "data", None)
    return data.name if data is not None else obj.name


# Creates and returns the list of prototypes from the source collection
def read_prototypes_from_collection(coll: bpy.types.Collection) -> Tuple[List[Prototype], Dict[str, int]]:
    meshes = sorted((o for o in coll.all_objects if o.type == 'MESH'), key=lambda o: o.name)
    if not meshes:
        raise ValueError("Selected collection has no mesh objects.")

    prototypes = []
    keys: Dict[str, int] = {}
    for index, obj in enumerate(meshes):
        prototypes.append(Prototype(index, obj.name, equivalence_from_object(obj)))
        # a rule object may point to its prototype by object name or by shared mesh
        keys.setdefault(obj.name, index)
        keys.setdefault(prototype_key_of(obj), index)
    return prototypes, keys


def read_rule_grid_from_collection(coll: bpy.types.Collection, prototypes: List[Prototype], keys: Dict[str, int],
                                   rule_grid: RuleGrid, cell_size: float) -> int:
    '''
    Paints `rule_grid` with the objects placed in the rule collection.
    Cells with no object are erased. Objects that match no prototype or fall outside the grid are ignored.
    Returns the number of ignored objects. The grid generation only moves if something changed
    '''
    painted: Dict[Tuple[int, int], Tile] = {}
    ignored = 0
    for obj in coll.all_objects:
        if obj.type != 'MESH':
            continue
        index = keys.get(prototype_key_of(obj), keys.get(obj.name))
        x = int(round(obj.location.x / cell_size))
        y = int(round(obj.location.y / cell_size))
        if index is None or not rule_grid.in_bounds(x, y):
            ignored += 1
            continue
        rotation = z_to_rotation(obj.rotation_euler.z)
        painted[(x, y)] = prototypes[index].make_rotated_tile(Orientation.NORTH, rotation)

    for y in range(rule_grid.height):
        for x in range(rule_grid.width):
            rule_grid.set((x, y), painted.get((x, y)))
    return ignored


def spawn_rule_objects(coll: bpy.types.Collection, rule_grid: RuleGrid, prototypes: List[Prototype],
                       cell_size: float) -> int:
    """Places one object per painted cell of a loaded rule grid. Returns the number of objects created."""
    created = 0
    for (x, y), tile in rule_grid.filled():
        if not 0 <= tile.prototype_index < len(prototypes):
            continue
        src_obj = bpy.data.objects.get(prototypes[tile.prototype_index].name)
        if src_obj is None:
            continue
        inst = instantiate_tile(coll, src_obj, tile, (x, y), cell_size)
        inst["WFC_PROTO"] = src_obj.name
        created += 1
    return created


def instantiate_tile(out_coll: bpy.types.Collection, src_obj: bpy.types.Object, tile: Tile, pos: Tuple[int, int],
                     cell_size: float) -> bpy.types.Object:
    x, y = pos
    inst = src_obj.copy()
    inst.data = src_obj.data  # share mesh
    inst.location = Vector((x * cell_size, y * cell_size, 0.0))
    inst.rotation_euler = src_obj.rotation_euler.copy()
    inst.rotation_euler.z = orientation_to_z(tile.orientation)
    out_coll.objects.link(inst)
    return inst


def _marker_mesh(cell_size: float) -> bpy.types.Mesh:
    mesh = bpy.data.meshes.get(MARKER_MESH_NAME)
    if mesh is None:
        h = cell_size * 0.5
        mesh = bpy.data.meshes.new(MARKER_MESH_NAME)
        mesh.from_pydata([(-h, -h, 0.0), (h, -h, 0.0), (h, h, 0.0), (-h, h, 0.0)], [], [(0, 1, 2, 3)])
        mesh.update()
        # one empty slot, filled per object
        mesh.materials.append(None)
    return mesh


def _state_material(name: str, color: Tuple[float, float, float, float]) -> bpy.types.Material:
    mat = bpy.data.materials.get(name)
    if mat is None:
        mat = bpy.data.materials.new(name)
        mat.diffuse_color = color
    return mat


def undecided_shade(fraction: float) -> int:
    return max(0, min(UNDECIDED_SHADES - 1, int(fraction * UNDECIDED_SHADES)))


def instantiate_marker(out_coll: bpy.types.Collection, name: str, material: bpy.types.Material,
                       pos: Tuple[int, int], cell_size: float) -> bpy.types.Object:
    x, y = pos
    obj = bpy.data.objects.new(name, _marker_mesh(cell_size))
    obj.location = Vector((x * cell_size, y * cell_size, 0.0))
    # material linked to the object so every marker can share the plane mesh
    obj.material_slots[0].link = 'OBJECT'
    obj.material_slots[0].material = material
    out_coll.objects.link(obj)
    return obj


class OutputDrawer:
    """
    Keeps one object per output cell in sync with the solver:
    the prototype model for resolved cells, a red plane for impossible ones,
    a grey plane (lighter = more candidates left) for undecided ones, nothing before rules exist.
    Only cells whose look changed are rebuilt.
    """

    def __init__(self, out_coll: bpy.types.Collection, prototypes: List[Prototype], cell_size: float):
        self.out_coll = out_coll
        self.prototypes = prototypes
        self.cell_size = cell_size
        self.objects: Dict[int, bpy.types.Object] = {}
        self.looks: Dict[int, tuple] = {}

    def _look(self, solver: Solver, coords: Tuple[int, int]) -> tuple:
        state = solver.cell_state(coords)
        if state is CellState.RESOLVED:
            return (state, solver.resolved_tile(coords))
        if state is CellState.UNDECIDED:
            return (state, undecided_shade(solver.candidate_fraction(coords)))
        return (state,)

    def _remove(self, idx: int) -> None:
        obj = self.objects.pop(idx, None)
        if obj is None:
            return
        try:
            bpy.data.objects.remove(obj, do_unlink=True)
        except ReferenceError:
            pass

    def draw(self, solver: Solver) -> int:
        '''
        Redraws the cells that changed since the last call. Returns how many were redrawn
        '''
        redrawn = 0
        for cell in solver.grid.cells:
            look = self._look(solver, cell.coordinates)
            if self.looks.get(cell.index) == look:
                continue
            self.looks[cell.index] = look
            self._remove(cell.index)
            redrawn += 1

            state = look[0]
            name = f"WFC_{cell.coordinates[0]}_{cell.coordinates[1]}"
            if state is CellState.RESOLVED:
                tile = look[1]
                src_obj = bpy.data.objects.get(self.prototypes[tile.prototype_index].name)
                if src_obj is not None:
                    self.objects[cell.index] = instantiate_tile(self.out_coll, src_obj, tile, cell.coordinates, self.cell_size)
            elif state is CellState.IMPOSSIBLE:
                mat = _state_material("WFC_Impossible", IMPOSSIBLE_COLOR)
                self.objects[cell.index] = instantiate_marker(self.out_coll, name, mat, cell.coordinates, self.cell_size)
            elif state is CellState.UNDECIDED:
                level = look[1] / max(1, UNDECIDED_SHADES - 1)
                mat = _state_material(f"WFC_Undecided_{look[1]:02d}", (level, level, level, 1.0))
                self.objects[cell.index] = instantiate_marker(self.out_coll, name, mat, cell.coordinates, self.cell_size)
        return redrawn

    def forget(self) -> None:
        self.objects.clear()
        self.looks.clear()


def clear_collection(out_coll: bpy.types.Collection):
    for obj in list(out_coll.objects):
        out_coll.objects.unlink(obj)
        try:
            bpy.data.objects.remove(obj, do_unlink=True)
        except ReferenceError:
            pass


def get_or_create_collection(context, name: str) -> bpy.types.Collection:
    coll = bpy.data.collections.get(name)
    if coll is None:
        coll = bpy.data.collections.new(name)
        context.scene.collection.children.link(coll)
    return coll
