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

import random
from typing import Dict, List, Optional

import bpy

from wfc_core.config import Tuning
from wfc_core.rules import RuleGrid
from wfc_core.solver import CellState, Solver
from wfc_core.tile import Prototype

from .blender_utils import (
    OutputDrawer,
    clear_collection,
    get_or_create_collection,
    read_prototypes_from_collection,
    read_rule_grid_from_collection,
    spawn_rule_objects,
)


class _Session:
    '''
    What survives between operator calls: the rule map read from the scene,
    the solver working on it and the objects drawn for the output grid
    '''

    def __init__(self):
        self.prototypes: List[Prototype] = []
        self.keys: Dict[str, int] = {}
        self.rule_grid: Optional[RuleGrid] = None
        self.solver: Optional[Solver] = None
        self.drawer: Optional[OutputDrawer] = None


_session = _Session()


def _ensure_session(context, cfg) -> _Session:
    '''
    Reads prototypes and the rule map from the scene.
    The solver is only rebuilt when the palette, the sizes or the tuning changed;
    otherwise editing the rule map simply bumps the rule grid generation and the solver restarts by itself
    '''
    if cfg.source_collection is None:
        raise ValueError("Pick a source Collection containing your modular tiles.")
    if cfg.rule_collection is None:
        raise ValueError("Pick the Collection holding the painted rule map.")

    prototypes, keys = read_prototypes_from_collection(cfg.source_collection)
    tuning = Tuning.from_settings(cfg)
    grid = _session.rule_grid
    solver = _session.solver

    if (grid is None or solver is None
            or prototypes != _session.prototypes
            or (grid.width, grid.height) != (cfg.rule_width, cfg.rule_height)
            or (solver.grid.width, solver.grid.height) != (cfg.size_x, cfg.size_y)
            or repr(tuning) != repr(solver.tuning)):
        rng = random.Random(cfg.random_seed if cfg.use_seed else None)
        grid = RuleGrid(cfg.rule_width, cfg.rule_height)
        solver = Solver(grid, prototypes, cfg.size_x, cfg.size_y, tuning, rng)
        _session.drawer = None

    _session.prototypes = prototypes
    _session.keys = keys
    _session.rule_grid = grid
    _session.solver = solver

    out_name = cfg.output_collection_name or "WFC_Output"
    out_coll = get_or_create_collection(context, out_name)
    if _session.drawer is None or _session.drawer.out_coll != out_coll or _session.drawer.cell_size != cfg.cell_size:
        if cfg.clear_output:
            clear_collection(out_coll)
        _session.drawer = OutputDrawer(out_coll, prototypes, cfg.cell_size)

    _read_rules(cfg)
    return _session


def _read_rules(cfg) -> int:
    return read_rule_grid_from_collection(cfg.rule_collection, _session.prototypes, _session.keys,
                                          _session.rule_grid, cfg.cell_size)


# Optional keymap for Add Props
_keymaps = []


# class to add the WFC properties to the selected tile objects
class WFCRULES_OT_AddProps(bpy.types.Operator):
    bl_idname = "wfc_rules.add_props"
    bl_label = "Add WFC Rule Properties to Selected"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        sel = [o for o in context.selected_objects if o.type == 'MESH']
        if not sel:
            self.report({'WARNING'}, "Select at least one mesh object.")
            return {'CANCELLED'}
        for obj in sel:
            if "WFC_EQUIV" not in obj:
                obj["WFC_EQUIV"] = "NONE"
        self.report({'INFO'}, f"Added WFC props to {len(sel)} object(s).")
        return {'FINISHED'}


# class to read the painted rule map and rebuild the adjacency rules
class WFCRULES_OT_ReadRules(bpy.types.Operator):
    bl_idname = "wfc_rules.read_rules"
    bl_label = "Read Rule Map"
    bl_options = {"REGISTER"}

    def execute(self, context):
        cfg = context.scene.wfc_rules
        try:
            session = _ensure_session(context, cfg)
        except Exception as e:
            self.report({'ERROR'}, f"Rule reading failed. Identified the following cause: {e}")
            return {'CANCELLED'}

        session.solver.sync_rules()
        session.drawer.draw(session.solver)
        painted = sum(1 for _ in session.rule_grid.filled())
        self.report({'INFO'}, f"Read {painted} painted cell(s), {len(session.solver.tiles)} tile(s) after rotations.")
        return {'FINISHED'}


# class to run the solver, a few steps per timer tick so the viewport stays responsive
class WFCRULES_OT_Solve(bpy.types.Operator):
    bl_idname = "wfc_rules.solve"
    bl_label = "Solve"
    bl_options = {"REGISTER"}

    _timer = None

    def invoke(self, context, event):
        cfg = context.scene.wfc_rules
        try:
            _ensure_session(context, cfg)
        except Exception as e:
            self.report({'ERROR'}, f"Rule reading failed. Identified the following cause: {e}")
            return {'CANCELLED'}

        wm = context.window_manager
        self._timer = wm.event_timer_add(cfg.tick_interval, window=context.window)
        wm.modal_handler_add(self)
        return {'RUNNING_MODAL'}

    def execute(self, context):
        return self.invoke(context, None)

    def modal(self, context, event):
        if event.type == 'ESC':
            self._finish(context)
            self.report({'INFO'}, "Solve stopped.")
            return {'CANCELLED'}
        if event.type != 'TIMER':
            return {'PASS_THROUGH'}

        cfg = context.scene.wfc_rules
        solver = _session.solver
        if solver is None or cfg.rule_collection is None:
            self._finish(context)
            return {'CANCELLED'}

        # rule map edits made while solving restart the solve on this very step
        _read_rules(cfg)
        progress = solver.step()
        _session.drawer.draw(solver)

        if progress.done:
            self._finish(context)
            if solver.tiles:
                states = [solver.cell_state(c.coordinates) for c in solver.grid.cells]
                impossible = states.count(CellState.IMPOSSIBLE)
                self.report({'INFO'}, f"Solved: {states.count(CellState.RESOLVED)} tile(s), {impossible} impossible cell(s).")
            else:
                self.report({'WARNING'}, "The rule map is empty, nothing to solve.")
            return {'FINISHED'}
        return {'PASS_THROUGH'}

    def _finish(self, context):
        if self._timer is not None:
            context.window_manager.event_timer_remove(self._timer)
            self._timer = None


class WFCRULES_OT_ClearOutput(bpy.types.Operator):
    bl_idname = "wfc_rules.clear_output"
    bl_label = "Clear Output"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        cfg = context.scene.wfc_rules
        out_coll = bpy.data.collections.get(cfg.output_collection_name or "WFC_Output")
        if out_coll is not None:
            clear_collection(out_coll)
        if _session.drawer is not None:
            _session.drawer.forget()
        if _session.solver is not None:
            _session.solver.notify_rules_changed()
        self.report({'INFO'}, "Output cleared.")
        return {'FINISHED'}


class WFCRULES_OT_SaveRules(bpy.types.Operator):
    bl_idname = "wfc_rules.save_rules"
    bl_label = "Save Rule Map"
    bl_options = {"REGISTER"}

    def execute(self, context):
        cfg = context.scene.wfc_rules
        try:
            session = _ensure_session(context, cfg)
            path = bpy.path.abspath(cfg.rules_filepath)
            session.rule_grid.save(path)
        except Exception as e:
            self.report({'ERROR'}, f"Saving the rule map failed: {e}")
            return {'CANCELLED'}
        self.report({'INFO'}, f"Rule map saved to {path}.")
        return {'FINISHED'}


class WFCRULES_OT_LoadRules(bpy.types.Operator):
    bl_idname = "wfc_rules.load_rules"
    bl_label = "Load Rule Map"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        cfg = context.scene.wfc_rules
        if cfg.source_collection is None or cfg.rule_collection is None:
            self.report({'ERROR'}, "Pick the tile and rule map Collections first.")
            return {'CANCELLED'}
        try:
            loaded = RuleGrid.load(bpy.path.abspath(cfg.rules_filepath))
            prototypes, _ = read_prototypes_from_collection(cfg.source_collection)
        except Exception as e:
            self.report({'ERROR'}, f"Loading the rule map failed: {e}")
            return {'CANCELLED'}

        cfg.rule_width = loaded.width
        cfg.rule_height = loaded.height
        clear_collection(cfg.rule_collection)
        created = spawn_rule_objects(cfg.rule_collection, loaded, prototypes, cfg.cell_size)
        bpy.context.view_layer.update()
        self.report({'INFO'}, f"Loaded {created} rule tile(s).")
        return {'FINISHED'}


# Register the classes
classes = (
    WFCRULES_OT_AddProps,
    WFCRULES_OT_ReadRules,
    WFCRULES_OT_Solve,
    WFCRULES_OT_ClearOutput,
    WFCRULES_OT_SaveRules,
    WFCRULES_OT_LoadRules,
)


# Register the keymaps
def register_keymaps():
    wm = bpy.context.window_manager
    if wm is None:
        return
    km = wm.keyconfigs.addon.keymaps.new(name='3D View', space_type='VIEW_3D')
    kmi = km.keymap_items.new(WFCRULES_OT_AddProps.bl_idname, type='W', value='PRESS', alt=True, shift=True)
    _keymaps.append((km, kmi))


# Unregister the keymaps
def unregister_keymaps():
    for km, kmi in _keymaps:
        km.keymap_items.remove(kmi)
    _keymaps.clear()
