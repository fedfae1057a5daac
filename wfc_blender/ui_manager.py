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

import bpy

from wfc_core.config import DEFAULT_HISTORY_SIZE, DEFAULT_STEPS_PER_TICK


def _toggle_rulemap(self, context):
    if self.rule_collection is not None:
        self.rule_collection.hide_viewport = not self.show_rulemap


class WFCRuleSettings(bpy.types.PropertyGroup):
    source_collection: bpy.props.PointerProperty(name="Tile Collection", type=bpy.types.Collection)
    rule_collection: bpy.props.PointerProperty(name="Rule Map Collection", type=bpy.types.Collection)
    output_collection_name: bpy.props.StringProperty(name="Output Collection", default="WFC_Output")
    rule_width: bpy.props.IntProperty(name="Rule Width", default=16, min=1)
    rule_height: bpy.props.IntProperty(name="Rule Height", default=16, min=1)
    size_x: bpy.props.IntProperty(name="Size X", default=32, min=1)
    size_y: bpy.props.IntProperty(name="Size Y", default=32, min=1)
    cell_size: bpy.props.FloatProperty(name="Cell Size", default=2.0, min=0.001)
    use_seed: bpy.props.BoolProperty(name="Use Seed", default=True)
    random_seed: bpy.props.IntProperty(name="Seed", default=42)
    steps_per_tick: bpy.props.IntProperty(name="Speed (steps per tick)", default=DEFAULT_STEPS_PER_TICK, min=1)
    tick_interval: bpy.props.FloatProperty(name="Tick Interval (s)", default=0.05, min=0.001, max=1.0)
    history_size: bpy.props.IntProperty(name="Backtrack History Size", default=DEFAULT_HISTORY_SIZE, min=0)
    backtrack: bpy.props.BoolProperty(name="Backtrack on Contradiction", default=False)
    show_rulemap: bpy.props.BoolProperty(name="Show Rule Map", default=True, update=_toggle_rulemap)
    rules_filepath: bpy.props.StringProperty(name="Rule Map File", default="//rules.json", subtype='FILE_PATH')
    clear_output: bpy.props.BoolProperty(name="Clear Output", default=True)


class WFCRULES_PT_Panel(bpy.types.Panel):
    bl_label = "WFC Rule Map"
    bl_idname = "WFCRULES_PT_panel"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'WFC Rules'

    def draw(self, context):
        layout = self.layout
        cfg = context.scene.wfc_rules
        col = layout.column(align=True)
        col.prop(cfg, "source_collection")
        col.prop(cfg, "rule_collection")
        col.prop(cfg, "output_collection_name")
        rules = layout.box()
        rules.label(text="Rule Map")
        row = rules.row(align=True)
        row.prop(cfg, "rule_width")
        row.prop(cfg, "rule_height")
        rules.prop(cfg, "show_rulemap")
        rules.prop(cfg, "rules_filepath")
        row = rules.row(align=True)
        row.operator("wfc_rules.save_rules", icon='EXPORT')
        row.operator("wfc_rules.load_rules", icon='IMPORT')
        grid = layout.box()
        grid.label(text="Output Grid")
        row = grid.row(align=True)
        row.prop(cfg, "size_x")
        row.prop(cfg, "size_y")
        grid.prop(cfg, "cell_size")
        rnd = layout.box()
        rnd.label(text="Randomness")
        rnd.prop(cfg, "use_seed")
        rnd.prop(cfg, "random_seed")
        tuning = layout.box()
        tuning.label(text="Tuning")
        tuning.prop(cfg, "steps_per_tick")
        tuning.prop(cfg, "tick_interval")
        tuning.prop(cfg, "backtrack")
        col2 = tuning.column()
        col2.active = cfg.backtrack
        col2.prop(cfg, "history_size")
        layout.prop(cfg, "clear_output")
        layout.operator("wfc_rules.read_rules", icon='FILE_REFRESH')
        layout.operator("wfc_rules.solve", icon='MESH_GRID')
        layout.operator("wfc_rules.clear_output", icon='TRASH')
        layout.separator()
        layout.operator("wfc_rules.add_props", icon='PLUS')
