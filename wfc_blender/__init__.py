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

bl_info = {
    "name": "WFC Rule Map",
    "author": "Fadi SULTAN",
    "version": (2, 0, 0),
    "blender": (3, 0, 0),
    "location": "3D View > N-Panel > WFC Rules",
    "description": "Wave Function Collapse driven by a hand-painted rule map, with rotation symmetries and live step-by-step solving.",
    "warning": "This addon is still in development.",
    "category": "Object" }

import bpy


# load submodules
##################################

from .addon_operator import classes as _addon_classes, register_keymaps, unregister_keymaps
from .ui_manager import WFCRuleSettings, WFCRULES_PT_Panel


# register
##################################

import traceback

def register():
    try:
        for cls in (WFCRuleSettings,) + _addon_classes + (WFCRULES_PT_Panel,):
            bpy.utils.register_class(cls)
        bpy.types.Scene.wfc_rules = bpy.props.PointerProperty(type=WFCRuleSettings)
        register_keymaps()
    except Exception:
        traceback.print_exc()
    print("Registered {}".format(bl_info["name"]))


def unregister():
    try:
        unregister_keymaps()
        if hasattr(bpy.types.Scene, "wfc_rules"):
            del bpy.types.Scene.wfc_rules
        for cls in reversed((WFCRuleSettings,) + _addon_classes + (WFCRULES_PT_Panel,)):
            bpy.utils.unregister_class(cls)
    except Exception:
        traceback.print_exc()
    print("Unregistered {}".format(bl_info["name"]))
