# Entry point for scripting inside Blender's Text Editor:
# Run this file to register the add-on package manually.

import importlib
import os
import sys

# the add-on packages live next to this file
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import wfc_blender as addon_entry


def register():
    importlib.reload(addon_entry)
    addon_entry.register()


def unregister():
    addon_entry.unregister()


if __name__ == "__main__":
    register()
