# app/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .art_object import *
from .collection import *
from .placed_object import *
from .purchase import *
