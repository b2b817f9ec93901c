"""I/O utilities for typedCAD."""

from .stl import read_stl, write_stl

__all__ = ['write_stl', 'read_stl']
