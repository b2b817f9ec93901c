"""Precondition errors raised by the typedCAD geometry kernel.

All of these signal programmer or input errors, not transient
conditions; nothing in the library catches them.
"""

from __future__ import annotations


class GeometryError(ValueError):
    """Base class for violated geometric preconditions."""


class DegenerateDirection(GeometryError):
    """Raised when a zero-length vector is asked for its direction."""


class NoUniqueIntersection(GeometryError):
    """Raised when two planes, or a plane and a line, are parallel."""


class InvalidFrame(GeometryError):
    """Raised when a location is built from non-orthogonal directions."""


class FacetOverflow(GeometryError):
    """Raised when a mesh has more facets than STL can count."""


__all__ = [
    'GeometryError',
    'DegenerateDirection',
    'NoUniqueIntersection',
    'InvalidFrame',
    'FacetOverflow',
]
