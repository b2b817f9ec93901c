"""Grouping and transform containers for typedCAD solids.

A container holds child solids and is itself a ``Solid``.  Its mesh is
the children's meshes concatenated in insertion order, with the
container's transform applied to every vertex.  Containers nest::

    part = Translate(vector(10, 0, 0))
    with part.building() as add:
        add(box(Location(), (mm(1), mm(1), mm(1))))
        add(Rotate(Line.Z_AXIS, deg(45), cylinder(Location(), mm(2), mm(1))))

``add_child`` returns an integer handle that can later be used with
``child`` and ``replace_child``.  No boolean merging takes place;
overlapping children simply overlap in the output.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from typedcad.geom import Point3, Vector3
from typedcad.geom3d import Line
from typedcad.mesh import Mesh, concatenate
from typedcad.primitives import Solid
from typedcad.units import Angle, isgoodnum

logger = logging.getLogger(__name__)


class SolidGroup(Solid):
    """Plain union of children, no transform."""

    def __init__(self, *children: Solid):
        self._children: List[Solid] = []
        for c in children:
            self.add_child(c)

    def add_child(self, child: Solid) -> int:
        if not isinstance(child, Solid):
            raise ValueError('bad child passed to add_child(): {!r}'.format(child))
        self._children.append(child)
        return len(self._children) - 1

    def __ilshift__(self, child: Solid):
        self.add_child(child)
        return self

    def child(self, handle: int) -> Solid:
        return self._children[handle]

    def replace_child(self, handle: int, child: Solid) -> None:
        if not isinstance(child, Solid):
            raise ValueError('bad child passed to replace_child(): {!r}'.format(child))
        self._children[handle] = child

    @property
    def children(self) -> Tuple[Solid, ...]:
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    @contextmanager
    def building(self) -> Iterator[Callable[[Solid], int]]:
        """``with group.building() as add:`` yields ``add_child``"""
        yield self.add_child

    def _transform(self, mesh: Mesh) -> Mesh:
        return mesh

    def generate_mesh(self) -> Mesh:
        mesh = self._transform(concatenate([c.generate_mesh() for c in self._children]))
        logger.debug('%s with %d children: %d facets',
                     type(self).__name__, len(self._children), len(mesh))
        return mesh

    def _copy(self):
        dup = copy.copy(self)
        dup._children = list(self._children)
        return dup

    def translated(self, offset: Vector3) -> 'Translate':
        return Translate(offset, self._copy())

    def rotated(self, axis: Line, angle: Angle) -> 'Rotate':
        return Rotate(axis, angle, self._copy())

    def __repr__(self):
        return '{}({} children)'.format(type(self).__name__, len(self._children))


class Translate(SolidGroup):
    """Children moved by ``offset``."""

    def __init__(self, offset: Vector3, *children: Solid):
        if not isinstance(offset, Vector3):
            raise ValueError('bad offset passed to Translate(): {!r}'.format(offset))
        self._offset = Vector3.from_tuple(offset.to_tuple())
        super().__init__(*children)

    @property
    def offset(self) -> Vector3:
        return Vector3.from_tuple(self._offset.to_tuple())

    def _transform(self, mesh: Mesh) -> Mesh:
        return mesh.translated(self._offset)


class Rotate(SolidGroup):
    """Children rotated by ``angle`` about ``axis``."""

    def __init__(self, axis: Line, angle: Angle, *children: Solid):
        if not isinstance(axis, Line):
            raise ValueError('bad axis passed to Rotate(): {!r}'.format(axis))
        if not isinstance(angle, Angle):
            raise ValueError('bad angle passed to Rotate(): {!r}'.format(angle))
        self.axis = axis
        self.angle = angle
        super().__init__(*children)

    def _transform(self, mesh: Mesh) -> Mesh:
        return mesh.rotated(self.axis, self.angle)


class Scale(SolidGroup):
    """Children scaled uniformly by ``factor`` about ``origin``."""

    def __init__(self, factor: float, *children: Solid, origin: Optional[Point3] = None):
        if not isgoodnum(factor):
            raise ValueError('bad scale factor passed to Scale(): {!r}'.format(factor))
        self.factor = float(factor)
        if origin is None:
            origin = Point3.ORIGIN
        elif not isinstance(origin, Point3):
            raise ValueError('bad origin passed to Scale(): {!r}'.format(origin))
        self._origin = Point3.from_tuple(origin.to_tuple())
        super().__init__(*children)

    @property
    def origin(self) -> Point3:
        return Point3.from_tuple(self._origin.to_tuple())

    def _transform(self, mesh: Mesh) -> Mesh:
        return mesh.scaled(self.factor, self._origin)


def build(parent: SolidGroup, *children: Solid) -> SolidGroup:
    """Add ``children`` to ``parent`` in order and return ``parent``."""
    for c in children:
        parent.add_child(c)
    return parent


def group(*children: Solid) -> SolidGroup:
    return SolidGroup(*children)


def translate(offset: Vector3, *children: Solid) -> Translate:
    return Translate(offset, *children)


def rotate(axis: Line, angle: Angle, *children: Solid) -> Rotate:
    return Rotate(axis, angle, *children)


def scale(factor: float, *children: Solid, origin: Optional[Point3] = None) -> Scale:
    return Scale(factor, *children, origin=origin)


__all__ = [
    'SolidGroup',
    'Translate',
    'Rotate',
    'Scale',
    'build',
    'group',
    'translate',
    'rotate',
    'scale',
]
