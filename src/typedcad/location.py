## local coordinate frames for typedCAD solids
## Copyright (c) typedCAD contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Point-and-orientation frames used to place primitives.

A ``Location`` holds an origin point and two orthogonal unit vectors,
*right* and *back*.  The other four directions are derived: *left* and
*front* by negation, *top* as ``right x back`` and *bottom* as
``back x right``.  Frames are therefore always right-handed.

Use the builder to give any two of the six directions::

   loc = Location.build(point(0, 0, 0)).left_vector(-Vector3.X_UNIT_VECTOR) \\
                                        .back_vector(Vector3.Y_UNIT_VECTOR)

   loc = Location.build(p).bottom_vector(-Vector3.Z_UNIT_VECTOR) \\
                          .front_vector(-Vector3.Y_UNIT_VECTOR)
"""

from __future__ import annotations

from typing import Dict, Optional, Union

from typedcad.errors import InvalidFrame
from typedcad.geom import Point3, Vector3
from typedcad.units import Angle, deg

_RIGHT_ANGLE = deg(90)


class Location:
    """An origin point plus orthogonal *right* and *back* unit vectors."""

    __slots__ = ('_point', '_right', '_back')
    __hash__ = None

    def __init__(self, point: Optional[Point3] = None,
                 right_vector: Optional[Vector3] = None,
                 back_vector: Optional[Vector3] = None):
        point = Point3.ORIGIN if point is None else point
        right_vector = Vector3.X_UNIT_VECTOR if right_vector is None else right_vector
        back_vector = Vector3.Y_UNIT_VECTOR if back_vector is None else back_vector

        if right_vector.angle_with(back_vector) != _RIGHT_ANGLE:
            raise InvalidFrame(
                'the angle formed by the right and back vectors must be 90 degrees, '
                'got {}'.format(right_vector.angle_with(back_vector)))

        self._point = Point3.from_tuple(point.to_tuple())
        self._right = right_vector.to_unit_vector()
        self._back = back_vector.to_unit_vector()

    @staticmethod
    def build(point: Point3) -> 'LocationBuilder':
        return LocationBuilder(point)

    @classmethod
    def from_vectors(cls, point: Point3, **directions: Vector3) -> 'Location':
        """Build from exactly two of ``right``, ``left``, ``back``,
        ``front``, ``top`` and ``bottom`` given as keywords."""
        builder: Union[LocationBuilder, Location] = cls.build(point)
        if len(directions) != 2:
            raise ValueError('exactly two directions are needed, got {}'.format(sorted(directions)))
        for name, vec in directions.items():
            method = getattr(builder, '{}_vector'.format(name), None)
            if method is None:
                raise ValueError('bad direction name: {}'.format(name))
            builder = method(vec)
        return builder

    @property
    def point(self) -> Point3:
        return Point3.from_tuple(self._point.to_tuple())

    def right_vector(self) -> Vector3:
        return Vector3.from_tuple(self._right.to_tuple())

    def left_vector(self) -> Vector3:
        return -self._right

    def back_vector(self) -> Vector3:
        return Vector3.from_tuple(self._back.to_tuple())

    def front_vector(self) -> Vector3:
        return -self._back

    def top_vector(self) -> Vector3:
        return self._right.cross(self._back)

    def bottom_vector(self) -> Vector3:
        return self._back.cross(self._right)

    def translated(self, offset: Vector3) -> 'Location':
        return Location(self._point.translated(offset), self._right, self._back)

    def rotated(self, axis, angle: Angle) -> 'Location':
        """rotate the frame about ``axis`` (a ``geom3d.Line``)"""
        return Location(self._point.rotated(axis, angle),
                        self._right.rotated(axis.vector, angle),
                        self._back.rotated(axis.vector, angle))

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return (self._point == other._point and self._right == other._right
                and self._back == other._back)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'Location({!r}, right={!r}, back={!r})'.format(
            self._point, self._right, self._back)


class LocationBuilder:
    """Collects two of the six directions of a ``Location``.

    Each direction method returns a new builder while only one axis is
    known, and the finished ``Location`` once two different axes are.
    """

    __slots__ = ('_point', '_axes')

    def __init__(self, point: Point3, axes: Optional[Dict[str, Vector3]] = None):
        self._point = point
        self._axes = dict(axes or {})

    def _with(self, axis: str, vec: Vector3):
        if not isinstance(vec, Vector3):
            raise TypeError('direction must be a Vector3, got {!r}'.format(vec))
        if axis in self._axes:
            raise ValueError('the {} axis of this location was already given'.format(axis))
        axes = dict(self._axes)
        axes[axis] = vec
        if len(axes) < 2:
            return LocationBuilder(self._point, axes)
        return self._resolve(axes)

    def _resolve(self, axes: Dict[str, Vector3]) -> Location:
        first, second = axes.values()
        if first.angle_with(second) != _RIGHT_ANGLE:
            raise InvalidFrame('the two directions of a location must be orthogonal')
        right = axes.get('x')
        back = axes.get('y')
        top = axes.get('z')
        if back is None:
            back = top.cross(right)
        elif right is None:
            right = back.cross(top)
        return Location(self._point, right, back)

    def right_vector(self, v: Vector3):
        return self._with('x', v)

    def left_vector(self, v: Vector3):
        return self._with('x', -v)

    def back_vector(self, v: Vector3):
        return self._with('y', v)

    def front_vector(self, v: Vector3):
        return self._with('y', -v)

    def top_vector(self, v: Vector3):
        return self._with('z', v)

    def bottom_vector(self, v: Vector3):
        return self._with('z', -v)


__all__ = ['Location', 'LocationBuilder']
