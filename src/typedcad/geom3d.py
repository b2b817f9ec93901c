## lines, planes and their intersections for typedCAD
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

"""infinite lines and planes for **typedCAD**

lines
=====

A ``Line`` is a point plus a direction vector.  Two lines compare equal
when they are the same set of points: their unit directions are equal
or opposite, and they share the same point closest to the global
origin.  So a line equals its own reverse. ::

   a = Line(point(0, 0, 0), Vector3.X_UNIT_VECTOR)
   b = Line(point(1, 0, 0), -Vector3.X_UNIT_VECTOR)
   assert a == b

planes
======

A ``Plane`` is a point plus a normal vector, with the same equality
policy as ``Line``.

intersections
=============

``Plane.intersection(Plane)`` returns a ``Line`` and
``Plane.intersection(Line)`` returns a ``Point3``.  Parallel (or
coincident) arguments have no unique intersection and raise
``NoUniqueIntersection``.
"""

from __future__ import annotations

from typedcad.errors import NoUniqueIntersection
from typedcad.geom import Point3, Vector3
from typedcad.units import Angle, Length, rough_eq


def _same_direction(a: Vector3, b: Vector3) -> bool:
    ua = a.to_unit_vector()
    ub = b.to_unit_vector()
    return ua == ub or ua == -ub


class Line:
    """Infinite line through ``point`` along ``vector``."""

    __slots__ = ('_point', '_vector')
    __hash__ = None

    def __init__(self, point: Point3, vector: Vector3):
        if not isinstance(point, Point3) or not isinstance(vector, Vector3):
            raise TypeError('Line needs a Point3 and a Vector3')
        self._point = Point3.from_tuple(point.to_tuple())
        self._vector = Vector3.from_tuple(vector.to_tuple())

    @classmethod
    def from_2points(cls, a: Point3, b: Point3) -> 'Line':
        return cls(a, Vector3.between(a, b))

    @property
    def point(self) -> Point3:
        """the point this line was defined with"""
        return Point3.from_tuple(self._point.to_tuple())

    @property
    def vector(self) -> Vector3:
        return Vector3.from_tuple(self._vector.to_tuple())

    def closest_point(self) -> Point3:
        """the point on this line nearest to the global origin"""
        return Plane(Point3.ORIGIN, self._vector).intersection(self)

    def intersection(self, other: 'Plane') -> Point3:
        if isinstance(other, Plane):
            return other.intersection(self)
        raise ValueError('bad thing passed to Line.intersection(): {!r}'.format(other))

    def translated(self, offset: Vector3) -> 'Line':
        return Line(self._point.translated(offset), self._vector)

    def rotated(self, axis: 'Line', angle: Angle) -> 'Line':
        return Line(self._point.rotated(axis, angle),
                    self._vector.rotated(axis.vector, angle))

    def __eq__(self, other):
        if not isinstance(other, Line):
            return NotImplemented
        return (_same_direction(self._vector, other._vector)
                and self.closest_point() == other.closest_point())

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'Line({!r}, {!r})'.format(self._point, self._vector)


class Plane:
    """Infinite plane through ``point`` with normal ``normal_vector``."""

    __slots__ = ('_point', '_normal')
    __hash__ = None

    def __init__(self, point: Point3, normal_vector: Vector3):
        if not isinstance(point, Point3) or not isinstance(normal_vector, Vector3):
            raise TypeError('Plane needs a Point3 and a Vector3')
        self._point = Point3.from_tuple(point.to_tuple())
        self._normal = Vector3.from_tuple(normal_vector.to_tuple())

    @classmethod
    def from_3points(cls, a: Point3, b: Point3, c: Point3) -> 'Plane':
        """plane through three points; the normal follows the right-hand
        rule on ``a -> b -> c``"""
        return cls(a, Vector3.between(a, b).cross(Vector3.between(a, c)))

    @property
    def point(self) -> Point3:
        return Point3.from_tuple(self._point.to_tuple())

    @property
    def normal_vector(self) -> Vector3:
        return Vector3.from_tuple(self._normal.to_tuple())

    def closest_point(self) -> Point3:
        """the point on this plane nearest to the global origin"""
        return self.intersection(Line(Point3.ORIGIN, self._normal))

    def signed_distance(self, p: Point3) -> Length:
        """Signed distance from the plane to ``p``, positive on the side
        the normal points to.
        """
        return Vector3.between(self._point, p).dot(self._normal) / self._normal.norm()

    def contains(self, p: Point3) -> bool:
        return self.signed_distance(p) == Length.ZERO

    def intersection(self, other):
        """Intersect with a ``Plane`` (giving a ``Line``) or a ``Line``
        (giving a ``Point3``).
        """
        if isinstance(other, Plane):
            return self._intersect_plane(other)
        if isinstance(other, Line):
            return self._intersect_line(other)
        raise ValueError('bad thing passed to Plane.intersection(): {!r}'.format(other))

    def _intersect_plane(self, other: 'Plane') -> Line:
        direction = self._normal.cross(other._normal)
        dx, dy, dz = direction.to_tuple()

        n1x, n1y, n1z = self._normal.to_tuple()
        n2x, n2y, n2z = other._normal.to_tuple()
        d1 = self._normal.dot(Vector3.from_tuple(self._point.to_tuple())).to_square_millimeter()
        d2 = other._normal.dot(Vector3.from_tuple(other._point.to_tuple())).to_square_millimeter()

        # Fix one coordinate at 0 (the line must cross that coordinate
        # plane) and solve the two plane equations by Cramer's rule.
        if not rough_eq(dx, 0.0):
            det = n1y * n2z - n1z * n2y
            p = (0.0,
                 (d1 * n2z - n1z * d2) / det,
                 (n1y * d2 - d1 * n2y) / det)
        elif not rough_eq(dy, 0.0):
            det = n1x * n2z - n1z * n2x
            p = ((d1 * n2z - n1z * d2) / det,
                 0.0,
                 (n1x * d2 - d1 * n2x) / det)
        elif not rough_eq(dz, 0.0):
            det = n1x * n2y - n1y * n2x
            p = ((d1 * n2y - n1y * d2) / det,
                 (n1x * d2 - d1 * n2x) / det,
                 0.0)
        else:
            raise NoUniqueIntersection(
                "2 planes don't have a unique intersection: they are parallel or identical")

        return Line(Point3.from_tuple(p), direction)

    def _intersect_line(self, line: Line) -> Point3:
        d = self._normal.dot(line.vector).to_square_millimeter()
        if rough_eq(d, 0.0):
            raise NoUniqueIntersection(
                "the plane and line don't have a unique intersection: "
                "the line is parallel to the plane")
        t = Vector3.between(line.point, self._point).dot(self._normal).to_square_millimeter() / d
        return line.point.translated(line.vector * t)

    def translated(self, offset: Vector3) -> 'Plane':
        return Plane(self._point.translated(offset), self._normal)

    def rotated(self, axis: Line, angle: Angle) -> 'Plane':
        return Plane(self._point.rotated(axis, angle),
                     self._normal.rotated(axis.vector, angle))

    def __eq__(self, other):
        if not isinstance(other, Plane):
            return NotImplemented
        return (_same_direction(self._normal, other._normal)
                and self.closest_point() == other.closest_point())

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'Plane({!r}, {!r})'.format(self._point, self._normal)


Line.X_AXIS = Line(Point3.ORIGIN, Vector3.X_UNIT_VECTOR)
Line.Y_AXIS = Line(Point3.ORIGIN, Vector3.Y_UNIT_VECTOR)
Line.Z_AXIS = Line(Point3.ORIGIN, Vector3.Z_UNIT_VECTOR)

Plane.XY = Plane(Point3.ORIGIN, Vector3.Z_UNIT_VECTOR)
Plane.YZ = Plane(Point3.ORIGIN, Vector3.X_UNIT_VECTOR)
Plane.ZX = Plane(Point3.ORIGIN, Vector3.Y_UNIT_VECTOR)


__all__ = ['Line', 'Plane']
