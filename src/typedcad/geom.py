## vectors and points for typedCAD
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

"""vectors and points for **typedCAD**

====================
OVERVIEW
====================

``Vector3`` and ``Point3`` are both ordered triples of ``Length``
components, but they are deliberately distinct types.  A vector is a
displacement; a point is a position.  You can add a vector to a point,
and subtract two points to get the vector between them, but adding two
points raises ``TypeError``. ::

   p = point(1, 2, 3)            # plain numbers are millimetres
   q = p + vector(1, 0, 0)
   assert q - p == Vector3.X_UNIT_VECTOR

Components are held by value as millimetre floats and handed out as
``Length`` objects.  Equality is component-wise and ``EPSILON``
tolerant.

vectors
=======

``norm()``, ``to_unit_vector()``, ``cross()``, ``dot()``,
``angle_with()`` and ``rotated()`` (Rodrigues' rotation formula) are the
building blocks for everything in ``geom3d`` and the tessellators.
``dot()`` returns an ``Area``, not a ``Length``.

``to_unit_vector()`` raises ``DegenerateDirection`` for a zero vector.

points
======

Points can be translated by a vector, moved a given distance toward a
direction, and rotated about a ``geom3d.Line``.

The class-level constants (``Vector3.ZERO``, ``Vector3.X_UNIT_VECTOR``,
``Point3.ORIGIN``, ...) return a fresh instance on every access, so the
in-place mutators ``translate()`` and ``rotate()`` can never corrupt
them.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from typedcad.errors import DegenerateDirection
from typedcad.units import Angle, Area, Length, isgoodnum, rough_eq

Vec3 = Tuple[float, float, float]


class _constant:
    """class attribute that builds a new instance on every access"""

    def __init__(self, x, y, z):
        self._xyz = (float(x), float(y), float(z))

    def __get__(self, obj, owner):
        return owner._raw(*self._xyz)


def _component(value, name):
    if isinstance(value, Length):
        return value.to_millimeter()
    if isgoodnum(value):
        return float(value)
    raise TypeError('bad {} component: {!r}'.format(name, value))


class _Triple:
    """storage and component access shared by vectors and points"""

    __slots__ = ('_v',)
    __hash__ = None

    def __init__(self, x: Length, y: Length, z: Length):
        for c, name in ((x, 'x'), (y, 'y'), (z, 'z')):
            if not isinstance(c, Length):
                raise TypeError('{} component must be a Length, got {!r}'.format(name, c))
        self._v = (x.to_millimeter(), y.to_millimeter(), z.to_millimeter())

    @classmethod
    def _raw(cls, x: float, y: float, z: float):
        obj = cls.__new__(cls)
        obj._v = (float(x), float(y), float(z))
        return obj

    @classmethod
    def from_tuple(cls, xyz: Iterable[float]):
        """build from three millimetre floats"""
        x, y, z = xyz
        return cls._raw(x, y, z)

    @property
    def x(self) -> Length:
        return Length(self._v[0])

    @property
    def y(self) -> Length:
        return Length(self._v[1])

    @property
    def z(self) -> Length:
        return Length(self._v[2])

    def to_tuple(self) -> Vec3:
        """components as millimetre floats"""
        return self._v

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(rough_eq(a, b) for a, b in zip(self._v, other._v))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return '{}({}, {}, {})'.format(type(self).__name__, *self._v)

    def __str__(self):
        return '({}mm, {}mm, {}mm)'.format(*self._v)


def _rodrigues(v: Vec3, axis: Vec3, angle: Angle) -> Vec3:
    """rotate ``v`` about the unit vector ``axis`` by ``angle``

    v' = v cos(t) + (k x v) sin(t) + k (k . v)(1 - cos(t))
    """
    kx, ky, kz = axis
    vx, vy, vz = v
    s, c = angle.sin_cos()
    kdotv = kx * vx + ky * vy + kz * vz
    cx = ky * vz - kz * vy
    cy = kz * vx - kx * vz
    cz = kx * vy - ky * vx
    return (vx * c + cx * s + kx * kdotv * (1.0 - c),
            vy * c + cy * s + ky * kdotv * (1.0 - c),
            vz * c + cz * s + kz * kdotv * (1.0 - c))


class Vector3(_Triple):
    """3D displacement with ``Length`` components."""

    __slots__ = ()

    ZERO = _constant(0, 0, 0)
    X_UNIT_VECTOR = _constant(1, 0, 0)
    Y_UNIT_VECTOR = _constant(0, 1, 0)
    Z_UNIT_VECTOR = _constant(0, 0, 1)

    @staticmethod
    def between(a: 'Point3', b: 'Point3') -> 'Vector3':
        """vector from point ``a`` to point ``b``"""
        if not (isinstance(a, Point3) and isinstance(b, Point3)):
            raise TypeError('Vector3.between expects two points')
        return Vector3._raw(b._v[0] - a._v[0], b._v[1] - a._v[1], b._v[2] - a._v[2])

    def norm(self) -> Length:
        return Length(math.sqrt(self._v[0] ** 2 + self._v[1] ** 2 + self._v[2] ** 2))

    def is_zero(self) -> bool:
        return self.norm() == Length.ZERO

    def to_unit_vector(self) -> 'Vector3':
        n = self.norm().to_millimeter()
        if rough_eq(n, 0.0):
            raise DegenerateDirection(
                'cannot convert to a unit vector since this vector '
                'does not point in any direction: {!r}'.format(self))
        return Vector3._raw(self._v[0] / n, self._v[1] / n, self._v[2] / n)

    def cross(self, other: 'Vector3') -> 'Vector3':
        """vector (cross) product, ``self x other``"""
        if not isinstance(other, Vector3):
            raise TypeError('cross product needs a Vector3, got {!r}'.format(other))
        ax, ay, az = self._v
        bx, by, bz = other._v
        return Vector3._raw(ay * bz - az * by,
                            az * bx - ax * bz,
                            ax * by - ay * bx)

    vector_product = cross

    def dot(self, other: 'Vector3') -> Area:
        """inner (dot) product; the result has dimension length squared"""
        if not isinstance(other, Vector3):
            raise TypeError('dot product needs a Vector3, got {!r}'.format(other))
        return Area(sum(a * b for a, b in zip(self._v, other._v)))

    inner_product = dot

    def angle_with(self, other: 'Vector3') -> Angle:
        """angle between two vectors, in ``[0, 180]`` degrees"""
        denom = self.norm().to_millimeter() * other.norm().to_millimeter()
        if rough_eq(denom, 0.0):
            raise DegenerateDirection('angle with a zero-length vector is undefined')
        cosang = self.dot(other).to_square_millimeter() / denom
        return Angle(math.acos(max(-1.0, min(1.0, cosang))))

    def rotated(self, axis: 'Vector3', angle: Angle) -> 'Vector3':
        """rotate about ``axis`` (through the origin) by ``angle``,
        right-hand rule"""
        k = axis.to_unit_vector()._v
        return Vector3._raw(*_rodrigues(self._v, k, angle))

    def rotate(self, axis: 'Vector3', angle: Angle) -> None:
        self._v = self.rotated(axis, angle)._v

    def __add__(self, other):
        if isinstance(other, Vector3):
            return Vector3._raw(*(a + b for a, b in zip(self._v, other._v)))
        return NotImplemented

    def __radd__(self, other):
        # sum() of vectors
        if isgoodnum(other) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector3):
            return Vector3._raw(*(a - b for a, b in zip(self._v, other._v)))
        return NotImplemented

    def __mul__(self, s):
        if isgoodnum(s):
            return Vector3._raw(*(a * s for a in self._v))
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, s):
        if isgoodnum(s):
            return Vector3._raw(*(a / s for a in self._v))
        return NotImplemented

    def __neg__(self):
        return Vector3._raw(-self._v[0], -self._v[1], -self._v[2])


class Point3(_Triple):
    """3D position with ``Length`` components."""

    __slots__ = ()

    ORIGIN = _constant(0, 0, 0)

    def distance(self, other: 'Point3') -> Length:
        return Vector3.between(self, other).norm()

    def translated(self, offset: Vector3) -> 'Point3':
        if not isinstance(offset, Vector3):
            raise TypeError('points are translated by a Vector3, got {!r}'.format(offset))
        return Point3._raw(*(a + b for a, b in zip(self._v, offset._v)))

    def translate(self, offset: Vector3) -> None:
        self._v = self.translated(offset)._v

    def translated_toward(self, direction: Vector3, distance: Length) -> 'Point3':
        """move ``distance`` along ``direction``, whatever its norm"""
        n = direction.norm()
        if n == Length.ZERO:
            raise DegenerateDirection('cannot move toward a zero-length direction')
        return self.translated(direction * (distance / n))

    def rotated(self, axis, angle: Angle) -> 'Point3':
        """rotate about ``axis`` (a ``geom3d.Line``) by ``angle``"""
        origin = axis.point
        v = Vector3.between(origin, self).rotated(axis.vector, angle)
        return origin.translated(v)

    def rotate(self, axis, angle: Angle) -> None:
        self._v = self.rotated(axis, angle)._v

    def scaled(self, factor: float, origin: 'Point3' = None) -> 'Point3':
        """uniform scale about ``origin`` (default: the global origin)"""
        if not isgoodnum(factor):
            raise ValueError('bad scale factor: {!r}'.format(factor))
        o = origin._v if origin is not None else (0.0, 0.0, 0.0)
        return Point3._raw(*((a - b) * factor + b for a, b in zip(self._v, o)))

    def __add__(self, other):
        if isinstance(other, Vector3):
            return self.translated(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Point3):
            return Vector3.between(other, self)
        if isinstance(other, Vector3):
            return self.translated(-other)
        return NotImplemented


## convenience constructors
## ------------------------

def vector(x, y, z) -> Vector3:
    """Build a vector from ``Length`` values or plain millimetre numbers."""
    return Vector3._raw(_component(x, 'x'), _component(y, 'y'), _component(z, 'z'))


def point(x, y, z) -> Point3:
    """Build a point from ``Length`` values or plain millimetre numbers."""
    return Point3._raw(_component(x, 'x'), _component(y, 'y'), _component(z, 'z'))


def cross(a: Vector3, b: Vector3) -> Vector3:
    return a.cross(b)


def dot(a: Vector3, b: Vector3) -> Area:
    return a.dot(b)


__all__ = [
    'Vec3',
    'Vector3',
    'Point3',
    'vector',
    'point',
    'cross',
    'dot',
]
