## dimensionally-typed scalar quantities for typedCAD
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

"""dimensionally-typed scalar quantities for **typedCAD**

====================
OVERVIEW
====================

Every scalar that carries a physical dimension in **typedCAD** is wrapped
in one of three immutable value types:

``Length``
    a distance, stored in millimetres

``Angle``
    an angle, stored in radians

``Area``
    the product of two lengths, stored in square millimetres

Quantities of different kinds cannot be silently mixed.  ``Length +
Angle`` raises ``TypeError``, and ``Length * Length`` produces an
``Area``, which cannot be used where a ``Length`` is expected.  Dividing
two quantities of the same kind yields a plain ``float``.

constants
=========

``EPSILON`` (1e-10) is the comparison slack used for all quantity
equality and ordering.  Two quantities compare equal if they differ by
less than ``EPSILON``.  Ordering is tolerant in the same way, and all
comparisons return ``False`` when either operand is not-a-number.
Redefine it at your peril.

Angles do not wrap: ``deg(0) != deg(360)``.

literals
========

``mm(5)``, ``cm(0.5)``, ``deg(90)`` and ``rad(1.5)`` are the usual
ways to build a quantity. ::

   assert mm(1) + mm(2) == mm(3)
   assert deg(180) == Angle.PI
   assert mm(4) / mm(2) == 2.0

"""

from __future__ import annotations

import math
from numbers import Real
from typing import List, Optional, TypeVar

EPSILON = 1e-10

Q = TypeVar('Q', bound='_Quantity')


def isgoodnum(n) -> bool:
    """ determine if an argument is actually a real scalar number, and
    not a boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, Real)


def rough_eq(a: float, b: float) -> bool:
    """are two floats the same to within ``EPSILON``"""
    return a == b or b - EPSILON < a < b + EPSILON


def rough_cmp(a: float, b: float) -> Optional[int]:
    """tolerant three-way comparison.

    Returns -1, 0 or 1, or ``None`` if the values are unordered (either
    is NaN).
    """
    if a == b:
        return 0
    below = a < b + EPSILON
    above = a > b - EPSILON
    if below and above:
        return 0
    if below:
        return -1
    if above:
        return 1
    return None


class _Quantity:
    """Common machinery for tolerant, immutable scalar quantities."""

    __slots__ = ('_value',)
    __hash__ = None  # tolerant equality cannot be hashed

    def __init__(self, value):
        if not isgoodnum(value):
            raise TypeError('bad value for {}: {!r}'.format(type(self).__name__, value))
        object.__setattr__(self, '_value', float(value))

    def __setattr__(self, name, value):
        raise AttributeError('{} is immutable'.format(type(self).__name__))

    def __reduce__(self):
        return (type(self), (self._value,))

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self._value)

    ## comparison

    def _cmp(self, other) -> Optional[int]:
        return rough_cmp(self._value, other._value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) == 0

    def __ne__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) in (-1, 1)

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) == -1

    def __le__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) in (-1, 0)

    def __gt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) == 1

    def __ge__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._cmp(other) in (0, 1)

    ## same-kind arithmetic

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value + other._value)

    def __radd__(self, other):
        # lets the builtin sum() start from 0
        if isgoodnum(other) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value - other._value)

    def __mul__(self, other):
        if isgoodnum(other):
            return type(self)(self._value * other)
        return NotImplemented

    def __rmul__(self, other):
        if isgoodnum(other):
            return type(self)(other * self._value)
        return NotImplemented

    def __truediv__(self, other):
        if isgoodnum(other):
            return type(self)(self._value / other)
        if type(other) is type(self):
            return self._value / other._value
        return NotImplemented

    def __neg__(self):
        return type(self)(-self._value)

    def __pos__(self):
        return self

    def __abs__(self):
        return type(self)(abs(self._value))

    def abs(self: Q) -> Q:
        return abs(self)

    def clamp(self: Q, lo: Q, hi: Q) -> Q:
        """return this quantity limited to the closed range ``[lo, hi]``"""
        if type(lo) is not type(self) or type(hi) is not type(self):
            raise TypeError('clamp bounds must be {}'.format(type(self).__name__))
        if lo._value > hi._value:
            raise ValueError('bad clamp range: {} > {}'.format(lo, hi))
        return type(self)(min(max(self._value, lo._value), hi._value))

    def isnan(self) -> bool:
        return math.isnan(self._value)


class Length(_Quantity):
    """A distance, stored in millimetres."""

    __slots__ = ()

    @classmethod
    def millimeter(cls, value) -> 'Length':
        return cls(value)

    @classmethod
    def centimeter(cls, value) -> 'Length':
        return cls(value * 10.0)

    def to_millimeter(self) -> float:
        return self._value

    def is_infinity(self) -> bool:
        return math.isinf(self._value)

    def __str__(self):
        return '{}mm'.format(self._value)

    def __mul__(self, other):
        if isinstance(other, Length):
            return Area(self._value * other._value)
        return super().__mul__(other)


class Area(_Quantity):
    """A product of two lengths, stored in square millimetres.

    ``Area`` cannot be used as a ``Length``; take ``sqrt()`` or divide
    by a ``Length`` to get back to one.
    """

    __slots__ = ()

    def to_square_millimeter(self) -> float:
        return self._value

    def sqrt(self) -> Length:
        return Length(math.sqrt(self._value))

    def __str__(self):
        return '{}mm²'.format(self._value)

    def __truediv__(self, other):
        if isinstance(other, Length):
            return Length(self._value / other._value)
        return super().__truediv__(other)


class Angle(_Quantity):
    """An angle, stored in radians.  Angles never wrap modulo 2π."""

    __slots__ = ()

    @classmethod
    def radian(cls, value) -> 'Angle':
        return cls(value)

    @classmethod
    def degree(cls, value) -> 'Angle':
        return cls(math.radians(value))

    def to_radian(self) -> float:
        return self._value

    def to_degree(self) -> float:
        return math.degrees(self._value)

    def sin(self) -> float:
        return math.sin(self._value)

    def cos(self) -> float:
        return math.cos(self._value)

    def tan(self) -> float:
        return math.tan(self._value)

    def sin_cos(self):
        return math.sin(self._value), math.cos(self._value)

    def __str__(self):
        return '{}°'.format(self.to_degree())


Length.ZERO = Length(0.0)
Length.HAIRLINE = Length(1e-8)
Length.INFINITY = Length(math.inf)
Area.ZERO = Area(0.0)
Angle.ZERO = Angle(0.0)
Angle.PI = Angle(math.pi)


## literal constructors
## --------------------

def mm(value) -> Length:
    """``value`` millimetres"""
    return Length.millimeter(value)


def cm(value) -> Length:
    """``value`` centimetres"""
    return Length.centimeter(value)


def deg(value) -> Angle:
    """``value`` degrees"""
    return Angle.degree(value)


def rad(value) -> Angle:
    """``value`` radians"""
    return Angle.radian(value)


## trigonometry
## ------------

def _angle(a) -> Angle:
    if not isinstance(a, Angle):
        raise TypeError('expected an Angle, got {!r}'.format(a))
    return a


def sin(a: Angle) -> float:
    return _angle(a).sin()


def cos(a: Angle) -> float:
    return _angle(a).cos()


def tan(a: Angle) -> float:
    return _angle(a).tan()


def asin(x: float) -> Angle:
    return Angle(math.asin(x))


def acos(x: float) -> Angle:
    return Angle(math.acos(x))


def atan(x: float) -> Angle:
    return Angle(math.atan(x))


def atan2(y: Length, x: Length) -> Angle:
    if not (isinstance(y, Length) and isinstance(x, Length)):
        raise TypeError('atan2 expects two Lengths')
    return Angle(math.atan2(y._value, x._value))


## stepping over ranges
## --------------------

def _step_count(start: float, stop: float, step: float, inclusive: bool) -> int:
    if step == 0:
        raise ValueError('zero step passed to range')
    span = stop - start
    if rough_eq(span, 0.0):
        return 1 if inclusive else 0
    if (span > 0) != (step > 0):
        return 0
    slack = EPSILON if inclusive else -EPSILON
    if span < 0:
        slack = -slack
    return int((span + slack) / step) + 1


def _quantity_range(start: Q, stop: Q, step: Q, inclusive: bool) -> List[Q]:
    kind = type(start)
    if type(stop) is not kind or type(step) is not kind:
        raise TypeError('range bounds and step must all be {}'.format(kind.__name__))
    count = _step_count(start._value, stop._value, step._value, inclusive)
    return [kind(start._value + i * step._value) for i in range(count)]


def angle_range(start: Angle, stop: Angle, step: Angle,
                inclusive: bool = False) -> List[Angle]:
    """Return ``[start, start+step, ...]`` up to ``stop``.

    ``stop`` is excluded unless ``inclusive`` is true; the comparison
    against ``stop`` is tolerant.  Negative steps count downward, and a
    step pointing away from ``stop`` yields an empty list. ::

       angle_range(deg(0), deg(3), deg(1), inclusive=True)
       # -> [0°, 1°, 2°, 3°]
    """
    return _quantity_range(start, stop, step, inclusive)


def length_range(start: Length, stop: Length, step: Length,
                 inclusive: bool = False) -> List[Length]:
    """``Length`` counterpart of :func:`angle_range`."""
    return _quantity_range(start, stop, step, inclusive)


__all__ = [
    'EPSILON',
    'isgoodnum',
    'rough_eq',
    'rough_cmp',
    'Length',
    'Area',
    'Angle',
    'mm',
    'cm',
    'deg',
    'rad',
    'sin',
    'cos',
    'tan',
    'asin',
    'acos',
    'atan',
    'atan2',
    'angle_range',
    'length_range',
]
