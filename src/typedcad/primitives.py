"""Parametric solids and their tessellation.

Every primitive is a frozen dataclass placed by a ``Location``:

``Box``
    corner at the location point, extending along *right*, *back* and
    *top*; 12 facets.

``Cylinder`` / ``Cone``
    base centred on the location point, axis along *top*.  The base
    ring starts at the *back* direction and steps around *top* by the
    active ``fragment_minimum_angle``.

``Sphere``
    centred on the location point.  One octant is tessellated on a
    thread pool and mirrored into the other seven with numpy.

All facets are wound counter-clockwise seen from outside, so normals
point out of the solid for every right-handed ``Location``.
"""

from __future__ import annotations

import abc
import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import List, Sequence, Tuple

import numpy as np

from typedcad.geom import Point3, Vec3, Vector3
from typedcad.geom3d import Line
from typedcad.io.stl import write_stl
from typedcad.location import Location
from typedcad.mesh import Facet, Mesh
from typedcad.precision import current_settings
from typedcad.units import Angle, Length, angle_range, deg

logger = logging.getLogger(__name__)

_FULL_TURN = deg(360)
_QUARTER_TURN = deg(90)


def _require_length(value, name):
    if not isinstance(value, Length):
        raise TypeError('{} must be a Length, got {!r}'.format(name, value))


class Solid(abc.ABC):
    """Anything that can be turned into a ``Mesh``."""

    @abc.abstractmethod
    def generate_mesh(self) -> Mesh:
        ...

    @abc.abstractmethod
    def translated(self, offset: Vector3) -> 'Solid':
        ...

    @abc.abstractmethod
    def rotated(self, axis: Line, angle: Angle) -> 'Solid':
        ...

    def write_to(self, path_or_file, *, binary: bool = True, name: str = 'typedCAD') -> None:
        """Tessellate and write as STL (binary unless ``binary=False``)."""
        write_stl(self.generate_mesh(), path_or_file, binary=binary, name=name)


class _Placed(Solid):
    """A primitive positioned by its ``location`` field."""

    location: Location

    def translated(self, offset: Vector3):
        return dataclasses.replace(self, location=self.location.translated(offset))

    def rotated(self, axis: Line, angle: Angle):
        return dataclasses.replace(self, location=self.location.rotated(axis, angle))


def _ring(center: Point3, back: Vector3, top: Vector3, radius: Length, step: Angle) -> List[Point3]:
    """points around ``center`` in the plane normal to ``top``"""
    return [center.translated_toward(back.rotated(top, a), radius)
            for a in angle_range(Angle.ZERO, _FULL_TURN, step)]


def _pairs(points: Sequence) -> List[Tuple]:
    """consecutive pairs, wrapping the last point back to the first"""
    return list(zip(points, list(points[1:]) + [points[0]]))


@dataclass(frozen=True)
class Box(_Placed):
    location: Location
    size: Tuple[Length, Length, Length]

    def __post_init__(self):
        if len(self.size) != 3:
            raise ValueError('a box needs three sizes, got {!r}'.format(self.size))
        for s, name in zip(self.size, ('x', 'y', 'z')):
            _require_length(s, 'box size ' + name)
        object.__setattr__(self, 'size', tuple(self.size))

    def generate_mesh(self) -> Mesh:
        origin = self.location.point
        right = self.location.right_vector()
        back = self.location.back_vector()
        top = self.location.top_vector()

        def p(x, y, z):
            return (origin.translated_toward(right, x)
                    .translated_toward(back, y)
                    .translated_toward(top, z))

        sx, sy, sz = self.size
        zero = Length.ZERO
        lfb = p(zero, zero, zero)
        rfb = p(sx, zero, zero)
        lbb = p(zero, sy, zero)
        rbb = p(sx, sy, zero)
        lft = p(zero, zero, sz)
        rft = p(sx, zero, sz)
        lbt = p(zero, sy, sz)
        rbt = p(sx, sy, sz)

        mesh = Mesh([
            # bottom
            Facet(lfb, lbb, rbb), Facet(rbb, rfb, lfb),
            # front
            Facet(lfb, rfb, rft), Facet(rft, lft, lfb),
            # right
            Facet(rfb, rbb, rft), Facet(rbt, rft, rbb),
            # back
            Facet(rbb, lbb, rbt), Facet(lbt, rbt, lbb),
            # left
            Facet(lbb, lfb, lbt), Facet(lft, lbt, lfb),
            # top
            Facet(lft, rft, rbt), Facet(rbt, lbt, lft),
        ])
        logger.debug('box %s: %d facets', self.size, len(mesh))
        return mesh


@dataclass(frozen=True)
class Cylinder(_Placed):
    location: Location
    height: Length
    radius: Length

    def __post_init__(self):
        _require_length(self.height, 'height')
        _require_length(self.radius, 'radius')

    def generate_mesh(self) -> Mesh:
        step = current_settings().fragment_minimum_angle

        back = self.location.back_vector()
        top = self.location.top_vector()
        bottom_point = self.location.point
        top_point = bottom_point.translated_toward(top, self.height)

        bottom_ring = _ring(bottom_point, back, top, self.radius, step)
        top_ring = [p.translated_toward(top, self.height) for p in bottom_ring]
        bottom_pairs = _pairs(bottom_ring)
        top_pairs = _pairs(top_ring)

        facets = [Facet(bottom_point, b, a) for a, b in bottom_pairs]
        for (bottom_a, bottom_b), (top_a, top_b) in zip(bottom_pairs, top_pairs):
            facets.append(Facet(bottom_a, top_b, top_a))
            facets.append(Facet(top_b, bottom_a, bottom_b))
        facets.extend(Facet(top_point, a, b) for a, b in top_pairs)

        mesh = Mesh(facets)
        logger.debug('cylinder h=%s r=%s step=%s: %d facets',
                     self.height, self.radius, step, len(mesh))
        return mesh


@dataclass(frozen=True)
class Cone(_Placed):
    location: Location
    height: Length
    bottom_radius: Length

    def __post_init__(self):
        _require_length(self.height, 'height')
        _require_length(self.bottom_radius, 'bottom_radius')

    def generate_mesh(self) -> Mesh:
        step = current_settings().fragment_minimum_angle

        back = self.location.back_vector()
        top = self.location.top_vector()
        bottom_point = self.location.point
        apex = bottom_point.translated_toward(top, self.height)

        pairs = _pairs(_ring(bottom_point, back, top, self.bottom_radius, step))
        facets = [Facet(bottom_point, b, a) for a, b in pairs]
        facets.extend(Facet(a, b, apex) for a, b in pairs)

        mesh = Mesh(facets)
        logger.debug('cone h=%s r=%s step=%s: %d facets',
                     self.height, self.bottom_radius, step, len(mesh))
        return mesh


## sphere
## ------

def _angle_pairs(step: Angle) -> List[Tuple[Angle, Angle]]:
    """``[0, 90)`` in ``step`` increments, each paired with its successor"""
    angles = angle_range(Angle.ZERO, _QUARTER_TURN, step)
    return list(zip(angles, angles[1:] + [_QUARTER_TURN]))


def _sphere_band(radius: Length, azimuths: Sequence[Tuple[Angle, Angle]],
                 polar: Tuple[Angle, Angle]) -> List[Tuple[Vec3, Vec3, Vec3]]:
    """Facets of one polar band of the x >= 0, y <= 0, z >= 0 octant."""
    ya, yb = polar
    pole = Point3.from_tuple((0.0, 0.0, radius.to_millimeter()))
    a = pole.rotated(Line.X_AXIS, ya)
    b = pole.rotated(Line.X_AXIS, yb)

    band = []
    for za, zb in azimuths:
        aa = a.rotated(Line.Y_AXIS, za)
        ab = a.rotated(Line.Y_AXIS, zb)
        ba = b.rotated(Line.Y_AXIS, za)
        bb = b.rotated(Line.Y_AXIS, zb)
        band.append((aa.to_tuple(), ba.to_tuple(), ab.to_tuple()))
        # the band touching the pole closes with a single triangle
        if ba != bb:
            band.append((bb.to_tuple(), ab.to_tuple(), ba.to_tuple()))
    return band


# octant i negates x if bit 0 is set, y if bit 1, z if bit 2
_OCTANT_SIGNS = np.array([[-1.0 if i & (1 << axis) else 1.0 for axis in range(3)]
                          for i in range(8)])
_OCTANT_FLIPS = np.array([bin(i).count('1') % 2 == 1 for i in range(8)])


def _mirror_octants(patch: np.ndarray, center: Vec3) -> np.ndarray:
    """Replicate an ``(F, 3, 3)`` octant patch into all eight octants.

    Odd reflections swap the last two vertices to keep the winding
    outward.  Result is ``(8 * F, 3, 3)``, octant by octant.
    """
    out = patch[None, :, :, :] * _OCTANT_SIGNS[:, None, None, :]
    out[_OCTANT_FLIPS] = out[_OCTANT_FLIPS][:, :, [0, 2, 1], :]
    return out.reshape(-1, 3, 3) + np.asarray(center)


@dataclass(frozen=True)
class Sphere(_Placed):
    location: Location
    radius: Length

    def __post_init__(self):
        _require_length(self.radius, 'radius')

    def generate_mesh(self) -> Mesh:
        settings = current_settings()
        step = settings.fragment_minimum_angle
        pairs = _angle_pairs(step)

        # worker threads do not see the caller's precision scope, so the
        # step is bound here
        band = partial(_sphere_band, self.radius, pairs)
        if settings.max_workers == 1:
            bands = list(map(band, pairs))
        else:
            with ThreadPoolExecutor(max_workers=settings.max_workers) as pool:
                bands = list(pool.map(band, pairs))

        patch = np.array([tri for rows in bands for tri in rows], dtype=float)
        mesh = Mesh.from_array(_mirror_octants(patch, self.location.point.to_tuple()))
        logger.debug('sphere r=%s step=%s: %d facets (%d per octant)',
                     self.radius, step, len(mesh), len(patch))
        return mesh


## factory functions
## -----------------

def box(location: Location, size: Tuple[Length, Length, Length]) -> Box:
    return Box(location, tuple(size))


cube = box


def cylinder(location: Location, height: Length, radius: Length) -> Cylinder:
    return Cylinder(location, height, radius)


def cone(location: Location, height: Length, bottom_radius: Length) -> Cone:
    return Cone(location, height, bottom_radius)


def sphere(location: Location, radius: Length) -> Sphere:
    return Sphere(location, radius)


__all__ = [
    'Solid',
    'Box',
    'Cylinder',
    'Cone',
    'Sphere',
    'box',
    'cube',
    'cylinder',
    'cone',
    'sphere',
]
