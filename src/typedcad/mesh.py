"""Triangle meshes produced by the tessellators.

A ``Mesh`` is an ordered list of ``Facet`` objects, each holding exactly
three ``Point3`` vertices.  No connectivity or uniqueness is implied;
shared vertices are simply repeated.  Whole-mesh transforms go through
an ``(F, 3, 3)`` numpy array of millimetre coordinates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from typedcad.errors import DegenerateDirection
from typedcad.geom import Point3, Vec3, Vector3
from typedcad.units import Angle, EPSILON, isgoodnum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle in raw millimetre floats, as written to STL."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


class Facet:
    """Three vertices in counter-clockwise order seen from outside."""

    __slots__ = ('_vertices',)
    __hash__ = None

    def __init__(self, v0: Point3, v1: Point3, v2: Point3):
        for v in (v0, v1, v2):
            if not isinstance(v, Point3):
                raise TypeError('facet vertices must be Point3, got {!r}'.format(v))
        self._vertices = (Point3.from_tuple(v0.to_tuple()),
                          Point3.from_tuple(v1.to_tuple()),
                          Point3.from_tuple(v2.to_tuple()))

    @classmethod
    def from_tuples(cls, v0: Vec3, v1: Vec3, v2: Vec3) -> 'Facet':
        obj = cls.__new__(cls)
        obj._vertices = (Point3.from_tuple(v0), Point3.from_tuple(v1), Point3.from_tuple(v2))
        return obj

    @property
    def vertices(self) -> Tuple[Point3, Point3, Point3]:
        return tuple(Point3.from_tuple(v.to_tuple()) for v in self._vertices)

    def normal_vector(self) -> Vector3:
        """unit normal, ``(v0->v1) x (v1->v2)``

        Raises ``DegenerateDirection`` for a zero-area facet.
        """
        a, b, c = self._vertices
        return Vector3.between(a, b).cross(Vector3.between(b, c)).to_unit_vector()

    def is_degenerate(self) -> bool:
        a, b, c = self._vertices
        return Vector3.between(a, b).cross(Vector3.between(b, c)).is_zero()

    def centroid(self) -> Point3:
        a, b, c = (v.to_tuple() for v in self._vertices)
        return Point3.from_tuple(((a[0] + b[0] + c[0]) / 3.0,
                                  (a[1] + b[1] + c[1]) / 3.0,
                                  (a[2] + b[2] + c[2]) / 3.0))

    def reversed(self) -> 'Facet':
        """same triangle with the opposite winding"""
        a, b, c = self._vertices
        return Facet(a, c, b)

    def translated(self, offset: Vector3) -> 'Facet':
        return Facet(*(v.translated(offset) for v in self._vertices))

    def rotated(self, axis, angle: Angle) -> 'Facet':
        return Facet(*(v.rotated(axis, angle) for v in self._vertices))

    def scaled(self, factor: float, origin: Optional[Point3] = None) -> 'Facet':
        return Facet(*(v.scaled(factor, origin) for v in self._vertices))

    def to_triangle(self) -> Triangle:
        """Flatten to a ``Triangle``; a degenerate facet gets a zero normal."""
        try:
            normal = self.normal_vector().to_tuple()
        except DegenerateDirection:
            normal = (0.0, 0.0, 0.0)
        v0, v1, v2 = (v.to_tuple() for v in self._vertices)
        return Triangle(normal=normal, v0=v0, v1=v1, v2=v2)

    def __iter__(self) -> Iterator[Point3]:
        return iter(self.vertices)

    def __eq__(self, other):
        if not isinstance(other, Facet):
            return NotImplemented
        return all(a == b for a, b in zip(self._vertices, other._vertices))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return 'Facet({!r}, {!r}, {!r})'.format(*self._vertices)


def rotation_matrix(axis: Vec3, angle: Angle) -> np.ndarray:
    """3x3 matrix rotating about the unit vector ``axis`` by ``angle``.

    R = I cos(t) + sin(t) [k]x + (1 - cos(t)) k k^T
    """
    k = np.asarray(axis, dtype=float)
    s, c = angle.sin_cos()
    kx, ky, kz = k
    skew = np.array([[0.0, -kz, ky],
                     [kz, 0.0, -kx],
                     [-ky, kx, 0.0]])
    return c * np.eye(3) + s * skew + (1.0 - c) * np.outer(k, k)


class Mesh:
    """Ordered collection of facets; the result of ``generate_mesh()``."""

    __hash__ = None

    def __init__(self, facets: Optional[Iterable[Facet]] = None):
        self.facets: List[Facet] = list(facets) if facets is not None else []
        for f in self.facets:
            if not isinstance(f, Facet):
                raise TypeError('a Mesh holds Facets, got {!r}'.format(f))

    def __len__(self) -> int:
        return len(self.facets)

    def __iter__(self) -> Iterator[Facet]:
        return iter(self.facets)

    def __getitem__(self, index):
        return self.facets[index]

    def __add__(self, other):
        if not isinstance(other, Mesh):
            return NotImplemented
        return Mesh(self.facets + other.facets)

    def __eq__(self, other):
        if not isinstance(other, Mesh):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    def __repr__(self):
        return '<Mesh with {} facets>'.format(len(self.facets))

    def append(self, facet: Facet) -> None:
        if not isinstance(facet, Facet):
            raise TypeError('a Mesh holds Facets, got {!r}'.format(facet))
        self.facets.append(facet)

    def extend(self, facets: Iterable[Facet]) -> None:
        for f in facets:
            self.append(f)

    def vertices(self) -> Iterator[Point3]:
        """every vertex of every facet, repeats included"""
        for f in self.facets:
            yield from f.vertices

    def triangles(self) -> Iterator[Triangle]:
        for f in self.facets:
            yield f.to_triangle()

    ## numpy views
    ## -----------

    def as_array(self) -> np.ndarray:
        """``(F, 3, 3)`` float array: facet, vertex, xyz in millimetres"""
        if not self.facets:
            return np.zeros((0, 3, 3))
        return np.array([[v.to_tuple() for v in f._vertices] for f in self.facets],
                        dtype=float)

    @classmethod
    def from_array(cls, data: np.ndarray) -> 'Mesh':
        arr = np.asarray(data, dtype=float)
        if arr.ndim != 3 or arr.shape[1:] != (3, 3):
            raise ValueError('bad mesh array shape {}, expected (F, 3, 3)'.format(arr.shape))
        return cls(Facet.from_tuples(*(tuple(v) for v in tri.tolist())) for tri in arr)

    def bounds(self) -> Tuple[Point3, Point3]:
        """``(min_corner, max_corner)`` of the vertices"""
        if not self.facets:
            raise ValueError('an empty mesh has no bounds')
        pts = self.as_array().reshape(-1, 3)
        return (Point3.from_tuple(pts.min(axis=0).tolist()),
                Point3.from_tuple(pts.max(axis=0).tolist()))

    def normals_array(self) -> np.ndarray:
        """``(F, 3)`` unit normals; zero rows for degenerate facets"""
        arr = self.as_array()
        n = np.cross(arr[:, 1] - arr[:, 0], arr[:, 2] - arr[:, 1])
        lengths = np.linalg.norm(n, axis=1)
        good = lengths > EPSILON
        out = np.zeros_like(n)
        out[good] = n[good] / lengths[good, None]
        return out

    ## whole-mesh transforms
    ## ---------------------

    def translated(self, offset: Vector3) -> 'Mesh':
        if not isinstance(offset, Vector3):
            raise TypeError('meshes are translated by a Vector3, got {!r}'.format(offset))
        return Mesh.from_array(self.as_array() + np.asarray(offset.to_tuple()))

    def rotated(self, axis, angle: Angle) -> 'Mesh':
        """rotate about ``axis`` (a ``geom3d.Line``) by ``angle``"""
        origin = np.asarray(axis.point.to_tuple())
        rot = rotation_matrix(axis.vector.to_unit_vector().to_tuple(), angle)
        arr = (self.as_array() - origin) @ rot.T + origin
        return Mesh.from_array(arr)

    def scaled(self, factor: float, origin: Optional[Point3] = None) -> 'Mesh':
        """uniform scale about ``origin`` (default: the global origin)"""
        if not isgoodnum(factor):
            raise ValueError('bad scale factor: {!r}'.format(factor))
        o = np.asarray(origin.to_tuple()) if origin is not None else np.zeros(3)
        mesh = Mesh.from_array((self.as_array() - o) * factor + o)
        if factor < 0:
            # a point reflection turns the surface inside out
            mesh = Mesh(f.reversed() for f in mesh)
        return mesh

    def translate(self, offset: Vector3) -> None:
        self.facets = self.translated(offset).facets

    def rotate(self, axis, angle: Angle) -> None:
        self.facets = self.rotated(axis, angle).facets


def concatenate(meshes: Sequence[Mesh]) -> Mesh:
    """Join meshes in order into a new one."""
    out = Mesh()
    for m in meshes:
        out.facets.extend(m.facets)
    logger.debug('concatenated %d meshes into %d facets', len(meshes), len(out))
    return out


__all__ = ['Triangle', 'Facet', 'Mesh', 'rotation_matrix', 'concatenate']
