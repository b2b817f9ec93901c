"""Validation helpers for typedCAD meshes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from typedcad.geom import Point3
from typedcad.mesh import Mesh
from typedcad.units import EPSILON

_KEY_TOL = 1e-6  # vertices closer than this are merged when matching edges

Key = Tuple[int, int, int]


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


def _vertex_keys(mesh: Mesh, tol: float) -> np.ndarray:
    """``(F, 3, 3)`` integer grid keys"""
    return np.rint(mesh.as_array() / tol).astype(np.int64)


def mesh_watertight(mesh: Mesh, tol: float = _KEY_TOL) -> CheckResult:
    """Every edge must be shared by exactly two facets, traversed in
    opposite directions.

    Vertices are matched by position to within ``tol``.
    """
    if len(mesh) == 0:
        return CheckResult(False, ['mesh has no facets'])

    keys = [tuple(map(tuple, tri)) for tri in _vertex_keys(mesh, tol).tolist()]
    undirected: Counter = Counter()
    directed: Counter = Counter()
    for a, b, c in keys:
        for u, v in ((a, b), (b, c), (c, a)):
            undirected[_edge_key(u, v)] += 1
            directed[(u, v)] += 1

    boundary = [edge for edge, count in undirected.items() if count == 1]
    invalid = [edge for edge, count in undirected.items() if count > 2]
    flipped = [edge for edge, count in directed.items() if count > 1]

    warnings: List[str] = []
    ok = True
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'{len(invalid)} edges with multiplicity >2')
    if flipped:
        ok = False
        warnings.append(f'{len(flipped)} edges traversed twice in the same direction')

    return CheckResult(ok, warnings)


def _edge_key(a: Key, b: Key) -> Tuple[Key, Key]:
    return (a, b) if a < b else (b, a)


def faces_outward(mesh: Mesh, center: Point3) -> CheckResult:
    """Every non-degenerate facet normal must point away from ``center``.

    Suitable for convex solids, where the vector from ``center`` to a
    facet's centroid is a valid outside direction.
    """
    arr = mesh.as_array()
    if len(arr) == 0:
        return CheckResult(True, ['no facets found'])
    normals = mesh.normals_array()
    radial = arr.mean(axis=1) - np.asarray(center.to_tuple())
    dots = np.einsum('ij,ij->i', normals, radial)

    degenerate = ~normals.any(axis=1)
    inward = np.nonzero((dots <= EPSILON) & ~degenerate)[0].tolist()

    warnings: List[str] = []
    if degenerate.any():
        warnings.append(f'{int(degenerate.sum())} degenerate faces skipped')
    if inward:
        return CheckResult(False, warnings + [f'inward facing face indices: {inward}'])
    return CheckResult(True, warnings)


def enclosed_volume(mesh: Mesh, reference: Optional[Point3] = None) -> float:
    """Signed volume in cubic millimetres, positive for an outward-wound
    closed mesh.

    Sum of the tetrahedra spanned by ``reference`` and each facet.
    """
    arr = mesh.as_array()
    if reference is not None:
        arr = arr - np.asarray(reference.to_tuple())
    v0, v1, v2 = arr[:, 0], arr[:, 1], arr[:, 2]
    return float(np.einsum('ij,ij->i', v0, np.cross(v1, v2)).sum() / 6.0)


__all__ = [
    'CheckResult',
    'mesh_watertight',
    'faces_outward',
    'enclosed_volume',
]
