import numpy as np
import pytest

from typedcad.errors import DegenerateDirection
from typedcad.geom import Point3, Vector3, point, vector
from typedcad.geom3d import Line
from typedcad.mesh import Facet, Mesh, Triangle, concatenate, rotation_matrix
from typedcad.units import deg


def _facet():
    return Facet(point(0, 1, 2), point(3, 4, 5), point(6, 7, 8))


def _triangle_mesh():
    return Mesh([
        Facet(point(0, 0, 0), point(1, 0, 0), point(0, 1, 0)),
        Facet(point(0, 0, 1), point(1, 0, 1), point(0, 1, 1)),
    ])


class TestFacet:

    def test_normal_vector(self):
        f = Facet(Point3.ORIGIN, point(2, 4, 0), point(-2, 6, 0))
        assert f.normal_vector() == Vector3.Z_UNIT_VECTOR

        f = Facet(Point3.ORIGIN, point(0, 0, 3), point(2, 2, 0))
        assert f.normal_vector() == vector(-1, 1, 0).to_unit_vector()

    def test_degenerate(self):
        f = Facet(Point3.ORIGIN, point(1, 1, 1), point(2, 2, 2))
        assert f.is_degenerate()
        with pytest.raises(DegenerateDirection):
            f.normal_vector()
        assert f.to_triangle().normal == (0.0, 0.0, 0.0)

    def test_reversed(self):
        f = Facet(Point3.ORIGIN, point(1, 0, 0), point(0, 1, 0))
        assert f.reversed().normal_vector() == -f.normal_vector()

    def test_vertices_are_copies(self):
        f = _facet()
        v = f.vertices
        v[0].translate(vector(10, 0, 0))
        assert f.vertices[0] == point(0, 1, 2)

    def test_transforms(self):
        f = _facet()
        assert f.translated(vector(9, 10, 11)) == Facet(point(9, 11, 13), point(12, 14, 16),
                                                        point(15, 17, 19))
        r = Facet(point(1, 0, 0), point(0, 1, 0), point(0, 0, 1)).rotated(Line.Z_AXIS, deg(90))
        assert r == Facet(point(0, 1, 0), point(-1, 0, 0), point(0, 0, 1))
        assert f.scaled(2) == Facet(point(0, 2, 4), point(6, 8, 10), point(12, 14, 16))

    def test_centroid(self):
        assert _facet().centroid() == point(3, 4, 5)

    def test_to_triangle(self):
        t = Facet(Point3.ORIGIN, point(1, 0, 0), point(0, 1, 0)).to_triangle()
        assert isinstance(t, Triangle)
        assert t.normal == pytest.approx((0.0, 0.0, 1.0))
        assert t.v1 == (1.0, 0.0, 0.0)

    def test_needs_points(self):
        with pytest.raises(TypeError):
            Facet(Point3.ORIGIN, vector(1, 0, 0), point(0, 1, 0))


class TestMesh:

    def test_sequence_protocol(self):
        m = _triangle_mesh()
        assert len(m) == 2
        assert m[1].vertices[0] == point(0, 0, 1)
        assert [f for f in m] == m.facets
        assert len(list(m.vertices())) == 6

    def test_append_checks_type(self):
        m = Mesh()
        m.append(_facet())
        with pytest.raises(TypeError):
            m.append((1, 2, 3))

    def test_array_roundtrip(self):
        m = _triangle_mesh()
        arr = m.as_array()
        assert arr.shape == (2, 3, 3)
        assert Mesh.from_array(arr) == m

    def test_from_array_shape(self):
        with pytest.raises(ValueError):
            Mesh.from_array(np.zeros((2, 3)))

    def test_empty(self):
        m = Mesh()
        assert m.as_array().shape == (0, 3, 3)
        assert len(m.translated(vector(1, 0, 0))) == 0

    def test_translated(self):
        m = _triangle_mesh().translated(vector(1, 2, 3))
        assert m[0] == Facet(point(1, 2, 3), point(2, 2, 3), point(1, 3, 3))

    def test_rotated_matches_facet_rotation(self):
        axis = Line(point(1, 2, 3), vector(1, 1, 0))
        m = _triangle_mesh()
        rotated = m.rotated(axis, deg(33))
        for a, b in zip(rotated, m):
            assert a == b.rotated(axis, deg(33))

    def test_in_place(self):
        m = _triangle_mesh()
        m.translate(vector(0, 0, 1))
        m.rotate(Line.Z_AXIS, deg(180))
        assert m[0] == Facet(point(0, 0, 1), point(-1, 0, 1), point(0, -1, 1))

    def test_scaled(self):
        m = _triangle_mesh().scaled(2, point(0, 0, 1))
        assert m[1] == Facet(point(0, 0, 1), point(2, 0, 1), point(0, 2, 1))

    def test_negative_scale_keeps_orientation(self):
        m = Mesh([Facet(Point3.ORIGIN, point(1, 0, 0), point(0, 1, 0))]).scaled(-1)
        assert m[0].normal_vector() == -Vector3.Z_UNIT_VECTOR

    def test_bounds(self):
        lo, hi = _triangle_mesh().bounds()
        assert lo == point(0, 0, 0)
        assert hi == point(1, 1, 1)

    def test_normals_array(self):
        n = _triangle_mesh().normals_array()
        assert n.shape == (2, 3)
        assert np.allclose(n, [[0, 0, 1], [0, 0, 1]])

    def test_concatenate(self):
        m = concatenate([_triangle_mesh(), _triangle_mesh()])
        assert len(m) == 4
        assert len(_triangle_mesh() + _triangle_mesh()) == 4


def test_rotation_matrix():
    r = rotation_matrix((0.0, 0.0, 1.0), deg(90))
    assert np.allclose(r @ np.array([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])
    assert np.allclose(r @ r.T, np.eye(3))
