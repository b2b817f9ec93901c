import pytest

from typedcad.errors import NoUniqueIntersection
from typedcad.geom import Point3, Vector3, point, vector
from typedcad.geom3d import Line, Plane
from typedcad.units import deg, mm


class TestLine:

    def test_equality_ignores_direction_sign(self):
        a = Line(point(0, 0, 0), Vector3.X_UNIT_VECTOR)
        b = Line(point(1, 0, 0), -Vector3.X_UNIT_VECTOR)
        assert a == b

    def test_equality_ignores_direction_length(self):
        a = Line(point(0, 2, 0), vector(3, 0, 0))
        b = Line(point(7, 2, 0), vector(1, 0, 0))
        assert a == b

    def test_parallel_lines_differ(self):
        a = Line(point(0, 0, 0), Vector3.X_UNIT_VECTOR)
        b = Line(point(0, 1, 0), Vector3.X_UNIT_VECTOR)
        assert a != b

    def test_closest_point(self):
        line = Line(point(5, 3, 0), Vector3.X_UNIT_VECTOR)
        assert line.closest_point() == point(0, 3, 0)

    def test_from_2points(self):
        line = Line.from_2points(point(1, 1, 0), point(3, 3, 0))
        assert line == Line(Point3.ORIGIN, vector(1, 1, 0))

    def test_constants(self):
        assert Line.X_AXIS == Line(point(4, 0, 0), Vector3.X_UNIT_VECTOR)
        assert Line.Z_AXIS.vector == Vector3.Z_UNIT_VECTOR

    def test_accessors_return_copies(self):
        line = Line(point(1, 2, 3), Vector3.X_UNIT_VECTOR)
        p = line.point
        p.translate(vector(1, 1, 1))
        assert line.point == point(1, 2, 3)

    def test_translated_and_rotated(self):
        line = Line.X_AXIS.translated(vector(0, 0, 2))
        assert line == Line(point(0, 0, 2), Vector3.X_UNIT_VECTOR)
        assert Line.X_AXIS.rotated(Line.Z_AXIS, deg(90)) == Line.Y_AXIS

    def test_intersection_with_plane(self):
        p = Line.Z_AXIS.intersection(Plane(point(0, 0, 4), Vector3.Z_UNIT_VECTOR))
        assert p == point(0, 0, 4)

    def test_intersection_with_junk(self):
        with pytest.raises(ValueError):
            Line.X_AXIS.intersection(Line.Y_AXIS)

    def test_needs_point_and_vector(self):
        with pytest.raises(TypeError):
            Line(vector(0, 0, 0), Vector3.X_UNIT_VECTOR)


class TestPlane:

    def test_equality(self):
        a = Plane(point(0, 0, 1), Vector3.Z_UNIT_VECTOR)
        b = Plane(point(5, -3, 1), vector(0, 0, -2))
        assert a == b
        assert a != Plane.XY

    def test_constants(self):
        assert Plane.XY.normal_vector == Vector3.Z_UNIT_VECTOR
        assert Plane.YZ.normal_vector == Vector3.X_UNIT_VECTOR
        assert Plane.ZX.normal_vector == Vector3.Y_UNIT_VECTOR

    def test_closest_point(self):
        plane = Plane(point(3, 4, 5), Vector3.Z_UNIT_VECTOR)
        assert plane.closest_point() == point(0, 0, 5)

    def test_from_3points(self):
        plane = Plane.from_3points(point(0, 0, 2), point(1, 0, 2), point(0, 1, 2))
        assert plane == Plane(point(0, 0, 2), Vector3.Z_UNIT_VECTOR)
        assert plane.normal_vector.to_unit_vector() == Vector3.Z_UNIT_VECTOR

    def test_signed_distance(self):
        plane = Plane(point(0, 0, 1), vector(0, 0, 3))
        assert plane.signed_distance(point(4, 4, 3)) == mm(2)
        assert plane.signed_distance(point(4, 4, -1)) == mm(-2)
        assert plane.contains(point(9, -9, 1))
        assert not plane.contains(point(0, 0, 1.1))

    @pytest.mark.parametrize('a, b, expected', [
        (Plane.XY, Plane.YZ, Line.Y_AXIS),
        (Plane.XY, Plane.ZX, Line.X_AXIS),
        (Plane.YZ, Plane.ZX, Line.Z_AXIS),
    ])
    def test_plane_plane(self, a, b, expected):
        assert a.intersection(b) == expected

    def test_plane_plane_offset(self):
        a = Plane(point(0, 0, 3), Vector3.Z_UNIT_VECTOR)
        b = Plane(point(2, 0, 0), Vector3.X_UNIT_VECTOR)
        line = a.intersection(b)
        assert line == Line(point(2, 0, 3), Vector3.Y_UNIT_VECTOR)

    def test_plane_plane_oblique(self):
        a = Plane(point(0, 0, 0), vector(1, 1, 0))
        b = Plane(point(0, 0, 5), Vector3.Z_UNIT_VECTOR)
        line = a.intersection(b)
        assert line == Line(point(1, -1, 5), vector(1, -1, 0))
        assert a.contains(line.point)
        assert b.contains(line.point)

    def test_parallel_planes(self):
        a = Plane(point(0, 0, 0), Vector3.Z_UNIT_VECTOR)
        b = Plane(point(0, 0, 1), -Vector3.Z_UNIT_VECTOR)
        with pytest.raises(NoUniqueIntersection):
            a.intersection(b)
        with pytest.raises(NoUniqueIntersection):
            a.intersection(a)

    def test_plane_line(self):
        plane = Plane(point(0, 0, 2), vector(0, 0, 1))
        line = Line(point(1, 1, 0), vector(1, 1, 1))
        assert plane.intersection(line) == point(3, 3, 2)

    def test_line_parallel_to_plane(self):
        with pytest.raises(NoUniqueIntersection):
            Plane.XY.intersection(Line(point(0, 0, 1), Vector3.X_UNIT_VECTOR))

    def test_translated_and_rotated(self):
        assert Plane.XY.translated(vector(0, 0, 1)) == Plane(point(0, 0, 1), Vector3.Z_UNIT_VECTOR)
        assert Plane.XY.rotated(Line.X_AXIS, deg(90)) == Plane.ZX

    def test_bad_intersection_argument(self):
        with pytest.raises(ValueError):
            Plane.XY.intersection(point(0, 0, 0))
