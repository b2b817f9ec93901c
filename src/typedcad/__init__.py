# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("typedcad")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from typedcad.units import Angle, Area, Length, cm, deg, mm, rad
from typedcad.errors import (DegenerateDirection, FacetOverflow, GeometryError,
                             InvalidFrame, NoUniqueIntersection)
from typedcad.geom import Point3, Vector3, point, vector
from typedcad.geom3d import Line, Plane
from typedcad.location import Location
from typedcad.mesh import Facet, Mesh
from typedcad.precision import Settings, current_settings, precision
from typedcad.primitives import Solid, box, cone, cube, cylinder, sphere
from typedcad.combine import Rotate, Scale, SolidGroup, Translate, build
