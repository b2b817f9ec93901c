"""STL import and export for typedCAD meshes and solids.

Binary records are packed and unpacked as a numpy structured array, one
row per facet::

    normal    <f4 (3,)
    vertices  <f4 (3, 3)
    attribute <u2
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Iterator

import numpy as np

from typedcad.errors import FacetOverflow
from typedcad.mesh import Mesh

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_COUNT = np.dtype('<u4')
_RECORD = np.dtype([
    ('normal', '<f4', (3,)),
    ('vertices', '<f4', (3, 3)),
    ('attribute', '<u2'),
])
_MAX_FACETS = 2 ** 32 - 1

_NUM = r'([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)'
_XYZ = r'\s+'.join([_NUM] * 3)


def _as_mesh(obj) -> Mesh:
    if isinstance(obj, Mesh):
        return obj
    if hasattr(obj, 'generate_mesh'):
        return obj.generate_mesh()
    raise ValueError('write_stl expects a Mesh or a Solid, got {!r}'.format(obj))


@contextmanager
def _output(path_or_file, mode: str, **kwargs) -> Iterator:
    if hasattr(path_or_file, 'write'):
        yield path_or_file
    else:
        with open(path_or_file, mode, **kwargs) as stream:
            yield stream


def write_stl(obj, path_or_file, *, binary: bool = True, name: str = 'typedCAD') -> None:
    """Write ``obj`` (a ``Mesh`` or anything with ``generate_mesh()``) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text
    stream.  Facets with zero area are written with a zero normal.
    Raises ``FacetOverflow`` before writing anything when the facet
    count does not fit the 32-bit STL header field.
    """

    mesh = _as_mesh(obj)
    count = len(mesh)
    if count > _MAX_FACETS:
        raise FacetOverflow('{} facets do not fit in an STL file (max {})'.format(count, _MAX_FACETS))

    vertices = mesh.as_array()
    normals = mesh.normals_array()
    if binary:
        with _output(path_or_file, 'wb') as stream:
            _write_binary(stream, vertices, normals, name)
    else:
        with _output(path_or_file, 'w', encoding='ascii') as stream:
            _write_ascii(stream, vertices, normals, name)
    logger.debug('wrote %d facets as %s STL', count, 'binary' if binary else 'ascii')


def _write_binary(stream, vertices: np.ndarray, normals: np.ndarray, name: str) -> None:
    records = np.zeros(len(vertices), dtype=_RECORD)
    records['normal'] = normals
    records['vertices'] = vertices
    stream.write(name[:_HEADER_SIZE].encode('ascii', errors='replace').ljust(_HEADER_SIZE, b' '))
    stream.write(np.array(len(records), dtype=_COUNT).tobytes())
    stream.write(records.tobytes())


def _write_ascii(stream, vertices: np.ndarray, normals: np.ndarray, name: str) -> None:
    lines = ['solid {}'.format(name)]
    for n, tri in zip(normals, vertices):
        lines.append('  facet normal {:.6e} {:.6e} {:.6e}'.format(*n))
        lines.append('    outer loop')
        lines.extend('      vertex {:.6e} {:.6e} {:.6e}'.format(*v) for v in tri)
        lines.append('    endloop')
        lines.append('  endfacet')
    lines.append('endsolid {}'.format(name))
    stream.write('\n'.join(lines) + '\n')


## STL import
## ----------


def _is_binary_stl(data: bytes) -> bool:
    """Guess the STL flavour.

    ASCII files start with ``solid``, but so do some binary headers, so a
    ``solid`` prefix only counts as ASCII when the size does not match
    the binary layout or facet keywords follow the header.
    """
    body = _HEADER_SIZE + _COUNT.itemsize
    if len(data) < body:
        return False
    if not data[:_HEADER_SIZE].lstrip().lower().startswith(b'solid'):
        return True
    count = int(np.frombuffer(data, dtype=_COUNT, count=1, offset=_HEADER_SIZE)[0])
    if len(data) != body + count * _RECORD.itemsize:
        return False
    rest = data[body:_HEADER_SIZE + 200]
    return not (b'facet' in rest or b'vertex' in rest)


def _parse_binary_stl(data: bytes) -> np.ndarray:
    count = int(np.frombuffer(data, dtype=_COUNT, count=1, offset=_HEADER_SIZE)[0])
    offset = _HEADER_SIZE + _COUNT.itemsize
    if len(data) < offset + count * _RECORD.itemsize:
        raise ValueError('truncated binary STL: header promises {} facets'.format(count))
    records = np.frombuffer(data, dtype=_RECORD, count=count, offset=offset)
    return records['vertices'].astype(float)


_FACET = re.compile(
    r'facet\s+normal\s+' + _XYZ + r'\s+outer\s+loop\s+'
    r'vertex\s+' + _XYZ + r'\s+'
    r'vertex\s+' + _XYZ + r'\s+'
    r'vertex\s+' + _XYZ + r'\s+'
    r'endloop\s+endfacet',
    re.IGNORECASE)


def _parse_ascii_stl(text: str) -> np.ndarray:
    rows = [[float(x) for x in m.groups()[3:]] for m in _FACET.finditer(text)]
    return np.array(rows, dtype=float).reshape(-1, 3, 3)


def read_stl(path_or_file) -> Mesh:
    """Read a binary or ASCII STL file into a ``Mesh``.

    Stored normals are ignored; facet orientation comes from the vertex
    order.  The format is detected from the content.
    """
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        vertices = _parse_binary_stl(data)
    else:
        vertices = _parse_ascii_stl(data.decode('utf-8', errors='replace'))

    mesh = Mesh.from_array(vertices)
    logger.debug('read %d facets from STL', len(mesh))
    return mesh


__all__ = ['write_stl', 'read_stl']
