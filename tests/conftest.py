import logging
import os

import pytest

from plystruct.core import Ply
from plystruct.enum import Encoding
from plystruct.header import ElementDef, Header, PropertyDef
from plystruct.properties import DefaultElement
from plystruct.scalars import ScalarType


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


CUBE_ASCII = b'''ply
format ascii 1.0
comment made by Greg Turk
comment this file is a cube
element vertex 8
property float x
property float y
property float z
element face 6
property list uchar int vertex_index
end_header
0 0 0
0 0 1
0 1 1
0 1 0
1 0 0
1 0 1
1 1 1
1 1 0
4 0 1 2 3
4 7 6 5 4
4 0 4 5 1
4 1 5 6 2
4 2 6 7 3
4 3 7 4 0
'''

TETRAHEDRON_VERTICES = [
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
]

TETRAHEDRON_FACES = [
    [0, 1, 2],
    [0, 1, 3],
    [0, 2, 3],
    [1, 2, 3],
]


def build_tetrahedron(encoding=Encoding.BINARY_LITTLE_ENDIAN):
    header = Header(encoding=encoding, elements=[
        ElementDef('vertex', 4, [
            PropertyDef('x', ScalarType.FLOAT),
            PropertyDef('y', ScalarType.FLOAT),
            PropertyDef('z', ScalarType.FLOAT),
        ]),
        ElementDef('face', 4, [
            PropertyDef.list('vertex_indices', ScalarType.UCHAR, ScalarType.UINT),
        ]),
    ])

    vertices = []
    for coordinates in TETRAHEDRON_VERTICES:
        vertex = DefaultElement()
        for name, value in zip('xyz', coordinates):
            vertex.set_scalar(name, ScalarType.FLOAT, value)
        vertices.append(vertex)

    faces = []
    for indices in TETRAHEDRON_FACES:
        face = DefaultElement()
        face.set_list('vertex_indices', ScalarType.UINT, list(indices))
        faces.append(face)

    return Ply(header, {'vertex': vertices, 'face': faces})


@pytest.fixture
def cube_ascii():
    return CUBE_ASCII


@pytest.fixture
def tetrahedron():
    return build_tetrahedron()


@pytest.fixture
def make_tetrahedron():
    return build_tetrahedron
