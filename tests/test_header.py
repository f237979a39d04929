import pytest

from plystruct.enum import Encoding
from plystruct.exceptions import OverflowException
from plystruct.header import ElementDef, Header, PropertyDef, Version
from plystruct.scalars import ScalarType


def test_version():
    assert Version() == Version(1, 0)
    assert str(Version(2, 13)) == '2.13'
    assert Version.parse('65535', '255') == Version(0xffff, 0xff)

    with pytest.raises(OverflowException):
        Version(0x10000, 0)

    with pytest.raises(OverflowException):
        Version.parse('1', '256')

    with pytest.raises(OverflowException):
        Version.parse('1' * 30, '0')


def test_property_def():
    prop = PropertyDef('x', ScalarType.FLOAT)

    assert not prop.is_list
    assert prop.to_text() == 'property float x'

    prop = PropertyDef.list('vertex_indices', ScalarType.UCHAR, ScalarType.INT)

    assert prop.is_list
    assert prop.count_type is ScalarType.UCHAR
    assert prop.scalar_type is ScalarType.INT
    assert prop.to_text() == 'property list uchar int vertex_indices'

    with pytest.raises(ValueError):
        PropertyDef.list('broken', ScalarType.FLOAT, ScalarType.INT)


def test_element_def_order():
    """The properties keep their insertion order and are unique."""
    vertex = ElementDef('vertex', 3)
    for name in 'zyx':
        vertex.add_property(PropertyDef(name, ScalarType.DOUBLE))

    assert [_.name for _ in vertex] == ['z', 'y', 'x']
    assert len(vertex) == 3
    assert 'y' in vertex
    assert vertex['x'].scalar_type is ScalarType.DOUBLE

    with pytest.raises(ValueError):
        vertex.add_property(PropertyDef('y', ScalarType.FLOAT))

    assert vertex.to_text() == 'element vertex 3\nproperty double z\nproperty double y\nproperty double x'


def test_header_to_text():
    header = Header(
        encoding=Encoding.BINARY_BIG_ENDIAN,
        comments=['first', ''],
        obj_infos=['author: nobody'],
        elements=[
            ElementDef('vertex', 2, [PropertyDef('x', ScalarType.FLOAT)]),
            ElementDef('face', 1, [PropertyDef.list('vertex_indices', ScalarType.UCHAR, ScalarType.UINT)]),
        ],
    )

    assert header.element_names == ['vertex', 'face']
    assert 'face' in header
    assert header['vertex'].count == 2
    assert header.to_bytes() == (
        b'ply\n'
        b'format binary_big_endian 1.0\n'
        b'comment first\n'
        b'comment\n'
        b'obj_info author: nobody\n'
        b'element vertex 2\n'
        b'property float x\n'
        b'element face 1\n'
        b'property list uchar uint vertex_indices\n'
        b'end_header\n'
    )


def test_header_unique_elements():
    header = Header(elements=[ElementDef('vertex')])

    with pytest.raises(ValueError):
        header.add_element(ElementDef('vertex'))


def test_header_equality():
    a = Header(elements=[ElementDef('vertex', 1, [PropertyDef('x', ScalarType.FLOAT)])])
    b = Header(elements=[ElementDef('vertex', 1, [PropertyDef('x', ScalarType.FLOAT)])])

    assert a == b

    b['vertex'].count = 2

    assert a != b
