import struct

import pytest

from plystruct.exceptions import (
    OverflowException,
    ParseException,
    RangeException,
    UnexpectedEofException,
)
from plystruct.fields import CHUNK_SIZE, ListField, StructField, field_for
from plystruct.header import PropertyDef
from plystruct.meta import Endianess
from plystruct.scalars import ScalarType
from plystruct.streams import Stream


def test_structfield():
    field = StructField(ScalarType.UINT, name='index')

    assert field.size == 4
    assert field.pack(0xcafe) == b'\xfe\xca\x00\x00'
    assert field.unpack(Stream(b'\x01\x02\x03\x04')) == 0x04030201
    assert field.parse(iter(['17'])) == 17
    assert field.format(17) == '17'


def test_structfield_big_endian():
    field = StructField(ScalarType.SHORT, endianess=Endianess.BIG_ENDIAN)

    assert field.pack(-2) == b'\xff\xfe'
    assert field.unpack(Stream(b'\x00\x10')) == 0x10


def test_structfield_range():
    field = StructField(ScalarType.UCHAR, name='red')

    with pytest.raises(RangeException) as excinfo:
        field.pack(300)

    assert excinfo.value.property == 'red'

    with pytest.raises(RangeException):
        field.format(-1)


def test_structfield_missing_token():
    with pytest.raises(UnexpectedEofException):
        StructField(ScalarType.FLOAT).parse(iter([]))


def test_structfield_truncated():
    with pytest.raises(UnexpectedEofException):
        StructField(ScalarType.DOUBLE).unpack(Stream(b'\x00' * 7))


def test_listfield():
    field = ListField(ScalarType.UCHAR, ScalarType.INT, name='vertex_indices')

    raw = field.pack([1, 2, -3])

    assert raw == b'\x03' + struct.pack('<3i', 1, 2, -3)
    assert field.unpack(Stream(raw)) == [1, 2, -3]
    assert field.format([1, 2, -3]) == '3 1 2 -3'
    assert field.parse(iter('3 1 2 -3'.split())) == [1, 2, -3]
    assert field.pack([]) == b'\x00'
    assert field.unpack(Stream(b'\x00')) == []


def test_listfield_big_endian():
    field = ListField(ScalarType.USHORT, ScalarType.FLOAT, endianess=Endianess.BIG_ENDIAN)

    raw = field.pack([1.0, -2.0])

    assert raw == b'\x00\x02' + struct.pack('>2f', 1.0, -2.0)
    assert field.unpack(Stream(raw)) == [1.0, -2.0]


def test_listfield_chunks():
    """Long lists are decoded in more than one read."""
    values = list(range(CHUNK_SIZE * 2 + 5))
    field = ListField(ScalarType.UINT, ScalarType.USHORT)

    assert field.unpack(Stream(field.pack(values))) == values


def test_listfield_negative_length():
    field = ListField(ScalarType.CHAR, ScalarType.INT)

    with pytest.raises(ParseException):
        field.unpack(Stream(b'\xff' + b'\x00' * 16))

    with pytest.raises(ParseException):
        field.parse(iter(['-1']))


def test_listfield_length_beyond_source():
    """The length is validated before any value is allocated."""
    field = ListField(ScalarType.UINT, ScalarType.INT)

    with pytest.raises(UnexpectedEofException):
        field.unpack(Stream(struct.pack('<I', 0x40000000) + b'\x00' * 8))


def test_listfield_length_overflow():
    field = ListField(ScalarType.ULONG, ScalarType.DOUBLE)

    with pytest.raises(OverflowException):
        field.unpack(Stream(b'\xff' * 8))


def test_listfield_count_overflow():
    field = ListField(ScalarType.UCHAR, ScalarType.INT, name='vertex_indices')

    with pytest.raises(RangeException):
        field.pack([0] * 256)

    with pytest.raises(RangeException):
        field.format([0] * 256)


def test_listfield_value_range():
    field = ListField(ScalarType.UCHAR, ScalarType.UCHAR)

    with pytest.raises(RangeException):
        field.pack([1, 256])


def test_listfield_missing_values():
    field = ListField(ScalarType.UCHAR, ScalarType.INT)

    with pytest.raises(UnexpectedEofException) as excinfo:
        field.parse(iter(['3', '1', '2']))

    assert 'list value 3 of 3' in str(excinfo.value)


def test_field_for():
    field = field_for(PropertyDef('x', ScalarType.FLOAT), Endianess.BIG_ENDIAN)

    assert isinstance(field, StructField)
    assert field.name == 'x'
    assert field.endianess is Endianess.BIG_ENDIAN

    field = field_for(PropertyDef.list('vertex_indices', ScalarType.UCHAR, ScalarType.UINT))

    assert isinstance(field, ListField)
    assert field.count_field.scalar_type is ScalarType.UCHAR
    assert field.value_type is ScalarType.UINT


def test_listfield_packs_sequences_as_they_are():
    field = ListField(ScalarType.USHORT, ScalarType.DOUBLE)

    assert field.pack(range(3)) == b'\x03\x00' + struct.pack('<3d', 0, 1, 2)
    assert field.pack((0.5,)) == b'\x01\x00' + struct.pack('<d', 0.5)

    with pytest.raises(RangeException):
        ListField(ScalarType.UCHAR, ScalarType.FLOAT).pack(range(0, 10 ** 40, 10 ** 39))
