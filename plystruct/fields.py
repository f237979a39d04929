"""
A Field converts the value of a single property between its python
representation and the payload, both in binary (pack/unpack) and in ascii
(parse/format).
"""
import logging
import sys
from typing import Iterator, List, Sequence

from .exceptions import (
    OverflowException,
    ParseException,
    UnexpectedEofException,
)
from .header import PropertyDef
from .meta import Endianess
from .scalars import ScalarType


# maximum number of list values decoded with a single read
CHUNK_SIZE = 4096


class Field(object):
    """Base class to subclass from"""

    def __init__(self, name=None, endianess=Endianess.LITTLE_ENDIAN):
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.endianess = endianess

    def unpack(self, stream):
        raise NotImplementedError(f"method {self.__class__.__name__}.unpack() not implemented")

    def pack(self, value) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}.pack() not implemented")

    def parse(self, tokens: Iterator[str]):
        raise NotImplementedError(f"method {self.__class__.__name__}.parse() not implemented")

    def format(self, value) -> str:
        raise NotImplementedError(f"method {self.__class__.__name__}.format() not implemented")


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    numbers to/from bytes.
    """

    def __init__(self, scalar_type: ScalarType, **kw):
        self.scalar_type = scalar_type
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s %s)>' % (self.__class__.__name__, self.scalar_type, self.name)

    @property
    def size(self):
        return self.scalar_type.width

    def unpack(self, stream):
        return self.scalar_type.unpack(stream.read_exact(self.size), self.endianess)

    def pack(self, value) -> bytes:
        return self.scalar_type.pack(self.scalar_type.check(value, self.name), self.endianess)

    def parse(self, tokens):
        token = next(tokens, None)
        if token is None:
            raise UnexpectedEofException('%s token' % self.scalar_type)

        return self.scalar_type.parse(token)

    def format(self, value) -> str:
        return self.scalar_type.format(self.scalar_type.check(value, self.name))


class ListField(Field):
    '''Un/Pack a length-prefixed sequence of numbers.

    The length read from the payload is untrusted: it is validated against
    its sign, against the platform limits and against the bytes left in the
    source before anything is allocated, then the values are decoded
    CHUNK_SIZE at a time.'''

    def __init__(self, count_type: ScalarType, value_type: ScalarType, **kw):
        super().__init__(**kw)
        self.count_field = StructField(count_type, name=self.name, endianess=self.endianess)
        self.value_type = value_type

    def __repr__(self):
        return '<%s(%s %s %s)>' % (self.__class__.__name__, self.count_field.scalar_type, self.value_type, self.name)

    def check_length(self, count, stream=None) -> int:
        if count < 0:
            raise ParseException('negative list length', expected='non-negative list length', found=count)

        size = count * self.value_type.width
        if size > sys.maxsize:
            raise OverflowException('list length', count)

        remaining = stream.remaining() if stream is not None else None
        if remaining is not None and size > remaining:
            raise UnexpectedEofException('%d list values (%d bytes, only %d left)' % (count, size, remaining))

        return count

    def unpack(self, stream) -> List:
        length = self.check_length(self.count_field.unpack(stream), stream)
        self.logger.debug('unpacking list \'%s\' of %d values', self.name, length)

        values = []
        while len(values) < length:
            count = min(length - len(values), CHUNK_SIZE)
            raw = stream.read_exact(count * self.value_type.width)
            values.extend(self.value_type.unpack_many(raw, count, self.endianess))

        return values

    def pack(self, values: Sequence) -> bytes:
        count = self.count_field.pack(len(values))
        for value in values:
            self.value_type.check(value, self.name)

        return count + self.value_type.pack_many(values, self.endianess)

    def parse(self, tokens) -> List:
        length = self.check_length(self.count_field.parse(tokens))

        values = []
        for position in range(length):
            token = next(tokens, None)
            if token is None:
                raise UnexpectedEofException('list value %d of %d' % (position + 1, length))
            values.append(self.value_type.parse(token))

        return values

    def format(self, values: Sequence) -> str:
        tokens = [self.count_field.format(len(values))]
        tokens.extend(self.value_type.format(self.value_type.check(value, self.name)) for value in values)

        return ' '.join(tokens)


def field_for(property_def: PropertyDef, endianess=Endianess.LITTLE_ENDIAN) -> Field:
    if property_def.is_list:
        return ListField(
            property_def.count_type, property_def.scalar_type, name=property_def.name, endianess=endianess)

    return StructField(property_def.scalar_type, name=property_def.name, endianess=endianess)
