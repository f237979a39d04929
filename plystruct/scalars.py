"""
Catalog of the numeric types a PLY property can be declared with.

The standard defines eight of them (with two spellings each); 64 and 128 bit
integers are accepted as a vendor extension.
"""
import logging
import math
import numbers
import re
import struct
from enum import Enum
from functools import lru_cache

import bitstring

from .exceptions import ParseException, RangeException
from .meta import Endianess


logger = logging.getLogger(__name__)

FLOAT_MAX = 3.4028234663852886e+38

_INTEGER_RE = re.compile(r'[+-]?[0-9]+\Z')
_FLOAT_RE = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z')
_FLOAT_SPECIALS = {
    'nan', '+nan', '-nan',
    'inf', '+inf', '-inf',
    'infinity', '+infinity', '-infinity',
}
# a 128 bit integer has at most 39 digits, this bounds the work done by int()
_MAX_INTEGER_DIGITS = 48


@lru_cache(maxsize=None)
def _get_struct(format):
    return struct.Struct(format)


class ScalarType(Enum):
    #         name       width code  signed standard aliases
    CHAR    = ('char',    1,   'b',  True,  True,    ('int8',))
    UCHAR   = ('uchar',   1,   'B',  False, True,    ('uint8',))
    SHORT   = ('short',   2,   'h',  True,  True,    ('int16',))
    USHORT  = ('ushort',  2,   'H',  False, True,    ('uint16',))
    INT     = ('int',     4,   'i',  True,  True,    ('int32',))
    UINT    = ('uint',    4,   'I',  False, True,    ('uint32',))
    FLOAT   = ('float',   4,   'f',  True,  True,    ('float32',))
    DOUBLE  = ('double',  8,   'd',  True,  True,    ('float64',))
    LONG    = ('int64',   8,   'q',  True,  False,   ())
    ULONG   = ('uint64',  8,   'Q',  False, False,   ())
    INT128  = ('int128',  16,  None, True,  False,   ())
    UINT128 = ('uint128', 16,  None, False, False,   ())

    def __init__(self, ply_name, width, code, signed, standard, aliases):
        self.ply_name = ply_name
        self.width = width
        self.code = code
        self.is_signed = signed
        self.is_standard = standard
        self.aliases = aliases

    def __str__(self):
        return self.ply_name

    @classmethod
    def from_name(cls, name):
        '''Return the type spelled "name" in a header or None.'''
        return _BY_NAME.get(name)

    @property
    def is_float(self):
        return self.code in ('f', 'd')

    @property
    def is_integer(self):
        return not self.is_float

    @property
    def min_value(self):
        if self.is_float:
            return -FLOAT_MAX if self is ScalarType.FLOAT else -math.inf

        return -(1 << (self.width * 8 - 1)) if self.is_signed else 0

    @property
    def max_value(self):
        if self.is_float:
            return FLOAT_MAX if self is ScalarType.FLOAT else math.inf

        return (1 << (self.width * 8 - int(self.is_signed))) - 1

    def check(self, value, property=None):
        '''Convert "value" to this type, refusing anything that would be truncated.

        Widening always succeeds; narrowing and sign changes are checked
        and raise RangeException.'''
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise RangeException(property, self, value)

        if self.is_float:
            try:
                value = float(value)
            except OverflowError:
                raise RangeException(property, self, value) from None

            if self is ScalarType.FLOAT and math.isfinite(value):
                # anything rounding to a finite float32 is representable
                try:
                    _get_struct('<f').pack(value)
                except OverflowError:
                    raise RangeException(property, self, value) from None

            return value

        if not isinstance(value, numbers.Integral):
            raise RangeException(property, self, value)

        value = int(value)
        if not self.min_value <= value <= self.max_value:
            raise RangeException(property, self, value)

        return value

    def narrow(self, value):
        '''Round a python float to the precision of this type.'''
        if self is not ScalarType.FLOAT:
            return value

        return _get_struct('<f').unpack(_get_struct('<f').pack(value))[0]

    # ascii

    def parse(self, token):
        '''Strict conversion of a payload token.'''
        if self.is_integer:
            if not _INTEGER_RE.match(token) or (not self.is_signed and token.startswith('-')):
                raise ParseException('invalid number', expected='%s token' % self.ply_name, found=token)
            if len(token) > _MAX_INTEGER_DIGITS:
                raise RangeException(None, self, token)

            return self.check(int(token))

        if not _FLOAT_RE.match(token) and token.lower() not in _FLOAT_SPECIALS:
            raise ParseException('invalid number', expected='%s token' % self.ply_name, found=token)

        return self.narrow(self.check(float(token)))

    def format(self, value):
        if self.is_integer:
            return str(value)

        return repr(float(self.narrow(value)))

    # binary

    def _bitstring_token(self, endianess):
        token = 'int' if self.is_signed else 'uint'
        token += 'le' if endianess is Endianess.LITTLE_ENDIAN else 'be'

        return '%s:%d' % (token, self.width * 8)

    def pack(self, value, endianess):
        if self.code is None:
            return bitstring.pack(self._bitstring_token(endianess), value).bytes

        return _get_struct(endianess.prefix + self.code).pack(value)

    def unpack(self, raw, endianess):
        if self.code is None:
            return bitstring.Bits(bytes=raw).unpack(self._bitstring_token(endianess))[0]

        return _get_struct(endianess.prefix + self.code).unpack(raw)[0]

    def pack_many(self, values, endianess):
        if self.code is None:
            return b''.join(self.pack(value, endianess) for value in values)

        return struct.pack('%s%d%s' % (endianess.prefix, len(values), self.code), *values)

    def unpack_many(self, raw, count, endianess):
        if self.code is None:
            return [
                self.unpack(raw[offset:offset + self.width], endianess)
                for offset in range(0, count * self.width, self.width)
            ]

        return list(struct.unpack('%s%d%s' % (endianess.prefix, count, self.code), raw))


_BY_NAME = {}
for _scalar_type in ScalarType:
    for _name in (_scalar_type.ply_name,) + _scalar_type.aliases:
        _BY_NAME[_name] = _scalar_type
