from enum import Enum, Flag

from .meta import Endianess


class Compliant(Flag):
    '''It indicates which degree of compliantness the header must reflect the format'''
    NONE           = 0
    STANDARD_TYPES = 1 << 0  # refuse the int64/uint64/int128/uint128 vendor extension
    VERSION        = 1 << 1  # refuse anything but "1.0"
    DEFAULT        = NONE


class Encoding(Enum):
    '''Payload encodings, the value is the token used in the "format" line.'''
    ASCII                = 'ascii'
    BINARY_LITTLE_ENDIAN = 'binary_little_endian'
    BINARY_BIG_ENDIAN    = 'binary_big_endian'

    def __str__(self):
        return self.value

    @property
    def is_binary(self):
        return self is not Encoding.ASCII

    @property
    def endianess(self):
        if self is Encoding.BINARY_BIG_ENDIAN:
            return Endianess.BIG_ENDIAN

        return Endianess.LITTLE_ENDIAN
