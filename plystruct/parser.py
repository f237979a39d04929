"""
Reads the payload of a PLY file into element instances.

The header decides everything: elements are read in declaration order, each
one exactly "count" times, with the encoding of the format line. The
instances are created with the element factory and populated through the
PropertyAccess setters, an instance is handed out only when all of its
properties have been read.
"""
import logging
from typing import Dict, List, Tuple

from .enum import Compliant, Encoding
from .exceptions import (
    OverflowException,
    ParseException,
    PlyException,
    UnexpectedEofException,
)
from .fields import Field, field_for
from .grammar import read_header
from .header import ElementDef, Header, PropertyDef
from .meta import Endianess
from .properties import DefaultElement
from .streams import Stream


# maximum number of instances of a binary element without properties
EMPTY_ELEMENT_LIMIT = 1 << 20


class Parser(object):
    '''Reads ascii or binary data into element instances.

        parser = Parser()
        with open('cube.ply', 'rb') as f:
            header = parser.read_header(f)
            payload = parser.read_payload(f, header)

    The element factory is any callable returning a PropertyAccess.'''

    def __init__(self, element_factory=DefaultElement, compliant=Compliant.DEFAULT):
        self.logger = logging.getLogger(__name__)
        self.element_factory = element_factory
        self.compliant = compliant

    def read_header(self, source) -> Header:
        '''Read the header only: "source" is left positioned at the payload.'''
        return read_header(source, self.compliant)

    def read_payload(self, source, header: Header, line=None) -> Dict[str, List]:
        '''Read the instances of all the elements, "line" is the number of
        the last header line and it's used to locate the errors in ascii payloads.'''
        payload = {}

        with Stream(source) as stream:
            for element_def in header.elements:
                payload[element_def.name] = self._read_element_list(stream, element_def, header.encoding, line)
                if line is not None and header.encoding is Encoding.ASCII:
                    line += element_def.count

        return payload

    def read_payload_for_element(self, source, element_def: ElementDef, header: Header) -> List:
        '''Read the instances of a single element.

        The elements preceding it in the header must have been read already.'''
        with Stream(source) as stream:
            return self._read_element_list(stream, element_def, header.encoding)

    def _read_element_list(self, stream, element_def, encoding, line=None):
        self.logger.debug('reading %d instances of element \'%s\' (%s)', element_def.count, element_def.name, encoding)

        fields = self._get_fields(element_def, encoding.endianess)
        if encoding.is_binary:
            self._check_count(stream, element_def)
        elements = []

        for index in range(element_def.count):
            if encoding is Encoding.ASCII:
                number = line + index + 1 if line is not None else None
                raw = stream.readline()
                if not raw:
                    raise UnexpectedEofException(
                        'instance %d of %d' % (index + 1, element_def.count),
                        element=element_def.name, index=index, line=number)
                element = self._read_ascii_element(raw, element_def, fields, index, number)
            else:
                element = self._read_binary_element(stream, element_def, fields, index)

            elements.append(element)

        return elements

    @staticmethod
    def _check_count(stream, element_def):
        '''The declared count is untrusted: it must fit in the bytes left,
        and instances without properties are bounded by EMPTY_ELEMENT_LIMIT.'''
        width = sum(prop.count_type.width if prop.is_list else prop.scalar_type.width for prop in element_def)

        if width == 0:
            if element_def.count > EMPTY_ELEMENT_LIMIT:
                raise OverflowException('element count', element_def.count, element=element_def.name)
            return

        remaining = stream.remaining()
        if remaining is not None and element_def.count * width > remaining:
            raise UnexpectedEofException(
                '%d instances (at least %d bytes, only %d left)' % (element_def.count, element_def.count * width, remaining),
                element=element_def.name)

    @staticmethod
    def _get_fields(element_def, endianess) -> List[Tuple[PropertyDef, Field]]:
        return [(prop, field_for(prop, endianess)) for prop in element_def]

    def read_ascii_element(self, line, element_def: ElementDef):
        '''Read a single instance from a line of an ascii payload.'''
        return self._read_ascii_element(line, element_def, self._get_fields(element_def, Endianess.LITTLE_ENDIAN))

    def read_binary_element(self, source, element_def: ElementDef, endianess=Endianess.LITTLE_ENDIAN):
        '''Read a single instance from a binary payload.'''
        with Stream(source) as stream:
            return self._read_binary_element(stream, element_def, self._get_fields(element_def, endianess))

    def _read_ascii_element(self, line, element_def, fields, index=None, number=None):
        if isinstance(line, bytes):
            try:
                line = line.decode('ascii')
            except UnicodeDecodeError:
                raise ParseException(
                    'undecodable payload line', expected='ascii text', found=line,
                    element=element_def.name, index=index, line=number) from None

        tokens = iter(line.split())
        element = self.element_factory()

        for prop, field in fields:
            try:
                self._set(element, prop, field.parse(tokens))
            except PlyException as e:
                e.locate(element=element_def.name, property=prop.name, index=index, line=number)
                raise

        extra = next(tokens, None)
        if extra is not None:
            raise ParseException(
                'too many values', expected='end of line', found=extra,
                element=element_def.name, index=index, line=number)

        return element

    def _read_binary_element(self, stream, element_def, fields, index=None):
        element = self.element_factory()

        for prop, field in fields:
            try:
                self._set(element, prop, field.unpack(stream))
            except PlyException as e:
                e.locate(element=element_def.name, property=prop.name, index=index)
                raise

        return element

    @staticmethod
    def _set(element, prop, value):
        if prop.is_list:
            element.set_list(prop.name, prop.scalar_type, value)
        else:
            element.set_scalar(prop.name, prop.scalar_type, value)
