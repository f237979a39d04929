"""
Writes a header and element instances as ascii or binary PLY.
"""
import logging
from typing import Dict, Optional, Sequence

from .enum import Encoding
from .exceptions import MissingPropertyException, PlyException
from .fields import field_for
from .header import ElementDef, Header
from .meta import Endianess
from .streams import Stream


class Writer(object):
    '''Mirror image of the Parser: the values are obtained through the
    PropertyAccess getters of each instance.

    Every instance is completely resolved and encoded before any of its
    bytes reach the sink. On error what was already written is left as it is.'''

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def write_header(self, sink, header: Header) -> int:
        with Stream(sink, flags='w') as stream:
            return stream.write(header.to_bytes())

    def write_payload_for_element(self, sink, element_def: ElementDef, elements: Sequence,
                                  encoding: Encoding, defaults: Optional[Dict] = None) -> int:
        '''Write the instances of a single element, in the order given.

        "defaults" maps property names to the values used for the instances
        that don't provide them.'''
        self.logger.debug('writing %d instances of element \'%s\' (%s)', len(elements), element_def.name, encoding)

        fields = [(prop, field_for(prop, encoding.endianess)) for prop in element_def]
        written = 0

        with Stream(sink, flags='w') as stream:
            for index, element in enumerate(elements):
                if encoding is Encoding.ASCII:
                    data = self._encode_ascii_element(element, element_def, fields, index, defaults)
                else:
                    data = self._encode_binary_element(element, element_def, fields, index, defaults)
                written += stream.write(data)

        return written

    def write_ascii_element(self, sink, element, element_def: ElementDef) -> int:
        fields = [(prop, field_for(prop)) for prop in element_def]
        with Stream(sink, flags='w') as stream:
            return stream.write(self._encode_ascii_element(element, element_def, fields))

    def write_binary_element(self, sink, element, element_def: ElementDef,
                             endianess=Endianess.LITTLE_ENDIAN) -> int:
        fields = [(prop, field_for(prop, endianess)) for prop in element_def]
        with Stream(sink, flags='w') as stream:
            return stream.write(self._encode_binary_element(element, element_def, fields))

    def _resolve(self, element, element_def, fields, index, defaults):
        '''Obtain all the values of the instance before encoding any of them.'''
        values = []
        for prop, _ in fields:
            getter = element.get_list if prop.is_list else element.get_scalar
            try:
                value = getter(prop.name, prop.scalar_type)
            except PlyException as e:
                e.locate(element=element_def.name, property=prop.name, index=index)
                raise

            if value is None and defaults is not None:
                value = defaults.get(prop.name)

            if value is None:
                raise MissingPropertyException(element_def.name, prop.name, index)

            values.append(value)

        return values

    def _encode(self, encode, element_def, fields, values, index):
        for (prop, field), value in zip(fields, values):
            try:
                yield encode(field, value)
            except PlyException as e:
                e.locate(element=element_def.name, property=prop.name, index=index)
                raise

    def _encode_ascii_element(self, element, element_def, fields, index=None, defaults=None) -> bytes:
        values = self._resolve(element, element_def, fields, index, defaults)
        tokens = self._encode(lambda field, value: field.format(value), element_def, fields, values, index)

        return (' '.join(tokens) + '\n').encode('ascii')

    def _encode_binary_element(self, element, element_def, fields, index=None, defaults=None) -> bytes:
        values = self._resolve(element, element_def, fields, index, defaults)

        return b''.join(self._encode(lambda field, value: field.pack(value), element_def, fields, values, index))
