"""
Core module: a PLY document, i.e. a header plus, for each declared element,
the ordered list of its instances.
"""
import logging
from typing import Dict, List

from .enum import Compliant
from .exceptions import CountMismatchException
from .grammar import build_header, iter_header_lines, read_header
from .header import Header
from .parser import Parser
from .properties import DefaultElement
from .streams import Stream
from .writer import Writer


logger = logging.getLogger(__name__)


class Ply(object):
    """
    Models all the information of a PLY file.

        ply = Ply.read('cube.ply')
        ply.payload['vertex'][2]['x']

    "defaults" optionally maps element names to {property name: value}
    dictionaries: those are the only values the writer substitutes for
    the properties an instance doesn't provide.
    """

    def __init__(self, header: Header = None, payload: Dict[str, List] = None, defaults: Dict[str, Dict] = None):
        self.header = header if header is not None else Header()
        self.payload: Dict[str, List] = dict(payload) if payload else {}
        self.defaults: Dict[str, Dict] = dict(defaults) if defaults else {}

    def __repr__(self):
        counts = ', '.join('%s=%d' % (name, len(elements)) for name, elements in self.payload.items())
        return '<%s(%s, %s)>' % (self.__class__.__name__, self.header.encoding, counts)

    def __eq__(self, other):
        if not isinstance(other, Ply):
            return NotImplemented
        return self.header == other.header and self.payload == other.payload

    @classmethod
    def read(cls, source, element_factory=DefaultElement, compliant=Compliant.DEFAULT) -> 'Ply':
        '''Read header and payload from a path, bytes or a binary file object.'''
        parser = Parser(element_factory=element_factory, compliant=compliant)

        with Stream(source) as stream:
            lines = list(iter_header_lines(stream, compliant))
            header = build_header(lines)
            logger.debug('read header %r', header)
            payload = parser.read_payload(stream, header, line=lines[-1].number)

        return cls(header, payload)

    def _check_declared(self):
        for name in self.payload:
            if name not in self.header:
                raise ValueError(f'payload contains element \'{name}\' that is not declared in the header')

    def make_consistent(self) -> None:
        '''Derive the counts of the header from the instances supplied.'''
        self._check_declared()
        for element_def in self.header.elements:
            elements = self.payload.setdefault(element_def.name, [])
            element_def.count = len(elements)

    def check_consistency(self) -> None:
        self._check_declared()
        for element_def in self.header.elements:
            actual = len(self.payload.get(element_def.name, ()))
            if element_def.count != actual:
                raise CountMismatchException(element_def.name, element_def.count, actual)

    def write(self, sink, derive_counts=False) -> int:
        '''Write the header and the payload, returning the number of bytes written.

        The counts are checked (or derived when "derive_counts" is set) before
        anything is written.'''
        if derive_counts:
            self.make_consistent()
        else:
            self.check_consistency()

        writer = Writer()

        with Stream(sink, flags='w') as stream:
            written = writer.write_header(stream, self.header)
            for element_def in self.header.elements:
                written += writer.write_payload_for_element(
                    stream,
                    element_def,
                    self.payload.get(element_def.name, []),
                    self.header.encoding,
                    defaults=self.defaults.get(element_def.name),
                )

        logger.debug('written %d bytes', written)

        return written


def read_ply(source, **kwargs) -> Ply:
    return Ply.read(source, **kwargs)


def read_ply_header(source, compliant=Compliant.DEFAULT) -> Header:
    '''Read only the header, a file object is left positioned at the first payload byte.'''
    return read_header(source, compliant)


def write_ply(sink, ply: Ply, **kwargs) -> int:
    return ply.write(sink, **kwargs)
