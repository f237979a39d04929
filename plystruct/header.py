"""
Structural representation of a PLY header.

    ply
    format binary_little_endian 1.0
    comment made by hand
    element vertex 4
    property float x
    property float y
    property float z
    element face 4
    property list uchar uint vertex_indices
    end_header

The order of the elements is the order of the payload sections and the
order of the properties is the order of the fields inside a record: both
are load-bearing.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .enum import Encoding
from .exceptions import OverflowException
from .scalars import ScalarType


logger = logging.getLogger(__name__)

MAGIC = 'ply'
END_HEADER = 'end_header'


class Version(object):
    '''Version of the format, the only one existing is 1.0'''

    MAJOR_MAX = 0xffff
    MINOR_MAX = 0xff

    def __init__(self, major=1, minor=0):
        if not 0 <= major <= self.MAJOR_MAX:
            raise OverflowException('major version', major)
        if not 0 <= minor <= self.MINOR_MAX:
            raise OverflowException('minor version', minor)
        self.major = major
        self.minor = minor

    @classmethod
    def parse(cls, major: str, minor: str) -> 'Version':
        # bound the digits before handing them to int()
        if len(major) > 5:
            raise OverflowException('major version', major)
        if len(minor) > 3:
            raise OverflowException('minor version', minor)

        return cls(int(major), int(minor))

    def __str__(self):
        return '%d.%d' % (self.major, self.minor)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self)

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return (self.major, self.minor) == (other.major, other.minor)

    def __hash__(self):
        return hash((self.major, self.minor))


class PropertyDef(object):
    '''A named field of an element: a scalar, or a list when "count_type" is given.'''

    def __init__(self, name: str, scalar_type: ScalarType, count_type: Optional[ScalarType] = None):
        if count_type is not None and not count_type.is_integer:
            raise ValueError(f'the count of list \'{name}\' must be an integer type, not {count_type}')
        self.name = name
        self.scalar_type = scalar_type
        self.count_type = count_type

    @classmethod
    def list(cls, name: str, count_type: ScalarType, value_type: ScalarType) -> 'PropertyDef':
        return cls(name, value_type, count_type=count_type)

    @property
    def is_list(self) -> bool:
        return self.count_type is not None

    def to_text(self) -> str:
        if self.is_list:
            return 'property list %s %s %s' % (self.count_type, self.scalar_type, self.name)

        return 'property %s %s' % (self.scalar_type, self.name)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.to_text())

    def __eq__(self, other):
        if not isinstance(other, PropertyDef):
            return NotImplemented
        return (self.name, self.scalar_type, self.count_type) == (other.name, other.scalar_type, other.count_type)


class ElementDef(object):
    """A named record type: how many instances are in the payload
    and which properties each of them has."""

    def __init__(self, name: str, count: int = 0, properties: Iterable[PropertyDef] = ()):
        self.name = name
        self.count = count
        self._properties: Dict[str, PropertyDef] = {}
        for prop in properties:
            self.add_property(prop)

    def add_property(self, prop: PropertyDef) -> None:
        if prop.name in self._properties:
            raise ValueError(f'property \'{prop.name}\' is already defined for element \'{self.name}\'')

        self._properties[prop.name] = prop

    @property
    def properties(self) -> List[PropertyDef]:
        return list(self._properties.values())

    def __getitem__(self, name: str) -> PropertyDef:
        return self._properties[name]

    def __contains__(self, name):
        return name in self._properties

    def __iter__(self) -> Iterator[PropertyDef]:
        return iter(self._properties.values())

    def __len__(self):
        return len(self._properties)

    def to_text(self) -> str:
        lines = ['element %s %d' % (self.name, self.count)]
        lines.extend(prop.to_text() for prop in self)

        return '\n'.join(lines)

    def __repr__(self):
        return '<%s(%s, count=%d, properties=%r)>' % (
            self.__class__.__name__, self.name, self.count, self.properties)

    def __eq__(self, other):
        if not isinstance(other, ElementDef):
            return NotImplemented
        return (self.name, self.count, self.properties) == (other.name, other.count, other.properties)


class Header(object):
    '''Everything found between "ply" and "end_header".'''

    def __init__(self, encoding=Encoding.ASCII, version=None, comments=(), obj_infos=(), elements=()):
        self.encoding = encoding
        self.version = version if version is not None else Version()
        self.comments: List[str] = list(comments)
        self.obj_infos: List[str] = list(obj_infos)
        self._elements: Dict[str, ElementDef] = {}
        for element in elements:
            self.add_element(element)

    def add_element(self, element: ElementDef) -> None:
        if element.name in self._elements:
            raise ValueError(f'element \'{element.name}\' is already defined')

        self._elements[element.name] = element

    @property
    def elements(self) -> List[ElementDef]:
        return list(self._elements.values())

    @property
    def element_names(self) -> List[str]:
        return list(self._elements)

    def __getitem__(self, name: str) -> ElementDef:
        return self._elements[name]

    def __contains__(self, name):
        return name in self._elements

    def to_text(self) -> str:
        '''Serialize: comments first, then obj_info lines, then the elements.'''
        lines = [MAGIC, 'format %s %s' % (self.encoding, self.version)]
        lines.extend(('comment %s' % comment) if comment else 'comment' for comment in self.comments)
        lines.extend(('obj_info %s' % obj_info) if obj_info else 'obj_info' for obj_info in self.obj_infos)
        lines.extend(element.to_text() for element in self.elements)
        lines.append(END_HEADER)

        return '\n'.join(lines) + '\n'

    def to_bytes(self) -> bytes:
        return self.to_text().encode('utf-8')

    def __repr__(self):
        return '<%s(%s %s, elements=%r)>' % (
            self.__class__.__name__, self.encoding, self.version, self.element_names)

    def __eq__(self, other):
        if not isinstance(other, Header):
            return NotImplemented
        return (
            self.encoding == other.encoding and
            self.version == other.version and
            self.comments == other.comments and
            self.obj_infos == other.obj_infos and
            self.elements == other.elements
        )
