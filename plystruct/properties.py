"""
The capability any element instance implements to take part in reading and
writing: values are set and obtained by property name, the parser and the
writer never look inside the instance.

DefaultElement is the ready to use, map backed, implementation; see
plystruct.record for instances with a fixed shape.
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Optional, Sequence

from .scalars import ScalarType


logger = logging.getLogger(__name__)


class ScalarValue(object):
    '''A single number together with the type it is declared with.'''

    __slots__ = ('scalar_type', 'value')

    def __init__(self, scalar_type: ScalarType, value):
        self.scalar_type = scalar_type
        self.value = value

    def __repr__(self):
        return '<%s(%s %r)>' % (self.__class__.__name__, self.scalar_type, self.value)

    def __eq__(self, other):
        if not isinstance(other, ScalarValue):
            return NotImplemented
        return self.scalar_type == other.scalar_type and self.value == other.value


class ListValue(object):
    '''A sequence of numbers sharing the same type.'''

    __slots__ = ('scalar_type', 'values')

    def __init__(self, scalar_type: ScalarType, values: Sequence):
        self.scalar_type = scalar_type
        self.values = values

    def __repr__(self):
        return '<%s(%s %r)>' % (self.__class__.__name__, self.scalar_type, self.values)

    def __len__(self):
        return len(self.values)

    def __eq__(self, other):
        if not isinstance(other, ListValue):
            return NotImplemented
        return self.scalar_type == other.scalar_type and list(self.values) == list(other.values)


class PropertyAccess(ABC):
    """Setters and getters used by the parser and the writer.

    "scalar_type" is always the type declared in the header: an
    implementation storing values with a different representation must
    convert them with ScalarType.check(), that refuses to truncate.

    The getters return None when the instance doesn't know the property."""

    @abstractmethod
    def set_scalar(self, name: str, scalar_type: ScalarType, value) -> None:
        pass

    @abstractmethod
    def set_list(self, name: str, scalar_type: ScalarType, values: Sequence) -> None:
        pass

    @abstractmethod
    def get_scalar(self, name: str, scalar_type: ScalarType):
        pass

    @abstractmethod
    def get_list(self, name: str, scalar_type: ScalarType) -> Optional[Sequence]:
        '''The returned sequence is not copied when no conversion is needed.'''
        pass


class DefaultElement(PropertyAccess, MutableMapping):
    """Ordered mapping from property name to ScalarValue/ListValue.

    Setting a property never fails, unknown names are simply added.

        >>> vertex = DefaultElement(x=ScalarValue(ScalarType.FLOAT, 1.0))
        >>> vertex.set_scalar('y', ScalarType.FLOAT, 2.0)
        >>> vertex.get_scalar('y', ScalarType.DOUBLE)
        2.0
    """

    def __init__(self, *args, **kwargs):
        self._properties = {}
        self.update(*args, **kwargs)

    def __getitem__(self, name):
        return self._properties[name]

    def __setitem__(self, name, value):
        if not isinstance(value, (ScalarValue, ListValue)):
            raise TypeError('\'%s\' must be a ScalarValue or a ListValue, not %s' % (
                name, value.__class__.__name__))
        self._properties[name] = value

    def __delitem__(self, name):
        del self._properties[name]

    def __iter__(self):
        return iter(self._properties)

    def __len__(self):
        return len(self._properties)

    @classmethod
    def from_values(cls, scalar_type: ScalarType, **values) -> 'DefaultElement':
        '''Build an instance whose properties all share the same type,
        sequences become lists.

            >>> DefaultElement.from_values(ScalarType.UINT, vertex_indices=[0, 1, 2])
        '''
        element = cls()
        for name, value in values.items():
            if isinstance(value, (list, tuple)):
                element.set_list(name, scalar_type, list(value))
            else:
                element.set_scalar(name, scalar_type, value)

        return element

    def __repr__(self):
        return '<%s(%s)>' % (
            self.__class__.__name__,
            ', '.join('%s=%r' % (name, value) for name, value in self._properties.items()),
        )

    def value(self, name):
        '''The plain python value(s) of the property.'''
        prop = self._properties[name]

        return prop.values if isinstance(prop, ListValue) else prop.value

    def set_scalar(self, name, scalar_type, value):
        self._properties[name] = ScalarValue(scalar_type, value)

    def set_list(self, name, scalar_type, values):
        self._properties[name] = ListValue(scalar_type, values)

    def get_scalar(self, name, scalar_type):
        prop = self._properties.get(name)
        if not isinstance(prop, ScalarValue):
            return None

        if prop.scalar_type is scalar_type:
            return prop.value

        return scalar_type.check(prop.value, name)

    def get_list(self, name, scalar_type):
        prop = self._properties.get(name)
        if not isinstance(prop, ListValue):
            return None

        if prop.scalar_type is scalar_type:
            return prop.values

        return [scalar_type.check(value, name) for value in prop.values]
