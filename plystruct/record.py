"""
Element instances with a fixed set of properties, declared like the fields
of a model:

    class Vertex(Record):
        x = RecordField(ScalarType.FLOAT)
        y = RecordField(ScalarType.FLOAT)
        z = RecordField(ScalarType.FLOAT)

    class Face(Record):
        vertex_indices = RecordField(ScalarType.UINT, is_list=True)

Values are stored with the declared type of the field: reading a file
that declares narrower types widens them, anything that would be
truncated raises RangeException.
"""
from .exceptions import UnknownPropertyException
from .header import ElementDef, PropertyDef
from .meta import FieldBase, MetaRecord
from .properties import PropertyAccess
from .scalars import ScalarType


class RecordField(FieldBase):

    def __init__(self, scalar_type: ScalarType, is_list=False, default=None):
        self.scalar_type = scalar_type
        self.is_list = is_list
        self.default = default

    def __repr__(self):
        return '<%s(%s%s)>' % (self.__class__.__name__, 'list ' if self.is_list else '', self.scalar_type)

    def check(self, value):
        if value is None:
            return None

        if self.is_list:
            return [self.scalar_type.check(_, self.name) for _ in value]

        return self.scalar_type.check(value, self.name)

    def property_def(self, count_type=ScalarType.UCHAR) -> PropertyDef:
        return PropertyDef(self.name, self.scalar_type, count_type=count_type if self.is_list else None)


class Record(PropertyAccess, metaclass=MetaRecord):
    """Base class for the element instances with a fixed shape.

    Asking to set a property that is not declared raises UnknownPropertyException."""

    def __init__(self, **values):
        for name, value in values.items():
            setattr(self, self._get_field(name).name, value)

    @classmethod
    def _get_field(cls, name) -> RecordField:
        if name not in cls._meta.fields:
            raise UnknownPropertyException(name)

        return getattr(cls, name)

    @classmethod
    def get_fields(cls):
        return [getattr(cls, name) for name in cls._meta.fields]

    @classmethod
    def element_def(cls, name: str, count=0, count_type=ScalarType.UCHAR) -> ElementDef:
        '''Build the header declaration of an element made of these records.'''
        return ElementDef(name, count, [field.property_def(count_type) for field in cls.get_fields()])

    def __repr__(self):
        fields = ', '.join('%s=%r' % (name, getattr(self, name)) for name in self._meta.fields)
        return '<%s(%s)>' % (self.__class__.__name__, fields)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._meta.fields)

    def set_scalar(self, name, scalar_type, value):
        field = self._get_field(name)
        if field.is_list:
            raise UnknownPropertyException(name)
        setattr(self, name, value)

    def set_list(self, name, scalar_type, values):
        field = self._get_field(name)
        if not field.is_list:
            raise UnknownPropertyException(name)
        setattr(self, name, values)

    def get_scalar(self, name, scalar_type):
        if name not in self._meta.fields or self._get_field(name).is_list:
            return None

        value = getattr(self, name)
        if value is None:
            return None

        return scalar_type.check(value, name)

    def get_list(self, name, scalar_type):
        if name not in self._meta.fields:
            return None

        field = self._get_field(name)
        if not field.is_list:
            return None

        values = getattr(self, name)
        if values is None or field.scalar_type is scalar_type:
            return values

        return [scalar_type.check(_, name) for _ in values]
