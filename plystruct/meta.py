import logging
from abc import ABCMeta
from enum import Enum


class Endianess(Enum):
    LITTLE_ENDIAN = '<'
    BIG_ENDIAN    = '>'

    @property
    def prefix(self):
        '''Byte order character for the struct module.'''
        return self.value


class FieldDescriptor(object):
    """Wrapper around field access of a Record related class."""

    def __init__(self, field_instance, field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self.field

        return instance.__dict__.get(self.field.name, self.field.default)

    def __set__(self, instance, value):
        self.logger.debug("__set__ from %s for field named '%s'", instance.__class__.__name__, self.field.name)
        instance.__dict__[self.field.name] = self.field.check(value)


class FieldBase(object):

    name = None

    def contribute_to_record(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def check(self, value):
        return value


class Meta(object):
    """Class containing metadata about the record"""

    def __init__(self):
        self.fields = []


class MetaRecord(ABCMeta):

    def __new__(cls, names, bases, attrs):
        '''Collect the fields in declaration order, the same way Django does for models.'''
        fields = [(name, obj) for name, obj in attrs.items() if hasattr(obj, 'contribute_to_record')]
        new_attrs = {name: obj for name, obj in attrs.items() if not hasattr(obj, 'contribute_to_record')}

        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        for parent in bases:
            if not isinstance(parent, MetaRecord):
                continue
            for field_name in parent._meta.fields:
                if field_name not in new_cls._meta.fields:
                    new_cls._meta.fields.append(field_name)

        cls.logger = logging.getLogger(__name__)

        for obj_name, obj in fields:
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        cls.logger.debug('contribute_to_record() found for field \'%s\'' % name)
        if name in cls._meta.fields:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')
        cls._meta.fields.append(name)
        value.contribute_to_record(cls, name)
