import builtins


class PlyException(Exception):
    '''Base class to extend in order to throw exception in plystruct.

    Besides the message every exception carries a "context", i.e. where the
    failure happened: element name, property name, instance index and line
    number. The context is filled in while the exception propagates up from the
    field that failed to the element and the document that contain it.
    '''

    _context_keys = ('element', 'property', 'index', 'line')

    def __init__(self, message='', **context):
        self.message = message
        self.context = {}
        self.locate(**context)
        super().__init__(message)

    def locate(self, **context):
        '''Record where the failure happened.

        The innermost caller wins: a key already set is never overwritten.'''
        for key, value in context.items():
            if value is not None and self.context.get(key) is None:
                self.context[key] = value

        return self

    element = builtins.property(lambda self: self.context.get('element'))
    property = builtins.property(lambda self: self.context.get('property'))
    index = builtins.property(lambda self: self.context.get('index'))
    line = builtins.property(lambda self: self.context.get('line'))

    def __str__(self):
        location = ', '.join(
            '%s=%r' % (key, self.context[key]) for key in self._context_keys if key in self.context)
        if not location:
            return self.message

        return '%s (%s)' % (self.message, location)


class ParseException(PlyException):
    '''Something in the input cannot be classified.'''

    def __init__(self, message, expected=None, found=None, **context):
        self.expected = expected
        self.found = found
        if expected is not None:
            message = '%s: expected %s, found %r' % (message, expected, found)
        super().__init__(message, **context)


class UnexpectedEofException(PlyException):
    '''The input ended while "expected" was still to be read.'''

    def __init__(self, expected, **context):
        self.expected = expected
        super().__init__('unexpected end of file, expected %s' % expected, **context)


class OverflowException(PlyException):
    '''A count or a version number does not fit its integer width.'''

    def __init__(self, field, raw, **context):
        self.field = field
        self.raw = raw
        super().__init__('%s %r does not fit its integer width' % (field, raw), **context)


class RangeException(PlyException):
    '''A value cannot be represented with the declared scalar type.'''

    def __init__(self, property_name, scalar_type, value, **context):
        self.scalar_type = scalar_type
        self.value = value
        type_name = getattr(scalar_type, 'ply_name', scalar_type)
        super().__init__(
            'value %r is not representable as %s' % (value, type_name), property=property_name, **context)


class MissingPropertyException(PlyException):
    '''An instance does not resolve a property declared for its element.'''

    def __init__(self, element, property_name, index, **context):
        super().__init__(
            'instance does not provide property %r' % property_name,
            element=element, property=property_name, index=index, **context)


class UnknownPropertyException(PlyException):
    '''A fixed-shape instance was asked for a property it does not represent.'''

    def __init__(self, name, **context):
        self.name = name
        super().__init__('unknown property %r' % name, property=name, **context)


class CountMismatchException(PlyException):

    def __init__(self, element, declared, actual):
        self.declared = declared
        self.actual = actual
        super().__init__(
            'element declares %d instances but %d were supplied' % (declared, actual), element=element)


class IOException(PlyException):
    '''Wraps the OSError raised by the underlying byte source/sink.'''

    def __init__(self, error, **context):
        self.error = error
        super().__init__('I/O error: %s' % error, **context)
