import io
import logging
import os

from .exceptions import IOException, UnexpectedEofException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file object to
    uniform its properties.

    It never reads more than what is asked for: a caller reading only
    the header finds the underlying object positioned exactly at the
    first byte of the payload.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.flags = flags
        self.obj = obj
        self._owned = False
        self._size = None

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

        if self.flags == 'r':
            self._size = self._get_size()

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.obj)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        try:
            self.obj = open(self.obj, 'rb' if self.flags == 'r' else 'wb')
        except OSError as e:
            raise IOException(e) from e
        self._owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        if self.flags != 'r':
            raise TypeError('cannot write into a bytes object, use io.BytesIO instead')
        self.obj = io.BytesIO(self.obj)

    def init_Stream(self):
        '''Share the object of another stream without taking ownership of it'''
        self.obj = self.obj.obj

    def init_file(self):
        if isinstance(self.obj, os.PathLike):
            self.obj = os.fspath(self.obj)
            self.init_str()
        elif isinstance(self.obj, io.TextIOBase):
            raise TypeError('\'%s\' is a text stream, PLY needs a binary one' % self.obj.__class__.__name__)
        elif not hasattr(self.obj, 'read' if self.flags == 'r' else 'write'):
            raise TypeError('\'%s\' is the wrong kind of object to use as a stream' % self.obj.__class__.__name__)

    def _get_size(self):
        '''The size of the source when it is seekable, None otherwise.'''
        try:
            if not self.obj.seekable():
                return None
            position = self.obj.tell()
            size = self.obj.seek(0, io.SEEK_END)
            self.obj.seek(position)
        except (AttributeError, OSError, ValueError):
            return None

        return size

    def close(self):
        if self._owned:
            self.obj.close()

    def tell(self):
        return self.obj.tell()

    def remaining(self):
        '''Bytes left in a bounded source, None when the source is unbounded.'''
        if self._size is None:
            return None

        return max(self._size - self.obj.tell(), 0)

    def readline(self, limit=-1):
        try:
            if not hasattr(self.obj, 'readline'):
                return self._readline_bytewise(limit)
            return self.obj.readline(limit)
        except (OSError, ValueError) as e:  # ValueError: closed file
            raise IOException(e) from e

    def _readline_bytewise(self, limit):
        '''For objects exposing only read(): one byte at a time so nothing
        past the newline is consumed.'''
        line = bytearray()
        while limit < 0 or len(line) < limit:
            byte = self.obj.read(1)
            if not byte:
                break
            line += byte
            if byte == b'\n':
                break

        return bytes(line)

    def read_exact(self, size):
        '''Read exactly "size" bytes or fail with UnexpectedEofException.'''
        chunks = []
        missing = size
        while missing > 0:
            try:
                data = self.obj.read(missing)
            except (OSError, ValueError) as e:
                raise IOException(e) from e

            if not data:
                break

            chunks.append(data)
            missing -= len(data)

        if missing > 0:
            raise UnexpectedEofException('%d bytes (only %d available)' % (size, size - missing))

        return b''.join(chunks)

    def write(self, data):
        try:
            self.obj.write(data)
        except (OSError, ValueError) as e:
            raise IOException(e) from e

        return len(data)
