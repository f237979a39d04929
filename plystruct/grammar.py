"""
Line oriented grammar of the PLY header.

    Start -> Magic -> Format -> (Comment | ObjInfo | ElementBlock)* -> End

Each line is classified on its own by parse_line(); iter_header_lines()
turns a stream into a lazy sequence of such events stopping right after
"end_header", and build_header() folds the events into a Header checking
the constraints that span more than one line.
"""
import logging
import re
import sys
from collections import namedtuple
from enum import Enum, auto

from .enum import Compliant, Encoding
from .exceptions import (
    OverflowException,
    ParseException,
    UnexpectedEofException,
)
from .header import (
    END_HEADER,
    MAGIC,
    ElementDef,
    Header,
    PropertyDef,
    Version,
)
from .scalars import ScalarType
from .streams import Stream


logger = logging.getLogger(__name__)

# a header line longer than this is not a header line
MAX_LINE_LENGTH = 1 << 16

_BLANK = '[ \t]+'
_IDENT = '[A-Za-z_][A-Za-z0-9_-]*'

_FORMAT_RE = re.compile(r'format{0}(\S+){0}(\S+)\Z'.format(_BLANK))
_VERSION_RE = re.compile(r'([0-9]+)\.([0-9]+)\Z')
_TEXT_RE = re.compile(r'(comment|obj_info)(?:{0}(.*))?\Z'.format(_BLANK))
_ELEMENT_RE = re.compile(r'element{0}({1}){0}(\S+)\Z'.format(_BLANK, _IDENT))
_COUNT_RE = re.compile(r'[0-9]+\Z')
_PROPERTY_RE = re.compile(r'property{0}(\S+){0}({1})\Z'.format(_BLANK, _IDENT))
_PROPERTY_LIST_RE = re.compile(r'property{0}list{0}(\S+){0}(\S+){0}({1})\Z'.format(_BLANK, _IDENT))


class LineKind(Enum):
    MAGIC      = auto()
    FORMAT     = auto()
    COMMENT    = auto()
    OBJ_INFO   = auto()
    ELEMENT    = auto()
    PROPERTY   = auto()
    END_HEADER = auto()


Line = namedtuple('Line', 'kind value number raw')
Line.__doc__ = '''A classified header line.

The value depends on the kind: None for the magic and the terminator,
(Encoding, Version) for the format, the text for comment and obj_info,
an ElementDef or a PropertyDef otherwise.'''


def _scalar_type(token, number, compliant):
    scalar_type = ScalarType.from_name(token)
    if scalar_type is None:
        raise ParseException('unknown type', expected='scalar type', found=token, line=number)

    if not scalar_type.is_standard:
        if compliant & Compliant.STANDARD_TYPES:
            raise ParseException('non standard type', expected='standard scalar type', found=token, line=number)
        logger.warning('line %d uses the vendor extension type \'%s\'', number, token)

    return scalar_type


def _parse_format(text, number, compliant):
    match = _FORMAT_RE.match(text)
    if not match:
        raise ParseException('invalid format line', expected='format <encoding> <version>', found=text, line=number)

    encoding_token, version_token = match.groups()
    try:
        encoding = Encoding(encoding_token)
    except ValueError:
        raise ParseException(
            'invalid encoding', expected=' or '.join(_.value for _ in Encoding), found=encoding_token, line=number
        ) from None

    match = _VERSION_RE.match(version_token)
    if not match:
        raise ParseException('invalid version', expected='<major>.<minor>', found=version_token, line=number)

    try:
        version = Version.parse(*match.groups())
    except OverflowException as e:
        raise e.locate(line=number)

    if version != Version(1, 0):
        if compliant & Compliant.VERSION:
            raise ParseException('unsupported version', expected='1.0', found=version_token, line=number)
        logger.warning('line %d declares version %s, parsing it as 1.0', number, version)

    return encoding, version


def _parse_element(text, number, compliant):
    match = _ELEMENT_RE.match(text)
    if not match:
        raise ParseException('invalid element line', expected='element <name> <count>', found=text, line=number)

    name, count = match.groups()
    if not _COUNT_RE.match(count):
        raise ParseException('invalid element count', expected='non-negative integer', found=count, line=number)
    # bound the digits before handing them to int()
    if len(count) > 20 or int(count) > sys.maxsize:
        raise OverflowException('element count', count, line=number)

    return ElementDef(name, int(count))


def _parse_property(text, number, compliant):
    match = _PROPERTY_LIST_RE.match(text)
    if match:
        count_token, value_token, name = match.groups()
        count_type = _scalar_type(count_token, number, compliant)
        if not count_type.is_integer:
            raise ParseException(
                'invalid list count type', expected='integer type', found=count_token, line=number)

        return PropertyDef.list(name, count_type, _scalar_type(value_token, number, compliant))

    match = _PROPERTY_RE.match(text)
    if not match:
        raise ParseException(
            'invalid property line',
            expected='property <type> <name> or property list <count type> <type> <name>',
            found=text,
            line=number,
        )

    type_token, name = match.groups()

    return PropertyDef(name, _scalar_type(type_token, number, compliant))


def parse_line(text, number=0, compliant=Compliant.DEFAULT):
    '''Classify a single header line.

    The line terminator and trailing blanks are not significant, except for the
    text of comment/obj_info lines where only the terminator is dropped.'''
    raw = text
    text = text.rstrip('\r\n')
    stripped = text.rstrip(' \t')

    if stripped == MAGIC:
        return Line(LineKind.MAGIC, None, number, raw)

    if stripped == END_HEADER:
        return Line(LineKind.END_HEADER, None, number, raw)

    keyword = stripped.split(None, 1)[0] if stripped else ''

    if keyword in ('comment', 'obj_info'):
        match = _TEXT_RE.match(text)
        if match:
            kind = LineKind.COMMENT if match.group(1) == 'comment' else LineKind.OBJ_INFO
            return Line(kind, match.group(2) or '', number, raw)
    elif keyword == 'format':
        return Line(LineKind.FORMAT, _parse_format(stripped, number, compliant), number, raw)
    elif keyword == 'element':
        return Line(LineKind.ELEMENT, _parse_element(stripped, number, compliant), number, raw)
    elif keyword == 'property':
        return Line(LineKind.PROPERTY, _parse_property(stripped, number, compliant), number, raw)

    raise ParseException('cannot classify header line', expected='header keyword', found=text, line=number)


def iter_header_lines(source, compliant=Compliant.DEFAULT):
    '''Lazily read and classify the header lines of "source".

    It stops right after "end_header" so the stream stays positioned at the
    first byte of the payload. Every call starts a new sequence: pass
    the same stream object to continue with the payload.'''
    with Stream(source) as stream:
        yield from _read_header_lines(stream, compliant)


def _read_header_lines(stream, compliant):
    number = 0
    expected = MAGIC

    while True:
        raw = stream.readline(MAX_LINE_LENGTH)
        number += 1

        if not raw:
            raise UnexpectedEofException(expected, line=number)

        if len(raw) >= MAX_LINE_LENGTH and not raw.endswith(b'\n'):
            raise ParseException('header line too long', expected='end of line', found=raw[:32], line=number)

        try:
            text = raw.decode('utf-8')
        except UnicodeDecodeError:
            raise ParseException('undecodable header line', expected='utf-8 text', found=raw, line=number) from None

        line = parse_line(text, number, compliant)

        if number == 1 and line.kind is not LineKind.MAGIC:
            raise ParseException('missing magic number', expected=MAGIC, found=text.rstrip('\r\n'), line=number)

        logger.debug('header line %d: %s', number, line.kind.name)

        yield line

        if line.kind is LineKind.END_HEADER:
            return

        expected = END_HEADER


def build_header(lines):
    '''Fold a sequence of header events into a Header.'''
    format_line = None
    comments = []
    obj_infos = []
    header = Header()
    current = None
    number = 0
    seen_magic = False
    seen_end = False

    for line in lines:
        number = line.number
        if seen_end:
            raise ParseException('line after end of header', expected='payload', found=line.raw, line=number)

        if line.kind is LineKind.MAGIC:
            if seen_magic:
                raise ParseException('repeated magic number', expected='header line', found=line.raw, line=number)
            seen_magic = True
            continue

        if not seen_magic:
            raise ParseException('missing magic number', expected=MAGIC, found=line.raw, line=number)

        if line.kind is LineKind.FORMAT:
            if format_line is not None:
                raise ParseException(
                    'repeated format line (first one at line %d)' % format_line.number,
                    expected='a single format line', found=line.raw, line=number)
            format_line = line
        elif line.kind is LineKind.COMMENT:
            comments.append(line.value)
        elif line.kind is LineKind.OBJ_INFO:
            obj_infos.append(line.value)
        elif line.kind is LineKind.ELEMENT:
            current = line.value
            try:
                header.add_element(current)
            except ValueError:
                raise ParseException(
                    'repeated element', expected='unique element name', found=current.name, line=number) from None
        elif line.kind is LineKind.PROPERTY:
            if current is None:
                raise ParseException(
                    'property without element', expected='element line', found=line.raw, line=number)
            try:
                current.add_property(line.value)
            except ValueError:
                raise ParseException(
                    'repeated property', expected='unique property name', found=line.value.name, line=number
                ) from None
        elif line.kind is LineKind.END_HEADER:
            seen_end = True

    if not seen_end:
        raise UnexpectedEofException(END_HEADER if seen_magic else MAGIC, line=number + 1)

    if format_line is None:
        raise ParseException('missing format line', expected='format', found=END_HEADER, line=number)

    header.encoding, header.version = format_line.value
    header.comments = comments
    header.obj_infos = obj_infos

    return header


def read_header(source, compliant=Compliant.DEFAULT):
    '''Read the header of "source" leaving it positioned at the payload.'''
    return build_header(iter_header_lines(source, compliant))
