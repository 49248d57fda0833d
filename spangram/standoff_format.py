"""This module implements a loader for standoff annotation files.

One unit per line, tab-separated ::

    type    start   end     [key=value]...

Blank lines and lines starting with `#` are ignored.
"""

# Author: spangram developers
# License: BSD3

import codecs
import os

from .annotation import Document, Span, Unit


class StandoffFormatError(Exception):
    """
    Raised when a line of a standoff file can't be understood
    """
    pass


def _read_unit(lineno, line):
    """Read a single unit from a line"""
    fields = line.split('\t')
    if len(fields) < 3:
        oops = ("line %d: expected at least type, start and end, got %r" %
                (lineno, line))
        raise StandoffFormatError(oops)
    utype, start, end = fields[:3]
    try:
        span = Span(int(start), int(end))
    except ValueError:
        oops = "line %d: offsets must be integers, got %r" % (lineno, line)
        raise StandoffFormatError(oops)
    features = {}
    for field in fields[3:]:
        if '=' not in field:
            oops = "line %d: expected key=value, got %r" % (lineno, field)
            raise StandoffFormatError(oops)
        key, val = field.split('=', 1)
        features[key] = val
    return Unit('u%d' % lineno, span, utype, features)


def _load_units(f):
    """Actually read the units"""
    units = []
    for lineno, row in enumerate(f, 1):
        line = row.rstrip('\r\n')
        if not line.strip() or line.startswith('#'):
            continue
        units.append(_read_unit(lineno, line))
    return units


def load_document(f):
    """Read a standoff file into a document, named after the file
    """
    origin = os.path.splitext(os.path.basename(f))[0]
    with codecs.open(f, 'r', 'utf-8') as stream:
        return Document(_load_units(stream), origin=origin)


def format_unit(unit, feature='label'):
    """A unit as a standoff line (without the newline), keeping only
    the given feature"""
    line_pattern = u'{ut}\t{st}\t{en}\t{fn}={fv}'
    return line_pattern.format(ut=unit.type,
                               st=unit.span.char_start,
                               en=unit.span.char_end,
                               fn=feature,
                               fv=unit.features.get(feature, ''))
