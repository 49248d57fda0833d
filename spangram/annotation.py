"""
Low-level representation of the annotations we read n-grams from and
write n-grams back to.

This is a deliberately small host model: a document is a bag of units,
each unit covers a span of text and carries a (read-only) feature map.
The lattice code in `spangram.lattice` never sees these objects; it works
on `Gram` values that `spangram.ngram` extracts from them.
"""

# Author: spangram developers
# License: BSD3

# pylint: disable=too-many-arguments
# pylint: disable=too-few-public-methods

from frozendict import frozendict


class Span(object):
    """
    What portion of text an annotation corresponds to.
    Assumed to be in terms of character offsets

    The way we interpret spans amounts to how Python
    interprets array slice indices.

    One way to understand them is to think of offsets as
    sitting in between individual characters ::

          h   o   w   d   y
        0   1   2   3   4   5

    So `(0,5)` covers the whole word above, and `(1,2)`
    picks out the letter "o"
    """
    def __init__(self, start, end):
        self.char_start = start
        self.char_end = end

    def __str__(self):
        return '(%d,%d)' % (self.char_start, self.char_end)

    def __repr__(self):
        return 'Span(%d, %d)' % (self.char_start, self.char_end)

    def _tuple(self):
        return (self.char_start, self.char_end)

    def __lt__(self, other):
        return self._tuple() < other._tuple()

    def __eq__(self, other):
        return isinstance(other, Span) and self._tuple() == other._tuple()

    def __gt__(self, other):
        return other < self

    def __ne__(self, other):
        return not self == other

    def __le__(self, other):
        return self < other or self == other

    def __ge__(self, other):
        return other <= self

    def __hash__(self):
        return hash(self._tuple())

    def encloses(self, other):
        """
        Return True if this span includes the argument

        Note that `x.encloses(x) == True`

        Corner case: `x.encloses(None) == False`
        """
        if other is None:
            return False
        return\
            self.char_start <= other.char_start and\
            self.char_end >= other.char_end


class Unit(object):
    """An annotation over a span of text.

    Units tend to have:
    * span:     some sort of location (what they are annotating)
    * type:     some key label (we call a type)
    * features: an attribute to value dictionary

    Features are frozen on construction; if you want different
    features, make a new unit.
    """
    def __init__(self, unit_id, span, utype, features, origin=None):
        """Init method.

        Parameters
        ----------
        unit_id : str
            Identifier for this unit (unique within its document).
        span : Span
            Coordinates of the annotated span.
        utype : str
            Unit type, eg. 'token' or 'sentence'.
        features : dict from str to str
            Feature as a dict from feature_name to feature_value.
        origin : str, optional
            Name of the document that supports this unit.
        """
        self._unit_id = unit_id
        self.span = span
        self.type = utype
        self.features = frozendict(features or {})
        self.origin = origin

    def __str__(self):
        feats = dict(self.features)
        return ('%s [%s] %s %s' %
                (self.identifier(), self.type, self.span, feats))

    def __repr__(self):
        return 'Unit(%r, %r, %r, %r)' % (self._unit_id, self.span,
                                         self.type, dict(self.features))

    def local_id(self):
        """Identifier within a single document."""
        return self._unit_id

    def identifier(self):
        """Global identifier if possible, else local identifier.

        If the unit has an origin we prefix the local id with it
        """
        if self.origin is None:
            return self._unit_id
        return '_'.join([self.origin, self._unit_id])


class Document(object):
    """
    A single document: a list of units
    """
    def __init__(self, units, origin=None):
        self.units = list(units)
        self.origin = origin
        for unit in self.units:
            unit.origin = origin

    def units_of_type(self, utype):
        """
        Units of the given type, sorted by span (ties keep the order
        in which they were added to the document)
        """
        return sorted((u for u in self.units if u.type == utype),
                      key=lambda u: u.span)

    def add_units(self, units):
        """
        Append new units to this document, claiming them as ours
        """
        units = list(units)
        for unit in units:
            unit.origin = self.origin
        self.units.extend(units)
