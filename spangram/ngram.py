"""
Adding n-gram units to a document.

Creating n-grams from a single layer of tokens is easy enough to do by
hand; here we want to handle situations where different annotations
overlap, eg. word forms, POS tags and other semantic information sitting
on the same tokens. Generation can be limited to a given unit type
(eg. sentences), in which case no n-gram crosses the boundary of such
a unit.
"""

# Author: spangram developers
# License: BSD3

# pylint: disable=too-many-instance-attributes, too-many-arguments

import warnings

from .annotation import Unit
from .lattice import (Gram, GenerationConfig, InvalidConfigError,
                      generate)


class NGramAnnotator(object):
    """
    Read values from units of one type, write n-grams of them back as
    units of another type.

    Parameters
    ----------
    input_type : string
        type of the units to combine (eg. 'token')
    output_type : string
        type given to the n-gram units we create
    input_feature : string
        feature holding the value of each input unit
    output_feature : string
        feature in which we store the n-gram text
    scope_type : string, optional
        if set, n-grams are generated separately within each unit of
        this type
    config : GenerationConfig, optional
        defaults to contiguous bigrams
    """
    def __init__(self, input_type, output_type,
                 input_feature='label', output_feature='label',
                 scope_type=None, config=None):
        if not input_type:
            raise InvalidConfigError('input unit type must be set')
        if not output_type:
            raise InvalidConfigError('output unit type must be set')
        self.input_type = input_type
        self.output_type = output_type
        self.input_feature = input_feature
        self.output_feature = output_feature
        self.scope_type = scope_type or None
        self.config = config if config is not None else GenerationConfig()

    def extract_grams(self, units):
        """
        Read the input feature off each unit, giving a list of grams
        sorted by span.

        Units without the feature are left out (with a warning), so
        they never make it into the lattice.
        """
        grams = []
        missing = 0
        for unit in sorted(units, key=lambda u: u.span):
            value = unit.features.get(self.input_feature)
            if value is None:
                missing += 1
                continue
            grams.append(Gram(unit.span.char_start,
                              unit.span.char_end,
                              value))
        if missing:
            oops = ('%d %s unit(s) with no "%s" feature were ignored' %
                    (missing, self.input_type, self.input_feature))
            warnings.warn(oops, stacklevel=2)
        return grams

    def _scopes(self, doc):
        """
        The spans within which we generate n-grams: either that of
        each scope unit, or just one pass over the whole document
        """
        if self.scope_type is None:
            return [None]
        return [u.span for u in doc.units_of_type(self.scope_type)]

    def annotate(self, doc):
        """
        Generate n-gram units for a document, without modifying it

        Returns
        -------
        units : list of Unit
            the new units, in generation order (empty if there was
            nothing to combine)
        """
        grams = self.extract_grams(doc.units_of_type(self.input_type))
        if not grams:
            return []
        combos = []
        for scope in self._scopes(doc):
            combos.extend(generate(grams, self.config, scope=scope))
        offset = len(doc.units)
        return [self._mk_unit(offset + i, gram)
                for i, gram in enumerate(combos)]

    def process(self, doc):
        """
        Generate n-gram units and add them to the document

        Returns
        -------
        units : list of Unit
            the units that were added
        """
        units = self.annotate(doc)
        doc.add_units(units)
        return units

    def _mk_unit(self, idx, gram):
        "an output unit for a generated n-gram"
        return Unit('%s_%d' % (self.output_type, idx),
                    gram.span(),
                    self.output_type,
                    {self.output_feature: gram.value})
