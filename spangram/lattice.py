"""
N-grams over a lattice of overlapping spans.

Plain n-gram extraction assumes one value per position. Here a position
may carry several alternative values (eg. a word form, its POS tag and a
semantic class all sitting on the same token), so we first group the
values that share exactly the same offsets into *boxes* and then walk
the sequence of boxes, combining every value of a box with every value
of its neighbours.

Two modes are supported:

* contiguous: chains of up to `order` adjacent boxes
  (`expand_contiguous`)
* windowed: pairs of boxes at most `window - 1` boxes apart, ie.
  skip-bigrams (`expand_windowed`)

Each combination is emitted as a `Gram` stretching from the start of
its first box to the farthest end seen so far.
"""

# Author: spangram developers
# License: BSD3

from collections import namedtuple

from .annotation import Span


class InvalidConfigError(ValueError):
    """
    Raised when n-gram generation is asked for something that makes
    no sense (eg. order 0)
    """
    pass


class Gram(namedtuple("Gram", "char_start char_end value")):
    """
    A string value over a text span.

    This is both what the lattice consumes (one value read off some
    annotation) and what it produces (a combination of such values)
    """
    def span(self):
        "the offsets of this gram as a `Span`"
        return Span(self.char_start, self.char_end)


class Box(namedtuple("Box", "char_start char_end values")):
    """
    All the values found at exactly the same offsets, in the order
    we encountered them
    """
    pass


def box_grams(grams):
    """
    Group a sequence of grams into boxes of grams with the same
    start and end.

    The grams must be sorted by start and then end; we only ever compare
    a gram with its predecessor. Unsorted input is not an error, but
    equal spans that are not adjacent will land in separate boxes.

    Parameters
    ----------
    grams : iterable of Gram

    Returns
    -------
    boxes : list of Box
    """
    boxes = []
    current = None
    for gram in grams:
        if current is None or\
                (gram.char_start, gram.char_end) != current[:2]:
            current = (gram.char_start, gram.char_end, [])
            boxes.append(current)
        current[2].append(gram.value)
    return [Box(start, end, tuple(values)) for start, end, values in boxes]


def unbox(boxes):
    """
    Flatten boxes back into a list of grams (inverse of `box_grams`)
    """
    return [Gram(box.char_start, box.char_end, value)
            for box in boxes
            for value in box.values]


class GenerationConfig(object):
    """
    How many and which combinations to generate.

    Parameters
    ----------
    order : int
        maximum number of boxes chained together (contiguous mode)
    window : int
        -1 for contiguous mode; otherwise the maximum distance (in
        boxes, plus one) between the two members of a skip-bigram
    separator : string
        glue between the values of a combination
    emit_intermediate : bool
        in contiguous mode, also emit the combinations shorter than
        `order`; in windowed mode, also emit the single values

    Raises
    ------
    InvalidConfigError
        if any of the parameters are out of range
    """
    def __init__(self, order=2, window=-1, separator='_',
                 emit_intermediate=False):
        if isinstance(order, bool) or not isinstance(order, int):
            raise InvalidConfigError('order must be an integer, not %r' %
                                     (order,))
        if isinstance(window, bool) or not isinstance(window, int):
            raise InvalidConfigError('window must be an integer, not %r' %
                                     (window,))
        if order < 1:
            raise InvalidConfigError('order must be at least 1 (got %d)' %
                                     order)
        if window != -1 and window < 1:
            raise InvalidConfigError('window must be -1 (disabled) or at '
                                     'least 1 (got %d)' % window)
        if not isinstance(separator, str):
            raise InvalidConfigError('separator must be a string, not %r' %
                                     (separator,))
        self.order = order
        self.window = window
        self.separator = separator
        self.emit_intermediate = bool(emit_intermediate)

    def __repr__(self):
        return ('GenerationConfig(order=%d, window=%d, separator=%r, '
                'emit_intermediate=%r)' % (self.order, self.window,
                                           self.separator,
                                           self.emit_intermediate))

    @property
    def is_windowed(self):
        "True if we generate skip-bigrams rather than contiguous n-grams"
        return self.window != -1

    @classmethod
    def from_args(cls, args):
        """
        Build a config from command line arguments
        (see `add_generation_args`)
        """
        return cls(order=args.order,
                   window=args.window,
                   separator=args.separator,
                   emit_intermediate=args.intermediate)


def add_generation_args(parser):
    """
    Augment an argparser with flags for `GenerationConfig`
    """
    parser.add_argument('--order', '-n', type=int, default=2,
                        metavar='N',
                        help='max number of adjacent positions combined '
                        '(default: %(default)s)')
    parser.add_argument('--window', '-w', type=int, default=-1,
                        metavar='N',
                        help='generate skip-bigrams at most N-1 positions '
                        'apart instead of contiguous n-grams '
                        '(default: disabled)')
    parser.add_argument('--separator', default='_',
                        help='n-gram separator (default: %(default)s)')
    parser.add_argument('--intermediate', action='store_true',
                        help='also emit lower order n-grams')


def expand_contiguous(boxes, config, emit):
    """
    Emit the combinations of values over up to `config.order`
    adjacent boxes.

    For each start box, we grow a chain of partial combinations one box
    at a time, so after `z` steps the chain holds the product of the
    sizes of the boxes visited. The combinations of maximal order are
    always emitted; the shorter ones only if `config.emit_intermediate`.

    Parameters
    ----------
    boxes : list of Box
    config : GenerationConfig
    emit : Gram -> ()
        called once per combination, in generation order
    """
    sep = config.separator
    last = config.order - 1
    for b, first in enumerate(boxes):
        chain = []
        hi_end = None
        for z in range(min(config.order, len(boxes) - b)):
            box = boxes[b + z]
            if z > 0 and not chain:
                # an empty box cuts the chain short
                break
            next_chain = []
            for value in box.values:
                if hi_end is None or box.char_end > hi_end:
                    hi_end = box.char_end
                if z == 0:
                    if config.emit_intermediate:
                        emit(Gram(first.char_start, hi_end, value))
                    next_chain.append(value)
                    continue
                for existing in chain:
                    combined = existing + sep + value
                    if config.emit_intermediate or z == last:
                        emit(Gram(first.char_start, hi_end, combined))
                    next_chain.append(combined)
            chain = next_chain


def expand_windowed(boxes, config, emit):
    """
    Emit every pair of values whose boxes are less than `config.window`
    boxes apart (skip-bigrams).

    Only pairs are generated, whatever `config.order` says. The single
    values of each box are emitted (with their own span) if
    `config.emit_intermediate` is set; the pairs are always emitted.

    Parameters
    ----------
    boxes : list of Box
    config : GenerationConfig
    emit : Gram -> ()
    """
    sep = config.separator
    for b, head in enumerate(boxes):
        hi_end = head.char_end
        if config.emit_intermediate:
            for value in head.values:
                emit(Gram(head.char_start, head.char_end, value))
        for z in range(1, min(config.window, len(boxes) - b)):
            box = boxes[b + z]
            hi_end = max(hi_end, box.char_end)
            for value2 in box.values:
                for value1 in head.values:
                    emit(Gram(head.char_start, hi_end,
                              value1 + sep + value2))


def generate(grams, config, scope=None, emit=None):
    """
    Box the grams and expand them in whichever mode the config asks for.

    Parameters
    ----------
    grams : iterable of Gram
        sorted by start, then end
    config : GenerationConfig
    scope : Span, optional
        if set, only grams within this span are considered
    emit : Gram -> (), optional
        also called on each combination as it is generated

    Returns
    -------
    res : list of Gram
        combinations, in generation order (empty if there were
        no grams to start with)
    """
    if scope is not None:
        grams = [g for g in grams if scope.encloses(g.span())]
    boxes = box_grams(grams)
    res = []

    def _emit(gram):
        "collect and forward"
        res.append(gram)
        if emit is not None:
            emit(gram)

    if config.is_windowed:
        expand_windowed(boxes, config, _emit)
    else:
        expand_contiguous(boxes, config, _emit)
    return res
