# Author: spangram developers
# License: BSD3

"""Generate n-grams for a single document

Reads a standoff file (one unit per line: type, start, end, then
key=value features) and prints the n-grams it gives rise to.
"""

from tabulate import tabulate

from spangram.standoff_format import (format_unit, load_document)
from spangram.util import announce

from .args import (add_annotator_args, mk_annotator)


NAME = 'expand'


def config_argparser(psr):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    psr.add_argument('input', metavar='FILE', help='standoff file')
    psr.add_argument('--tsv', action='store_true',
                     help='print n-grams as standoff lines, not a table')
    add_annotator_args(psr)
    psr.set_defaults(func=main)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    annotator = mk_annotator(args)
    announce(args, 'reading %s' % args.input)
    doc = load_document(args.input)
    units = annotator.annotate(doc)
    announce(args, '%d n-grams' % len(units))
    if args.tsv:
        for unit in units:
            print(format_unit(unit, annotator.output_feature))
    elif units:
        rows = [(u.span.char_start, u.span.char_end,
                 u.features[annotator.output_feature])
                for u in units]
        print(tabulate(rows, headers=['start', 'end', 'ngram']))
