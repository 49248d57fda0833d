# Author: spangram developers
# License: BSD3

"""Count n-grams over a set of documents

Each file is read as one document; the counts are over the whole batch.
"""

from tabulate import tabulate

from spangram.batch import (Batch, NGramCounter)
from spangram.standoff_format import load_document
from spangram.util import announce

from .args import (add_annotator_args, mk_annotator)


NAME = 'count'


def config_argparser(psr):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    psr.add_argument('inputs', metavar='FILE', nargs='+',
                     help='standoff files')
    psr.add_argument('--top', type=int, metavar='N',
                     help='only show the N most frequent n-grams')
    add_annotator_args(psr)
    psr.set_defaults(func=main)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    annotator = mk_annotator(args)
    counter = NGramCounter(annotator.output_feature)
    with Batch(annotator, counter) as batch:
        for path in args.inputs:
            announce(args, 'reading %s' % path)
            batch.feed(path, load_document(path))
    counts = counter.frame()
    if args.top is not None:
        counts = counts.head(args.top)
    print(tabulate(counts, headers='keys', showindex=False))
