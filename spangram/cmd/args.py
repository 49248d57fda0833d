# Author: spangram developers
# License: BSD3

"""
Command line options shared by the subcommands
"""

import sys

from spangram.lattice import (GenerationConfig, InvalidConfigError,
                              add_generation_args)
from spangram.ngram import NGramAnnotator


def add_annotator_args(parser):
    """
    Augment an argparser with flags for picking the units to combine
    and how to combine them
    """
    parser.add_argument('--input-type', default='token', metavar='TYPE',
                        help='type of units to combine '
                        '(default: %(default)s)')
    parser.add_argument('--feature', default='label', metavar='NAME',
                        help='feature holding the value of each unit '
                        '(default: %(default)s)')
    parser.add_argument('--output-type', default='ngram', metavar='TYPE',
                        help='type of the generated units '
                        '(default: %(default)s)')
    parser.add_argument('--scope-type', metavar='TYPE',
                        help='generate n-grams within each unit of this '
                        'type (eg. sentence)')
    gen_group = parser.add_argument_group('n-gram generation arguments')
    add_generation_args(gen_group)
    parser.add_argument('--verbose', '-v', action='count',
                        default=1)
    parser.add_argument('--quiet', '-q', action='store_const',
                        const=0,
                        dest='verbose')


def mk_annotator(args):
    """
    Build an annotator from the command line, exiting with a message
    if the configuration makes no sense
    """
    try:
        return NGramAnnotator(args.input_type,
                              args.output_type,
                              input_feature=args.feature,
                              output_feature=args.feature,
                              scope_type=args.scope_type,
                              config=GenerationConfig.from_args(args))
    except InvalidConfigError as oops:
        sys.exit("Invalid configuration: %s" % oops)
