# -*- coding: utf-8 -*-
#
# Author: spangram developers
# License: BSD3
# pylint: disable=too-many-public-methods, invalid-name

"""
Tests for spangram
"""

import argparse
import codecs
import os
import unittest

import pytest

from spangram.annotation import Document, Span, Unit
from spangram.batch import (Batch, BatchState, BatchStateError,
                            NGramCounter)
from spangram.cmd import count as count_cmd
from spangram.cmd import expand as expand_cmd
from spangram.lattice import (Box, Gram, GenerationConfig,
                              InvalidConfigError,
                              box_grams, unbox,
                              expand_contiguous, expand_windowed,
                              generate)
from spangram.ngram import NGramAnnotator
from spangram.standoff_format import (StandoffFormatError,
                                      format_unit, load_document)


def collect(expander, boxes, config):
    "run an expander, returning what it emits as a list"
    res = []
    expander(boxes, config, res.append)
    return res


def mk_grams(*triples):
    ":: [(int, int, string)] -> [Gram]"
    return [Gram(*t) for t in triples]


# ---------------------------------------------------------------------
# spans
# ---------------------------------------------------------------------


class SpanTest(unittest.TestCase):
    "tests for spangram.annotation.Span"

    def test_encloses(self):
        "Span.encloses() function"
        self.assertTrue(Span(0, 5).encloses(Span(0, 5)))
        self.assertTrue(Span(0, 5).encloses(Span(2, 2)))
        self.assertFalse(Span(0, 5).encloses(Span(4, 6)))
        self.assertFalse(Span(0, 5).encloses(None))

    def test_ordering(self):
        "spans sort by start, then end"
        spans = [Span(3, 4), Span(0, 5), Span(0, 2)]
        self.assertEqual([Span(0, 2), Span(0, 5), Span(3, 4)],
                         sorted(spans))


# ---------------------------------------------------------------------
# boxing
# ---------------------------------------------------------------------


class BoxTest(unittest.TestCase):
    "tests for spangram.lattice.box_grams"

    def test_empty(self):
        self.assertEqual([], box_grams([]))

    def test_same_span(self):
        grams = mk_grams((0, 3, 'the'), (0, 3, 'DET'), (4, 7, 'cat'))
        self.assertEqual([Box(0, 3, ('the', 'DET')),
                          Box(4, 7, ('cat',))],
                         box_grams(grams))

    def test_same_start_different_end(self):
        grams = mk_grams((0, 3, 'a'), (0, 7, 'b'))
        self.assertEqual([Box(0, 3, ('a',)), Box(0, 7, ('b',))],
                         box_grams(grams))

    def test_zero_width(self):
        grams = mk_grams((3, 3, 'x'), (3, 3, 'y'))
        self.assertEqual([Box(3, 3, ('x', 'y'))], box_grams(grams))

    def test_unsorted_input(self):
        "only adjacent grams are grouped together"
        grams = mk_grams((0, 1, 'a'), (1, 2, 'b'), (0, 1, 'c'))
        self.assertEqual(3, len(box_grams(grams)))

    def test_idempotent(self):
        "reboxing flattened boxes gives the same boxes"
        grams = mk_grams((0, 1, 'A'), (0, 1, 'a'), (0, 4, 'AB'),
                         (1, 2, 'B'), (2, 2, ''), (2, 3, 'C'))
        boxes = box_grams(grams)
        self.assertEqual(grams, unbox(boxes))
        self.assertEqual(boxes, box_grams(unbox(boxes)))


# ---------------------------------------------------------------------
# configuration
# ---------------------------------------------------------------------


class ConfigTest(unittest.TestCase):
    "tests for spangram.lattice.GenerationConfig"

    def test_defaults(self):
        config = GenerationConfig()
        self.assertEqual(2, config.order)
        self.assertEqual(-1, config.window)
        self.assertEqual('_', config.separator)
        self.assertFalse(config.emit_intermediate)
        self.assertFalse(config.is_windowed)

    def test_windowed(self):
        self.assertTrue(GenerationConfig(window=1).is_windowed)

    def test_invalid(self):
        bad = [dict(order=0),
               dict(order=-1),
               dict(window=0),
               dict(window=-2),
               dict(order='2'),
               dict(order=True),
               dict(window=2.0),
               dict(separator=None)]
        for kwargs in bad:
            self.assertRaises(InvalidConfigError, GenerationConfig,
                              **kwargs)

    def test_invalid_is_value_error(self):
        self.assertRaises(ValueError, GenerationConfig, order=0)

    def test_from_args(self):
        args = argparse.Namespace(order=3, window=-1, separator='+',
                                  intermediate=True)
        config = GenerationConfig.from_args(args)
        self.assertEqual(3, config.order)
        self.assertEqual('+', config.separator)
        self.assertTrue(config.emit_intermediate)


# ---------------------------------------------------------------------
# contiguous n-grams
# ---------------------------------------------------------------------


class ContiguousTest(unittest.TestCase):
    "tests for spangram.lattice.expand_contiguous"

    boxes = [Box(0, 1, ('A',)), Box(1, 2, ('B', 'C'))]

    def test_max_order_only(self):
        config = GenerationConfig(order=2)
        self.assertEqual(mk_grams((0, 2, 'A_B'), (0, 2, 'A_C')),
                         collect(expand_contiguous, self.boxes, config))

    def test_unigrams(self):
        config = GenerationConfig(order=1, emit_intermediate=True)
        self.assertEqual(mk_grams((0, 1, 'A'), (1, 2, 'B'), (1, 2, 'C')),
                         collect(expand_contiguous, self.boxes, config))

    def test_order_one_needs_intermediate(self):
        "order 1 without intermediates emits nothing: z never reaches 1"
        config = GenerationConfig(order=1)
        self.assertEqual([], collect(expand_contiguous, self.boxes, config))

    def test_intermediate(self):
        boxes = box_grams(mk_grams((0, 1, 'a'), (1, 2, 'b'), (2, 3, 'c')))
        config = GenerationConfig(order=3, emit_intermediate=True)
        expected = mk_grams((0, 1, 'a'), (0, 2, 'a_b'), (0, 3, 'a_b_c'),
                            (1, 2, 'b'), (1, 3, 'b_c'),
                            (2, 3, 'c'))
        self.assertEqual(expected,
                         collect(expand_contiguous, boxes, config))

    def test_singleton_boxes(self):
        "one n-gram of each order per start position"
        values = ['w%d' % i for i in range(5)]
        boxes = [Box(i, i + 1, (v,)) for i, v in enumerate(values)]
        for k in range(1, 6):
            config = GenerationConfig(order=k, emit_intermediate=True)
            res = [g for g in collect(expand_contiguous, boxes, config)
                   if g.char_start == 0]
            self.assertEqual(k, len(res))
            self.assertEqual('_'.join(values[:k]), res[-1].value)
            config = GenerationConfig(order=k, separator=' ')
            res = [g for g in collect(expand_contiguous, boxes, config)
                   if g.char_start == 0]
            expected = [' '.join(values[:k])] if k > 1 else []
            self.assertEqual(expected, [g.value for g in res])

    def test_combinatorial_count(self):
        "n-grams at depth z are the product of the box sizes"
        boxes = [Box(0, 1, ('a1', 'a2')),
                 Box(1, 2, ('b1', 'b2', 'b3')),
                 Box(2, 3, ('c1', 'c2'))]
        config = GenerationConfig(order=3)
        self.assertEqual(12, len(collect(expand_contiguous, boxes, config)))
        config = GenerationConfig(order=3, emit_intermediate=True)
        res = collect(expand_contiguous, boxes, config)
        self.assertEqual((2 + 6 + 12) + (3 + 6) + 2, len(res))
        from_start = [g for g in res if g.char_start == 0]
        depths = [g.value.count('_') for g in from_start]
        self.assertEqual([2, 6, 12], [depths.count(z) for z in range(3)])

    def test_value_order(self):
        "combinations follow box order, then chain order"
        boxes = [Box(0, 1, ('a1', 'a2')), Box(1, 2, ('b1', 'b2'))]
        config = GenerationConfig(order=2)
        self.assertEqual(['a1_b1', 'a2_b1', 'a1_b2', 'a2_b2'],
                         [g.value for g in
                          collect(expand_contiguous, boxes, config)])

    def test_hi_end(self):
        "n-grams stretch to the farthest end seen so far"
        grams = mk_grams((0, 5, 'X'), (1, 2, 'Y'), (2, 3, 'Z'))
        config = GenerationConfig(order=3, emit_intermediate=True)
        expected = mk_grams((0, 5, 'X'), (0, 5, 'X_Y'), (0, 5, 'X_Y_Z'),
                            (1, 2, 'Y'), (1, 3, 'Y_Z'),
                            (2, 3, 'Z'))
        self.assertEqual(expected,
                         collect(expand_contiguous, box_grams(grams),
                                 config))

    def test_end_non_decreasing(self):
        grams = mk_grams((0, 2, 'a'), (0, 2, 'b'), (1, 4, 'c'),
                         (3, 3, 'd'), (3, 6, 'e'), (5, 6, 'f'))
        boxes = box_grams(grams)
        config = GenerationConfig(order=4, emit_intermediate=True)
        for b, box in enumerate(boxes):
            # chains from b are emitted before those from any later box
            here = collect(expand_contiguous, boxes[b:], config)
            later = collect(expand_contiguous, boxes[b + 1:], config)
            from_b = here[:len(here) - len(later)]
            self.assertTrue(from_b)
            self.assertTrue(all(g.char_start == box.char_start
                                for g in from_b))
            ends = [g.char_end for g in from_b]
            self.assertEqual(sorted(ends), ends)
            self.assertTrue(all(e >= box.char_end for e in ends))

    def test_shared_start(self):
        "boxes with the same start but different ends chain separately"
        grams = mk_grams((3, 3, 'd'), (3, 6, 'e'))
        config = GenerationConfig(order=2, emit_intermediate=True)
        self.assertEqual(mk_grams((3, 3, 'd'), (3, 6, 'd_e'),
                                  (3, 6, 'e')),
                         collect(expand_contiguous, box_grams(grams),
                                 config))

    def test_empty_box(self):
        "a box without values stops chains from crossing it"
        boxes = [Box(0, 1, ('A',)), Box(1, 2, ()), Box(2, 3, ('C',))]
        config = GenerationConfig(order=3, emit_intermediate=True)
        self.assertEqual(mk_grams((0, 1, 'A'), (2, 3, 'C')),
                         collect(expand_contiguous, boxes, config))

    def test_empty(self):
        config = GenerationConfig(order=3, emit_intermediate=True)
        self.assertEqual([], collect(expand_contiguous, [], config))


# ---------------------------------------------------------------------
# windowed n-grams
# ---------------------------------------------------------------------


class WindowedTest(unittest.TestCase):
    "tests for spangram.lattice.expand_windowed"

    boxes = box_grams(mk_grams((0, 1, 'A'), (1, 2, 'B'), (2, 3, 'C')))

    def test_window(self):
        config = GenerationConfig(window=3, emit_intermediate=True)
        expected = mk_grams((0, 1, 'A'), (0, 2, 'A_B'), (0, 3, 'A_C'),
                            (1, 2, 'B'), (1, 3, 'B_C'),
                            (2, 3, 'C'))
        self.assertEqual(expected,
                         collect(expand_windowed, self.boxes, config))

    def test_pairs_always_emitted(self):
        config = GenerationConfig(window=3)
        self.assertEqual(['A_B', 'A_C', 'B_C'],
                         [g.value for g in
                          collect(expand_windowed, self.boxes, config)])

    def test_window_one(self):
        "a window of 1 has no room for pairs"
        config = GenerationConfig(window=1)
        self.assertEqual([], collect(expand_windowed, self.boxes, config))
        config = GenerationConfig(window=1, emit_intermediate=True)
        self.assertEqual(['A', 'B', 'C'],
                         [g.value for g in
                          collect(expand_windowed, self.boxes, config)])

    def test_pairs_only(self):
        "order plays no part in windowed mode"
        config = GenerationConfig(order=5, window=3)
        res = collect(expand_windowed, self.boxes, config)
        self.assertTrue(all(g.value.count('_') == 1 for g in res))

    def test_counts_and_nesting(self):
        boxes = [Box(0, 1, ('a1', 'a2')),
                 Box(1, 2, ('b1', 'b2', 'b3')),
                 Box(2, 3, ('c1',))]
        config = GenerationConfig(window=2)
        res = collect(expand_windowed, boxes, config)
        self.assertEqual(2 * 3 + 3 * 1, len(res))
        self.assertEqual(['a1_b1', 'a2_b1', 'a1_b2', 'a2_b2',
                          'a1_b3', 'a2_b3'],
                         [g.value for g in res[:6]])

    def test_unigram_keeps_own_span(self):
        grams = mk_grams((0, 1, 'A'), (0, 1, 'a'), (1, 5, 'B'))
        config = GenerationConfig(window=2, emit_intermediate=True)
        res = collect(expand_windowed, box_grams(grams), config)
        self.assertEqual(mk_grams((0, 1, 'A'), (0, 1, 'a'),
                                  (0, 5, 'A_B'), (0, 5, 'a_B'),
                                  (1, 5, 'B')),
                         res)

    def test_empty(self):
        config = GenerationConfig(window=3, emit_intermediate=True)
        self.assertEqual([], collect(expand_windowed, [], config))


# ---------------------------------------------------------------------
# mode selection
# ---------------------------------------------------------------------


class GenerateTest(unittest.TestCase):
    "tests for spangram.lattice.generate"

    grams = mk_grams((0, 1, 'A'), (1, 2, 'B'), (2, 3, 'C'))

    def test_contiguous(self):
        res = generate(self.grams, GenerationConfig(order=2))
        self.assertEqual(['A_B', 'B_C'], [g.value for g in res])

    def test_windowed(self):
        res = generate(self.grams, GenerationConfig(order=2, window=3))
        self.assertEqual(['A_B', 'A_C', 'B_C'], [g.value for g in res])

    def test_scope(self):
        res = generate(self.grams, GenerationConfig(order=2),
                       scope=Span(0, 2))
        self.assertEqual(mk_grams((0, 2, 'A_B')), res)

    def test_emit_callback(self):
        seen = []
        res = generate(self.grams, GenerationConfig(order=2),
                       emit=seen.append)
        self.assertEqual(res, seen)

    def test_empty(self):
        for config in [GenerationConfig(order=3, emit_intermediate=True),
                       GenerationConfig(window=3, emit_intermediate=True)]:
            self.assertEqual([], generate([], config))
            self.assertEqual([], generate(self.grams, config,
                                          scope=Span(10, 20)))


# ---------------------------------------------------------------------
# documents
# ---------------------------------------------------------------------


def mk_doc(origin=None):
    """
    Two sentences, the first with an overlapping POS tag and a
    token with no label
    """
    units = [Unit('t1', Span(0, 3), 'token', {'label': 'the'}),
             Unit('t2', Span(0, 3), 'token', {'label': 'DET'}),
             Unit('t3', Span(4, 7), 'token', {'label': 'cat'}),
             Unit('t4', Span(8, 11), 'token', {'label': 'sat'}),
             Unit('t5', Span(12, 13), 'token', {'label': 'a'}),
             Unit('s1', Span(0, 11), 'sentence', {}),
             Unit('s2', Span(12, 13), 'sentence', {})]
    return Document(units, origin=origin)


class AnnotatorTest(unittest.TestCase):
    "tests for spangram.ngram.NGramAnnotator"

    def test_whole_document(self):
        doc = mk_doc()
        annotator = NGramAnnotator('token', 'ngram')
        units = annotator.annotate(doc)
        self.assertEqual(['the_cat', 'DET_cat', 'cat_sat', 'sat_a'],
                         [u.features['label'] for u in units])
        self.assertEqual([Span(0, 7), Span(0, 7), Span(4, 11),
                          Span(8, 13)],
                         [u.span for u in units])
        self.assertTrue(all(u.type == 'ngram' for u in units))
        # the document is left alone
        self.assertEqual(7, len(doc.units))

    def test_scope(self):
        doc = mk_doc()
        annotator = NGramAnnotator('token', 'ngram', scope_type='sentence')
        units = annotator.annotate(doc)
        self.assertEqual(['the_cat', 'DET_cat', 'cat_sat'],
                         [u.features['label'] for u in units])

    def test_output_feature_and_ids(self):
        doc = mk_doc()
        annotator = NGramAnnotator('token', 'bigram',
                                   output_feature='string',
                                   scope_type='sentence')
        units = annotator.annotate(doc)
        self.assertEqual(['bigram_7', 'bigram_8', 'bigram_9'],
                         [u.local_id() for u in units])
        self.assertEqual('the_cat', units[0].features['string'])

    def test_missing_feature(self):
        doc = mk_doc()
        doc.add_units([Unit('t6', Span(8, 11), 'token', {'pos': 'V'})])
        annotator = NGramAnnotator('token', 'ngram')
        with self.assertWarns(UserWarning):
            units = annotator.annotate(doc)
        self.assertEqual(['the_cat', 'DET_cat', 'cat_sat', 'sat_a'],
                         [u.features['label'] for u in units])

    def test_missing_feature_blames_caller(self):
        "the warning points at the code asking for the grams"
        units = [Unit('t1', Span(0, 3), 'token', {'pos': 'DET'})]
        annotator = NGramAnnotator('token', 'ngram')
        with self.assertWarns(UserWarning) as cm:
            grams = annotator.extract_grams(units)
        self.assertEqual([], grams)
        self.assertEqual(os.path.basename(__file__),
                         os.path.basename(cm.filename))

    def test_no_input(self):
        doc = mk_doc()
        annotator = NGramAnnotator('word', 'ngram')
        self.assertEqual([], annotator.annotate(doc))

    def test_process(self):
        doc = mk_doc(origin='d1')
        annotator = NGramAnnotator('token', 'ngram',
                                   config=GenerationConfig(window=2))
        units = annotator.process(doc)
        self.assertEqual(7 + len(units), len(doc.units))
        self.assertEqual(units, doc.units_of_type('ngram'))
        self.assertEqual('d1_ngram_7', units[0].identifier())

    def test_invalid(self):
        self.assertRaises(InvalidConfigError, NGramAnnotator, '', 'ngram')
        self.assertRaises(InvalidConfigError, NGramAnnotator, 'token', None)


# ---------------------------------------------------------------------
# batches
# ---------------------------------------------------------------------


def tokens_doc(origin, labels):
    "a document of consecutive one-character tokens"
    units = [Unit('t%d' % i, Span(i, i + 1), 'token', {'label': l})
             for i, l in enumerate(labels)]
    return Document(units, origin=origin)


class BatchTest(unittest.TestCase):
    "tests for spangram.batch"

    def setUp(self):
        self.annotator = NGramAnnotator('token', 'ngram')

    def test_lifecycle(self):
        batch = Batch(self.annotator, NGramCounter())
        self.assertEqual(BatchState.idle, batch.state)
        self.assertRaises(BatchStateError, batch.feed, 'd1',
                          tokens_doc('d1', 'ab'))
        self.assertRaises(BatchStateError, batch.close)
        batch.open()
        self.assertEqual(BatchState.open, batch.state)
        self.assertRaises(BatchStateError, batch.open)
        units = batch.feed('d1', tokens_doc('d1', 'ab'))
        self.assertEqual(['a_b'], [u.features['label'] for u in units])
        batch.close()
        self.assertEqual(BatchState.closed, batch.state)
        self.assertRaises(BatchStateError, batch.feed, 'd2',
                          tokens_doc('d2', 'ab'))
        self.assertRaises(BatchStateError, batch.open)

    def test_closing_state(self):
        "the sink is closed while the batch is closing"
        annotator = self.annotator

        class Sink(object):
            "remembers the batch state when closed"
            def __init__(self):
                self.batch = None
                self.seen = None

            def open(self):
                pass

            def consume(self, key, units):
                pass

            def close(self):
                self.seen = self.batch.state
                return 'done'

        sink = Sink()
        batch = Batch(annotator, sink)
        sink.batch = batch
        batch.open()
        self.assertEqual('done', batch.close())
        self.assertEqual(BatchState.closing, sink.seen)

    def test_counter(self):
        counter = NGramCounter()
        with Batch(self.annotator, counter) as batch:
            batch.feed('d1', tokens_doc('d1', 'ab'))
            batch.feed('d2', tokens_doc('d2', 'abc'))
        self.assertEqual(BatchState.closed, batch.state)
        self.assertEqual({'a_b': 2, 'b_c': 1}, dict(counter.counts()))
        frame = counter.frame()
        self.assertEqual(['ngram', 'count', 'documents'],
                         list(frame.columns))
        self.assertEqual(['a_b', 'b_c'], frame['ngram'].tolist())
        self.assertEqual([2, 1], frame['count'].tolist())
        self.assertEqual([2, 1], frame['documents'].tolist())

    def test_counter_empty(self):
        batch = Batch(self.annotator, NGramCounter())
        batch.open()
        frame = batch.close()
        self.assertEqual(0, len(frame))

    def test_closed_on_error(self):
        "leaving the with block on an exception still closes the batch"
        with self.assertRaises(StandoffFormatError):
            with Batch(self.annotator, NGramCounter()) as batch:
                batch.feed('d1', tokens_doc('d1', 'ab'))
                raise StandoffFormatError('line 1: oops')
        self.assertEqual(BatchState.closed, batch.state)


# ---------------------------------------------------------------------
# standoff files and commands
# ---------------------------------------------------------------------


STANDOFF = u"""# a small example
token\t0\t3\tlabel=the
token\t0\t3\tlabel=DET
token\t4\t7\tlabel=cat

sentence\t0\t7
"""


def write_file(path, content):
    "write a UTF-8 text file, returning its path as a string"
    with codecs.open(str(path), 'w', 'utf-8') as f:
        f.write(content)
    return str(path)


def test_load_document(tmp_path):
    path = write_file(tmp_path / 'doc1.tsv', STANDOFF)
    doc = load_document(path)
    assert doc.origin == 'doc1'
    assert len(doc.units) == 4
    tokens = doc.units_of_type('token')
    assert [u.features['label'] for u in tokens] == ['the', 'DET', 'cat']
    assert tokens[0].local_id() == 'u2'
    assert doc.units_of_type('sentence')[0].span == Span(0, 7)


def test_load_document_errors(tmp_path):
    bad = [u'token\t0\n',
           u'token\tzero\t3\n',
           u'token\t0\t3\tlabel\n']
    for i, content in enumerate(bad):
        path = write_file(tmp_path / ('bad%d.tsv' % i), content)
        with pytest.raises(StandoffFormatError):
            load_document(path)


def test_format_unit():
    unit = Unit('x', Span(0, 7), 'ngram', {'label': 'the_cat'})
    assert format_unit(unit) == u'ngram\t0\t7\tlabel=the_cat'


def run_cmd(module, argv):
    "parse the arguments for a subcommand and run it"
    psr = argparse.ArgumentParser()
    module.config_argparser(psr)
    args = psr.parse_args(argv)
    args.func(args)


def test_cmd_expand(tmp_path, capsys):
    path = write_file(tmp_path / 'doc1.tsv', STANDOFF)
    run_cmd(expand_cmd, [path, '--tsv'])
    out = capsys.readouterr().out
    assert out.splitlines() == ['ngram\t0\t7\tlabel=the_cat',
                                'ngram\t0\t7\tlabel=DET_cat']
    run_cmd(expand_cmd, [path, '--intermediate', '--separator', ' '])
    out = capsys.readouterr().out
    assert 'the cat' in out
    assert 'ngram' in out.splitlines()[0]


def test_cmd_expand_invalid(tmp_path):
    path = write_file(tmp_path / 'doc1.tsv', STANDOFF)
    with pytest.raises(SystemExit):
        run_cmd(expand_cmd, [path, '--order', '0'])


def test_cmd_count(tmp_path, capsys):
    path1 = write_file(tmp_path / 'doc1.tsv', STANDOFF)
    path2 = write_file(tmp_path / 'doc2.tsv',
                       u'token\t0\t3\tlabel=the\ntoken\t4\t7\tlabel=cat\n')
    run_cmd(count_cmd, [path1, path2, '--top', '1'])
    lines = capsys.readouterr().out.splitlines()
    assert 'ngram' in lines[0]
    assert len(lines) == 3
    assert 'the_cat' in lines[2]
    assert os.path.exists(path1)


def test_cmd_count_bad_file(tmp_path, capsys):
    path1 = write_file(tmp_path / 'doc1.tsv', STANDOFF)
    path2 = write_file(tmp_path / 'doc2.tsv', u'token\t0\n')
    with pytest.raises(StandoffFormatError):
        run_cmd(count_cmd, [path1, path2])
    assert capsys.readouterr().out == ''
