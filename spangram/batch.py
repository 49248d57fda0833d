"""
Running an annotator over a batch of documents.

Some consumers of n-grams need to know when a batch starts and when it
ends (eg. to set up and then flush a training corpus). Rather than
guess this from the position of each document in the corpus, the
batch is an explicit state machine ::

    idle --open()--> open --close()--> closing --> closed

Documents may only be fed while the batch is open.
"""

# Author: spangram developers
# License: BSD3

from collections import Counter, defaultdict
from enum import Enum

import pandas as pd


class BatchState(Enum):
    """
    Where a batch is in its lifecycle
    """
    idle = 1
    open = 2
    closing = 3
    closed = 4


class BatchStateError(Exception):
    """
    Raised on an illegal batch transition (eg. feeding a closed batch)
    """
    def __init__(self, state, action):
        msg = "Can't %s a batch that is %s" % (action, state.name)
        super(BatchStateError, self).__init__(msg)
        self.state = state
        self.action = action


class Batch(object):
    """
    Feed documents through an annotator, passing the new units on
    to a sink.

    The sink must provide three methods:

    * `open()`: called once, before the first document
    * `consume(key, units)`: called once per document
    * `close()`: called once, after the last document; whatever it
      returns is returned by `Batch.close`

    Parameters
    ----------
    annotator : spangram.ngram.NGramAnnotator
    sink : object
    """
    def __init__(self, annotator, sink):
        self.annotator = annotator
        self.sink = sink
        self.state = BatchState.idle

    def _check(self, expected, action):
        "complain unless we are in the expected state"
        if self.state is not expected:
            raise BatchStateError(self.state, action)

    def open(self):
        "start the batch"
        self._check(BatchState.idle, 'open')
        self.sink.open()
        self.state = BatchState.open

    def feed(self, key, doc):
        """
        Annotate a document (without modifying it) and hand the
        results to the sink

        Returns
        -------
        units : list of Unit
        """
        self._check(BatchState.open, 'feed')
        units = self.annotator.annotate(doc)
        self.sink.consume(key, units)
        return units

    def close(self):
        "finish the batch, returning whatever the sink has to say"
        self._check(BatchState.open, 'close')
        self.state = BatchState.closing
        res = self.sink.close()
        self.state = BatchState.closed
        return res

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self.state is BatchState.open:
            self.close()
        return False


class NGramCounter(object):
    """
    A batch sink that counts how often each n-gram occurs, and in how
    many documents

    Parameters
    ----------
    feature : string
        feature of the incoming units that holds the n-gram text
    """
    def __init__(self, feature='label'):
        self.feature = feature
        self._counts = Counter()
        self._docs = defaultdict(set)

    def open(self):
        "reset the counts"
        self._counts = Counter()
        self._docs = defaultdict(set)

    def consume(self, key, units):
        "count the n-grams in a document"
        for unit in units:
            ngram = unit.features[self.feature]
            self._counts[ngram] += 1
            self._docs[ngram].add(key)

    def close(self):
        "the counts so far, as a frame"
        return self.frame()

    def counts(self):
        "n-gram to number of occurrences"
        return Counter(self._counts)

    def frame(self):
        """
        Counts as a pandas DataFrame with columns `ngram`, `count`
        and `documents`, most frequent first (ties by n-gram)
        """
        rows = [(ngram, count, len(self._docs[ngram]))
                for ngram, count in self._counts.items()]
        df = pd.DataFrame(rows, columns=['ngram', 'count', 'documents'])
        df = df.sort_values(by=['count', 'ngram'],
                            ascending=[False, True])
        return df.reset_index(drop=True)
