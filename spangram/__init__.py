"""
The spangram library generates n-grams over annotated text where
annotations may overlap, eg. when a token carries its word form, its
part of speech and a semantic class all at once.

It has two layers:

* lattice (spangram.lattice): the n-gram generator proper, working on
  plain `Gram` values (offsets plus a string). Values sharing the same
  offsets are grouped into boxes, and the sequence of boxes is expanded
  either into contiguous n-grams up to some order, or into skip-bigrams
  within some window.

* annotation (spangram.annotation, spangram.ngram, spangram.batch): a
  small document model and the glue that reads values off its units,
  runs the generator (optionally within scope units such as sentences)
  and makes new units out of the results, one document or a whole
  batch at a time ::

        batch -> ngram -> lattice
                   |
                   v
               annotation

A command line tool (`spangram-util`) is provided on top for quick
experiments on standoff files.
"""
