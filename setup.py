"""
spangram setup: spangram is a library for generating n-grams over
lattices of overlapping text annotations
"""

from setuptools import setup, find_packages
import glob
import os

REQS = [
    'frozendict',
    'tabulate',
    'pandas >= 0.17',
]


setup(name='spangram',
      version='0.3',
      author='spangram developers',
      packages=find_packages(),
      scripts=[f for f in glob.glob('scripts/*') if not os.path.isdir(f)],
      install_requires=REQS,
      extras_require={'test': ['pytest']})
