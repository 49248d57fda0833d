"""
spangram-util subcommands
"""

# Author: spangram developers
# License: BSD3

from . import (count,
               expand)

SUBCOMMAND_SECTIONS = [
    ('Generation', [
        expand,
    ]),
    ('Querying', [
        count,
    ]),
]

SUBCOMMANDS = []
for descr, section in SUBCOMMAND_SECTIONS:
    SUBCOMMANDS.extend(section)
