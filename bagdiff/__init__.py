# Copyright Red Hat
#
# bagdiff/__init__.py - Multiset difference package initialisation
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Bagdiff top-level package.

Provides multiset (bag) difference of two sequences under a pluggable,
possibly asymmetric, comparison strategy. The main entry points are
``MultisetDiff`` and ``multiset_diff()``.
"""
from ._bagdiff import *  # noqa: F401, F403
from ._bagdiff import __all__ as _bagdiff_all
from .diff import DiffResult, MultisetDiff, multiset_diff
from .options import DiffOptions
from .strategy import (
    AttributeComparisonStrategy,
    ComparatorBasedComparisonStrategy,
    ComparisonStrategy,
    KeyComparisonStrategy,
    StandardComparisonStrategy,
    ToleranceComparisonStrategy,
)

__version__ = "0.1.0"

__all__ = _bagdiff_all + [
    "AttributeComparisonStrategy",
    "ComparatorBasedComparisonStrategy",
    "ComparisonStrategy",
    "DiffOptions",
    "DiffResult",
    "KeyComparisonStrategy",
    "MultisetDiff",
    "StandardComparisonStrategy",
    "ToleranceComparisonStrategy",
    "multiset_diff",
]
