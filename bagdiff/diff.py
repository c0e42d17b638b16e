# Copyright Red Hat
#
# bagdiff/diff.py - Multiset difference of two sequences
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Multiset difference of two sequences.

``MultisetDiff.compute()`` returns a ``DiffResult`` holding the elements of
*actual* not accounted for in *expected* (``unexpected``) and the elements
of *expected* not accounted for in *actual* (``missing``). Duplicates are
counted: each element consumes at most one matching element from the other
side. The comparison is not ordering aware; element order only determines
output order and which of several equal candidates is consumed.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import json

from ._bagdiff import BAGDIFF_SUBSYSTEM_DIFF
from .strategy import ComparisonStrategy, StandardComparisonStrategy

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

DIFF_LOG_ME_HARDER = False


def _log_debug_diff(msg, *args, **kwargs):
    """A wrapper for diff subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": BAGDIFF_SUBSYSTEM_DIFF}, **kwargs)


def _log_debug_diff_extra(msg, *args, **kwargs):
    """A wrapper for per-element diff subsystem debug logs."""
    if DIFF_LOG_ME_HARDER:  # pragma: no cover
        _log.debug(msg, *args, extra={"subsystem": BAGDIFF_SUBSYSTEM_DIFF}, **kwargs)


@dataclass(frozen=True)
class DiffResult:
    """
    Immutable result of a multiset difference.
    """

    #: Elements of actual with no match in expected, in actual order
    unexpected: Tuple[Any, ...] = ()
    #: Elements of expected with no match in actual, in expected order
    missing: Tuple[Any, ...] = ()

    def differences_found(self) -> bool:
        """
        Return ``True`` if either ``unexpected`` or ``missing`` is non-empty.

        :returns: Whether the compared sequences differ.
        :rtype: ``bool``
        """
        return bool(self.unexpected) or bool(self.missing)

    @property
    def has_differences(self) -> bool:
        """
        Property form of ``differences_found()``.
        """
        return self.differences_found()

    def __bool__(self) -> bool:
        return self.differences_found()

    def __str__(self) -> str:
        """
        Return a human readable string representation of this ``DiffResult``.

        :returns: A human readable string.
        :rtype: ``str``
        """

        def _join(values: Tuple[Any, ...]) -> str:
            return ", ".join(repr(value) for value in values)

        return (
            f"unexpected: [{_join(self.unexpected)}]\n"
            f"missing: [{_join(self.missing)}]"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``DiffResult`` object into a dictionary representation
        suitable for encoding as JSON.

        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        return {
            "unexpected": list(self.unexpected),
            "missing": list(self.missing),
            "differences_found": self.differences_found(),
        }

    def json(self, pretty: bool = False) -> str:
        """
        Return a JSON representation of this ``DiffResult``. Elements that
        are not natively encodable are represented by their ``repr()``.

        :param pretty: Indent the output for readability.
        :type pretty: ``bool``
        :returns: JSON string.
        :rtype: ``str``
        """
        return json.dumps(self.to_dict(), indent=4 if pretty else None, default=repr)


class MultisetDiff:
    """
    Compute the multiset difference of two sequences under a
    ``ComparisonStrategy``.
    """

    def __init__(self, strategy: ComparisonStrategy):
        """
        Initialise a new ``MultisetDiff``.

        :param strategy: The strategy used to compare elements.
        :type strategy: ``ComparisonStrategy``
        """
        self.strategy = strategy

    def _unexpected_elements(
        self, actual: List[Any], expected: List[Any]
    ) -> Tuple[Any, ...]:
        """
        Return the elements of ``actual`` not in ``expected``
        (actual - expected).
        """
        unexpected = []
        # Work on a copy so that duplicates in actual each consume their own
        # expected element.
        pool = list(expected)
        for element in actual:
            index = self._index_of_match(element, pool)
            if index is None:
                _log_debug_diff_extra("Unexpected element %r", element)
                unexpected.append(element)
            else:
                del pool[index]
        return tuple(unexpected)

    def _index_of_match(self, element: Any, pool: List[Any]) -> Optional[int]:
        """
        Return the index of the first element of ``pool`` equal to
        ``element``, or ``None``.
        """
        # Argument order matters for asymmetric strategies: the actual
        # element is always the first argument.
        for index, candidate in enumerate(pool):
            if self.strategy.are_equal(element, candidate):
                return index
        return None

    def _missing_elements(
        self, actual: List[Any], expected: List[Any]
    ) -> Tuple[Any, ...]:
        """
        Return the elements of ``expected`` not in ``actual``
        (expected - actual).
        """
        missing = []
        pool = list(actual)
        for element in expected:
            if self.strategy.iterable_contains(pool, element):
                self.strategy.iterable_remove_first(pool, element)
            else:
                _log_debug_diff_extra("Missing element %r", element)
                missing.append(element)
        return tuple(missing)

    def diff(self, actual: Iterable[Any], expected: Iterable[Any]) -> DiffResult:
        """
        Compare ``actual`` against ``expected``.

        Both passes start from the original inputs: the leftovers of one
        pass are never used as the input of the other.

        :param actual: The actual elements.
        :type actual: ``Iterable[Any]``
        :param expected: The expected elements.
        :type expected: ``Iterable[Any]``
        :returns: The difference between the two sequences.
        :rtype: ``DiffResult``
        """
        actual = list(actual)
        expected = list(expected)
        _log_debug_diff(
            "Computing multiset difference (actual=%d, expected=%d, strategy=%s)",
            len(actual),
            len(expected),
            self.strategy,
        )
        result = DiffResult(
            unexpected=self._unexpected_elements(actual, expected),
            missing=self._missing_elements(actual, expected),
        )
        _log_debug_diff(
            "Found %d unexpected and %d missing elements",
            len(result.unexpected),
            len(result.missing),
        )
        return result

    @classmethod
    def compute(
        cls,
        actual: Iterable[Any],
        expected: Iterable[Any],
        strategy: ComparisonStrategy,
    ) -> DiffResult:
        """
        Compute the multiset difference of ``actual`` and ``expected``.

        :param actual: The actual elements.
        :type actual: ``Iterable[Any]``
        :param expected: The expected elements.
        :type expected: ``Iterable[Any]``
        :param strategy: The strategy used to compare elements.
        :type strategy: ``ComparisonStrategy``
        :returns: The difference between the two sequences.
        :rtype: ``DiffResult``
        """
        return cls(strategy).diff(actual, expected)


def multiset_diff(
    actual: Iterable[Any],
    expected: Iterable[Any],
    strategy: Optional[ComparisonStrategy] = None,
) -> DiffResult:
    """
    Compute the multiset difference of ``actual`` and ``expected`` using
    ``strategy``, or standard equality if no strategy is given.
    """
    if strategy is None:
        strategy = StandardComparisonStrategy.instance()
    return MultisetDiff.compute(actual, expected, strategy)


__all__ = [
    "DiffResult",
    "MultisetDiff",
    "multiset_diff",
]
