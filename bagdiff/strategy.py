# Copyright Red Hat
#
# bagdiff/strategy.py - Multiset difference comparison strategies
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Comparison strategies used to decide element equality.

A ``ComparisonStrategy`` supplies the equality relation used by the
multiset difference along with the pool primitives built on top of it.
Equality is directional: ``are_equal(actual, other)`` may differ from
``are_equal(other, actual)`` and callers must preserve argument order.
"""
from abc import ABC, abstractmethod
from dataclasses import fields, is_dataclass
from math import isnan
from numbers import Real
from typing import Any, Callable, ClassVar, Iterable, List, Optional, Tuple
import logging

from ._bagdiff import BAGDIFF_SUBSYSTEM_STRATEGY, BagdiffArgumentError

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

_MISSING = object()


def _log_debug_strategy(msg, *args, **kwargs):
    """A wrapper for strategy subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": BAGDIFF_SUBSYSTEM_STRATEGY}, **kwargs)


def _null_safe_equal(actual: Any, other: Any) -> Optional[bool]:
    """
    Resolve comparisons involving identity or ``None`` without consulting
    a custom equality function.

    :param actual: The left hand value.
    :param other: The right hand value.
    :returns: ``True`` or ``False`` if the comparison is decided, or ``None``
              if the values must be compared by the caller.
    :rtype: ``Optional[bool]``
    """
    if actual is other:
        return True
    if actual is None or other is None:
        return False
    return None


class ComparisonStrategy(ABC):
    """
    Abstract base class for element comparison strategies.

    Subclasses implement ``are_equal()``; containment, removal and
    duplicate detection are derived from it.
    """

    @abstractmethod
    def are_equal(self, actual: Any, other: Any) -> bool:
        """
        Return ``True`` if ``actual`` is equal to ``other`` according to
        this strategy.

        :param actual: The value on the actual side of the comparison.
        :param other: The value to compare against.
        :returns: ``True`` if the values are equal or ``False`` otherwise.
        :rtype: ``bool``
        """

    @property
    def description(self) -> str:
        """
        A short description of this comparison strategy.
        """
        return self.__class__.__name__

    def __str__(self) -> str:
        return self.description

    def iterable_contains(self, iterable: Optional[Iterable[Any]], value: Any) -> bool:
        """
        Return ``True`` if ``iterable`` contains an element equal to
        ``value``.

        Each element ``x`` is tested with ``are_equal(x, value)``.

        :param iterable: The elements to search (may be ``None``).
        :param value: The value to look for.
        :returns: ``True`` if a matching element exists.
        :rtype: ``bool``
        """
        if iterable is None:
            return False
        return any(self.are_equal(element, value) for element in iterable)

    def iterable_remove_first(self, iterable: Optional[List[Any]], value: Any):
        """
        Remove the first element of ``iterable`` equal to ``value``.

        :param iterable: A mutable sequence (may be ``None``).
        :param value: The value to remove.
        """
        if iterable is None:
            return
        for index, element in enumerate(iterable):
            if self.are_equal(element, value):
                _log_debug_strategy(
                    "Removing element %d (%r) matching %r", index, element, value
                )
                del iterable[index]
                return

    def iterable_remove(self, iterable: Optional[List[Any]], value: Any):
        """
        Remove every element of ``iterable`` equal to ``value``.

        :param iterable: A mutable sequence (may be ``None``).
        :param value: The value to remove.
        """
        if iterable is None:
            return
        iterable[:] = [elem for elem in iterable if not self.are_equal(elem, value)]

    def duplicates_from(self, iterable: Optional[Iterable[Any]]) -> List[Any]:
        """
        Return the elements of ``iterable`` that occur more than once.

        Each duplicated element is reported once, in order of first
        occurrence.

        :param iterable: The elements to examine (may be ``None``).
        :returns: A list of duplicated elements.
        :rtype: ``List[Any]``
        """
        duplicates = []
        if iterable is None:
            return duplicates
        seen = []
        for element in iterable:
            if self.iterable_contains(seen, element):
                if not self.iterable_contains(duplicates, element):
                    duplicates.append(element)
            else:
                seen.append(element)
        return duplicates


class StandardComparisonStrategy(ComparisonStrategy):
    """
    Compare elements with Python equality (``==``).

    ``None`` is equal only to ``None`` and identical objects are always
    equal.
    """

    _instance: ClassVar[Optional["StandardComparisonStrategy"]] = None

    @classmethod
    def instance(cls) -> "StandardComparisonStrategy":
        """
        Return the shared ``StandardComparisonStrategy`` instance.
        """
        # Look in the class's own namespace so subclasses get their own.
        if cls.__dict__.get("_instance") is None:
            cls._instance = cls()
        return cls._instance

    def are_equal(self, actual: Any, other: Any) -> bool:
        decided = _null_safe_equal(actual, other)
        if decided is not None:
            return decided
        return bool(actual == other)

    @property
    def description(self) -> str:
        return "standard equality"


class ComparatorBasedComparisonStrategy(ComparisonStrategy):
    """
    Compare elements with a three-way comparator function.

    Two elements are equal when ``comparator(actual, other)`` returns zero.
    """

    def __init__(
        self,
        comparator: Callable[[Any, Any], int],
        description: Optional[str] = None,
    ):
        """
        Initialise a new ``ComparatorBasedComparisonStrategy``.

        :param comparator: A function returning a negative, zero or positive
                           integer.
        :type comparator: ``Callable[[Any, Any], int]``
        :param description: An optional description of the comparator.
        :type description: ``Optional[str]``
        """
        if not callable(comparator):
            _log_error("Comparator %r is not callable", comparator)
            raise BagdiffArgumentError(f"Comparator is not callable: {comparator!r}")
        self.comparator = comparator
        self._description = description

    def are_equal(self, actual: Any, other: Any) -> bool:
        decided = _null_safe_equal(actual, other)
        if decided is not None:
            return decided
        return self.comparator(actual, other) == 0

    @property
    def description(self) -> str:
        if self._description:
            return f"comparator '{self._description}'"
        name = getattr(self.comparator, "__name__", repr(self.comparator))
        return f"comparator '{name}'"


class KeyComparisonStrategy(ComparisonStrategy):
    """
    Compare elements by a derived key: equal when ``key(actual) == key(other)``.
    """

    def __init__(self, key: Callable[[Any], Any], description: Optional[str] = None):
        if not callable(key):
            _log_error("Key function %r is not callable", key)
            raise BagdiffArgumentError(f"Key function is not callable: {key!r}")
        self.key = key
        self._description = description

    def are_equal(self, actual: Any, other: Any) -> bool:
        decided = _null_safe_equal(actual, other)
        if decided is not None:
            return decided
        return bool(self.key(actual) == self.key(other))

    @property
    def description(self) -> str:
        if self._description:
            return self._description
        name = getattr(self.key, "__name__", repr(self.key))
        return f"key '{name}'"


class ToleranceComparisonStrategy(ComparisonStrategy):
    """
    Compare real numbers within an absolute tolerance.

    Values that are not both real numbers are compared with ``==``.
    """

    def __init__(self, tolerance: float):
        """
        Initialise a new ``ToleranceComparisonStrategy``.

        :param tolerance: The maximum absolute difference between two
                          values considered equal.
        :type tolerance: ``float``
        """
        if isinstance(tolerance, bool) or not isinstance(tolerance, Real):
            _log_error("Invalid tolerance type: %r", tolerance)
            raise BagdiffArgumentError(f"Tolerance must be a number: {tolerance!r}")
        if isnan(tolerance) or tolerance < 0:
            _log_error("Invalid tolerance: %s", tolerance)
            raise BagdiffArgumentError(f"Tolerance must be >= 0: {tolerance}")
        self.tolerance = tolerance

    def are_equal(self, actual: Any, other: Any) -> bool:
        decided = _null_safe_equal(actual, other)
        if decided is not None:
            return decided
        if isinstance(actual, Real) and isinstance(other, Real):
            return abs(actual - other) <= self.tolerance
        return bool(actual == other)

    @property
    def description(self) -> str:
        return f"tolerance {self.tolerance}"


class AttributeComparisonStrategy(ComparisonStrategy):
    """
    Compare objects attribute by attribute.

    The attributes compared are those of the *actual* value: dataclass
    fields, or the instance ``__dict__``. ``other`` is equal to ``actual``
    when it carries every one of those attributes with an equal value, so
    the relation is asymmetric when the two objects expose different
    attribute sets. Values without attributes are compared with ``==``.
    """

    def __init__(
        self,
        ignore: Iterable[str] = (),
        attributes: Optional[Iterable[str]] = None,
    ):
        """
        Initialise a new ``AttributeComparisonStrategy``.

        :param ignore: Attribute names excluded from comparison.
        :type ignore: ``Iterable[str]``
        :param attributes: If set, restrict comparison to these attribute
                           names.
        :type attributes: ``Optional[Iterable[str]]``
        """
        self.ignore: Tuple[str, ...] = tuple(ignore)
        self.attributes: Optional[Tuple[str, ...]] = (
            tuple(attributes) if attributes is not None else None
        )

    def _reference_names(self, actual: Any) -> Optional[List[str]]:
        """
        Return the attribute names of ``actual`` to compare, or ``None``
        if no attribute of ``actual`` survives the ``attributes`` and
        ``ignore`` filters.
        """
        if is_dataclass(actual) and not isinstance(actual, type):
            names = [f.name for f in fields(actual)]
        elif hasattr(actual, "__dict__"):
            names = list(vars(actual))
        else:
            return None
        if self.attributes is not None:
            names = [name for name in names if name in self.attributes]
        names = [name for name in names if name not in self.ignore]
        if not names:
            _log_debug_strategy(
                "No attributes to compare for %s: using equality",
                type(actual).__name__,
            )
            return None
        return names

    def are_equal(self, actual: Any, other: Any) -> bool:
        decided = _null_safe_equal(actual, other)
        if decided is not None:
            return decided
        names = self._reference_names(actual)
        if names is None:
            return bool(actual == other)
        for name in names:
            other_value = getattr(other, name, _MISSING)
            if other_value is _MISSING:
                _log_debug_strategy(
                    "Attribute '%s' missing from %s", name, type(other).__name__
                )
                return False
            if getattr(actual, name) != other_value:
                return False
        return True

    @property
    def description(self) -> str:
        desc = "attribute comparison"
        if self.attributes is not None:
            desc += f" on {', '.join(self.attributes)}"
        if self.ignore:
            desc += f" ignoring {', '.join(self.ignore)}"
        return desc


__all__ = [
    "ComparisonStrategy",
    "StandardComparisonStrategy",
    "ComparatorBasedComparisonStrategy",
    "KeyComparisonStrategy",
    "ToleranceComparisonStrategy",
    "AttributeComparisonStrategy",
]
