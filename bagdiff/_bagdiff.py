# Copyright Red Hat
#
# bagdiff/_bagdiff.py - Multiset difference global definitions
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Global definitions for the top-level bagdiff package.
"""
import logging

_log = logging.getLogger("bagdiff")

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Bagdiff debugging subsystem mask (legacy interface)
BAGDIFF_DEBUG_DIFF = 1
BAGDIFF_DEBUG_STRATEGY = 2
BAGDIFF_DEBUG_ALL = BAGDIFF_DEBUG_DIFF | BAGDIFF_DEBUG_STRATEGY

# Bagdiff debugging subsystem names
BAGDIFF_SUBSYSTEM_DIFF = "bagdiff.diff"
BAGDIFF_SUBSYSTEM_STRATEGY = "bagdiff.strategy"

_DEBUG_MASK_TO_SUBSYSTEM = {
    BAGDIFF_DEBUG_DIFF: BAGDIFF_SUBSYSTEM_DIFF,
    BAGDIFF_DEBUG_STRATEGY: BAGDIFF_SUBSYSTEM_STRATEGY,
}

_debug_subsystems = set()


class SubsystemFilter(logging.Filter):
    """
    Filters DEBUG records based on a set of enabled subsystem names.
    Non-DEBUG records or DEBUG records without a 'subsystem' attribute
    are always passed through.
    """

    def __init__(self, name=""):
        super().__init__(name)
        self.enabled_subsystems = set(_debug_subsystems)

    def filter(self, record):
        subsystem = getattr(record, "subsystem", None)
        if record.levelno != logging.DEBUG or subsystem is None:
            return True
        return subsystem in self.enabled_subsystems

    def set_debug_subsystems(self, subsystems):
        """Sets the collection of subsystems to allow."""
        self.enabled_subsystems = set(subsystems)


def _subsystem_filters():
    """
    Yield every ``SubsystemFilter`` attached to a handler of the ``bagdiff``
    logger.
    """
    for handler in logging.getLogger("bagdiff").handlers:
        yield from (f for f in handler.filters if isinstance(f, SubsystemFilter))


def get_debug_mask():
    """
    Return the current debug mask for the ``bagdiff`` package, including
    subsystems enabled directly on attached filters.

    :returns: The current debug mask value
    :rtype: int
    """
    enabled = set(_debug_subsystems)
    for subsystem_filter in _subsystem_filters():
        enabled |= subsystem_filter.enabled_subsystems
    return sum(
        flag for flag, name in _DEBUG_MASK_TO_SUBSYSTEM.items() if name in enabled
    )


def set_debug_mask(mask):
    """
    Set the debug mask for the ``bagdiff`` package.

    :param mask: the logical OR of the ``BAGDIFF_DEBUG_*``
                 values to log.
    :rtype: None
    """
    # pylint: disable=global-statement
    global _debug_subsystems

    if not 0 <= mask <= BAGDIFF_DEBUG_ALL:
        raise ValueError(f"Invalid bagdiff debug mask: {mask}")

    _debug_subsystems = {
        name for flag, name in _DEBUG_MASK_TO_SUBSYSTEM.items() if mask & flag
    }
    for subsystem_filter in _subsystem_filters():
        subsystem_filter.set_debug_subsystems(_debug_subsystems)


#
# Bagdiff exception types
#


class BagdiffError(Exception):
    """
    Base class for multiset difference errors.
    """


class BagdiffArgumentError(BagdiffError):
    """
    An invalid argument was passed to a bagdiff object.
    """


__all__ = [
    # Debug logging - subsystem name interface
    "SubsystemFilter",
    "BAGDIFF_SUBSYSTEM_DIFF",
    "BAGDIFF_SUBSYSTEM_STRATEGY",
    # Debug logging - legacy interface
    "BAGDIFF_DEBUG_DIFF",
    "BAGDIFF_DEBUG_STRATEGY",
    "BAGDIFF_DEBUG_ALL",
    "set_debug_mask",
    "get_debug_mask",
    "BagdiffError",
    "BagdiffArgumentError",
]
