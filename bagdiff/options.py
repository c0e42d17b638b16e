# Copyright Red Hat
#
# bagdiff/options.py - Multiset difference options
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Multiset difference options and comparison strategy selection.
"""
from configparser import ConfigParser
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Tuple, Union
from os.path import exists
import logging

from ._bagdiff import BagdiffArgumentError
from .strategy import (
    AttributeComparisonStrategy,
    ComparisonStrategy,
    KeyComparisonStrategy,
    StandardComparisonStrategy,
    ToleranceComparisonStrategy,
)

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Default configuration file section
DIFF_CFG_SECTION = "diff"

#: Standard equality
STRATEGY_STANDARD = "standard"
#: Case-insensitive string equality
STRATEGY_CASEFOLD = "casefold"
#: Numeric equality within a tolerance
STRATEGY_TOLERANCE = "tolerance"
#: Attribute by attribute comparison
STRATEGY_ATTRIBUTES = "attributes"

STRATEGY_NAMES = (
    STRATEGY_STANDARD,
    STRATEGY_CASEFOLD,
    STRATEGY_TOLERANCE,
    STRATEGY_ATTRIBUTES,
)

_TUPLE_OPTIONS = ("attributes", "ignore_attributes")


def _casefold(value: Any) -> Any:
    """
    Return ``value.casefold()`` for strings and ``value`` otherwise.
    """
    return value.casefold() if isinstance(value, str) else value


def _split_list(value: str) -> Tuple[str, ...]:
    """
    Split a comma separated configuration value into a tuple of names.
    """
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class DiffOptions:
    """
    Multiset difference options.
    """

    #: Name of the comparison strategy to use
    strategy: str = STRATEGY_STANDARD
    #: Absolute tolerance for the tolerance strategy
    tolerance: float = 0.0
    #: Restrict attribute comparison to these names
    attributes: Tuple[str, ...] = field(default_factory=tuple)
    #: Attribute names excluded from attribute comparison
    ignore_attributes: Tuple[str, ...] = field(default_factory=tuple)

    def __str__(self):
        """
        Return this ``DiffOptions`` instance as ``name=value`` lines in the
        format accepted by ``from_config()``: name lists are comma separated.

        :returns: A human readable string.
        :rtype: ``str``
        """
        lines = []
        for opt in fields(self):
            value = getattr(self, opt.name)
            if opt.name in _TUPLE_OPTIONS:
                value = ", ".join(value)
            lines.append(f"{opt.name}={value}")
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "DiffOptions":
        """
        Initialise DiffOptions from a mapping of option names to values.

        Unknown keys are ignored and list values are converted to tuples.

        :param values: The option values.
        :type values: ``Mapping[str, Any]``
        :returns: A new ``DiffOptions`` instance
        :rtype: ``DiffOptions``
        """

        def get_value(name: str) -> Union[str, float, Tuple[str, ...]]:
            """
            Get a value from ``values``, converting lists to tuples.

            :param name: The name of the option.
            :type name: ``str``
            :returns: The option converted to a tuple if appropriate.
            :rtype: ``Union[str, float, Tuple[str, ...]]``
            """
            value = values[name]
            if name == "tolerance":
                try:
                    return float(value)
                except (TypeError, ValueError) as err:
                    _log_error("Invalid tolerance value '%s': %s", value, err)
                    raise BagdiffArgumentError(
                        f"Invalid tolerance value: {value!r}"
                    ) from err
            if isinstance(value, list):
                return tuple(value)
            if value is None and name in _TUPLE_OPTIONS:
                return ()
            return value

        field_names = {f.name for f in fields(cls)}
        kwargs = {name: get_value(name) for name in field_names if name in values}
        options = cls(**kwargs)
        _log_debug("Initialised DiffOptions from mapping: %s", repr(options))
        return options

    @classmethod
    def from_config(
        cls, cfg: ConfigParser, section: str = DIFF_CFG_SECTION
    ) -> "DiffOptions":
        """
        Initialise DiffOptions from section ``section`` of ``cfg``.

        :param cfg: The configuration to read.
        :type cfg: ``ConfigParser``
        :param section: The section holding diff options.
        :type section: ``str``
        :returns: A new ``DiffOptions`` instance
        :rtype: ``DiffOptions``
        """
        if not cfg.has_section(section):
            return cls()

        values = {}
        if cfg.has_option(section, "strategy"):
            values["strategy"] = cfg[section]["strategy"].strip()
        if cfg.has_option(section, "tolerance"):
            try:
                values["tolerance"] = cfg.getfloat(section, "tolerance")
            except ValueError as err:
                _log_error(
                    "Invalid tolerance value '%s': %s", cfg[section]["tolerance"], err
                )
                raise BagdiffArgumentError(
                    f"Invalid tolerance value: {cfg[section]['tolerance']}"
                ) from err
        for name in _TUPLE_OPTIONS:
            if cfg.has_option(section, name):
                values[name] = _split_list(cfg[section][name])

        return cls.from_dict(values)

    @classmethod
    def from_file(cls, config_file: str, section: str = DIFF_CFG_SECTION):
        """
        Load ``DiffOptions`` from an INI-style configuration file located at
        ``config_file``.

        :param config_file: path to the configuration file.
        :type config_file: ``str``.
        :param section: The section holding diff options.
        :type section: ``str``
        :returns: A ``DiffOptions`` instance initialised from ``config_file``.
        :rtype: ``DiffOptions``
        """
        if not exists(config_file):
            return cls()

        _log_debug("Loading configuration from '%s'", config_file)
        cfg = ConfigParser()
        cfg.read([config_file])
        return cls.from_config(cfg, section=section)

    def make_strategy(self) -> ComparisonStrategy:
        """
        Build the ``ComparisonStrategy`` selected by these options.

        :returns: A comparison strategy instance.
        :rtype: ``ComparisonStrategy``
        """
        if self.strategy == STRATEGY_STANDARD:
            return StandardComparisonStrategy.instance()
        if self.strategy == STRATEGY_CASEFOLD:
            return KeyComparisonStrategy(_casefold, description="case-insensitive")
        if self.strategy == STRATEGY_TOLERANCE:
            return ToleranceComparisonStrategy(self.tolerance)
        if self.strategy == STRATEGY_ATTRIBUTES:
            return AttributeComparisonStrategy(
                ignore=self.ignore_attributes,
                attributes=self.attributes or None,
            )
        _log_error("Unknown comparison strategy: %s", self.strategy)
        raise BagdiffArgumentError(
            f"Unknown comparison strategy '{self.strategy}' "
            f"(expected one of: {', '.join(STRATEGY_NAMES)})"
        )


__all__ = [
    "DiffOptions",
    "DIFF_CFG_SECTION",
    "STRATEGY_STANDARD",
    "STRATEGY_CASEFOLD",
    "STRATEGY_TOLERANCE",
    "STRATEGY_ATTRIBUTES",
    "STRATEGY_NAMES",
]
