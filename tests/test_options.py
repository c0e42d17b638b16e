# Copyright Red Hat
#
# tests/test_options.py - DiffOptions tests.
#
# This file is part of the bagdiff project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
from configparser import ConfigParser
from dataclasses import FrozenInstanceError
import tempfile
import os

from bagdiff import BagdiffArgumentError
from bagdiff.diff import MultisetDiff
from bagdiff.options import DiffOptions
from bagdiff.strategy import (
    AttributeComparisonStrategy,
    KeyComparisonStrategy,
    StandardComparisonStrategy,
    ToleranceComparisonStrategy,
)

from ._util import Person, PersonDto

_CONFIG = """\
[diff]
strategy = attributes
tolerance = 0.5
attributes = name, age
ignore_attributes = email
"""


class TestDiffOptions(unittest.TestCase):
    def test_defaults(self):
        opts = DiffOptions()
        self.assertEqual(opts.strategy, "standard")
        self.assertEqual(opts.tolerance, 0.0)
        self.assertEqual(opts.attributes, ())

    def test_frozen(self):
        opts = DiffOptions()
        with self.assertRaises(FrozenInstanceError):
            opts.strategy = "casefold"

    def test_DiffOptions__str__(self):
        opts = DiffOptions(strategy="attributes", attributes=("name", "age"))
        s = str(opts)
        self.assertIn("strategy=attributes", s)
        self.assertIn("attributes=name, age", s)
        self.assertIn("tolerance=0.0", s)

    def test_from_dict(self):
        opts = DiffOptions.from_dict(
            {"strategy": "tolerance", "tolerance": 0.1, "unknown": "ignored"}
        )
        self.assertEqual(opts.strategy, "tolerance")
        self.assertEqual(opts.tolerance, 0.1)
        # Should use defaults for missing values
        self.assertEqual(opts.ignore_attributes, ())

    def test_from_dict_lists_to_tuples(self):
        opts = DiffOptions.from_dict({"attributes": ["a", "b"], "ignore_attributes": None})
        self.assertEqual(opts.attributes, ("a", "b"))
        self.assertEqual(opts.ignore_attributes, ())

    def test_from_dict_tolerance_string(self):
        opts = DiffOptions.from_dict({"strategy": "tolerance", "tolerance": "0.5"})
        self.assertEqual(opts.tolerance, 0.5)
        self.assertEqual(opts.make_strategy().tolerance, 0.5)

    def test_from_dict_bad_tolerance(self):
        with self.assertRaises(BagdiffArgumentError):
            DiffOptions.from_dict({"tolerance": "lots"})
        with self.assertRaises(BagdiffArgumentError):
            DiffOptions.from_dict({"tolerance": None})

    def test_make_strategy_nan_tolerance(self):
        opts = DiffOptions.from_dict({"strategy": "tolerance", "tolerance": "nan"})
        with self.assertRaises(BagdiffArgumentError):
            opts.make_strategy()

    def test__str__round_trip(self):
        opts = DiffOptions(
            strategy="attributes", attributes=("name", "age"), ignore_attributes=("email",)
        )
        cfg = ConfigParser()
        cfg.read_string("[diff]\n" + str(opts) + "\n")
        self.assertEqual(DiffOptions.from_config(cfg), opts)

    def test_from_config(self):
        cfg = ConfigParser()
        cfg.read_string(_CONFIG)
        opts = DiffOptions.from_config(cfg)
        self.assertEqual(opts.strategy, "attributes")
        self.assertEqual(opts.tolerance, 0.5)
        self.assertEqual(opts.attributes, ("name", "age"))
        self.assertEqual(opts.ignore_attributes, ("email",))

    def test_from_config_missing_section(self):
        cfg = ConfigParser()
        cfg.read_string(_CONFIG)
        self.assertEqual(DiffOptions.from_config(cfg, section="other"), DiffOptions())

    def test_from_config_bad_tolerance(self):
        cfg = ConfigParser()
        cfg.read_string("[diff]\ntolerance = lots\n")
        with self.assertRaises(BagdiffArgumentError):
            DiffOptions.from_config(cfg)

    def test_from_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "bagdiff.conf")
            with open(path, "w", encoding="utf8") as fp:
                fp.write(_CONFIG)
            opts = DiffOptions.from_file(path)
        self.assertEqual(opts.strategy, "attributes")
        self.assertEqual(opts.attributes, ("name", "age"))

    def test_from_file_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "nonexistent.conf")
            self.assertEqual(DiffOptions.from_file(path), DiffOptions())

    def test_make_strategy_standard(self):
        self.assertIs(
            DiffOptions().make_strategy(), StandardComparisonStrategy.instance()
        )

    def test_make_strategy_casefold(self):
        strategy = DiffOptions(strategy="casefold").make_strategy()
        self.assertIsInstance(strategy, KeyComparisonStrategy)
        self.assertTrue(strategy.are_equal("ABC", "abc"))
        self.assertFalse(strategy.are_equal("ABC", "abd"))
        self.assertTrue(strategy.are_equal(1, 1))

    def test_make_strategy_tolerance(self):
        strategy = DiffOptions(strategy="tolerance", tolerance=0.2).make_strategy()
        self.assertIsInstance(strategy, ToleranceComparisonStrategy)
        self.assertEqual(strategy.tolerance, 0.2)

    def test_make_strategy_negative_tolerance(self):
        opts = DiffOptions(strategy="tolerance", tolerance=-1.0)
        with self.assertRaises(BagdiffArgumentError):
            opts.make_strategy()

    def test_make_strategy_attributes(self):
        opts = DiffOptions(strategy="attributes", ignore_attributes=("email",))
        strategy = opts.make_strategy()
        self.assertIsInstance(strategy, AttributeComparisonStrategy)
        self.assertIsNone(strategy.attributes)
        self.assertEqual(strategy.ignore, ("email",))

    def test_make_strategy_unknown(self):
        with self.assertRaises(BagdiffArgumentError) as cm:
            DiffOptions(strategy="fuzzy").make_strategy()
        self.assertIn("fuzzy", str(cm.exception))

    def test_configured_diff(self):
        cfg = ConfigParser()
        cfg.read_string(_CONFIG)
        strategy = DiffOptions.from_config(cfg).make_strategy()
        people = [Person("Ann", 30, "a@example.com"), Person("Bob", 40, "b@example.com")]
        result = MultisetDiff.compute(people, [PersonDto("Bob", 40)], strategy)
        self.assertEqual(result.unexpected, (people[0],))
        self.assertEqual(result.missing, ())
