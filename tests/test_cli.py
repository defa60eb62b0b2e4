"""
Tests for the command-line interface.
"""

import json
import unittest
from unittest.mock import patch

import fixtures

from click.testing import CliRunner

from stateproof import __version__
from stateproof.api.proof_service import ProofService
from stateproof.cli import cli, parse_slot


class TestCli(unittest.TestCase):
    """CLI commands backed by in-memory snapshots."""

    def setUp(self):
        self.runner = CliRunner()
        source, _ = fixtures.recent_withdrawal_source()
        self.source = source
        self.patcher = patch(
            "stateproof.cli.ProofService",
            side_effect=lambda settings: ProofService(source=self.source, settings=settings),
        )
        self.patcher.start()
        self.logging_patcher = patch("stateproof.cli.setup_logging")
        self.logging_patcher.start()

    def tearDown(self):
        self.patcher.stop()
        self.logging_patcher.stop()

    def invoke(self, *args):
        return self.runner.invoke(cli, ["--network", "hoodi", "--cache-dir", ""] + list(args))

    def test_version(self):
        result = self.runner.invoke(cli, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_slot_json(self):
        result = self.invoke("slot", "--slot", "100000", "--format", "json")
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["gindex_decimal"], 706)
        self.assertEqual(data["network"], "hoodi")
        self.assertEqual(len(data["witnesses"]), 9)

    def test_withdrawable_epoch_table(self):
        result = self.invoke("withdrawable_epoch", "2")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("withdrawable_epoch proof", result.output)
        self.assertIn("Witnesses (leaf to root)", result.output)

    def test_withdrawal(self):
        result = self.invoke("withdrawal", "100000", "99000", "1", "--format", "json")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)["leaf_values"]["route"], "recent")

    def test_proof_error_exits_nonzero(self):
        result = self.invoke("validator", "99")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("out of range", result.output)

    def test_withdrawal_slot_after_proof_slot(self):
        result = self.invoke("historical_withdrawal", "100000", "100001", "0")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not before proof slot", result.output)

    def test_bad_slot(self):
        result = self.invoke("slot", "--slot", "latest")
        self.assertEqual(result.exit_code, 2)

    def test_negative_validator_index(self):
        result = self.invoke("validator", "-1")
        self.assertEqual(result.exit_code, 2)

    def test_health(self):
        result = self.invoke("health")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Healthy", result.output)


class TestParseSlot(unittest.TestCase):

    def test_values(self):
        self.assertEqual(parse_slot("head"), "head")
        self.assertEqual(parse_slot("42"), 42)


if __name__ == '__main__':
    unittest.main()
