#!/usr/bin/env python3
"""
Test Runner for State Proofs

Runs every suite in this directory one after the other and prints a
per-suite and overall summary. Equivalent to ``pytest tests/`` for
environments without pytest.
"""

import os
import sys
import unittest
from io import StringIO

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

TEST_SUITES = [
    ('test_gindex', 'Generalized Index Algebra'),
    ('test_types', 'SSZ JSON Decoding'),
    ('test_merkle', 'Merkleization and Fork Layouts'),
    ('test_resolver', 'Path Resolution and Routing'),
    ('test_composer', 'End-to-End Proof Composition'),
    ('test_api', 'Beacon API, Cache and REST API'),
    ('test_cli', 'Command-Line Interface'),
]


def run_test_suite(test_module_name, description):
    """
    Run one test module.

    Returns:
        Tuple of (success_count, failure_count, error_count, skip_count)
    """
    print(f"\n{'=' * 60}")
    print(f"Running {description}")
    print('=' * 60)

    test_module = __import__(test_module_name)
    suite = unittest.TestLoader().loadTestsFromModule(test_module)

    stream = StringIO()
    result = unittest.TextTestRunner(stream=stream, verbosity=2).run(suite)
    print(stream.getvalue())

    failures = len(result.failures)
    errors = len(result.errors)
    skipped = len(result.skipped)
    success = result.testsRun - failures - errors - skipped

    print(f"{description}: {success} passed, {failures} failed, {errors} errors, {skipped} skipped")
    for test, trace in result.failures + result.errors:
        print(f"  - {test}:\n{trace}")

    return success, failures, errors, skipped


def main():
    print("State Proofs Test Suite")
    print(f"Python version: {sys.version}")

    totals = [0, 0, 0, 0]
    for module_name, description in TEST_SUITES:
        try:
            counts = run_test_suite(module_name, description)
        except ImportError as e:
            print(f"\nError importing {module_name}: {e}")
            counts = (0, 0, 1, 0)
        totals = [a + b for a, b in zip(totals, counts)]

    success, failures, errors, skipped = totals
    print(f"\n{'=' * 60}")
    print("OVERALL TEST SUMMARY")
    print('=' * 60)
    print(f"Total Tests Run: {sum(totals)}")
    print(f"Successful: {success}")
    print(f"Failed: {failures}")
    print(f"Errors: {errors}")
    print(f"Skipped: {skipped}")

    if failures or errors:
        print(f"\nTests failed: {failures + errors} issues found")
        return 1
    print("\nAll tests passed.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
