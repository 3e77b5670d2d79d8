"""Quick regression tests for the N-Queens tracer."""

import io
from pathlib import Path
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqtrace.analysis import cli


class QuickRegressionTests(unittest.TestCase):
    """Verify that the lightweight regression checks pass."""

    def test_strategies_traces_and_csv_generation(self):
        """Ensure both strategies, their traces, and CSV export succeed."""
        with mock.patch("sys.stdout", io.StringIO()):
            cli.run_quick_regression_tests()

    def test_quick_test_flag(self):
        buffer = io.StringIO()
        with mock.patch("sys.stdout", buffer):
            cli.main(["--quick-test"])
        self.assertIn("Quick regression tests passed.", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
