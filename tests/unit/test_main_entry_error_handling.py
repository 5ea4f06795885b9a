import io
import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import raidinsure.__main__ as runtime_main


class MainEntryErrorHandlingTests(unittest.TestCase):
    def test_main_reports_runtime_exceptions_and_returns_failure(self) -> None:
        errors = io.StringIO()
        with mock.patch.object(runtime_main, "cli_main", side_effect=RuntimeError("mail service down")), mock.patch(
            "sys.stderr", errors
        ), self.assertLogs("raidinsure", level="ERROR"):
            code = runtime_main.main()

        self.assertEqual(1, code)
        self.assertIn("mail service down", errors.getvalue())

    def test_main_handles_keyboard_interrupt(self) -> None:
        output = io.StringIO()
        with mock.patch.object(runtime_main, "cli_main", side_effect=KeyboardInterrupt), mock.patch("sys.stdout", output):
            code = runtime_main.main()

        self.assertEqual(130, code)
        self.assertIn("Interrupted", output.getvalue())

    def test_main_passes_through_cli_exit_code(self) -> None:
        with mock.patch.object(runtime_main, "cli_main", return_value=0):
            self.assertEqual(0, runtime_main.main())


if __name__ == "__main__":
    unittest.main()
