"""Tests for the command line front end."""

import io
import signal
import unittest
from unittest.mock import MagicMock, patch

from safelink_unwrap import cli
from safelink_unwrap.core.monitor import EXIT_FATAL, EXIT_OK, MonitorPhase

from test_base import SAFELINK, SAFELINK_DESTINATION, UnwrapTestCase


class TestArgumentParsing(UnwrapTestCase):
    """Test command line argument parsing"""

    def test_default_arguments(self):
        """Test default argument values"""
        args = cli.parse_arguments([])
        self.assertEqual(args.interval, 1.0)
        self.assertEqual(args.max_backoff, 30.0)
        self.assertEqual(args.max_retries, 10)
        self.assertEqual(args.redirector, [])
        self.assertFalse(args.once)
        self.assertFalse(args.stdin)
        self.assertFalse(args.verbose)
        self.assertIsNone(args.log_file)

    def test_custom_arguments(self):
        """Test custom argument values"""
        args = cli.parse_arguments([
            "--interval", "0.5",
            "--max-backoff", "10",
            "--max-retries", "-1",
            "--redirector", ".urldefense.example=u",
            "--redirector", ".links.example=target",
            "--once",
            "-v",
        ])
        self.assertEqual(args.interval, 0.5)
        self.assertEqual(args.max_backoff, 10.0)
        self.assertEqual(args.redirector, [(".urldefense.example", "u"), (".links.example", "target")])
        self.assertTrue(args.once)
        self.assertTrue(args.verbose)

        config = cli.build_config(args)
        self.assertIsNone(config.max_retries)
        self.assertEqual(config.redirectors[-1], (".links.example", "target"))
        self.assertEqual(len(config.redirectors), 4)

    def test_invalid_arguments(self):
        """Test invalid values exit with a usage error"""
        invalid = [
            ["--redirector", "missing-key"],
            ["--interval", "0"],
            ["--max-retries", "-2"],
            ["--once", "--stdin"],
            ["--verbose", "--quiet"],
        ]
        for argv in invalid:
            with self.subTest(argv=argv):
                with patch("sys.stderr", new_callable=io.StringIO):
                    with self.assertRaises(SystemExit) as ctx:
                        cli.parse_arguments(argv)
                self.assertEqual(ctx.exception.code, 2)


class TestMain(UnwrapTestCase):
    """Test the main entry point"""

    def setUp(self):
        self.logging_patcher = patch.object(cli, "setup_logging")
        self.logging_patcher.start()
        self.addCleanup(self.logging_patcher.stop)

    def test_stdin_filter(self):
        """Test filter mode rewrites stdin to stdout"""
        stdout = io.StringIO()
        with patch("sys.stdin", io.StringIO(f"[doc]({SAFELINK})\n")), \
                patch("sys.stdout", stdout):
            self.assertEqual(cli.main(["--stdin"]), EXIT_OK)
        self.assertEqual(stdout.getvalue(), f"[doc]({SAFELINK_DESTINATION})\n")

    def test_invalid_configuration(self):
        """Test a backoff below the interval is rejected"""
        self.assertEqual(cli.main(["--interval", "5", "--max-backoff", "1", "--stdin"]), cli.EXIT_USAGE)

    def test_non_finite_durations(self):
        """Test infinite or NaN durations are rejected before monitoring starts"""
        for argv in (["--max-backoff", "inf"], ["--interval", "nan"]):
            with self.subTest(argv=argv):
                self.assertEqual(cli.main(argv + ["--stdin"]), cli.EXIT_USAGE)

    @patch.object(cli, "count_markdown_files", return_value=0)
    @patch.object(cli, "install_signal_handlers")
    @patch.object(cli, "ClipboardMonitor")
    def test_monitor_exit_code(self, monitor_cls, install_handlers, count_files):
        """Test the monitor's exit code becomes the process exit code"""
        monitor_cls.return_value.run.return_value = EXIT_FATAL
        self.assertEqual(cli.main(["--scan-dir", "notes"]), EXIT_FATAL)
        install_handlers.assert_called_once_with(monitor_cls.return_value)
        count_files.assert_called_once_with("notes")

    @patch.object(cli, "count_markdown_files", return_value=0)
    @patch.object(cli, "ClipboardMonitor")
    def test_once(self, monitor_cls, count_files):
        """Test --once runs a single iteration"""
        monitor_cls.return_value.tick.return_value = MonitorPhase.IDLE
        self.assertEqual(cli.main(["--once"]), EXIT_OK)
        monitor_cls.return_value.tick.assert_called_once_with()
        monitor_cls.return_value.run.assert_not_called()

        monitor_cls.return_value.tick.return_value = MonitorPhase.BACKOFF
        self.assertEqual(cli.main(["--once"]), EXIT_FATAL)


class TestSignalHandlers(UnwrapTestCase):
    """Test cancellation wiring"""

    def test_signal_stops_monitor(self):
        """Test SIGINT and SIGTERM handlers stop the monitor"""
        monitor = MagicMock()
        with patch("signal.signal") as mock_signal:
            cli.install_signal_handlers(monitor)

        registered = {call.args[0]: call.args[1] for call in mock_signal.call_args_list}
        self.assertIn(signal.SIGINT, registered)
        self.assertIn(signal.SIGTERM, registered)

        with self.assertLogs("safelink_unwrap.cli", level="INFO"):
            registered[signal.SIGINT](signal.SIGINT, None)
        monitor.stop.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
