# tests/test_main.py

"""Tests for the argparse entry point."""

import unittest
from unittest.mock import MagicMock, patch

import main
from clearance_watch.config.settings import Settings


class TestParser(unittest.TestCase):
    """Subcommand parsing."""

    def setUp(self) -> None:
        self.parser = main._build_parser()

    def test_run_defaults_to_json(self) -> None:
        """'run' without flags prints JSON."""
        args = self.parser.parse_args(["run"])
        self.assertEqual(args.command, "run")
        self.assertEqual(args.output_format, "json")

    def test_run_table(self) -> None:
        """-f table selects the table output."""
        args = self.parser.parse_args(["run", "-f", "table"])
        self.assertEqual(args.output_format, "table")

    def test_mute_takes_id(self) -> None:
        """'mute' requires an item id."""
        args = self.parser.parse_args(["mute", "682573"])
        self.assertEqual(args.item_id, "682573")
        with self.assertRaises(SystemExit):
            self.parser.parse_args(["mute"])

    def test_watch_interval_default(self) -> None:
        """'watch' uses the configured interval by default."""
        args = self.parser.parse_args(["watch"])
        self.assertEqual(
            args.interval_minutes, Settings.SCRAPE_INTERVAL_MINUTES
        )
        args = self.parser.parse_args(["watch", "-i", "15"])
        self.assertEqual(args.interval_minutes, 15)

    def test_serve_host_port(self) -> None:
        """'serve' accepts --host and --port."""
        args = self.parser.parse_args(
            ["serve", "--host", "0.0.0.0", "--port", "9000"]
        )
        self.assertEqual((args.host, args.port), ("0.0.0.0", 9000))

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with self.assertRaises(SystemExit):
            self.parser.parse_args([])


class TestMainDispatch(unittest.TestCase):
    """main() routes subcommands to the runner."""

    def _run_main(self, argv: list[str]) -> int:
        with patch("sys.argv", ["clearance_watch", *argv]), patch.object(
            main, "setup_logging"
        ):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        code = ctx.exception.code
        return code if isinstance(code, int) else 1

    @patch("clearance_watch.cli.runner.run_once", return_value=0)
    def test_run_dispatch(self, mock_run: MagicMock) -> None:
        """'run -f table' calls run_once with the format."""
        self.assertEqual(self._run_main(["run", "-f", "table"]), 0)
        mock_run.assert_called_once_with("table")

    @patch("clearance_watch.cli.runner.run_mute", return_value=1)
    def test_mute_dispatch(self, mock_mute: MagicMock) -> None:
        """'mute' passes the id and propagates the exit code."""
        self.assertEqual(self._run_main(["mute", "7"]), 1)
        mock_mute.assert_called_once_with("7")


if __name__ == "__main__":
    unittest.main()
