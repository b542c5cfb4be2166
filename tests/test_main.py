# tests/test_main.py

"""Tests for the command-line entry point."""

import logging
import unittest
from unittest.mock import MagicMock, patch

import main


class TestArgumentParsing(unittest.TestCase):
    """Parser defaults and option mapping."""

    def test_search_filters_only_set_options(self) -> None:
        args = main._build_parser().parse_args(
            ["laptop", "--max-price", "900", "--sort-by", "price"]
        )
        self.assertEqual(
            main._search_filters(args),
            {"max_price": 900.0, "sort_by": "price", "limit": 20},
        )

    def test_defaults(self) -> None:
        args = main._build_parser().parse_args(["tv"])
        self.assertEqual(args.output_format, "json")
        self.assertFalse(args.top)
        self.assertIsNone(args.sources)


@patch("main.setup_logging")
class TestMain(unittest.TestCase):
    """main() dispatch and exit codes."""

    def test_no_action_exits_2(self, _logging: MagicMock) -> None:
        with patch("sys.argv", ["bargainer"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 2)

    @patch("bargainer.cli.runner.run_list_sources", return_value=0)
    def test_list_sources(
        self, mock_list: MagicMock, _logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["bargainer", "--list-sources"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 0)
        mock_list.assert_called_once()

    @patch("bargainer.cli.runner.cli_search", return_value=1)
    def test_search_dispatch(
        self, mock_search: MagicMock, _logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["bargainer", "tv", "-s", "dealnews"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 1)
        kwargs = mock_search.call_args.kwargs
        self.assertEqual(kwargs["query"], "tv")
        self.assertEqual(kwargs["source_csv"], "dealnews")

    @patch("bargainer.cli.runner.run_list_sources", return_value=0)
    def test_verbosity_flags_reach_logging(
        self, _list: MagicMock, mock_logging: MagicMock,
    ) -> None:
        argv = [
            "bargainer", "--list-sources", "-v",
            "--quiet-source", "dealnews", "--quiet-source", "slickdeals",
        ]
        with patch("sys.argv", argv):
            with self.assertRaises(SystemExit):
                main.main()
        mock_logging.assert_called_once_with(
            console_level=logging.INFO,
            provider_levels={
                "dealnews": logging.ERROR,
                "slickdeals": logging.ERROR,
            },
        )


if __name__ == "__main__":
    unittest.main()
