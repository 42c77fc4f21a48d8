"""Command line arguments."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

_VERSION = "0.10.0"

DEFAULT_COMMAND = "tui"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="kwaak",
        description="Run a team of autonomous agents on your code, right from your terminal",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument(
        "-c",
        "--config-path",
        type=Path,
        default=Path("kwaak.toml"),
        help="Optional path to overwrite the config",
    )
    parser.add_argument(
        "-s",
        "--skip-indexing",
        action="store_true",
        help="Skip initial indexing and splash screen",
    )
    parser.add_argument(
        "--allow-dirty",
        action="store_true",
        help="Allow running with a dirty git directory",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    init = commands.add_parser(
        "init", help="Initializes a new kwaak project in the current directory"
    )
    init.add_argument("--dry-run", action="store_true")
    init.add_argument("--file", type=Path, default=None, help="Output to a specific file")

    commands.add_parser("tui", help="Start the TUI (default)")

    query = commands.add_parser("query", help="Query the indexed project")
    query.add_argument("-q", "--query", required=True)

    run_agent = commands.add_parser("run-agent", help="Run an agent directly")
    run_agent.add_argument("-i", "--initial-message", required=True)

    commands.add_parser("index", help="Index the current project")

    test_tool = commands.add_parser("test-tool", help="Tests a tool")
    test_tool.add_argument("tool_name")
    test_tool.add_argument("tool_args", nargs="?", default=None)

    commands.add_parser("print-config", help="Print the configuration and exit")
    commands.add_parser(
        "clear-cache", help="Clear the index and cache for this project and exit"
    )

    evaluate = commands.add_parser("eval", help="Run evaluations")
    eval_types = evaluate.add_subparsers(dest="eval_type", metavar="EVAL_TYPE")
    eval_types.required = True
    patch = eval_types.add_parser("patch", help="Run the patch evaluation")
    patch.add_argument(
        "-i", "--iterations", type=int, default=1, help="Number of iterations to run"
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse arguments; without a subcommand the TUI is selected."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = DEFAULT_COMMAND
    return args