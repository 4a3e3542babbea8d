"""Command-line argument parsing and interactive prompts for the analyzer."""

from __future__ import annotations

import argparse
from typing import Callable, Optional, Sequence

ANALYSIS_PAIRS = 1
ANALYSIS_WEEKLY = 2

ANALYSIS_MENU = (
    "What do you want to analyze?\n"
    "1. Pair of contributors that worked on the same file\n"
    "2. Contributions of contributors in the last week"
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Every argument is optional; missing values are prompted for interactively
    by :func:`complete_args`.
    """
    parser = argparse.ArgumentParser(
        prog="gh-contributor-analyzer",
        description=(
            "Analyze a GitHub repository: contributor pairs sharing files, "
            "or each contributor's activity over the last week."
        ),
    )

    parser.add_argument(
        "--owner",
        help="Repository owner (user or organization login).",
    )
    parser.add_argument(
        "--repo",
        help="Repository name to analyze.",
    )
    parser.add_argument(
        "--analysis",
        type=int,
        choices=(ANALYSIS_PAIRS, ANALYSIS_WEEKLY),
        help="1 = contributor pairs, 2 = last-week contributions.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def prompt_value(message: str, input_func: Callable[[str], str] = input) -> str:
    """Print ``message`` and return the first whitespace-separated token entered.

    Closed input (end of file) reads as an empty answer.
    """
    print(message)
    try:
        tokens = input_func("").split()
    except EOFError:
        return ""
    return tokens[0] if tokens else ""


def prompt_analysis_choice(input_func: Callable[[str], str] = input) -> Optional[int]:
    """Show the analysis menu and return the chosen number, or ``None`` if not a number."""
    raw = prompt_value(ANALYSIS_MENU, input_func)
    try:
        return int(raw)
    except ValueError:
        return None


def complete_args(args: argparse.Namespace, input_func: Callable[[str], str] = input) -> argparse.Namespace:
    """Fill in owner and repository from interactive prompts when not given."""
    if not args.owner:
        args.owner = prompt_value("Insert owner:", input_func)
    if not args.repo:
        args.repo = prompt_value("Insert repository:", input_func)
    return args
