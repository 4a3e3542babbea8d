"""Entry point orchestrating GitHub contributor analysis."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Sequence

from .analysis import (
    analyze_weekly_contributions,
    build_contributor_file_map,
    group_commits_by_author,
    rank_contributor_pairs,
    weekly_cutoff,
)
from .cli import ANALYSIS_PAIRS, ANALYSIS_WEEKLY, complete_args, parse_args, prompt_analysis_choice
from .config import load_config
from .errors import ApiError, AuthenticationError, ConfigurationError, RepositoryNotFoundError
from .github_client import GitHubClient
from .report import format_progress, format_top_pairs, format_weekly_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_progress(fraction: float) -> None:
    """Console progress observer: redraw a single progress line on stderr."""
    end = "\n" if fraction >= 1.0 else ""
    print(f"\r{format_progress(fraction)}", end=end, file=sys.stderr, flush=True)


def run_pair_analysis(client: GitHubClient, progress: Optional[Callable[[float], None]] = None) -> None:
    """Fetch commits and print the top contributor pairs."""
    commits = client.list_commits()
    print(f"Commits: {len(commits)}")
    print("Analyzing contributors pairs")

    file_map = build_contributor_file_map(client, commits, progress=progress)
    print(format_top_pairs(rank_contributor_pairs(file_map)))


def run_weekly_analysis(client: GitHubClient, progress: Optional[Callable[[float], None]] = None) -> None:
    """Fetch commits and contributors and print each contributor's last-week statistics."""
    commits = client.list_commits()
    print(f"Commits: {len(commits)}")

    commits_by_author = group_commits_by_author(commits)
    contributors = client.list_contributors()

    print("Analyzing contributors contributions")
    all_stats = analyze_weekly_contributions(
        client=client,
        commits_by_author=commits_by_author,
        contributors=contributors,
        cutoff=weekly_cutoff(),
        progress=progress,
    )
    print(format_weekly_report(all_stats))


def orchestrate_analysis(
    argv: Optional[Sequence[str]] = None,
    input_func: Callable[[str], str] = input,
) -> int:
    """Run the analyzer and map failures to process exit codes."""
    try:
        args = parse_args(argv)
        _configure_logging(args.verbose)

        print("GitHub Analyzer")
        complete_args(args, input_func)
        config = load_config(owner=args.owner, repo=args.repo)

        client = GitHubClient(config=config)
        repository = client.get_repository()
        print(f"Repository found: {repository.full_name}")

        choice = args.analysis
        if choice is None:
            choice = prompt_analysis_choice(input_func)

        if choice == ANALYSIS_PAIRS:
            run_pair_analysis(client, progress=print_progress)
        elif choice == ANALYSIS_WEEKLY:
            run_weekly_analysis(client, progress=print_progress)
        else:
            print("Invalid choice", file=sys.stderr)
            return EXIT_CONFIGURATION

        return EXIT_OK
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        logger.error("Authentication error: %s", exc)
        return EXIT_AUTHENTICATION
    except RepositoryNotFoundError as exc:
        logger.error("Repository not found: %s", exc)
        return EXIT_API
    except ApiError as exc:
        logger.error("An error occurred while accessing GitHub: %s", exc)
        return EXIT_API
    except Exception:
        logger.exception("Unexpected error while analyzing the repository")
        return EXIT_UNEXPECTED


def main() -> None:
    raise SystemExit(orchestrate_analysis())


if __name__ == "__main__":
    main()
