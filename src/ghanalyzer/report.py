"""Text formatting helpers for contributor analysis reporting.

This module provides utilities for:
- Rendering the ranked contributor pairs.
- Rendering a contributor's weekly statistics block.
- Rendering a fixed-width text progress bar for console observers.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import ContributorPair, ContributorWeeklyStats


def format_pair(pair: ContributorPair) -> str:
    """Format a contributor pair as ``"a - b"``."""
    first, second = pair
    return f"{first} - {second}"


def format_top_pairs(ranked_pairs: Sequence[Tuple[ContributorPair, int]]) -> str:
    """Generate the contributor pair report.

    Args:
        ranked_pairs: Pairs with their shared-file counts, already ranked.

    Returns:
        ``"No contributors pairs found"`` when there are no pairs; otherwise a
        header followed by one ``"a - b : count"`` line per pair.
    """
    if not ranked_pairs:
        return "No contributors pairs found"

    lines = ["Top contributors pairs:"]
    lines.extend(f"{format_pair(pair)} : {count}" for pair, count in ranked_pairs)
    return "\n".join(lines)


def format_contributor_stats(stats: ContributorWeeklyStats) -> str:
    """Generate the weekly statistics block for one contributor."""
    lines = [
        f"Contributor: {stats.login}",
        f"Lines of code: {stats.lines_added}",
        f"Commits: {stats.commits}",
        f"Merge requests: {stats.merge_requests}",
        f"Max chars in comment: {stats.max_comment_length}",
    ]
    return "\n".join(lines)


def format_weekly_report(all_stats: Sequence[ContributorWeeklyStats]) -> str:
    """Join per-contributor blocks, separated by blank lines."""
    if not all_stats:
        return "No contributors found"

    blocks: List[str] = [format_contributor_stats(stats) for stats in all_stats]
    return "\n\n".join(blocks)


def format_progress(fraction: float, width: int = 50) -> str:
    """Render ``fraction`` (clamped to ``[0, 1]``) as ``[=====     ] NN%``."""
    fraction = min(1.0, max(0.0, fraction))
    percentage = int(fraction * 100)
    filled = int(fraction * width)
    return f"[{'=' * filled}{' ' * (width - filled)}] {percentage}%"
