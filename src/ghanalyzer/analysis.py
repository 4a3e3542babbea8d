"""Contributor analysis logic over GitHub commit and pull request data.

This module computes the two analyses offered by the tool:
- Contributor pairs: which contributors most often modify the same files.
- Weekly contributions: lines added, commits, pull requests and longest review
  comment per contributor over the last seven days.

Per-item lookup failures (a commit's files, a pull request's comments) are
logged and the item is skipped; the analysis always continues.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from itertools import combinations
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .errors import ApiError
from .github_client import GitHubClient
from .models import Commit, CommitFile, Contributor, ContributorPair, ContributorWeeklyStats, PullRequest

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

TOP_PAIRS_LIMIT = 10
WEEK = timedelta(days=7)


def _report_progress(progress: Optional[ProgressCallback], done: int, total: int) -> None:
    if progress is None or total <= 0:
        return
    progress(done / total)


def weekly_cutoff(now: Optional[datetime] = None) -> datetime:
    """Return the start of the weekly window, seven days before ``now`` (UTC)."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now - WEEK


def load_commit_files(client: GitHubClient, commit: Commit) -> List[CommitFile]:
    """Return a commit's files, fetching and caching them on first access."""
    if commit.files is None:
        commit.files = client.list_commit_files(commit.sha)
    return commit.files


def build_contributor_file_map(
    client: GitHubClient,
    commits: Sequence[Commit],
    progress: Optional[ProgressCallback] = None,
) -> Dict[str, Set[str]]:
    """Map each file path to the set of contributor logins that modified it.

    Commits without a linked author are ignored. A commit whose files cannot be
    fetched is logged and skipped.
    """
    file_map: Dict[str, Set[str]] = defaultdict(set)
    total = len(commits)
    unattributed = 0
    skipped = 0

    for index, commit in enumerate(commits, start=1):
        if commit.author_login is None:
            unattributed += 1
        else:
            try:
                files = load_commit_files(client, commit)
            except ApiError as exc:
                skipped += 1
                logger.warning("Error with commit %s, skipping: %s", commit.sha, exc)
            else:
                for commit_file in files:
                    file_map[commit_file.filename].add(commit.author_login)

        _report_progress(progress, index, total)

    logger.debug(
        "Built contributor file map",
        extra={
            "commits_total": total,
            "files": len(file_map),
            "commits_unattributed": unattributed,
            "commits_skipped": skipped,
        },
    )

    return dict(file_map)


def count_contributor_pairs(file_map: Mapping[str, Set[str]]) -> Counter[ContributorPair]:
    """Count, for every unordered pair of contributors, the files they share.

    Pairs are keyed by the sorted login tuple so ``(a, b)`` and ``(b, a)`` are
    the same pair. Files with fewer than two contributors add nothing.
    """
    pair_counts: Counter[ContributorPair] = Counter()

    for contributors in file_map.values():
        for pair in combinations(sorted(contributors), 2):
            pair_counts[pair] += 1

    return pair_counts


def rank_contributor_pairs(
    file_map: Mapping[str, Set[str]],
    limit: int = TOP_PAIRS_LIMIT,
) -> List[Tuple[ContributorPair, int]]:
    """Return the ``limit`` most frequent contributor pairs, highest count first.

    Equal counts are ordered by the pair's logins.

    Raises:
        ValueError: If ``limit`` is not greater than ``0``.
    """
    if limit <= 0:
        raise ValueError("Pair limit must be greater than 0.")

    pair_counts = count_contributor_pairs(file_map)
    ranked = sorted(pair_counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def group_commits_by_author(
    commits: Sequence[Commit],
    progress: Optional[ProgressCallback] = None,
) -> Dict[str, List[Commit]]:
    """Group commits by author login, preserving commit order within each group."""
    commits_by_author: Dict[str, List[Commit]] = defaultdict(list)
    total = len(commits)

    for index, commit in enumerate(commits, start=1):
        if commit.author_login is None:
            logger.debug("Skipping commit without linked author", extra={"sha": commit.sha})
        else:
            commits_by_author[commit.author_login].append(commit)

        _report_progress(progress, index, total)

    return dict(commits_by_author)


def _commits_in_window(commits: Sequence[Commit], cutoff: datetime) -> List[Commit]:
    recent: List[Commit] = []
    for commit in commits:
        if commit.date is None:
            logger.warning("Commit %s has no date, skipping", commit.sha)
            continue
        if commit.date > cutoff:
            recent.append(commit)
    return recent


def compute_contributor_weekly_stats(
    client: GitHubClient,
    login: str,
    commits: Sequence[Commit],
    pull_requests: Sequence[PullRequest],
    cutoff: datetime,
) -> ContributorWeeklyStats:
    """Compute one contributor's activity since ``cutoff``.

    Business logic:
    - Commits: the contributor's commits dated after ``cutoff``.
    - Lines of code: sum of added lines over all files of those commits.
    - Merge requests: pull requests (any state) opened by ``login`` after
      ``cutoff``.
    - Max comment length: longest review comment body on those pull requests,
      ``0`` when there is none.
    """
    stats = ContributorWeeklyStats(login=login)

    recent_commits = _commits_in_window(commits, cutoff)
    stats.commits = len(recent_commits)

    for commit in recent_commits:
        try:
            files = load_commit_files(client, commit)
        except ApiError as exc:
            logger.warning("Could not load files for commit %s, skipping: %s", commit.sha, exc)
            continue
        stats.lines_added += sum(commit_file.additions for commit_file in files)

    authored = [pr for pr in pull_requests if pr.author_login == login and pr.created_at > cutoff]
    stats.merge_requests = len(authored)

    for pr in authored:
        try:
            comments = client.list_review_comments(pr.number)
        except ApiError as exc:
            logger.warning("Could not load review comments for pull request #%s, skipping: %s", pr.number, exc)
            continue
        for comment in comments:
            stats.max_comment_length = max(stats.max_comment_length, len(comment.body))

    return stats


def analyze_weekly_contributions(
    client: GitHubClient,
    commits_by_author: Mapping[str, List[Commit]],
    contributors: Sequence[Contributor],
    cutoff: datetime,
    progress: Optional[ProgressCallback] = None,
) -> List[ContributorWeeklyStats]:
    """Compute weekly statistics for every contributor.

    Pull requests in every state are fetched once and shared across
    contributors. Contributors keep the order given by ``contributors``.
    """
    pull_requests = client.list_pull_requests(state="all")
    results: List[ContributorWeeklyStats] = []
    total = len(contributors)

    for index, contributor in enumerate(contributors, start=1):
        logger.info("Analyzing contributor: %s", contributor.login)
        results.append(
            compute_contributor_weekly_stats(
                client=client,
                login=contributor.login,
                commits=commits_by_author.get(contributor.login, []),
                pull_requests=pull_requests,
                cutoff=cutoff,
            )
        )
        _report_progress(progress, index, total)

    logger.info(
        "Collected weekly contribution stats",
        extra={
            "contributors": total,
            "pull_requests_total": len(pull_requests),
            "cutoff": cutoff.isoformat(),
        },
    )

    return results
