"""Tests for contributor pair and weekly contribution analysis."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghanalyzer.analysis import (
    TOP_PAIRS_LIMIT,
    analyze_weekly_contributions,
    build_contributor_file_map,
    compute_contributor_weekly_stats,
    count_contributor_pairs,
    group_commits_by_author,
    rank_contributor_pairs,
    weekly_cutoff,
)
from ghanalyzer.errors import ApiError, NotFoundError
from ghanalyzer.models import Commit, CommitFile, Contributor, PullRequest, ReviewComment

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)
CUTOFF = NOW - timedelta(days=7)


def _commit(sha: str, author: str | None, days_ago: float = 1.0) -> Commit:
    return Commit(sha=sha, author_login=author, date=NOW - timedelta(days=days_ago))


def _client_with_files(files_by_sha: dict) -> Mock:
    client = Mock()

    def _files(sha: str):
        value = files_by_sha[sha]
        if isinstance(value, Exception):
            raise value
        return [CommitFile(filename=name, additions=added) for name, added in value]

    client.list_commit_files.side_effect = _files
    return client


def _pr(number: int, author: str | None, days_ago: float) -> PullRequest:
    return PullRequest(number=number, author_login=author, created_at=NOW - timedelta(days=days_ago), state="closed")


def test_two_authors_on_same_file_form_one_pair():
    """Verify the basic scenario: two authors on x.txt rank as a single pair."""
    commits = [_commit("c1", "a"), _commit("c2", "b")]
    client = _client_with_files({"c1": [("x.txt", 5)], "c2": [("x.txt", 3)]})

    file_map = build_contributor_file_map(client, commits)

    assert file_map == {"x.txt": {"a", "b"}}
    assert rank_contributor_pairs(file_map) == [(("a", "b"), 1)]


def test_build_contributor_file_map_skips_unattributed_and_failing_commits():
    """Verify commits without author are ignored and lookup failures are skipped."""
    commits = [
        _commit("c1", "a"),
        _commit("c2", None),
        _commit("c3", "b"),
        _commit("c4", "c"),
    ]
    client = _client_with_files(
        {
            "c1": [("x.txt", 1), ("y.txt", 1)],
            "c3": NotFoundError("gone"),
            "c4": [("y.txt", 2)],
        }
    )

    file_map = build_contributor_file_map(client, commits)

    assert file_map == {"x.txt": {"a"}, "y.txt": {"a", "c"}}
    assert [call.args[0] for call in client.list_commit_files.call_args_list] == ["c1", "c3", "c4"]


def test_build_contributor_file_map_skips_generic_api_errors():
    """Verify any ApiError on a commit is treated as a per-item failure."""
    commits = [_commit("c1", "a"), _commit("c2", "b")]
    client = _client_with_files({"c1": ApiError("500"), "c2": [("z.txt", 4)]})

    file_map = build_contributor_file_map(client, commits)

    assert file_map == {"z.txt": {"b"}}


def test_build_contributor_file_map_reports_progress_fractions():
    """Verify the progress observer receives the completion fraction per commit."""
    commits = [_commit("c1", "a"), _commit("c2", None), _commit("c3", "b"), _commit("c4", "a")]
    client = _client_with_files({"c1": [], "c3": [], "c4": []})
    seen = []

    build_contributor_file_map(client, commits, progress=seen.append)

    assert seen == [0.25, 0.5, 0.75, 1.0]


def test_build_contributor_file_map_empty_commits():
    """Verify an empty history produces an empty map and no progress calls."""
    seen = []

    assert build_contributor_file_map(Mock(), [], progress=seen.append) == {}
    assert seen == []
    assert rank_contributor_pairs({}) == []


def test_count_contributor_pairs_is_symmetric_and_ignores_single_contributor_files():
    """Verify pair keys are order-independent and solo files add nothing."""
    file_map = {
        "a.py": {"bob", "alice"},
        "b.py": {"alice", "bob", "carol"},
        "c.py": {"dave"},
        "d.py": set(),
    }

    counts = count_contributor_pairs(file_map)

    assert counts == {("alice", "bob"): 2, ("alice", "carol"): 1, ("bob", "carol"): 1}
    assert ("bob", "alice") not in counts
    assert all(isinstance(count, int) and count > 0 for count in counts.values())


def test_rank_contributor_pairs_sorted_and_limited():
    """Verify ranking is non-increasing, tie-broken by logins and capped at ten."""
    logins = [f"user{i:02d}" for i in range(8)]
    file_map = {"shared.py": set(logins), "hot.py": {"user07", "user03"}}

    ranked = rank_contributor_pairs(file_map)

    assert len(ranked) == TOP_PAIRS_LIMIT
    assert ranked[0] == (("user03", "user07"), 2)
    counts = [count for _, count in ranked]
    assert counts == sorted(counts, reverse=True)
    assert [pair for pair, _ in ranked[1:3]] == [("user00", "user01"), ("user00", "user02")]


def test_rank_contributor_pairs_rejects_non_positive_limit():
    """Verify the pair limit must be positive."""
    with pytest.raises(ValueError):
        rank_contributor_pairs({"x": {"a", "b"}}, limit=0)


def test_group_commits_by_author_preserves_order_and_skips_unattributed():
    """Verify grouping by login keeps commit order and drops unattributed commits."""
    commits = [_commit("c1", "a"), _commit("c2", "b"), _commit("c3", None), _commit("c4", "a")]
    seen = []

    grouped = group_commits_by_author(commits, progress=seen.append)

    assert {login: [c.sha for c in items] for login, items in grouped.items()} == {
        "a": ["c1", "c4"],
        "b": ["c2"],
    }
    assert seen[-1] == 1.0
    assert len(seen) == 4


def test_weekly_cutoff_is_seven_days_before_now():
    """Verify the weekly window starts exactly seven days earlier."""
    assert weekly_cutoff(NOW) == datetime(2026, 1, 3, 12, 0, tzinfo=timezone.utc)
    assert weekly_cutoff().tzinfo is not None


def test_compute_weekly_stats_counts_only_recent_activity():
    """Verify lines, commits, pull requests and comment length use the weekly window."""
    commits = [_commit("new1", "alice", 1), _commit("new2", "alice", 6.5), _commit("old", "alice", 8)]
    client = _client_with_files(
        {
            "new1": [("a.py", 10), ("b.py", 2)],
            "new2": [("a.py", 5)],
            "old": [("a.py", 100)],
        }
    )
    pull_requests = [
        _pr(1, "alice", 2),
        _pr(2, "alice", 9),
        _pr(3, "bob", 1),
        _pr(4, "alice", 3),
    ]
    client.list_review_comments.side_effect = lambda number: {
        1: [ReviewComment(author_login="bob", body="nice"), ReviewComment(author_login="carol", body="x" * 42)],
        4: [],
    }[number]

    stats = compute_contributor_weekly_stats(client, "alice", commits, pull_requests, CUTOFF)

    assert stats.login == "alice"
    assert stats.commits == 2
    assert stats.lines_added == 17
    assert stats.merge_requests == 2
    assert stats.max_comment_length == 42
    assert sorted(call.args[0] for call in client.list_review_comments.call_args_list) == [1, 4]
    assert "old" not in [call.args[0] for call in client.list_commit_files.call_args_list]


def test_compute_weekly_stats_excludes_activity_exactly_at_cutoff():
    """Verify the window is exclusive of the cutoff instant."""
    commit = Commit(sha="edge", author_login="alice", date=CUTOFF)
    pr = PullRequest(number=1, author_login="alice", created_at=CUTOFF, state="open")
    client = Mock()

    stats = compute_contributor_weekly_stats(client, "alice", [commit], [pr], CUTOFF)

    assert (stats.commits, stats.lines_added, stats.merge_requests, stats.max_comment_length) == (0, 0, 0, 0)
    client.list_commit_files.assert_not_called()


def test_compute_weekly_stats_without_pull_requests_has_zero_comment_length():
    """Verify max comment length is zero when there are no qualifying pull requests."""
    client = _client_with_files({"c1": [("a.py", 3)]})

    stats = compute_contributor_weekly_stats(client, "alice", [_commit("c1", "alice")], [], CUTOFF)

    assert stats.max_comment_length == 0
    assert stats.merge_requests == 0
    assert stats.lines_added == 3


def test_compute_weekly_stats_skips_failing_items():
    """Verify undated commits and failing lookups are skipped rather than raised."""
    commits = [
        Commit(sha="nodate", author_login="alice", date=None),
        _commit("broken", "alice", 1),
        _commit("ok", "alice", 1),
    ]
    client = _client_with_files({"broken": ApiError("boom"), "ok": [("a.py", 4)]})
    client.list_review_comments.side_effect = ApiError("comments unavailable")

    stats = compute_contributor_weekly_stats(client, "alice", commits, [_pr(1, "alice", 1)], CUTOFF)

    assert stats.commits == 2
    assert stats.lines_added == 4
    assert stats.merge_requests == 1
    assert stats.max_comment_length == 0


def test_analyze_weekly_contributions_fetches_pull_requests_once():
    """Verify all contributors are analyzed in order with a single pull request listing."""
    client = _client_with_files({"c1": [("a.py", 7)]})
    client.list_pull_requests.return_value = [_pr(1, "bob", 1)]
    client.list_review_comments.return_value = [ReviewComment(author_login="alice", body="hello")]
    contributors = [Contributor(login="alice", contributions=5), Contributor(login="bob", contributions=1)]
    seen = []

    results = analyze_weekly_contributions(
        client=client,
        commits_by_author={"alice": [_commit("c1", "alice")]},
        contributors=contributors,
        cutoff=CUTOFF,
        progress=seen.append,
    )

    client.list_pull_requests.assert_called_once_with(state="all")
    assert [r.login for r in results] == ["alice", "bob"]
    assert (results[0].lines_added, results[0].commits, results[0].merge_requests) == (7, 1, 0)
    assert (results[1].lines_added, results[1].commits, results[1].merge_requests) == (0, 0, 1)
    assert results[1].max_comment_length == 5
    assert seen == [0.5, 1.0]
