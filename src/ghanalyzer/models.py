"""Domain models for GitHub contributor analysis.

These dataclasses intentionally model only the subset of API payload fields that
are required for the pair and weekly analyses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

ContributorPair = Tuple[str, str]


@dataclass(slots=True)
class Repository:
    """Represents a repository returned by the GitHub API."""

    full_name: str
    owner: str
    name: str
    default_branch: Optional[str] = None


@dataclass(slots=True)
class CommitFile:
    """A file touched by a commit and the number of lines it added."""

    filename: str
    additions: int


@dataclass(slots=True)
class Commit:
    """Represents a commit from the repository history.

    ``author_login`` is ``None`` when GitHub could not link the commit to an
    account. ``files`` is ``None`` until loaded from the single-commit endpoint.
    """

    sha: str
    author_login: Optional[str]
    date: Optional[datetime]
    files: Optional[List[CommitFile]] = None


@dataclass(slots=True)
class Contributor:
    """Represents a repository contributor."""

    login: str
    contributions: int = 0


@dataclass(slots=True)
class PullRequest:
    """Represents the minimal pull request data required for weekly statistics."""

    number: int
    author_login: Optional[str]
    created_at: datetime
    state: str


@dataclass(slots=True)
class ReviewComment:
    """Represents a pull request review comment."""

    author_login: Optional[str]
    body: str


@dataclass(slots=True)
class ContributorWeeklyStats:
    """Aggregated last-week activity for one contributor."""

    login: str
    lines_added: int = 0
    commits: int = 0
    merge_requests: int = 0
    max_comment_length: int = 0

