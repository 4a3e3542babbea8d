"""GitHub REST API client for contributor analysis data retrieval."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError, EmptyRepositoryError, NotFoundError, RepositoryNotFoundError
from .models import Commit, CommitFile, Contributor, PullRequest, Repository, ReviewComment

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub repository APIs used by the analyzer."""

    _API_VERSION = "2022-11-28"
    _PAGE_SIZE = 100
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including owner/repo/token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = f"{config.api_url}/repos/{config.owner}/{config.repo}"

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the repository."""
        path = path.strip("/")
        return f"{self._base_url}/{path}" if path else self._base_url

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse a GitHub timestamp (``2026-01-05T10:00:00Z``) as an aware UTC datetime.

        Raises:
            ApiError: If the value is present but not an ISO8601 timestamp.
        """
        if not value:
            return None

        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ApiError(f"GitHub API returned a malformed timestamp: {value!r}") from exc

        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    def _is_rate_limited(self, response: requests.Response) -> bool:
        """Return True for 429s and for 403s caused by an exhausted rate limit."""
        if response.status_code == 429:
            return True
        return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Pick the wait before retrying, capped at ``_MAX_BACKOFF_SECONDS``.

        Secondary rate limits send ``Retry-After``; an exhausted primary limit
        sends ``X-RateLimit-Reset`` as an epoch timestamp. Anything else backs
        off exponentially.
        """
        headers = response.headers
        wait: Optional[float] = None

        if headers.get("Retry-After", "").isdigit():
            wait = int(headers["Retry-After"])
        elif headers.get("X-RateLimit-Remaining") == "0" and headers.get("X-RateLimit-Reset", "").isdigit():
            wait = int(headers["X-RateLimit-Reset"]) - time.time()

        if wait is None:
            wait = 2 ** (attempt - 1)

        return int(min(self._MAX_BACKOFF_SECONDS, max(1, wait)))

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute a GET request with retry logic for rate limits and 5xx responses.

        Raises:
            NotFoundError: If the resource returns HTTP 404.
            EmptyRepositoryError: If the repository has no commits (HTTP 409).
            ApiError: If the request repeatedly fails or returns HTTP >= 400.
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=params, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"GitHub request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = self._is_rate_limited(response) or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                backoff = self._extract_backoff_seconds(response, attempt)
                logger.debug(
                    "Retrying GitHub request",
                    extra={"url": url, "status_code": status_code, "attempt": attempt, "backoff": backoff},
                )
                time.sleep(backoff)
                continue

            if status_code == 404:
                raise NotFoundError(f"GitHub resource not found: GET {url}")

            if status_code == 409:
                raise EmptyRepositoryError(f"GitHub repository is empty: GET {url}")

            if status_code >= 400:
                raise ApiError(
                    "GitHub API request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            return response

        raise ApiError(f"GitHub request failed after retries: GET {url}") from last_error

    def _decode(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a single JSON object below the repository URL."""
        url = self._build_url(path)
        payload = self._decode(self._request(url, params=params), url)

        if not isinstance(payload, dict):
            raise ApiError(f"GitHub API returned unexpected payload shape: GET {url}")

        return payload

    def _get_paginated(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint by following ``Link: rel="next"``.

        The ``next`` URL already carries the query string, so parameters are
        only sent with the first request.
        """
        url: Optional[str] = self._build_url(path)
        query: Optional[Dict[str, Any]] = dict(params or {})
        query["per_page"] = self._PAGE_SIZE
        items: List[Dict[str, Any]] = []

        while url:
            response = self._request(url, params=query)
            if response.status_code == 204:
                break

            payload = self._decode(response, url)

            if not isinstance(payload, list):
                raise ApiError(f"GitHub API returned unexpected payload shape: GET {url}")

            items.extend(item for item in payload if isinstance(item, dict))
            url = response.links.get("next", {}).get("url")
            query = None

        return items

    def get_repository(self) -> Repository:
        """Resolve the configured repository.

        Raises:
            RepositoryNotFoundError: If the repository does not exist or is not
                visible with the configured token.
        """
        try:
            payload = self._get_json("")
        except NotFoundError as exc:
            raise RepositoryNotFoundError(f"Repository '{self._config.full_name}' was not found.") from exc

        owner = payload.get("owner") or {}
        return Repository(
            full_name=str(payload.get("full_name") or self._config.full_name),
            owner=str(owner.get("login") or self._config.owner),
            name=str(payload.get("name") or self._config.repo),
            default_branch=payload.get("default_branch"),
        )

    def list_commits(self) -> List[Commit]:
        """List commits reachable from the default branch, newest first.

        An empty repository yields an empty list.
        """
        commits: List[Commit] = []

        try:
            items = self._get_paginated("commits")
        except EmptyRepositoryError:
            logger.info("Repository %s has no commits", self._config.full_name)
            return commits

        for item in items:
            sha = item.get("sha")
            if not sha:
                raise ApiError(f"GitHub commit payload is missing required fields: payload={item}")

            author = item.get("author") or {}
            commit_detail = item.get("commit") or {}
            committer = commit_detail.get("committer") or {}

            commits.append(
                Commit(
                    sha=str(sha),
                    author_login=author.get("login"),
                    date=self._parse_datetime(committer.get("date")),
                )
            )

        return commits

    def list_commit_files(self, sha: str) -> List[CommitFile]:
        """List files changed by a single commit with their added line counts."""
        payload = self._get_json(f"commits/{sha}")
        files: List[CommitFile] = []

        for item in payload.get("files") or []:
            filename = item.get("filename")
            if not filename:
                continue
            files.append(CommitFile(filename=str(filename), additions=int(item.get("additions") or 0)))

        return files

    def list_pull_requests(self, state: str = "all") -> List[PullRequest]:
        """List pull requests in the given state (``open``, ``closed`` or ``all``)."""
        pull_requests: List[PullRequest] = []

        for item in self._get_paginated("pulls", params={"state": state}):
            number = item.get("number")
            created_at = self._parse_datetime(item.get("created_at"))

            if number is None or created_at is None:
                raise ApiError(f"GitHub pull request payload is missing required fields: payload={item}")

            user = item.get("user") or {}
            pull_requests.append(
                PullRequest(
                    number=int(number),
                    author_login=user.get("login"),
                    created_at=created_at,
                    state=str(item.get("state") or ""),
                )
            )

        return pull_requests

    def list_review_comments(self, pr_number: int) -> List[ReviewComment]:
        """List review comments for a pull request."""
        comments: List[ReviewComment] = []

        for item in self._get_paginated(f"pulls/{pr_number}/comments"):
            user = item.get("user") or {}
            comments.append(ReviewComment(author_login=user.get("login"), body=str(item.get("body") or "")))

        return comments

    def list_contributors(self) -> List[Contributor]:
        """List repository contributors ordered by contribution count."""
        contributors: List[Contributor] = []

        for item in self._get_paginated("contributors"):
            login = item.get("login")
            if not login:
                continue
            contributors.append(Contributor(login=str(login), contributions=int(item.get("contributions") or 0)))

        return contributors
