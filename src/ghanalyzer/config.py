"""Configuration parsing and validation for the GitHub contributor analyzer."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import AuthenticationError, ConfigurationError

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the analyzer."""

    owner: str
    repo: str
    token: str
    api_url: str = DEFAULT_API_URL

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def load_config(owner: str, repo: str) -> Config:
    """Build and validate application configuration.

    A ``.env`` file in the working directory is loaded first, so
    ``GITHUB_TOKEN`` may be supplied either way. Variables already present in
    the environment take precedence.

    Args:
        owner: Repository owner (user or organization login).
        repo: Repository name.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If ``owner`` or ``repo`` is blank.
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
    """
    owner = (owner or "").strip()
    repo = (repo or "").strip()
    if not owner:
        raise ConfigurationError("Invalid value for 'owner': expected a non-empty login.")
    if not repo:
        raise ConfigurationError("Invalid value for 'repo': expected a non-empty repository name.")

    load_dotenv()

    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub access token. "
            "Set the 'GITHUB_TOKEN' environment variable (or add it to .env) before running the analyzer."
        )

    api_url = os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_API_URL

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        api_url=api_url.rstrip("/"),
    )
