"""Custom exception types for the GitHub contributor analyzer."""


class AnalyzerError(Exception):
    """Base exception for all recoverable analyzer errors."""


class ConfigurationError(AnalyzerError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(AnalyzerError):
    """Raised when GitHub credentials are unavailable or invalid."""


class ApiError(AnalyzerError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class NotFoundError(ApiError):
    """Raised when a GitHub API resource does not exist (HTTP 404)."""


class RepositoryNotFoundError(NotFoundError):
    """Raised when the requested repository cannot be resolved."""


class EmptyRepositoryError(ApiError):
    """Raised when GitHub reports the repository has no commits (HTTP 409)."""
