"""GitHub REST API access for release maintenance."""

from nightly_pruner.github.client import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubClient,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from nightly_pruner.github.models import RateLimitInfo, Release, ReleaseAsset, RepoContext

__all__ = [
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubClient",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubValidationError",
    "RateLimitInfo",
    "Release",
    "ReleaseAsset",
    "RepoContext",
]
