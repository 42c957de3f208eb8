"""Hosting API access (GitHub REST)."""

from .api import (
    GitHubClient,
    Mergeability,
    PullRequest,
    PullRequestSource,
    parse_pull_request,
)
from .http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)

__all__ = [
    # api
    "GitHubClient",
    "Mergeability",
    "PullRequest",
    "PullRequestSource",
    "parse_pull_request",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]
