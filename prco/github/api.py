"""Pull request lookups against the hosting API.

Only one endpoint is used: GET /repos/{owner}/{repo}/pulls/{number}.
The `mergeable` field in that payload is tri-state: true, false, or null
while the host is still computing the test merge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from prco.core.config import DEFAULT_API_URL
from prco.core.result import Err, Ok, Result
from prco.core.structured import StrDict, get_bool, get_int, get_str, get_table
from prco.github.http import HttpError

if TYPE_CHECKING:
    from prco.github.http import HttpClient

__all__ = [
    "GitHubClient",
    "Mergeability",
    "PullRequest",
    "PullRequestSource",
    "parse_pull_request",
]


class Mergeability(Enum):
    MERGEABLE = "mergeable"
    NOT_MERGEABLE = "not_mergeable"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Snapshot of a pull request as reported by the API.

    Attributes:
        number: PR number
        mergeable: True/False, or None while the host is still computing it
        mergeable_state: Host-specific detail such as "clean" or "dirty"
        raw: The full payload, for callers needing fields not modelled here
    """

    number: int
    title: str = ""
    state: str = ""
    mergeable: bool | None = None
    mergeable_state: str | None = None
    head_ref: str | None = None
    head_sha: str | None = None
    base_ref: str | None = None
    merge_commit_sha: str | None = None
    html_url: str | None = None
    raw: StrDict = field(default_factory=dict, compare=False, repr=False)

    @property
    def mergeability(self) -> Mergeability:
        if self.mergeable is None:
            return Mergeability.UNKNOWN
        return Mergeability.MERGEABLE if self.mergeable else Mergeability.NOT_MERGEABLE


def parse_pull_request(data: StrDict) -> PullRequest | None:
    """Build a PullRequest from an API payload; None if `number` is missing."""
    number = get_int(data, "number")
    if number is None:
        return None

    head: StrDict = get_table(data, "head") or {}
    base: StrDict = get_table(data, "base") or {}

    return PullRequest(
        number=number,
        title=get_str(data, "title") or "",
        state=get_str(data, "state") or "",
        mergeable=get_bool(data, "mergeable"),
        mergeable_state=get_str(data, "mergeable_state"),
        head_ref=get_str(head, "ref"),
        head_sha=get_str(head, "sha"),
        base_ref=get_str(base, "ref"),
        merge_commit_sha=get_str(data, "merge_commit_sha"),
        html_url=get_str(data, "html_url"),
        raw=data,
    )


class PullRequestSource(Protocol):
    """Anything that can fetch a pull request snapshot."""

    def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> Result[PullRequest, HttpError]: ...


class GitHubClient:
    """Minimal GitHub REST client built on an injected HttpClient.

    Example:
        client = GitHubClient(RealHttpClient(token=token))
        result = client.get_pull_request("octo", "repo", 42)
    """

    def __init__(self, http: HttpClient, *, api_url: str = DEFAULT_API_URL) -> None:
        self._http = http
        self.api_url = api_url.rstrip("/")

    def pull_request_url(self, owner: str, repo: str, number: int) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/pulls/{number}"

    def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> Result[PullRequest, HttpError]:
        url = self.pull_request_url(owner, repo, number)
        result = self._http.get_json(url)
        if isinstance(result, Err):
            return result

        data: dict[str, Any] = result.value
        pr = parse_pull_request(data)
        if pr is None:
            return Err(HttpError(url=url, status=0, message="Missing number in response"))
        return Ok(pr)
