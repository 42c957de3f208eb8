from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from prco.core.config import PollingConfig
from prco.core.result import Err, Ok, Result
from prco.services.errors import CheckoutError, InvalidRequest

if TYPE_CHECKING:
    from prco.github.api import PullRequest


@dataclass(frozen=True, slots=True)
class PullRequestTarget:
    """Check out the merge ref of a pull request.

    `mergeable` declares the PR already known mergeable with its merge
    ref present locally: polling and fetching are skipped.
    """

    owner: str
    repo: str
    number: int
    mergeable: bool = False


@dataclass(frozen=True, slots=True)
class RefPairTarget:
    """Check out `base` and merge `head` into it (merge skipped if head is empty)."""

    base: str
    head: str = ""


Target = PullRequestTarget | RefPairTarget


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """Everything one checkout invocation needs besides its collaborators.

    Attributes:
        target: What to check out
        polling: Mergeability polling interval/timeout (PR targets only)
        stdout: Sink for git stdout (process stdout if None)
        stderr: Sink for git stderr (process stderr if None)
        cwd: Working tree git runs in (caller's cwd if None)
    """

    target: Target
    polling: PollingConfig = field(default_factory=PollingConfig)
    stdout: TextIO | None = None
    stderr: TextIO | None = None
    cwd: Path | None = None


@dataclass(frozen=True, slots=True)
class CheckoutOutcome:
    """Result of a checkout run.

    The snapshot is kept even when a later step fails, so partial
    progress stays visible to the caller.
    """

    strategy: str
    pull_request: PullRequest | None = None
    error: CheckoutError | None = None
    steps: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_target(target: Target) -> Result[None, InvalidRequest]:
    match target:
        case PullRequestTarget(owner=owner, repo=repo, number=number):
            if not owner.strip():
                return Err(InvalidRequest("owner", "is empty"))
            if not repo.strip():
                return Err(InvalidRequest("repo", "is empty"))
            if number <= 0:
                return Err(InvalidRequest("number", f"must be positive, got {number}"))
        case RefPairTarget(base=base):
            if not base.strip():
                return Err(InvalidRequest("base", "is empty"))
    return Ok(None)


def validate_polling(polling: PollingConfig) -> Result[None, InvalidRequest]:
    if polling.interval <= 0:
        return Err(
            InvalidRequest("polling.interval", f"must be positive, got {polling.interval:g}")
        )
    if polling.timeout <= 0:
        return Err(
            InvalidRequest("polling.timeout", f"must be positive, got {polling.timeout:g}")
        )
    return Ok(None)
