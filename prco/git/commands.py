"""Git command forms used by the checkout flows.

Each builder returns a GitStep: the argv plus the timeout profile it
runs under. Network-bound fetches get a long soft timeout; local
checkout and merge get a short one.
"""

from __future__ import annotations

from dataclasses import dataclass

from prco.platform.process import TimeoutProfile

__all__ = [
    "FETCH_TIMEOUT",
    "LOCAL_TIMEOUT",
    "GitStep",
    "checkout",
    "fetch",
    "fetch_pull_request",
    "merge",
    "pull_request_merge_ref",
]

_KILL_AFTER_SECONDS = 10.0

# Network-bound transfers of unknown size
FETCH_TIMEOUT = TimeoutProfile(duration=10 * 60.0, kill_after=_KILL_AFTER_SECONDS)

# Local working-tree operations (checkout, merge)
LOCAL_TIMEOUT = TimeoutProfile(duration=30.0, kill_after=_KILL_AFTER_SECONDS)


@dataclass(frozen=True, slots=True)
class GitStep:
    """A single git invocation.

    Attributes:
        name: Step name reported to the console ("fetch", "checkout", "merge")
        args: Arguments after `git`
        timeout: Timeout profile for the invocation
    """

    name: str
    args: tuple[str, ...]
    timeout: TimeoutProfile

    @property
    def cmd(self) -> list[str]:
        return ["git", *self.args]

    def __str__(self) -> str:
        return " ".join(self.cmd)


def pull_request_merge_ref(number: int) -> str:
    """Local ref the synthetic merge commit of PR `number` is fetched into."""
    return f"pr/{number}/merge"


def fetch_pull_request(number: int) -> GitStep:
    """Shallow-fetch pull/<N>/merge from origin into pr/<N>/merge."""
    refspec = f"pull/{number}/merge:{pull_request_merge_ref(number)}"
    return GitStep(
        name="fetch",
        args=("fetch", "--depth", "1", "origin", refspec),
        timeout=FETCH_TIMEOUT,
    )


def fetch(ref: str) -> GitStep:
    return GitStep(name="fetch", args=("fetch", "origin", ref), timeout=FETCH_TIMEOUT)


def checkout(ref: str) -> GitStep:
    return GitStep(name="checkout", args=("checkout", ref), timeout=LOCAL_TIMEOUT)


def merge(ref: str) -> GitStep:
    return GitStep(name="merge", args=("merge", ref), timeout=LOCAL_TIMEOUT)
