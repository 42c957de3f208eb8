"""Git operations module.

Usage:
    from prco.git import fetch_pull_request, checkout

    step = fetch_pull_request(42)
    print(step)  # git fetch --depth 1 origin pull/42/merge:pr/42/merge
"""

from prco.git.commands import (
    FETCH_TIMEOUT,
    LOCAL_TIMEOUT,
    GitStep,
    checkout,
    fetch,
    fetch_pull_request,
    merge,
    pull_request_merge_ref,
)

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
