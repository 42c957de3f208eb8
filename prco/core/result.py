"""Result type for explicit error handling.

Every fallible operation in prco returns a Result instead of raising:
the poller, the command runner and the API client all hand back either
Ok(value) or Err(error), and callers branch on the variant.

Usage:
    match github.get_pull_request("octo", "repo", 42):
        case Ok(pr):
            print(pr.mergeable)
        case Err(error):
            print(f"API call failed: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
