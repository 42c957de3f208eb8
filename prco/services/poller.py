"""Wait for the hosting API to settle a pull request's mergeability."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prco.core.result import Err, Ok, Result
from prco.github.api import Mergeability, PullRequest
from prco.services.errors import ApiFailed, Cancelled, CheckoutError, NotMergeable, PollTimeout

if TYPE_CHECKING:
    from prco.core.cancel import CancelToken
    from prco.core.config import PollingConfig
    from prco.github.api import PullRequestSource
    from prco.output.console import ConsoleProtocol
    from prco.services.model import PullRequestTarget


def wait_until_mergeable(
    target: PullRequestTarget,
    *,
    github: PullRequestSource,
    polling: PollingConfig,
    cancel: CancelToken,
    console: ConsoleProtocol,
) -> Result[PullRequest, CheckoutError]:
    """Poll the PR until `mergeable` is decided or the attempt budget runs out.

    Makes at most floor(timeout / interval) API calls, sleeping `interval`
    between them. Only a still-computing (null) answer is retried; an API
    error, a false answer, or a cancellation ends polling immediately.

    Returns:
        Ok(PullRequest) once the PR is reported mergeable; otherwise
        Err(ApiFailed | NotMergeable | PollTimeout | Cancelled).
    """
    max_attempts = polling.max_attempts
    for attempt in range(1, max_attempts + 1):
        console.step("poll", "check the pull request is mergeable")
        result = github.get_pull_request(target.owner, target.repo, target.number)
        if isinstance(result, Err):
            e = result.error
            return Err(ApiFailed(url=e.url, status=e.status, message=e.message))

        pr = result.value
        match pr.mergeability:
            case Mergeability.MERGEABLE:
                return Ok(pr)
            case Mergeability.NOT_MERGEABLE:
                return Err(NotMergeable(number=target.number, mergeable_state=pr.mergeable_state))
            case Mergeability.UNKNOWN:
                if attempt == max_attempts:
                    break
                console.step("wait", f"wait {polling.interval:g}s: ({attempt}/{max_attempts})")
                if not cancel.sleep(polling.interval):
                    return Err(Cancelled(step="poll"))

    return Err(PollTimeout(number=target.number, attempts=max_attempts, timeout=polling.timeout))
