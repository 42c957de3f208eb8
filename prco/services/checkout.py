"""Checkout orchestration.

Two strategies share one StepRunner, so the git timeout and error
handling is identical for both flows:

- PullRequestCheckout: poll mergeability, fetch pull/<N>/merge into
  pr/<N>/merge, check it out.
- RefPairCheckout: fetch base, check out base, merge head.

Every step is fail-fast; nothing is rolled back.

Usage:
    outcome = run_checkout(
        CheckoutRequest(target=PullRequestTarget("octo", "repo", 42)),
        github=GitHubClient(RealHttpClient(token=token)),
        console=RichConsole(),
    )
    if not outcome.ok:
        print(outcome.error)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, TextIO

from prco.core.cancel import CancelToken
from prco.core.result import Err, Ok, Result
from prco.git import commands as git
from prco.platform.process import run_command
from prco.services.errors import Cancelled, CheckoutError, CommandFailed, InvalidRequest
from prco.services.model import (
    CheckoutOutcome,
    CheckoutRequest,
    PullRequestTarget,
    RefPairTarget,
    validate_polling,
    validate_target,
)
from prco.services.poller import wait_until_mergeable

if TYPE_CHECKING:
    from prco.core.config import PollingConfig
    from prco.github.api import PullRequest, PullRequestSource
    from prco.git.commands import GitStep
    from prco.output.console import ConsoleProtocol

__all__ = [
    "CheckoutStrategy",
    "PullRequestCheckout",
    "RefPairCheckout",
    "StepRunner",
    "run_checkout",
    "strategy_for",
]


class StepRunner:
    """Runs git steps through the command runner and records what ran."""

    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        cancel: CancelToken,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._console = console
        self._cancel = cancel
        self._stdout = stdout
        self._stderr = stderr
        self._cwd = cwd
        self.executed: list[str] = []

    def run(self, step: GitStep) -> Result[None, CommandFailed | Cancelled]:
        if self._cancel.is_cancelled:
            return Err(Cancelled(step=step.name))

        self._console.step(step.name, str(step))
        self.executed.append(step.name)
        result = run_command(
            step.cmd,
            timeout=step.timeout,
            stdout=self._stdout,
            stderr=self._stderr,
            cwd=self._cwd,
            cancel=self._cancel,
        )
        if isinstance(result, Err):
            e = result.error
            if e.cancelled:
                return Err(Cancelled(step=step.name))
            return Err(
                CommandFailed(
                    command=str(step),
                    returncode=e.returncode,
                    message=e.message,
                    timed_out=e.timed_out,
                    killed=e.killed,
                )
            )
        return Ok(None)


class CheckoutStrategy(Protocol):
    """One way of bringing the working tree to the state CI should test."""

    name: str

    def validate(self) -> Result[None, InvalidRequest]: ...

    def run(self, runner: StepRunner) -> CheckoutOutcome: ...


class PullRequestCheckout:
    name = "pull-request"

    def __init__(
        self,
        target: PullRequestTarget,
        *,
        github: PullRequestSource | None,
        polling: PollingConfig,
        cancel: CancelToken,
        console: ConsoleProtocol,
    ) -> None:
        self._target = target
        self._github = github
        self._polling = polling
        self._cancel = cancel
        self._console = console

    def validate(self) -> Result[None, InvalidRequest]:
        result = validate_target(self._target)
        if isinstance(result, Err) or self._target.mergeable:
            return result
        if self._github is None:
            return Err(InvalidRequest("github", "client is required to poll mergeability"))
        return validate_polling(self._polling)

    def run(self, runner: StepRunner) -> CheckoutOutcome:
        number = self._target.number
        pr: PullRequest | None = None

        if not self._target.mergeable and self._github is not None:
            polled = wait_until_mergeable(
                self._target,
                github=self._github,
                polling=self._polling,
                cancel=self._cancel,
                console=self._console,
            )
            if isinstance(polled, Err):
                return self._outcome(runner, None, polled.error)
            pr = polled.value

            fetched = runner.run(git.fetch_pull_request(number))
            if isinstance(fetched, Err):
                return self._outcome(runner, pr, fetched.error)

        checked_out = runner.run(git.checkout(git.pull_request_merge_ref(number)))
        if isinstance(checked_out, Err):
            return self._outcome(runner, pr, checked_out.error)
        return self._outcome(runner, pr, None)

    def _outcome(
        self,
        runner: StepRunner,
        pr: PullRequest | None,
        error: CheckoutError | None,
    ) -> CheckoutOutcome:
        return CheckoutOutcome(
            strategy=self.name,
            pull_request=pr,
            error=error,
            steps=tuple(runner.executed),
        )


class RefPairCheckout:
    name = "ref-pair"

    def __init__(self, target: RefPairTarget) -> None:
        self._target = target

    def validate(self) -> Result[None, InvalidRequest]:
        return validate_target(self._target)

    def run(self, runner: StepRunner) -> CheckoutOutcome:
        steps = [git.fetch(self._target.base), git.checkout(self._target.base)]
        if self._target.head.strip():
            steps.append(git.merge(self._target.head))

        for step in steps:
            result = runner.run(step)
            if isinstance(result, Err):
                return CheckoutOutcome(
                    strategy=self.name,
                    error=result.error,
                    steps=tuple(runner.executed),
                )
        return CheckoutOutcome(strategy=self.name, steps=tuple(runner.executed))


def strategy_for(
    request: CheckoutRequest,
    *,
    github: PullRequestSource | None,
    cancel: CancelToken,
    console: ConsoleProtocol,
) -> CheckoutStrategy:
    match request.target:
        case PullRequestTarget() as target:
            return PullRequestCheckout(
                target,
                github=github,
                polling=request.polling,
                cancel=cancel,
                console=console,
            )
        case RefPairTarget() as target:
            return RefPairCheckout(target)


def run_checkout(
    request: CheckoutRequest,
    *,
    console: ConsoleProtocol,
    github: PullRequestSource | None = None,
    cancel: CancelToken | None = None,
) -> CheckoutOutcome:
    """Validate the request, then run the matching strategy.

    Validation happens before any API call or subprocess. The outcome
    carries the last PR snapshot (None if polling was skipped or failed),
    the first error hit, and the names of the git steps that ran.
    """
    token = cancel if cancel is not None else CancelToken()
    strategy = strategy_for(request, github=github, cancel=token, console=console)

    valid = strategy.validate()
    if isinstance(valid, Err):
        return CheckoutOutcome(strategy=strategy.name, error=valid.error)

    runner = StepRunner(
        console=console,
        cancel=token,
        stdout=request.stdout,
        stderr=request.stderr,
        cwd=request.cwd,
    )
    return strategy.run(runner)
