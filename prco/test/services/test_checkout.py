"""Tests for services/checkout.py - checkout orchestration."""

from __future__ import annotations

from pathlib import Path
from types import ModuleType

import pytest

import prco.services
from prco.core.config import PollingConfig
from prco.core.result import Err
from prco.github.api import GitHubClient
from prco.github.http import HttpError, MockHttpClient
from prco.git import commands as git
from prco.git.commands import FETCH_TIMEOUT, LOCAL_TIMEOUT
from prco.output.console import MockConsole
from prco.platform.process import ProcessError
from prco.services import checkout as checkout_module
from prco.services.checkout import (
    PullRequestCheckout,
    RefPairCheckout,
    StepRunner,
    run_checkout,
    strategy_for,
)
from prco.services.errors import (
    ApiFailed,
    Cancelled,
    CommandFailed,
    InvalidRequest,
    NotMergeable,
    PollTimeout,
)
from prco.services.model import CheckoutRequest, PullRequestTarget, RefPairTarget

from ._fakes import PR_URL, FakeRunner, InstantCancel, pr_payload


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr(checkout_module, "run_command", fake)
    return fake


def _github(*responses: dict[str, object] | HttpError) -> tuple[GitHubClient, MockHttpClient]:
    http = MockHttpClient()
    if responses:
        http.set_json(PR_URL, *responses)
    return GitHubClient(http), http


def _pr_request(**kwargs: object) -> CheckoutRequest:
    target = PullRequestTarget(
        owner=str(kwargs.pop("owner", "o")),
        repo=str(kwargs.pop("repo", "r")),
        number=int(kwargs.pop("number", 42)),  # type: ignore[arg-type]
        mergeable=bool(kwargs.pop("mergeable", False)),
    )
    return CheckoutRequest(target=target, **kwargs)  # type: ignore[arg-type]


class TestValidation:
    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"owner": ""}, "owner"),
            ({"repo": "  "}, "repo"),
            ({"number": 0}, "number"),
            ({"number": -3}, "number"),
        ],
    )
    def test_invalid_pr_target_fails_before_any_io(
        self, runner: FakeRunner, kwargs: dict[str, object], field: str
    ) -> None:
        github, http = _github(pr_payload(True))

        outcome = run_checkout(_pr_request(**kwargs), console=MockConsole(), github=github)

        assert isinstance(outcome.error, InvalidRequest)
        assert outcome.error.field == field
        assert http.calls == []
        assert runner.calls == []

    def test_empty_base_fails_before_any_io(self, runner: FakeRunner) -> None:
        outcome = run_checkout(
            CheckoutRequest(target=RefPairTarget(base="", head="feature-x")),
            console=MockConsole(),
        )

        assert outcome.error == InvalidRequest("base", "is empty")
        assert runner.calls == []

    def test_polling_requires_client(self, runner: FakeRunner) -> None:
        outcome = run_checkout(_pr_request(), console=MockConsole())

        assert isinstance(outcome.error, InvalidRequest)
        assert outcome.error.field == "github"
        assert runner.calls == []

    @pytest.mark.parametrize(
        ("polling", "field"),
        [
            (PollingConfig(interval=0, timeout=50), "polling.interval"),
            (PollingConfig(interval=5, timeout=0), "polling.timeout"),
            (PollingConfig(interval=5, timeout=-1), "polling.timeout"),
        ],
    )
    def test_non_positive_durations_rejected(
        self, runner: FakeRunner, polling: PollingConfig, field: str
    ) -> None:
        github, http = _github(pr_payload(True))

        outcome = run_checkout(_pr_request(polling=polling), console=MockConsole(), github=github)

        assert isinstance(outcome.error, InvalidRequest)
        assert outcome.error.field == field
        assert "must be positive" in outcome.error.reason
        assert http.calls == []


class TestPullRequestFlow:
    def test_mergeable_on_first_poll(self, runner: FakeRunner) -> None:
        github, http = _github(pr_payload(True))
        console = MockConsole()

        outcome = run_checkout(_pr_request(), console=console, github=github, cancel=InstantCancel())

        assert outcome.ok
        assert outcome.strategy == "pull-request"
        assert outcome.pull_request is not None
        assert outcome.pull_request.number == 42
        assert outcome.pull_request.mergeable is True
        assert http.call_count(PR_URL) == 1
        assert runner.commands == [
            "git fetch --depth 1 origin pull/42/merge:pr/42/merge",
            "git checkout pr/42/merge",
        ]
        assert [c.timeout for c in runner.calls] == [FETCH_TIMEOUT, LOCAL_TIMEOUT]
        assert outcome.steps == ("fetch", "checkout")
        assert console.steps == ["poll", "fetch", "checkout"]

    def test_pre_declared_mergeable_skips_poll_and_fetch(self, runner: FakeRunner) -> None:
        github, http = _github(pr_payload(True))

        outcome = run_checkout(_pr_request(mergeable=True), console=MockConsole(), github=github)

        assert outcome.ok
        assert outcome.pull_request is None
        assert http.calls == []
        assert runner.commands == ["git checkout pr/42/merge"]

    def test_pre_declared_mergeable_needs_no_client(self, runner: FakeRunner) -> None:
        outcome = run_checkout(_pr_request(mergeable=True), console=MockConsole())

        assert outcome.ok
        assert runner.commands == ["git checkout pr/42/merge"]

    def test_checkout_failure_keeps_snapshot(self, runner: FakeRunner) -> None:
        runner.exit_codes["checkout"] = 1
        github, _ = _github(pr_payload(True))

        outcome = run_checkout(_pr_request(), console=MockConsole(), github=github)

        assert outcome.pull_request is not None
        assert outcome.pull_request.number == 42
        assert outcome.error == CommandFailed(
            command="git checkout pr/42/merge", returncode=1, message="exit code: 1"
        )

    def test_fetch_failure_stops_before_checkout(self, runner: FakeRunner) -> None:
        runner.exit_codes["fetch"] = 128
        github, _ = _github(pr_payload(True))

        outcome = run_checkout(_pr_request(), console=MockConsole(), github=github)

        assert isinstance(outcome.error, CommandFailed)
        assert outcome.error.returncode == 128
        assert "exit code: 128" in str(outcome.error)
        assert outcome.pull_request is not None
        assert outcome.steps == ("fetch",)

    def test_not_mergeable_runs_no_git(self, runner: FakeRunner) -> None:
        github, _ = _github(pr_payload(False))

        outcome = run_checkout(_pr_request(), console=MockConsole(), github=github)

        assert isinstance(outcome.error, NotMergeable)
        assert outcome.pull_request is None
        assert runner.calls == []

    def test_poll_timeout_runs_no_git(self, runner: FakeRunner) -> None:
        github, http = _github(pr_payload(None))

        outcome = run_checkout(
            _pr_request(polling=PollingConfig(interval=1, timeout=3)),
            console=MockConsole(),
            github=github,
            cancel=InstantCancel(),
        )

        assert outcome.error == PollTimeout(number=42, attempts=3, timeout=3)
        assert http.call_count(PR_URL) == 3
        assert runner.calls == []

    def test_api_failure(self, runner: FakeRunner) -> None:
        github, _ = _github(HttpError(url=PR_URL, status=401, message="Bad credentials"))

        outcome = run_checkout(_pr_request(), console=MockConsole(), github=github)

        assert outcome.error == ApiFailed(url=PR_URL, status=401, message="Bad credentials")
        assert runner.calls == []

    def test_cwd_is_forwarded(self, runner: FakeRunner, tmp_path: Path) -> None:
        github, _ = _github(pr_payload(True))

        run_checkout(_pr_request(cwd=tmp_path), console=MockConsole(), github=github)

        assert [c.cwd for c in runner.calls] == [tmp_path, tmp_path]


class TestRefPairFlow:
    def test_merge_failure_after_fetch_and_checkout(self, runner: FakeRunner) -> None:
        runner.exit_codes["merge"] = 1

        outcome = run_checkout(
            CheckoutRequest(target=RefPairTarget(base="main", head="feature-x")),
            console=MockConsole(),
        )

        assert isinstance(outcome.error, CommandFailed)
        assert outcome.error.returncode == 1
        assert str(outcome.error) == "git merge feature-x: exit code: 1"
        assert runner.commands == [
            "git fetch origin main",
            "git checkout main",
            "git merge feature-x",
        ]
        assert outcome.steps == ("fetch", "checkout", "merge")

    def test_success(self, runner: FakeRunner) -> None:
        console = MockConsole()

        outcome = run_checkout(
            CheckoutRequest(target=RefPairTarget(base="main", head="feature-x")),
            console=console,
        )

        assert outcome.ok
        assert outcome.strategy == "ref-pair"
        assert outcome.pull_request is None
        assert console.steps == ["fetch", "checkout", "merge"]

    def test_failing_fetch_aborts(self, runner: FakeRunner) -> None:
        runner.exit_codes["fetch"] = 1

        outcome = run_checkout(
            CheckoutRequest(target=RefPairTarget(base="main", head="feature-x")),
            console=MockConsole(),
        )

        assert isinstance(outcome.error, CommandFailed)
        assert runner.commands == ["git fetch origin main"]

    def test_empty_head_skips_merge(self, runner: FakeRunner) -> None:
        outcome = run_checkout(CheckoutRequest(target=RefPairTarget(base="main")), console=MockConsole())

        assert outcome.ok
        assert runner.commands == ["git fetch origin main", "git checkout main"]

    def test_cancelled_before_step_runs_nothing(self, runner: FakeRunner) -> None:
        token = InstantCancel()
        token.cancel()

        outcome = run_checkout(
            CheckoutRequest(target=RefPairTarget(base="main", head="feature-x")),
            console=MockConsole(),
            cancel=token,
        )

        assert outcome.error == Cancelled(step="fetch")
        assert runner.calls == []


class TestStrategySelection:
    def test_pr_target(self) -> None:
        strategy = strategy_for(
            _pr_request(), github=None, cancel=InstantCancel(), console=MockConsole()
        )
        assert isinstance(strategy, PullRequestCheckout)

    def test_ref_pair_target(self) -> None:
        strategy = strategy_for(
            CheckoutRequest(target=RefPairTarget(base="main")),
            github=None,
            cancel=InstantCancel(),
            console=MockConsole(),
        )
        assert isinstance(strategy, RefPairCheckout)


class TestStepRunner:
    def _runner(self, monkeypatch: pytest.MonkeyPatch, error: ProcessError) -> StepRunner:
        def fake_run_command(cmd: list[str], **_: object) -> Err[ProcessError]:
            return Err(error)

        monkeypatch.setattr(checkout_module, "run_command", fake_run_command)
        return StepRunner(console=MockConsole(), cancel=InstantCancel())

    def test_cancelled_process_maps_to_cancelled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        runner = self._runner(
            monkeypatch,
            ProcessError(("git", "fetch"), 143, "cancelled (exit code: 143)", cancelled=True),
        )

        assert runner.run(git.fetch("main")) == Err(Cancelled(step="fetch"))

    def test_kill_flags_are_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        runner = self._runner(
            monkeypatch,
            ProcessError(
                ("git", "checkout", "main"),
                137,
                "exit code: 137 (killed 10s after termination request)",
                timed_out=True,
                killed=True,
            ),
        )

        result = runner.run(git.checkout("main"))

        assert isinstance(result, Err)
        assert isinstance(result.error, CommandFailed)
        assert result.error.killed is True
        assert result.error.timed_out is True
        assert result.error.command == "git checkout main"
        assert runner.executed == ["checkout"]


class TestPackageExports:
    def test_checkout_attribute_is_the_submodule(self) -> None:
        assert isinstance(prco.services.checkout, ModuleType)
        assert checkout_module is prco.services.checkout
        assert prco.services.run_checkout is checkout_module.run_checkout

    def test_patched_runner_is_used(self, runner: FakeRunner) -> None:
        outcome = prco.services.run_checkout(
            CheckoutRequest(target=RefPairTarget(base="main")), console=MockConsole()
        )

        assert outcome.ok
        assert runner.commands == ["git fetch origin main", "git checkout main"]
