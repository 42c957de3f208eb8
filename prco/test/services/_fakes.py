from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from prco.core.cancel import CancelToken
from prco.core.result import Err, Ok, Result
from prco.platform.process import CommandOutcome, ProcessError, TimeoutProfile

PR_URL = "https://api.github.com/repos/o/r/pulls/42"


def pr_payload(mergeable: bool | None, number: int = 42) -> dict[str, object]:
    return {
        "number": number,
        "title": "Add feature",
        "state": "open",
        "mergeable": mergeable,
        "mergeable_state": {True: "clean", False: "dirty", None: "unknown"}[mergeable],
        "head": {"ref": "feature-x", "sha": "b" * 40},
        "base": {"ref": "main", "sha": "c" * 40},
    }


class InstantCancel(CancelToken):
    """CancelToken whose sleep returns immediately, optionally cancelling on the Nth sleep."""

    def __init__(self, cancel_on_sleep: int | None = None) -> None:
        super().__init__()
        self.sleeps: list[float] = []
        self._cancel_on_sleep = cancel_on_sleep

    def sleep(self, seconds: float) -> bool:
        self.sleeps.append(seconds)
        if self._cancel_on_sleep is not None and len(self.sleeps) >= self._cancel_on_sleep:
            self.cancel()
        return not self.is_cancelled


@dataclass
class Call:
    cmd: list[str]
    timeout: TimeoutProfile
    cwd: Path | None


def _empty_calls() -> list[Call]:
    return []


@dataclass
class FakeRunner:
    """Stand-in for run_command: records calls, fails with `exit_codes[git_subcommand]`."""

    exit_codes: dict[str, int] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=_empty_calls)

    def __call__(
        self,
        cmd: list[str],
        *,
        timeout: TimeoutProfile,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        cancel: CancelToken | None = None,
    ) -> Result[CommandOutcome, ProcessError]:
        self.calls.append(Call(cmd=cmd, timeout=timeout, cwd=cwd))
        code = self.exit_codes.get(cmd[1], 0)
        if code != 0:
            return Err(
                ProcessError(command=tuple(cmd), returncode=code, message=f"exit code: {code}")
            )
        return Ok(CommandOutcome(returncode=0))

    @property
    def commands(self) -> list[str]:
        return [" ".join(c.cmd) for c in self.calls]
