"""Subprocess execution with timeouts and Result-based error handling.

run_command copies a child's output into caller-supplied sinks (bytes
pass through unchanged when the sink has a binary buffer) and
enforces a two-stage timeout: once `duration` elapses the child gets
SIGTERM, and if it is still alive `kill_after` seconds later it gets
SIGKILL. A CancelToken starts the same escalation early.

Exit codes follow shell conventions: a child that died from signal N
reports 128 + N, so a terminated child reports 143 and a killed one 137.

Usage:
    result = run_command(
        ["git", "checkout", "main"],
        timeout=TimeoutProfile(duration=30.0, kill_after=10.0),
    )
    match result:
        case Ok(outcome):
            print(f"exit {outcome.returncode}")
        case Err(error):
            print(f"Failed: {error}")
"""

from __future__ import annotations

import codecs
import os
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, TYPE_CHECKING, TextIO

from prco.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from prco.core.cancel import CancelToken

__all__ = ["CommandOutcome", "ProcessError", "TimeoutProfile", "run_command"]

_WAIT_SLICE_SECONDS = 0.05
_CHUNK_SIZE = 65536


@dataclass(frozen=True, slots=True)
class TimeoutProfile:
    """Soft and hard timeouts for one command.

    Attributes:
        duration: Seconds before the child is asked to terminate.
        kill_after: Seconds after the termination request before SIGKILL.
    """

    duration: float
    kill_after: float


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """How a child process finished.

    Attributes:
        returncode: Exit code (128 + signal for signal deaths).
        timed_out: The soft timeout elapsed and SIGTERM was sent.
        killed: The hard timeout elapsed and SIGKILL was sent.
        cancelled: Termination was requested through the cancel token.
    """

    returncode: int
    timed_out: bool = False
    killed: bool = False
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process never started.
        message: What went wrong, always naming the exit code when there is one.
        timed_out: The soft timeout elapsed.
        killed: The child had to be force-killed.
        cancelled: The run was cancelled by the caller.
    """

    command: tuple[str, ...]
    returncode: int
    message: str
    timed_out: bool = False
    killed: bool = False
    cancelled: bool = False

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def __str__(self) -> str:
        return f"{self.command_line}: {self.message}"


def _exit_code(returncode: int) -> int:
    # Popen reports death by signal N as -N.
    if returncode < 0:
        return 128 - returncode
    return returncode


class _Pump:
    """Copies one child pipe into a sink, byte for byte where the sink allows.

    Sinks with a binary `buffer` (sys.stdout, files) receive the child's
    bytes unchanged, so carriage-return progress lines and non-UTF-8 output
    survive. Pure text sinks (StringIO) receive the bytes decoded as UTF-8.
    A failing sink does not stop the pipe from being drained; the first
    error is kept in `error` for the caller to report.
    """

    def __init__(self, source: IO[bytes], sink: TextIO) -> None:
        self._source = source
        self._sink = sink
        self.error: Exception | None = None
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        self._thread.join()

    def _run(self) -> None:
        binary: IO[bytes] | None = getattr(self._sink, "buffer", None)
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        fd = self._source.fileno()
        with self._source:
            while chunk := os.read(fd, _CHUNK_SIZE):
                if self.error is None:
                    self._write(chunk, binary, decoder)
            if binary is None and self.error is None:
                self._write_text(decoder.decode(b"", final=True))

    def _write(
        self, chunk: bytes, binary: IO[bytes] | None, decoder: codecs.IncrementalDecoder
    ) -> None:
        if binary is None:
            self._write_text(decoder.decode(chunk))
            return
        try:
            # Text already queued on the sink must come out first.
            self._sink.flush()
            binary.write(chunk)
            binary.flush()
        except (OSError, ValueError) as e:
            self.error = e

    def _write_text(self, text: str) -> None:
        if not text:
            return
        try:
            self._sink.write(text)
            self._sink.flush()
        except (OSError, ValueError) as e:
            self.error = e


def _start_pump(source: IO[bytes] | None, sink: TextIO) -> _Pump | None:
    if source is None:
        return None
    pump = _Pump(source, sink)
    pump.start()
    return pump


def _send(proc: subprocess.Popen[bytes], *, kill: bool) -> None:
    if proc.poll() is not None:
        return
    try:
        if kill:
            proc.kill()
        else:
            proc.terminate()
    except OSError:
        # Already reaped between poll() and the signal.
        return


def _describe(
    outcome: CommandOutcome, timeout: TimeoutProfile, sink_error: Exception | None
) -> str:
    message = f"exit code: {outcome.returncode}"
    if outcome.killed:
        message += f" (killed {timeout.kill_after:g}s after termination request)"
    elif outcome.timed_out:
        message += f" (terminated after {timeout.duration:g}s timeout)"
    if sink_error is not None:
        message += f" (output could not be written: {sink_error})"
    return message


def run_command(
    cmd: list[str],
    *,
    timeout: TimeoutProfile,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    cancel: CancelToken | None = None,
) -> Result[CommandOutcome, ProcessError]:
    """Run a command to completion, streaming its output.

    Args:
        cmd: Command and arguments to execute.
        timeout: Soft/hard timeout profile.
        stdout: Sink for the child's stdout (defaults to sys.stdout).
        stderr: Sink for the child's stderr (defaults to sys.stderr).
        cwd: Working directory (inherits the caller's if None).
        env: Environment variables (uses current env if None).
        cancel: Token that, once cancelled, terminates the child early.

    Returns:
        Ok(CommandOutcome) if the child exited 0, Err(ProcessError) if it
        could not be started, exited non-zero, was cancelled, or its output
        could not be written to a sink.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, message=str(e)))

    pumps = [
        _start_pump(proc.stdout, stdout if stdout is not None else sys.stdout),
        _start_pump(proc.stderr, stderr if stderr is not None else sys.stderr),
    ]

    timed_out = False
    killed = False
    cancelled = False
    deadline = time.monotonic() + timeout.duration
    kill_deadline: float | None = None

    while True:
        try:
            proc.wait(timeout=_WAIT_SLICE_SECONDS)
            break
        except subprocess.TimeoutExpired:
            pass

        now = time.monotonic()
        if kill_deadline is None:
            if cancel is not None and cancel.is_cancelled:
                cancelled = True
            elif now >= deadline:
                timed_out = True
            else:
                continue
            _send(proc, kill=False)
            kill_deadline = now + timeout.kill_after
        elif not killed and now >= kill_deadline:
            killed = True
            _send(proc, kill=True)

    for pump in pumps:
        if pump is not None:
            pump.join()
    sink_error = next((p.error for p in pumps if p is not None and p.error is not None), None)

    outcome = CommandOutcome(
        returncode=_exit_code(proc.returncode),
        timed_out=timed_out,
        killed=killed,
        cancelled=cancelled,
    )

    if cancelled:
        return Err(
            ProcessError(
                command=command,
                returncode=outcome.returncode,
                message=f"cancelled (exit code: {outcome.returncode})",
                killed=killed,
                cancelled=True,
            )
        )

    if outcome.returncode != 0 or sink_error is not None:
        return Err(
            ProcessError(
                command=command,
                returncode=outcome.returncode,
                message=_describe(outcome, timeout, sink_error),
                timed_out=timed_out,
                killed=killed,
            )
        )

    return Ok(outcome)
