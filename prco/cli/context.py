from __future__ import annotations

import signal
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import FrameType

import typer

from prco.core.cancel import CancelToken
from prco.core.config import Config, load_config_or_default
from prco.core.errors import ErrorCode
from prco.core.result import Err
from prco.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    cancel: CancelToken


def build_context(config_path: Path | None) -> CLIContext:
    console = RichConsole()
    config_result = load_config_or_default(config_path)
    if isinstance(config_result, Err):
        console.error(str(config_result.error))
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(config=config_result.value, console=console, cancel=CancelToken())


@contextmanager
def cancel_on_signals(token: CancelToken) -> Iterator[None]:
    """Trip `token` on SIGINT/SIGTERM for the duration of the block."""

    def _handler(signum: int, frame: FrameType | None) -> None:
        token.cancel()

    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    for sig in previous:
        signal.signal(sig, _handler)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
