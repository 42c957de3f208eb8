"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from prco.output.errors import checkout_error_exit_code, print_checkout_error

if TYPE_CHECKING:
    from prco.cli.context import CLIContext
    from prco.services.model import CheckoutOutcome


def exit_on_failure(outcome: CheckoutOutcome, ctx: CLIContext) -> None:
    """Print the outcome's error and exit with its code; return if it succeeded."""
    if outcome.error is not None:
        print_checkout_error(outcome.error, ctx.console)
        raise typer.Exit(code=checkout_error_exit_code(outcome.error))


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)
