"""merge command - fetch and check out a base ref, then merge a head ref into it."""

from __future__ import annotations

from pathlib import Path

import typer

from prco.cli.commands._helpers import exit_on_failure
from prco.cli.context import build_context, cancel_on_signals
from prco.services.checkout import run_checkout
from prco.services.model import CheckoutRequest, RefPairTarget


def merge_refs(
    base: str = typer.Argument(..., help="Ref fetched from origin and checked out."),
    head: str = typer.Argument("", help="Ref merged into base (skipped if empty)."),
    config: Path | None = typer.Option(None, "--config", help="TOML config file."),
) -> None:
    """Fetch and check out BASE, then merge HEAD into it."""
    ctx = build_context(config)
    request = CheckoutRequest(target=RefPairTarget(base=base, head=head))

    with cancel_on_signals(ctx.cancel):
        outcome = run_checkout(request, console=ctx.console, cancel=ctx.cancel)
    exit_on_failure(outcome, ctx)

    merged = f" with {head} merged" if head else ""
    ctx.console.success(f"checked out {base}{merged}")
