"""pr command - wait for a pull request to be mergeable and check out its merge ref."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from prco.cli.commands._helpers import exit_on_failure, exit_with_code
from prco.cli.context import build_context, cancel_on_signals
from prco.core.errors import ErrorCode
from prco.git.commands import pull_request_merge_ref
from prco.github.api import GitHubClient
from prco.github.http import RealHttpClient
from prco.services.checkout import run_checkout
from prco.services.model import CheckoutRequest, PullRequestTarget


def _split_repo(slug: str) -> tuple[str, str] | None:
    owner, sep, repo = slug.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return None
    return owner, repo


def pull_request(
    number: int = typer.Argument(..., help="Pull request number."),
    repo: str = typer.Option(
        ...,
        "--repo",
        envvar="GITHUB_REPOSITORY",
        help="Repository as owner/repo.",
    ),
    mergeable: bool = typer.Option(
        False,
        "--mergeable",
        help="PR is known mergeable and pr/<N>/merge is already fetched; only check it out.",
    ),
    interval: float | None = typer.Option(
        None, "--interval", help="Seconds between mergeability checks (default 5)."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Total seconds to wait for mergeability (default 50)."
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        envvar="GITHUB_TOKEN",
        show_default=False,
        help="API token sent as a bearer credential.",
    ),
    api_url: str | None = typer.Option(None, "--api-url", help="Hosting API base URL."),
    config: Path | None = typer.Option(None, "--config", help="TOML config file."),
    as_json: bool = typer.Option(
        False, "--json", help="Print the PR snapshot as JSON on stdout (git output goes to stderr)."
    ),
) -> None:
    """Wait until a pull request is mergeable, then check out its merge commit."""
    ctx = build_context(config)

    parts = _split_repo(repo)
    if parts is None:
        ctx.console.error(f"--repo must be owner/repo, got {repo!r}")
        exit_with_code(int(ErrorCode.USER_ERROR))
    owner, name = parts

    github = GitHubClient(
        RealHttpClient(token=token, timeout=ctx.config.github.http_timeout),
        api_url=api_url or ctx.config.github.api_url,
    )
    request = CheckoutRequest(
        target=PullRequestTarget(owner=owner, repo=name, number=number, mergeable=mergeable),
        polling=ctx.config.polling.with_overrides(interval=interval, timeout=timeout),
        stdout=sys.stderr if as_json else None,
    )

    with cancel_on_signals(ctx.cancel):
        outcome = run_checkout(request, console=ctx.console, github=github, cancel=ctx.cancel)
    exit_on_failure(outcome, ctx)

    ctx.console.success(f"checked out {pull_request_merge_ref(number)}")
    if as_json:
        snapshot = outcome.pull_request.raw if outcome.pull_request is not None else None
        typer.echo(json.dumps(snapshot, indent=2, sort_keys=True))
