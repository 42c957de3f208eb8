from __future__ import annotations

import typer

from prco import __version__
from prco.cli.commands.merge_cmd import merge_refs
from prco.cli.commands.pr_cmd import pull_request


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("pr")(pull_request)
app.command("merge")(merge_refs)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Check out pull request merge refs for CI."""


def main() -> None:
    app()
