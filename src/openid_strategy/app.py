"""Typer application and CLI entry point for openid-strategy.

The CLI is a diagnostic companion to the strategy: it resolves the same
configuration a host application would use and runs OpenID discovery from
the command line, which is the quickest way to see whether a provider is
reachable and what redirect URL the strategy would produce.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from openid_strategy import __version__
from openid_strategy.commands.config import config_app
from openid_strategy.commands.discover import discover_command
from openid_strategy.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="openid-strategy",
    help="Inspect and exercise an OpenID 2.0 relying-party configuration.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("discover")(discover_command)
app.add_typer(config_app, name="config", help="Configuration inspection.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"openid-strategy {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
) -> None:
    """Root callback: install the output manager and logging level."""
    from openid_strategy.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``openid-strategy`` console script.

    Sub-commands turn :class:`~openid_strategy.exceptions.OpenIDStrategyError`
    into a clean exit with the error's ``exit_code``; anything else that
    escapes is reported and exits with :data:`EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except Exception as exc:
        from openid_strategy.output import error

        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
