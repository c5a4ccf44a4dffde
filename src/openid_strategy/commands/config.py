"""Config commands -- show the effective strategy configuration.

The ``openid-strategy config`` group resolves configuration exactly as
:func:`~openid_strategy.config.resolve_config` does for a host application
(explicit options, then ``OPENID_STRATEGY_*`` environment variables, then
the config file) so precedence problems can be spotted from a shell.
"""

from __future__ import annotations

from typing import Optional

import typer

from openid_strategy.commands import exit_on_error
from openid_strategy.output import format_response, info

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="JSON or YAML strategy config file."
    ),
    return_url: Optional[str] = typer.Option(
        None, "--return-url", help="Return URL (overrides config)."
    ),
) -> None:
    """Show the resolved configuration, including the effective realm.

    Example::

        openid-strategy config show --config openid.yaml
        openid-strategy --json config show
    """
    from openid_strategy.config import resolve_config

    with exit_on_error():
        config = resolve_config(config_file, return_url=return_url)

    if config_file:
        info(f"Config file: {config_file}")
    data = config.model_dump(mode="json")
    data["resolved_realm"] = config.resolved_realm
    format_response(data)
