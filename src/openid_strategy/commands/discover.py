"""Discover command -- run OpenID discovery and print the provider redirect URL."""

from __future__ import annotations

from typing import Optional

import typer

from openid_strategy.commands import exit_on_error
from openid_strategy.output import (
    OutputFormat,
    format_response,
    get_output,
    info,
    print_data,
    success,
)


def discover_command(
    identifier: Optional[str] = typer.Argument(
        None, help="User-supplied identifier; defaults to the configured provider URL."
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="JSON or YAML strategy config file."
    ),
    return_url: Optional[str] = typer.Option(
        None, "--return-url", help="Return URL (overrides config)."
    ),
    realm: Optional[str] = typer.Option(None, "--realm", help="Realm (overrides config)."),
    profile: Optional[bool] = typer.Option(
        None, "--profile/--no-profile", help="Request SREG/AX profile attributes."
    ),
    immediate: bool = typer.Option(
        False, "--immediate", help="Build a checkid_immediate request."
    ),
) -> None:
    """Discover the OpenID provider for IDENTIFIER and print the redirect URL.

    Example::

        openid-strategy discover https://me.example.org/ \\
            --return-url https://www.example.com/auth/openid/return
    """
    from openid_strategy.config import resolve_config
    from openid_strategy.exceptions import BadRequestError, NoProviderError
    from openid_strategy.relying_party import RelyingParty

    with exit_on_error():
        config = resolve_config(
            config_file, return_url=return_url, realm=realm, profile=profile
        )
        target = identifier or config.provider_url
        if not target:
            raise BadRequestError("Missing OpenID identifier")

        info(f"Discovering OpenID provider for {target}")
        party = RelyingParty.from_config(config)
        url = party.authenticate(target, immediate or config.immediate)
        if not url:
            raise NoProviderError("Failed to discover OP endpoint URL")
        success(f"Discovered OpenID provider for {target}")

    if get_output().format == OutputFormat.JSON:
        format_response({"identifier": target, "redirect_url": url})
    else:
        print_data(url)
