"""CLI sub-commands for openid-strategy."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from openid_strategy.exceptions import OpenIDStrategyError
from openid_strategy.output import error


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report an :class:`OpenIDStrategyError` on stderr and exit with its code."""
    try:
        yield
    except OpenIDStrategyError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
