"""CLI output: data on stdout, diagnostics on stderr.

``discover`` prints a redirect URL and ``config show`` prints the resolved
settings; both go to stdout so they can be piped. Progress notes and errors
go to stderr. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` switch Rich
markup off, and ``--quiet`` silences the progress notes (never errors).

The module-level helpers delegate to one :class:`OutputManager` that
:func:`~openid_strategy.app.main_callback` installs per invocation.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Render CLI results and diagnostics.

    Args:
        format: Output format; ``AUTO`` means ``RICH`` on a colour terminal
            and ``PLAIN`` otherwise.
        no_color: Disable colour and Rich markup.
        quiet: Drop :meth:`info` and :meth:`success` notes.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._format = _resolve_format(format, self._no_color)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    def format_response(self, data: Any) -> None:
        """Write *data* to stdout as JSON, tab-separated pairs, or highlighted JSON."""
        if self._format == OutputFormat.PLAIN:
            lines = (
                [f"{key}\t{value}" for key, value in data.items()]
                if isinstance(data, dict)
                else [str(data)]
            )
            for line in lines:
                self.print_data(line)
            return

        rendered = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(rendered)
        else:
            Console(file=sys.stdout, force_terminal=True).print(
                Syntax(rendered, "json", theme="monokai", word_wrap=True)
            )

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def info(self, message: str) -> None:
        self._note(message, None)

    def success(self, message: str) -> None:
        self._note(message, "green")

    def error(self, message: str) -> None:
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def _note(self, message: str, style: Optional[str]) -> None:
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False)


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)
