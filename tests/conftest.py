"""Shared test fixtures for openid_strategy.

Provides fixtures for isolated config environments, output state, strategy
construction with a mocked relying party, and running CLI commands. These
fixtures are discovered by pytest and available to every test module
without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from openid_strategy.models import AssertionResult
from openid_strategy.output import OutputFormat, OutputManager, reset_output, set_output
from openid_strategy.relying_party import RelyingParty

RETURN_URL = "https://www.example.com/auth/openid/return"
CLAIMED_ID = "http://www.example.com/profiles/username"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Relying party fixtures
# ---------------------------------------------------------------------------


def _assertion(**kwargs: Any) -> AssertionResult:
    defaults: dict[str, Any] = {"authenticated": True, "claimed_identifier": CLAIMED_ID}
    defaults.update(kwargs)
    return AssertionResult(**defaults)


@pytest.fixture
def make_assertion() -> Callable[..., AssertionResult]:
    """Factory for a positive assertion for CLAIMED_ID, overridable by kwargs."""
    return _assertion


@pytest.fixture
def relying_party() -> MagicMock:
    """A relying party double whose verification yields a bare positive assertion.

    Discovery echoes the identifier into a fragment of a fixed provider URL
    so tests can see which identifier was discovered.
    """
    party = MagicMock(spec=RelyingParty)
    party.verify_assertion.return_value = _assertion()
    party.authenticate.side_effect = (
        lambda identifier, immediate=False, session=None: (
            f"http://provider.example.com/openid#{identifier}"
        )
    )
    return party


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME at tmp_path, clears every OPENID_STRATEGY_*
    environment variable, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("openid_strategy.config._is_xdg_platform", lambda: True)

    import os

    for var in list(os.environ):
        if var.startswith("OPENID_STRATEGY_"):
            monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
