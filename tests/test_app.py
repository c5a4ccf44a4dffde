"""Tests for the openid-strategy CLI (discover, config show, root options)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from openid_strategy import __version__
from openid_strategy.app import app
from openid_strategy.exceptions import DiscoveryError
from openid_strategy.exit_codes import (
    EXIT_DISCOVERY_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from openid_strategy.relying_party import RelyingParty

RETURN_URL = "https://www.example.com/auth/openid/return"
REDIRECT = "https://provider.example.com/openid?openid.mode=checkid_setup"


@pytest.fixture
def party(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace RelyingParty.from_config with a factory returning a mock party."""
    mock_party = MagicMock(spec=RelyingParty)
    mock_party.authenticate.return_value = REDIRECT
    factory = MagicMock(return_value=mock_party)
    monkeypatch.setattr(RelyingParty, "from_config", factory)
    mock_party.factory = factory
    return mock_party


def _config_file(root: Path, **data: object) -> str:
    settings: dict[str, object] = {"return_url": RETURN_URL}
    settings.update(data)
    path = root / "openid.json"
    path.write_text(json.dumps(settings), encoding="utf-8")
    return str(path)


class TestRootOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert f"openid-strategy {__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "discover" in result.output
        assert "config" in result.output


class TestDiscover:
    def test_prints_redirect_url(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        result = cli_runner.invoke(
            app,
            ["--quiet", "discover", "http://www.example.me/", "--return-url", RETURN_URL],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert result.output.strip() == REDIRECT
        party.authenticate.assert_called_once_with("http://www.example.me/", False)
        config = party.factory.call_args.args[0]
        assert config.return_url == RETURN_URL

    def test_json_output(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--json",
                "--quiet",
                "discover",
                "http://www.example.me/",
                "--return-url",
                RETURN_URL,
            ],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.output) == {
            "identifier": "http://www.example.me/",
            "redirect_url": REDIRECT,
        }

    def test_options_override_config_file(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        path = _config_file(isolated_config, realm="https://old.example.com/")

        result = cli_runner.invoke(
            app,
            [
                "--quiet",
                "discover",
                "http://www.example.me/",
                "-c",
                path,
                "--realm",
                "https://*.example.com/",
                "--profile",
                "--immediate",
            ],
        )

        assert result.exit_code == EXIT_SUCCESS
        config = party.factory.call_args.args[0]
        assert config.realm == "https://*.example.com/"
        assert config.profile is True
        party.authenticate.assert_called_once_with("http://www.example.me/", True)

    def test_provider_url_default(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        path = _config_file(isolated_config, provider_url="https://provider.example.net/")

        result = cli_runner.invoke(app, ["--quiet", "discover", "-c", path])

        assert result.exit_code == EXIT_SUCCESS
        party.authenticate.assert_called_once_with("https://provider.example.net/", False)

    def test_missing_identifier(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "discover", "--return-url", RETURN_URL]
        )

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Missing OpenID identifier" in result.output
        party.authenticate.assert_not_called()

    def test_missing_return_url(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "discover", "http://www.example.me/"])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Invalid OpenID strategy configuration" in result.output

    def test_discovery_error(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        party.authenticate.side_effect = DiscoveryError(
            "Failed to discover OP endpoint URL", ValueError("no XRDS")
        )

        result = cli_runner.invoke(
            app,
            ["--no-color", "discover", "http://www.example.me/", "--return-url", RETURN_URL],
        )

        assert result.exit_code == EXIT_DISCOVERY_FAILURE
        assert "no XRDS" in result.output

    def test_no_provider(
        self, cli_runner, isolated_config: Path, party: MagicMock
    ) -> None:
        party.authenticate.return_value = None

        result = cli_runner.invoke(
            app,
            ["--no-color", "discover", "http://www.example.me/", "--return-url", RETURN_URL],
        )

        assert result.exit_code == EXIT_DISCOVERY_FAILURE
        assert "Failed to discover OP endpoint URL" in result.output


class TestConfigShow:
    def test_json(self, cli_runner, isolated_config: Path) -> None:
        path = _config_file(isolated_config, profile=True, pape={"max_auth_age": 600})

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show", "-c", path])

        assert result.exit_code == EXIT_SUCCESS
        data = json.loads(result.output)
        assert data["return_url"] == RETURN_URL
        assert data["profile"] is True
        assert data["pape"] == {"max_auth_age": 600, "preferred_auth_policies": []}
        assert data["resolved_realm"] == "https://www.example.com/"

    def test_env_precedence(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = _config_file(isolated_config, name="file-name")
        monkeypatch.setenv("OPENID_STRATEGY_NAME", "env-name")

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show", "-c", path])

        assert json.loads(result.output)["name"] == "env-name"

    def test_invalid_file(self, cli_runner, isolated_config: Path) -> None:
        path = isolated_config / "openid.json"
        path.write_text("[]", encoding="utf-8")

        result = cli_runner.invoke(app, ["--no-color", "config", "show", "-c", str(path)])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "must contain a mapping" in result.output
