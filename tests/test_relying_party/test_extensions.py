"""Tests for OpenID extension requests and response parsing.

Responses are real ``python3-openid`` ``SuccessResponse`` objects built from
an OpenID 2.0 message, so signature checks on extension arguments are the
library's own.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

from openid.consumer.consumer import SuccessResponse
from openid.extensions import ax, pape, sreg
from openid.message import OPENID2_NS, Message

from openid_strategy.models import StrategyConfig
from openid_strategy.relying_party.extensions import (
    AX_ATTRIBUTES,
    OAUTH_NS_URI,
    SREG_FIELDS,
    UI_NS_URI,
    OAuthRequest,
    UIRequest,
    build_extensions,
    parse_attributes,
    parse_oauth,
    parse_pape,
)

RETURN_URL = "https://www.example.com/auth/openid/return"
SREG_NS = "http://openid.net/extensions/sreg/1.1"
AX_NS = "http://openid.net/srv/ax/1.0"
PAPE_NS = "http://specs.openid.net/extensions/pape/1.0"


def _config(**kwargs: Any) -> StrategyConfig:
    return StrategyConfig(return_url=RETURN_URL, **kwargs)


def _success(args: dict[str, str], signed: bool = True) -> SuccessResponse:
    openid_args = {"ns": OPENID2_NS, "mode": "id_res"}
    openid_args.update(args)
    message = Message.fromOpenIDArgs(openid_args)
    signed_fields = (
        ["openid." + key for key in args if not key.startswith("ns.")] if signed else []
    )
    endpoint = MagicMock(claimed_id="http://www.example.com/profiles/username")
    return SuccessResponse(endpoint, message, signed_fields)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestBuildExtensions:
    def test_none_by_default(self) -> None:
        assert build_extensions(_config()) == []

    def test_profile_requests_sreg_and_ax(self) -> None:
        extensions = build_extensions(_config(profile=True))

        sreg_request, ax_request = extensions
        assert isinstance(sreg_request, sreg.SRegRequest)
        assert sreg_request.optional == list(SREG_FIELDS)
        assert sreg_request.required == []
        assert isinstance(ax_request, ax.FetchRequest)
        assert set(ax_request.requested_attributes) == {
            type_uri for type_uri, _ in AX_ATTRIBUTES.values()
        }
        assert ax_request.requested_attributes["http://axschema.org/contact/email"].required

    def test_pape(self) -> None:
        policy = "http://schemas.openid.net/pape/policies/2007/06/phishing-resistant"
        extensions = build_extensions(
            _config(pape={"max_auth_age": 600, "preferred_auth_policies": [policy]})
        )

        # pape implies a profile argument, so SREG/AX come first
        request = extensions[-1]
        assert len(extensions) == 3
        assert isinstance(request, pape.Request)
        assert request.max_auth_age == 600
        assert request.preferred_auth_policies == [policy]

    def test_order(self) -> None:
        extensions = build_extensions(
            _config(
                profile=True,
                pape={},
                ui={"mode": "popup"},
                oauth={"consumer_key": "www.example.com"},
            )
        )
        assert [type(e) for e in extensions] == [
            sreg.SRegRequest,
            ax.FetchRequest,
            pape.Request,
            UIRequest,
            OAuthRequest,
        ]


class TestUIRequest:
    def test_args(self) -> None:
        request = UIRequest(mode="popup", icon=True, lang="en-US")
        assert request.ns_uri == UI_NS_URI
        assert request.getExtensionArgs() == {"mode": "popup", "icon": "true", "lang": "en-US"}

    def test_empty(self) -> None:
        assert UIRequest().getExtensionArgs() == {}


class TestOAuthRequest:
    def test_args(self) -> None:
        request = OAuthRequest("www.example.com", ["https://mail.example.com/", "profile"])
        assert request.ns_uri == OAUTH_NS_URI
        assert request.getExtensionArgs() == {
            "consumer": "www.example.com",
            "scope": "https://mail.example.com/ profile",
        }

    def test_no_scope(self) -> None:
        assert OAuthRequest("key").getExtensionArgs() == {"consumer": "key"}


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


class TestParseAttributes:
    def test_simple_registration(self) -> None:
        response = _success(
            {
                "ns.sreg": SREG_NS,
                "sreg.nickname": "Johnny",
                "sreg.email": "username@example.com",
                "sreg.fullname": "John Doe",
                "sreg.country": "US",
            }
        )

        assert parse_attributes(response) == {
            "nickname": "Johnny",
            "email": "username@example.com",
            "fullname": "John Doe",
            "country": "US",
        }

    def test_attribute_exchange(self) -> None:
        response = _success(
            {
                "ns.ax": AX_NS,
                "ax.mode": "fetch_response",
                "ax.type.ext0": "http://axschema.org/contact/email",
                "ax.value.ext0": "username@example.com",
                "ax.type.ext1": "http://axschema.org/namePerson/first",
                "ax.value.ext1": "John",
                "ax.type.ext2": "http://axschema.org/namePerson/last",
                "ax.value.ext2": "Doe",
            }
        )

        assert parse_attributes(response) == {
            "email": "username@example.com",
            "firstname": "John",
            "lastname": "Doe",
        }

    def test_sreg_wins_over_ax(self) -> None:
        response = _success(
            {
                "ns.sreg": SREG_NS,
                "sreg.email": "sreg@example.com",
                "ns.ax": AX_NS,
                "ax.mode": "fetch_response",
                "ax.type.email": "http://axschema.org/contact/email",
                "ax.value.email": "ax@example.com",
                "ax.type.nick": "http://axschema.org/namePerson/friendly",
                "ax.value.nick": "Johnny",
            }
        )

        attributes = parse_attributes(response)
        assert attributes["email"] == "sreg@example.com"
        assert attributes["nickname"] == "Johnny"

    def test_unsigned_values_ignored(self) -> None:
        response = _success(
            {"ns.sreg": SREG_NS, "sreg.email": "username@example.com"}, signed=False
        )
        assert parse_attributes(response) == {}

    def test_no_extensions(self) -> None:
        assert parse_attributes(_success({})) == {}

    def test_malformed_ax_skipped(self) -> None:
        # count says two values, only one is present
        response = _success(
            {
                "ns.ax": AX_NS,
                "ax.mode": "fetch_response",
                "ax.type.email": "http://axschema.org/contact/email",
                "ax.count.email": "2",
                "ax.value.email.1": "username@example.com",
                "ns.sreg": SREG_NS,
                "sreg.nickname": "Johnny",
            }
        )

        assert parse_attributes(response) == {"nickname": "Johnny"}


class TestParsePape:
    def test_policies(self) -> None:
        response = _success(
            {
                "ns.pape": PAPE_NS,
                "pape.auth_policies": (
                    "http://schemas.openid.net/pape/policies/2007/06/multi-factor"
                ),
                "pape.auth_time": "2026-10-19T08:00:00Z",
            }
        )

        result = parse_pape(response)

        assert result is not None
        assert result.auth_policies == [
            "http://schemas.openid.net/pape/policies/2007/06/multi-factor"
        ]
        assert result.auth_time == "2026-10-19T08:00:00Z"

    def test_absent(self) -> None:
        assert parse_pape(_success({})) is None


class TestParseOAuth:
    def test_request_token(self) -> None:
        response = _success(
            {
                "ns.oauth": OAUTH_NS_URI,
                "oauth.request_token": "4/abc",
                "oauth.scope": "https://mail.example.com/ profile",
            }
        )

        result = parse_oauth(response)

        assert result is not None
        assert result.request_token == "4/abc"
        assert result.scope == ["https://mail.example.com/", "profile"]

    def test_absent(self) -> None:
        assert parse_oauth(_success({})) is None
