"""OpenID extension requests and response parsing.

Requests are built from :class:`~openid_strategy.models.StrategyConfig` by
:func:`build_extensions` and attached to the library's ``AuthRequest``:

* Simple Registration (SREG 1.1) and Attribute Exchange (AX 1.0) when
  ``profile`` is enabled.
* Provider Authentication Policy Extension (PAPE) when ``pape`` is set.
* User Interface extension when ``ui`` is set.
* OpenID+OAuth hybrid when ``oauth`` is set.

``python3-openid`` ships SREG, AX and PAPE; the UI and OAuth extensions are
small :class:`openid.extension.Extension` subclasses defined here.

On the way back, :func:`parse_attributes`, :func:`parse_pape` and
:func:`parse_oauth` read the signed extension data out of a
``SuccessResponse``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openid.extension import Extension
from openid.extensions import ax, pape, sreg

from openid_strategy.models import (
    OAuthConfig,
    OAuthResult,
    PapeResult,
    StrategyConfig,
    UIConfig,
)

logger = logging.getLogger(__name__)

SREG_FIELDS = (
    "nickname",
    "email",
    "fullname",
    "dob",
    "gender",
    "postcode",
    "country",
    "language",
    "timezone",
)

# alias -> (type URI, required)
AX_ATTRIBUTES: dict[str, tuple[str, bool]] = {
    "email": ("http://axschema.org/contact/email", True),
    "fullname": ("http://axschema.org/namePerson", False),
    "firstname": ("http://axschema.org/namePerson/first", False),
    "lastname": ("http://axschema.org/namePerson/last", False),
    "nickname": ("http://axschema.org/namePerson/friendly", False),
}

UI_NS_URI = "http://specs.openid.net/extensions/ui/1.0"
OAUTH_NS_URI = "http://specs.openid.net/extensions/oauth/1.0"


class UIRequest(Extension):
    """OpenID User Interface extension request (popup mode, icon, language)."""

    ns_uri = UI_NS_URI
    ns_alias = "ui"

    def __init__(
        self, mode: Optional[str] = None, icon: bool = False, lang: Optional[str] = None
    ) -> None:
        super().__init__()
        self.mode = mode
        self.icon = icon
        self.lang = lang

    def getExtensionArgs(self) -> dict[str, str]:
        args: dict[str, str] = {}
        if self.mode:
            args["mode"] = self.mode
        if self.icon:
            args["icon"] = "true"
        if self.lang:
            args["lang"] = self.lang
        return args


class OAuthRequest(Extension):
    """OpenID+OAuth hybrid request for a pre-authorized request token."""

    ns_uri = OAUTH_NS_URI
    ns_alias = "oauth"

    def __init__(self, consumer_key: str, scope: Optional[list[str]] = None) -> None:
        super().__init__()
        self.consumer_key = consumer_key
        self.scope = list(scope or [])

    def getExtensionArgs(self) -> dict[str, str]:
        args = {"consumer": self.consumer_key}
        if self.scope:
            args["scope"] = " ".join(self.scope)
        return args


def sreg_request() -> sreg.SRegRequest:
    return sreg.SRegRequest(optional=list(SREG_FIELDS))


def ax_request() -> ax.FetchRequest:
    request = ax.FetchRequest()
    for alias, (type_uri, required) in AX_ATTRIBUTES.items():
        request.add(ax.AttrInfo(type_uri, alias=alias, required=required))
    return request


def pape_request(max_auth_age: Optional[int], policies: list[str]) -> pape.Request:
    return pape.Request(
        preferred_auth_policies=list(policies), max_auth_age=max_auth_age
    )


def ui_request(config: UIConfig) -> UIRequest:
    return UIRequest(mode=config.mode, icon=config.icon, lang=config.lang)


def oauth_request(config: OAuthConfig) -> OAuthRequest:
    return OAuthRequest(config.consumer_key, config.scope)


def build_extensions(config: StrategyConfig) -> list[Extension]:
    """Build every extension request enabled by *config*, in a stable order."""
    extensions: list[Extension] = []
    if config.wants_profile:
        extensions.append(sreg_request())
        extensions.append(ax_request())
    if config.pape is not None:
        extensions.append(
            pape_request(config.pape.max_auth_age, config.pape.preferred_auth_policies)
        )
    if config.ui is not None:
        extensions.append(ui_request(config.ui))
    if config.oauth is not None:
        extensions.append(oauth_request(config.oauth))
    return extensions


# --- Response parsing ---

# Signed but malformed extension data. The assertion itself is already
# verified, so the affected extension is skipped instead of failing it.
_MALFORMED = (ax.AXError, KeyError, ValueError)


def _parse_ax(response: Any) -> dict[str, str]:
    if not response.extensionResponse(ax.FetchResponse.ns_uri, True):
        return {}
    try:
        fetch_response = ax.FetchResponse.fromSuccessResponse(response)
    except _MALFORMED as exc:
        logger.warning("Ignoring malformed attribute exchange response: %r", exc)
        return {}
    if fetch_response is None:
        return {}

    attributes: dict[str, str] = {}
    for alias, (type_uri, _) in AX_ATTRIBUTES.items():
        values = fetch_response.data.get(type_uri) or []
        if values:
            attributes[alias] = values[0]
    return attributes


def _parse_sreg(response: Any) -> dict[str, str]:
    try:
        sreg_response = sreg.SRegResponse.fromSuccessResponse(response)
    except _MALFORMED as exc:
        logger.warning("Ignoring malformed simple registration response: %r", exc)
        return {}
    if sreg_response is None:
        return {}
    return {name: value for name, value in sreg_response.items() if value}


def parse_attributes(response: Any) -> dict[str, str]:
    """Flatten signed SREG and AX values of *response* under short names.

    Where both extensions supply the same attribute, the SREG value wins.
    A malformed extension contributes nothing.
    """
    attributes = _parse_ax(response)
    attributes.update(_parse_sreg(response))

    logger.debug("Parsed %d profile attribute(s)", len(attributes))
    return attributes


def parse_pape(response: Any) -> Optional[PapeResult]:
    # Absent namespaces come back as an empty dict, not None.
    if not response.extensionResponse(pape.ns_uri, True):
        return None
    try:
        pape_response = pape.Response.fromSuccessResponse(response)
    except _MALFORMED as exc:
        logger.warning("Ignoring malformed PAPE response: %r", exc)
        return None
    if pape_response is None:
        return None
    return PapeResult(
        auth_policies=list(pape_response.auth_policies or []),
        auth_time=pape_response.auth_time,
        nist_auth_level=getattr(pape_response, "nist_auth_level", None),
    )


def parse_oauth(response: Any) -> Optional[OAuthResult]:
    args = response.extensionResponse(OAUTH_NS_URI, True)
    if not args:
        return None
    try:
        scope = args.get("scope") or ""
        return OAuthResult(request_token=args.get("request_token"), scope=scope.split())
    except _MALFORMED as exc:
        logger.warning("Ignoring malformed OAuth response: %r", exc)
        return None
