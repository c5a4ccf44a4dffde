"""Canonical Pydantic models shared across all openid_strategy modules.

The models fall into two groups:

**Configuration models** -- validated from keyword arguments, a mapping, or a
config file (see :mod:`openid_strategy.config`):
    :class:`StrategyConfig`, :class:`PapeConfig`, :class:`UIConfig`, and
    :class:`OAuthConfig`.

**Result models** -- produced per request by the relying party and the
profile parser, then handed to the application's verify callback:
    :class:`AssertionResult`, :class:`PapeResult`, :class:`OAuthResult`,
    :class:`Profile`, :class:`ProfileName`, and :class:`ProfileEmail`.

Result models are request-scoped: they are built fresh for every callback
and owned by the host application once handed over.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_absolute_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"must be an absolute http(s) URL, got {value!r}")
    return value


# --- Extension config ---


class PapeConfig(BaseModel):
    """Provider Authentication Policy Extension request parameters."""

    max_auth_age: Optional[int] = Field(
        default=None, ge=0, description="Maximum seconds since the user last authenticated"
    )
    preferred_auth_policies: list[str] = Field(
        default_factory=list, description="Policy URIs the provider should satisfy"
    )


class UIConfig(BaseModel):
    """OpenID User Interface extension request parameters."""

    mode: Optional[str] = Field(default=None, description="UI mode, e.g. 'popup'")
    icon: bool = Field(default=False, description="Ask the provider to show the RP icon")
    lang: Optional[str] = Field(default=None, description="Preferred language tag")


class OAuthConfig(BaseModel):
    """OpenID+OAuth hybrid extension request parameters."""

    consumer_key: str = Field(description="OAuth consumer key registered with the provider")
    scope: list[str] = Field(default_factory=list)


# --- Strategy config ---


class StrategyConfig(BaseModel):
    """Configuration for :class:`~openid_strategy.plugins.openid.OpenIDStrategy`.

    Example::

        StrategyConfig(
            return_url="https://www.example.com/auth/openid/return",
            realm="https://www.example.com/",
            profile=True,
        )
    """

    model_config = ConfigDict(extra="forbid")

    return_url: str = Field(description="URL the provider sends the user back to")
    realm: Optional[str] = Field(
        default=None,
        description="Trust root; derived from return_url when unset",
    )
    provider_url: Optional[str] = Field(
        default=None,
        description="Fixed OP identifier used when the request supplies none",
    )
    identifier_field: str = Field(
        default="openid_identifier",
        min_length=1,
        description="Request field holding the user-supplied identifier",
    )
    pass_req_to_callback: bool = Field(
        default=False, description="Pass the request as the verify callback's first argument"
    )
    profile: bool = Field(
        default=False, description="Request profile attributes and pass a parsed Profile"
    )
    name: str = Field(default="openid", min_length=1, description="Strategy name")
    stateless: bool = Field(
        default=False, description="Verify directly with the provider, keep no associations"
    )
    store: str = Field(
        default="memory",
        description="Association store: memory, file, file:/path, none",
    )
    immediate: bool = Field(default=False, description="Use checkid_immediate")
    pape: Optional[PapeConfig] = None
    ui: Optional[UIConfig] = None
    oauth: Optional[OAuthConfig] = None
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("return_url")
    @classmethod
    def _validate_return_url(cls, value: str) -> str:
        return _check_absolute_url(value)

    @field_validator("realm")
    @classmethod
    def _validate_realm(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        # Realms may carry a wildcard host ("https://*.example.com/").
        return _check_absolute_url(value.replace("*.", "", 1))

    @property
    def resolved_realm(self) -> str:
        """The configured realm, or ``scheme://host/`` of :attr:`return_url`."""
        if self.realm:
            return self.realm
        parts = urlsplit(self.return_url)
        return f"{parts.scheme}://{parts.netloc}/"

    @property
    def wants_profile(self) -> bool:
        """Whether the verify callback receives a profile argument."""
        return self.profile or self.pape is not None or self.oauth is not None


# --- Results ---


class PapeResult(BaseModel):
    """Policies the provider reports having applied."""

    auth_policies: list[str] = Field(default_factory=list)
    auth_time: Optional[str] = None
    nist_auth_level: Optional[int] = None


class OAuthResult(BaseModel):
    """Pre-authorized OAuth request token from the hybrid extension."""

    request_token: Optional[str] = None
    scope: list[str] = Field(default_factory=list)


class AssertionResult(BaseModel):
    """Outcome of verifying a provider response.

    ``attributes`` holds the Simple Registration and Attribute Exchange
    values flattened under short names (``email``, ``fullname``,
    ``firstname``, ``lastname``, ``nickname``, ...).
    """

    authenticated: bool
    claimed_identifier: Optional[str] = None
    attributes: dict[str, str] = Field(default_factory=dict)
    pape: Optional[PapeResult] = None
    oauth: Optional[OAuthResult] = None
    canceled: bool = False
    setup_url: Optional[str] = None


class ProfileName(BaseModel):
    family_name: Optional[str] = None
    given_name: Optional[str] = None


class ProfileEmail(BaseModel):
    value: str
    type: Optional[str] = None


class Profile(BaseModel):
    """User profile normalised from provider attributes."""

    display_name: Optional[str] = None
    name: ProfileName = Field(default_factory=ProfileName)
    emails: list[ProfileEmail] = Field(default_factory=list)
