"""OpenID 2.0 authentication strategy.

This module provides :class:`OpenIDStrategy`. Every request is one of two
kinds:

* **Return request** -- carries ``openid.mode`` (the provider sent the user
  agent back). A ``cancel`` mode fails immediately; anything else is handed
  to :meth:`RelyingParty.verify_assertion
  <openid_strategy.relying_party.RelyingParty.verify_assertion>`, and a
  verified identifier is passed to the application's verify callback.
* **Initiate request** -- no ``openid.mode``. The identifier is read from
  the request (or the configured ``provider_url``), discovered via
  :meth:`RelyingParty.authenticate
  <openid_strategy.relying_party.RelyingParty.authenticate>`, and the user
  agent is redirected to the provider.

The verify callback receives its arguments according to explicit
configuration flags::

    [request]  identifier  [profile]  [pape]  [oauth]  done

``request`` is present when ``pass_req_to_callback`` is set; ``profile``
when ``profile`` (or ``pape``/``oauth``) is configured; ``pape`` and
``oauth`` when those extensions are configured. ``done(err, user=None,
info=None)`` reports the application's decision.

See Also:
    :class:`openid_strategy.auth.base.Strategy` for the action contract.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from openid_strategy.auth.base import Strategy
from openid_strategy.config import build_config
from openid_strategy.exceptions import (
    BadRequestError,
    ConfigError,
    DiscoveryError,
    NoProviderError,
    OpenIDError,
    StrategyError,
    VerificationError,
)
from openid_strategy.models import AssertionResult, StrategyConfig
from openid_strategy.plugins.openid.profile import parse_profile
from openid_strategy.relying_party import RelyingParty

logger = logging.getLogger(__name__)

MODE_PARAM = "openid.mode"
CANCELED_MESSAGE = "OpenID authentication canceled"
FAILED_MESSAGE = "OpenID authentication failed"
SETUP_NEEDED_MESSAGE = "OpenID setup needed"

VerifyCallback = Callable[..., Any]


def _params(request: Any, attr: str) -> Mapping[str, Any]:
    value = getattr(request, attr, None)
    return value if value is not None else {}


class OpenIDStrategy(Strategy):
    """Authenticate users with OpenID 2.0.

    Args:
        config: A :class:`StrategyConfig` or a mapping validated into one.
        verify: The application's verify callback (see module docstring).
        relying_party: Optional pre-built :class:`RelyingParty`; built
            from *config* when omitted.

    Raises:
        ConfigError: If *verify* is not callable or *config* is invalid.

    Example::

        def verify(identifier, done):
            user = users.find_or_create(openid=identifier)
            done(None, user)

        strategy = OpenIDStrategy(
            {"return_url": "https://www.example.com/auth/openid/return"},
            verify,
        )
    """

    def __init__(
        self,
        config: StrategyConfig | Mapping[str, Any],
        verify: VerifyCallback,
        relying_party: Optional[RelyingParty] = None,
    ) -> None:
        if not callable(verify):
            raise ConfigError("OpenID authentication strategy requires a verify callback")
        self.config = build_config(dict(config) if isinstance(config, Mapping) else config)
        self._verify = verify
        self.relying_party = relying_party or RelyingParty.from_config(self.config)

    @property
    def name(self) -> str:
        return self.config.name

    def authenticate(self, request: Any, **options: Any) -> None:
        """Classify *request* and take exactly one action."""
        query = _params(request, "query")
        body = _params(request, "body")

        mode = query.get(MODE_PARAM) or body.get(MODE_PARAM)
        if mode:
            params = dict(body)
            params.update(query)
            self._handle_response(request, mode, params)
        else:
            self._handle_initiate(request, query, body)

    # -- return requests ------------------------------------------------

    def _handle_response(self, request: Any, mode: str, params: dict[str, Any]) -> None:
        logger.debug("Handling OpenID provider response (mode=%s)", mode)
        if mode == "cancel":
            logger.info("OpenID authentication canceled by the user")
            self.fail({"message": CANCELED_MESSAGE})
            return

        current_url = getattr(request, "url", None) or self.config.return_url
        try:
            result = self.relying_party.verify_assertion(
                params, current_url, getattr(request, "session", None)
            )
        except Exception as exc:
            logger.warning("OpenID assertion verification failed: %s", exc)
            if not isinstance(exc, OpenIDError):
                exc = VerificationError("Failed to verify assertion", exc)
            self.error(exc)
            return

        if not result.authenticated:
            self.fail(self._rejection_info(result))
            return

        self._call_verify(request, result)

    def _rejection_info(self, result: AssertionResult) -> dict[str, Any]:
        if result.canceled:
            return {"message": CANCELED_MESSAGE}
        if result.setup_url:
            return {"message": SETUP_NEEDED_MESSAGE, "setup_url": result.setup_url}
        return {"message": FAILED_MESSAGE}

    def _call_verify(self, request: Any, result: AssertionResult) -> None:
        args: list[Any] = []
        if self.config.pass_req_to_callback:
            args.append(request)
        args.append(result.claimed_identifier)
        if self.config.wants_profile:
            args.append(parse_profile(result.attributes))
        if self.config.pape is not None:
            args.append(result.pape)
        if self.config.oauth is not None:
            args.append(result.oauth)

        called = False

        def done(err: Any = None, user: Any = None, info: Any = None) -> None:
            nonlocal called
            if called:
                logger.warning("OpenID verify callback called done() more than once")
                return
            called = True
            if err:
                if not isinstance(err, BaseException):
                    err = StrategyError(str(err))
                self.error(err)
            elif not user:
                logger.info("OpenID user rejected for %s", result.claimed_identifier)
                self.fail(info)
            else:
                logger.info("OpenID authentication succeeded for %s", result.claimed_identifier)
                self.success(user, info)

        try:
            self._verify(*args, done)
        except Exception as exc:
            if called:
                raise
            called = True
            logger.warning("OpenID verify callback raised: %s", exc)
            self.error(exc)

    # -- initiate requests ----------------------------------------------

    def _handle_initiate(
        self, request: Any, query: Mapping[str, Any], body: Mapping[str, Any]
    ) -> None:
        field_name = self.config.identifier_field
        identifier = body.get(field_name) or query.get(field_name) or self.config.provider_url
        if not identifier:
            self.fail(BadRequestError("Missing OpenID identifier"))
            return

        try:
            url = self.relying_party.authenticate(
                identifier, self.config.immediate, getattr(request, "session", None)
            )
        except Exception as exc:
            logger.warning("OpenID discovery failed for %s: %s", identifier, exc)
            if not isinstance(exc, OpenIDError):
                exc = DiscoveryError("Failed to discover OP endpoint URL", exc)
            self.error(exc)
            return

        if not url:
            self.error(NoProviderError("Failed to discover OP endpoint URL"))
            return

        logger.info("Redirecting to OpenID provider for %s", identifier)
        self.redirect(url)
