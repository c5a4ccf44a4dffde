"""Relying party -- a thin wrapper over ``python3-openid``'s ``Consumer``.

:class:`RelyingParty` exposes the two operations the strategy needs:

* :meth:`~RelyingParty.authenticate` -- discover the provider for an
  identifier and return the URL to redirect the user agent to.
* :meth:`~RelyingParty.verify_assertion` -- check the provider's response
  and return an :class:`~openid_strategy.models.AssertionResult`.

Library exceptions and failure responses are translated into
:class:`~openid_strategy.exceptions.DiscoveryError` and
:class:`~openid_strategy.exceptions.VerificationError`.

A fresh ``Consumer`` is created per call around the caller's session
mapping. Without a session (or with an empty one) the library re-runs
discovery on the claimed identifier during verification.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from openid.consumer import consumer
from openid.consumer.discover import DiscoveryFailure
from openid.extension import Extension
from openid.fetchers import HTTPFetchingError
from openid.store.interface import OpenIDStore

from openid_strategy.exceptions import DiscoveryError, VerificationError
from openid_strategy.models import AssertionResult, StrategyConfig
from openid_strategy.relying_party.extensions import (
    build_extensions,
    parse_attributes,
    parse_oauth,
    parse_pape,
)
from openid_strategy.relying_party.fetcher import install_fetcher
from openid_strategy.relying_party.store import create_store

logger = logging.getLogger(__name__)


class RelyingParty:
    """OpenID 2.0 relying party bound to one return URL and realm.

    Args:
        return_url: URL the provider sends the user agent back to.
        realm: Trust root presented to the provider.
        store: Association/nonce store; ``None`` for stateless mode.
        extensions: Extension requests attached to every auth request.
    """

    def __init__(
        self,
        return_url: str,
        realm: str,
        store: Optional[OpenIDStore] = None,
        extensions: Iterable[Extension] = (),
    ) -> None:
        self.return_url = return_url
        self.realm = realm
        self.store = store
        self.extensions = list(extensions)

    @classmethod
    def from_config(cls, config: StrategyConfig) -> RelyingParty:
        """Build a relying party (and install the HTTP fetcher) from *config*."""
        install_fetcher(timeout=config.timeout, verify_ssl=config.verify_ssl)
        return cls(
            return_url=config.return_url,
            realm=config.resolved_realm,
            store=create_store(config.store, stateless=config.stateless),
            extensions=build_extensions(config),
        )

    def _consumer(self, session: Optional[dict[str, Any]]) -> consumer.Consumer:
        return consumer.Consumer(session if session is not None else {}, self.store)

    def authenticate(
        self,
        identifier: str,
        immediate: bool = False,
        session: Optional[dict[str, Any]] = None,
    ) -> Optional[str]:
        """Discover the provider for *identifier* and build the redirect URL.

        Args:
            identifier: User-supplied identifier or OP identifier URL.
            immediate: Request ``checkid_immediate`` instead of
                ``checkid_setup``.
            session: Session mapping the library stores discovery state in.

        Returns:
            The provider URL to redirect to, or ``None`` if discovery found
            no usable endpoint.

        Raises:
            DiscoveryError: If discovery fails.
        """
        logger.debug("Starting OpenID discovery for %s", identifier)
        try:
            auth_request = self._consumer(session).begin(identifier)
        except (DiscoveryFailure, HTTPFetchingError) as exc:
            raise DiscoveryError("Failed to discover OP endpoint URL", exc) from exc

        if auth_request is None or auth_request.endpoint is None:
            return None

        for extension in self.extensions:
            auth_request.addExtension(extension)

        url = auth_request.redirectURL(self.realm, self.return_url, immediate=immediate)
        logger.debug("Discovered OP endpoint %s", auth_request.endpoint.server_url)
        return url

    def verify_assertion(
        self,
        query: dict[str, Any],
        current_url: Optional[str] = None,
        session: Optional[dict[str, Any]] = None,
    ) -> AssertionResult:
        """Verify the provider response carried in *query*.

        Args:
            query: The ``openid.*`` parameters of the return request.
            current_url: URL the return request arrived at; defaults to the
                configured return URL.
            session: Session mapping used when the request was started.

        Returns:
            An :class:`AssertionResult`. ``authenticated`` is false for
            cancel and setup-needed responses.

        Raises:
            VerificationError: If the response fails verification.
        """
        try:
            response = self._consumer(session).complete(
                dict(query), current_url or self.return_url
            )
        except (DiscoveryFailure, HTTPFetchingError) as exc:
            raise VerificationError("Failed to verify assertion", exc) from exc

        status = response.status
        if status == consumer.SUCCESS:
            logger.debug("Verified assertion for %s", response.identity_url)
            return AssertionResult(
                authenticated=True,
                claimed_identifier=response.identity_url,
                attributes=parse_attributes(response),
                pape=parse_pape(response),
                oauth=parse_oauth(response),
            )
        if status == consumer.CANCEL:
            return AssertionResult(authenticated=False, canceled=True)
        if status == consumer.SETUP_NEEDED:
            return AssertionResult(
                authenticated=False,
                claimed_identifier=response.identity_url,
                setup_url=getattr(response, "setup_url", None),
            )

        message = getattr(response, "message", None) or "assertion rejected"
        raise VerificationError(f"OpenID verification failed: {message}")
