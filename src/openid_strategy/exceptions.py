"""Exception hierarchy for openid_strategy.

All exceptions inherit from :class:`OpenIDStrategyError`, which carries an
``exit_code`` (used by the CLI in :func:`openid_strategy.app.main`) and a
``status_code`` (the HTTP status a host framework should answer with when
the exception reaches its ``error`` or ``fail`` handler).

Subclass hierarchy::

    OpenIDStrategyError        (exit 1, HTTP 500)
    +-- ConfigError            (exit 2, HTTP 500)
    +-- StrategyError          (exit 1, HTTP 500)
    +-- BadRequestError        (exit 2, HTTP 400)
    +-- OpenIDError            (exit 1, HTTP 500)
        +-- DiscoveryError     (exit 3, HTTP 502)
        +-- NoProviderError    (exit 3, HTTP 502)
        +-- VerificationError  (exit 4, HTTP 401)

:class:`BadRequestError` is usually not raised at all: the strategy hands
an instance to ``fail()`` as the informational payload so the host can
render a 400 response.
"""

from __future__ import annotations

from typing import Optional

from openid_strategy.exit_codes import (
    EXIT_DISCOVERY_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_VERIFICATION_FAILURE,
)


class OpenIDStrategyError(Exception):
    """Base exception for all openid_strategy errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    status_code: int = 500

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(OpenIDStrategyError):
    """Raised for invalid strategy configuration or a missing verify callback."""

    exit_code = EXIT_INVALID_USAGE


class StrategyError(OpenIDStrategyError):
    """Raised for misuse of the strategy protocol (unknown strategy, unbound action)."""


class BadRequestError(OpenIDStrategyError):
    """The incoming request lacks what is needed to start authentication."""

    exit_code = EXIT_INVALID_USAGE
    status_code = 400


class OpenIDError(OpenIDStrategyError):
    """An error reported by the relying-party library.

    Args:
        message: Human-readable error description.
        cause: The underlying library exception, if any.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class DiscoveryError(OpenIDError):
    """Discovery of the OpenID provider endpoint failed."""

    exit_code = EXIT_DISCOVERY_FAILURE
    status_code = 502


class NoProviderError(OpenIDError):
    """Discovery completed but yielded no provider endpoint to redirect to."""

    exit_code = EXIT_DISCOVERY_FAILURE
    status_code = 502


class VerificationError(OpenIDError):
    """A positive assertion failed verification (signature, nonce, return_to)."""

    exit_code = EXIT_VERIFICATION_FAILURE
    status_code = 401
