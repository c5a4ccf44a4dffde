"""openid_strategy -- an OpenID 2.0 authentication strategy.

The strategy sits between a request-handling host framework and the
``python3-openid`` relying-party library. For each request it decides
whether to redirect the user agent to an identity provider, verify the
provider's assertion, or reject the request, and reports the decision
through one of five actions (success, fail, error, redirect, pass).

Typical usage::

    from openid_strategy import OpenIDStrategy, StrategyManager

    def verify(identifier, profile, done):
        done(None, users.find_or_create(identifier, profile))

    manager = StrategyManager()
    manager.use(OpenIDStrategy(
        {"return_url": "https://www.example.com/auth/openid/return", "profile": True},
        verify,
    ))
    outcome = manager.authenticate("openid", request)

Modules:
    models: Pydantic configuration and result models.
    config: Config-file loading and precedence resolution.
    exceptions: Exception hierarchy with exit and HTTP status codes.
    auth: Strategy base class, request/outcome types, and the manager.
    relying_party: Discovery and verification over python3-openid.
    plugins: The OpenID strategy itself.
    app: The ``openid-strategy`` diagnostic CLI.
"""

__version__ = "0.3.0"

from openid_strategy.auth import Outcome, RequestContext, Strategy, StrategyManager  # noqa: E402
from openid_strategy.exceptions import BadRequestError, OpenIDStrategyError  # noqa: E402
from openid_strategy.models import Profile, StrategyConfig  # noqa: E402
from openid_strategy.plugins.openid import OpenIDStrategy  # noqa: E402

__all__ = [
    "BadRequestError",
    "OpenIDStrategy",
    "OpenIDStrategyError",
    "Outcome",
    "Profile",
    "RequestContext",
    "Strategy",
    "StrategyConfig",
    "StrategyManager",
    "__version__",
]
