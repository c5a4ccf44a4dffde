"""Strategy interface and dispatch for openid_strategy.

The main entry points are:

- :class:`Strategy` -- abstract base class for authentication strategies.
- :class:`StrategyManager` -- registry that maps names to strategies and
  dispatches one request, recording the resulting :class:`Outcome`.
- :class:`RequestContext` -- a concrete request shape for adapters and tests.

Typical usage::

    from openid_strategy.auth import RequestContext, StrategyManager

    manager = StrategyManager()
    manager.use(strategy)
    outcome = manager.authenticate("openid", RequestContext(query=params))
"""

from openid_strategy.auth.base import Strategy
from openid_strategy.auth.context import Outcome, RequestContext
from openid_strategy.auth.manager import StrategyManager

__all__ = [
    "Strategy",
    "StrategyManager",
    "Outcome",
    "RequestContext",
]
