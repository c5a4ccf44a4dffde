"""Strategy manager -- registry and per-request dispatcher for strategies.

The :class:`StrategyManager` maps strategy names (``"openid"``,
``"google"``, ...) to configured :class:`~openid_strategy.auth.base.Strategy`
instances. Its :meth:`~StrategyManager.authenticate` method is the seam a
host-framework adapter calls: it copies the registered strategy, binds the
five actions to record into an :class:`~openid_strategy.auth.context.Outcome`,
runs the strategy, and hands the outcome back for the adapter to turn into
an HTTP response.

See Also:
    :class:`~openid_strategy.auth.base.Strategy` -- the strategy interface.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from openid_strategy.auth.base import Strategy
from openid_strategy.auth.context import ERROR, FAIL, PASS, REDIRECT, SUCCESS, Outcome
from openid_strategy.exceptions import StrategyError

logger = logging.getLogger(__name__)


class StrategyManager:
    """Registry and dispatcher for authentication strategies.

    Example::

        manager = StrategyManager()
        manager.use(OpenIDStrategy(config, verify))
        outcome = manager.authenticate("openid", request)
        if outcome.action == "redirect":
            return redirect_response(outcome.url)
    """

    def __init__(self) -> None:
        self._strategies: dict[str, Strategy] = {}

    def use(self, strategy: Strategy, name: Optional[str] = None) -> None:
        """Register *strategy* under *name* (defaults to ``strategy.name``).

        A strategy already registered under the same name is replaced.
        """
        key = name or strategy.name
        if not key:
            raise StrategyError("Authentication strategies must have a name")
        self._strategies[key] = strategy

    def unuse(self, name: str) -> None:
        """Remove the strategy registered under *name*, if any."""
        self._strategies.pop(name, None)

    def get_strategy(self, name: str) -> Strategy:
        """Retrieve a registered strategy by name.

        Raises:
            StrategyError: If no strategy is registered under *name*.
        """
        strategy = self._strategies.get(name)
        if strategy is None:
            available = ", ".join(sorted(self._strategies)) or "(none)"
            raise StrategyError(
                f"Unknown authentication strategy '{name}'. "
                f"Available strategies: {available}"
            )
        return strategy

    def list_names(self) -> list[str]:
        """Return the sorted names of all registered strategies."""
        return sorted(self._strategies.keys())

    def authenticate(self, name: str, request: Any, **options: Any) -> Outcome:
        """Run the strategy registered under *name* against *request*.

        The registered strategy is shallow-copied so that actions bound for
        this request never leak into concurrent ones. Only the first action
        is recorded; later ones are logged and dropped. An exception escaping
        :meth:`~Strategy.authenticate` is recorded as an ``error`` outcome.

        Args:
            name: Registered strategy name.
            request: The host request object.
            **options: Passed through to :meth:`~Strategy.authenticate`.

        Returns:
            The recorded :class:`Outcome`. ``outcome.action`` is ``None``
            when the strategy returned without acting.

        Raises:
            StrategyError: If no strategy is registered under *name*.
        """
        prototype = self.get_strategy(name)
        strategy = copy.copy(prototype)
        outcome = Outcome()
        _bind_actions(strategy, outcome)

        try:
            strategy.authenticate(request, **options)
        except Exception as exc:
            logger.exception("Strategy '%s' raised during authentication", name)
            if not outcome.completed:
                outcome.action = ERROR
                outcome.error = exc

        if not outcome.completed:
            logger.debug("Strategy '%s' returned without taking an action", name)
        return outcome


def _bind_actions(strategy: Strategy, outcome: Outcome) -> None:
    """Attach recording implementations of the five actions to *strategy*."""

    def _claim(action: str) -> bool:
        if outcome.completed:
            logger.warning(
                "Strategy '%s' called '%s' after '%s'; ignoring",
                strategy.name,
                action,
                outcome.action,
            )
            return False
        outcome.action = action
        return True

    def success(user: Any, info: Any = None) -> None:
        if _claim(SUCCESS):
            outcome.user = user
            outcome.info = info

    def fail(info: Any = None, status: Optional[int] = None) -> None:
        if _claim(FAIL):
            outcome.info = info
            outcome.status = status

    def error(err: BaseException) -> None:
        if _claim(ERROR):
            outcome.error = err

    def redirect(url: str, status: int = 302) -> None:
        if _claim(REDIRECT):
            outcome.url = url
            outcome.status = status

    def pass_() -> None:
        _claim(PASS)

    strategy.success = success  # type: ignore[method-assign]
    strategy.fail = fail  # type: ignore[method-assign]
    strategy.error = error  # type: ignore[method-assign]
    strategy.redirect = redirect  # type: ignore[method-assign]
    strategy.pass_ = pass_  # type: ignore[method-assign]
