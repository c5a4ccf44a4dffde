"""Abstract base class for authentication strategies.

A strategy inspects one request and answers by calling exactly one of five
*actions*:

- :meth:`Strategy.success` -- the user is authenticated.
- :meth:`Strategy.fail` -- authentication was rejected.
- :meth:`Strategy.error` -- an internal error prevented a decision.
- :meth:`Strategy.redirect` -- the user agent must go elsewhere first.
- :meth:`Strategy.pass_` -- the strategy declines to handle the request.

The base class only declares the actions. The host framework augments a
per-request copy of the strategy with real implementations before calling
:meth:`Strategy.authenticate`; see
:class:`~openid_strategy.auth.manager.StrategyManager`. Calling an action
that was never bound raises :class:`~openid_strategy.exceptions.StrategyError`.

To implement a new strategy, subclass :class:`Strategy`, implement the
:attr:`~Strategy.name` property and :meth:`~Strategy.authenticate`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from openid_strategy.exceptions import StrategyError


class Strategy(ABC):
    """Abstract base class for authentication strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name the strategy is registered under (e.g. ``"openid"``)."""
        ...

    @abstractmethod
    def authenticate(self, request: Any, **options: Any) -> None:
        """Inspect *request* and invoke exactly one action.

        Args:
            request: The host request object. Strategies read
                ``request.query`` and ``request.body`` and must tolerate
                either being absent.
            **options: Per-call options from the host framework.
        """
        ...

    # -- actions (bound by the host framework) --------------------------

    def success(self, user: Any, info: Any = None) -> None:
        self._unbound("success")

    def fail(self, info: Any = None, status: Optional[int] = None) -> None:
        self._unbound("fail")

    def error(self, err: BaseException) -> None:
        self._unbound("error")

    def redirect(self, url: str, status: int = 302) -> None:
        self._unbound("redirect")

    def pass_(self) -> None:
        self._unbound("pass")

    def _unbound(self, action: str) -> None:
        raise StrategyError(
            f"Strategy '{self.name}' called '{action}' outside of an "
            "authentication request; bind the actions first"
        )
