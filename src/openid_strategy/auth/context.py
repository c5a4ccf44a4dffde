"""Request and outcome dataclasses exchanged with the host framework.

This module provides two small containers:

* :class:`RequestContext` -- the request shape a strategy reads. Any object
  exposing ``query``, ``body``, ``url`` and ``session`` attributes works;
  this dataclass is a convenient concrete one for adapters and tests.
* :class:`Outcome` -- the single action a strategy took for one request, as
  recorded by :class:`~openid_strategy.auth.manager.StrategyManager`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

SUCCESS = "success"
FAIL = "fail"
ERROR = "error"
REDIRECT = "redirect"
PASS = "pass"


@dataclass
class RequestContext:
    """Minimal request view consumed by strategies.

    Attributes:
        query: Decoded query-string parameters.
        body: Decoded form-body parameters.
        url: Full URL of the current request, used to check ``return_to``.
        session: Mutable per-user session mapping, if the host has one.
    """

    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None
    session: Optional[dict[str, Any]] = None


@dataclass
class Outcome:
    """The action a strategy took for one request.

    Attributes:
        action: One of ``"success"``, ``"fail"``, ``"error"``,
            ``"redirect"``, ``"pass"``, or ``None`` if the strategy never
            acted.
        user: The authenticated user (``success`` only).
        info: Informational payload (``success`` and ``fail``).
        status: Optional HTTP status for ``fail`` and ``redirect``.
        url: Redirect target (``redirect`` only).
        error: The exception (``error`` only).
    """

    action: Optional[str] = None
    user: Any = None
    info: Any = None
    status: Optional[int] = None
    url: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def completed(self) -> bool:
        return self.action is not None
