"""OpenID 2.0 relying-party layer built on ``python3-openid``.

- :class:`RelyingParty` -- discovery and assertion verification.
- :func:`build_extensions` -- SREG/AX/PAPE/UI/OAuth extension requests.
- :class:`HttpxFetcher` -- the HTTP fetcher the library uses.
- :func:`create_store` -- association store resolution.
"""

from openid_strategy.relying_party.extensions import build_extensions
from openid_strategy.relying_party.fetcher import HttpxFetcher, install_fetcher
from openid_strategy.relying_party.party import RelyingParty
from openid_strategy.relying_party.store import create_store

__all__ = [
    "RelyingParty",
    "HttpxFetcher",
    "build_extensions",
    "create_store",
    "install_fetcher",
]
