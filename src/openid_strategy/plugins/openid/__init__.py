"""OpenID 2.0 authentication strategy.

See Also:
    :class:`~openid_strategy.plugins.openid.plugin.OpenIDStrategy`
    :mod:`openid_strategy.relying_party` for discovery and verification.
"""

from openid_strategy.plugins.openid.plugin import OpenIDStrategy
from openid_strategy.plugins.openid.profile import parse_profile

__all__ = ["OpenIDStrategy", "parse_profile"]
