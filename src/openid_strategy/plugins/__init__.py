"""Built-in authentication strategies.

Each strategy lives in its own sub-package (``plugins/<name>/plugin.py``)
and is re-exported here.
"""

from openid_strategy.plugins.openid import OpenIDStrategy

__all__ = ["OpenIDStrategy"]
