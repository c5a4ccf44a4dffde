"""Association and nonce store resolution.

The relying party keeps shared-secret associations and seen nonces in an
:class:`openid.store.interface.OpenIDStore`. :func:`create_store` turns the
``store`` setting of :class:`~openid_strategy.models.StrategyConfig` into a
store instance.

Supported sources:

* ``memory`` -- :class:`openid.store.memstore.MemoryStore` (per process).
* ``file`` -- :class:`openid.store.filestore.FileOpenIDStore` under the
  data directory (``~/.local/share/openid-strategy/store`` on Linux).
* ``file:/some/dir`` -- a file store rooted at ``/some/dir``.
* ``none`` -- no store; every assertion is checked directly with the
  provider (stateless mode).
"""

from __future__ import annotations

from typing import Optional

from openid.store.filestore import FileOpenIDStore
from openid.store.interface import OpenIDStore
from openid.store.memstore import MemoryStore

from openid_strategy.config import get_data_dir
from openid_strategy.exceptions import ConfigError


def create_store(source: str, stateless: bool = False) -> Optional[OpenIDStore]:
    """Create the OpenID store described by *source*.

    Args:
        source: Store source string (see module docstring).
        stateless: When true, no store is used whatever *source* says.

    Returns:
        An :class:`OpenIDStore`, or ``None`` in stateless mode.

    Raises:
        ConfigError: If *source* is not recognised.
    """
    if stateless:
        return None

    kind, _, location = source.partition(":")
    kind = kind.strip().lower()

    if kind == "none":
        return None
    if kind == "memory":
        return MemoryStore()
    if kind == "file":
        if not location:
            location = str(get_data_dir() / "store")
        return FileOpenIDStore(location)

    raise ConfigError(
        f"Unknown OpenID store '{source}'. Use memory, file, file:/path, or none"
    )
