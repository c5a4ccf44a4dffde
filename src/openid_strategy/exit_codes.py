"""Numeric process exit codes used by the ``openid-strategy`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openid_strategy.exceptions.OpenIDStrategyError`
subclass. Shell wrappers can inspect the exit code to tell a bad
configuration apart from a provider that could not be discovered.

Example::

    $ openid-strategy discover https://example.org/
    $ echo $?
    3   # EXIT_DISCOVERY_FAILURE -- no OpenID provider found
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, a malformed request, or an invalid configuration."""

EXIT_DISCOVERY_FAILURE = 3
"""OpenID discovery failed or found no provider endpoint."""

EXIT_VERIFICATION_FAILURE = 4
"""A positive assertion could not be verified."""
