"""Numeric process exit codes for the ``vsports`` command line.

Each constant maps to an error category and is referenced by the
corresponding :class:`~vsports.exceptions.VSportsError` subclass, so shell
scripts can tell a network outage from a bad payload without parsing
stderr.

Example::

    $ vsports standings 123
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the API or Redis could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration problems)."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, or a request that could not be built."""

EXIT_DECODE_ERROR = 5
"""The API answered with a payload that does not match the expected shape."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CACHE_ERROR = 7
"""The Redis cache rejected a read or write."""
