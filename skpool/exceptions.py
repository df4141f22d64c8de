"""
Failures raised by the pool manager core.

Every failure is a :class:`PoolError`. Controllers translate these into HTTP
responses; nothing in the core retries. Only :class:`StoreUnavailable` and
:class:`IssuerUnavailable` are ``transient``, meaning the caller may safely
try the same request again.
"""


class PoolError(Exception):
    """Base class for pool manager failures."""

    transient = False


class InvalidInput(PoolError):
    """A request carried missing or malformed data."""


class DuplicateEmail(InvalidInput):
    """The email is already used by another entry in the pool."""


class NotFound(PoolError):
    """No entry exists for the requested email."""


class PoolEmpty(PoolError):
    """There are no usable entries to choose from."""


class Unauthorized(PoolError):
    """The admin credential was missing or wrong."""


class Conflict(PoolError):
    """The pool changed between load and save (version check)."""


class StoreUnavailable(PoolError):
    """The key-value store could not be reached or returned unusable data."""

    transient = True


class IssuerUnavailable(PoolError):
    """The login URL issuer could not be reached or failed on its side."""

    transient = True


class IssuerRejected(PoolError):
    """The login URL issuer refused the session key."""
