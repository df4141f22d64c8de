"""
Session-key pool manager.

The pool manager is a small Flask service that keeps a pool of session keys
(SKs) for an external AI service, keyed by the email address of the account
that owns each key. End users ask the service for a one-time login URL, either
for a specific account or for one picked at random; administrators maintain
the pool through a password-protected CRUD API.

The whole pool lives in a single JSON object stored under one key in a
key-value store (see :mod:`skpool.services.store`). The store offers no
compare-and-swap, so every administrative mutation is a load-mutate-save cycle
(see :mod:`skpool.pool`). Two concurrent mutations race, and the last save
wins. Admin traffic is expected to be low enough that this is acceptable; an
optional version check can be switched on with ``POOL_VERSION_CHECK``.
"""
