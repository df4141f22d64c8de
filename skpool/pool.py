"""
Repository for the SK pool.

All mutations follow the same protocol against the store: load the current
pool, apply the change to that copy, save the copy back. The store has no
atomic update, so two admins mutating at the same time race and the last save
wins; the loser's change is silently dropped. Admin traffic is low and this is
accepted. A single call never partially commits: if validation fails nothing
is saved, and if the save fails the in-memory change is discarded.
"""

import re
from typing import Callable, List, Optional

from . import logging
from .domain import AdminEntry, Pool, PoolEntry, is_usable, redact
from .exceptions import DuplicateEmail, InvalidInput, NotFound
from .services import store
from .services.store import PoolStore

logger = logging.getLogger(__name__)

EMAIL = re.compile(r'^[^@\s]+@[^@\s]+$')
SESSION_KEY = re.compile(r'^\S+$')


def clean_email(email: object) -> str:
    """Trim and validate an email address."""
    if not isinstance(email, str) or not EMAIL.match(email.strip()):
        raise InvalidInput('A valid email address is required')
    return email.strip()


def clean_sk(sk: object) -> str:
    """Trim and validate a session key."""
    if not isinstance(sk, str) or not SESSION_KEY.match(sk.strip()):
        raise InvalidInput('A non-empty session key without spaces is required')
    return sk.strip()


def _lookup_key(email: object) -> str:
    if not isinstance(email, str) or not email.strip():
        raise InvalidInput('An email address is required')
    return email.strip()


class PoolRepository(object):
    """Load-mutate-save access to the pool held by a :class:`.PoolStore`."""

    def __init__(self, pool_store: PoolStore) -> None:
        self._store = pool_store

    def snapshot(self) -> Pool:
        """Load a fresh copy of the pool."""
        return dict(self._store.load())

    def _mutate(self, mutation: Callable[[Pool], None]) -> None:
        """Apply ``mutation`` to a freshly loaded pool, and save it."""
        expected: Optional[int] = None
        if self._store.versioned:
            expected = self._store.version()
        pool = self.snapshot()
        mutation(pool)
        self._store.save(pool, expected_version=expected)

    def add(self, email: str, sk: str) -> PoolEntry:
        """
        Add a new account to the pool.

        Raises
        ------
        :class:`.InvalidInput`
            If the email or SK is empty or malformed.
        :class:`.DuplicateEmail`
            If the email is already in the pool.

        """
        entry = PoolEntry(clean_email(email), clean_sk(sk))

        def _add(pool: Pool) -> None:
            if entry.email in pool:
                raise DuplicateEmail(f'{entry.email} is already in the pool')
            pool[entry.email] = entry.sk

        self._mutate(_add)
        logger.info('Added %s to the pool', entry.email)
        return entry

    def update(self, email: str, new_email: Optional[str] = None,
               new_sk: Optional[str] = None) -> PoolEntry:
        """
        Rename an account and/or replace its SK, in one save.

        Renaming an account to its own email is allowed, and changes nothing.

        Raises
        ------
        :class:`.InvalidInput`
            If neither ``new_email`` nor ``new_sk`` is given, or either is
            malformed.
        :class:`.NotFound`
            If ``email`` is not in the pool.
        :class:`.DuplicateEmail`
            If ``new_email`` already belongs to another account.

        """
        email = _lookup_key(email)
        if isinstance(new_email, str) and not new_email.strip():
            new_email = None
        if isinstance(new_sk, str) and not new_sk.strip():
            new_sk = None
        if new_email is None and new_sk is None:
            raise InvalidInput('Provide a new email, a new SK, or both')
        target = clean_email(new_email) if new_email is not None else email
        replacement = clean_sk(new_sk) if new_sk is not None else None
        updated: List[PoolEntry] = []

        def _update(pool: Pool) -> None:
            if email not in pool:
                raise NotFound(f'{email} is not in the pool')
            if target != email and target in pool:
                raise DuplicateEmail(f'{target} is already in the pool')
            sk = replacement if replacement is not None else pool[email]
            del pool[email]
            pool[target] = sk
            updated.append(PoolEntry(target, sk))

        self._mutate(_update)
        logger.info('Updated %s (email %s, sk %s)', email,
                    'renamed' if target != email else 'unchanged',
                    'replaced' if replacement is not None else 'unchanged')
        return updated[0]

    def delete(self, email: str) -> None:
        """
        Remove an account from the pool.

        Raises
        ------
        :class:`.NotFound`
            If ``email`` is not in the pool.

        """
        email = _lookup_key(email)

        def _delete(pool: Pool) -> None:
            if email not in pool:
                raise NotFound(f'{email} is not in the pool')
            del pool[email]

        self._mutate(_delete)
        logger.info('Deleted %s from the pool', email)

    def replace(self, data: object) -> Pool:
        """
        Validate a whole mapping of email to SK, and store it as the pool.

        Used to seed the store; whatever was stored before is overwritten.
        """
        if not isinstance(data, dict):
            raise InvalidInput('The pool must be an object of email to SK')
        pool: Pool = {}
        for email, sk in data.items():
            email, sk = clean_email(email), clean_sk(sk)
            if email in pool:
                raise DuplicateEmail(f'{email} appears more than once')
            pool[email] = sk

        def _replace(current: Pool) -> None:
            current.clear()
            current.update(pool)

        self._mutate(_replace)
        logger.info('Replaced the pool with %i entries', len(pool))
        return pool

    def list(self) -> List[AdminEntry]:
        """All accounts sorted by email, with SKs redacted."""
        pool = self.snapshot()
        return [AdminEntry(email, redact(sk) if isinstance(sk, str) else '')
                for email, sk in sorted(pool.items())]

    def list_emails(self) -> List[str]:
        """Emails of all accounts with a usable SK, sorted."""
        pool = self.snapshot()
        return sorted(email for email, sk in pool.items() if is_usable(sk))


def current_repository() -> PoolRepository:
    """Get a repository backed by the store for this context."""
    return PoolRepository(store.current_store())
