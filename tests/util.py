"""Test doubles for the store and the issuer."""

import json
from typing import List, Optional, Tuple

from skpool.exceptions import Conflict, StoreUnavailable


class InMemoryStore(object):
    """Stands in for :class:`skpool.services.store.PoolStore`."""

    def __init__(self, pool: Optional[dict] = None,
                 versioned: bool = False) -> None:
        self.raw = json.dumps(pool) if pool is not None else None
        self.versioned = versioned
        self.saves = 0
        self.unavailable = False
        self._version = 0

    @property
    def pool(self) -> dict:
        """What is currently persisted."""
        return json.loads(self.raw) if self.raw is not None else {}

    def load(self) -> dict:
        if self.unavailable:
            raise StoreUnavailable('Store is down')
        return self.pool

    def version(self) -> int:
        return self._version

    def save(self, pool: dict, expected_version: Optional[int] = None) \
            -> None:
        if self.unavailable:
            raise StoreUnavailable('Store is down')
        if self.versioned and expected_version is not None \
                and expected_version != self._version:
            raise Conflict('The pool was modified concurrently')
        self.raw = json.dumps(pool)
        self.saves += 1
        if self.versioned:
            self._version += 1


class StubIssuer(object):
    """Stands in for :class:`skpool.services.issuer.IssuerSession`."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.calls: List[Tuple[str, str, Optional[str]]] = []
        self.error = error

    def issue_login_url(self, sk: str, base_url: str,
                        unique_name: Optional[str] = None) -> str:
        self.calls.append((sk, base_url, unique_name))
        if self.error is not None:
            raise self.error
        return f'{base_url}/login_token?session={sk}'
