"""Picks the account that a login request should use."""

import random
from typing import Optional, Tuple

from . import logging
from .domain import PoolEntry, is_usable
from .exceptions import InvalidInput, NotFound, PoolEmpty
from .pool import PoolRepository
from .services.issuer import IssuerSession

logger = logging.getLogger(__name__)

SPECIFIC = 'specific'
RANDOM = 'random'
MODES = (SPECIFIC, RANDOM)


class Selector(object):
    """
    Resolves a login request to one account.

    Each decision is made against a single snapshot of the pool, so it is
    consistent with itself even if an admin is changing the pool meanwhile.
    Random picks are uniform over the usable accounts, with no memory of
    earlier picks.
    """

    def __init__(self, repository: PoolRepository,
                 rng: Optional[random.Random] = None) -> None:
        self._repository = repository
        self._rng = rng if rng is not None else random.SystemRandom()

    def specific(self, email: str) -> PoolEntry:
        """Get the account for ``email``."""
        pool = self._repository.snapshot()
        sk = pool.get(email)
        if not is_usable(sk):
            raise NotFound(f'{email} is not in the pool')
        return PoolEntry(email, sk)     # type: ignore

    def random(self) -> PoolEntry:
        """Pick any usable account, each with equal probability."""
        pool = self._repository.snapshot()
        emails = sorted(email for email, sk in pool.items() if is_usable(sk))
        if not emails:
            raise PoolEmpty('There are no accounts in the pool')
        email = emails[self._rng.randrange(len(emails))]
        return PoolEntry(email, pool[email])

    def login(self, mode: str, issuer: IssuerSession, base_url: str,
              email: Optional[str] = None,
              unique_name: Optional[str] = None) -> Tuple[PoolEntry, str]:
        """
        Select an account and get a one-time login URL for it.

        Parameters
        ----------
        mode : str
            ``specific`` (requires ``email``) or ``random`` (ignores it).
        issuer : :class:`.IssuerSession`
        base_url : str
            Base URL of the issuing service.
        email : str
        unique_name : str
            Passed through to the issuer untouched.

        Returns
        -------
        :class:`.PoolEntry`
            The account that was used.
        str
            The login URL.

        """
        if mode == SPECIFIC:
            if not isinstance(email, str) or not email.strip():
                raise InvalidInput('An email is required in specific mode')
            entry = self.specific(email.strip())
        elif mode == RANDOM:
            entry = self.random()
        else:
            raise InvalidInput(f'Mode must be one of {", ".join(MODES)}')
        logger.debug('Selected %s (%s mode)', entry.email, mode)
        url = issuer.issue_login_url(entry.sk, base_url, unique_name)
        return entry, url
