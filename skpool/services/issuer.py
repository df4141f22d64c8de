"""
The issuer turns a session key into a one-time login URL.

The issuing service is remote. A call that fails in transport, times out, or
gets a 5xx is :class:`.IssuerUnavailable` and may be retried by the caller. A
4xx, or a reply with no login URL, is :class:`.IssuerRejected`. We do not try
to tell an expired SK from a flaky issuer, so nothing here retries or touches
the pool.
"""

from typing import Any, Dict, Optional

import requests

from .. import logging
from ..context import get_application_config, get_application_global
from ..exceptions import IssuerRejected, IssuerUnavailable

logger = logging.getLogger(__name__)


class IssuerSession(object):
    """Preserves the HTTP session to the issuer for the request context."""

    endpoint = '/manage-api/auth/oauth_token'

    def __init__(self, timeout: float = 10.0) -> None:
        """Create a new HTTP session."""
        self._timeout = timeout
        self._session = requests.Session()
        logger.debug('New IssuerSession with timeout = %s', timeout)

    def issue_login_url(self, sk: str, base_url: str,
                        unique_name: Optional[str] = None) -> str:
        """
        Get a one-time login URL for a session key.

        Parameters
        ----------
        sk : str
            The session key of the account to log in as.
        base_url : str
            Base URL of the issuing service.
        unique_name : str
            Optional name for the login, passed to the issuer as is.

        Returns
        -------
        str
            Absolute login URL.

        Raises
        ------
        :class:`.IssuerUnavailable`
        :class:`.IssuerRejected`

        """
        payload: Dict[str, Any] = {'session_key': sk}
        if unique_name:
            payload['unique_name'] = unique_name
        target = base_url.rstrip('/') + self.endpoint
        try:
            response = self._session.post(target, json=payload,
                                          timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            logger.error('Issuer timed out after %s seconds', self._timeout)
            raise IssuerUnavailable('The issuer timed out') from e
        except requests.exceptions.RequestException as e:
            logger.error('Issuer request failed: %s', e)
            raise IssuerUnavailable(f'Could not reach the issuer: {e}') from e

        if response.status_code >= 500:
            logger.error('Issuer responded with status %i',
                         response.status_code)
            raise IssuerUnavailable(
                f'The issuer failed with status {response.status_code}'
            )
        try:
            data = response.json()
        except ValueError as e:
            logger.error('Issuer response could not be decoded')
            if not response.ok:
                raise IssuerRejected(
                    f'The issuer refused with status {response.status_code}'
                ) from e
            raise IssuerUnavailable('The issuer sent an unreadable reply') \
                from e
        if not isinstance(data, dict):
            data = {}

        login_url = data.get('login_url')
        if not response.ok or not login_url:
            reason = data.get('error') or data.get('detail') \
                or f'status {response.status_code}'
            logger.error('Issuer rejected the session key: %s', reason)
            raise IssuerRejected(f'The issuer rejected the session key: '
                                 f'{reason}')
        return _absolute(base_url, login_url)


def _absolute(base_url: str, login_url: str) -> str:
    if login_url.startswith(('http://', 'https://')):
        return login_url
    if not login_url.startswith('/'):
        login_url = '/' + login_url
    return base_url.rstrip('/') + login_url


def init_app(app: object = None) -> None:
    """Set required configuration defaults for the application."""
    config = get_application_config(app)
    config.setdefault('BASE_URL', 'https://claude.ai')
    config.setdefault('ISSUER_TIMEOUT', '10')


def get_session(app: object = None) -> IssuerSession:
    """Create a new issuer session."""
    config = get_application_config(app)
    timeout = float(config.get('ISSUER_TIMEOUT', '10'))
    return IssuerSession(timeout=timeout)


def current_session(app: object = None) -> IssuerSession:
    """Get the current issuer session for this context (if there is one)."""
    g = get_application_global()
    if g:
        if 'issuer' not in g:
            g.issuer = get_session(app)
        return g.issuer     # type: ignore
    return get_session(app)
