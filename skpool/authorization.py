"""Password protection for the admin API."""

import hmac
from functools import wraps
from typing import Any, Callable, Optional

from flask import current_app, request

from . import logging
from .exceptions import Unauthorized

logger = logging.getLogger(__name__)

PASSWORD_HEADER = 'X-Admin-Password'
PASSWORD_FIELD = 'admin_password'


class AdminAuthenticator(object):
    """Checks a supplied password against the configured admin secret."""

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret or ''

    def authenticate(self, supplied: Optional[str]) -> bool:
        """Compare in constant time. An unset secret matches nothing."""
        if not self._secret or not isinstance(supplied, str):
            return False
        return hmac.compare_digest(supplied.encode('utf-8'),
                                   self._secret.encode('utf-8'))


def supplied_password() -> Optional[str]:
    """Get the admin password from the header, or from the JSON body."""
    password = request.headers.get(PASSWORD_HEADER)
    if password:
        return password
    payload = request.get_json(force=True, silent=True)
    if isinstance(payload, dict):
        value = payload.get(PASSWORD_FIELD)
        if isinstance(value, str):
            return value
    return None


def admin_required(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that rejects requests without the admin password."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Check the admin password before executing the view."""
        secret = current_app.config.get('ADMIN_PASSWORD')
        if not secret:
            logger.error('ADMIN_PASSWORD is not set; admin API is disabled')
        if not AdminAuthenticator(secret).authenticate(supplied_password()):
            logger.warning('Rejected admin request to %s', request.path)
            raise Unauthorized('Invalid admin password')
        return func(*args, **kwargs)
    return wrapper
