"""Handles requests from end users: listing accounts and logging in."""

import random
from typing import Any

from .. import status
from ..context import get_application_config
from ..exceptions import PoolError
from ..pool import current_repository
from ..selector import Selector
from ..services import issuer
from .util import Response, error_response, get_field, require_object

_rng = random.SystemRandom()


def list_emails() -> Response:
    """
    List the emails of all accounts that can be logged into.

    Returns
    -------
    dict
        ``emails``, sorted.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.
    """
    try:
        emails = current_repository().list_emails()
    except PoolError as e:
        return error_response(e)
    return {'emails': emails}, status.HTTP_200_OK, {}


def login(payload: Any) -> Response:
    """
    Get a one-time login URL for a specific or a random account.

    Parameters
    ----------
    payload : dict
        ``mode`` (``specific`` or ``random``), ``email`` (specific mode
        only), and optionally ``unique_name``.

    Returns
    -------
    dict
        ``login_url`` and the ``email`` of the account used.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.
    """
    try:
        payload = require_object(payload)
        mode = get_field(payload, 'mode')
        email = get_field(payload, 'email')
        unique_name = get_field(payload, 'unique_name')
        base_url = get_application_config()['BASE_URL']
        selector = Selector(current_repository(), rng=_rng)
        entry, url = selector.login(mode, issuer.current_session(), base_url,
                                    email=email, unique_name=unique_name)
    except PoolError as e:
        return error_response(e)
    return {'login_url': url, 'email': entry.email}, status.HTTP_200_OK, {}
