"""Handles admin requests to inspect and change the pool."""

from typing import Any

from .. import status
from ..exceptions import PoolError
from ..pool import current_repository
from .util import Response, error_response, get_field, require_object


def list_entries() -> Response:
    """List all accounts with redacted SKs, sorted by email."""
    try:
        entries = current_repository().list()
    except PoolError as e:
        return error_response(e)
    data = {'entries': [{'email': entry.email,
                         'sk_preview': entry.sk_preview}
                        for entry in entries]}
    return data, status.HTTP_200_OK, {}


def add_entry(payload: Any) -> Response:
    """
    Add an account to the pool.

    Parameters
    ----------
    payload : dict
        ``email`` and ``sk``.

    Returns
    -------
    dict
        Some data.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.
    """
    try:
        payload = require_object(payload)
        entry = current_repository().add(get_field(payload, 'email'),
                                         get_field(payload, 'sk'))
    except PoolError as e:
        return error_response(e)
    return {'message': f'Added {entry.email}', 'email': entry.email}, \
        status.HTTP_201_CREATED, {}


def update_entry(payload: Any) -> Response:
    """
    Rename an account and/or replace its SK.

    Parameters
    ----------
    payload : dict
        ``email``, and at least one of ``new_email`` and ``new_sk``.

    Returns
    -------
    dict
        Some data.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.
    """
    try:
        payload = require_object(payload)
        entry = current_repository().update(
            get_field(payload, 'email'),
            new_email=get_field(payload, 'new_email'),
            new_sk=get_field(payload, 'new_sk')
        )
    except PoolError as e:
        return error_response(e)
    return {'message': f'Updated {entry.email}', 'email': entry.email}, \
        status.HTTP_200_OK, {}


def delete_entry(payload: Any) -> Response:
    """Remove an account, given its ``email``."""
    try:
        payload = require_object(payload)
        email = get_field(payload, 'email')
        current_repository().delete(email)
    except PoolError as e:
        return error_response(e)
    return {'message': f'Deleted {email}'}, status.HTTP_200_OK, {}
