"""Helpers shared by the controllers."""

from typing import Any, Dict, Optional, Tuple

from .. import logging, status
from ..exceptions import PoolError, InvalidInput, DuplicateEmail, NotFound, \
    PoolEmpty, Unauthorized, Conflict, StoreUnavailable, IssuerUnavailable, \
    IssuerRejected

logger = logging.getLogger(__name__)

Response = Tuple[Optional[dict], int, dict]

# Most specific first; DuplicateEmail is also an InvalidInput.
STATUS_CODES = [
    (DuplicateEmail, status.HTTP_409_CONFLICT),
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (PoolEmpty, status.HTTP_404_NOT_FOUND),
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (Conflict, status.HTTP_409_CONFLICT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IssuerUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IssuerRejected, status.HTTP_502_BAD_GATEWAY),
]


def status_for(error: PoolError) -> int:
    """Get the HTTP status code for a pool error."""
    for kind, code in STATUS_CODES:
        if isinstance(error, kind):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(error: PoolError) -> Response:
    """Log a pool error, and render it as a response tuple."""
    code = status_for(error)
    if error.transient or code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error('%s: %s', type(error).__name__, error)
    else:
        logger.info('%s: %s', type(error).__name__, error)
    return {'reason': str(error)}, code, {}


def get_field(payload: Dict[str, Any], name: str) -> Optional[str]:
    """Get an optional string field from a request body."""
    value = payload.get(name)
    if value is not None and not isinstance(value, str):
        raise InvalidInput(f'{name} must be a string')
    return value


def require_object(payload: Any) -> Dict[str, Any]:
    """Make sure that the request body is a JSON object."""
    if not isinstance(payload, dict):
        raise InvalidInput('Request body must be a JSON object')
    return payload
