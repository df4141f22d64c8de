"""Access to the application config and request globals outside of Flask."""

import os
from typing import Any, Mapping, Optional

from flask import current_app, g, has_app_context


def get_application_config(app: Optional[Any] = None) -> Mapping:
    """
    Get the configuration for the current application.

    Falls back to ``os.environ`` when there is no application context, e.g.
    when a service is used from a script.
    """
    if app is not None:
        return app.config   # type: ignore
    if has_app_context():
        return current_app.config
    return os.environ


def get_application_global() -> Optional[Any]:
    """Get the request-scoped ``g`` object, if there is an app context."""
    if has_app_context():
        return g
    return None
