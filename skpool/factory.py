"""Application factory for the pool manager."""

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException, BadRequest, NotFound, \
    MethodNotAllowed, InternalServerError

from .controllers.util import error_response
from .exceptions import PoolError
from .routes import api
from .services import issuer, store

ALLOWED_METHODS = 'GET, POST, OPTIONS'
ALLOWED_HEADERS = 'Content-Type, X-Admin-Password'


def create_web_app() -> Flask:
    """Initialize and configure the pool manager application."""
    app = Flask('skpool')
    app.config.from_pyfile('config.py')

    store.init_app(app)
    issuer.init_app(app)

    app.register_blueprint(api.blueprint)
    app.after_request(add_cors_headers)
    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(PoolError)(jsonify_pool_error)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def jsonify_pool_error(error: PoolError) -> Response:
    """Render pool errors that escaped a controller as JSON."""
    data, status_code, _ = error_response(error)
    response: Response = jsonify(data)
    response.status_code = status_code
    return response


def add_cors_headers(response: Response) -> Response:
    """Allow the configured origins to call the API from a browser."""
    allowed = [origin.strip() for origin
               in current_app.config.get('CORS_ORIGINS', '').split(',')
               if origin.strip()]
    origin = request.headers.get('Origin')
    if '*' in allowed:
        response.headers['Access-Control-Allow-Origin'] = '*'
    elif origin and origin in allowed:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers.add('Vary', 'Origin')
    else:
        return response
    response.headers['Access-Control-Allow-Methods'] = ALLOWED_METHODS
    response.headers['Access-Control-Allow-Headers'] = ALLOWED_HEADERS
    return response
