"""Provides routes for the user and admin API."""

from flask import Blueprint, jsonify, request

from .. import status
from ..authorization import admin_required
from ..controllers import admin, pool
from ..services import store

blueprint = Blueprint('api', __name__, url_prefix='/api')


@blueprint.route('/status', methods=['GET'])
def ok() -> tuple:
    """Health check endpoint."""
    if store.current_store().status():
        return jsonify({'status': 'ok'}), status.HTTP_200_OK
    return jsonify({'status': 'store unavailable'}), \
        status.HTTP_503_SERVICE_UNAVAILABLE


@blueprint.route('/emails', methods=['GET'])
def list_emails() -> tuple:
    """List the accounts available for login."""
    data, status_code, headers = pool.list_emails()
    return jsonify(data), status_code, headers


@blueprint.route('/login', methods=['POST'])
def login() -> tuple:
    """Get a one-time login URL."""
    payload = request.get_json(force=True)    # Ignore Content-Type header.
    data, status_code, headers = pool.login(payload)
    return jsonify(data), status_code, headers


@blueprint.route('/admin/list', methods=['GET', 'POST'])
@admin_required
def admin_list() -> tuple:
    """List all accounts, with redacted SKs."""
    data, status_code, headers = admin.list_entries()
    return jsonify(data), status_code, headers


@blueprint.route('/admin/add', methods=['POST'])
@admin_required
def admin_add() -> tuple:
    """Add an account."""
    payload = request.get_json(force=True)
    data, status_code, headers = admin.add_entry(payload)
    return jsonify(data), status_code, headers


@blueprint.route('/admin/update', methods=['POST'])
@admin_required
def admin_update() -> tuple:
    """Rename an account and/or replace its SK."""
    payload = request.get_json(force=True)
    data, status_code, headers = admin.update_entry(payload)
    return jsonify(data), status_code, headers


@blueprint.route('/admin/delete', methods=['POST'])
@admin_required
def admin_delete() -> tuple:
    """Remove an account."""
    payload = request.get_json(force=True)
    data, status_code, headers = admin.delete_entry(payload)
    return jsonify(data), status_code, headers
