"""Flask configuration for the pool manager."""

import os

VERSION = '0.1.0'

ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '')
"""Secret required for all admin operations. Empty means admin is disabled."""

BASE_URL = os.environ.get('BASE_URL', 'https://claude.ai')
"""Base URL of the service that issues one-time login URLs."""

ISSUER_TIMEOUT = os.environ.get('ISSUER_TIMEOUT', '10')

LOGFILE = os.environ.get('LOGFILE')
LOGLEVEL = os.environ.get('LOGLEVEL', 20)

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_TOKEN = os.environ.get('REDIS_TOKEN', None)
"""This is the token used in the AUTH procedure."""
REDIS_CLUSTER = os.environ.get('REDIS_CLUSTER', '0')
"""If 1, expects a redis cluster; otherwise expects a single redis node."""

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing and local development."""

STORE_TIMEOUT = os.environ.get('STORE_TIMEOUT', '5')

POOL_KEY = os.environ.get('POOL_KEY', 'EMAIL_TO_SK_MAP')
"""Key under which the whole email -> SK mapping is stored."""

POOL_VERSION_CHECK = bool(int(os.environ.get('POOL_VERSION_CHECK', '0')))
"""If set, reject admin mutations that were based on a stale pool."""

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
"""Comma-separated list of origins allowed to call the API."""
