"""
Key-value store for the SK pool.

The whole pool is persisted as a single JSON object (email -> SK) under one
well-known key. An absent key is an empty pool. There is no compare-and-swap:
a save simply overwrites the blob. When versioning is enabled, a counter kept
next to the blob lets callers detect that someone else saved in between. The
check and the write run under WATCH, so a save that slips in after the check
still aborts the write.
"""

import json
from typing import Any, Optional

import fakeredis
import redis
from redis.exceptions import RedisClusterException, RedisError, WatchError

from .. import logging
from ..context import get_application_config, get_application_global
from ..domain import Pool
from ..exceptions import Conflict, StoreUnavailable

logger = logging.getLogger(__name__)

_fake_server: Optional[fakeredis.FakeServer] = None


def _get_fake_server() -> fakeredis.FakeServer:
    """All fake connections in this process share one in-memory server."""
    global _fake_server
    if _fake_server is None:
        _fake_server = fakeredis.FakeServer()
    return _fake_server


class PoolStore(object):
    """
    Manages a connection to Redis.

    The StrictRedis instance is thread safe and connections are attached at
    the time a command is executed. This class provides a container for
    configuration, and the translation of stored data into a pool.
    """

    def __init__(self, host: str, port: int, db: int,
                 key: str = 'EMAIL_TO_SK_MAP', token: Optional[str] = None,
                 cluster: bool = False, fake: bool = False,
                 timeout: float = 5.0, versioned: bool = False) -> None:
        """Open the connection to Redis."""
        if fake:
            logger.debug('New fake Redis connection')
            self.r = fakeredis.FakeStrictRedis(server=_get_fake_server(),
                                               decode_responses=True)
        elif cluster:
            logger.debug('New Redis cluster connection at %s, port %s',
                         host, port)
            self.r = redis.RedisCluster(
                host=host, port=port, password=token,
                socket_timeout=timeout, socket_connect_timeout=timeout,
                decode_responses=True
            )
        else:
            logger.debug('New Redis connection at %s, port %s', host, port)
            self.r = redis.StrictRedis(
                host=host, port=port, db=db, password=token,
                socket_timeout=timeout, socket_connect_timeout=timeout,
                decode_responses=True
            )
        self.key = key
        self.version_key = f'{key}:version'
        self.versioned = versioned

    def status(self) -> bool:
        """Check the availability of the store."""
        try:
            return bool(self.r.ping())
        except RedisError as e:
            logger.error('Store status check failed: %s', e)
            return False

    def load(self) -> Pool:
        """
        Load the current pool.

        Returns
        -------
        dict
            Mapping of email to SK. Empty if nothing has been stored yet.

        Raises
        ------
        :class:`.StoreUnavailable`
            If the store cannot be reached, or the stored value is not a
            JSON object.

        """
        try:
            raw = self.r.get(self.key)
        except RedisError as e:
            logger.error('Failed to load pool: %s', e)
            raise StoreUnavailable(f'Failed to load pool: {e}') from e
        if raw is None:
            logger.debug('No pool stored at %s, starting empty', self.key)
            return {}
        return self._decode(raw)

    def version(self) -> int:
        """Get the save counter; zero if the pool was never saved."""
        try:
            raw = self.r.get(self.version_key)
        except RedisError as e:
            logger.error('Failed to read pool version: %s', e)
            raise StoreUnavailable(f'Failed to read version: {e}') from e
        return self._parse_version(raw)

    def _parse_version(self, raw: Any) -> int:
        try:
            return int(raw or 0)
        except ValueError as e:
            raise StoreUnavailable('Pool version is corrupted') from e

    def save(self, pool: Pool, expected_version: Optional[int] = None) \
            -> None:
        """
        Persist the pool, replacing whatever is stored.

        When the store is versioned, the pool and its version are watched
        while the version is compared and the write is queued, so a save by
        anyone else in that window aborts this one.

        Parameters
        ----------
        pool : dict
            Mapping of email to SK.
        expected_version : int
            The version observed before the pool was loaded. Only checked if
            the store is versioned.

        Raises
        ------
        :class:`.Conflict`
            If the store is versioned and the version has moved on.
        :class:`.StoreUnavailable`
            If the store cannot be reached.

        """
        data = json.dumps(pool, sort_keys=True)
        pipe = self.r.pipeline()
        try:
            if self.versioned:
                pipe.watch(self.key, self.version_key)
                current = self._parse_version(pipe.get(self.version_key))
                if expected_version is not None \
                        and current != expected_version:
                    logger.info('Pool version is %i, expected %i',
                                current, expected_version)
                    raise Conflict('The pool was modified concurrently')
                pipe.multi()
            pipe.set(self.key, data)
            if self.versioned:
                pipe.incr(self.version_key)
            pipe.execute()
        except WatchError as e:
            logger.info('Pool was saved by someone else during this save')
            raise Conflict('The pool was modified concurrently') from e
        except (RedisError, RedisClusterException) as e:
            logger.error('Failed to save pool: %s', e)
            raise StoreUnavailable(f'Failed to save pool: {e}') from e
        finally:
            pipe.reset()
        logger.debug('Saved pool with %i entries', len(pool))

    def _decode(self, raw: Any) -> Pool:
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error('Stored pool is not valid JSON')
            raise StoreUnavailable('Stored pool is corrupted') from e
        if not isinstance(data, dict):
            logger.error('Stored pool is a %s, not an object', type(data))
            raise StoreUnavailable('Stored pool is corrupted')
        return data


def init_app(app: object = None) -> None:
    """Set default configuration parameters for an application instance."""
    config = get_application_config(app)
    config.setdefault('REDIS_HOST', 'localhost')
    config.setdefault('REDIS_PORT', '6379')
    config.setdefault('REDIS_DATABASE', '0')
    config.setdefault('REDIS_TOKEN', None)
    config.setdefault('REDIS_CLUSTER', '0')
    config.setdefault('REDIS_FAKE', False)
    config.setdefault('STORE_TIMEOUT', '5')
    config.setdefault('POOL_KEY', 'EMAIL_TO_SK_MAP')
    config.setdefault('POOL_VERSION_CHECK', False)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('1', 'true', 'yes')
    return bool(value)


def get_store(app: object = None) -> PoolStore:
    """Get a new connection to the pool store."""
    config = get_application_config(app)
    host = config.get('REDIS_HOST', 'localhost')
    port = int(config.get('REDIS_PORT', '6379'))
    db = int(config.get('REDIS_DATABASE', '0'))
    token = config.get('REDIS_TOKEN', None)
    cluster = str(config.get('REDIS_CLUSTER', '0')) == '1'
    fake = _flag(config.get('REDIS_FAKE', False))
    timeout = float(config.get('STORE_TIMEOUT', '5'))
    key = config.get('POOL_KEY', 'EMAIL_TO_SK_MAP')
    versioned = _flag(config.get('POOL_VERSION_CHECK', False))
    return PoolStore(host, port, db, key=key, token=token, cluster=cluster,
                     fake=fake, timeout=timeout, versioned=versioned)


def current_store() -> PoolStore:
    """Get/create :class:`.PoolStore` for this context."""
    g = get_application_global()
    if not g:
        return get_store()
    if 'store' not in g:
        g.store = get_store()
    return g.store      # type: ignore

