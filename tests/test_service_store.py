"""Tests for :mod:`skpool.services.store`."""

import json
from unittest import TestCase, mock

from redis.exceptions import ConnectionError, TimeoutError, WatchError

from skpool.exceptions import Conflict, StoreUnavailable
from skpool.pool import PoolRepository
from skpool.services import store


class TestPoolStoreWithMockRedis(TestCase):
    """The store translates Redis replies and failures."""

    @mock.patch(f'{store.__name__}.redis')
    def setUp(self, mock_redis):
        self.connection = mock.MagicMock()
        mock_redis.StrictRedis.return_value = self.connection
        self.store = store.PoolStore('localhost', 6379, 0, key='POOL')

    def test_load_absent(self):
        """An absent key is an empty pool."""
        self.connection.get.return_value = None
        self.assertEqual(self.store.load(), {})
        self.connection.get.assert_called_once_with('POOL')

    def test_load(self):
        """The stored object is the pool."""
        self.connection.get.return_value = json.dumps({'a@x.com': 'sk1'})
        self.assertEqual(self.store.load(), {'a@x.com': 'sk1'})

    def test_load_connection_failed(self):
        """Transport errors are reported as an unavailable store."""
        for exc in (ConnectionError, TimeoutError):
            self.connection.get.side_effect = exc
            with self.assertRaises(StoreUnavailable):
                self.store.load()

    def test_load_corrupted(self):
        """Anything other than a JSON object cannot be used."""
        for raw in ('not json', '["a@x.com"]', '"sk1"'):
            self.connection.get.return_value = raw
            with self.assertRaises(StoreUnavailable):
                self.store.load()

    def test_save(self):
        """The whole pool is written under the key."""
        pipe = self.connection.pipeline.return_value
        self.store.save({'a@x.com': 'sk1'})
        pipe.set.assert_called_once_with('POOL', '{"a@x.com": "sk1"}')
        self.assertEqual(pipe.incr.call_count, 0)
        self.assertEqual(pipe.execute.call_count, 1)

    def test_save_connection_failed(self):
        """A failed write is reported as an unavailable store."""
        pipe = self.connection.pipeline.return_value
        pipe.execute.side_effect = ConnectionError
        with self.assertRaises(StoreUnavailable):
            self.store.save({'a@x.com': 'sk1'})

    @mock.patch(f'{store.__name__}.redis')
    def test_save_versioned(self, mock_redis):
        """A versioned save watches the pool while it checks and writes."""
        mock_redis.StrictRedis.return_value = self.connection
        versioned = store.PoolStore('localhost', 6379, 0, key='POOL',
                                    versioned=True)
        pipe = self.connection.pipeline.return_value
        pipe.get.return_value = '3'
        versioned.save({'a@x.com': 'sk1'}, expected_version=3)
        pipe.watch.assert_called_once_with('POOL', 'POOL:version')
        self.assertEqual(pipe.multi.call_count, 1)
        pipe.set.assert_called_once_with('POOL', '{"a@x.com": "sk1"}')
        pipe.incr.assert_called_once_with('POOL:version')

        pipe.execute.side_effect = WatchError
        with self.assertRaises(Conflict):
            versioned.save({'a@x.com': 'sk2'}, expected_version=3)

    def test_status(self):
        """The store is up if it answers PING."""
        self.connection.ping.return_value = True
        self.assertTrue(self.store.status())
        self.connection.ping.side_effect = ConnectionError
        self.assertFalse(self.store.status())


class TestPoolStoreWithFakeRedis(TestCase):
    """The store against an in-process Redis."""

    def setUp(self):
        self.store = store.PoolStore('localhost', 6379, 0, fake=True,
                                     versioned=True)
        self.store.r.flushall()

    def test_save_and_load(self):
        """What is saved is what is loaded."""
        self.store.save({'b@x.com': 'sk2', 'a@x.com': 'sk1'})
        self.assertEqual(self.store.load(),
                         {'a@x.com': 'sk1', 'b@x.com': 'sk2'})

    def test_version_increments(self):
        """Each save moves the version on."""
        self.assertEqual(self.store.version(), 0)
        self.store.save({'a@x.com': 'sk1'})
        self.store.save({'a@x.com': 'sk2'})
        self.assertEqual(self.store.version(), 2)

    def test_stale_version(self):
        """Saving on top of an unseen save is a conflict."""
        seen = self.store.version()
        self.store.save({'a@x.com': 'sk1'})
        with self.assertRaises(Conflict):
            self.store.save({'b@x.com': 'sk2'}, expected_version=seen)
        self.assertEqual(self.store.load(), {'a@x.com': 'sk1'})

    def test_save_interleaved_with_other_admin(self):
        """A save that lands after the version check aborts this write."""
        other = store.PoolStore('localhost', 6379, 0, fake=True,
                                versioned=True)
        repository = PoolRepository(self.store)
        repository.add('a@x.com', 'sk1')

        pipeline = self.store.r.pipeline

        def pipeline_with_other_save(*args, **kwargs):
            pipe = pipeline(*args, **kwargs)
            multi = pipe.multi

            def other_saves_first():
                PoolRepository(other).add('other@x.com', 'sk9')
                multi()

            pipe.multi = other_saves_first
            return pipe

        with mock.patch.object(self.store.r, 'pipeline',
                               side_effect=pipeline_with_other_save):
            with self.assertRaises(Conflict):
                repository.add('b@x.com', 'sk2')
        self.assertEqual(self.store.load(),
                         {'a@x.com': 'sk1', 'other@x.com': 'sk9'})
        self.assertEqual(self.store.version(), 2)

    def test_shared_between_connections(self):
        """Fake connections in one process see the same data."""
        self.store.save({'a@x.com': 'sk1'})
        other = store.PoolStore('localhost', 6379, 0, fake=True)
        self.assertEqual(other.load(), {'a@x.com': 'sk1'})


class TestGetStore(TestCase):
    """:func:`.get_store` reads the application config."""

    @mock.patch(f'{store.__name__}.get_application_config')
    @mock.patch(f'{store.__name__}.redis')
    def test_config(self, mock_redis, mock_get_config):
        """Connection parameters come from the config."""
        mock_get_config.return_value = {
            'REDIS_HOST': 'redis', 'REDIS_PORT': '7000',
            'REDIS_DATABASE': '3', 'REDIS_TOKEN': 'tok',
            'STORE_TIMEOUT': '2', 'POOL_KEY': 'MYPOOL',
            'POOL_VERSION_CHECK': '1'
        }
        pool_store = store.get_store()
        self.assertEqual(pool_store.key, 'MYPOOL')
        self.assertTrue(pool_store.versioned)
        mock_redis.StrictRedis.assert_called_once_with(
            host='redis', port=7000, db=3, password='tok',
            socket_timeout=2.0, socket_connect_timeout=2.0,
            decode_responses=True
        )

    @mock.patch(f'{store.__name__}.get_application_config')
    @mock.patch(f'{store.__name__}.redis')
    def test_cluster(self, mock_redis, mock_get_config):
        """A cluster is used when REDIS_CLUSTER is 1."""
        mock_get_config.return_value = {'REDIS_CLUSTER': '1'}
        store.get_store()
        self.assertEqual(mock_redis.RedisCluster.call_count, 1)
        self.assertEqual(mock_redis.StrictRedis.call_count, 0)
