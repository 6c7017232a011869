"""Unit tests for Redis DAO helpers.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures Redis connection errors and timeouts are converted into DataStoreError.
       - Ensures other Redis errors pass through untouched.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
    4. Process-wide client
       - Ensures shared_redis_client() creates one client per configuration.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from cloudpaste.dao.redis.helpers import handle_redis_connection_error, shared_redis_client
from cloudpaste.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        }

    @handle_redis_connection_error
    def ping(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().ping() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


def test_decorator_transforms_redis_connection_error():
    """Ensure Redis ConnectionError is caught and re-raised as DataStoreError."""
    dao = DummyDAO(error=redis.exceptions.ConnectionError('Cannot connect'))

    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        dao.ping()

    assert isinstance(exc_info.value.__cause__, redis.exceptions.ConnectionError)


def test_decorator_transforms_redis_timeout_error():
    dao = DummyDAO(error=redis.exceptions.TimeoutError('Timeout reading from socket'))

    with pytest.raises(DataStoreError, match='Timed out talking to Redis at localhost:6379/0.'):
        dao.ping()


def test_decorator_lets_other_redis_errors_through():
    """Ensure command errors aren't mistaken for an unavailable data store."""
    dao = DummyDAO(error=redis.exceptions.ResponseError('WRONGTYPE'))

    with pytest.raises(redis.exceptions.ResponseError):
        dao.ping()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__


# -------------------------------
# 4. Process-wide client
# -------------------------------


@pytest.fixture
def _fresh_client_cache():
    shared_redis_client.cache_clear()
    yield
    shared_redis_client.cache_clear()


@pytest.mark.usefixtures('_fresh_client_cache')
def test_shared_redis_client_is_reused():
    with patch('cloudpaste.dao.redis.helpers.redis.Redis', autospec=True) as redis_mock:
        first = shared_redis_client(redis_host='redis', redis_port=6379, redis_db=0)
        second = shared_redis_client(redis_host='redis', redis_port=6379, redis_db=0)

    assert first is second
    redis_mock.assert_called_once_with(host='redis', port=6379, db=0, decode_responses=True, username=None, password=None)


@pytest.mark.usefixtures('_fresh_client_cache')
def test_shared_redis_client_per_configuration():
    with patch('cloudpaste.dao.redis.helpers.redis.Redis', autospec=True) as redis_mock:
        redis_mock.side_effect = lambda **kwargs: MagicMock(name=kwargs['host'])
        first = shared_redis_client(redis_host='redis-a')
        second = shared_redis_client(redis_host='redis-b')

    assert first is not second
    assert redis_mock.call_count == 2
