import functools
from typing import Any, Optional
from collections.abc import Callable

import redis

from cloudpaste.dao.exceptions import DataStoreError


__all__ = ['shared_redis_client']


def _describe_connection(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Both connection failures and timeouts surface as DataStoreError. Nothing
    is retried here: the caller decides on its own retry policy.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError
            or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_count(self):
        ...     return self.redis.get('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Timed out talking to Redis at {_describe_connection(self.redis)}.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {_describe_connection(self.redis)}.") from e

    return wrapper


@functools.cache
def shared_redis_client(
    redis_host: Optional[str] = 'localhost',
    redis_port: Optional[int] = 6379,
    redis_db: Optional[int] = 0,
    redis_decode_responses: Optional[bool] = True,
    redis_username: Optional[str] = None,
    redis_password: Optional[str] = None,
) -> redis.Redis:
    """Return the process-wide Redis client for a given configuration

    Warm Lambda containers reuse the same client (and its connection pool)
    across invocations instead of reconnecting on every request.

    Example:
        >>> client = shared_redis_client(redis_host='redis', redis_port=6379)
        >>> client is shared_redis_client(redis_host='redis', redis_port=6379)
        True
    """
    return redis.Redis(
        host=redis_host,
        port=int(redis_port),
        db=int(redis_db),
        decode_responses=redis_decode_responses,
        username=redis_username,
        password=redis_password,
    )
