"""Data Access Object (DAO) implementation for managing pastes in Redis

This module provides a Redis-based implementation of PasteBaseDAO for CRUD-like
operations with PasteModel instances.

Responsibilities:
    - Insert, overwrite, retrieve and delete pastes stored as JSON strings;
    - Mirror the paste's expires_at as a native Redis TTL;
    - Atomically consume views with an optimistic (WATCH/MULTI/EXEC) transaction;
    - Increment the global counter used to derive paste IDs;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    PasteRedisDAO:
        DAO for storing and retrieving PasteModel in a Redis datastore.

Example:
    >>> from cloudpaste.models import PasteModel
    >>> from cloudpaste.dao.redis import PasteRedisDAO

    >>> dao = PasteRedisDAO(prefix="cloudpaste:dev")

    >>> paste = PasteModel(
    ...     paste_id="aB3dE5gH7j",
    ...     content="hello",
    ...     created_at=1_700_000_000_000,
    ...     max_views=2,
    ...     remaining_views=2,
    ... )
    >>> dao.insert(paste)
    <PasteRedisDAO>

    >>> dao.decrement_views("aB3dE5gH7j", now_ms=1_700_000_000_500)
    1
    >>> dao.decrement_views("aB3dE5gH7j", now_ms=1_700_000_000_900) is None
    True
    >>> dao.get("aB3dE5gH7j") is None
    True
"""

import logging
from typing import Optional

import redis
from beartype import beartype

from cloudpaste.constants import Defaults
from cloudpaste.models import PasteModel
from cloudpaste.dao.base import PasteBaseDAO
from cloudpaste.dao.redis.mixins import RedisClientMixin
from cloudpaste.dao.redis.helpers import handle_redis_connection_error
from cloudpaste.dao.exceptions import DataStoreError, PasteAlreadyExistsError


logger = logging.getLogger(__name__)


class PasteRedisDAO(RedisClientMixin, PasteBaseDAO):
    """Redis-based Data Access Object (DAO) for managing pastes

    This class implements the PasteBaseDAO interface using Redis as a data store.
    Each paste lives under a single key, `[<prefix>:]paste:<id>`, holding its JSON
    representation. Pastes with an expiry carry a matching Redis TTL so that
    Redis reclaims them on its own.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        max_decrement_attempts (int):
            How many optimistic transactions decrement_views() runs before giving up.

    Methods:
        insert(paste: PasteModel, **kwargs) -> PasteRedisDAO:
            SET NX the paste with its full-lifetime TTL.
            Raises PasteAlreadyExistsError when the ID is taken.

        put(paste: PasteModel, now_ms: Optional[int] = None, **kwargs) -> PasteRedisDAO:
            SET the paste, overwriting any previous value.

        get(paste_id: str, **kwargs) -> PasteModel | None:
            GET and decode the paste, None when the key is missing.

        delete(paste_id: str, **kwargs) -> None:
            DEL the paste key (idempotent).

        decrement_views(paste_id: str, now_ms: int, **kwargs) -> int | None:
            Consume one view. Deletes the paste instead of storing zero views.

        count(increment: bool = False, **kwargs) -> int:
            Retrieve (and optionally increment) the global paste counter.

        Every method raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, max_decrement_attempts: int = Defaults.MAX_DECREMENT_ATTEMPTS, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_decrement_attempts = max_decrement_attempts

    @handle_redis_connection_error
    @beartype
    def insert(self, paste: PasteModel, **kwargs) -> 'PasteRedisDAO':
        """Insert a new paste into Redis

        Uses SET NX so that the existence check and the write are a single
        atomic command. The TTL spans the paste's whole lifetime:
        ceil((expires_at - created_at) / 1000) seconds.

        Args:
            paste (PasteModel):
                PasteModel instance to be stored.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            PasteRedisDAO: self (for method chaining)

        Raises:
            PasteAlreadyExistsError:
                If a paste with the same ID already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        paste_key = self.keys.paste_key(paste.paste_id)

        created = self.redis.set(paste_key, paste.to_json(), ex=paste.ttl_seconds(), nx=True)
        if not created:
            raise PasteAlreadyExistsError(f"Paste with ID '{paste.paste_id}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def put(self, paste: PasteModel, now_ms: Optional[int] = None, **kwargs) -> 'PasteRedisDAO':
        """Store a paste in Redis, overwriting any previous value

        Args:
            paste (PasteModel):
                PasteModel instance to be stored.
            now_ms (Optional[int]):
                Current time in epoch milliseconds. When provided, the TTL covers
                only what is left until expires_at (at least 1 second).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            PasteRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis connection issue occurs.
        """
        self.redis.set(self.keys.paste_key(paste.paste_id), paste.to_json(), ex=paste.ttl_seconds(now_ms))
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, paste_id: str, **kwargs) -> PasteModel | None:
        """Retrieve a stored paste by ID

        NOTE: the returned paste may already be logically expired. Redis TTLs
              are only a reclamation mechanism; liveness is the caller's call.

        Args:
            paste_id (str):
                Identifier of the paste.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            PasteModel | None:
                The decoded paste, or None if the key does not exist.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur or the stored value is corrupt.

        Example:
            >>> dao.get('aB3dE5gH7j')
            PasteModel(paste_id='aB3dE5gH7j', content='hello', ...)
        """
        raw = self.redis.get(self.keys.paste_key(paste_id))
        if raw is None:
            return None
        return self._decode(raw, paste_id)

    @handle_redis_connection_error
    @beartype
    def delete(self, paste_id: str, **kwargs) -> None:
        """Delete a paste. Deleting a missing paste is a no-op."""
        self.redis.delete(self.keys.paste_key(paste_id))

    @handle_redis_connection_error
    @beartype
    def decrement_views(self, paste_id: str, now_ms: int, **kwargs) -> int | None:
        """Consume exactly one view of a paste

        The read-modify-write runs as an optimistic transaction:

            WATCH <prefix>:paste:<id>
            GET   <prefix>:paste:<id>
            MULTI
            SET   <prefix>:paste:<id> <json with remainingViews - 1> EX <remaining ttl>
              or
            DEL   <prefix>:paste:<id>                 (when no views would be left)
            EXEC

        If another client touches the key between WATCH and EXEC, Redis aborts
        the transaction and the whole sequence starts over from a fresh read.
        Concurrent viewers never write the same count, and a deleted paste is
        never written back.

        NOTE: the TTL is re-derived as max(1, ceil((expires_at - now_ms) / 1000))
              so that a nearly expired paste is never written with EX 0, which
              Redis rejects, and never loses its expiry.

        Args:
            paste_id (str):
                Identifier of the paste.
            now_ms (int):
                Current time in epoch milliseconds (used for the remaining TTL).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            int | None:
                Remaining views after the decrement. None if the paste is missing,
                does not track views, or was exhausted (and deleted) by this call.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur, or the key stayed contended
                for max_decrement_attempts transactions in a row.

        Example:
            >>> dao.decrement_views('aB3dE5gH7j', now_ms=1_700_000_000_000)
            2
        """
        paste_key = self.keys.paste_key(paste_id)

        with self.redis.pipeline() as pipe:
            for attempt in range(1, self.max_decrement_attempts + 1):
                try:
                    pipe.watch(paste_key)
                    raw = pipe.get(paste_key)
                    paste = None if raw is None else self._decode(raw, paste_id)
                    if paste is None or paste.remaining_views is None:
                        pipe.unwatch()
                        return None

                    remaining_views = paste.remaining_views - 1
                    pipe.multi()
                    if remaining_views <= 0:
                        pipe.delete(paste_key)
                    else:
                        pipe.set(paste_key, paste.with_remaining_views(remaining_views).to_json(), ex=paste.ttl_seconds(now_ms))
                    pipe.execute()
                except redis.exceptions.WatchError:
                    logger.debug(
                        'Paste changed while consuming a view, retrying.',
                        extra={'pasteId': paste_id, 'attempt': attempt},
                    )
                    continue
                else:
                    return remaining_views if remaining_views > 0 else None

        raise DataStoreError(f"Paste '{paste_id}' kept changing during {self.max_decrement_attempts} decrement attempts.")

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global paste counter

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.
            **kwargs:
                Optional keyword arguments.

        Returns:
            int:
                The updated or current global counter value (0 if never incremented).

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        else:
            return int(self.redis.get(self.keys.counter_key()) or 0)

    @staticmethod
    def _decode(raw: str | bytes, paste_id: str) -> PasteModel:
        try:
            return PasteModel.from_json(raw, paste_id)
        except ValueError as e:
            raise DataStoreError(f"Stored paste '{paste_id}' is corrupt.") from e
