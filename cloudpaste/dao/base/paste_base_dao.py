"""Abstract base class for paste data access objects (DAOs).

This class establishes a consistent contract for all paste DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB).

Responsibilities:
    - Provide an interface for inserting, overwriting, retrieving and deleting PasteModel objects.
    - Provide the atomic view decrement used by decrementing fetches.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from cloudpaste.models import PasteModel
        >>> from cloudpaste.dao.redis import PasteRedisDAO

        >>> dao = PasteRedisDAO(...)

        >>> paste = PasteModel(paste_id='aB3dE5gH7j', content='hello', created_at=0)
        >>> dao.insert(paste)

        >>> dao.get('aB3dE5gH7j').content
        'hello'

        >>> dao.get('missing') is None
        True
"""

from abc import ABC, abstractmethod
from typing import Optional

from cloudpaste.models import PasteModel


class PasteBaseDAO(ABC):
    """Interface for paste data access objects (DAOs).

    Methods:
        insert(paste: PasteModel, **kwargs) -> PasteBaseDAO:
            Insert a brand-new paste. Raises PasteAlreadyExistsError on ID collision.

        put(paste: PasteModel, now_ms: Optional[int] = None, **kwargs) -> PasteBaseDAO:
            Overwrite a paste, keeping its time-based expiry.

        get(paste_id: str, **kwargs) -> PasteModel | None:
            Retrieve a paste. Returns None if not found.

        delete(paste_id: str, **kwargs) -> None:
            Remove a paste. Idempotent.

        decrement_views(paste_id: str, now_ms: int, **kwargs) -> int | None:
            Consume one view. Returns the remaining views, or None once exhausted.

        count(increment: bool, **kwargs) -> int:
            Return the global paste counter, optionally incrementing it first.

    All methods raise DataStoreError on connection or I/O failure.

    NOTE:
        - Pastes with an expiry are expected to be reclaimed by the data store
          itself. Callers must still check expires_at on every read.
    """

    @abstractmethod
    def insert(self, paste: PasteModel, **kwargs) -> 'PasteBaseDAO':
        """Insert a new paste into the data store.

        Raises:
            PasteAlreadyExistsError:
                If a paste with the same ID already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def put(self, paste: PasteModel, now_ms: Optional[int] = None, **kwargs) -> 'PasteBaseDAO':
        """Store a paste, overwriting any existing value under its ID.

        Args:
            paste (PasteModel):
                The paste to be stored.

            now_ms (Optional[int]):
                Current time in epoch milliseconds. When given, the backend TTL
                is re-derived from what is left until expires_at.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, paste_id: str, **kwargs) -> PasteModel | None:
        """Retrieve a paste by its ID.

        Returns:
            PasteModel | None: The paste if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, paste_id: str, **kwargs) -> None:
        """Delete a paste. Deleting a missing paste is not an error.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def decrement_views(self, paste_id: str, now_ms: int, **kwargs) -> int | None:
        """Consume exactly one view of a paste.

        The paste is re-read from the data store. When the count would reach
        zero the paste is deleted instead of being stored with zero views.

        Returns:
            int | None:
                Remaining views after the decrement, or None if the paste is
                gone, untracked or has just been exhausted.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current counter value from the data store.

        Args:
            increment (bool):
                If True, increment the counter by 1 before returning the value.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
