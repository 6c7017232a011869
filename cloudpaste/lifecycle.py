"""Paste lifecycle: creation, lazy expiry and view consumption

PasteLifecycle is the only place that interprets a stored paste. It never
keeps state between calls; every operation reads the paste again from the DAO.

A paste is live iff:
    - it exists in the data store, and
    - expires_at is None or now < expires_at, and
    - remaining_views is None or remaining_views > 0.

Both fetch modes (preview and decrementing) run the same liveness checks, so
a preview can never show a paste that a decrementing fetch would refuse.

Example:
    >>> lifecycle = PasteLifecycle(PasteRedisDAO(prefix='cloudpaste:dev'))
    >>> paste_id = lifecycle.create('hello', max_views=2, now_ms=1_000)
    >>> lifecycle.fetch(paste_id, now_ms=1_000).remaining_views
    2
    >>> lifecycle.fetch(paste_id, now_ms=1_000, decrement=True).remaining_views
    1
    >>> lifecycle.fetch(paste_id, now_ms=1_000, decrement=True)
    Traceback (most recent call last):
        ...
    cloudpaste.dao.exceptions.PasteNotFoundError: Paste 'aB3dE5gH7j' not found.
"""

import logging
from typing import Optional
from collections.abc import Callable

from beartype import beartype

from cloudpaste.constants import Defaults
from cloudpaste.models import PasteModel
from cloudpaste.dao.base import PasteBaseDAO
from cloudpaste.dao.exceptions import PasteNotFoundError
from cloudpaste.exceptions import ValidationError, ValidationErrorCode
from cloudpaste.utils.id_generator import generate_paste_id
from cloudpaste.validation import is_positive_int


logger = logging.getLogger(__name__)


def counter_id_generator(dao: PasteBaseDAO, salt: str = Defaults.ID_SALT) -> Callable[[], str]:
    """Build an ID generator backed by the DAO's global counter

    Each call increments the counter and scrambles it into a fixed-length base62 ID.
    """

    def new_id() -> str:
        return generate_paste_id(dao.count(increment=True), salt=salt)

    return new_id


class PasteLifecycle:
    """Create pastes and serve them while enforcing time and view expiry

    Attributes:
        dao (PasteBaseDAO):
            Data store holding the pastes.
        new_id (Callable[[], str]):
            Collaborator returning a fresh, unique paste ID on every call.

    Methods:
        create(content, ttl_seconds=None, max_views=None, *, now_ms) -> str:
            Store a new paste and return its ID.
        fetch(paste_id, *, now_ms, decrement=False) -> PasteModel:
            Return a live paste, optionally consuming one of its views.
            Raises PasteNotFoundError if the paste is missing, expired or out of views.

    Both methods let DataStoreError propagate untouched.
    """

    def __init__(self, dao: PasteBaseDAO, id_generator: Optional[Callable[[], str]] = None):
        self.dao = dao
        self.new_id = id_generator or counter_id_generator(dao)

    def create(
        self,
        content: str,
        ttl_seconds: Optional[int] = None,
        max_views: Optional[int] = None,
        *,
        now_ms: int,
    ) -> str:
        """Create a paste

        Args:
            content (str):
                Paste body. Must not be blank.
            ttl_seconds (Optional[int]):
                Lifetime in seconds. None means the paste never expires by time.
            max_views (Optional[int]):
                View budget. None means unlimited views.
            now_ms (int):
                Creation time in epoch milliseconds.

        Returns:
            str: ID of the new paste.

        Raises:
            ValidationError:
                If content is blank, or ttl_seconds / max_views is not a positive integer.
            DataStoreError:
                If the data store is unavailable.
        """
        # Same rules as validate_create_request()
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(ValidationErrorCode.INVALID_CONTENT, 'content is required and must be a non-empty string')
        if ttl_seconds is not None and not is_positive_int(ttl_seconds):
            raise ValidationError(ValidationErrorCode.INVALID_TTL, 'ttl_seconds must be an integer >= 1')
        if max_views is not None and not is_positive_int(max_views):
            raise ValidationError(ValidationErrorCode.INVALID_MAX_VIEWS, 'max_views must be an integer >= 1')

        paste = PasteModel(
            paste_id=self.new_id(),
            content=content,
            created_at=now_ms,
            expires_at=now_ms + ttl_seconds * 1000 if ttl_seconds else None,
            max_views=max_views,
            remaining_views=max_views,
        )
        self.dao.insert(paste)

        logger.debug(
            'Paste created.',
            extra={'pasteId': paste.paste_id, 'expiresAt': paste.expires_at, 'maxViews': paste.max_views},
        )
        return paste.paste_id

    @beartype
    def fetch(self, paste_id: str, *, now_ms: int, decrement: bool = False) -> PasteModel:
        """Fetch a live paste

        Procedure:
        - Step 1: Read the paste from the data store
        - Step 2: Lazy time expiry (now_ms >= expires_at), even if the data store
                  has not reclaimed the key yet
        - Step 3: View expiry (remaining_views <= 0)
        - Step 4: If decrement=True and views are tracked, consume one view
                  atomically; the paste is gone once its last view is consumed

        Args:
            paste_id (str):
                Identifier of the paste.
            now_ms (int):
                Current time in epoch milliseconds.
            decrement (bool):
                If True, the fetch counts as a view. Defaults to False (preview).

        Returns:
            PasteModel: the paste, carrying the post-decrement remaining_views.

        Raises:
            PasteNotFoundError:
                If the paste is missing, expired by time or has no views left.
            DataStoreError:
                If the data store is unavailable.
        """
        paste = self.dao.get(paste_id)
        if paste is None:
            raise PasteNotFoundError(f"Paste '{paste_id}' not found.")

        if paste.is_expired(now_ms):
            logger.debug('Paste expired by time.', extra={'pasteId': paste_id, 'expiresAt': paste.expires_at, 'now': now_ms})
            raise PasteNotFoundError(f"Paste '{paste_id}' not found.")

        if paste.is_exhausted():
            raise PasteNotFoundError(f"Paste '{paste_id}' not found.")

        if decrement and paste.remaining_views is not None:
            remaining_views = self.dao.decrement_views(paste_id, now_ms)
            if remaining_views is None:
                logger.debug('Paste ran out of views.', extra={'pasteId': paste_id})
                raise PasteNotFoundError(f"Paste '{paste_id}' not found.")
            paste = paste.with_remaining_views(remaining_views)

        return paste
