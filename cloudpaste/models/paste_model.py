"""Paste record model and its JSON wire format

Persisted JSON layout (keys are camelCase, nulls are kept):

    {
        "id": "aB3dE5gH7j",
        "content": "hello",
        "createdAt": 1700000000000,
        "expiresAt": 1700000060000,
        "maxViews": 3,
        "remainingViews": 2
    }
"""

import json
import math
from dataclasses import dataclass, replace
from typing import Any, Optional, Self

from cloudpaste.utils import clock


@dataclass(frozen=True)
class PasteModel:
    """Represent a stored paste and its expiry metadata.

    Attributes:
        paste_id (str):
            Opaque, URL-safe identifier of the paste.
        content (str):
            Arbitrary text payload.
        created_at (int):
            Creation time in epoch milliseconds. Never mutated.
        expires_at (Optional[int]):
            Absolute expiry in epoch milliseconds. None means no time-based expiry.
        max_views (Optional[int]):
            View budget fixed at creation. None means unlimited views.
        remaining_views (Optional[int]):
            Views left before the paste is retired. None iff max_views is None.

    Example:
        >>> paste = PasteModel(
        ...     paste_id='aB3dE5gH7j',
        ...     content='hello',
        ...     created_at=0,
        ...     expires_at=10_000,
        ...     max_views=3,
        ...     remaining_views=3,
        ... )
        >>> paste.is_live(9_999)
        True
        >>> paste.is_live(10_000)
        False
    """

    paste_id: str
    content: str
    created_at: int
    expires_at: Optional[int] = None
    max_views: Optional[int] = None
    remaining_views: Optional[int] = None

    def __post_init__(self):
        if self.max_views is None and self.remaining_views is not None:
            raise ValueError(f'Paste {self.paste_id!r} tracks remaining views without a view budget.')

    def is_expired(self, now_ms: int) -> bool:
        return clock.is_expired(self.expires_at, now_ms)

    def is_exhausted(self) -> bool:
        return self.remaining_views is not None and self.remaining_views <= 0

    def is_live(self, now_ms: int) -> bool:
        return not self.is_expired(now_ms) and not self.is_exhausted()

    def ttl_seconds(self, now_ms: Optional[int] = None) -> Optional[int]:
        """Compute the backend TTL for this paste in whole seconds.

        Without `now_ms` the TTL spans the full lifetime (expires_at - created_at).
        With `now_ms` it covers what is left of it, floored at 1 second so a
        zero or negative value is never sent to the backend.

        Returns:
            Optional[int]: TTL in seconds, None if the paste never expires by time.
        """
        if self.expires_at is None:
            return None
        if now_ms is None:
            return math.ceil((self.expires_at - self.created_at) / 1000)
        return max(1, math.ceil((self.expires_at - now_ms) / 1000))

    def with_remaining_views(self, remaining_views: int) -> Self:
        return replace(self, remaining_views=remaining_views)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.paste_id,
            'content': self.content,
            'createdAt': self.created_at,
            'expiresAt': self.expires_at,
            'maxViews': self.max_views,
            'remainingViews': self.remaining_views,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str | bytes, paste_id: str) -> Self:
        """Decode a stored paste.

        Records written without an "id" field fall back to `paste_id` (the ID
        taken from the Redis key).

        Raises:
            ValueError: If the payload is not a JSON object with the expected fields.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f'Stored paste {paste_id!r} is not a JSON object.')

        try:
            return cls(
                paste_id=data.get('id') or paste_id,
                content=data['content'],
                created_at=data['createdAt'],
                expires_at=data.get('expiresAt'),
                max_views=data.get('maxViews'),
                remaining_views=data.get('remainingViews'),
            )
        except KeyError as e:
            raise ValueError(f'Stored paste {paste_id!r} is missing field {e}.') from e
