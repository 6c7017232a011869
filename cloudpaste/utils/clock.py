"""Clock source for expiry decisions

Every expiry comparison in cloudpaste uses epoch milliseconds obtained here,
never a clock read deep inside the DAO layer.

Functions:
    current_time_ms(event=None) -> int
        Current epoch milliseconds, honouring the `x-test-now-ms` header in TEST_MODE.
    is_expired(expires_at, now_ms) -> bool
        True if an optional absolute expiry has been reached.

Example:
    >>> os.environ['TEST_MODE'] = '1'
    >>> current_time_ms({'headers': {'x-test-now-ms': '1000'}})
    1000
    >>> is_expired(1000, 999)
    False
    >>> is_expired(1000, 1000)
    True
"""

import os
import logging
from datetime import datetime, UTC
from typing import Any, Optional

from cloudpaste.constants import ENV, TEST_NOW_HEADER


logger = logging.getLogger(__name__)


def clock_override_enabled() -> bool:
    """Return True if the deterministic test clock may be used (TEST_MODE=1)."""
    return os.getenv(ENV.App.TEST_MODE) == '1'


def _header(event: dict[str, Any], name: str) -> Optional[str]:
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def current_time_ms(event: Optional[dict[str, Any]] = None) -> int:
    """Return the current time in epoch milliseconds

    When TEST_MODE=1 and the API Gateway event carries an `x-test-now-ms`
    header, its value is used instead of the wall clock. Header names are
    matched case-insensitively. A non-integer header value is ignored.

    Args:
        event (Optional[dict]):
            API Gateway event object passed to Lambda handler.

    Returns:
        int: epoch milliseconds
    """
    if event is not None and clock_override_enabled():
        override = _header(event, TEST_NOW_HEADER)
        if override is not None:
            try:
                return int(override)
            except ValueError:
                logger.warning('Ignoring malformed test clock header.', extra={'header': TEST_NOW_HEADER, 'value': override})

    return int(datetime.now(UTC).timestamp() * 1000)


def is_expired(expires_at: Optional[int], now_ms: int) -> bool:
    if expires_at is None:
        return False
    return now_ms >= expires_at
