"""Validation of untrusted paste creation requests

Request bodies arrive as arbitrary JSON. They are turned into a typed
CreatePasteRequest by a single function; anything else raises a
ValidationError carrying an enumerated ValidationErrorCode.

Example:
    >>> validate_create_request({'content': 'hello', 'max_views': 2})
    CreatePasteRequest(content='hello', ttl_seconds=None, max_views=2)

    >>> validate_create_request({'content': '   '})
    Traceback (most recent call last):
        ...
    cloudpaste.exceptions.ValidationError: content is required and must be a non-empty string
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from cloudpaste.exceptions import ValidationError, ValidationErrorCode


@dataclass(frozen=True)
class CreatePasteRequest:
    content: str
    ttl_seconds: Optional[int] = None
    max_views: Optional[int] = None


def is_positive_int(value: Any) -> bool:
    # bool is a subclass of int, but `true` is not a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def parse_create_body(body: Optional[str]) -> Any:
    """Decode a raw request body, raising ValidationError(INVALID_JSON) if it isn't JSON."""
    try:
        return json.loads(body or '{}')
    except json.JSONDecodeError as e:
        raise ValidationError(ValidationErrorCode.INVALID_JSON, 'request body must be valid JSON') from e


def validate_create_request(data: Any) -> CreatePasteRequest:
    """Validate a decoded paste creation request

    Rules:
        - content: required, a string that is not blank after stripping whitespace
        - ttl_seconds: optional, an integer >= 1
        - max_views: optional, an integer >= 1

    A field explicitly set to null is treated the same as an absent field.

    Args:
        data (Any):
            Decoded JSON request body.

    Returns:
        CreatePasteRequest: the typed request. Content is kept verbatim (not stripped).

    Raises:
        ValidationError:
            With code INVALID_BODY, INVALID_CONTENT, INVALID_TTL or INVALID_MAX_VIEWS.
    """
    if not isinstance(data, dict):
        raise ValidationError(ValidationErrorCode.INVALID_BODY, 'request body must be a JSON object')

    content = data.get('content')
    if not isinstance(content, str) or not content.strip():
        raise ValidationError(ValidationErrorCode.INVALID_CONTENT, 'content is required and must be a non-empty string')

    ttl_seconds = data.get('ttl_seconds')
    if ttl_seconds is not None and not is_positive_int(ttl_seconds):
        raise ValidationError(ValidationErrorCode.INVALID_TTL, 'ttl_seconds must be an integer >= 1')

    max_views = data.get('max_views')
    if max_views is not None and not is_positive_int(max_views):
        raise ValidationError(ValidationErrorCode.INVALID_MAX_VIEWS, 'max_views must be an integer >= 1')

    return CreatePasteRequest(content=content, ttl_seconds=ttl_seconds, max_views=max_views)
