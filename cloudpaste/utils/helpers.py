"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_paste_url() -> str
        Get string representation of the public URL for a given paste ID
    iso_from_ms() -> str | None
        Render epoch milliseconds as an ISO-8601 UTC timestamp
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn any uncaught exception into an HTTP 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from cloudpaste.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from datetime import datetime, timedelta, UTC
from typing import Any, Optional
from collections.abc import Callable

from cloudpaste.constants import ENV, Defaults, UNKNOWN_INTERNAL_SERVER_ERROR
from cloudpaste.exceptions import MissingEnvironmentVariableError
from cloudpaste.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    The BASE_URL environment variable wins when set. Otherwise the URL is
    derived from the request context: a custom domain omits the stage name,
    the default AWS execute-api domain includes it.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL without a trailing slash, e.g.:
             - "https://paste.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    configured = os.environ.get(ENV.App.BASE_URL)
    if configured:
        return configured.rstrip('/')

    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # Custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return Defaults.BASE_URL


def get_paste_url(paste_id: str, event: dict[str, Any]) -> str:
    """Get string representation of a paste's public URL

    Args:
        paste_id (str): paste ID
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: paste url, e.g. 'https://paste.example.com/p/aB3dE5gH7j'
    """
    return f'{base_url(event)}/p/{paste_id}'


def iso_from_ms(epoch_ms: Optional[int]) -> str | None:
    """Render epoch milliseconds as ISO-8601 in UTC with millisecond precision

    Example:
        >>> iso_from_ms(1_700_000_000_123)
        '2023-11-14T22:13:20.123Z'
        >>> iso_from_ms(None) is None
        True
    """
    if epoch_ms is None:
        return None
    # Integer arithmetic avoids float rounding on the millisecond part
    moment = datetime.fromtimestamp(epoch_ms // 1000, tz=UTC) + timedelta(milliseconds=epoch_ms % 1000)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with HTTP 500 instead of letting a Lambda handler crash

    The exception is logged with its traceback. The client only sees a generic
    message and an error code. Under SAM local the exception is re-raised so
    it surfaces in the terminal.
    """

    @functools.wraps(handler)
    def wrapper(event, context, *args, **kwargs):
        try:
            return handler(event, context, *args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in Lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'error': 'Internal server error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
