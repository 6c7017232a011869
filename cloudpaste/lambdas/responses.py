"""API Gateway (Lambda proxy) responses shared by the paste Lambdas"""

import json
from typing import Any

from cloudpaste.models import PasteModel
from cloudpaste.types import LambdaResponse
from cloudpaste.utils.helpers import iso_from_ms


# Retry hint (seconds) sent along with 503 responses
STORE_UNAVAILABLE_RETRY_AFTER = 1


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, message: str, error_code: str | None = None, headers: dict[str, str] | None = None) -> LambdaResponse:
    body = {'error': message}
    if error_code:
        body['errorCode'] = error_code
    return response_json(status_code, body, headers)


def response_400(message: str, error_code: str | None = None) -> LambdaResponse:
    return response_error(400, message, error_code)


def response_404() -> LambdaResponse:
    # Missing, expired and exhausted pastes all look the same from the outside
    return response_error(404, 'Paste not found or expired')


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(500, message or 'Internal server error', error_code)


def response_503(error_code: str | None = None) -> LambdaResponse:
    return response_error(
        503,
        'Service temporarily unavailable',
        error_code,
        headers={'Retry-After': str(STORE_UNAVAILABLE_RETRY_AFTER)},
    )


def paste_body(paste: PasteModel) -> dict[str, Any]:
    return {
        'content': paste.content,
        'remaining_views': paste.remaining_views,
        'expires_at': iso_from_ms(paste.expires_at),
    }
