import logging

from cloudpaste.types import LambdaEvent, LambdaContext, LambdaResponse
from cloudpaste.lifecycle import PasteLifecycle
from cloudpaste.exceptions import ConfigurationError
from cloudpaste.dao.redis import PasteRedisDAO, shared_redis_client
from cloudpaste.dao.exceptions import DataStoreError, PasteNotFoundError
from cloudpaste.utils import load_config, app_prefix, redis_kwargs, current_time_ms, guarantee_500_response
from cloudpaste.lambdas.responses import response_json, response_400, response_404, response_500, response_503, paste_body
from cloudpaste.lambdas.constants import (
    MISSING_PASTE_ID,
    PASTE_NOT_FOUND,
    PASTE_SERVED,
    STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to read a paste (counts as a view)

    This Lambda handler follows this procedure to serve a paste:
    - Step 1: Extract the paste ID from the request path
    - Step 2: Connect to the paste data store
    - Step 3: Fetch the paste and consume one view
    - Step 4: Respond with the paste content

    HTTP responses:
        200: Paste served
            content: paste content
            remaining_views: views left after this one (null if unlimited)
            expires_at: ISO-8601 expiry (null if the paste never expires by time)
        400: Missing paste ID in path
        404: Paste not found, expired, or out of views
        500: Internal server error
        503: Paste data store unavailable (retry later)

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the `id` path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'id': 'aB3dE5gH7j'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])
        {'content': 'hello', 'remaining_views': 2, 'expires_at': None}
    """
    # 0- Get application's config
    try:
        app_config = load_config('get_paste')
    except (ConfigurationError, KeyError):
        logger.exception('Failed to load AppConfig for get paste function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract paste ID from request's path
    paste_id = (event.get('pathParameters') or {}).get('id')
    if not paste_id:
        logger.info('Missing "id" in path. Responding with 400.', extra={'event': MISSING_PASTE_ID})
        return response_400("missing 'id' in path", error_code=MISSING_PASTE_ID)

    # 2- Connect to the paste data store
    # 3- Fetch the paste and consume one view
    try:
        dao = PasteRedisDAO(redis_client=shared_redis_client(**redis_kwargs(app_config)), prefix=app_prefix())
        paste = PasteLifecycle(dao).fetch(paste_id, now_ms=current_time_ms(event), decrement=True)
    except PasteNotFoundError:
        logger.info('Paste not found or expired. Responding with 404.', extra={'pasteId': paste_id, 'event': PASTE_NOT_FOUND})
        return response_404()
    except DataStoreError:
        logger.exception('Paste data store unavailable. Responding with 503.', extra={'pasteId': paste_id, 'event': STORE_UNAVAILABLE})
        return response_503(error_code=STORE_UNAVAILABLE)

    # 4- Respond with the paste
    logger.info(
        'Paste served. Responding with 200.',
        extra={'pasteId': paste_id, 'remainingViews': paste.remaining_views, 'event': PASTE_SERVED},
    )
    return response_json(200, paste_body(paste))
