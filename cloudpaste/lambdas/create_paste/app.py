import logging

from cloudpaste.types import LambdaEvent, LambdaContext, LambdaResponse
from cloudpaste.lifecycle import PasteLifecycle, counter_id_generator
from cloudpaste.validation import parse_create_body, validate_create_request
from cloudpaste.exceptions import ConfigurationError, ValidationError
from cloudpaste.dao.redis import PasteRedisDAO, shared_redis_client
from cloudpaste.dao.exceptions import DataStoreError, PasteAlreadyExistsError
from cloudpaste.utils import load_config, app_prefix, id_salt, redis_kwargs, get_paste_url, current_time_ms, guarantee_500_response
from cloudpaste.lambdas.responses import response_json, response_400, response_500, response_503
from cloudpaste.lambdas.constants import PASTE_CREATED, PASTE_ID_COLLISION, STORE_UNAVAILABLE, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create pastes

    This Lambda handler follows this procedure to create a paste:
    - Step 1: Extract and validate the paste parameters from the request body
    - Step 2: Connect to the paste data store
    - Step 3: Create the paste (expiry computed from the request clock)
    - Step 4: Respond with the paste ID and its public URL

    Request body (JSON):
        content (str): required, non-blank
        ttl_seconds (int): optional, >= 1
        max_views (int): optional, >= 1

    HTTP responses:
        201: Paste created
            id: paste ID
            url: public paste URL (<base url>/p/<id>)
        400: Bad client request
            error: reason (invalid JSON, bad content, ttl_seconds or max_views)
            errorCode: enumerated validation error
        500: Internal server error
        503: Paste data store unavailable (retry later)

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"content": "hello", "max_views": 1}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['url']
        'http://localhost:3000/p/aB3dE5gH7j'
    """
    # 0- Get application's config
    try:
        app_config = load_config('create_paste')
    except (ConfigurationError, KeyError):
        logger.exception('Failed to load AppConfig for create paste function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract and validate paste parameters
    try:
        request = validate_create_request(parse_create_body(event.get('body')))
    except ValidationError as e:
        logger.info('Invalid paste creation request. Responding with 400.', extra={'event': e.code, 'reason': e.message})
        return response_400(e.message, error_code=e.code)

    # 2- Connect to the paste data store
    # 3- Create the paste
    try:
        dao = PasteRedisDAO(redis_client=shared_redis_client(**redis_kwargs(app_config)), prefix=app_prefix())
        lifecycle = PasteLifecycle(dao, id_generator=counter_id_generator(dao, salt=id_salt()))
        paste_id = lifecycle.create(
            request.content,
            ttl_seconds=request.ttl_seconds,
            max_views=request.max_views,
            now_ms=current_time_ms(event),
        )
    except DataStoreError:
        logger.exception('Paste data store unavailable. Responding with 503.', extra={'event': STORE_UNAVAILABLE})
        return response_503(error_code=STORE_UNAVAILABLE)
    except PasteAlreadyExistsError:
        logger.exception('Generated paste ID is already taken. Responding with 500.', extra={'event': PASTE_ID_COLLISION})
        return response_500(error_code=PASTE_ID_COLLISION)

    # 4- Respond with the new paste
    url = get_paste_url(paste_id, event)
    logger.info('Paste created. Responding with 201.', extra={'pasteId': paste_id, 'event': PASTE_CREATED})
    return response_json(201, {'id': paste_id, 'url': url})
