import logging

from cloudpaste.types import LambdaEvent, LambdaContext, LambdaResponse
from cloudpaste.exceptions import ConfigurationError
from cloudpaste.dao.redis import PasteRedisDAO, shared_redis_client
from cloudpaste.dao.exceptions import DataStoreError
from cloudpaste.utils import load_config, app_prefix, redis_kwargs, guarantee_500_response
from cloudpaste.lambdas.responses import response_json
from cloudpaste.lambdas.constants import HEALTHCHECK_OK, HEALTHCHECK_FAILED, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report whether the paste data store is reachable

    HTTP responses:
        200: {"ok": true}
        500: {"ok": false, "error": <reason>}
    """
    try:
        app_config = load_config('healthz')
    except (ConfigurationError, KeyError) as e:
        logger.exception('Failed to load AppConfig for healthz function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_json(500, {'ok': False, 'error': f'Missing configuration: {e}'})

    try:
        # Constructing the DAO PINGs Redis
        PasteRedisDAO(redis_client=shared_redis_client(**redis_kwargs(app_config)), prefix=app_prefix())
    except DataStoreError as e:
        logger.error('Healthcheck failed. Responding with 500.', extra={'event': HEALTHCHECK_FAILED, 'reason': str(e)})
        return response_json(500, {'ok': False, 'error': str(e)})

    logger.debug('Healthcheck passed.', extra={'event': HEALTHCHECK_OK})
    return response_json(200, {'ok': True})
