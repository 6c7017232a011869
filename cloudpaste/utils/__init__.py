from cloudpaste.utils.config import app_env, app_name, app_prefix, id_salt, redis_kwargs, load_config
from cloudpaste.utils.helpers import base_url, get_paste_url, iso_from_ms, require_environment, guarantee_500_response
from cloudpaste.utils.clock import current_time_ms, is_expired
from cloudpaste.utils.id_generator import generate_paste_id
from cloudpaste.utils.logging import initialize_logging


__all__ = [
    'generate_paste_id',
    'app_env',
    'app_name',
    'app_prefix',
    'id_salt',
    'redis_kwargs',
    'load_config',
    'base_url',
    'get_paste_url',
    'iso_from_ms',
    'require_environment',
    'guarantee_500_response',
    'current_time_ms',
    'is_expired',
    'initialize_logging',
]
