from cloudpaste.dao.redis.redis_key_schema import RedisKeySchema
from cloudpaste.dao.redis.mixins import RedisClientMixin
from cloudpaste.dao.redis.paste_redis_dao import PasteRedisDAO
from cloudpaste.dao.redis.helpers import shared_redis_client


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'PasteRedisDAO',
    'shared_redis_client',
]
