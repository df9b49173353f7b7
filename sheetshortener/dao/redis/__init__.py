from sheetshortener.dao.redis.redis_key_schema import RedisKeySchema
from sheetshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from sheetshortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'ShortURLRedisDAO',
    'RedisClientMixin',
]
