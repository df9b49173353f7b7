"""Redis connection mixin for the index-capable link store.

The Redis backend mirrors the spreadsheet store's call surface, but every
record is a hash addressed directly by its short code. The mixin owns the
client and the key namespace; the DAO owns the scripts.

Example:
    >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    ...     pass
    ...
    >>> dao = ShortURLRedisDAO(redis_host='cache.internal', prefix='sheetshortener:prod')
    >>> dao.keys.link_key('abc123')
    'sheetshortener:prod:links:abc123'
"""

import logging
from typing import Optional

import redis

from sheetshortener.dao.redis.redis_key_schema import RedisKeySchema
from sheetshortener.dao.redis.helpers import describe_connection
from sheetshortener.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Owns `self.redis` (str-decoding client) and `self.keys` (link key names).

    The server is pinged once on construction so a misconfigured host fails
    at start-up instead of on the first redirect.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        socket_timeout: Optional[float] = 5.0,
    ):
        """
        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, used only when `redis_client` is None.
                Port and db may come straight from the environment as strings.

            redis_client (Optional[redis.Redis]):
                Ready client to use instead, e.g. a shared connection pool or a mock.

            prefix (Optional[str]):
                Key namespace, usually '<app>:<env>'.

            socket_timeout (Optional[float]):
                Seconds before a Redis command gives up. Timeouts surface as DataStoreError.

        Raises:
            DataStoreError: if the server does not answer PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                decode_responses=True,
                socket_timeout=socket_timeout,
            )
        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server. Returns False instead of raising when `raise_error` is False."""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            where = describe_connection(self.redis)
            logger.warning('Redis healthcheck failed.', extra={'redis': where, 'error': str(e)})
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {where}. Check the provided configuration parameters.") from e
        return True
