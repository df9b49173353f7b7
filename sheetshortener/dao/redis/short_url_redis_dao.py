"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO. It is the
index-capable alternative to ShortURLSheetsDAO: lookups are O(1) hash reads
instead of column scans, and every read-modify-write runs atomically on the
Redis server.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>   HASH  id, url, shortcode, created_at, updated_at, count
    <prefix>:links:index         SET   live short codes (for list())

Behaviour compared to the spreadsheet backend:
    - insert() cannot produce duplicate live short codes;
    - hit() cannot lose increments;
    - update() writes url and updated_at together.
    Deleted records are removed outright; there are no tombstones.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> dao = ShortURLRedisDAO(prefix="sheetshortener:dev")
    >>> dao.insert(ShortURLModel(id='id_1', url='https://example.com/page', shortcode='abc123'))
    <ShortURLRedisDAO>
    >>> dao.hit('abc123')
    'https://example.com/page'
    >>> dao.get('abc123').count
    1
"""

import logging

from beartype import beartype

from sheetshortener.models import ShortURLModel
from sheetshortener.dao.base import ShortURLBaseDAO
from sheetshortener.dao.redis.mixins import RedisClientMixin
from sheetshortener.dao.redis.helpers import handle_redis_connection_error
from sheetshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from sheetshortener.utils.helpers import utc_timestamp


logger = logging.getLogger(__name__)

# KEYS[1] = link key, KEYS[2] = index key
# ARGV    = shortcode, id, url, created_at, updated_at, count
INSERT_SCRIPT = """
if redis.call("EXISTS", KEYS[1]) == 1 then
    return 0
end
redis.call("HSET", KEYS[1], "shortcode", ARGV[1], "id", ARGV[2], "url", ARGV[3],
           "created_at", ARGV[4], "updated_at", ARGV[5], "count", ARGV[6])
redis.call("SADD", KEYS[2], ARGV[1])
return 1
"""

# KEYS[1] = link key; ARGV = url, updated_at
UPDATE_SCRIPT = """
if redis.call("EXISTS", KEYS[1]) == 0 then
    return 0
end
redis.call("HSET", KEYS[1], "url", ARGV[1], "updated_at", ARGV[2])
return 1
"""

# KEYS[1] = link key; ARGV = updated_at
HIT_SCRIPT = """
if redis.call("EXISTS", KEYS[1]) == 0 then
    return false
end
redis.call("HINCRBY", KEYS[1], "count", 1)
redis.call("HSET", KEYS[1], "updated_at", ARGV[1])
return redis.call("HGET", KEYS[1], "url")
"""


def _model_from_hash(fields: dict[str, str]) -> ShortURLModel | None:
    # fmt: off
    return ShortURLModel.from_row([
        fields.get('id', ''),
        fields.get('url', ''),
        fields.get('shortcode', ''),
        fields.get('created_at', ''),
        fields.get('updated_at', ''),
        fields.get('count', '0'),
    ]) if fields else None
    # fmt: on


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Atomically create the record unless the short code is live.
            Raises ShortURLAlreadyExistsError when the short code exists.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Raises ShortURLNotFoundError when the short code doesn't exist.

        exists(shortcode: str, **kwargs) -> bool

        update(shortcode: str, url: str, **kwargs) -> ShortURLRedisDAO:
            Atomically set url and updated_at.
            Raises ShortURLNotFoundError when the short code doesn't exist.

        hit(shortcode: str, **kwargs) -> str:
            Atomically increment count, refresh updated_at and return the url.
            Raises ShortURLNotFoundError when the short code doesn't exist.

        delete(shortcode: str, **kwargs) -> ShortURLRedisDAO:
            Raises ShortURLNotFoundError when the short code doesn't exist.

        list(**kwargs) -> list[ShortURLModel]:
            Every live record, oldest first.

        All methods raise DataStoreError on connectivity issues with Redis.
    """

    def __repr__(self) -> str:
        return f'<ShortURLRedisDAO prefix={self.keys.prefix!r}>'

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL record into Redis

        The existence check and the write run as one server-side script, so two
        concurrent inserts of the same short code cannot both succeed.

        Raises:
            ShortURLAlreadyExistsError:
                If a record with the same shortcode already exists.

        Example:
            >>> dao.insert(ShortURLModel(id='id_1', url='https://example.com', shortcode='abc123'))
            <ShortURLRedisDAO>
        """
        # fmt: off
        created = self.redis.eval(
            INSERT_SCRIPT, 2,
            self.keys.link_key(short_url.shortcode), self.keys.link_index_key(),
            short_url.shortcode, short_url.id, short_url.url,
            short_url.created_at, short_url.updated_at, short_url.count,
        )
        # fmt: on
        if not created:
            logger.info('Short code already in use.', extra={'shortcode': short_url.shortcode})
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL record by shortcode

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
        """
        record = _model_from_hash(self.redis.hgetall(self.keys.link_key(shortcode)))
        if record is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return record

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def update(self, shortcode: str, url: str, **kwargs) -> 'ShortURLRedisDAO':
        """Point a short code at a new destination URL

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
        """
        if not self.redis.eval(UPDATE_SCRIPT, 1, self.keys.link_key(shortcode), url, utc_timestamp()):
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self

    @handle_redis_connection_error
    @beartype
    def hit(self, shortcode: str, **kwargs) -> str:
        """Count a visit and return the destination URL

        Return:
            str:
                destination URL of the short code.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.

        Example:
            >>> dao.hit('abc123')
            'https://example.com'
        """
        url = self.redis.eval(HIT_SCRIPT, 1, self.keys.link_key(shortcode), utc_timestamp())
        if url is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return url

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLRedisDAO':
        """Delete a short URL record, freeing its short code

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.link_key(shortcode))
            pipe.srem(self.keys.link_index_key(), shortcode)
            deleted, _ = pipe.execute()

        if not deleted:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self

    # NOTE: defined last, it shadows the builtin `list` inside the class body
    @handle_redis_connection_error
    @beartype
    def list(self, **kwargs) -> list[ShortURLModel]:
        """Return every live record, oldest first"""
        shortcodes = sorted(self.redis.smembers(self.keys.link_index_key()))
        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
            hashes = pipe.execute()

        records = [record for record in map(_model_from_hash, hashes) if record is not None]
        return sorted(records, key=lambda record: record.created_at)
