"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

Test coverage includes:

1. Link key generation
   - Ensures link_key() generates correct Redis keys for a given shortcode.

2. Index key generation
   - Ensures link_index_key() generates the live short code set key.

3. Prefix behavior
   - Confirms keys are not prefixed when no prefix is provided.
   - Confirms keys are correctly prefixed when a valid prefix is provided.

4. Invalid prefix types
   - Ensures improper prefix types raise TypeError.
"""

import pytest

from sheetshortener.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Link key generation
# -------------------------------

@pytest.mark.parametrize(
    "shortcode, expected",
    [
        ("abc123", "links:abc123"),
        ("XyZ-789", "links:XyZ-789"),
    ],
)
def test_link_key(shortcode, expected):
    """Ensure link_key() generates valid Redis keys."""
    assert RedisKeySchema().link_key(shortcode) == expected


# -------------------------------
# 2. Index key generation
# -------------------------------

def test_link_index_key():
    """Ensure link_index_key() names the set of live short codes."""
    assert RedisKeySchema().link_index_key() == "links:index"


# -------------------------------
# 3. Prefix behavior
# -------------------------------

@pytest.mark.parametrize(
    "prefix, expected_link_key, expected_index_key",
    [
        ("sheetshortener:test", "sheetshortener:test:links:abc123", "sheetshortener:test:links:index"),
        ("secret", "secret:links:abc123", "secret:links:index"),
        (None, "links:abc123", "links:index"),
    ],
)
def test_key_prefixing(prefix, expected_link_key, expected_index_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.link_key("abc123") == expected_link_key
    assert keys.link_index_key() == expected_index_key


# -------------------------------
# 4. Invalid prefix types
# -------------------------------

@pytest.mark.parametrize("prefix", [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
