"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

Test coverage includes:

1. Paste key generation
   - Ensures paste_key() generates `paste:<id>` keys.

2. Counter key generation

3. Prefix behavior
   - Confirms keys are not prefixed when no prefix is provided.
   - Confirms keys are correctly prefixed when a valid prefix is provided.

4. Invalid prefix types
   - Ensures improper prefix types raise TypeError.
"""

import pytest

from cloudpaste.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Paste key generation
# -------------------------------


@pytest.mark.parametrize(
    'paste_id, expected',
    [
        ('abc1234567', 'paste:abc1234567'),
        ('XyZ789XyZ7', 'paste:XyZ789XyZ7'),
    ],
)
def test_paste_key(paste_id, expected):
    """Ensure paste_key() generates valid Redis keys."""
    assert RedisKeySchema().paste_key(paste_id) == expected


# -------------------------------
# 2. Counter key generation
# -------------------------------


def test_counter_key():
    """Ensure the counter key cannot clash with a paste key."""
    keys = RedisKeySchema()
    assert keys.counter_key() == 'pastes:counter'
    assert not keys.counter_key().startswith('paste:')


# -------------------------------
# 3. Prefix behavior
# -------------------------------


@pytest.mark.parametrize(
    'prefix, expected_paste_key, expected_counter_key',
    [
        ('cloudpaste:prod', 'cloudpaste:prod:paste:abc1234567', 'cloudpaste:prod:pastes:counter'),
        ('secret', 'secret:paste:abc1234567', 'secret:pastes:counter'),
        (None, 'paste:abc1234567', 'pastes:counter'),
    ],
)
def test_key_prefixing(prefix, expected_paste_key, expected_counter_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.paste_key('abc1234567') == expected_paste_key
    assert keys.counter_key() == expected_counter_key


# -------------------------------
# 4. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
