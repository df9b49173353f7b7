"""Unit tests for ShortURLService in service.py

The service runs over ShortURLSheetsDAO and an in-memory spreadsheet, so every
operation goes through the real row layout, scans and tombstones.

Test coverage includes:

1. Create / find
   - Ensures create -> find round-trips id, url, shortcode and count = 0.
   - Ensures a second create with the same code raises ShortURLAlreadyExistsError.
   - Ensures codes are generated when none is requested.
   - Ensures numeric-looking codes survive the sheet round trip.

2. Update / resolve / delete
   - Ensures update keeps id, shortcode and createdAt.
   - Ensures n sequential resolves yield count = n.
   - Ensures deleted codes are gone and reusable.
   - Walks through the end-to-end example scenario.

3. Code generation strategies
   - Ensures random, hash and hybrid strategies ask the backend for existence as expected.
   - Ensures exhausted generation raises GenerationExhaustedError.

4. Construction from configuration
   - Ensures sheets and redis configurations build the matching DAO.
   - Ensures unknown strategies, out-of-range code lengths and empty configurations are rejected.
"""

import re
from unittest.mock import MagicMock, patch

import pytest
from freezegun import freeze_time

from sheetshortener.dao.base import ShortURLBaseDAO
from sheetshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from sheetshortener.dao.sheets import ShortURLSheetsDAO
from sheetshortener.exceptions import BadConfigurationError, GenerationExhaustedError
from sheetshortener.service import ShortURLService
from sheetshortener.utils.shortener import ShortcodeStrategy, hash_shortcode


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(sheets):
    return ShortURLSheetsDAO(sheets_client=sheets)


@pytest.fixture
def service(dao):
    return ShortURLService(dao)


@pytest.fixture
def dao_mock():
    _dao = MagicMock(spec=ShortURLBaseDAO)
    _dao.exists.return_value = False
    return _dao


# -------------------------------
# 1. Create / find
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_create_find_round_trip(service):
    """Ensure a created record is found unchanged with count 0."""
    created = service.create_record('https://example.com/a', 'abc123')
    found = service.find_record('abc123')

    assert found.id == created.id
    assert found.url == 'https://example.com/a'
    assert found.shortcode == 'abc123'
    assert found.count == 0
    assert found.created_at == found.updated_at == '2025-10-15T12:00:00.000Z'
    assert re.fullmatch(r'id_[0-9a-f]{32}', found.id)


def test_create_duplicate_code(service):
    """Ensure the second create of the same code conflicts."""
    service.create_record('https://example.com/a', 'abc123')

    with pytest.raises(ShortURLAlreadyExistsError):
        service.create_record('https://example.com/b', 'abc123')
    assert service.resolve_and_increment('abc123') == 'https://example.com/a'


def test_numeric_looking_code_round_trip(service):
    """Ensure an all-digit code with a leading zero is found and resolved as created."""
    created = service.create_record('https://example.com/a', '012345')

    assert service.find_record('012345') == created
    assert service.resolve_and_increment('012345') == 'https://example.com/a'
    with pytest.raises(ShortURLAlreadyExistsError):
        service.create_record('https://example.com/b', '012345')


@pytest.mark.parametrize('desired_code', [None, '', '   '])
def test_create_generates_code(service, desired_code):
    """Ensure a 6-character base62 code is generated when none is requested."""
    record = service.create_record('https://example.com/a', desired_code)

    assert re.fullmatch(r'[A-Za-z0-9]{6}', record.shortcode)
    assert service.find_record(record.shortcode) == record


def test_find_missing(service):
    with pytest.raises(ShortURLNotFoundError):
        service.find_record('nope')


# -------------------------------
# 2. Update / resolve / delete
# -------------------------------


def test_update_preserves_identity(service):
    """Ensure update changes url and updatedAt only."""
    with freeze_time('2025-10-15 12:00:00'):
        created = service.create_record('https://example.com/a', 'abc123')
    with freeze_time('2025-10-16 09:00:00'):
        service.update_url('abc123', 'https://example.com/b')

    updated = service.find_record('abc123')
    assert updated.url == 'https://example.com/b'
    assert updated.updated_at == '2025-10-16T09:00:00.000Z'
    assert (updated.id, updated.shortcode, updated.created_at) == (created.id, created.shortcode, created.created_at)


@pytest.mark.parametrize('visits', [1, 5])
def test_resolve_and_increment_is_monotonic(service, visits):
    service.create_record('https://example.com/a', 'abc123')

    urls = {service.resolve_and_increment('abc123') for _ in range(visits)}

    assert urls == {'https://example.com/a'}
    assert service.find_record('abc123').count == visits


def test_delete_then_reuse(service):
    """Ensure a deleted code is not found and can be created again."""
    first = service.create_record('https://example.com/a', 'abc123')
    service.delete_record('abc123')

    with pytest.raises(ShortURLNotFoundError):
        service.find_record('abc123')

    second = service.create_record('https://example.com/c', 'abc123')
    assert second.id != first.id
    assert service.find_record('abc123').url == 'https://example.com/c'


@pytest.mark.parametrize('operation', ['update_url', 'resolve_and_increment', 'delete_record'])
def test_operations_on_missing_code(service, operation):
    args = ('nope', 'https://example.com') if operation == 'update_url' else ('nope',)
    with pytest.raises(ShortURLNotFoundError):
        getattr(service, operation)(*args)


def test_example_scenario(service):
    """create -> 3 resolves -> update -> resolve -> delete -> find fails."""
    record = service.create_record('https://example.com/a', 'abc123')
    assert record.count == 0

    for _ in range(3):
        assert service.resolve_and_increment('abc123') == 'https://example.com/a'
    assert service.find_record('abc123').count == 3

    service.update_url('abc123', 'https://example.com/b')
    assert service.resolve_and_increment('abc123') == 'https://example.com/b'

    service.delete_record('abc123')
    with pytest.raises(ShortURLNotFoundError):
        service.find_record('abc123')


def test_list_records(service):
    service.create_record('https://example.com/a', 'first')
    service.create_record('https://example.com/b', 'second')
    service.create_record('https://example.com/c', 'third')
    service.delete_record('second')

    assert [record.shortcode for record in service.list_records()] == ['first', 'third']


# -------------------------------
# 3. Code generation strategies
# -------------------------------


def test_random_strategy_checks_existence(dao_mock):
    """Ensure random candidates are checked against the backend, then inserted."""
    dao_mock.exists.side_effect = [True, False]
    service = ShortURLService(dao_mock, code_length=7)

    record = service.create_record('https://example.com/a')

    assert dao_mock.exists.call_count == 2
    assert len(record.shortcode) == 7
    dao_mock.insert.assert_called_once_with(record)


def test_hash_strategy_is_deterministic(dao_mock):
    """Ensure hash codes skip the existence check and depend on the salt."""
    service = ShortURLService(dao_mock, strategy='hash', code_length=8, salt='pepper')

    record = service.create_record('https://example.com/a')

    assert record.shortcode == hash_shortcode('https://example.com/a', length=8, salt='pepper')
    dao_mock.exists.assert_not_called()


def test_hash_strategy_collision_surfaces_as_conflict(service):
    """Ensure a taken hash code is reported by the insert's own check."""
    service.strategy = ShortcodeStrategy.HASH
    service.create_record('https://example.com/a')

    with pytest.raises(ShortURLAlreadyExistsError):
        service.create_record('https://example.com/a')


def test_hybrid_strategy(dao_mock):
    """Ensure hybrid uses the hash code first and falls back to random."""
    service = ShortURLService(dao_mock, strategy=ShortcodeStrategy.HYBRID)
    deterministic = hash_shortcode('https://example.com/a', length=6)

    assert service.create_record('https://example.com/a').shortcode == deterministic

    dao_mock.exists.side_effect = lambda candidate: candidate == deterministic
    assert service.create_record('https://example.com/a').shortcode != deterministic


def test_generation_exhausted(dao_mock):
    dao_mock.exists.return_value = True
    service = ShortURLService(dao_mock, max_attempts=4)

    with pytest.raises(GenerationExhaustedError):
        service.create_record('https://example.com/a')
    assert dao_mock.exists.call_count == 4
    dao_mock.insert.assert_not_called()


def test_unknown_strategy(dao_mock):
    with pytest.raises(BadConfigurationError):
        ShortURLService(dao_mock, strategy='sequential')


# -------------------------------
# 4. Construction from configuration
# -------------------------------


def test_from_config_sheets():
    config = {
        'sheets': {
            'spreadsheet_id': 'sheet-123',
            'sheet_name': 'Links',
            'client_email': 'svc@test.iam.gserviceaccount.com',
            'private_key': 'pem',
        },
        'shortener': {'strategy': ShortcodeStrategy.HYBRID, 'length': 8, 'salt': 'pepper'},
    }

    with patch('sheetshortener.service.ShortURLSheetsDAO', autospec=True) as dao_cls:
        service = ShortURLService.from_config(config)

    dao_cls.assert_called_once_with(
        spreadsheet_id='sheet-123',
        client_email='svc@test.iam.gserviceaccount.com',
        private_key='pem',
        sheet_name='Links',
    )
    assert service.dao is dao_cls.return_value
    assert (service.strategy, service.code_length, service.salt) == (ShortcodeStrategy.HYBRID, 8, 'pepper')


def test_from_config_redis(monkeypatch):
    monkeypatch.setenv('APP_NAME', 'sheetshortener')
    monkeypatch.setenv('APP_ENV', 'test')
    config = {'redis': {'host': 'cache.internal', 'port': 6380, 'db': 2, 'username': None, 'password': None}}

    with patch('sheetshortener.service.ShortURLRedisDAO', autospec=True) as dao_cls:
        service = ShortURLService.from_config(config)

    dao_cls.assert_called_once_with(
        redis_host='cache.internal',
        redis_port=6380,
        redis_db=2,
        redis_username=None,
        redis_password=None,
        prefix='sheetshortener:test',
    )
    assert service.strategy == ShortcodeStrategy.RANDOM
    assert service.code_length == 6


def test_from_config_loads_environment(monkeypatch):
    """Ensure the configuration is loaded from the environment when not given."""
    loaded = {'sheets': {'spreadsheet_id': 'sheet-123', 'client_email': 'svc@test', 'private_key': 'pem'}}

    with (
        patch('sheetshortener.service.load_config', return_value=loaded) as load_config_mock,
        patch('sheetshortener.service.ShortURLSheetsDAO', autospec=True),
    ):
        ShortURLService.from_config()

    load_config_mock.assert_called_once_with(secrets_client=None)


def test_from_config_without_backend():
    with pytest.raises(BadConfigurationError):
        ShortURLService.from_config({'shortener': {}})


@pytest.mark.parametrize('code_length', [2, 31, '6', True])
def test_invalid_code_length(dao_mock, code_length):
    """Ensure the service applies the same length bounds as the configuration."""
    with pytest.raises(BadConfigurationError):
        ShortURLService(dao_mock, code_length=code_length)
