import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from cloudpaste.types import LambdaEvent, LambdaContext, LambdaConfiguration
from cloudpaste.lambdas.create_paste import app
from cloudpaste.dao.exceptions import DataStoreError
from cloudpaste.exceptions import MissingEnvironmentVariableError
from cloudpaste.models import PasteModel
from cloudpaste.utils.id_generator import generate_paste_id


def create_event(body) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/pastes',
        'httpMethod': 'POST',
        'path': '/pastes',
        'headers': {'Content-Type': 'application/json'},
        'requestContext': {'domainName': 'paste.example.com', 'stage': 'test'},
        'body': body if body is None or isinstance(body, str) else json.dumps(body),
    })


class TestCreatePasteHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'create_paste'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, context: LambdaContext, config: LambdaConfiguration, memory_dao) -> None:
        # Patch Lambda dependencies
        self.redis_client = MagicMock()
        self.dao_factory = MagicMock(return_value=memory_dao)
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'shared_redis_client', lambda **kw: self.redis_client)
        monkeypatch.setattr(app, 'PasteRedisDAO', self.dao_factory)

        self.context = context
        self.dao = memory_dao

    @freeze_time('2025-10-15')
    def test_lambda_handler(self) -> None:
        response = app.lambda_handler(create_event({'content': 'hello', 'ttl_seconds': 60, 'max_views': 3}), self.context)
        body = json.loads(response['body'])

        expected_id = generate_paste_id(1, salt='default_salt')
        assert response['statusCode'] == 201
        assert response['headers']['Content-Type'] == 'application/json'
        assert body == {'id': expected_id, 'url': f'https://paste.example.com/p/{expected_id}'}

        paste = self.dao.pastes[expected_id]
        assert paste.content == 'hello'
        assert paste.created_at == 1_760_486_400_000
        assert paste.expires_at == 1_760_486_400_000 + 60_000
        assert paste.max_views == paste.remaining_views == 3
        assert self.dao.ttls[expected_id] == 60

        self.dao_factory.assert_called_once_with(redis_client=self.redis_client, prefix=None)

    def test_lambda_handler_without_limits(self) -> None:
        response = app.lambda_handler(create_event({'content': 'forever', 'ttl_seconds': None, 'max_views': None}), self.context)
        paste_id = json.loads(response['body'])['id']

        assert response['statusCode'] == 201
        paste = self.dao.pastes[paste_id]
        assert paste.expires_at is None
        assert paste.remaining_views is None
        assert self.dao.ttls[paste_id] is None

    def test_lambda_handler_issues_unique_ids(self) -> None:
        ids = {json.loads(app.lambda_handler(create_event({'content': 'x'}), self.context)['body'])['id'] for _ in range(5)}
        assert len(ids) == 5
        assert self.dao.counter == 5

    def test_lambda_handler_uses_configured_salt_and_base_url(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv('ID_SALT', 'pepper')
        monkeypatch.setenv('BASE_URL', 'https://p.example.org/')
        monkeypatch.setenv('APP_NAME', 'cloudpaste')
        monkeypatch.setenv('APP_ENV', 'dev')

        response = app.lambda_handler(create_event({'content': 'hello'}), self.context)
        body = json.loads(response['body'])

        expected_id = generate_paste_id(1, salt='pepper')
        assert body == {'id': expected_id, 'url': f'https://p.example.org/p/{expected_id}'}
        self.dao_factory.assert_called_once_with(redis_client=self.redis_client, prefix='cloudpaste:dev')

    def test_lambda_handler_with_test_clock(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv('TEST_MODE', '1')
        event = create_event({'content': 'hello', 'ttl_seconds': 2})
        event['headers']['x-test-now-ms'] = '1000'

        response = app.lambda_handler(event, self.context)
        paste = self.dao.pastes[json.loads(response['body'])['id']]

        assert paste.created_at == 1_000
        assert paste.expires_at == 3_000

    @pytest.mark.parametrize(
        'body, error_code, message',
        [
            ('{not json', 'INVALID_JSON', None),
            ('[1, 2]', 'INVALID_BODY', None),
            (None, 'INVALID_CONTENT', 'content is required and must be a non-empty string'),
            ({'content': '   '}, 'INVALID_CONTENT', 'content is required and must be a non-empty string'),
            ({'content': 42}, 'INVALID_CONTENT', 'content is required and must be a non-empty string'),
            ({'content': 'x', 'ttl_seconds': 0}, 'INVALID_TTL', 'ttl_seconds must be an integer >= 1'),
            ({'content': 'x', 'ttl_seconds': 1.5}, 'INVALID_TTL', 'ttl_seconds must be an integer >= 1'),
            ({'content': 'x', 'max_views': -1}, 'INVALID_MAX_VIEWS', 'max_views must be an integer >= 1'),
            ({'content': 'x', 'max_views': True}, 'INVALID_MAX_VIEWS', 'max_views must be an integer >= 1'),
            ({'content': 'x', 'max_views': '3'}, 'INVALID_MAX_VIEWS', 'max_views must be an integer >= 1'),
        ],
    )
    def test_lambda_handler_with_invalid_request(self, body, error_code: str, message: str | None) -> None:
        response = app.lambda_handler(create_event(body), self.context)
        response_body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert response_body['errorCode'] == error_code
        if message is not None:
            assert response_body['error'] == message
        assert self.dao.pastes == {}
        self.dao_factory.assert_not_called()

    def test_lambda_handler_with_unavailable_store(self) -> None:
        self.dao_factory.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        response = app.lambda_handler(create_event({'content': 'hello'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 503
        assert response['headers']['Retry-After'] == '1'
        assert body['errorCode'] == 'STORE_UNAVAILABLE'

    def test_lambda_handler_with_id_collision(self) -> None:
        taken = generate_paste_id(1, salt='default_salt')
        self.dao.pastes[taken] = PasteModel(paste_id=taken, content='older', created_at=0)

        response = app.lambda_handler(create_event({'content': 'hello'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'PASTE_ID_COLLISION'
        assert self.dao.pastes[taken].content == 'older'

    def test_lambda_handler_with_missing_configuration(self, monkeypatch: MonkeyPatch) -> None:
        def missing_config(*args, **kwargs):
            raise MissingEnvironmentVariableError("Missing required environment variables: 'APPCONFIG_APP_ID'")

        monkeypatch.setattr(app, 'load_config', missing_config)

        response = app.lambda_handler(create_event({'content': 'hello'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['error'] == 'Internal server error'
        self.dao_factory.assert_not_called()

    def test_lambda_handler_with_unexpected_error(self) -> None:
        self.dao_factory.side_effect = RuntimeError('boom')

        response = app.lambda_handler(create_event({'content': 'hello'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'error': 'Internal server error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}
