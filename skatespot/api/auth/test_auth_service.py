# skatespot/api/auth/test_auth_service.py
import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import requests
from firebase_admin import auth as firebase_auth
from flask import Flask

from skatespot.api.auth.services import AuthService
from skatespot.api.users.services import UserService
from skatespot.utils.profile_cache import ProfileCache


def _identity_response(status_code, payload):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload).encode('utf-8')
    return response


@pytest.fixture
def auth_service(fake_db):
    app = Flask(__name__)
    app.config['FIREBASE_WEB_API_KEY'] = 'web-api-key'
    service = AuthService()
    service.init_app(app, UserService(profile_cache=ProfileCache()))
    return service


def test_register_creates_profile(fake_db, auth_service, monkeypatch):
    created = {}

    def fake_create_user(**kwargs):
        created.update(kwargs)
        return SimpleNamespace(uid='new-uid')

    monkeypatch.setattr(firebase_auth, 'create_user', fake_create_user)

    uid = auth_service.register('rider@example.com', 'secret1', 'Rider')

    assert uid == 'new-uid'
    assert created['display_name'] == 'Rider'
    stored = fake_db.data('users', 'new-uid')
    assert stored['displayName'] == 'Rider'
    assert stored['email'] == 'rider@example.com'
    assert 'rider' in stored['searchPrefixes']


def test_register_without_username_uses_email_local_part(fake_db, auth_service, monkeypatch):
    monkeypatch.setattr(firebase_auth, 'create_user', lambda **kwargs: SimpleNamespace(uid='u2'))

    auth_service.register('kate@example.com', 'secret1')

    assert fake_db.data('users', 'u2')['displayName'] == 'kate'


def test_register_duplicate_email(auth_service, monkeypatch):
    def fake_create_user(**kwargs):
        raise firebase_auth.EmailAlreadyExistsError('exists', None, None)

    monkeypatch.setattr(firebase_auth, 'create_user', fake_create_user)

    with pytest.raises(ValueError):
        auth_service.register('rider@example.com', 'secret1')


def test_login_creates_missing_profile(fake_db, auth_service, monkeypatch):
    sent = {}

    def fake_post(url, params=None, json=None, timeout=None):
        sent.update(url=url, params=params, json=json)
        return _identity_response(200, {'localId': 'uid-1', 'email': 'rider@example.com', 'displayName': 'Rider'})

    monkeypatch.setattr('skatespot.api.auth.services.requests.post', fake_post)

    assert auth_service.login('rider@example.com', 'secret1') == 'uid-1'
    assert sent['params'] == {'key': 'web-api-key'}
    assert sent['json']['returnSecureToken'] is True
    assert fake_db.data('users', 'uid-1')['displayName'] == 'Rider'


def test_login_with_wrong_password(auth_service, monkeypatch):
    monkeypatch.setattr(
        'skatespot.api.auth.services.requests.post',
        lambda *args, **kwargs: _identity_response(400, {'error': {'message': 'INVALID_PASSWORD'}})
    )

    with pytest.raises(PermissionError):
        auth_service.login('rider@example.com', 'wrong')


def test_login_with_other_identity_error(auth_service, monkeypatch):
    monkeypatch.setattr(
        'skatespot.api.auth.services.requests.post',
        lambda *args, **kwargs: _identity_response(400, {'error': {'message': 'TOO_MANY_ATTEMPTS_TRY_LATER : retry'}})
    )

    with pytest.raises(requests.HTTPError):
        auth_service.login('rider@example.com', 'secret1')


def test_logout_revokes_both_tokens(fake_db, auth_service):
    expires = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())

    auth_service.logout_user('access-jti', expires, 'refresh-jti', expires)

    assert auth_service.is_token_revoked({'jti': 'access-jti'}) is True
    assert auth_service.is_token_revoked({'jti': 'refresh-jti'}) is True
    assert auth_service.is_token_revoked({'jti': 'other-jti'}) is False
    assert fake_db.data('revoked_tokens', 'access-jti')['expires_at'].tzinfo is not None
