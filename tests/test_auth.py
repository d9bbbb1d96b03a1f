"""
Tests for authentication.

Tests:
- Registration and its validation failures
- Login/logout via the session
- OAuth login through a stubbed provider client
"""

import pytest

from app import db
from app.errors import UpstreamFailure, ValidationFailure
from app.models.user import User
from app.routes import auth as auth_routes
from app.services.accounts import authenticate, get_or_create_oauth_account, register_account


class TestRegistration:

    def test_register_creates_account(self, client, app):
        response = client.post('/auth/register', data={
            'username': 'alice', 'email': 'Alice@Example.com', 'password': 'pw123',
        })

        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']
        with app.app_context():
            user = User.query.filter_by(username='alice').one()
            assert user.email == 'alice@example.com'
            assert user.password_hash != 'pw123'
            assert user.check_password('pw123')
            assert user.high_score == 0

    def test_duplicate_email(self, client, app, make_user):
        make_user('alice')

        response = client.post('/auth/register', data={
            'username': 'other', 'email': 'alice@example.com', 'password': 'pw',
        })

        assert response.status_code == 400
        assert 'Email is already registered' in response.get_data(as_text=True)
        with app.app_context():
            assert User.query.count() == 1

    def test_duplicate_username(self, client, app, make_user):
        make_user('alice')

        response = client.post('/auth/register', data={
            'username': 'alice', 'email': 'new@example.com', 'password': 'pw',
        })

        assert response.status_code == 400
        with app.app_context():
            assert User.query.count() == 1

    @pytest.mark.parametrize('username, email, password', [
        ('', 'a@example.com', 'pw'),
        ('alice', 'not-an-email', 'pw'),
        ('alice', 'a@example.com', ''),
    ])
    def test_invalid_fields(self, app_ctx, username, email, password):
        with pytest.raises(ValidationFailure):
            register_account(username, email, password)


class TestLogin:

    def test_login_and_logout(self, client, make_user, login):
        make_user('alice')

        response = login('alice@example.com')
        assert response.status_code == 302
        assert client.get('/api/game-data').status_code == 200

        client.get('/auth/logout')
        assert client.get('/api/game-data').status_code == 302

    def test_wrong_password(self, client, make_user, login):
        make_user('alice')

        response = login('alice@example.com', 'nope')

        assert response.status_code == 200
        assert client.get('/account').status_code == 302

    def test_authenticate(self, app, make_user):
        make_user('alice', password='pw')

        with app.app_context():
            assert authenticate('ALICE@example.com', 'pw').username == 'alice'
            assert authenticate('alice@example.com', 'bad') is None
            assert authenticate('', 'pw') is None

    def test_oauth_only_account_cannot_use_password(self, app):
        with app.app_context():
            db.session.add(User(username='oauthy', email='o@example.com', oauth_provider='google', oauth_subject='1'))
            db.session.commit()
            assert authenticate('o@example.com', '') is None
            assert authenticate('o@example.com', 'anything') is None

    def test_safe_next_redirect(self, client, make_user):
        make_user('alice')

        response = client.post('/auth/login?next=/game', data={'email': 'alice@example.com', 'password': 'secret'})
        assert response.headers['Location'].endswith('/game')

    def test_unsafe_next_redirect(self, client, make_user):
        make_user('alice')

        response = client.post('/auth/login?next=https://evil.example/', data={
            'email': 'alice@example.com', 'password': 'secret',
        })
        assert 'evil.example' not in response.headers['Location']


class FakeOAuthClient:
    """Stands in for the Authlib client of the identity provider."""

    def __init__(self, userinfo=None, error=None):
        self.userinfo_data = userinfo
        self.error = error

    def authorize_redirect(self, redirect_uri):
        from flask import redirect
        return redirect(f'https://idp.example/authorize?redirect_uri={redirect_uri}')

    def authorize_access_token(self):
        if self.error:
            raise self.error
        return {'access_token': 't', 'userinfo': self.userinfo_data}

    def userinfo(self, token=None):
        return self.userinfo_data


class TestOAuth:

    def test_disabled_without_credentials(self, client):
        response = client.get('/auth/oauth/login')

        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

    def test_start_redirects_to_provider(self, client, monkeypatch):
        monkeypatch.setattr(auth_routes, '_oauth_client', lambda: FakeOAuthClient())

        response = client.get('/auth/oauth/login')

        assert response.status_code == 302
        assert response.headers['Location'].startswith('https://idp.example/authorize')
        assert 'oauth%2Fcallback' in response.headers['Location'] or 'oauth/callback' in response.headers['Location']

    def test_callback_creates_account_and_session(self, client, app, monkeypatch):
        fake = FakeOAuthClient(userinfo={'sub': 'g-1', 'email': 'Zoe@Example.com', 'name': 'Zoe Q'})
        monkeypatch.setattr(auth_routes, '_oauth_client', lambda: fake)

        response = client.get('/auth/oauth/callback?code=abc&state=xyz')

        assert response.status_code == 302
        assert client.get('/api/game-data').status_code == 200
        with app.app_context():
            user = User.query.filter_by(email='zoe@example.com').one()
            assert user.oauth_subject == 'g-1'
            assert user.username == 'ZoeQ'
            assert user.password_hash is None

    def test_callback_failure_creates_no_session(self, client, app, monkeypatch):
        fake = FakeOAuthClient(error=RuntimeError('token endpoint unreachable'))
        monkeypatch.setattr(auth_routes, '_oauth_client', lambda: fake)

        response = client.get('/auth/oauth/callback?code=abc')

        assert response.status_code == UpstreamFailure.status_code
        assert client.get('/api/game-data').status_code == 302
        with app.app_context():
            assert User.query.count() == 0

    def test_links_existing_email(self, app, make_user):
        user_id = make_user('alice')

        with app.app_context():
            user = get_or_create_oauth_account('google', {'sub': '42', 'email': 'alice@example.com'})
            assert user.id == user_id
            assert user.oauth_subject == '42'

            again = get_or_create_oauth_account('google', {'sub': '42', 'email': 'changed@example.com'})
            assert again.id == user_id

    def test_unique_username(self, app, make_user):
        make_user('alice', email='first@example.com')

        with app.app_context():
            user = get_or_create_oauth_account('google', {'sub': '7', 'email': 'alice@other.com', 'name': 'alice'})
            assert user.username == 'alice2'

    def test_incomplete_profile(self, app_ctx):
        with pytest.raises(UpstreamFailure):
            get_or_create_oauth_account('google', {'email': 'x@example.com'})
