import pytest
from werkzeug.security import generate_password_hash

import routes.auth as r_auth
from domain.models.user import User
from middleware.auth import login_required
from repositories.users_repository import UserRepository


@pytest.fixture
def app(app):
    @app.route("/private")
    @login_required
    def private():
        return "private"
    return app


def _create_user(store, username="user", password="pass1234"):
    UserRepository(store.db()).create(
        User(username=username, password_hash=generate_password_hash(password))
    )


def test_protected_route_requires_login(client):
    resp = client.get('/private')
    assert resp.status_code == 302
    assert '/users/login' in resp.headers['Location']
    assert 'next=' in resp.headers['Location']
    assert 'private' in resp.headers['Location']


def test_login_success_allows_access(client, store):
    _create_user(store)
    resp = client.post('/users/login', data={'username': 'user', 'password': 'pass1234'})
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/')
    resp2 = client.get('/private')
    assert resp2.status_code == 200


def test_login_failure(client, store):
    _create_user(store)
    resp = client.post('/users/login', data={'username': 'user', 'password': 'wrong'})
    assert resp.status_code == 200
    assert b'Login' in resp.data
    assert b'Invalid username or password.' in resp.data


def test_login_respects_next_on_success(client, monkeypatch):
    monkeypatch.setattr(r_auth, 'authenticate', lambda repo, u, p: {'username': u})
    resp = client.post('/users/login?next=/private', data={'username': 'user', 'password': 'pass'})
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/private')


def test_login_ignores_external_next(client, monkeypatch):
    monkeypatch.setattr(r_auth, 'authenticate', lambda repo, u, p: {'username': u})
    resp = client.post('/users/login?next=http://evil.com', data={'username': 'user', 'password': 'pass'})
    assert resp.status_code == 302
    # Should redirect to home since external next is unsafe
    assert resp.headers['Location'].endswith('/')
    assert 'evil.com' not in resp.headers['Location']


def test_logout_clears_session(auth_client):
    assert auth_client.get('/private').status_code == 200
    resp = auth_client.get('/users/logout')
    assert resp.status_code == 302
    assert auth_client.get('/private').status_code == 302


def test_login_disabled_bypasses_check(app, client):
    app.config['LOGIN_DISABLED'] = True
    assert client.get('/private').status_code == 200


def test_register_creates_account(client, store):
    resp = client.post('/users/register', data={
        'username': 'newbie',
        'email': 'newbie@example.com',
        'password': 'secret123',
        'confirm_password': 'secret123',
    })
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/users/login')
    doc = store.database['users'].docs[0]
    assert doc['username'] == 'newbie'
    assert doc['password_hash'] != 'secret123'


def test_register_rejects_mismatch_and_duplicates(client, store):
    _create_user(store, username='taken')
    resp = client.post('/users/register', data={
        'username': 'other', 'password': 'secret123', 'confirm_password': 'different',
    })
    assert b'Passwords do not match.' in resp.data

    resp = client.post('/users/register', data={
        'username': 'taken', 'password': 'secret123', 'confirm_password': 'secret123',
    })
    assert b'That username is already taken.' in resp.data
    assert len(store.database['users'].docs) == 1
