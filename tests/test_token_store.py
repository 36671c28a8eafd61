# tests/test_token_store.py
from flask import Response

from resort_web.models import Role, Session, User
from resort_web.token_store import token_store

from .conftest import cookie_value, set_cookies, signed_session


def test_save_then_load_round_trips_role(app):
    with app.test_request_context():
        resp = token_store.save(Response(), Session(token='abc', role='admin', user_id='9'),
                                User(id='9', name='Ana', email='ana@example.com', role='admin'))
    signed = cookie_value(resp, 'auth_token')
    assert signed
    assert cookie_value(resp, 'token') == 'abc'
    assert cookie_value(resp, 'userRole') == 'admin'

    with app.test_request_context(headers={'Cookie': f'auth_token={signed}'}):
        session = token_store.load()
        user = token_store.load_user()
    assert session.token == 'abc'
    assert session.role == Role.ADMIN
    assert session.user_id == '9'
    assert user.name == 'Ana'


def test_save_without_role_drops_role_cookie(app):
    with app.test_request_context():
        resp = token_store.save(Response(), Session(token='abc'))
    assert any(c.startswith('userRole=;') for c in set_cookies(resp))


def test_plain_cookies_never_carry_a_role(app):
    with app.test_request_context(headers={'Cookie': 'token=abc; userRole=admin'}):
        session = token_store.load()
    assert session.token == 'abc'
    assert session.role is None
    assert not session.is_admin


def test_bearer_header_is_a_session_without_role(app):
    with app.test_request_context(headers={'Authorization': 'Bearer xyz'}):
        session = token_store.load()
    assert session.token == 'xyz'
    assert session.role is None


def test_tampered_signed_cookie_is_ignored(app):
    signed = signed_session(app, role='customer')
    header, payload, signature = signed.split('.')
    forged = f"{header}.{payload}.{signature[::-1]}"
    with app.test_request_context(headers={'Cookie': f'auth_token={forged}'}):
        assert token_store.load() is None
        assert token_store.load_user() is None


def test_nothing_stored_means_no_session(app):
    with app.test_request_context():
        assert token_store.load() is None


def test_clear_is_idempotent(app):
    with app.test_request_context():
        resp = token_store.clear(Response())
        resp = token_store.clear(resp)
    cleared = set_cookies(resp)
    for name in ('auth_token', 'token', 'userRole'):
        assert any(c.startswith(f'{name}=;') for c in cleared)


def test_cookie_endpoint_set_does_not_grant_role(client):
    resp = client.post('/api/auth/cookie', json={'action': 'set', 'token': 'abc', 'role': 'admin'})
    assert resp.status_code == 200
    assert resp.get_json() == {'success': True}
    assert cookie_value(resp, 'token') == 'abc'

    resp = client.get('/admin/dashboard')
    assert resp.headers['Location'].endswith('/unauthorized')


def test_cookie_endpoint_set_keeps_matching_signed_session(login_as):
    client = login_as(role='admin', token='tok-admin')
    resp = client.post('/api/auth/cookie', json={'action': 'set', 'token': 'tok-admin'})
    assert cookie_value(resp, 'userRole') == 'admin'


def test_cookie_endpoint_clear(login_as):
    client = login_as()
    resp = client.post('/api/auth/cookie', json={'action': 'clear'})
    assert resp.status_code == 200
    assert any(c.startswith('auth_token=;') for c in set_cookies(resp))


def test_cookie_endpoint_rejects_unknown_action(client):
    resp = client.post('/api/auth/cookie', json={'action': 'steal'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Invalid action'}

    resp = client.post('/api/auth/cookie', json={})
    assert resp.status_code == 400


def test_session_without_profile_has_no_cached_user(app):
    signed = signed_session(app, user_id='4', name=None)
    with app.test_request_context(headers={'Cookie': f'auth_token={signed}'}):
        assert token_store.load().user_id == '4'
        assert token_store.load_user() is None
