# tests/test_auth.py
import requests

from resort_web.api.auth import CONNECT_ERROR_MESSAGE, redirect_path
from resort_web.models import User

from .conftest import cookie_value, set_cookies


def _login(client, email='ana@example.com', password='secret'):
    return client.post('/login', data={'email': email, 'password': password})


def test_admin_login_lands_on_dashboard(client, backend):
    backend.on('POST', '/login', payload={
        'access_token': 'tok-admin',
        'data': {'id': 9, 'name': 'Ana', 'email': 'ana@example.com', 'role': 'admin'},
    })
    resp = _login(client)
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/admin/dashboard')
    assert cookie_value(resp, 'token') == 'tok-admin'
    assert cookie_value(resp, 'userRole') == 'admin'
    assert cookie_value(resp, 'auth_token')


def test_customer_login_lands_on_home(client, backend):
    backend.on('POST', '/login', payload={
        'token': 'tok-cust',
        'user': {'id': 3, 'firstname': 'Juan', 'lastname': 'Cruz', 'role': 'customer'},
    })
    resp = _login(client)
    assert resp.headers['Location'].endswith('/home')

    # the new session opens protected pages
    backend.on('GET', '/bookings', payload={'data': []})
    assert client.get('/transaction').status_code == 200


def test_login_shows_backend_message(client, backend):
    backend.on('POST', '/login', status=401, payload={'message': 'Invalid credentials'})
    resp = _login(client)
    assert resp.status_code == 400
    assert b'Invalid credentials' in resp.data
    assert cookie_value(resp, 'auth_token') is None


def test_login_network_failure(client, backend):
    backend.on('POST', '/login', raises=requests.ConnectionError('refused'))
    resp = _login(client)
    assert resp.status_code == 400
    assert CONNECT_ERROR_MESSAGE.encode() in resp.data
    assert len(backend.called('POST', '/login')) == 1


def test_login_without_token_fails(client, backend):
    backend.on('POST', '/login', payload={'data': {'id': 1, 'role': 'customer'}})
    resp = _login(client)
    assert resp.status_code == 400
    assert b'No token received from server' in resp.data


def test_login_validates_before_calling_backend(client, backend):
    resp = _login(client, email='', password='')
    assert resp.status_code == 400
    assert b'Email is required' in resp.data
    assert backend.calls == []


def test_register_forces_customer_role(client, backend):
    backend.on('POST', '/register', status=201, payload={
        'access_token': 'tok-new',
        'data': {'id': 4, 'firstname': 'Lea', 'lastname': 'Reyes', 'role': 'customer'},
    })
    resp = client.post('/register', data={
        'firstname': 'Lea', 'lastname': 'Reyes', 'email': 'lea@example.com',
        'password': 'pw12345', 'password_confirmation': 'pw12345',
        'contact_number': '0917-123-4567', 'address': 'Cebu', 'role': 'admin',
    })
    assert resp.headers['Location'].endswith('/home')
    body = backend.called('POST', '/register')[0][2]['json']
    assert body['role'] == 'customer'
    assert body['contact_number'] == '09171234567'


def test_register_password_mismatch(client, backend):
    resp = client.post('/register', data={
        'firstname': 'Lea', 'lastname': 'Reyes', 'email': 'lea@example.com',
        'password': 'one', 'password_confirmation': 'two',
    })
    assert resp.status_code == 400
    assert b'Passwords do not match' in resp.data
    assert backend.calls == []


def test_logout_twice(login_as, backend):
    backend.on('POST', '/logout', payload={'message': 'Logged out'})
    client = login_as()

    resp = client.post('/logout')
    assert resp.status_code == 302
    assert len(backend.called('POST', '/logout')) == 1
    cleared = set_cookies(resp)
    assert any(c.startswith('auth_token=;') for c in cleared)
    assert any(c.startswith('token=;') for c in cleared)

    resp = client.post('/logout')
    assert resp.status_code == 302
    assert len(backend.called('POST', '/logout')) == 1


def test_logout_still_clears_when_backend_fails(login_as, backend):
    backend.on('POST', '/logout', status=500, payload={})
    client = login_as()
    resp = client.post('/logout')
    assert resp.status_code == 302
    assert any(c.startswith('auth_token=;') for c in set_cookies(resp))


def test_redirect_path():
    assert redirect_path(None) == '/login'
    assert redirect_path(User(id='1', role='admin')) == '/admin/dashboard'
    assert redirect_path(User(id='1', role='customer')) == '/home'
    assert redirect_path(User(id='1')) == '/home'


def test_register_without_token_goes_to_login(client, backend):
    backend.on('POST', '/register', status=201, payload={
        'message': 'Registered',
        'data': {'id': 4, 'firstname': 'Lea', 'lastname': 'Reyes', 'role': 'customer'},
    })
    resp = client.post('/register', data={
        'firstname': 'Lea', 'lastname': 'Reyes', 'email': 'lea@example.com',
        'password': 'pw12345', 'password_confirmation': 'pw12345',
    })
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/login')
    assert cookie_value(resp, 'auth_token') is None
