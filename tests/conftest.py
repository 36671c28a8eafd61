# tests/conftest.py
import json

import pytest
import requests
from flask_jwt_extended import create_access_token

from resort_web import create_app
from resort_web.api import api
from resort_web.config import TestConfig

BASE_URL = 'http://backend.test/api'


def make_response(status=200, payload=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(payload).encode() if payload is not None else b''
    resp.headers['Content-Type'] = 'application/json'
    return resp


class FakeBackend:
    """Stands in for requests.Session.request; answers by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, status=200, payload=None, raises=None):
        self.routes[(method.upper(), path)] = (status, payload, raises)

    def __call__(self, method, url, **kwargs):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append((method.upper(), path, kwargs))
        status, payload, raises = self.routes.get(
            (method.upper(), path), (404, {'message': 'Not found'}, None))
        if raises is not None:
            raise raises
        return make_response(status, payload)

    def called(self, method, path):
        return [c for c in self.calls if c[0] == method.upper() and c[1] == path]


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(api.session, 'request', fake)
    return fake


def signed_session(app, token='tok-123', role='customer', user_id='1', name='Test User'):
    claims = {'api_token': token, 'role': role, 'user_id': user_id}
    if name is not None:
        claims.update(name=name, email='test@example.com')
    with app.test_request_context():
        return create_access_token(identity=user_id, additional_claims=claims)


@pytest.fixture
def login_as(app, client):
    def _login(role='customer', token='tok-123', user_id='1'):
        client.set_cookie('auth_token', signed_session(app, token, role, user_id))
        return client
    return _login


def set_cookies(resp):
    return resp.headers.getlist('Set-Cookie')


def cookie_value(resp, name):
    for header in set_cookies(resp):
        if header.startswith(f'{name}='):
            return header.split(';', 1)[0].split('=', 1)[1]
    return None


ACCOMMODATION = {
    'id': 7,
    'name': 'Nipa Hut',
    'type': 'cottage',
    'description': 'Open-air cottage by the pool',
    'capacity_min': 2,
    'capacity_max': 4,
    'duration_hours': 22,
    'price': 1500,
    'available_units': 3,
    'image_path': 'nipa.jpg',
    'is_active': True,
}


def booking_record(booking_id=1, status='pending', price=1500, check_in='2024-05-10', **extra):
    record = {
        'id': booking_id,
        'user_id': 1,
        'accommodation_id': 7,
        'quantity': 1,
        'total_price': price,
        'payment_method': 'gcash',
        'status': status,
        'check_in_date': check_in,
        'created_at': '2024-05-01T09:30:00',
        'accommodation': {'id': 7, 'name': 'Nipa Hut', 'type': 'cottage'},
        'user': {'id': 1, 'name': 'Juan Cruz', 'email': 'juan@example.com'},
    }
    record.update(extra)
    return record
