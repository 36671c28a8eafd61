# api/client.py
import logging

import requests
from flask import g, has_app_context

from ..errors import (
    ApiError, AuthenticationError, AuthorizationError, NetworkError,
    NotFoundError, RequestTimeout, ServerError,
)
from ..logs import mask_token

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'application/json',
}

NETWORK_ERROR_MESSAGE = 'Network error. Please check your connection to the server.'
TIMEOUT_MESSAGE = 'Request timed out. Please check your network connection.'
SESSION_EXPIRED_MESSAGE = 'Your session has expired. Please login again.'
FORBIDDEN_MESSAGE = 'You do not have permission to access this resource.'


def backend_message(payload):
    if isinstance(payload, dict):
        return payload.get('message') or payload.get('error')
    return None


def unwrap(payload, default=None):
    """Backend responses wrap records in a ``data`` envelope."""
    if isinstance(payload, dict) and 'data' in payload:
        data = payload['data']
        return default if data is None else data
    return default


class ApiClient:
    """Thin wrapper around requests for the resort backend API.

    Attaches the current session's bearer token and role, applies a fixed
    timeout, and turns failures into ApiError subclasses. No retries.
    """

    def __init__(self, base_url=None, timeout=10, session=None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def init_app(self, app):
        self.base_url = app.config['API_BASE_URL'].rstrip('/')
        self.timeout = app.config['API_TIMEOUT']
        app.extensions['resort_api'] = self
        logger.info("Resort API URL: %s", self.base_url)

    def auth_headers(self):
        if not has_app_context():
            return {}
        headers = dict(g.get('forward_headers') or {})
        session = g.get('session')
        if session is not None:
            headers['Authorization'] = f"Bearer {session.token}"
            if session.role:
                headers['X-User-Role'] = session.role.value
            else:
                headers.pop('X-User-Role', None)
        elif 'session' in g:
            # logged out during this request
            headers.pop('Authorization', None)
            headers.pop('X-User-Role', None)
        return headers

    def request(self, method, path, params=None, json=None, data=None, files=None, headers=None):
        url = f"{self.base_url}{path}"
        request_headers = self.auth_headers()
        if headers:
            request_headers.update(headers)

        logger.debug("API Request: %s %s auth=%s", method.upper(), url,
                     mask_token(request_headers.get('Authorization')))
        try:
            resp = self.session.request(
                method, url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=request_headers,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.Timeout as e:
            logger.error("API timeout: %s %s (%s)", method.upper(), path, e)
            raise RequestTimeout(TIMEOUT_MESSAGE, endpoint=path) from e
        except requests.RequestException as e:
            logger.error("API network error: %s %s (%s)", method.upper(), path, e)
            raise NetworkError(NETWORK_ERROR_MESSAGE, endpoint=path) from e

        payload = self._payload(resp)
        if resp.status_code < 400:
            logger.debug("API Response success: %s %s", resp.status_code, path)
            return payload

        logger.error("API Response error: status=%s url=%s message=%s",
                     resp.status_code, path, backend_message(payload))
        raise self._classify(resp.status_code, path, payload)

    @staticmethod
    def _payload(resp):
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    @staticmethod
    def _classify(status, path, payload):
        message = backend_message(payload)
        if status == 401:
            return AuthenticationError(message or SESSION_EXPIRED_MESSAGE, endpoint=path, payload=payload)
        if status == 403:
            return AuthorizationError(message or FORBIDDEN_MESSAGE, endpoint=path, payload=payload)
        if status == 404:
            return NotFoundError(message or 'Resource not found.', endpoint=path, payload=payload)
        if status >= 500:
            return ServerError(
                f"Server error ({status}) occurred for {path}. Please try again later or contact support.",
                status_code=status, endpoint=path, payload=payload,
            )
        return ApiError(message or f"Request failed with status code {status}",
                        status_code=status, endpoint=path, payload=payload)

    def get(self, path, **kwargs):
        return self.request('GET', path, **kwargs)

    def post(self, path, **kwargs):
        return self.request('POST', path, **kwargs)

    def put(self, path, **kwargs):
        return self.request('PUT', path, **kwargs)

    def patch(self, path, **kwargs):
        return self.request('PATCH', path, **kwargs)

    def delete(self, path, **kwargs):
        return self.request('DELETE', path, **kwargs)


api = ApiClient()
