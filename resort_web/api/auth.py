# api/auth.py
import logging
from typing import NamedTuple, Optional

from flask import g

from ..errors import ApiError, NetworkError
from ..forms import LoginForm, RegisterForm, validate_form
from ..guard import ADMIN_LANDING_PATH, HOME_PATH, LOGIN_PATH
from ..models import Role, Session, User
from ..token_store import current_session, token_store
from .client import api, backend_message, unwrap

logger = logging.getLogger(__name__)

CONNECT_ERROR_MESSAGE = ('Could not connect to the server. '
                         'Please check your internet connection and try again.')


class AuthResult(NamedTuple):
    user: Optional[User]
    session: Optional[Session]
    redirect_to: str


def redirect_path(user):
    if user is None:
        return LOGIN_PATH
    return ADMIN_LANDING_PATH if user.role == Role.ADMIN else HOME_PATH


def _auth_failure(error, fallback):
    if isinstance(error, NetworkError):
        return ApiError(CONNECT_ERROR_MESSAGE, endpoint=error.endpoint)
    message = backend_message(error.payload) or fallback
    return ApiError(message, status_code=error.status_code, endpoint=error.endpoint, payload=error.payload)


def _user_from(payload):
    data = payload.get('data') or payload.get('user')
    if not isinstance(data, dict) or 'id' not in data:
        return None
    return User.from_api(data)


class AuthGateway:
    """Exchanges credentials for a backend token and a role.

    Failed logins raise a plain ApiError carrying the backend's message, so
    the form can show it and stay editable. Nothing is retried.
    """

    def __init__(self, client=None, store=None):
        self.client = client or api
        self.store = store or token_store

    def login(self, email, password):
        form = validate_form(LoginForm, {'email': email, 'password': password})
        logger.info("Logging in with email: %s", form.email)
        try:
            payload = self.client.post('/login', json={'email': form.email, 'password': form.password})
        except ApiError as e:
            logger.error("Login failed for %s: %s", form.email, e.message)
            raise _auth_failure(e, 'Login failed') from e

        token = payload.get('access_token') or payload.get('token')
        if not token:
            raise ApiError('No token received from server', endpoint='/login')
        user = _user_from(payload)
        session = Session(token=token, role=user.role if user else None, user_id=user.id if user else None)
        g.session = session
        return AuthResult(user, session, redirect_path(user))

    def register(self, **fields):
        form = validate_form(RegisterForm, fields)
        logger.info("Registering user with email: %s", form.email)
        try:
            payload = self.client.post('/register', json=form.payload())
        except ApiError as e:
            logger.error("Registration failed for %s: %s", form.email, e.message)
            raise _auth_failure(e, 'Registration failed') from e

        user = _user_from(payload)
        token = payload.get('access_token') or payload.get('token')
        session = None
        if token:
            session = Session(token=token, role=user.role if user else None, user_id=user.id if user else None)
            g.session = session
        return AuthResult(user, session, redirect_path(user))

    def logout(self, response):
        """Best-effort revocation, then always clear every local artifact."""
        session = current_session()
        if session is not None:
            try:
                self.client.post('/logout')
            except ApiError as e:
                logger.warning("Logout error (ignored): %s", e.message)
        return self.store.clear(response)

    def get_user(self):
        user = self.store.load_user()
        if user is not None:
            return user
        session = current_session()
        if session is None or not session.user_id:
            return None
        try:
            payload = self.client.get(f'/users/{session.user_id}')
        except ApiError as e:
            logger.error("Error fetching user: %s", e.message)
            return None
        data = payload.get('user') or unwrap(payload) or payload
        return User.from_api(data) if isinstance(data, dict) and 'id' in data else None

    def is_authenticated(self):
        return current_session() is not None


auth_gateway = AuthGateway()
