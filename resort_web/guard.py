# guard.py
import logging
from typing import NamedTuple, Optional

from flask import g, redirect, request

from .models import Role
from .token_store import token_store

logger = logging.getLogger(__name__)

HOME_PATH = '/home'
LOGIN_PATH = '/login'
REGISTER_PATH = '/register'
AUTH_REQUIRED_PATH = '/auth-required'
UNAUTHORIZED_PATH = '/unauthorized'
ADMIN_LANDING_PATH = '/admin/dashboard'

AUTH_REQUIRED_PREFIXES = (
    '/profile',
    '/bookings',
    '/admin',
    '/transaction',
    '/setting',
    '/booking',
)
ADMIN_ONLY_PREFIXES = ('/admin',)

# never routed through the guard
SKIP_PREFIXES = ('/static', '/images', '/favicon.ico', '/healthz', '/api')


class Decision(NamedTuple):
    redirect_to: Optional[str] = None
    headers: Optional[dict] = None

    @property
    def allowed(self):
        return self.redirect_to is None


def requires_auth(path):
    return any(path.startswith(prefix) for prefix in AUTH_REQUIRED_PREFIXES)


def requires_admin(path):
    return any(path.startswith(prefix) for prefix in ADMIN_ONLY_PREFIXES)


def landing_path(role):
    return ADMIN_LANDING_PATH if role == Role.ADMIN else HOME_PATH


def decide(path, token=None, role=None):
    role = Role.parse(role) if role is not None else None

    if path == '/':
        return Decision(HOME_PATH)
    if requires_auth(path) and not token:
        return Decision(AUTH_REQUIRED_PATH)
    if requires_admin(path) and role != Role.ADMIN:
        return Decision(UNAUTHORIZED_PATH)
    if path in (LOGIN_PATH, REGISTER_PATH) and token:
        return Decision(landing_path(role))

    headers = {}
    if token:
        headers['Authorization'] = f"Bearer {token}"
    if role:
        headers['X-User-Role'] = role.value
    return Decision(headers=headers)


def should_skip(path):
    return any(path.startswith(prefix) for prefix in SKIP_PREFIXES)


def guard_request():
    path = request.path
    if should_skip(path):
        return None

    session = token_store.load()
    g.session = session
    token = session.token if session else None
    role = session.role if session else None

    decision = decide(path, token, role)
    logger.debug("Guard %s token=%s role=%s -> %s",
                 path, bool(token), role.value if role else None, decision.redirect_to or 'allow')
    if not decision.allowed:
        return redirect(decision.redirect_to)
    g.forward_headers = decision.headers or {}
    return None


def install(app):
    app.before_request(guard_request)
