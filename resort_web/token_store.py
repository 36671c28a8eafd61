# token_store.py
# auth_token (signed JWT) is the only cookie a role is trusted from; token and
# userRole are plain copies for scripts and display.
import logging

from flask import current_app, g, request
from flask_jwt_extended import create_access_token, decode_token, set_access_cookies, unset_jwt_cookies
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from .logs import mask_token
from .models import Session, User

logger = logging.getLogger(__name__)

TOKEN_COOKIE = 'token'
ROLE_COOKIE = 'userRole'


def bearer_from_header(req):
    auth_header = req.headers.get('Authorization') or ''
    parts = auth_header.split(' ')
    if len(parts) == 2 and parts[0].lower() == 'bearer' and parts[1]:
        return parts[1]
    return None


class TokenStore:
    """Reads the session from a request and writes it onto responses."""

    def load(self, req=None):
        req = req or request
        signed = req.cookies.get(current_app.config['JWT_ACCESS_COOKIE_NAME'])
        if signed:
            try:
                claims = decode_token(signed)
            except (JWTExtendedException, PyJWTError) as e:
                logger.warning("Discarding unreadable session cookie: %s", e)
            else:
                return Session(
                    token=claims['api_token'],
                    role=claims.get('role'),
                    user_id=claims.get('user_id'),
                )

        token = req.cookies.get(TOKEN_COOKIE) or bearer_from_header(req)
        if token:
            # a bare token proves a login but not a role
            return Session(token=token)
        return None

    def load_user(self, req=None):
        req = req or request
        signed = req.cookies.get(current_app.config['JWT_ACCESS_COOKIE_NAME'])
        if not signed:
            return None
        try:
            claims = decode_token(signed)
        except (JWTExtendedException, PyJWTError):
            return None
        # saved without a profile; callers fetch the user from the backend
        if not claims.get('user_id') or 'name' not in claims:
            return None
        return User(
            id=claims['user_id'],
            name=claims.get('name', ''),
            email=claims.get('email', ''),
            role=claims.get('role'),
        )

    def save(self, response, session, user=None):
        role = session.role.value if session.role else None
        claims = {
            'api_token': session.token,
            'role': role,
            'user_id': session.user_id,
        }
        if user is not None:
            claims['name'] = user.name
            claims['email'] = user.email
        signed = create_access_token(identity=session.user_id or 'anonymous', additional_claims=claims)
        set_access_cookies(response, signed)

        max_age = current_app.config['SESSION_COOKIE_MAX_AGE']
        secure = current_app.config['JWT_COOKIE_SECURE']
        response.set_cookie(TOKEN_COOKIE, session.token, max_age=max_age, path='/',
                            secure=secure, samesite='Strict')
        if role:
            response.set_cookie(ROLE_COOKIE, role, max_age=max_age, path='/',
                                secure=secure, samesite='Strict')
        else:
            response.delete_cookie(ROLE_COOKIE, path='/')

        g.session = session
        logger.info("Session stored for user=%s role=%s token=%s",
                    session.user_id, role, mask_token(session.token))
        return response

    def clear(self, response):
        # deleting an absent cookie is harmless, so clearing twice is fine
        unset_jwt_cookies(response)
        response.delete_cookie(TOKEN_COOKIE, path='/')
        response.delete_cookie(ROLE_COOKIE, path='/')
        g.session = None
        logger.info("Session cleared")
        return response


token_store = TokenStore()


def current_session():
    return g.get('session')
