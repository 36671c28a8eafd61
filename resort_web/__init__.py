import logging

from flask import Flask, flash, g, jsonify, redirect, render_template, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from . import guard
from .api import api, auth_gateway
from .api.client import SESSION_EXPIRED_MESSAGE
from .errors import ApiError, AuthenticationError, AuthorizationError
from .logs import setup_logging
from .storage import get_accommodation_image_url, get_image_url
from .token_store import token_store

logger = logging.getLogger(__name__)

jwt = JWTManager()


def wants_json():
    return request.is_json or request.accept_mimetypes.best == 'application/json'


def create_app(config=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config or 'resort_web.config.Config')
    app.config.update(overrides)

    setup_logging(app.config['LOG_LEVEL'])

    jwt.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    api.init_app(app)
    guard.install(app)

    from .auth_routes import auth_bp
    from .booking_routes import booking_bp
    from .admin_routes import admin_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(admin_bp)

    register_error_handlers(app)
    register_template_helpers(app)

    @app.get('/healthz')
    def healthz():
        return {"ok": True}, 200

    return app


def register_error_handlers(app):

    @app.errorhandler(AuthenticationError)
    def handle_unauthenticated(e):
        # the session is dead either way; login/register failures stay quiet
        endpoint = e.endpoint or ''
        auth_call = '/login' in endpoint or '/register' in endpoint
        if wants_json():
            resp = jsonify({'error': e.message})
            resp.status_code = 401
        else:
            if not auth_call:
                flash(SESSION_EXPIRED_MESSAGE, 'error')
            resp = redirect(guard.LOGIN_PATH)
        return token_store.clear(resp)

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(e):
        if wants_json():
            return jsonify({'error': e.message}), 403
        flash(e.message, 'error')
        return redirect(guard.UNAUTHORIZED_PATH)

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        # server, network and timeout errors: show it, never retry
        logger.warning("Unhandled API error on %s: %s", request.path, e.message)
        if wants_json():
            return jsonify({'error': e.message}), e.status_code or 502
        return render_template('error.html', message=e.message), e.status_code or 502


def register_template_helpers(app):

    @app.context_processor
    def inject_session():
        session = g.get('session')
        return {
            'current_session': session,
            'current_user': auth_gateway.get_user() if auth_gateway.is_authenticated() else None,
            'is_admin': bool(session and session.is_admin),
            'filter_debounce_ms': app.config['FILTER_DEBOUNCE_MS'],
        }

    app.jinja_env.globals['image_url'] = get_image_url
    app.jinja_env.globals['accommodation_image_url'] = get_accommodation_image_url

    @app.template_filter('peso')
    def peso(amount):
        return f"₱{amount:,.2f}"
