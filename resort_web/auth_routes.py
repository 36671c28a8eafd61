# auth_routes.py
import logging

from flask import Blueprint, flash, jsonify, make_response, redirect, render_template, request
from pydantic import ValidationError as PydanticValidationError

from .api import auth_gateway
from .errors import ApiError, ValidationError
from .guard import HOME_PATH, LOGIN_PATH
from .models import CookieAction, Session
from .token_store import token_store

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

REGISTER_FIELDS = (
    'firstname', 'lastname', 'email', 'password', 'password_confirmation',
    'contact_number', 'address',
)


@auth_bp.route('/', methods=['GET'])
def index():
    return redirect(HOME_PATH)


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return render_template('login.html', form={}, errors={})

    email = request.form.get('email', '')
    password = request.form.get('password', '')
    try:
        result = auth_gateway.login(email, password)
    except ValidationError as e:
        return render_template('login.html', form={'email': email}, errors=e.errors, error=e.first()), 400
    except ApiError as e:
        return render_template('login.html', form={'email': email}, errors={}, error=e.message), 400

    logger.info("Login successful, redirecting to %s", result.redirect_to)
    resp = redirect(result.redirect_to)
    return token_store.save(resp, result.session, result.user)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'GET':
        return render_template('register.html', form={}, errors={})

    fields = {name: request.form.get(name, '') for name in REGISTER_FIELDS}
    # the public form only ever creates customers
    fields['role'] = 'customer'
    shown = {k: v for k, v in fields.items() if 'password' not in k}
    try:
        result = auth_gateway.register(**fields)
    except ValidationError as e:
        return render_template('register.html', form=shown, errors=e.errors, error=e.first()), 400
    except ApiError as e:
        return render_template('register.html', form=shown, errors={}, error=e.message), 400

    if result.session is None:
        flash('Account created. Please log in.', 'success')
        return redirect(LOGIN_PATH)
    resp = redirect(result.redirect_to)
    return token_store.save(resp, result.session, result.user)


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    resp = make_response(redirect('/'))
    return auth_gateway.logout(resp)


@auth_bp.route('/auth-required', methods=['GET'])
def auth_required():
    return render_template('auth_required.html')


@auth_bp.route('/unauthorized', methods=['GET'])
def unauthorized():
    return render_template('unauthorized.html'), 403


@auth_bp.route('/api/auth/cookie', methods=['POST'])
def session_cookie():
    try:
        body = CookieAction.model_validate(request.get_json(silent=True) or {})
    except PydanticValidationError:
        return jsonify({'error': 'Invalid action'}), 400

    resp = jsonify({'success': True})
    if body.action == 'set' and body.token:
        # the role is only ever taken from an existing signed session
        current = token_store.load()
        if current is not None and current.token == body.token:
            return token_store.save(resp, current, token_store.load_user())
        return token_store.save(resp, Session(token=body.token))
    if body.action == 'clear':
        return token_store.clear(resp)
    return jsonify({'error': 'Invalid action'}), 400
