# resort-web config.py
import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'resort-web-dev')

    # --- Backend (env-driven so this works in Docker/K8s) ---
    API_BASE_URL = os.getenv('RESORT_API_URL', 'http://localhost:8000/api')
    API_HOST = os.getenv('RESORT_API_HOST', 'localhost:8000')
    STORAGE_URL = os.getenv('RESORT_STORAGE_URL', f"http://{API_HOST}/storage")
    API_TIMEOUT = float(os.getenv('RESORT_API_TIMEOUT', '10'))

    DEFAULT_ACCOMMODATION_IMAGE = '/static/images/placeholder.svg'
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- Session cookies ---
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_ACCESS_COOKIE_NAME = 'auth_token'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=30)
    JWT_COOKIE_SECURE = os.getenv('RESORT_COOKIE_SECURE', '0') == '1'
    JWT_COOKIE_SAMESITE = 'Strict'
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False
    SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 days

    # --- UI ---
    FILTER_DEBOUNCE_MS = int(os.getenv('RESORT_FILTER_DEBOUNCE_MS', '300'))

    LOG_LEVEL = os.getenv('RESORT_LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET_KEY = 'test-jwt-secret-for-the-resort-web-suite'
    API_BASE_URL = 'http://backend.test/api'
    STORAGE_URL = 'http://backend.test/storage'
    LOG_LEVEL = 'DEBUG'
