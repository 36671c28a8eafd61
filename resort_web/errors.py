# errors.py


class ValidationError(Exception):
    """Local form validation failure; blocks submission."""

    def __init__(self, errors, message='Please fix the form errors before submitting'):
        super().__init__(message)
        self.errors = dict(errors)
        self.message = message

    def first(self):
        return next(iter(self.errors.values()), self.message)


class ApiError(Exception):
    """A backend call failed. ``message`` is what the user gets to see."""

    status_code = None

    def __init__(self, message, status_code=None, endpoint=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.endpoint = endpoint
        self.payload = payload or {}


class AuthenticationError(ApiError):
    status_code = 401


class AuthorizationError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ServerError(ApiError):
    status_code = 500


class NetworkError(ApiError):
    pass


class RequestTimeout(NetworkError):
    pass


# failures that end the page rather than the call
SESSION_ERRORS = (AuthenticationError, AuthorizationError)
