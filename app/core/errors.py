# app/core/errors.py
from fastapi import status


class AuthError(Exception):
    """Business-rule failure raised by the credential service.

    The HTTP layer maps ``status_code`` / ``code`` / ``message`` straight onto
    the JSON error body, so messages stay short and never carry secrets.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "AUTH_ERROR"
    message = "Request failed"
    headers = None

    def __init__(self, message: str = None, code: str = None, headers: dict = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if headers is not None:
            self.headers = headers
        super().__init__(self.message)


class ValidationError(AuthError):
    code = "VALIDATION_ERROR"
    message = "Invalid request"


class ConflictError(AuthError):
    code = "USER_EXISTS"
    message = "User already exists"


class NotFoundError(AuthError):
    code = "INVALID_EMAIL"
    message = "Invalid email"


class InvalidCredentialsError(AuthError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class InvalidOrExpiredError(AuthError):
    code = "INVALID_OR_EXPIRED"
    message = "Invalid or expired token"


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "NOT_VERIFIED"
    message = "Account not verified"


class ConfigurationError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "NO_PASSWORD_SET"
    message = "User has no password set"


class InvalidTokenError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"
    message = "Invalid token"
    headers = {"WWW-Authenticate": "Bearer"}


class RateLimitedError(AuthError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    message = "Too many requests, please try again later."


class InternalError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    message = "Internal server error"


class NotificationError(InternalError):
    code = "NOTIFICATION_FAILED"
