# garage/errors.py
"""
Domain errors raised by the services layer.
Each error carries the HTTP status it maps to; main.py turns them into
`{"error": message}` responses.
"""

from fastapi import status


class GarageError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GarageError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"


class SelfShareError(ValidationError):
    default_message = "You cannot share a vehicle with yourself"


class UnauthenticatedError(GarageError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied: no token provided"


class InvalidCredentialsError(GarageError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidTokenError(GarageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class ForbiddenError(GarageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission for this action"


class NotFoundError(GarageError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class RecipientNotFoundError(NotFoundError):
    default_message = "No user registered with that email"


class DuplicateKeyError(GarageError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UpstreamError(GarageError):
    """Failure reported by a third-party API; keeps the upstream status code."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service unavailable"

    def __init__(self, message: str = None, status_code: int = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
