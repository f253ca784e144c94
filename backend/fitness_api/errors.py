"""
Error taxonomy shared by the auth flow, repositories and routers.

Every error carries a client-facing message and the HTTP status it maps to.
The handler registered in ``main`` renders them as ``{"error": message}``.
"""
from fastapi import status


class FitnessAPIError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FitnessAPIError):
    """Missing or malformed required fields."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(FitnessAPIError):
    """Duplicate unique key, e.g. an email that is already registered."""
    status_code = status.HTTP_409_CONFLICT


class AuthError(FitnessAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(FitnessAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(FitnessAPIError):
    """Data-access failure. The message is generic; details go to the log."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ExternalServiceError(FitnessAPIError):
    """Completion provider failure. Absorbed by the planner, never returned."""
    status_code = status.HTTP_502_BAD_GATEWAY
