from fastapi import status

from ..domain.errors import (
    AlreadyQueuedError,
    ClinicNotFoundError,
    ConcurrentUpdateError,
    DomainError,
    EntryNotFoundError,
    InvalidQueueDataError,
    InvalidStateError,
    NotInQueueError,
    NotQueueOwnerError,
    StoreUnavailableError,
)


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


class ForbiddenError(APIError):
    def __init__(self, message: str = "Forbidden", details: dict = None):
        super().__init__("FORBIDDEN", message, 403, details)


# Domain error -> HTTP status
DOMAIN_ERROR_STATUS = {
    ClinicNotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyQueuedError: status.HTTP_409_CONFLICT,
    EntryNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    NotInQueueError: status.HTTP_404_NOT_FOUND,
    NotQueueOwnerError: status.HTTP_403_FORBIDDEN,
    ConcurrentUpdateError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InvalidQueueDataError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def status_for(error: DomainError) -> int:
    return DOMAIN_ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
