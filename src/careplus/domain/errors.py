"""
Domain-specific error types for queue rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ClinicNotFoundError(DomainError):
    """Clinic not found."""

    def __init__(self, clinic_id: str) -> None:
        message = f"Clinic with ID '{clinic_id}' not found"
        super().__init__(message, "CLINIC_NOT_FOUND", {"clinic_id": clinic_id})


class AlreadyQueuedError(DomainError):
    """Patient already holds an active entry in today's queue."""

    def __init__(self, clinic_id: str, patient_id: str, entry_id: str) -> None:
        message = f"Patient '{patient_id}' is already in the queue for clinic '{clinic_id}'"
        super().__init__(
            message,
            "ALREADY_QUEUED",
            {"clinic_id": clinic_id, "patient_id": patient_id, "entry_id": entry_id},
        )


class EntryNotFoundError(DomainError):
    """Queue entry not found in today's queue."""

    def __init__(self, clinic_id: str, entry_id: str) -> None:
        message = f"Queue entry '{entry_id}' not found in today's queue for clinic '{clinic_id}'"
        super().__init__(
            message, "ENTRY_NOT_FOUND", {"clinic_id": clinic_id, "entry_id": entry_id}
        )


class InvalidStateError(DomainError):
    """Transition attempted from an incompatible status."""

    def __init__(self, entry_id: str, current_status: str, action: str, reason: str = "") -> None:
        message = f"Cannot {action} entry '{entry_id}' with status '{current_status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            "INVALID_STATE",
            {"entry_id": entry_id, "status": current_status, "action": action},
        )


class NotInQueueError(DomainError):
    """Patient has no active entry in any queue being looked at."""

    def __init__(self, patient_id: str, clinic_id: Optional[str] = None) -> None:
        message = f"Patient '{patient_id}' is not waiting in any active queue"
        details: Dict[str, Any] = {"patient_id": patient_id}
        if clinic_id:
            message = f"Patient '{patient_id}' is not waiting in the queue for clinic '{clinic_id}'"
            details["clinic_id"] = clinic_id
        super().__init__(message, "NOT_IN_QUEUE", details)


class NotQueueOwnerError(DomainError):
    """Caller is not the doctor owning the clinic's queue."""

    def __init__(self, clinic_id: str, doctor_id: str) -> None:
        message = f"Doctor '{doctor_id}' does not own the queue for clinic '{clinic_id}'"
        super().__init__(
            message, "NOT_QUEUE_OWNER", {"clinic_id": clinic_id, "doctor_id": doctor_id}
        )


class ConcurrentUpdateError(DomainError):
    """Queue kept changing underneath a write until attempts ran out."""

    def __init__(self, clinic_id: str, attempts: int) -> None:
        message = f"Queue for clinic '{clinic_id}' is being updated concurrently, gave up after {attempts} attempts"
        super().__init__(
            message, "CONCURRENT_UPDATE", {"clinic_id": clinic_id, "attempts": attempts}
        )


class StoreUnavailableError(DomainError):
    """Persistence layer failed."""

    def __init__(self, operation: str, reason: str) -> None:
        message = f"Queue store unavailable during '{operation}': {reason}"
        super().__init__(message, "STORE_UNAVAILABLE", {"operation": operation})


class InvalidQueueDataError(DomainError):
    """Invalid queue data."""

    def __init__(self, field: str, value: Any) -> None:
        message = f"Invalid queue data. Field: {field}, Value: {value}"
        super().__init__(
            message, "INVALID_QUEUE_DATA", {"field": field, "value": value}
        )
