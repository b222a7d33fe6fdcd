"""
API schemas package.
"""

# Common schemas
from .common import ApiResponse, ErrorResponse

# Queue schemas
from .queue import (
    ClinicResponse,
    JoinQueueRequest,
    JoinQueueResponse,
    LeaveQueueRequest,
    PatientQueueViewResponse,
    QueueDaySchema,
    QueueEntrySchema,
    QueueRowSchema,
    UpdateQueueEntryRequest,
    UpdateQueueEntryResponse,
)

__all__ = [
    # Common
    "ApiResponse",
    "ErrorResponse",

    # Queue
    "ClinicResponse",
    "JoinQueueRequest",
    "JoinQueueResponse",
    "LeaveQueueRequest",
    "PatientQueueViewResponse",
    "QueueDaySchema",
    "QueueEntrySchema",
    "QueueRowSchema",
    "UpdateQueueEntryRequest",
    "UpdateQueueEntryResponse",
]
