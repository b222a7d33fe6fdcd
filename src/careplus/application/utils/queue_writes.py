"""
Version-guarded read-modify-write against a single QueueDay.
"""

from typing import Awaitable, Callable, Tuple, TypeVar

from ...core.structured_logger import get_logger
from ...domain.entities.queue_day import QueueDay
from ...domain.errors import ConcurrentUpdateError
from ..ports.repositories.queue_repo import QueueDayRepository

T = TypeVar("T")

logger = get_logger("careplus.queue")


async def commit_with_retry(
    repository: QueueDayRepository,
    clinic_id: str,
    load: Callable[[], Awaitable[QueueDay]],
    mutate: Callable[[QueueDay], T],
    max_attempts: int,
) -> Tuple[QueueDay, T]:
    """
    Load a queue day, apply ``mutate`` and commit it if nobody wrote in between.

    On a version conflict the whole cycle restarts from a fresh load, so the
    mutation is always computed against the latest committed state. Domain
    errors raised by ``load`` or ``mutate`` propagate before anything is
    written.

    Returns:
        The committed queue day and the value returned by ``mutate``
    """
    for attempt in range(1, max_attempts + 1):
        queue_day = await load()
        expected_version = queue_day.version
        result = mutate(queue_day)

        if await repository.save_if_version(queue_day, expected_version):
            return queue_day, result

        logger.warning(
            "Queue write conflict, reloading",
            clinic_id=clinic_id,
            date=queue_day.date.date().isoformat(),
            attempt=attempt,
            expected_version=expected_version,
        )

    raise ConcurrentUpdateError(clinic_id, max_attempts)
