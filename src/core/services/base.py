"""
Base class for services that run compound writes atomically.

Each compound operation runs in one storage transaction. When an
optimistic version check fails the whole transaction is rolled back and
replayed a bounded number of times before the conflict is surfaced.
"""

import math
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger, get_settings
from src.core.exceptions import ConcurrentModificationError, ValidationError
from src.core.interfaces.clock import IClock
from src.core.interfaces.transaction import ITransactionManager

logger = get_logger(__name__)

T = TypeVar("T")


def require_finite(field: str, value: float) -> float:
    """Reject NaN and infinities, which cannot be stored or summed."""
    if not math.isfinite(value):
        raise ValidationError(field, "must be a finite number", value)
    return value


class TransactionalService:
    """Provides ``_run_atomic`` and a clock to ledger services."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        clock: IClock,
    ):
        self._tx = transaction_manager
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock.now()

    def _conflict_retrying(self) -> AsyncRetrying:
        settings = get_settings()
        delay = settings.storage.conflict_retry_delay
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, settings.storage.conflict_retries)),
            wait=wait_exponential(multiplier=delay, min=delay, max=delay * 8),
            retry=retry_if_exception_type(ConcurrentModificationError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "transaction_conflict_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _run_atomic(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Run ``operation`` inside one transaction, replaying it on version conflicts.

        When a transaction is already open the operation simply joins it;
        conflicts then propagate to the outermost caller, which owns the
        replay.
        """
        if self._tx.in_transaction():
            return await operation(*args, **kwargs)

        async for attempt in self._conflict_retrying():
            with attempt:
                async with self._tx.transaction():
                    return await operation(*args, **kwargs)
        raise AssertionError("unreachable")  # pragma: no cover
