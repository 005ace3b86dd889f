"""Abstract interface for transactional storage."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any


class ITransactionManager(ABC):
    """Opens a unit of work spanning every store call made inside it.

    Store calls issued while a transaction is open join it; the whole unit
    commits when the block exits normally and rolls back on any exception.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Begin (or join) a write transaction."""
        pass

    @abstractmethod
    def in_transaction(self) -> bool:
        """True when the current task already holds an open transaction."""
        pass
