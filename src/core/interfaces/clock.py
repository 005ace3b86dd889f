"""Abstract clock used for default timestamps."""

from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timestamp."""
        pass
