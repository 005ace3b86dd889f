"""System clock."""

from datetime import datetime

from src.core.interfaces.clock import IClock


class SystemClock(IClock):
    """Local wall-clock time, second precision."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)
