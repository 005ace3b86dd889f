"""Infrastructure layer implementations."""

from src.infrastructure import storage
from src.infrastructure.clock import SystemClock

__all__ = ["storage", "SystemClock"]
