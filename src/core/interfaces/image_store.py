"""Abstract interface for recipe image blobs."""

from abc import ABC, abstractmethod


class IImageStore(ABC):
    """Opaque blob store; the ledger keeps only the returned reference."""

    @abstractmethod
    async def save(self, key: str, data: bytes, content_type: str | None = None) -> str:
        """Store image bytes and return a reference."""
        pass

    @abstractmethod
    async def load(self, reference: str) -> bytes | None:
        """Load image bytes by reference, None if missing."""
        pass

    @abstractmethod
    async def delete(self, reference: str) -> None:
        """Remove an image; missing references are ignored."""
        pass
