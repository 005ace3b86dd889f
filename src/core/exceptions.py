"""
Domain exceptions for the inventory ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConcurrentModificationError(StorageError):
    """A row changed between read and write inside another transaction."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} {entity_id} was modified concurrently",
            code="CONCURRENT_MODIFICATION",
            details={"entity": entity, "id": entity_id},
        )


class ImageStoreError(StorageError):
    """Reading or writing a recipe image failed."""

    def __init__(self, reference: str, reason: str):
        super().__init__(
            f"Image store error for '{reference}': {reason}",
            code="IMAGE_STORE_ERROR",
            details={"reference": reference, "reason": reason},
        )


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Referenced entity does not exist."""

    entity = "entity"

    def __init__(self, entity_id: int):
        code = f"{self.entity.upper()}_NOT_FOUND"
        super().__init__(
            f"{self.entity.replace('_', ' ').capitalize()} not found: {entity_id}",
            code=code,
            details={f"{self.entity}_id": entity_id},
        )


class ItemNotFoundError(NotFoundError):
    entity = "item"


class RecipeNotFoundError(NotFoundError):
    entity = "recipe"


class IngredientNotFoundError(NotFoundError):
    entity = "ingredient"


class OrderNotFoundError(NotFoundError):
    entity = "order"


class FinancialRecordNotFoundError(NotFoundError):
    entity = "financial_record"


# Business rule Exceptions
class InsufficientStockError(LedgerError):
    """One or more items cannot cover the requested quantity."""

    def __init__(self, shortfalls: list[Any]):
        self.shortfalls = list(shortfalls)
        names = ", ".join(
            f"{s.item_name or s.item_id} (need {s.required:g}, have {s.available:g})"
            for s in self.shortfalls
        )
        super().__init__(
            f"Insufficient stock: {names}",
            code="INSUFFICIENT_STOCK",
            details={
                "shortfalls": [
                    {
                        "item_id": s.item_id,
                        "item_name": s.item_name,
                        "required": s.required,
                        "available": s.available,
                        "missing": s.missing,
                    }
                    for s in self.shortfalls
                ]
            },
        )


class ReferentialIntegrityError(LedgerError):
    """Deleting the entity would orphan rows that reference it."""

    def __init__(self, entity: str, entity_id: int, referenced_by: str, count: int):
        super().__init__(
            f"Cannot delete {entity} {entity_id}: referenced by {count} {referenced_by}",
            code="REFERENTIAL_INTEGRITY",
            details={
                "entity": entity,
                "id": entity_id,
                "referenced_by": referenced_by,
                "count": count,
            },
        )


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
