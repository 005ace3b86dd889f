"""Core domain layer - entities, interfaces, exceptions and ledger services."""

from src.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
