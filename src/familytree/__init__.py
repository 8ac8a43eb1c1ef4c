"""Family tree persons and relationships stored in ArangoDB.

The repository layer maps pydantic entities onto ArangoDB collections;
services add request validation on top.
"""

__version__ = "0.1.0"

from .config import ArangoOptions
from .context import FamilyTreeContext, open_context
from .exceptions import (
    FamilyTreeError,
    NotFoundError,
    PersistenceError,
    RevisionConflictError,
    StoreConnectionError,
    ValidationError,
)

__all__ = [
    "ArangoOptions",
    "FamilyTreeContext",
    "open_context",
    "FamilyTreeError",
    "NotFoundError",
    "PersistenceError",
    "RevisionConflictError",
    "StoreConnectionError",
    "ValidationError",
]
