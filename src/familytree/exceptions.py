"""Error taxonomy shared by the store, repositories and services."""
from __future__ import annotations

from dataclasses import dataclass


class FamilyTreeError(Exception):
    """Base class for every error raised by this package."""


@dataclass(eq=False)
class ValidationError(FamilyTreeError):
    """Caller-supplied data violates a precondition.

    Always raised before the store is contacted.
    """

    message: str
    field: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class NotFoundError(FamilyTreeError):
    """The store reports that the addressed document does not exist."""

    collection: str
    document_id: str

    def __str__(self) -> str:
        return f"{self.collection}: document {self.document_id!r} not found"


@dataclass(eq=False)
class PersistenceError(FamilyTreeError):
    """Any other store failure: connectivity, malformed query, server timeout.

    The driver exception is chained as ``__cause__``.
    """

    operation: str
    collection: str
    detail: str = ""

    def __str__(self) -> str:
        base = f"{self.operation} on {self.collection} failed"
        if self.detail:
            base += f": {self.detail}"
        return base


@dataclass(eq=False)
class RevisionConflictError(PersistenceError):
    """The document changed since it was read (``_rev`` mismatch)."""


class StoreConnectionError(FamilyTreeError):
    """Connecting to, bootstrapping or pinging the store failed."""
