"""Service layer consumed by the command line and any outer API."""

from .person import PersonService
from .relationship import RelationshipService

__all__ = ["PersonService", "RelationshipService"]
