"""Repositories over the ArangoDB collections."""

from .base import BaseRepository
from .person import PersonRepository
from .relationship import RelationshipRepository

__all__ = [
    "BaseRepository",
    "PersonRepository",
    "RelationshipRepository",
]
