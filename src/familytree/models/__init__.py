"""Pydantic data models."""

from .entity import ArangoDocument, Entity
from .person import Person, PersonCreateRequest, PersonUpdateRequest
from .relationship import (
    Relationship,
    RelationshipCreateRequest,
    RelationshipUpdateRequest,
    RelationType,
)

__all__ = [
    "ArangoDocument",
    "Entity",
    "Person",
    "PersonCreateRequest",
    "PersonUpdateRequest",
    "Relationship",
    "RelationshipCreateRequest",
    "RelationshipUpdateRequest",
    "RelationType",
]
