"""Relationship (edge) repository."""
from __future__ import annotations

from typing import Any

from ..config import RELATIONSHIPS_COLLECTION
from ..models.relationship import Relationship
from .base import BaseRepository

FIND_BY_PERSON_QUERY = """
FOR rel IN @@collection
    FILTER rel._from == @personId || rel._to == @personId
    RETURN rel
"""

FIND_BY_TYPE_QUERY = """
FOR rel IN @@collection
    FILTER rel.relationType == @relationType
    RETURN rel
"""


class RelationshipRepository(BaseRepository[Relationship]):
    def __init__(self, database: Any, collection_name: str = RELATIONSHIPS_COLLECTION) -> None:
        super().__init__(database, collection_name, Relationship)

    async def find_by_person(self, person_id: str) -> list[Relationship]:
        """Edges with ``person_id`` at either end, regardless of direction."""
        return await self._query(FIND_BY_PERSON_QUERY, {"personId": person_id}, "find_by_person")

    async def find_by_type(self, relation_type: str) -> list[Relationship]:
        # No closed-set check: legacy values are returned as stored
        return await self._query(
            FIND_BY_TYPE_QUERY, {"relationType": relation_type}, "find_by_type"
        )
