"""Person repository."""
from __future__ import annotations

from typing import Any

from ..config import PERSONS_COLLECTION
from ..models.person import Person
from .base import BaseRepository

# An empty filter value turns its predicate into a pass-through
FIND_BY_NAME_QUERY = """
FOR p IN @@collection
    FILTER (@firstName == "" || p.firstName == @firstName)
       AND (@lastName == "" || p.lastName == @lastName)
    RETURN p
"""


class PersonRepository(BaseRepository[Person]):
    def __init__(self, database: Any, collection_name: str = PERSONS_COLLECTION) -> None:
        super().__init__(database, collection_name, Person)

    async def find_by_name(self, first_name: str, last_name: str) -> list[Person]:
        """Persons matching first and/or last name exactly; blank matches all."""
        return await self._query(
            FIND_BY_NAME_QUERY,
            {"firstName": first_name, "lastName": last_name},
            "find_by_name",
        )
