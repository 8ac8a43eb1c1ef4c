"""Process-wide registry of the store client, repositories and services.

Built once at start-up by ``open_context`` and passed explicitly to whatever
needs it.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from .config import ArangoOptions
from .exceptions import StoreConnectionError
from .logging import get_logger
from .repositories import PersonRepository, RelationshipRepository
from .services import PersonService, RelationshipService
from .store import ArangoDBClient

logger = get_logger(__name__)


@dataclass
class FamilyTreeContext:
    client: ArangoDBClient
    persons: PersonRepository
    relationships: RelationshipRepository
    person_service: PersonService
    relationship_service: RelationshipService

    @classmethod
    def from_client(cls, client: ArangoDBClient) -> FamilyTreeContext:
        persons = PersonRepository(client.database, client.options.persons_collection)
        relationships = RelationshipRepository(
            client.database, client.options.relationships_collection
        )
        return cls(
            client=client,
            persons=persons,
            relationships=relationships,
            person_service=PersonService(persons),
            relationship_service=RelationshipService(relationships),
        )

    def close(self) -> None:
        self.client.close()


async def open_context(
    options: ArangoOptions | None = None, *, arango_client: Any | None = None
) -> FamilyTreeContext:
    """Connect, verify liveness and wire up repositories and services.

    Raises:
        StoreConnectionError: If bootstrap or the ping fails
    """
    client = await asyncio.to_thread(ArangoDBClient.connect, options, client=arango_client)
    try:
        version = await asyncio.to_thread(client.ping)
    except StoreConnectionError:
        client.close()
        raise
    logger.info("arangodb_ready", version=version, database=client.options.database)
    return FamilyTreeContext.from_client(client)
