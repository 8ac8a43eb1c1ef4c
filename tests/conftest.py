from __future__ import annotations

import pytest
from fakes import FakeArangoClient, FakeDatabase

from familytree.config import ArangoOptions
from familytree.repositories import PersonRepository, RelationshipRepository
from familytree.services import PersonService, RelationshipService
from familytree.store import ArangoDBClient


@pytest.fixture()
def options() -> ArangoOptions:
    return ArangoOptions(database="familytree_test", max_retries=2, retry_delay=0.0)


@pytest.fixture()
def arango_client() -> FakeArangoClient:
    return FakeArangoClient()


@pytest.fixture()
def store(options: ArangoOptions, arango_client: FakeArangoClient) -> ArangoDBClient:
    return ArangoDBClient.connect(options, client=arango_client)


@pytest.fixture()
def db(store: ArangoDBClient) -> FakeDatabase:
    return store.database


@pytest.fixture()
def person_repo(db: FakeDatabase) -> PersonRepository:
    return PersonRepository(db)


@pytest.fixture()
def relationship_repo(db: FakeDatabase) -> RelationshipRepository:
    return RelationshipRepository(db)


@pytest.fixture()
def person_service(person_repo: PersonRepository) -> PersonService:
    return PersonService(person_repo)


@pytest.fixture()
def relationship_service(relationship_repo: RelationshipRepository) -> RelationshipService:
    return RelationshipService(relationship_repo)
