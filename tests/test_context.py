"""Tests for the process context."""
from __future__ import annotations

import pytest
from fakes import FakeArangoClient, version_error

from familytree.context import FamilyTreeContext, open_context
from familytree.exceptions import StoreConnectionError
from familytree.models import Person


@pytest.mark.asyncio
async def test_open_context_wires_everything(options, arango_client: FakeArangoClient):
    ctx = await open_context(options, arango_client=arango_client)

    assert isinstance(ctx, FamilyTreeContext)
    assert ctx.persons.collection_name == "persons"
    assert ctx.relationships.collection_name == "relationships"
    assert ctx.person_service.repo is ctx.persons
    assert ctx.relationship_service.repo is ctx.relationships

    person = await ctx.persons.create(Person(first_name="Ada", last_name="Lovelace"))
    assert (await ctx.person_service.get_person(person.id)).first_name == "Ada"


@pytest.mark.asyncio
async def test_custom_collection_names(options, arango_client):
    opts = options.with_overrides(persons_collection="people", relationships_collection="kinship")

    ctx = await open_context(opts, arango_client=arango_client)

    db = ctx.client.database
    assert db.collections["kinship"].edge is True
    assert db.collections["people"].edge is False
    assert ctx.persons.collection_name == "people"


@pytest.mark.asyncio
async def test_failed_ping_closes_client(options, arango_client):
    # Database exists already so the ping is the first call to hit the failure
    ctx = await open_context(options, arango_client=arango_client)
    ctx.client.database.version_error = version_error()
    arango_client.closed = False

    with pytest.raises(StoreConnectionError):
        await open_context(options, arango_client=arango_client)
    assert arango_client.closed


@pytest.mark.asyncio
async def test_context_close(options, arango_client):
    ctx = await open_context(options, arango_client=arango_client)
    ctx.close()
    assert arango_client.closed
