"""Tests for the ArangoDB connection manager and bootstrap."""
from __future__ import annotations

import pytest
from arango.exceptions import CollectionCreateError
from fakes import FakeArangoClient, FakeDatabase, server_error, version_error

from familytree.config import ArangoOptions
from familytree.exceptions import StoreConnectionError
from familytree.store import ArangoDBClient


class TestBootstrap:
    def test_creates_database_and_collections(self, options, arango_client):
        client = ArangoDBClient.connect(options, client=arango_client)

        assert "familytree_test" in arango_client.databases
        db = client.database
        assert db.name == "familytree_test"
        assert db.collections["persons"].edge is False
        assert db.collections["relationships"].edge is True

    def test_exactly_one_edge_collection(self, store):
        edges = [c for c in store.database.collections.values() if c.edge]
        assert [c.name for c in edges] == ["relationships"]

    def test_second_connect_is_a_no_op(self, options, arango_client):
        ArangoDBClient.connect(options, client=arango_client)
        db = arango_client.databases["familytree_test"]
        db.create_calls.clear()

        ArangoDBClient.connect(options, client=arango_client)

        assert arango_client.create_database_calls == 1
        assert db.create_calls == []

    def test_existing_data_survives_reconnect(self, options, arango_client):
        client = ArangoDBClient.connect(options, client=arango_client)
        client.collection("persons").insert({"firstName": "Ada", "lastName": "Lovelace"})

        again = ArangoDBClient.connect(options, client=arango_client)

        assert len(again.collection("persons").docs) == 1

    def test_collection_created_concurrently_is_tolerated(self, options, arango_client):
        db = FakeDatabase("familytree_test")
        db.race_on_create = {"persons", "relationships"}
        arango_client.databases["familytree_test"] = db

        client = ArangoDBClient.connect(options, client=arango_client)

        assert db.create_calls == ["persons", "relationships"]
        assert client.database.has_collection("relationships")

    def test_database_created_concurrently_is_tolerated(self, options, arango_client):
        arango_client.race_on_create_database = True

        client = ArangoDBClient.connect(options, client=arango_client)

        assert client.database.name == "familytree_test"
        assert client.database.has_collection("persons")

    def test_ensure_collection_reports_creation(self, store):
        assert store.ensure_collection("places") is True
        assert store.ensure_collection("places") is False

    def test_other_create_failures_are_fatal(self, options, arango_client):
        db = FakeDatabase("familytree_test")
        arango_client.databases["familytree_test"] = db

        def broken_create(name: str, edge: bool = False):
            raise server_error(CollectionCreateError, 500, 4, "internal error")

        db.create_collection = broken_create

        with pytest.raises(StoreConnectionError, match="internal error"):
            ArangoDBClient.connect(options, client=arango_client)


class TestRetries:
    def test_transient_failures_are_retried(self, options, arango_client):
        arango_client.transient_failures = 2  # max_retries=2 allows three attempts

        client = ArangoDBClient.connect(options, client=arango_client)

        assert client.database.has_collection("persons")
        assert arango_client.transient_failures == 0

    def test_gives_up_after_max_retries(self, options, arango_client):
        arango_client.transient_failures = 3

        with pytest.raises(StoreConnectionError, match="connection refused"):
            ArangoDBClient.connect(options, client=arango_client)

    def test_zero_retries_means_single_attempt(self, arango_client):
        opts = ArangoOptions(database="familytree_test", max_retries=0, retry_delay=0.0)
        arango_client.transient_failures = 1

        with pytest.raises(StoreConnectionError):
            ArangoDBClient.connect(opts, client=arango_client)


class TestPing:
    def test_ping_returns_version(self, store):
        assert store.ping() == "3.12.0"

    def test_ping_failure(self, store):
        store.database.version_error = version_error()
        with pytest.raises(StoreConnectionError, match="ping failed"):
            store.ping()

    def test_close_closes_underlying_client(self, store, arango_client: FakeArangoClient):
        store.close()
        assert arango_client.closed
