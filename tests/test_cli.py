from __future__ import annotations

import pytest
from fakes import FakeArangoClient
from typer.testing import CliRunner

import familytree.cli as cli
from familytree.context import open_context

runner = CliRunner()


@pytest.fixture()
def fake_store(monkeypatch: pytest.MonkeyPatch, options) -> FakeArangoClient:
    """Route every CLI invocation to one in-memory store."""
    arango_client = FakeArangoClient()

    async def fake_open_context(_options):
        return await open_context(options, arango_client=arango_client)

    monkeypatch.setattr(cli, "open_context", fake_open_context)
    monkeypatch.setattr(cli, "get_options", lambda: options)
    return arango_client


def invoke(*args: str):
    return runner.invoke(cli.app, ["--console-logs", *args], catch_exceptions=False)


def test_ping(fake_store):
    result = invoke("ping")
    assert result.exit_code == 0
    assert "3.12.0" in result.stdout


def test_person_add_list_and_find(fake_store):
    assert invoke("person", "add", "--first", "Ada", "--last", "Lovelace", "--born", "1815-12-10").exit_code == 0
    assert invoke("person", "add", "--first", "Charles", "--last", "Babbage").exit_code == 0

    listed = invoke("person", "list")
    assert listed.exit_code == 0
    assert "Lovelace" in listed.stdout
    assert "Babbage" in listed.stdout
    assert "1815-12-10" in listed.stdout

    found = invoke("person", "find", "--first", "Charles")
    assert "Babbage" in found.stdout
    assert "Lovelace" not in found.stdout


def test_person_add_validation_error(fake_store):
    result = invoke("person", "add", "--first", " ", "--last", "Lovelace")
    assert result.exit_code == 1
    assert "firstName is required" in result.stdout


def test_missing_person_exits_1(fake_store):
    result = invoke("person", "get", "persons/404")
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_person_update_and_delete(fake_store):
    invoke("person", "add", "--first", "Ada", "--last", "Lovelace")

    updated = invoke("person", "update", "persons/1", "--email", "ada@example.org")
    assert updated.exit_code == 0
    shown = invoke("person", "get", "persons/1")
    assert "ada@example.org" in shown.stdout

    assert invoke("person", "delete", "persons/1").exit_code == 0
    assert invoke("person", "get", "persons/1").exit_code == 1


def test_relationship_commands(fake_store):
    invoke("person", "add", "--first", "Ada", "--last", "Lovelace")
    invoke("person", "add", "--first", "Charles", "--last", "Babbage")

    added = invoke("relationship", "add", "persons/1", "persons/2", "sibling")
    assert added.exit_code == 0

    for person_id in ("persons/1", "persons/2"):
        result = invoke("relationship", "for-person", person_id)
        assert "sibling" in result.stdout

    assert "sibling" in invoke("relationship", "by-type", "sibling").stdout
    assert "No spouse relationships" in invoke("relationship", "by-type", "spouse").stdout


def test_relationship_rejects_unknown_type(fake_store):
    result = invoke("relationship", "add", "persons/1", "persons/2", "mentor")
    assert result.exit_code == 1
    assert "invalid relationship type" in result.stdout
    assert fake_store.databases["familytree_test"].collections["relationships"].calls == []


def test_empty_lists(fake_store):
    assert "No persons stored" in invoke("person", "list").stdout
    assert "No relationships stored" in invoke("relationship", "list").stdout
