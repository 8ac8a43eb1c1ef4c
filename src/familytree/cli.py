"""Command line interface for the family tree store."""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from .config import ArangoOptions
from .context import FamilyTreeContext, open_context
from .exceptions import (
    NotFoundError,
    PersistenceError,
    StoreConnectionError,
    ValidationError,
)
from .logging import configure_logging
from .models import (
    Person,
    PersonCreateRequest,
    PersonUpdateRequest,
    Relationship,
    RelationshipCreateRequest,
    RelationshipUpdateRequest,
)

T = TypeVar("T")

app = typer.Typer(
    name="familytree",
    help="Family tree persons and relationships in ArangoDB",
    add_completion=False,
)
person_app = typer.Typer(help="Manage persons", no_args_is_help=True)
relationship_app = typer.Typer(help="Manage relationships", no_args_is_help=True)
app.add_typer(person_app, name="person")
app.add_typer(relationship_app, name="relationship")

console = Console()


def get_options() -> ArangoOptions:
    """Load connection options from the environment and ``.env``."""
    return ArangoOptions.from_env()


def _run(action: Callable[[FamilyTreeContext], Awaitable[T]]) -> T:
    """Open a context, run ``action`` within the configured timeout, close."""
    options = get_options()

    async def run() -> T:
        ctx = await open_context(options)
        try:
            async with asyncio.timeout(options.timeout):
                return await action(ctx)
        finally:
            ctx.close()

    try:
        return asyncio.run(run())
    except (ValidationError, NotFoundError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)
    except (PersistenceError, StoreConnectionError) as exc:
        console.print(f"[red]Store error: {exc}[/red]")
        raise typer.Exit(2)
    except TimeoutError:
        console.print(f"[red]Timed out after {options.timeout}s[/red]")
        raise typer.Exit(2)


def _fmt_date(value: Optional[datetime]) -> str:
    return value.date().isoformat() if value else ""


def _persons_table(persons: list[Person], title: str = "Persons") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Born")
    table.add_column("Died")
    table.add_column("Gender")
    table.add_column("Email")
    for p in persons:
        table.add_row(
            p.id or "",
            p.full_name,
            _fmt_date(p.birth_date),
            _fmt_date(p.death_date),
            p.gender or "",
            p.email or "",
        )
    return table


def _relationships_table(relationships: list[Relationship], title: str = "Relationships") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Type", style="green")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Notes")
    for r in relationships:
        table.add_row(
            r.id or "",
            r.from_,
            r.to,
            r.relation_type,
            _fmt_date(r.start_date),
            _fmt_date(r.end_date),
            r.notes or "",
        )
    return table


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="LOG_LEVEL", help="Log level"),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", envvar="LOG_JSON"),
):
    """Configure logging before any command runs."""
    configure_logging(log_level.upper(), json_logs=json_logs)


@app.command()
def ping():
    """Connect, bootstrap collections and print the server version."""

    async def action(ctx: FamilyTreeContext) -> str:
        return await asyncio.to_thread(ctx.client.ping)

    version = _run(action)
    console.print(f"[green]ArangoDB {version} is reachable[/green]")


# =============================================================================
# Persons
# =============================================================================


@person_app.command("add")
def person_add(
    first_name: str = typer.Option(..., "--first", "-f", help="First name"),
    last_name: str = typer.Option(..., "--last", "-l", help="Last name"),
    birth_date: Optional[datetime] = typer.Option(None, "--born", help="Birth date"),
    death_date: Optional[datetime] = typer.Option(None, "--died", help="Death date"),
    gender: str = typer.Option("", "--gender"),
    email: str = typer.Option("", "--email"),
    phone: str = typer.Option("", "--phone"),
):
    """Create a person."""
    req = PersonCreateRequest(
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date,
        death_date=death_date,
        gender=gender,
        email=email,
        phone=phone,
    )
    person = _run(lambda ctx: ctx.person_service.create_person(req))
    console.print(f"[green]Created {person.full_name}[/green] ({person.id})")


@person_app.command("get")
def person_get(person_id: str = typer.Argument(..., help="Person key or persons/<key>")):
    """Show one person."""
    person = _run(lambda ctx: ctx.person_service.get_person(person_id))
    console.print(_persons_table([person], title=person.full_name))


@person_app.command("list")
def person_list():
    """List every person."""
    persons = _run(lambda ctx: ctx.person_service.list_persons())
    if not persons:
        console.print("[yellow]No persons stored[/yellow]")
        return
    console.print(_persons_table(persons))


@person_app.command("find")
def person_find(
    first_name: str = typer.Option("", "--first", "-f"),
    last_name: str = typer.Option("", "--last", "-l"),
):
    """Find persons by exact first and/or last name."""
    persons = _run(lambda ctx: ctx.person_service.search_persons_by_name(first_name, last_name))
    if not persons:
        console.print("[yellow]No matching persons[/yellow]")
        return
    console.print(_persons_table(persons, title="Matches"))


@person_app.command("update")
def person_update(
    person_id: str = typer.Argument(...),
    first_name: str = typer.Option("", "--first", "-f"),
    last_name: str = typer.Option("", "--last", "-l"),
    birth_date: Optional[datetime] = typer.Option(None, "--born"),
    death_date: Optional[datetime] = typer.Option(None, "--died"),
    gender: str = typer.Option("", "--gender"),
    email: str = typer.Option("", "--email"),
    phone: str = typer.Option("", "--phone"),
):
    """Change the given fields of a person; omitted fields are kept."""
    req = PersonUpdateRequest(
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date,
        death_date=death_date,
        gender=gender,
        email=email,
        phone=phone,
    )
    person = _run(lambda ctx: ctx.person_service.update_person(person_id, req))
    console.print(f"[green]Updated {person.full_name}[/green] (rev {person.rev})")


@person_app.command("delete")
def person_delete(person_id: str = typer.Argument(...)):
    """Delete a person. Relationships pointing at it are not removed."""
    _run(lambda ctx: ctx.person_service.delete_person(person_id))
    console.print(f"[green]Deleted {person_id}[/green]")


# =============================================================================
# Relationships
# =============================================================================


@relationship_app.command("add")
def relationship_add(
    from_id: str = typer.Argument(..., help="persons/<key> of the first person"),
    to_id: str = typer.Argument(..., help="persons/<key> of the second person"),
    relation_type: str = typer.Argument(..., help="parent, child, spouse or sibling"),
    start_date: Optional[datetime] = typer.Option(None, "--start"),
    end_date: Optional[datetime] = typer.Option(None, "--end"),
    notes: str = typer.Option("", "--notes"),
):
    """Create a relationship between two persons."""
    req = RelationshipCreateRequest(
        from_=from_id,
        to=to_id,
        relation_type=relation_type,
        start_date=start_date,
        end_date=end_date,
        notes=notes,
    )
    rel = _run(lambda ctx: ctx.relationship_service.create_relationship(req))
    console.print(f"[green]Created {rel.relation_type}[/green] {rel.from_} -> {rel.to} ({rel.id})")


@relationship_app.command("get")
def relationship_get(relationship_id: str = typer.Argument(...)):
    """Show one relationship."""
    rel = _run(lambda ctx: ctx.relationship_service.get_relationship(relationship_id))
    console.print(_relationships_table([rel], title=rel.id or "Relationship"))


@relationship_app.command("list")
def relationship_list():
    """List every relationship."""
    rels = _run(lambda ctx: ctx.relationship_service.list_relationships())
    if not rels:
        console.print("[yellow]No relationships stored[/yellow]")
        return
    console.print(_relationships_table(rels))


@relationship_app.command("for-person")
def relationship_for_person(person_id: str = typer.Argument(..., help="persons/<key>")):
    """Relationships where the person is at either end."""
    rels = _run(lambda ctx: ctx.relationship_service.relationships_for_person(person_id))
    if not rels:
        console.print(f"[yellow]No relationships for {person_id}[/yellow]")
        return
    console.print(_relationships_table(rels, title=f"Relationships of {person_id}"))


@relationship_app.command("by-type")
def relationship_by_type(relation_type: str = typer.Argument(...)):
    """Relationships of one type."""
    rels = _run(lambda ctx: ctx.relationship_service.relationships_by_type(relation_type))
    if not rels:
        console.print(f"[yellow]No {relation_type} relationships[/yellow]")
        return
    console.print(_relationships_table(rels, title=relation_type))


@relationship_app.command("update")
def relationship_update(
    relationship_id: str = typer.Argument(...),
    from_id: str = typer.Option("", "--from"),
    to_id: str = typer.Option("", "--to"),
    relation_type: str = typer.Option("", "--type"),
    start_date: Optional[datetime] = typer.Option(None, "--start"),
    end_date: Optional[datetime] = typer.Option(None, "--end"),
    notes: str = typer.Option("", "--notes"),
):
    """Change the given fields of a relationship."""
    req = RelationshipUpdateRequest(
        from_=from_id,
        to=to_id,
        relation_type=relation_type,
        start_date=start_date,
        end_date=end_date,
        notes=notes,
    )
    rel = _run(lambda ctx: ctx.relationship_service.update_relationship(relationship_id, req))
    console.print(f"[green]Updated {rel.id}[/green] (rev {rel.rev})")


@relationship_app.command("delete")
def relationship_delete(relationship_id: str = typer.Argument(...)):
    """Delete a relationship."""
    _run(lambda ctx: ctx.relationship_service.delete_relationship(relationship_id))
    console.print(f"[green]Deleted {relationship_id}[/green]")


if __name__ == "__main__":
    app()
