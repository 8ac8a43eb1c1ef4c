"""ArangoDB connection management."""

from .client import ArangoDBClient, build_arango_client, ensure_database, is_duplicate_name

__all__ = [
    "ArangoDBClient",
    "build_arango_client",
    "ensure_database",
    "is_duplicate_name",
]
