"""Connection options for the ArangoDB store.

Defaults can be overridden one field at a time, either from the environment
(``ARANGODB_*`` variables, ``.env`` files included) or in code::

    opts = ArangoOptions().with_overrides(database="familytree_test")
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any

from dotenv import find_dotenv, load_dotenv

PERSONS_COLLECTION = "persons"
RELATIONSHIPS_COLLECTION = "relationships"


def _f(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def _endpoints_from_env(default: list[str]) -> list[str]:
    raw = os.getenv("ARANGODB_ENDPOINTS")
    if raw:
        endpoints = [e.strip() for e in raw.split(",") if e.strip()]
        if endpoints:
            return endpoints
    host = os.getenv("ARANGODB_HOST")
    port = os.getenv("ARANGODB_PORT")
    if host or port:
        return [f"http://{host or 'localhost'}:{port or '8529'}"]
    return list(default)


@dataclass(frozen=True)
class ArangoOptions:
    endpoints: list[str] = field(default_factory=lambda: ["http://localhost:8529"])
    username: str = "root"
    password: str = ""
    database: str = "familytree"

    # Seconds; applied per HTTP request and as the CLI's operation bound
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0

    persons_collection: str = PERSONS_COLLECTION
    relationships_collection: str = RELATIONSHIPS_COLLECTION

    def __post_init__(self) -> None:
        if not self.endpoints:
            raise ValueError("ArangoOptions needs at least one endpoint")

    def with_overrides(self, **changes: Any) -> ArangoOptions:
        """Return a copy with the given fields replaced.

        Raises:
            TypeError: If a name is not an option field
            ValueError: If the endpoint list ends up empty
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise TypeError(f"unknown ArangoOptions field(s): {', '.join(unknown)}")
        return replace(self, **changes)

    @classmethod
    def from_env(cls, **overrides: Any) -> ArangoOptions:
        """Build options from ``ARANGODB_*`` variables, then apply overrides."""
        load_dotenv(find_dotenv(usecwd=True))
        base = cls()
        opts = cls(
            endpoints=_endpoints_from_env(base.endpoints),
            username=os.getenv("ARANGODB_USERNAME", base.username),
            password=os.getenv("ARANGODB_PASSWORD", base.password),
            database=os.getenv("ARANGODB_DATABASE_NAME", base.database),
            timeout=_f("ARANGODB_TIMEOUT", base.timeout),
            max_retries=_i("ARANGODB_MAX_RETRIES", base.max_retries),
            retry_delay=_f("ARANGODB_RETRY_DELAY", base.retry_delay),
        )
        return opts.with_overrides(**overrides)

    def redacted(self) -> dict[str, Any]:
        """Options as a dict safe for logging."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["password"] = "***" if self.password else ""
        return data
