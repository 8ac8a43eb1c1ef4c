"""ArangoDB connection manager.

Connects to the server, gets or creates the target database and makes sure
the vertex and edge collections exist. Every bootstrap step is idempotent and
tolerates another process creating the same database or collection first.
"""
from __future__ import annotations

from typing import Any

import requests
from arango import ArangoClient
from arango.exceptions import (
    ArangoError,
    ArangoServerError,
    CollectionCreateError,
    DatabaseCreateError,
    ServerConnectionError,
)
from arango.http import DefaultHTTPClient
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import ArangoOptions
from ..exceptions import StoreConnectionError
from ..logging import get_logger

logger = get_logger(__name__)

# ArangoDB error numbers
ERROR_DUPLICATE_NAME = 1207

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    requests.ConnectionError,
    requests.Timeout,
    ServerConnectionError,
)


def is_duplicate_name(exc: ArangoServerError) -> bool:
    """True when a create failed because the name already exists."""
    return exc.error_code == ERROR_DUPLICATE_NAME or exc.http_code == 409


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "arangodb_bootstrap_retry",
        attempt=state.attempt_number,
        error=str(exc),
    )


def _retrying(options: ArangoOptions) -> Retrying:
    return Retrying(
        stop=stop_after_attempt(options.max_retries + 1),
        wait=wait_exponential(multiplier=options.retry_delay, max=max(options.retry_delay * 8, 0)),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        before_sleep=_log_retry,
        reraise=True,
    )


def build_arango_client(options: ArangoOptions) -> ArangoClient:
    """Create a python-arango client with per-request timeout and retries."""
    http_client = DefaultHTTPClient(
        request_timeout=options.timeout,
        retry_attempts=options.max_retries,
        backoff_factor=options.retry_delay,
    )
    return ArangoClient(
        hosts=options.endpoints if len(options.endpoints) > 1 else options.endpoints[0],
        host_resolver="roundrobin" if len(options.endpoints) > 1 else "default",
        http_client=http_client,
        request_timeout=options.timeout,
    )


class ArangoDBClient:
    """Long-lived handle on one ArangoDB database.

    Safe to share between concurrent tasks; all repositories of a process use
    the same instance.
    """

    def __init__(self, client: Any, database: Any, options: ArangoOptions) -> None:
        self._client = client
        self._db = database
        self.options = options

    @classmethod
    def connect(
        cls,
        options: ArangoOptions | None = None,
        *,
        client: Any | None = None,
    ) -> ArangoDBClient:
        """Connect and bootstrap the database and collections.

        Args:
            options: Connection options (environment defaults if None)
            client: Pre-built ``ArangoClient``-compatible object

        Raises:
            StoreConnectionError: If the database or a collection cannot be
                provisioned after the configured retries
        """
        options = options or ArangoOptions.from_env()
        logger.info("arangodb_connect", **options.redacted())
        arango = client if client is not None else build_arango_client(options)
        retrying = _retrying(options)
        try:
            database = retrying(ensure_database, arango, options)
            instance = cls(arango, database, options)
            retrying(instance.initialize_collections)
        except (ArangoError, requests.RequestException) as exc:
            logger.error("arangodb_connect_failed", error=str(exc))
            raise StoreConnectionError(f"failed to connect to ArangoDB: {exc}") from exc
        return instance

    @property
    def database(self) -> Any:
        return self._db

    def collection(self, name: str) -> Any:
        return self._db.collection(name)

    def initialize_collections(self) -> None:
        self.ensure_collection(self.options.persons_collection, edge=False)
        self.ensure_collection(self.options.relationships_collection, edge=True)

    def ensure_collection(self, name: str, edge: bool = False) -> bool:
        """Create ``name`` unless it exists. Returns True if this call created it."""
        if self._db.has_collection(name):
            return False
        try:
            self._db.create_collection(name, edge=edge)
        except CollectionCreateError as exc:
            if not is_duplicate_name(exc):
                raise
            logger.info("arangodb_collection_created_concurrently", collection=name)
            return False
        logger.info("arangodb_collection_created", collection=name, edge=edge)
        return True

    def ping(self) -> str:
        """Return the server version.

        Raises:
            StoreConnectionError: If the server does not answer
        """
        try:
            return self._db.version()
        except (ArangoError, requests.RequestException) as exc:
            raise StoreConnectionError(f"ping failed: {exc}") from exc

    def close(self) -> None:
        self._client.close()


def ensure_database(client: Any, options: ArangoOptions) -> Any:
    """Get or create the target database and return its handle."""
    sys_db = client.db("_system", username=options.username, password=options.password)
    if not sys_db.has_database(options.database):
        try:
            sys_db.create_database(options.database)
            logger.info("arangodb_database_created", database=options.database)
        except DatabaseCreateError as exc:
            if not is_duplicate_name(exc):
                raise
            logger.info("arangodb_database_created_concurrently", database=options.database)
    return client.db(options.database, username=options.username, password=options.password)
