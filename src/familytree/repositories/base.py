"""Generic repository mapping an entity type onto one ArangoDB collection.

All operations are coroutines. The blocking python-arango call runs in a
worker thread; callers bound it with ``asyncio.timeout`` or cancel the task.
Cancellation and the caller's timeout propagate unchanged, store failures
become ``NotFoundError`` or ``PersistenceError``. A write already handed to the
driver is waited out on cancellation, so a committed document is always
reflected on the entity before ``CancelledError`` reaches the caller.
"""
from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Generic, TypeVar

import pydantic
import requests
from arango.exceptions import ArangoError, ArangoServerError, DocumentRevisionError

from ..exceptions import NotFoundError, PersistenceError, RevisionConflictError
from ..logging import get_logger
from ..models.entity import ArangoDocument

logger = get_logger(__name__)

E = TypeVar("E", bound=ArangoDocument)

# ArangoDB error number for a missing document
ERROR_DOCUMENT_NOT_FOUND = 1202

STORE_ERRORS: tuple[type[Exception], ...] = (ArangoError, requests.RequestException)

LIST_QUERY = "FOR doc IN @@collection RETURN doc"


def _utcnow() -> datetime:
    return datetime.now(UTC)


async def _committed(write: asyncio.Future) -> Any | None:
    """Wait out a write whose caller was cancelled; its result if it succeeded."""
    while not write.done():
        try:
            await asyncio.wait({write})
        except asyncio.CancelledError:
            continue
    if write.cancelled() or write.exception() is not None:
        return None
    return write.result()


def is_not_found(exc: Exception) -> bool:
    return isinstance(exc, ArangoServerError) and exc.error_code == ERROR_DOCUMENT_NOT_FOUND


def handle_field(document_id: str) -> str:
    """``_id`` for ``collection/key`` handles, ``_key`` for bare keys."""
    return "_id" if "/" in document_id else "_key"


class BaseRepository(Generic[E]):
    """CRUD for one entity type against one collection.

    The identity triple (``_key``, ``_id``, ``_rev``) is copied onto entities
    from store responses only, and only after the write succeeded.
    """

    def __init__(self, database: Any, collection_name: str, entity_type: type[E]) -> None:
        self._db = database
        self._collection = database.collection(collection_name)
        self.collection_name = collection_name
        self.entity_type = entity_type

    async def create(self, entity: E) -> E:
        """Insert a new document and stamp identity and timestamps on ``entity``.

        Raises:
            ValidationError: If the entity fails its create-time checks
            PersistenceError: If the insert fails; ``entity`` is left untouched
        """
        entity.validate_new()

        now = _utcnow()
        staged = entity.model_copy(deep=True)
        staged.set_timestamps(now, now)
        document = staged.to_document()

        def commit(meta: dict[str, Any]) -> None:
            entity.set_timestamps(now, now)
            entity.set_metadata(meta["_key"], meta["_id"], meta["_rev"])

        try:
            await self._write(commit, self._collection.insert, document)
        except STORE_ERRORS as exc:
            raise self._persistence_error("create", exc) from exc

        logger.debug("entity_created", collection=self.collection_name, key=entity.key)
        return entity

    async def get_by_id(self, id: str) -> E:
        """Fetch by key or ``collection/key`` handle.

        Raises:
            NotFoundError: If no such document exists
            PersistenceError: On any other store failure
        """
        try:
            document = await asyncio.to_thread(self._collection.get, id)
        except STORE_ERRORS as exc:
            if is_not_found(exc):
                raise NotFoundError(self.collection_name, id) from exc
            raise self._persistence_error("get", exc, id) from exc

        if document is None:
            raise NotFoundError(self.collection_name, id)

        entity = self._materialize(document, "get")
        entity.set_metadata(document["_key"], document["_id"], document["_rev"])
        return entity

    async def update(self, id: str, entity: E) -> E:
        """Replace the stored document at ``id`` with ``entity``.

        ``created_at`` is kept; ``updated_at`` moves strictly forward. When the
        entity carries a revision, the store rejects the write if the document
        changed since it was read.

        Raises:
            NotFoundError: If no such document exists
            RevisionConflictError: If ``entity.rev`` is stale
            PersistenceError: On any other store failure
        """
        previous = entity.get_updated_at()
        now = _utcnow()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        created = entity.created_at or previous or now

        staged = entity.model_copy(deep=True)
        staged.set_timestamps(created, now)
        document = staged.to_document()
        document[handle_field(id)] = id
        if entity.rev:
            document["_rev"] = entity.rev

        def commit(meta: dict[str, Any]) -> None:
            entity.set_timestamps(created, now)
            entity.set_metadata(meta["_key"], meta["_id"], meta["_rev"])

        try:
            await self._write(
                commit, self._collection.replace, document, check_rev=bool(entity.rev)
            )
        except DocumentRevisionError as exc:
            logger.warning("entity_revision_conflict", collection=self.collection_name, id=id)
            raise RevisionConflictError("update", self.collection_name, str(exc)) from exc
        except STORE_ERRORS as exc:
            if is_not_found(exc):
                raise NotFoundError(self.collection_name, id) from exc
            raise self._persistence_error("update", exc, id) from exc

        logger.debug("entity_updated", collection=self.collection_name, key=entity.key, rev=entity.rev)
        return entity

    async def delete(self, id: str) -> None:
        """Remove the document at ``id``. There is no soft delete.

        Raises:
            NotFoundError: If no such document exists
            PersistenceError: On any other store failure
        """
        try:
            await asyncio.to_thread(self._collection.delete, id)
        except STORE_ERRORS as exc:
            if is_not_found(exc):
                raise NotFoundError(self.collection_name, id) from exc
            raise self._persistence_error("delete", exc, id) from exc
        logger.debug("entity_deleted", collection=self.collection_name, id=id)

    async def list(self) -> list[E]:
        """Every document of the collection, in store order. Never None."""
        return await self._query(LIST_QUERY, {}, "list")

    async def _write(
        self,
        commit: Callable[[dict[str, Any]], None],
        call: Callable[..., dict[str, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Run a blocking write and pass the store's response to ``commit``.

        The driver call is shielded from cancellation. If the caller is
        cancelled mid-write, the call is waited out and ``commit`` still runs
        when the store accepted the write; then ``CancelledError`` is re-raised.
        """
        write = asyncio.ensure_future(asyncio.to_thread(call, *args, **kwargs))
        try:
            meta = await asyncio.shield(write)
        except asyncio.CancelledError:
            meta = await _committed(write)
            if meta is not None:
                commit(meta)
                logger.info(
                    "write_committed_after_cancel",
                    collection=self.collection_name,
                    key=meta["_key"],
                )
            raise
        commit(meta)

    async def _query(self, aql: str, bind_vars: dict[str, Any], operation: str) -> list[E]:
        """Run a parameterized AQL query bound to this collection.

        ``aql`` reads the collection as ``@@collection``; every value comes in
        through ``bind_vars`` and is never formatted into the query text.
        """
        params = {"@collection": self.collection_name, **bind_vars}

        def run() -> list[dict[str, Any]]:
            with self._db.aql.execute(aql, bind_vars=params) as cursor:
                return list(cursor)

        try:
            documents = await asyncio.to_thread(run)
        except STORE_ERRORS as exc:
            raise self._persistence_error(operation, exc) from exc
        return [self._materialize(doc, operation) for doc in documents]

    def _materialize(self, document: dict[str, Any], operation: str) -> E:
        try:
            return self.entity_type.model_validate(document)
        except pydantic.ValidationError as exc:
            raise self._persistence_error(operation, exc, document.get("_id")) from exc

    def _persistence_error(
        self, operation: str, exc: Exception, id: str | None = None
    ) -> PersistenceError:
        logger.warning(
            "repository_operation_failed",
            operation=operation,
            collection=self.collection_name,
            id=id,
            error=str(exc),
        )
        return PersistenceError(operation, self.collection_name, str(exc))
