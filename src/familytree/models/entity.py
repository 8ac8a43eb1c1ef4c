"""Entity contract shared by every document type the repositories persist."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


@runtime_checkable
class Entity(Protocol):
    """Capabilities the generic repository needs from an entity."""

    def set_metadata(self, key: str, id: str, rev: str) -> None:
        """Record the store-assigned identity triple."""
        ...

    def set_timestamps(self, created_at: datetime, updated_at: datetime) -> None:
        """Set timestamps; an existing ``created_at`` is kept."""
        ...

    def get_updated_at(self) -> datetime | None:
        ...


class ArangoDocument(BaseModel):
    """Base model for documents stored in an ArangoDB collection.

    Python attributes are snake_case; aliases are the stored field names.
    The identity triple is only ever written from store responses.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    IDENTITY_FIELDS: ClassVar[frozenset[str]] = frozenset({"key", "id", "rev"})

    key: str | None = Field(default=None, alias="_key")
    id: str | None = Field(default=None, alias="_id")
    rev: str | None = Field(default=None, alias="_rev")

    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        # Documents written without an offset are read as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def set_metadata(self, key: str, id: str, rev: str) -> None:
        self.key = key
        self.id = id
        self.rev = rev

    def set_timestamps(self, created_at: datetime, updated_at: datetime) -> None:
        if self.created_at is None:
            self.created_at = created_at
        self.updated_at = updated_at

    def get_updated_at(self) -> datetime | None:
        return self.updated_at

    def validate_new(self) -> None:
        """Create-time checks; raise ``ValidationError`` on bad input."""

    def to_document(self) -> dict[str, Any]:
        """Stored representation without the identity triple or unset fields."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=set(self.IDENTITY_FIELDS),
        )
