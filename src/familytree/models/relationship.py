"""Relationship edge documents between two persons."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ValidationError
from .entity import ArangoDocument


class RelationType(str, Enum):
    """Closed set of relationship types accepted on creation."""

    PARENT = "parent"
    CHILD = "child"
    SPOUSE = "spouse"
    SIBLING = "sibling"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Relationship(ArangoDocument):
    """A directed edge in ``relationships``.

    ``relation_type`` stays a plain string so stored legacy values still load;
    the closed set is enforced by ``validate_new`` only.
    """

    from_: str = Field(alias="_from")
    to: str = Field(alias="_to")
    relation_type: str = Field(alias="relationType")
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    notes: str | None = None

    def involves(self, person_id: str) -> bool:
        return person_id in (self.from_, self.to)

    def validate_new(self) -> None:
        validate_endpoints_and_type(self.from_, self.to, self.relation_type)


def validate_endpoints_and_type(from_: str, to: str, relation_type: str) -> None:
    """Raise ``ValidationError`` unless the edge is well formed."""
    if not from_.strip():
        raise ValidationError("from is required", field="from")
    if not to.strip():
        raise ValidationError("to is required", field="to")
    if not relation_type.strip():
        raise ValidationError("relationType is required", field="relationType")
    if from_.strip() == to.strip():
        raise ValidationError("from and to must be different persons", field="to")
    if relation_type.strip() not in RelationType.values():
        raise ValidationError(
            f"invalid relationship type: {relation_type}. "
            f"Valid types are: {', '.join(RelationType.values())}",
            field="relationType",
        )


class RelationshipCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(default="", alias="from")
    to: str = Field(default="", alias="to")
    relation_type: str = Field(default="", alias="relationType")
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    notes: str = ""


class RelationshipUpdateRequest(BaseModel):
    """Partial update; empty fields leave the stored value alone."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(default="", alias="from")
    to: str = Field(default="", alias="to")
    relation_type: str = Field(default="", alias="relationType")
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    notes: str = ""
