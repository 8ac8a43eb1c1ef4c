"""Person vertex documents and the requests that create or change them."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ValidationError
from .entity import ArangoDocument


class Person(ArangoDocument):
    """A person in the family tree (vertex document in ``persons``)."""

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    birth_date: datetime | None = Field(default=None, alias="birthDate")
    death_date: datetime | None = Field(default=None, alias="deathDate")
    gender: str | None = None
    email: str | None = None
    phone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def validate_new(self) -> None:
        if not self.first_name.strip():
            raise ValidationError("firstName is required", field="firstName")
        if not self.last_name.strip():
            raise ValidationError("lastName is required", field="lastName")


class PersonCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    birth_date: datetime | None = Field(default=None, alias="birthDate")
    death_date: datetime | None = Field(default=None, alias="deathDate")
    gender: str = ""
    email: str = ""
    phone: str = ""


class PersonUpdateRequest(BaseModel):
    """Partial update; empty fields leave the stored value alone."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    birth_date: datetime | None = Field(default=None, alias="birthDate")
    death_date: datetime | None = Field(default=None, alias="deathDate")
    gender: str = ""
    email: str = ""
    phone: str = ""
