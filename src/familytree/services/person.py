"""Person use cases: request validation and whitelisted updates."""
from __future__ import annotations

from ..exceptions import ValidationError
from ..logging import get_logger
from ..models.person import Person, PersonCreateRequest, PersonUpdateRequest
from ..repositories.person import PersonRepository

logger = get_logger(__name__)


def is_valid_email(email: str) -> bool:
    """Basic shape check: one ``@`` with a dotted domain."""
    parts = email.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    return bool(local) and bool(domain) and "." in domain


def _require_id(person_id: str) -> None:
    if not person_id:
        raise ValidationError("person ID is required", field="id")


class PersonService:
    def __init__(self, repo: PersonRepository) -> None:
        self.repo = repo

    async def create_person(self, req: PersonCreateRequest) -> Person:
        self._validate_create_request(req)
        person = Person(
            first_name=req.first_name.strip(),
            last_name=req.last_name.strip(),
            birth_date=req.birth_date,
            death_date=req.death_date,
            gender=req.gender.strip() or None,
            email=req.email.strip() or None,
            phone=req.phone.strip() or None,
        )
        await self.repo.create(person)
        logger.info("person_created", id=person.id)
        return person

    async def get_person(self, person_id: str) -> Person:
        _require_id(person_id)
        return await self.repo.get_by_id(person_id)

    async def update_person(self, person_id: str, req: PersonUpdateRequest) -> Person:
        """Apply the non-empty fields of ``req`` to the stored person."""
        _require_id(person_id)
        if req.email.strip() and not is_valid_email(req.email.strip()):
            raise ValidationError("invalid email format", field="email")

        person = await self.repo.get_by_id(person_id)

        if req.first_name.strip():
            person.first_name = req.first_name.strip()
        if req.last_name.strip():
            person.last_name = req.last_name.strip()
        if req.birth_date is not None:
            person.birth_date = req.birth_date
        if req.death_date is not None:
            person.death_date = req.death_date
        if req.gender.strip():
            person.gender = req.gender.strip()
        if req.email.strip():
            person.email = req.email.strip()
        if req.phone.strip():
            person.phone = req.phone.strip()

        await self.repo.update(person_id, person)
        logger.info("person_updated", id=person.id, rev=person.rev)
        return person

    async def delete_person(self, person_id: str) -> None:
        # Relationships referencing this person are left in place
        _require_id(person_id)
        await self.repo.delete(person_id)
        logger.info("person_deleted", id=person_id)

    async def list_persons(self) -> list[Person]:
        return await self.repo.list()

    async def search_persons_by_name(self, first_name: str, last_name: str) -> list[Person]:
        return await self.repo.find_by_name(first_name.strip(), last_name.strip())

    def _validate_create_request(self, req: PersonCreateRequest) -> None:
        if not req.first_name.strip():
            raise ValidationError("firstName is required", field="firstName")
        if not req.last_name.strip():
            raise ValidationError("lastName is required", field="lastName")
        if req.email.strip() and not is_valid_email(req.email.strip()):
            raise ValidationError("invalid email format", field="email")
