"""Relationship use cases."""
from __future__ import annotations

from ..exceptions import ValidationError
from ..logging import get_logger
from ..models.relationship import (
    Relationship,
    RelationshipCreateRequest,
    RelationshipUpdateRequest,
    validate_endpoints_and_type,
)
from ..repositories.relationship import RelationshipRepository

logger = get_logger(__name__)


class RelationshipService:
    """Validation and partial updates on top of ``RelationshipRepository``.

    Endpoints are not checked against existing persons; a relationship may
    outlive the persons it references.
    """

    def __init__(self, repo: RelationshipRepository) -> None:
        self.repo = repo

    async def create_relationship(self, req: RelationshipCreateRequest) -> Relationship:
        validate_endpoints_and_type(req.from_, req.to, req.relation_type)
        relationship = Relationship(
            from_=req.from_.strip(),
            to=req.to.strip(),
            relation_type=req.relation_type.strip(),
            start_date=req.start_date,
            end_date=req.end_date,
            notes=req.notes.strip() or None,
        )
        await self.repo.create(relationship)
        logger.info("relationship_created", id=relationship.id, type=relationship.relation_type)
        return relationship

    async def get_relationship(self, relationship_id: str) -> Relationship:
        if not relationship_id:
            raise ValidationError("relationship ID is required", field="id")
        return await self.repo.get_by_id(relationship_id)

    async def update_relationship(
        self, relationship_id: str, req: RelationshipUpdateRequest
    ) -> Relationship:
        """Apply the non-empty fields of ``req``; the type is not re-validated."""
        if not relationship_id:
            raise ValidationError("relationship ID is required", field="id")

        relationship = await self.repo.get_by_id(relationship_id)

        if req.from_.strip():
            relationship.from_ = req.from_.strip()
        if req.to.strip():
            relationship.to = req.to.strip()
        if req.relation_type.strip():
            relationship.relation_type = req.relation_type.strip()
        if req.start_date is not None:
            relationship.start_date = req.start_date
        if req.end_date is not None:
            relationship.end_date = req.end_date
        if req.notes.strip():
            relationship.notes = req.notes.strip()

        await self.repo.update(relationship_id, relationship)
        logger.info("relationship_updated", id=relationship.id, rev=relationship.rev)
        return relationship

    async def delete_relationship(self, relationship_id: str) -> None:
        if not relationship_id:
            raise ValidationError("relationship ID is required", field="id")
        await self.repo.delete(relationship_id)
        logger.info("relationship_deleted", id=relationship_id)

    async def list_relationships(self) -> list[Relationship]:
        return await self.repo.list()

    async def relationships_for_person(self, person_id: str) -> list[Relationship]:
        if not person_id:
            raise ValidationError("person ID is required", field="personId")
        return await self.repo.find_by_person(person_id)

    async def relationships_by_type(self, relation_type: str) -> list[Relationship]:
        if not relation_type:
            raise ValidationError("relationship type is required", field="relationType")
        return await self.repo.find_by_type(relation_type)
