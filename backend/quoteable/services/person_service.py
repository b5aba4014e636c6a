"""
So Quoteable Backend — Person Service
======================================

What:  CRUD business rules for people (quote authors).
Who:   Called by the /api/people routes and by QuoteCardService for attribution.

Rules:
    - name is required and cannot be blank; it is stored trimmed
    - slug is derived from the name when omitted; an explicit slug cannot
      be blank and is stored trimmed
    - every update bumps updated_at
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.exceptions import DatabaseError, NotFoundError, ValidationError
from quoteable.lib.slug import slugify
from quoteable.models.person import Person, utcnow
from quoteable.schemas.person import PersonCreate, PersonResponse, PersonUpdate

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


class PersonService:
    """Stateless: every method receives the request's AsyncSession."""

    async def get_person_or_404(self, db: AsyncSession, person_id: uuid.UUID) -> Person:
        try:
            person = await db.get(Person, person_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching person %s: %s", person_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the person. Please try again.",
                context={"person_id": str(person_id)},
            )
        if person is None:
            raise NotFoundError(resource="person", resource_id=str(person_id))
        return person

    async def list_people(self, db: AsyncSession, limit: int = DEFAULT_LIST_LIMIT) -> List[PersonResponse]:
        try:
            result = await db.execute(
                select(Person).order_by(Person.created_at.desc()).limit(limit)
            )
            people = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing people: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve people. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [PersonResponse.model_validate(p) for p in people]

    async def get_person(self, db: AsyncSession, person_id: uuid.UUID) -> PersonResponse:
        person = await self.get_person_or_404(db, person_id)
        return PersonResponse.model_validate(person)

    async def get_person_by_slug(self, db: AsyncSession, slug: str) -> PersonResponse:
        try:
            result = await db.execute(
                select(Person).where(Person.slug == slug.strip()).limit(1)
            )
            person = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching person by slug %r: %s", slug, str(e))
            raise DatabaseError(
                message="Could not retrieve the person. Please try again.",
                context={"slug": slug},
            )
        if person is None:
            raise NotFoundError(resource="person", resource_id=slug)
        return PersonResponse.model_validate(person)

    async def create_person(self, db: AsyncSession, data: PersonCreate) -> PersonResponse:
        name = data.name.strip()
        if not name:
            raise ValidationError("Name is required and cannot be empty", field="name")

        if data.slug is None:
            slug = slugify(name, fallback="person")
        else:
            slug = data.slug.strip()
            if not slug:
                raise ValidationError("Slug is required and cannot be empty", field="slug")

        now = utcnow()
        person = Person(
            id=uuid.uuid4(),
            name=name,
            slug=slug,
            bio=data.bio,
            birth_date=data.birth_date,
            death_date=data.death_date,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(person)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating person %r: %s", slug, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the person. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Person created: %s (slug=%s)", person.id, person.slug)
        return PersonResponse.model_validate(person)

    async def update_person(
        self,
        db: AsyncSession,
        person_id: uuid.UUID,
        data: PersonUpdate,
    ) -> PersonResponse:
        updates = data.model_dump(exclude_unset=True)

        # Explicit nulls for required columns are treated like blanks
        if "name" in updates:
            name = (updates["name"] or "").strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="name")
            updates["name"] = name
        if "slug" in updates:
            slug = (updates["slug"] or "").strip()
            if not slug:
                raise ValidationError("Slug cannot be empty", field="slug")
            updates["slug"] = slug

        person = await self.get_person_or_404(db, person_id)
        for key, value in updates.items():
            setattr(person, key, value)
        person.updated_at = utcnow()

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating person %s: %s", person_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the person. Please try again.",
                context={"person_id": str(person_id)},
            )
        return PersonResponse.model_validate(person)

    async def remove_person(self, db: AsyncSession, person_id: uuid.UUID) -> uuid.UUID:
        """Hard delete. Quotes and images of the person go with it (ON DELETE CASCADE)."""
        person = await self.get_person_or_404(db, person_id)
        try:
            await db.delete(person)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting person %s: %s", person_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the person. Please try again.",
                context={"person_id": str(person_id)},
            )
        logger.info("Person deleted: %s", person_id)
        return person_id


person_service = PersonService()
