"""
So Quoteable Backend — People Route Handlers
=============================================

What:  CRUD endpoints for people (quote authors).
Who:   Called by the quote browser and the admin seeding scripts.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.database import get_db_session
from quoteable.schemas.common import DeletedResponse, ErrorResponse
from quoteable.schemas.person import PersonCreate, PersonResponse, PersonUpdate
from quoteable.services.person_service import person_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["People"])


@router.get(
    "/people",
    response_model=list[PersonResponse],
    summary="List people",
    description="Newest first. X-Total-Count carries the number of items returned.",
)
async def list_people(
    response: Response,
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db_session),
) -> list[PersonResponse]:
    people = await person_service.list_people(db, limit=limit)
    response.headers["X-Total-Count"] = str(len(people))
    return people


@router.get(
    "/people/by-slug/{slug}",
    response_model=PersonResponse,
    responses={404: {"description": "No person with that slug", "model": ErrorResponse}},
    summary="Get a person by slug",
)
async def get_person_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await person_service.get_person_by_slug(db, slug)


@router.get(
    "/people/{person_id}",
    response_model=PersonResponse,
    responses={404: {"description": "Person not found", "model": ErrorResponse}},
    summary="Get a person by ID",
)
async def get_person(
    person_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await person_service.get_person(db, person_id)


@router.post(
    "/people",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Blank name or slug", "model": ErrorResponse}},
    summary="Create a person",
    description="The slug is derived from the name when omitted.",
)
async def create_person(
    body: PersonCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await person_service.create_person(db, body)


@router.patch(
    "/people/{person_id}",
    response_model=PersonResponse,
    responses={
        400: {"description": "Blank name or slug", "model": ErrorResponse},
        404: {"description": "Person not found", "model": ErrorResponse},
    },
    summary="Update a person",
)
async def update_person(
    person_id: UUID,
    body: PersonUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await person_service.update_person(db, person_id, body)


@router.delete(
    "/people/{person_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Person not found", "model": ErrorResponse}},
    summary="Delete a person",
    description="Also deletes the person's quotes and images.",
)
async def delete_person(
    person_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    removed = await person_service.remove_person(db, person_id)
    return DeletedResponse(id=removed)
