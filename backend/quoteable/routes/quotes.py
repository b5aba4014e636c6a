"""
So Quoteable Backend — Quote Route Handlers
============================================

What:  CRUD endpoints for quotes, optionally filtered by person.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.database import get_db_session
from quoteable.schemas.common import DeletedResponse, ErrorResponse
from quoteable.schemas.quote import QuoteCreate, QuoteResponse, QuoteUpdate
from quoteable.services.quote_service import quote_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quotes"])


@router.get(
    "/quotes",
    response_model=list[QuoteResponse],
    summary="List quotes",
    description="Newest first. Pass person_id to list one person's quotes.",
)
async def list_quotes(
    response: Response,
    person_id: Optional[UUID] = Query(default=None, description="Only quotes by this person"),
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db_session),
) -> list[QuoteResponse]:
    quotes = await quote_service.list_quotes(db, person_id=person_id, limit=limit)
    response.headers["X-Total-Count"] = str(len(quotes))
    return quotes


@router.get(
    "/quotes/{quote_id}",
    response_model=QuoteResponse,
    responses={404: {"description": "Quote not found", "model": ErrorResponse}},
    summary="Get a quote",
)
async def get_quote(
    quote_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteResponse:
    return await quote_service.get_quote(db, quote_id)


@router.post(
    "/quotes",
    response_model=QuoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank quote text", "model": ErrorResponse},
        404: {"description": "Person not found", "model": ErrorResponse},
    },
    summary="Create a quote",
)
async def create_quote(
    body: QuoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteResponse:
    return await quote_service.create_quote(db, body)


@router.patch(
    "/quotes/{quote_id}",
    response_model=QuoteResponse,
    responses={
        400: {"description": "Blank quote text", "model": ErrorResponse},
        404: {"description": "Quote not found", "model": ErrorResponse},
    },
    summary="Update a quote",
)
async def update_quote(
    quote_id: UUID,
    body: QuoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteResponse:
    return await quote_service.update_quote(db, quote_id, body)


@router.delete(
    "/quotes/{quote_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Quote not found", "model": ErrorResponse}},
    summary="Delete a quote",
)
async def delete_quote(
    quote_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    removed = await quote_service.remove_quote(db, quote_id)
    return DeletedResponse(id=removed)
