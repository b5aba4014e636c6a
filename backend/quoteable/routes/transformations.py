"""
So Quoteable Backend — Transformation Route Handlers
=====================================================

What:  Exposes the transformation URL compiler over HTTP.

    POST /api/transformations/url  Compile an arbitrary directive list
    POST /api/quote-cards          Build (and optionally keep) a quote card

Both endpoints are pure URL assembly unless persist=true; nothing is
fetched from Cloudinary. Invalid directives come back as 400 with the
compiler's message, e.g. "Opacity must be between 0 and 100".
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.config import settings
from quoteable.database import get_db_session
from quoteable.lib.transformations import build_image_url, serialize_transformations
from quoteable.schemas.common import ErrorResponse
from quoteable.schemas.transformation import (
    BuildUrlRequest,
    BuildUrlResponse,
    QuoteCardRequest,
    QuoteCardResponse,
)
from quoteable.services.quote_card_service import quote_card_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Transformations"])


@router.post(
    "/transformations/url",
    response_model=BuildUrlResponse,
    responses={400: {"description": "Invalid directive or missing identifiers", "model": ErrorResponse}},
    summary="Build a Cloudinary delivery URL",
)
async def build_url(body: BuildUrlRequest) -> BuildUrlResponse:
    directives = [spec.to_directive() for spec in body.transformations]
    cloud_name = body.cloud_name if body.cloud_name is not None else settings.cloudinary_cloud_name
    url = build_image_url(body.cloudinary_id, directives, cloud_name, host=settings.cloudinary_host)
    return BuildUrlResponse(url=url, transformation=serialize_transformations(directives))


@router.post(
    "/quote-cards",
    response_model=QuoteCardResponse,
    responses={
        400: {"description": "Invalid card style", "model": ErrorResponse},
        404: {"description": "Quote, image or person not found", "model": ErrorResponse},
        503: {"description": "Upload failed (persist=true only)", "model": ErrorResponse},
    },
    summary="Build a quote card URL",
    description=(
        "Draws the quote and its attribution over a base image. "
        "With persist=true the card is uploaded and recorded with an expiry date."
    ),
)
async def create_quote_card(
    body: QuoteCardRequest,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteCardResponse:
    return await quote_card_service.render(db, body)
