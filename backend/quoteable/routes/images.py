"""
So Quoteable Backend — Image Route Handlers
============================================

What:  Base image records, generated quote card records, and Cloudinary uploads.

Two ways to add an image:
    POST /api/images         Register an asset that is already in Cloudinary
    POST /api/images/upload  Upload through the backend (base-images or
                             generated-images preset); the record is created
                             from Cloudinary's response
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.database import get_db_session
from quoteable.schemas.common import DeletedResponse, ErrorResponse
from quoteable.schemas.image import (
    GeneratedImageCreate,
    GeneratedImageResponse,
    ImageCreate,
    ImageResponse,
    UploadRequest,
    UploadResponse,
)
from quoteable.services.cloudinary_service import cloudinary_service
from quoteable.services.image_service import DEFAULT_EXPIRY_WINDOW_DAYS, image_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Images"])


# ── Base images ───────────────────────────────────────────────────────────

@router.get(
    "/people/{person_id}/images",
    response_model=list[ImageResponse],
    summary="List a person's images",
)
async def list_person_images(
    person_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> list[ImageResponse]:
    images = await image_service.list_images_by_person(db, person_id)
    response.headers["X-Total-Count"] = str(len(images))
    return images


@router.post(
    "/images",
    response_model=ImageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank cloudinary_id or url", "model": ErrorResponse},
        404: {"description": "Person not found", "model": ErrorResponse},
    },
    summary="Register an existing Cloudinary image",
)
async def create_image(
    body: ImageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ImageResponse:
    return await image_service.create_image(db, body)


@router.post(
    "/images/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Empty file or missing preset parameters", "model": ErrorResponse},
        404: {"description": "Referenced person, quote or image not found", "model": ErrorResponse},
        503: {"description": "Cloudinary unavailable", "model": ErrorResponse},
    },
    summary="Upload an image to Cloudinary",
    description=(
        "Uploads a data URI or public URL with the base-images or generated-images "
        "preset and records the result. Generated images expire after the configured TTL."
    ),
)
async def upload_image(
    body: UploadRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    return await cloudinary_service.upload(db, body)


@router.get(
    "/images/{image_id}",
    response_model=ImageResponse,
    responses={404: {"description": "Image not found", "model": ErrorResponse}},
    summary="Get an image",
)
async def get_image(
    image_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ImageResponse:
    return await image_service.get_image(db, image_id)


@router.delete(
    "/images/{image_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Image not found", "model": ErrorResponse}},
    summary="Delete an image record",
    description="Removes the record only; the Cloudinary asset is left in place.",
)
async def delete_image(
    image_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    removed = await image_service.remove_image(db, image_id)
    return DeletedResponse(id=removed)


# ── Generated images ──────────────────────────────────────────────────────

@router.get(
    "/quotes/{quote_id}/generated-images",
    response_model=list[GeneratedImageResponse],
    summary="List cards rendered for a quote",
)
async def list_quote_generated_images(
    quote_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> list[GeneratedImageResponse]:
    generated = await image_service.list_generated_by_quote(db, quote_id)
    response.headers["X-Total-Count"] = str(len(generated))
    return generated


@router.get(
    "/generated-images/expiring",
    response_model=list[GeneratedImageResponse],
    summary="List cards expiring soon",
    description="Cards whose expiry falls within the next `days` days, soonest first.",
)
async def list_expiring_generated_images(
    response: Response,
    days: int = Query(default=DEFAULT_EXPIRY_WINDOW_DAYS, ge=0, le=365),
    db: AsyncSession = Depends(get_db_session),
) -> list[GeneratedImageResponse]:
    generated = await image_service.list_expiring_soon(db, days=days)
    response.headers["X-Total-Count"] = str(len(generated))
    return generated


@router.post(
    "/generated-images",
    response_model=GeneratedImageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank field", "model": ErrorResponse},
        404: {"description": "Quote or image not found", "model": ErrorResponse},
    },
    summary="Record a rendered card",
)
async def create_generated_image(
    body: GeneratedImageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> GeneratedImageResponse:
    return await image_service.create_generated_image(db, body)


@router.get(
    "/generated-images/{generated_id}",
    response_model=GeneratedImageResponse,
    responses={404: {"description": "Generated image not found", "model": ErrorResponse}},
    summary="Get a rendered card record",
)
async def get_generated_image(
    generated_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> GeneratedImageResponse:
    generated = await image_service.get_generated_image_or_404(db, generated_id)
    return GeneratedImageResponse.model_validate(generated)


@router.delete(
    "/generated-images/{generated_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Generated image not found", "model": ErrorResponse}},
    summary="Delete a rendered card record",
)
async def delete_generated_image(
    generated_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    removed = await image_service.remove_generated_image(db, generated_id)
    return DeletedResponse(id=removed)
