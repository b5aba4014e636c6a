"""
So Quoteable Backend — Image Service
=====================================

What:  Records of Cloudinary-hosted images: base photos of people and the
       quote cards rendered from them.
Who:   Called by the /api/images and /api/generated-images routes, and by
       CloudinaryService after a successful upload.

Note:
    This service only touches the database. Uploading and deleting the
    underlying Cloudinary assets is CloudinaryService's job.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.exceptions import DatabaseError, NotFoundError, ValidationError
from quoteable.models.image import GeneratedImage, Image
from quoteable.models.person import utcnow
from quoteable.schemas.image import (
    GeneratedImageCreate,
    GeneratedImageResponse,
    ImageCreate,
    ImageResponse,
)
from quoteable.services.person_service import person_service
from quoteable.services.quote_service import quote_service

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_WINDOW_DAYS = 7


def _require_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(f"{field} is required and cannot be empty", field=field)
    return value


class ImageService:

    # ── Base images ───────────────────────────────────────────────────────

    async def get_image_or_404(self, db: AsyncSession, image_id: uuid.UUID) -> Image:
        try:
            image = await db.get(Image, image_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching image %s: %s", image_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the image. Please try again.",
                context={"image_id": str(image_id)},
            )
        if image is None:
            raise NotFoundError(resource="image", resource_id=str(image_id))
        return image

    async def list_images_by_person(self, db: AsyncSession, person_id: uuid.UUID) -> List[ImageResponse]:
        try:
            result = await db.execute(
                select(Image)
                .where(Image.person_id == person_id)
                .order_by(Image.created_at.desc())
            )
            images = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing images of %s: %s", person_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve images. Please try again.",
                context={"person_id": str(person_id)},
            )
        return [ImageResponse.model_validate(i) for i in images]

    async def get_image(self, db: AsyncSession, image_id: uuid.UUID) -> ImageResponse:
        image = await self.get_image_or_404(db, image_id)
        return ImageResponse.model_validate(image)

    async def create_image(self, db: AsyncSession, data: ImageCreate) -> ImageResponse:
        cloudinary_id = _require_text(data.cloudinary_id, "cloudinary_id")
        url = _require_text(data.url, "url")
        await person_service.get_person_or_404(db, data.person_id)

        image = Image(
            id=uuid.uuid4(),
            person_id=data.person_id,
            cloudinary_id=cloudinary_id,
            url=url,
            width=data.width,
            height=data.height,
            source=data.source,
            license=data.license,
            created_at=utcnow(),
        )
        try:
            db.add(image)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating image %r: %s", cloudinary_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the image. Please try again.",
                context={"cloudinary_id": cloudinary_id},
            )

        logger.info("Image recorded: %s (%s)", image.id, cloudinary_id)
        return ImageResponse.model_validate(image)

    async def remove_image(self, db: AsyncSession, image_id: uuid.UUID) -> uuid.UUID:
        image = await self.get_image_or_404(db, image_id)
        try:
            await db.delete(image)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting image %s: %s", image_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the image. Please try again.",
                context={"image_id": str(image_id)},
            )
        logger.info("Image deleted: %s", image_id)
        return image_id

    # ── Generated images (quote cards) ────────────────────────────────────

    async def get_generated_image_or_404(self, db: AsyncSession, generated_id: uuid.UUID) -> GeneratedImage:
        try:
            generated = await db.get(GeneratedImage, generated_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching generated image %s: %s", generated_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the generated image. Please try again.",
                context={"generated_image_id": str(generated_id)},
            )
        if generated is None:
            raise NotFoundError(resource="generated image", resource_id=str(generated_id))
        return generated

    async def list_generated_by_quote(
        self, db: AsyncSession, quote_id: uuid.UUID
    ) -> List[GeneratedImageResponse]:
        try:
            result = await db.execute(
                select(GeneratedImage)
                .where(GeneratedImage.quote_id == quote_id)
                .order_by(GeneratedImage.created_at.desc())
            )
            generated = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing cards of quote %s: %s", quote_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve generated images. Please try again.",
                context={"quote_id": str(quote_id)},
            )
        return [GeneratedImageResponse.model_validate(g) for g in generated]

    async def list_expiring_soon(
        self,
        db: AsyncSession,
        days: int = DEFAULT_EXPIRY_WINDOW_DAYS,
        now: datetime | None = None,
    ) -> List[GeneratedImageResponse]:
        """
        Cards whose expires_at falls in [now, now + days), soonest first.

        Already-expired cards are excluded: Cloudinary has deleted them.
        """
        if days < 0:
            raise ValidationError("days must be zero or positive", field="days")

        start = now or utcnow()
        threshold = start + timedelta(days=days)
        try:
            result = await db.execute(
                select(GeneratedImage)
                .where(GeneratedImage.expires_at >= start)
                .where(GeneratedImage.expires_at < threshold)
                .order_by(GeneratedImage.expires_at.asc())
            )
            generated = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing expiring cards: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve expiring images. Please try again.",
                context={"days": days},
            )
        return [GeneratedImageResponse.model_validate(g) for g in generated]

    async def create_generated_image(
        self, db: AsyncSession, data: GeneratedImageCreate
    ) -> GeneratedImageResponse:
        cloudinary_id = _require_text(data.cloudinary_id, "cloudinary_id")
        url = _require_text(data.url, "url")
        transformation = _require_text(data.transformation, "transformation")

        await quote_service.get_quote_or_404(db, data.quote_id)
        await self.get_image_or_404(db, data.image_id)

        generated = GeneratedImage(
            id=uuid.uuid4(),
            quote_id=data.quote_id,
            image_id=data.image_id,
            cloudinary_id=cloudinary_id,
            url=url,
            transformation=transformation,
            expires_at=data.expires_at,
            created_at=utcnow(),
        )
        try:
            db.add(generated)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating generated image: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the generated image. Please try again.",
                context={"quote_id": str(data.quote_id)},
            )

        logger.info(
            "Generated image recorded: %s (quote=%s, expires=%s)",
            generated.id, generated.quote_id, generated.expires_at.isoformat(),
        )
        return GeneratedImageResponse.model_validate(generated)

    async def remove_generated_image(self, db: AsyncSession, generated_id: uuid.UUID) -> uuid.UUID:
        generated = await self.get_generated_image_or_404(db, generated_id)
        try:
            await db.delete(generated)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting generated image %s: %s", generated_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the generated image. Please try again.",
                context={"generated_image_id": str(generated_id)},
            )
        return generated_id


image_service = ImageService()
