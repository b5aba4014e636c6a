"""
So Quoteable Backend — Cloudinary Service
==========================================

What:  Uploads images to Cloudinary and records the result in the database.
Who:   Called by POST /api/images/upload and by QuoteCardService when a
       rendered card should be kept.

Presets:
    base-images       Permanent person photos, folder so-quotable/people.
                      Requires person_id; stored in `images`.
    generated-images  Rendered quote cards, folder so-quotable/generated.
                      Requires quote_id, image_id and transformation;
                      stored in `generated_images` with expires_at set
                      GENERATED_IMAGE_TTL_DAYS ahead (Cloudinary auto-deletes).

Error Handling Chain:
    upload fails → tenacity retries (exponential backoff + jitter)
    → all retries fail → circuit breaker records a failure → ImageServiceError
    → threshold reached → later uploads rejected instantly (CircuitBreakerOpenError)
    → recovery timeout elapses → one test upload (HALF_OPEN)

Why a thread:
    The Cloudinary SDK is synchronous (urllib3 under the hood). Running it
    with asyncio.to_thread keeps the event loop free during the upload.
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from quoteable.config import settings
from quoteable.exceptions import (
    CircuitBreakerOpenError,
    ImageServiceError,
    QuoteableError,
    ValidationError,
)
from quoteable.models.person import utcnow
from quoteable.schemas.image import (
    GeneratedImageCreate,
    ImageCreate,
    UploadRequest,
    UploadResponse,
)
from quoteable.services.circuit_breaker import CircuitBreaker
from quoteable.services.image_service import image_service
from quoteable.services.person_service import person_service
from quoteable.services.quote_service import quote_service

logger = logging.getLogger(__name__)

BASE_IMAGES_PRESET = "base-images"
GENERATED_IMAGES_PRESET = "generated-images"

# Network-level and API-level failures are worth another attempt
RETRYABLE_ERRORS = (ConnectionError, TimeoutError, CloudinaryError)


class CloudinaryService:
    """
    Signed uploads through the official Cloudinary SDK.

    A single instance is shared by the app so the circuit breaker sees
    every upload.
    """

    def __init__(self, wait: Optional[wait_base] = None):
        if settings.cloudinary_configured:
            cloudinary.config(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                secure=True,
            )

        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        self.wait = wait or wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
        )

        logger.info(
            "CloudinaryService initialized (configured=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds))",
            settings.cloudinary_configured,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    def folder_for(self, preset: str) -> str:
        if preset == BASE_IMAGES_PRESET:
            return settings.base_images_folder
        return settings.generated_images_folder

    async def _validate_references(self, db: AsyncSession, request: UploadRequest) -> None:
        if request.preset == BASE_IMAGES_PRESET:
            if request.person_id is None:
                raise ValidationError(
                    "person_id is required for base-images preset", field="person_id"
                )
            await person_service.get_person_or_404(db, request.person_id)
            return

        if request.quote_id is None or request.image_id is None:
            raise ValidationError(
                "quote_id and image_id are required for generated-images preset",
                field="quote_id" if request.quote_id is None else "image_id",
            )
        if not (request.transformation or "").strip():
            raise ValidationError(
                "transformation is required for generated-images preset",
                field="transformation",
            )
        await quote_service.get_quote_or_404(db, request.quote_id)
        await image_service.get_image_or_404(db, request.image_id)

    async def upload(self, db: AsyncSession, request: UploadRequest) -> UploadResponse:
        """
        Validate, upload, then record.

        Raises:
            ValidationError:         Empty file or missing preset parameters
            NotFoundError:           Referenced person / quote / image is missing
            CircuitBreakerOpenError: Too many recent failures
            ImageServiceError:       Cloudinary failed after all retries
        """
        file = request.file.strip()
        if not file:
            raise ValidationError("File is required and cannot be empty", field="file")

        await self._validate_references(db, request)
        result = await self.upload_file(file, request.preset)

        cloudinary_id = result["public_id"]
        url = result["secure_url"]
        width = result.get("width")
        height = result.get("height")

        if request.preset == BASE_IMAGES_PRESET:
            image = await image_service.create_image(
                db,
                ImageCreate(
                    person_id=request.person_id,
                    cloudinary_id=cloudinary_id,
                    url=url,
                    width=width,
                    height=height,
                    source=request.source,
                    license=request.license,
                ),
            )
            return UploadResponse(
                record_id=image.id,
                cloudinary_id=cloudinary_id,
                url=url,
                width=width,
                height=height,
            )

        expires_at = utcnow() + timedelta(days=settings.generated_image_ttl_days)
        generated = await image_service.create_generated_image(
            db,
            GeneratedImageCreate(
                quote_id=request.quote_id,
                image_id=request.image_id,
                cloudinary_id=cloudinary_id,
                url=url,
                transformation=request.transformation.strip(),
                expires_at=expires_at,
            ),
        )
        return UploadResponse(
            record_id=generated.id,
            cloudinary_id=cloudinary_id,
            url=url,
            width=width,
            height=height,
            expires_at=expires_at,
        )

    async def upload_file(self, file: str, preset: str) -> Dict[str, Any]:
        """
        Upload through the circuit breaker and retry policy.

        Returns the raw Cloudinary response (public_id, secure_url, width, ...).
        """
        self.circuit_breaker.can_execute()

        start_time = time.monotonic()
        try:
            result = await self._upload_with_retry(file, preset)
        except CircuitBreakerOpenError:
            raise
        except QuoteableError:
            self.circuit_breaker.record_failure()
            raise
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "Cloudinary upload failed after %d attempts (preset=%s): %s",
                settings.retry_max_attempts, preset, str(e),
            )
            raise ImageServiceError(
                message=f"Failed to upload image to Cloudinary: {e}",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"preset": preset, "attempts": settings.retry_max_attempts},
            )

        self.circuit_breaker.record_success()
        logger.info(
            "Cloudinary upload completed in %.0fms: %s",
            (time.monotonic() - start_time) * 1000,
            result.get("public_id"),
        )
        return result

    async def _upload_with_retry(self, file: str, preset: str) -> Dict[str, Any]:
        # Retry wraps only the SDK call; breaker checks stay outside it
        options: Dict[str, Any] = {
            "upload_preset": preset,
            "folder": self.folder_for(preset),
            "resource_type": "image",
        }
        if preset == GENERATED_IMAGES_PRESET:
            options["unique_filename"] = True

        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(settings.retry_max_attempts),
            wait=self.wait,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                result = await asyncio.to_thread(cloudinary.uploader.upload, file, **options)
                if not result or "public_id" not in result or "secure_url" not in result:
                    raise ImageServiceError(
                        message="Cloudinary returned an incomplete upload response",
                        context={"preset": preset},
                    )
        return result


cloudinary_service = CloudinaryService()
