"""
So Quoteable Backend — Quote Card Service
==========================================

What:  Renders a quote on top of a person's photo as a Cloudinary delivery URL.
How:   Builds the directive chain below and hands it to the URL compiler.
       Nothing is rendered server-side; Cloudinary draws the card the first
       time the URL is fetched.

Default chain (1200x630, social-card size):
    1. resize      w_1200,h_630,c_fill
    2. backdrop    l_black,e_colorize:60,fl_layer_apply
    3. quote       bold white text, centered, wrapped at width - 200
    4. attribution "- <name>" anchored south, 80px up
    5. optimize    f_auto,q_auto

With persist=True the rendered URL is also uploaded with the
generated-images preset, which records it with an expiry date.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.config import settings
from quoteable.lib.transformations import (
    Directive,
    Gravity,
    add_background_overlay,
    add_text_overlay,
    build_image_url,
    optimize_image,
    resize_image,
    serialize_transformations,
)
from quoteable.schemas.image import GeneratedImageResponse, UploadRequest
from quoteable.schemas.transformation import QuoteCardRequest, QuoteCardResponse
from quoteable.services.cloudinary_service import GENERATED_IMAGES_PRESET, cloudinary_service
from quoteable.services.image_service import image_service
from quoteable.services.person_service import person_service
from quoteable.services.quote_service import quote_service

logger = logging.getLogger(__name__)

# Horizontal room left around the wrapped quote text
TEXT_MARGIN = 200
ATTRIBUTION_OFFSET = 80


def quote_card_transformations(
    quote_text: str,
    author: str,
    width: int = 1200,
    height: int = 630,
    overlay_opacity: float = 60,
    overlay_color: str = "black",
    font_family: str = "Arial",
    quote_font_size: int = 52,
    attribution_font_size: int = 36,
    text_color: str = "ffffff",
    attribution_color: str = "ffffff",
    format: str = "auto",
    quality: Union[int, str] = "auto",
) -> List[Directive]:
    """Directive chain for one quote card, in drawing order."""
    chain: List[Directive] = [
        resize_image(width, height),
        add_background_overlay(overlay_opacity, overlay_color),
        add_text_overlay(
            quote_text,
            font_family=font_family,
            font_size=quote_font_size,
            font_weight="bold",
            color=text_color,
            gravity=Gravity.CENTER,
            max_width=max(width - TEXT_MARGIN, 1),
        ),
    ]
    if author.strip():
        chain.append(
            add_text_overlay(
                f"- {author.strip()}",
                font_family=font_family,
                font_size=attribution_font_size,
                color=attribution_color,
                gravity=Gravity.SOUTH,
                y_offset=ATTRIBUTION_OFFSET,
            )
        )
    chain.append(optimize_image(format, quality))
    return chain


def _or_default(value, default):
    return default if value is None else value


class QuoteCardService:

    async def render(self, db: AsyncSession, request: QuoteCardRequest) -> QuoteCardResponse:
        """
        Raises:
            NotFoundError:           quote, image, or the quote's person is missing
            TransformationError:     invalid style values, or no cloud name configured
            ImageServiceError / CircuitBreakerOpenError: persist upload failed
        """
        quote = await quote_service.get_quote_or_404(db, request.quote_id)
        image = await image_service.get_image_or_404(db, request.image_id)
        person = await person_service.get_person_or_404(db, quote.person_id)

        chain = quote_card_transformations(
            quote.text,
            person.name,
            width=_or_default(request.width, settings.card_width),
            height=_or_default(request.height, settings.card_height),
            overlay_opacity=_or_default(request.overlay_opacity, settings.card_overlay_opacity),
            overlay_color=request.overlay_color,
            font_family=_or_default(request.font_family, settings.card_font_family),
            quote_font_size=_or_default(request.quote_font_size, settings.card_quote_font_size),
            attribution_font_size=_or_default(
                request.attribution_font_size, settings.card_attribution_font_size
            ),
            text_color=request.text_color,
            attribution_color=request.attribution_color,
            format=request.format,
            quality=request.quality,
        )
        transformation = serialize_transformations(chain)
        url = build_image_url(
            image.cloudinary_id, chain, settings.cloudinary_cloud_name, host=settings.cloudinary_host
        )

        logger.info(
            "Quote card built: quote=%s image=%s (%d directives)",
            quote.id, image.id, len(chain),
        )

        generated: Optional[GeneratedImageResponse] = None
        if request.persist:
            uploaded = await cloudinary_service.upload(
                db,
                UploadRequest(
                    file=url,
                    preset=GENERATED_IMAGES_PRESET,
                    quote_id=quote.id,
                    image_id=image.id,
                    transformation=transformation,
                ),
            )
            record = await image_service.get_generated_image_or_404(db, uploaded.record_id)
            generated = GeneratedImageResponse.model_validate(record)

        return QuoteCardResponse(url=url, transformation=transformation, generated_image=generated)


quote_card_service = QuoteCardService()
