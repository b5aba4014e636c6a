"""
So Quoteable Backend — Transformation & Quote Card Schemas
===========================================================

What:  JSON descriptors for transformation directives, and the quote card
       request/response models.
How:   Each descriptor is tagged by `type` (pydantic discriminated union)
       and converts itself into a compiler directive with `to_directive()`.
       Range checks are left to the compiler so the API reports the same
       errors (InvalidOpacityError, ...) as every other caller.

Example request body for POST /api/transformations/url:
    {
        "cloudinary_id": "so-quotable/people/albert-einstein",
        "transformations": [
            {"type": "resize", "width": 1200, "height": 630},
            {"type": "background_overlay", "opacity": 60},
            {"type": "text_overlay", "text": "Imagination is more important than knowledge.",
             "font_weight": "bold", "color": "ffffff", "gravity": "center", "max_width": 1000},
            {"type": "optimize"}
        ]
    }
"""

import uuid
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from quoteable.lib.transformations import (
    Directive,
    add_background_overlay,
    add_text_overlay,
    optimize_image,
    resize_image,
)
from quoteable.schemas.image import GeneratedImageResponse


class ResizeSpec(BaseModel):
    type: Literal["resize"] = "resize"
    width: int
    height: int
    crop: str = "fill"

    def to_directive(self) -> Directive:
        return resize_image(self.width, self.height, self.crop)


class OptimizeSpec(BaseModel):
    type: Literal["optimize"] = "optimize"
    format: str = "auto"
    quality: Union[int, str] = "auto"

    def to_directive(self) -> Directive:
        return optimize_image(self.format, self.quality)


class BackgroundOverlaySpec(BaseModel):
    type: Literal["background_overlay"] = "background_overlay"
    opacity: float
    color: str = "black"

    def to_directive(self) -> Directive:
        return add_background_overlay(self.opacity, self.color)


class TextOverlaySpec(BaseModel):
    type: Literal["text_overlay"] = "text_overlay"
    text: str
    font_family: str = "Arial"
    font_size: int = 48
    font_weight: Optional[str] = None
    color: Optional[str] = None
    gravity: Optional[str] = None
    y_offset: Optional[int] = None
    x_offset: Optional[int] = None
    max_width: Optional[int] = None

    def to_directive(self) -> Directive:
        return add_text_overlay(
            self.text,
            font_family=self.font_family,
            font_size=self.font_size,
            font_weight=self.font_weight,
            color=self.color,
            gravity=self.gravity,
            y_offset=self.y_offset,
            x_offset=self.x_offset,
            max_width=self.max_width,
        )


DirectiveSpec = Annotated[
    Union[ResizeSpec, OptimizeSpec, BackgroundOverlaySpec, TextOverlaySpec],
    Field(discriminator="type"),
]


class BuildUrlRequest(BaseModel):
    cloudinary_id: str = Field(description="Public ID of the source image")
    transformations: List[DirectiveSpec] = Field(
        default_factory=list,
        description="Directives, applied in the order given",
    )
    cloud_name: Optional[str] = Field(
        default=None,
        description="Overrides the configured Cloudinary cloud name",
    )


class BuildUrlResponse(BaseModel):
    url: str
    transformation: str = Field(description="'/'-joined directive chain")


class QuoteCardRequest(BaseModel):
    """
    Render a quote on top of a person's photo.

    Every style field is optional; omitted ones fall back to the configured
    card defaults (1200x630, 60% black backdrop, white Arial text).
    """
    quote_id: uuid.UUID
    image_id: uuid.UUID
    width: Optional[int] = None
    height: Optional[int] = None
    overlay_opacity: Optional[float] = None
    overlay_color: str = "black"
    font_family: Optional[str] = None
    quote_font_size: Optional[int] = None
    attribution_font_size: Optional[int] = None
    text_color: str = "ffffff"
    attribution_color: str = "ffffff"
    format: str = "auto"
    quality: Union[int, str] = "auto"
    persist: bool = Field(
        default=False,
        description="Upload the rendered card with the generated-images preset and record it",
    )


class QuoteCardResponse(BaseModel):
    url: str = Field(description="Delivery URL of the rendered card")
    transformation: str
    generated_image: Optional[GeneratedImageResponse] = Field(
        default=None,
        description="Recorded card (only when persist=true)",
    )
