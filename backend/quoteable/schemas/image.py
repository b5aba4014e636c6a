"""
So Quoteable Backend — Image Schemas
=====================================

What:  Request and response models for base images, generated quote cards,
       and Cloudinary uploads.
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ImageCreate(BaseModel):
    """Registers an image that already lives in Cloudinary."""
    person_id: uuid.UUID
    cloudinary_id: str = Field(max_length=500)
    url: str = Field(max_length=2048)
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    source: Optional[str] = Field(default=None, max_length=500)
    license: Optional[str] = Field(default=None, max_length=255)


class ImageResponse(BaseModel):
    id: uuid.UUID
    person_id: uuid.UUID
    cloudinary_id: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    source: Optional[str] = None
    license: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class GeneratedImageCreate(BaseModel):
    quote_id: uuid.UUID
    image_id: uuid.UUID
    cloudinary_id: str = Field(max_length=500)
    url: str = Field(max_length=2048)
    transformation: str = Field(description="'/'-joined directive chain used to render the card")
    expires_at: datetime = Field(description="When Cloudinary deletes the rendered card (UTC)")


class GeneratedImageResponse(BaseModel):
    id: uuid.UUID
    quote_id: uuid.UUID
    image_id: uuid.UUID
    cloudinary_id: str
    url: str
    transformation: str
    expires_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Uploads
# ══════════════════════════════════════════════════════════════════════════

UploadPreset = Literal["base-images", "generated-images"]


class UploadRequest(BaseModel):
    """
    Upload to Cloudinary and record the result.

    Preset rules:
        base-images:      person_id required → stored in `images`
        generated-images: quote_id, image_id and transformation required
                          → stored in `generated_images` with a TTL
    """
    file: str = Field(description="Data URI (data:image/png;base64,...) or public image URL")
    preset: UploadPreset
    person_id: Optional[uuid.UUID] = None
    quote_id: Optional[uuid.UUID] = None
    image_id: Optional[uuid.UUID] = None
    transformation: Optional[str] = None
    source: Optional[str] = Field(default=None, max_length=500)
    license: Optional[str] = Field(default=None, max_length=255)


class UploadResponse(BaseModel):
    record_id: uuid.UUID = Field(description="ID of the images / generated_images row")
    cloudinary_id: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    expires_at: Optional[datetime] = None
