"""
So Quoteable Backend — Person Schemas
======================================

What:  Request and response models for /api/people.

Validation split:
    Pydantic checks shapes and lengths; "must not be blank after trimming"
    is a business rule enforced by PersonService so the same rule applies to
    callers that bypass HTTP.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PersonCreate(BaseModel):
    name: str = Field(max_length=255, description="Display name, e.g. 'Albert Einstein'")
    slug: Optional[str] = Field(
        default=None,
        max_length=255,
        description="URL handle. Derived from the name when omitted.",
    )
    bio: Optional[str] = None
    birth_date: Optional[str] = Field(default=None, description="ISO date, e.g. '1879-03-14'")
    death_date: Optional[str] = Field(default=None, description="ISO date")


class PersonUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""
    name: Optional[str] = Field(default=None, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None


class PersonResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    bio: Optional[str] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
