"""Request and response models for /api/quotes."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class QuoteCreate(BaseModel):
    person_id: uuid.UUID = Field(description="Person the quote is attributed to")
    text: str = Field(description="The quote itself, without surrounding quotation marks")
    source: Optional[str] = Field(default=None, max_length=500, description="Book, speech, letter...")
    source_url: Optional[str] = Field(default=None, max_length=2048)
    verified: Optional[bool] = Field(default=None, description="Defaults to false")


class QuoteUpdate(BaseModel):
    text: Optional[str] = None
    source: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = Field(default=None, max_length=2048)
    verified: Optional[bool] = None


class QuoteResponse(BaseModel):
    id: uuid.UUID
    person_id: uuid.UUID
    text: str
    source: Optional[str] = None
    source_url: Optional[str] = None
    verified: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
