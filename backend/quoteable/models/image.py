"""
So Quoteable Backend — Image SQLAlchemy Models
===============================================

What:  ORM models for the `images` and `generated_images` tables.

Two kinds of images:
    Image:          A permanent base photo of a person, uploaded with the
                    "base-images" preset (folder so-quotable/people).
    GeneratedImage: A rendered quote card. Stores the transformation chain
                    so the card can be regenerated, and `expires_at`
                    (Cloudinary auto-deletes generated uploads after the TTL).

Query Patterns:
    - Images of a person:      idx_images_person_id
    - Cards of a quote:        idx_generated_images_quote_id
    - Cards expiring soon:     idx_generated_images_expires_at (range scan)
"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from quoteable.database import Base
from quoteable.models.person import utcnow


class Image(Base):
    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    person_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Cloudinary public ID, e.g. "so-quotable/people/albert-einstein"
    cloudinary_id: Mapped[str] = mapped_column(String(500), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    width: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    # Attribution
    source: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)
    license: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_images_person_id", "person_id"),
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, cloudinary_id='{self.cloudinary_id}')>"


class GeneratedImage(Base):
    __tablename__ = "generated_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    quote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
    )
    image_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("images.id", ondelete="CASCADE"),
        nullable=False,
        comment="Base image the card was rendered from",
    )

    cloudinary_id: Mapped[str] = mapped_column(String(500), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    # "/"-joined directive chain, e.g. "w_1200,h_630,c_fill/l_black,..."
    transformation: Mapped[str] = mapped_column(Text, nullable=False)

    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_generated_images_quote_id", "quote_id"),
        Index("idx_generated_images_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<GeneratedImage(id={self.id}, quote_id={self.quote_id}, expires_at='{self.expires_at}')>"
