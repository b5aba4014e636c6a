"""
So Quoteable Backend — Person SQLAlchemy Model
===============================================

What:  ORM model for the `people` table: the authors quotes are attributed to.
Who:   Used by PersonService for CRUD and by Alembic for schema management.

Table Design:
    - UUID primary key: non-sequential, safe to expose in URLs
    - slug: URL-friendly handle ("albert-einstein"), indexed for lookups
    - birth_date / death_date: ISO "YYYY-MM-DD" strings; partial dates
      ("1879") are common for historical figures so no DATE type
    - created_at / updated_at: UTC with timezone
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from quoteable.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Person(Base):
    __tablename__ = "people"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="URL-friendly identifier, e.g. 'albert-einstein'",
    )

    bio: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    birth_date: Mapped[str | None] = mapped_column(String(32), nullable=True, default=None)
    death_date: Mapped[str | None] = mapped_column(String(32), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_people_slug", "slug"),
    )

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, slug='{self.slug}')>"
