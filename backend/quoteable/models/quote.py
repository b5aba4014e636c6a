"""
So Quoteable Backend — Quote SQLAlchemy Model
==============================================

What:  ORM model for the `quotes` table.
Why:   Each quote belongs to exactly one person; `verified` marks quotes whose
       attribution has been checked against `source` / `source_url`.

Query Patterns:
    - Quotes by person: WHERE person_id = :id → idx_quotes_person_id
    - Single quote:     WHERE id = :uuid       → primary key
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy import text as sql_text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from quoteable.database import Base
from quoteable.models.person import utcnow


class Quote(Base):
    __tablename__ = "quotes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=sql_text("gen_random_uuid()"),
    )

    # Deleting a person removes their quotes
    person_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)
    source_url: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)

    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=sql_text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_quotes_person_id", "person_id"),
    )

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, person_id={self.person_id}, verified={self.verified})>"
