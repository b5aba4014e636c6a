"""Create people, quotes, images and generated_images tables

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

Deletes cascade downward: person → quotes/images → generated_images.
Rollback drops all four tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "people",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, comment="URL handle derived from the name"),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("birth_date", sa.String(32), nullable=True, comment="ISO date"),
        sa.Column("death_date", sa.String(32), nullable=True, comment="ISO date"),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_people"),
    )
    op.create_index("idx_people_slug", "people", ["slug"])

    op.create_table(
        "quotes",
        _id_column(),
        sa.Column("person_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("source", sa.String(500), nullable=True),
        sa.Column("source_url", sa.String(2048), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_quotes"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_quotes_person_id", "quotes", ["person_id"])

    op.create_table(
        "images",
        _id_column(),
        sa.Column("person_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cloudinary_id", sa.String(500), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(500), nullable=True),
        sa.Column("license", sa.String(255), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_images"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_images_person_id", "images", ["person_id"])

    op.create_table(
        "generated_images",
        _id_column(),
        sa.Column("quote_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("image_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cloudinary_id", sa.String(500), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("transformation", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_generated_images"),
        sa.ForeignKeyConstraint(["quote_id"], ["quotes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["image_id"], ["images.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_generated_images_quote_id", "generated_images", ["quote_id"])
    op.create_index("idx_generated_images_expires_at", "generated_images", ["expires_at"])


def downgrade() -> None:
    op.drop_index("idx_generated_images_expires_at", table_name="generated_images")
    op.drop_index("idx_generated_images_quote_id", table_name="generated_images")
    op.drop_table("generated_images")
    op.drop_index("idx_images_person_id", table_name="images")
    op.drop_table("images")
    op.drop_index("idx_quotes_person_id", table_name="quotes")
    op.drop_table("quotes")
    op.drop_index("idx_people_slug", table_name="people")
    op.drop_table("people")
