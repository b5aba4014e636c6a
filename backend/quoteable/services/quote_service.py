"""
So Quoteable Backend — Quote Service
=====================================

What:  CRUD business rules for quotes.
Rules:
    - text is required and cannot be blank; it is stored trimmed
    - the referenced person must exist
    - verified defaults to false
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quoteable.exceptions import DatabaseError, NotFoundError, ValidationError
from quoteable.models.person import utcnow
from quoteable.models.quote import Quote
from quoteable.schemas.quote import QuoteCreate, QuoteResponse, QuoteUpdate
from quoteable.services.person_service import DEFAULT_LIST_LIMIT, person_service

logger = logging.getLogger(__name__)


class QuoteService:

    async def get_quote_or_404(self, db: AsyncSession, quote_id: uuid.UUID) -> Quote:
        try:
            quote = await db.get(Quote, quote_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching quote %s: %s", quote_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )
        if quote is None:
            raise NotFoundError(resource="quote", resource_id=str(quote_id))
        return quote

    async def list_quotes(
        self,
        db: AsyncSession,
        person_id: Optional[uuid.UUID] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[QuoteResponse]:
        """Newest first; optionally only one person's quotes."""
        query = select(Quote)
        if person_id is not None:
            query = query.where(Quote.person_id == person_id)
        query = query.order_by(Quote.created_at.desc()).limit(limit)

        try:
            result = await db.execute(query)
            quotes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing quotes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve quotes. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [QuoteResponse.model_validate(q) for q in quotes]

    async def get_quote(self, db: AsyncSession, quote_id: uuid.UUID) -> QuoteResponse:
        quote = await self.get_quote_or_404(db, quote_id)
        return QuoteResponse.model_validate(quote)

    async def create_quote(self, db: AsyncSession, data: QuoteCreate) -> QuoteResponse:
        text = data.text.strip()
        if not text:
            raise ValidationError("Quote text is required and cannot be empty", field="text")

        await person_service.get_person_or_404(db, data.person_id)

        now = utcnow()
        quote = Quote(
            id=uuid.uuid4(),
            person_id=data.person_id,
            text=text,
            source=data.source,
            source_url=data.source_url,
            verified=bool(data.verified),
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(quote)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating quote: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the quote. Please try again.",
                context={"person_id": str(data.person_id)},
            )

        logger.info("Quote created: %s (person=%s, %d chars)", quote.id, quote.person_id, len(text))
        return QuoteResponse.model_validate(quote)

    async def update_quote(
        self,
        db: AsyncSession,
        quote_id: uuid.UUID,
        data: QuoteUpdate,
    ) -> QuoteResponse:
        updates = data.model_dump(exclude_unset=True)
        if "text" in updates:
            text = (updates["text"] or "").strip()
            if not text:
                raise ValidationError("Quote text cannot be empty", field="text")
            updates["text"] = text
        if "verified" in updates and updates["verified"] is None:
            updates["verified"] = False

        quote = await self.get_quote_or_404(db, quote_id)
        for key, value in updates.items():
            setattr(quote, key, value)
        quote.updated_at = utcnow()

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating quote %s: %s", quote_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )
        return QuoteResponse.model_validate(quote)

    async def remove_quote(self, db: AsyncSession, quote_id: uuid.UUID) -> uuid.UUID:
        quote = await self.get_quote_or_404(db, quote_id)
        try:
            await db.delete(quote)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting quote %s: %s", quote_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )
        logger.info("Quote deleted: %s", quote_id)
        return quote_id


quote_service = QuoteService()
