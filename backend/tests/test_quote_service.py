"""
So Quoteable Backend — Quote Service Unit Tests
================================================
"""

import uuid

import pytest

from quoteable.exceptions import NotFoundError, ValidationError
from quoteable.models import Person, Quote
from quoteable.schemas.quote import QuoteCreate, QuoteUpdate
from quoteable.services.quote_service import quote_service

from conftest import scalars_result


class TestCreateQuote:

    @pytest.mark.asyncio
    async def test_create_quote(self, mock_db_session, person):
        mock_db_session.get.return_value = person

        result = await quote_service.create_quote(
            mock_db_session,
            QuoteCreate(person_id=person.id, text="  Life is like riding a bicycle.  "),
        )

        assert result.text == "Life is like riding a bicycle."
        assert result.person_id == person.id
        assert result.verified is False
        mock_db_session.get.assert_awaited_once_with(Person, person.id)
        assert isinstance(mock_db_session.add.call_args[0][0], Quote)

    @pytest.mark.asyncio
    async def test_verified_flag_kept(self, mock_db_session, person):
        mock_db_session.get.return_value = person
        result = await quote_service.create_quote(
            mock_db_session, QuoteCreate(person_id=person.id, text="E = mc2", verified=True)
        )
        assert result.verified is True

    @pytest.mark.asyncio
    async def test_blank_text_rejected_before_lookup(self, mock_db_session, person):
        with pytest.raises(ValidationError) as exc_info:
            await quote_service.create_quote(
                mock_db_session, QuoteCreate(person_id=person.id, text="\n\t ")
            )
        assert exc_info.value.field == "text"
        mock_db_session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_person(self, mock_db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await quote_service.create_quote(
                mock_db_session, QuoteCreate(person_id=uuid.uuid4(), text="Orphan quote")
            )
        assert exc_info.value.context["resource"] == "person"
        mock_db_session.add.assert_not_called()


class TestReadQuotes:

    @pytest.mark.asyncio
    async def test_get_quote(self, mock_db_session, quote):
        mock_db_session.get.return_value = quote
        result = await quote_service.get_quote(mock_db_session, quote.id)
        assert result.text == quote.text

    @pytest.mark.asyncio
    async def test_get_missing_quote(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await quote_service.get_quote(mock_db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_list_by_person_filters_query(self, mock_db_session, quote):
        mock_db_session.execute.return_value = scalars_result([quote])

        result = await quote_service.list_quotes(mock_db_session, person_id=quote.person_id)

        assert len(result) == 1
        query = mock_db_session.execute.call_args[0][0]
        assert "quotes.person_id" in str(query)

    @pytest.mark.asyncio
    async def test_list_all_has_no_person_filter(self, mock_db_session):
        mock_db_session.execute.return_value = scalars_result([])

        assert await quote_service.list_quotes(mock_db_session) == []
        query = mock_db_session.execute.call_args[0][0]
        assert "WHERE" not in str(query)


class TestUpdateQuote:

    @pytest.mark.asyncio
    async def test_mark_verified(self, mock_db_session, quote):
        quote.verified = False
        mock_db_session.get.return_value = quote

        result = await quote_service.update_quote(mock_db_session, quote.id, QuoteUpdate(verified=True))

        assert result.verified is True
        assert result.text == quote.text

    @pytest.mark.asyncio
    async def test_blank_text_rejected(self, mock_db_session, quote):
        mock_db_session.get.return_value = quote
        with pytest.raises(ValidationError):
            await quote_service.update_quote(mock_db_session, quote.id, QuoteUpdate(text=""))


class TestRemoveQuote:

    @pytest.mark.asyncio
    async def test_remove(self, mock_db_session, quote):
        mock_db_session.get.return_value = quote
        assert await quote_service.remove_quote(mock_db_session, quote.id) == quote.id
        mock_db_session.delete.assert_awaited_once_with(quote)
