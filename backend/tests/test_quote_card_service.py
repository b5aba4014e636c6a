"""
So Quoteable Backend — Quote Card Service Tests
================================================

What:  The default card chain, per-request style overrides, and persist=True.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from quoteable.config import settings
from quoteable.exceptions import InvalidDimensionError, NotFoundError
from quoteable.schemas.image import UploadResponse
from quoteable.schemas.transformation import QuoteCardRequest
from quoteable.services.quote_card_service import quote_card_service, quote_card_transformations

from conftest import lookup


class TestQuoteCardTransformations:

    def test_default_chain(self):
        chain = quote_card_transformations("Stay hungry, stay foolish.", "Steve Jobs")

        assert [str(d) for d in chain] == [
            "w_1200,h_630,c_fill",
            "l_black,e_colorize:60,fl_layer_apply",
            "l_text:Arial_52_bold:Stay%20hungry%2C%20stay%20foolish.,co_rgb:ffffff,g_center,w_1000,c_fit",
            "l_text:Arial_36:-%20Steve%20Jobs,co_rgb:ffffff,g_south,y_80",
            "f_auto,q_auto",
        ]

    def test_attribution_omitted_without_author(self):
        chain = quote_card_transformations("Anonymous wisdom.", "  ")
        assert len(chain) == 4
        assert not any("g_south" in str(d) for d in chain)

    def test_text_width_follows_card_width(self):
        chain = quote_card_transformations("Short.", "A", width=800, height=800)
        assert "w_600,c_fit" in str(chain[2])

    def test_invalid_size_propagates(self):
        with pytest.raises(InvalidDimensionError):
            quote_card_transformations("Quote", "Author", width=0)


class TestRender:

    @pytest.mark.asyncio
    async def test_render_url(self, mock_db_session, person, quote, image):
        mock_db_session.get.side_effect = lookup(person, quote, image)

        result = await quote_card_service.render(
            mock_db_session, QuoteCardRequest(quote_id=quote.id, image_id=image.id)
        )

        assert result.url.startswith("https://res.cloudinary.com/demo/image/upload/w_1200,h_630,c_fill/")
        assert result.url.endswith("/f_auto,q_auto/so-quotable/people/albert-einstein")
        assert "-%20Albert%20Einstein" in result.transformation
        assert result.generated_image is None
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_render_uses_configured_host(self, mock_db_session, person, quote, image, monkeypatch):
        monkeypatch.setattr(settings, "cloudinary_host", "images.example.com")
        mock_db_session.get.side_effect = lookup(person, quote, image)

        result = await quote_card_service.render(
            mock_db_session, QuoteCardRequest(quote_id=quote.id, image_id=image.id)
        )

        assert result.url.startswith("https://images.example.com/demo/image/upload/")

    @pytest.mark.asyncio
    async def test_style_overrides(self, mock_db_session, person, quote, image):
        mock_db_session.get.side_effect = lookup(person, quote, image)

        result = await quote_card_service.render(
            mock_db_session,
            QuoteCardRequest(
                quote_id=quote.id,
                image_id=image.id,
                width=1080,
                height=1080,
                overlay_opacity=40,
                font_family="Georgia",
                format="webp",
                quality=85,
            ),
        )

        assert result.transformation.startswith("w_1080,h_1080,c_fill/l_black,e_colorize:40,fl_layer_apply/")
        assert "l_text:Georgia_52_bold:" in result.transformation
        assert result.transformation.endswith("/f_webp,q_85")

    @pytest.mark.asyncio
    async def test_missing_image(self, mock_db_session, person, quote):
        mock_db_session.get.side_effect = lookup(person, quote)
        with pytest.raises(NotFoundError):
            await quote_card_service.render(
                mock_db_session, QuoteCardRequest(quote_id=quote.id, image_id=uuid.uuid4())
            )

    @pytest.mark.asyncio
    async def test_persist_uploads_rendered_card(
        self, mock_db_session, person, quote, image, generated_image
    ):
        mock_db_session.get.side_effect = lookup(person, quote, image, generated_image)
        uploaded = UploadResponse(
            record_id=generated_image.id,
            cloudinary_id=generated_image.cloudinary_id,
            url=generated_image.url,
            expires_at=generated_image.expires_at,
        )

        with patch(
            "quoteable.services.quote_card_service.cloudinary_service.upload",
            new=AsyncMock(return_value=uploaded),
        ) as mock_upload:
            result = await quote_card_service.render(
                mock_db_session,
                QuoteCardRequest(quote_id=quote.id, image_id=image.id, persist=True),
            )

        request = mock_upload.call_args[0][1]
        assert request.preset == "generated-images"
        assert request.file == result.url
        assert request.transformation == result.transformation
        assert result.generated_image.id == generated_image.id
