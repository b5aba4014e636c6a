"""
So Quoteable Backend — HTTP Route Tests
========================================

What:  Status codes, error envelopes and headers through the full app
       (middleware + exception handlers), with the database mocked.
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from quoteable.config import settings

from conftest import lookup, scalars_result


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, mock_db_session):
        count = scalars_result([])
        count.scalar_one.return_value = 3
        mock_db_session.execute.return_value = count

        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["people_count"] == 3
        assert body["cloudinary"] == "configured"

    @pytest.mark.asyncio
    async def test_database_down_returns_503(self, test_client, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("refused"))

        response = await test_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["people_count"] is None


class TestTransformationsEndpoint:

    @pytest.mark.asyncio
    async def test_build_url(self, test_client):
        response = await test_client.post(
            "/api/transformations/url",
            json={
                "cloudinary_id": "so-quotable/people/einstein",
                "transformations": [
                    {"type": "resize", "width": 800, "height": 600},
                    {"type": "text_overlay", "text": "Hello, World", "font_weight": "bold"},
                    {"type": "optimize", "format": "webp", "quality": 80},
                ],
            },
        )

        assert response.status_code == 200
        assert response.json()["url"] == (
            "https://res.cloudinary.com/demo/image/upload/"
            "w_800,h_600,c_fill/l_text:Arial_48_bold:Hello%2C%20World/f_webp,q_80/"
            "so-quotable/people/einstein"
        )

    @pytest.mark.asyncio
    async def test_empty_chain(self, test_client):
        response = await test_client.post(
            "/api/transformations/url",
            json={"cloudinary_id": "id", "cloud_name": "cloud"},
        )
        assert response.json() == {
            "url": "https://res.cloudinary.com/cloud/image/upload/id",
            "transformation": "",
        }

    @pytest.mark.asyncio
    async def test_custom_delivery_host(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "cloudinary_host", "images.example.com")

        response = await test_client.post(
            "/api/transformations/url",
            json={"cloudinary_id": "id", "cloud_name": "cloud"},
        )

        assert response.json()["url"] == "https://images.example.com/cloud/image/upload/id"

    @pytest.mark.asyncio
    async def test_invalid_opacity_is_400(self, test_client):
        response = await test_client.post(
            "/api/transformations/url",
            json={
                "cloudinary_id": "id",
                "transformations": [{"type": "background_overlay", "opacity": 101}],
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_transformation"
        assert body["message"] == "Opacity must be between 0 and 100"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_blank_cloudinary_id_is_400(self, test_client):
        response = await test_client.post("/api/transformations/url", json={"cloudinary_id": "  "})
        assert response.status_code == 400
        assert response.json()["message"] == "cloudinary_id is required"

    @pytest.mark.asyncio
    async def test_unknown_directive_type_is_422(self, test_client):
        response = await test_client.post(
            "/api/transformations/url",
            json={"cloudinary_id": "id", "transformations": [{"type": "blur"}]},
        )
        assert response.status_code == 422


class TestPeopleEndpoints:

    @pytest.mark.asyncio
    async def test_create_person(self, test_client):
        response = await test_client.post("/api/people", json={"name": "Marie Curie"})

        assert response.status_code == 201
        assert response.json()["slug"] == "marie-curie"

    @pytest.mark.asyncio
    async def test_blank_name_is_400(self, test_client):
        response = await test_client.post("/api/people", json={"name": " "})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"] == {"field": "name"}

    @pytest.mark.asyncio
    async def test_unknown_person_is_404(self, test_client):
        response = await test_client.get(f"/api/people/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_sets_total_count(self, test_client, mock_db_session, person):
        mock_db_session.execute.return_value = scalars_result([person])

        response = await test_client.get("/api/people")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"

    @pytest.mark.asyncio
    async def test_delete_person(self, test_client, mock_db_session, person):
        mock_db_session.get.side_effect = lookup(person)

        response = await test_client.delete(f"/api/people/{person.id}")

        assert response.status_code == 200
        assert response.json() == {"id": str(person.id)}

    @pytest.mark.asyncio
    async def test_database_error_hides_details(self, test_client, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("password=secret"))

        response = await test_client.get("/api/people")

        assert response.status_code == 500
        assert "secret" not in response.text
        assert response.json()["error"] == "server_error"


class TestQuoteCardEndpoint:

    @pytest.mark.asyncio
    async def test_create_quote_card(self, test_client, mock_db_session, person, quote, image):
        mock_db_session.get.side_effect = lookup(person, quote, image)

        response = await test_client.post(
            "/api/quote-cards",
            json={"quote_id": str(quote.id), "image_id": str(image.id)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["url"].endswith("/so-quotable/people/albert-einstein")
        assert body["generated_image"] is None

    @pytest.mark.asyncio
    async def test_invalid_width_is_400(self, test_client, mock_db_session, person, quote, image):
        mock_db_session.get.side_effect = lookup(person, quote, image)

        response = await test_client.post(
            "/api/quote-cards",
            json={"quote_id": str(quote.id), "image_id": str(image.id), "width": -5},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Width must be positive"


@pytest.mark.asyncio
async def test_client_request_id_is_echoed(test_client):
    response = await test_client.post(
        "/api/transformations/url",
        json={"cloudinary_id": "id"},
        headers={"X-Request-ID": "trace-123"},
    )
    assert response.headers["X-Request-ID"] == "trace-123"
