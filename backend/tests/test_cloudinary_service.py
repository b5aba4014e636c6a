"""
So Quoteable Backend — Cloudinary Service Unit Tests (Mocked)
==============================================================

What:  Preset validation, upload options, retry and circuit breaker wiring.
How:   cloudinary.uploader.upload is patched; retries use wait_none() so
       the suite never sleeps.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from cloudinary.exceptions import Error as CloudinaryError
from tenacity import wait_none

from quoteable.exceptions import (
    CircuitBreakerOpenError,
    ImageServiceError,
    NotFoundError,
    ValidationError,
)
from quoteable.models import GeneratedImage, Image
from quoteable.models.person import utcnow
from quoteable.schemas.image import UploadRequest
from quoteable.services.cloudinary_service import CloudinaryService

from conftest import lookup

DATA_URI = "data:image/png;base64,iVBORw0KGgo="


def upload_result(public_id="so-quotable/people/einstein", width=800, height=600):
    return {
        "public_id": public_id,
        "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1/{public_id}.png",
        "width": width,
        "height": height,
    }


@pytest.fixture
def service():
    return CloudinaryService(wait=wait_none())


class TestBaseImageUpload:

    @pytest.mark.asyncio
    async def test_upload_records_image(self, service, mock_db_session, person):
        mock_db_session.get.side_effect = lookup(person)

        with patch("cloudinary.uploader.upload", return_value=upload_result()) as mock_upload:
            result = await service.upload(
                mock_db_session,
                UploadRequest(file=DATA_URI, preset="base-images", person_id=person.id, license="CC0"),
            )

        mock_upload.assert_called_once_with(
            DATA_URI,
            upload_preset="base-images",
            folder="so-quotable/people",
            resource_type="image",
        )
        assert result.cloudinary_id == "so-quotable/people/einstein"
        assert result.width == 800
        assert result.expires_at is None

        recorded = mock_db_session.add.call_args[0][0]
        assert isinstance(recorded, Image)
        assert recorded.id == result.record_id
        assert recorded.license == "CC0"

    @pytest.mark.asyncio
    async def test_person_id_required(self, service, mock_db_session):
        with patch("cloudinary.uploader.upload") as mock_upload:
            with pytest.raises(ValidationError) as exc_info:
                await service.upload(mock_db_session, UploadRequest(file=DATA_URI, preset="base-images"))

        assert exc_info.value.field == "person_id"
        mock_upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_person(self, service, mock_db_session, person):
        with patch("cloudinary.uploader.upload") as mock_upload:
            with pytest.raises(NotFoundError):
                await service.upload(
                    mock_db_session,
                    UploadRequest(file=DATA_URI, preset="base-images", person_id=person.id),
                )
        mock_upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_file_rejected(self, service, mock_db_session, person):
        with pytest.raises(ValidationError) as exc_info:
            await service.upload(
                mock_db_session,
                UploadRequest(file="   ", preset="base-images", person_id=person.id),
            )
        assert exc_info.value.field == "file"


class TestGeneratedImageUpload:

    @pytest.mark.asyncio
    async def test_upload_records_card_with_expiry(self, service, mock_db_session, quote, image):
        mock_db_session.get.side_effect = lookup(quote, image)
        before = utcnow()

        with patch(
            "cloudinary.uploader.upload",
            return_value=upload_result("so-quotable/generated/card-1", 1200, 630),
        ) as mock_upload:
            result = await service.upload(
                mock_db_session,
                UploadRequest(
                    file="https://res.cloudinary.com/demo/image/upload/w_1200,h_630,c_fill/x",
                    preset="generated-images",
                    quote_id=quote.id,
                    image_id=image.id,
                    transformation=" w_1200,h_630,c_fill ",
                ),
            )

        options = mock_upload.call_args.kwargs
        assert options["folder"] == "so-quotable/generated"
        assert options["unique_filename"] is True

        assert before + timedelta(days=30) <= result.expires_at <= utcnow() + timedelta(days=30)
        recorded = mock_db_session.add.call_args[0][0]
        assert isinstance(recorded, GeneratedImage)
        assert recorded.transformation == "w_1200,h_630,c_fill"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["quote_id", "image_id", "transformation"])
    async def test_required_parameters(self, service, mock_db_session, quote, image, missing):
        fields = {"quote_id": quote.id, "image_id": image.id, "transformation": "f_auto,q_auto"}
        fields[missing] = None

        with pytest.raises(ValidationError):
            await service.upload(
                mock_db_session,
                UploadRequest(file=DATA_URI, preset="generated-images", **fields),
            )


class TestResilience:

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, service):
        with patch(
            "cloudinary.uploader.upload",
            side_effect=[CloudinaryError("timeout"), upload_result()],
        ) as mock_upload:
            result = await service.upload_file(DATA_URI, "base-images")

        assert mock_upload.call_count == 2
        assert result["public_id"] == "so-quotable/people/einstein"
        assert service.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_image_service_error(self, service):
        with patch(
            "cloudinary.uploader.upload",
            side_effect=CloudinaryError("Upload preset not found"),
        ) as mock_upload:
            with pytest.raises(ImageServiceError) as exc_info:
                await service.upload_file(DATA_URI, "base-images")

        assert mock_upload.call_count == 3
        assert "Upload preset not found" in exc_info.value.message
        assert service.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_non_retryable_error_fails_fast(self, service):
        with patch("cloudinary.uploader.upload", side_effect=ValueError("bad file")) as mock_upload:
            with pytest.raises(ImageServiceError):
                await service.upload_file(DATA_URI, "base-images")
        assert mock_upload.call_count == 1

    @pytest.mark.asyncio
    async def test_incomplete_response(self, service):
        with patch("cloudinary.uploader.upload", return_value={"public_id": "x"}):
            with pytest.raises(ImageServiceError):
                await service.upload_file(DATA_URI, "base-images")
        assert service.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_open_circuit_skips_upload(self, service):
        for _ in range(service.circuit_breaker.failure_threshold):
            service.circuit_breaker.record_failure()

        with patch("cloudinary.uploader.upload") as mock_upload:
            with pytest.raises(CircuitBreakerOpenError):
                await service.upload_file(DATA_URI, "base-images")
        mock_upload.assert_not_called()
