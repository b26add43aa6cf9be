"""Tests for property creation, lookup and the external clients it uses."""

import io
import json
from types import SimpleNamespace

import httpx
import pytest
from botocore.exceptions import ClientError
from conftest import FakeGeocoder, FakeStorage, auth_headers

from app.api.dependencies import get_geocoder, get_photo_storage
from app.core.exceptions import ExternalServiceError, UploadFailedError, ValidationFailedError
from app.main import app
from app.models.location import Location
from app.models.property import Property
from app.models.types import UNKNOWN_LOCATION, Coordinates
from app.schemas.property import AddressCreate
from app.services.geocoding import Geocoder
from app.services.property import create_property, normalize_property_form
from app.services.storage import PhotoStorage

GEOCODING_URL = "https://geocode.example.com/search"

PROPERTY_FORM = {
    "name": "Sunset Villa",
    "description": "Quiet villa with a garden",
    "price_per_month": "3200",
    "security_deposit": "3200.50",
    "application_fee": "75",
    "beds": "3",
    "baths": "2.5",
    "square_feet": "1800",
    "property_type": "Villa",
    "is_pets_allowed": "true",
    "is_parking_included": "yes",
    "amenities": "WiFi, Pool,Gym",
    "highlights": "GreatView",
    "address": "500 Sunset Blvd",
    "city": "Los Angeles",
    "state": "CA",
    "country": "United States",
    "postal_code": "90028",
}


def _photos(*names: str) -> list[tuple[str, tuple[str, bytes, str]]]:
    return [("photos", (name, f"bytes of {name}".encode(), "image/jpeg")) for name in names]


def _geocoder_returning(handler) -> Geocoder:
    return Geocoder(
        GEOCODING_URL,
        "rentals-tests",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


# =============================================================================
# Unit Tests: Form Normalization
# =============================================================================


class TestNormalizePropertyForm:
    """Tests for normalize_property_form."""

    def test_converts_strings(self):
        """Test lists, flags and numbers built from form strings."""
        data = normalize_property_form(PROPERTY_FORM)
        assert data.amenities == ["WiFi", "Pool", "Gym"]
        assert data.highlights == ["GreatView"]
        assert data.is_pets_allowed is True
        assert data.is_parking_included is False
        assert data.price_per_month == 3200.0
        assert data.security_deposit == 3200.5
        assert data.beds == 3
        assert data.baths == 2.5
        assert data.square_feet == 1800

    def test_empty_lists_stay_empty(self):
        """Test that blank amenities produce an empty list."""
        data = normalize_property_form({**PROPERTY_FORM, "amenities": "", "highlights": " "})
        assert data.amenities == []
        assert data.highlights == []

    @pytest.mark.parametrize("field", ["price_per_month", "beds", "square_feet"])
    def test_malformed_number_names_the_field(self, field):
        """Test that a non-numeric value is rejected for the right field."""
        with pytest.raises(ValidationFailedError) as exc_info:
            normalize_property_form({**PROPERTY_FORM, field: "lots"})
        assert exc_info.value.field == field

    def test_fractional_beds_are_rejected(self):
        """Test that an integer field does not accept a decimal."""
        with pytest.raises(ValidationFailedError):
            normalize_property_form({**PROPERTY_FORM, "beds": "2.5"})

    def test_unknown_property_type(self):
        """Test that an unknown property type is rejected."""
        with pytest.raises(ValidationFailedError) as exc_info:
            normalize_property_form({**PROPERTY_FORM, "property_type": "Castle"})
        assert exc_info.value.field == "property_type"


# =============================================================================
# Unit Tests: External Clients
# =============================================================================


class TestGeocoder:
    """Tests for the Nominatim-style geocoder."""

    @pytest.fixture
    def address(self):
        return AddressCreate(
            address="500 Sunset Blvd",
            city="Los Angeles",
            state="CA",
            country="United States",
            postal_code="90028",
        )

    def test_sends_structured_query(self, address):
        """Test the query parameters and identifying User-Agent."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"lon": "-118.3267", "lat": "34.0983"}])

        coordinates = _geocoder_returning(handler).geocode(address)

        assert coordinates == Coordinates(-118.3267, 34.0983)
        request = seen[0]
        assert request.headers["User-Agent"] == "rentals-tests"
        assert request.url.params["street"] == "500 Sunset Blvd"
        assert request.url.params["city"] == "Los Angeles"
        assert request.url.params["country"] == "United States"
        assert request.url.params["postalcode"] == "90028"
        assert request.url.params["format"] == "json"
        assert request.url.params["limit"] == "1"

    def test_no_result_is_unknown_location(self, address):
        """Test that an empty result list gives (0, 0) instead of an error."""
        geocoder = _geocoder_returning(lambda request: httpx.Response(200, json=[]))
        assert geocoder.geocode(address) == UNKNOWN_LOCATION

    def test_server_error_is_external_failure(self, address):
        """Test that an HTTP error status raises ExternalServiceError."""
        geocoder = _geocoder_returning(lambda request: httpx.Response(500))
        with pytest.raises(ExternalServiceError):
            geocoder.geocode(address)

    def test_connection_error_is_external_failure(self, address):
        """Test that a transport failure raises ExternalServiceError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError):
            _geocoder_returning(handler).geocode(address)


class FakeS3Client:
    """Stands in for a boto3 S3 client."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploads = []
        self.deletes = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        if self.error:
            raise self.error
        self.uploads.append(SimpleNamespace(body=fileobj.read(), bucket=bucket, key=key, extra=ExtraArgs))

    def delete_objects(self, Bucket, Delete):
        self.deletes.append((Bucket, Delete))


class TestPhotoStorage:
    """Tests for PhotoStorage."""

    def test_upload_returns_public_url(self):
        """Test the key layout, content type and resulting URL."""
        s3 = FakeS3Client()
        storage = PhotoStorage("listing-photos", "us-east-2", client=s3)

        stored = storage.upload(io.BytesIO(b"jpeg"), "front.jpg", "image/jpeg")

        assert stored.key.startswith("properties/")
        assert stored.key.endswith("-front.jpg")
        assert stored.url == f"https://listing-photos.s3.us-east-2.amazonaws.com/{stored.key}"
        upload = s3.uploads[0]
        assert upload.bucket == "listing-photos"
        assert upload.body == b"jpeg"
        assert upload.extra == {"ContentType": "image/jpeg"}

    def test_same_filename_gets_distinct_keys(self):
        """Test that two uploads of one filename do not collide."""
        storage = PhotoStorage("listing-photos", "us-east-2", client=FakeS3Client())
        first = storage.upload(io.BytesIO(b"1"), "photo.jpg", None)
        second = storage.upload(io.BytesIO(b"2"), "photo.jpg", None)
        assert first.key != second.key

    def test_client_error_is_upload_failure(self):
        """Test that a storage rejection becomes UploadFailedError."""
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        storage = PhotoStorage("listing-photos", "us-east-2", client=FakeS3Client(error))
        with pytest.raises(UploadFailedError) as exc_info:
            storage.upload(io.BytesIO(b"x"), "front.jpg", "image/jpeg")
        assert exc_info.value.status_code == 502

    def test_delete_batches_keys(self):
        """Test that delete removes every key in one request."""
        s3 = FakeS3Client()
        PhotoStorage("listing-photos", "us-east-2", client=s3).delete(["a", "b"])
        bucket, delete = s3.deletes[0]
        assert bucket == "listing-photos"
        assert delete["Objects"] == [{"Key": "a"}, {"Key": "b"}]


# =============================================================================
# Integration Tests: Property Endpoints
# =============================================================================


class TestCreateProperty:
    """Tests for POST /api/properties."""

    def test_create_with_photos(self, client, manager, storage, geocoder):
        """Test that photos keep their order and the address is geocoded."""
        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            files=_photos("front.jpg", "kitchen.jpg"),
            headers=auth_headers("manager-1", "manager"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["photo_urls"] == [
            "https://photos.example.com/properties/test-0-front.jpg",
            "https://photos.example.com/properties/test-1-kitchen.jpg",
        ]
        assert body["amenities"] == ["WiFi", "Pool", "Gym"]
        assert body["is_pets_allowed"] is True
        assert body["is_parking_included"] is False
        assert body["price_per_month"] == 3200.0
        assert body["beds"] == 3
        assert body["property_type"] == "Villa"
        assert body["manager_cognito_id"] == "manager-1"
        assert body["manager"]["email"] == "manager@example.com"
        assert body["location"]["address"] == "500 Sunset Blvd"
        assert body["location"]["coordinates"] == {"longitude": -122.4194, "latitude": 37.7749}

        assert [content for _, content, _ in storage.uploaded] == [
            b"bytes of front.jpg",
            b"bytes of kitchen.jpg",
        ]
        assert geocoder.addresses[0].postal_code == "90028"
        assert storage.deleted == []

    def test_create_without_photos(self, client, manager):
        """Test that photos are optional."""
        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            headers=auth_headers("manager-1", "manager"),
        )
        assert response.status_code == 201
        assert response.json()["photo_urls"] == []

    def test_unresolvable_address_stores_origin(self, client, manager):
        """Test that an address with no geocoding match is stored at (0, 0)."""
        app.dependency_overrides[get_geocoder] = lambda: _geocoder_returning(
            lambda request: httpx.Response(200, content=json.dumps([]))
        )

        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            headers=auth_headers("manager-1", "manager"),
        )

        assert response.status_code == 201
        assert response.json()["location"]["coordinates"] == {"longitude": 0.0, "latitude": 0.0}

    def test_malformed_price_uploads_nothing(self, client, manager, storage, test_db):
        """Test that validation happens before any upload or insert."""
        response = client.post(
            "/api/properties",
            data={**PROPERTY_FORM, "price_per_month": "cheap"},
            files=_photos("front.jpg"),
            headers=auth_headers("manager-1", "manager"),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "price_per_month"
        assert storage.uploaded == []
        assert test_db.query(Property).count() == 0

    def test_failed_upload_aborts_and_cleans_up(self, client, manager, test_db):
        """Test that a failing upload leaves no rows and no stray objects."""
        failing = FakeStorage(fail_on="kitchen.jpg")
        app.dependency_overrides[get_photo_storage] = lambda: failing

        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            files=_photos("front.jpg", "kitchen.jpg", "garden.jpg"),
            headers=auth_headers("manager-1", "manager"),
        )

        assert response.status_code == 502
        assert response.json()["error"] == "upload_failed"
        assert [key for key, _, _ in failing.uploaded] == ["properties/test-0-front.jpg"]
        assert failing.deleted == ["properties/test-0-front.jpg"]
        assert test_db.query(Property).count() == 0
        assert test_db.query(Location).count() == 0

    def test_geocoding_outage_aborts_and_cleans_up(self, client, manager, storage, test_db):
        """Test that a geocoder failure is a 502 and uploads are removed."""
        app.dependency_overrides[get_geocoder] = lambda: _geocoder_returning(
            lambda request: httpx.Response(500)
        )

        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            files=_photos("front.jpg"),
            headers=auth_headers("manager-1", "manager"),
        )

        assert response.status_code == 502
        assert response.json()["error"] == "external_service_failure"
        assert storage.deleted == ["properties/test-0-front.jpg"]
        assert test_db.query(Property).count() == 0

    def test_unknown_manager(self, client, storage):
        """Test that a manager without a profile gets 404."""
        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            files=_photos("front.jpg"),
            headers=auth_headers("manager-404", "manager"),
        )
        assert response.status_code == 404
        assert storage.uploaded == []

    def test_cannot_list_for_another_manager(self, client, manager):
        """Test that managerCognitoId must match the caller."""
        response = client.post(
            "/api/properties",
            data={**PROPERTY_FORM, "manager_cognito_id": "manager-2"},
            headers=auth_headers("manager-1", "manager"),
        )
        assert response.status_code == 403

    def test_tenant_cannot_create(self, client, manager, storage):
        """Test that a tenant token is refused before anything is uploaded."""
        response = client.post(
            "/api/properties",
            data=PROPERTY_FORM,
            files=_photos("front.jpg"),
            headers=auth_headers("tenant-1", "tenant"),
        )
        assert response.status_code == 403
        assert storage.uploaded == []


class UnreadableFile:
    """File object whose read fails partway through a request."""

    def read(self, *args):
        raise OSError("client disconnected")


class TestCreatePropertyCleanup:
    """Tests for upload cleanup when creation fails for any reason."""

    def test_read_error_removes_earlier_uploads(self, test_db, manager):
        """Test that an I/O error on a later photo still deletes earlier ones."""
        storage = FakeStorage()
        photos = [
            SimpleNamespace(
                file=io.BytesIO(b"front"), filename="front.jpg", content_type="image/jpeg"
            ),
            SimpleNamespace(
                file=UnreadableFile(), filename="kitchen.jpg", content_type="image/jpeg"
            ),
        ]

        with pytest.raises(OSError):
            create_property(
                test_db,
                normalize_property_form(PROPERTY_FORM),
                AddressCreate(**PROPERTY_FORM),
                photos,
                manager_cognito_id=manager.cognito_id,
                storage=storage,
                geocoder=FakeGeocoder(),
            )

        assert storage.deleted == ["properties/test-0-front.jpg"]
        assert test_db.query(Property).count() == 0


class TestGetProperty:
    """Tests for GET /api/properties/{id}."""

    def test_returns_location_coordinates(self, client, listed_property):
        """Test that a property is returned with its coordinates and manager."""
        response = client.get(f"/api/properties/{listed_property.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Bayview Loft"
        assert body["location"]["coordinates"] == {"longitude": -122.3949, "latitude": 37.7946}
        assert body["manager"]["cognito_id"] == "manager-1"

    def test_missing_property(self, client):
        """Test that an unknown id is 404."""
        response = client.get("/api/properties/999")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
