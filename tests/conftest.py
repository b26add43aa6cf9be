"""Shared fixtures: in-memory database, fake external clients and tokens."""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_geocoder, get_photo_storage
from app.core.database import Base, get_db
from app.core.exceptions import UploadFailedError
from app.main import app
from app.models.enums import PropertyType
from app.models.location import Location
from app.models.manager import Manager
from app.models.property import Property
from app.models.tenant import Tenant
from app.models.types import Coordinates
from app.services.storage import StoredPhoto

TEST_SIGNING_KEY = "test-signing-key-not-checked-by-the-api"


def make_token(sub: str, role: str) -> str:
    """Build a bearer token carrying a subject and a role claim."""
    return jwt.encode({"sub": sub, "custom:role": role}, TEST_SIGNING_KEY, algorithm="HS256")


def auth_headers(sub: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, role)}"}


class FakeStorage:
    """Records uploads in memory; can be told to reject one filename."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.uploaded: list[tuple[str, bytes, str | None]] = []
        self.deleted: list[str] = []

    def upload(self, fileobj, filename: str, content_type: str | None) -> StoredPhoto:
        if filename == self.fail_on:
            raise UploadFailedError(f"Failed to upload {filename}")
        key = f"properties/test-{len(self.uploaded)}-{filename}"
        self.uploaded.append((key, fileobj.read(), content_type))
        return StoredPhoto(key=key, url=f"https://photos.example.com/{key}")

    def delete(self, keys: list[str]) -> None:
        self.deleted.extend(keys)


class FakeGeocoder:
    """Returns fixed coordinates and remembers the addresses it saw."""

    def __init__(self, coordinates: Coordinates = Coordinates(-122.4194, 37.7749)) -> None:
        self.coordinates = coordinates
        self.addresses = []

    def geocode(self, address):
        self.addresses.append(address)
        return self.coordinates


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def client(test_db, storage, geocoder):
    """Create a test client with database and external client overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: storage
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def manager(test_db):
    """Create a manager in the database."""
    db_manager = Manager(
        cognito_id="manager-1",
        name="Morgan Manager",
        email="manager@example.com",
        phone_number="555-0100",
    )
    test_db.add(db_manager)
    test_db.commit()
    test_db.refresh(db_manager)
    return db_manager


@pytest.fixture
def tenant(test_db):
    """Create a tenant in the database."""
    db_tenant = Tenant(
        cognito_id="tenant-1",
        name="Taylor Tenant",
        email="tenant@example.com",
        phone_number="555-0101",
    )
    test_db.add(db_tenant)
    test_db.commit()
    test_db.refresh(db_tenant)
    return db_tenant


def make_property(db, manager_cognito_id: str, **overrides) -> Property:
    """Insert a property (and its location) directly, bypassing the pipeline."""
    location = Location(
        address=overrides.pop("address", "1 Market St"),
        city="San Francisco",
        state="CA",
        country="United States",
        postal_code="94105",
        coordinates=overrides.pop("coordinates", Coordinates(-122.3949, 37.7946)),
    )
    db.add(location)
    db.flush()

    fields = {
        "name": "Bayview Loft",
        "description": "Loft near the water",
        "price_per_month": 2500.0,
        "security_deposit": 2500.0,
        "application_fee": 50.0,
        "amenities": ["WiFi"],
        "highlights": [],
        "beds": 2,
        "baths": 1.0,
        "square_feet": 900,
        "property_type": PropertyType.APARTMENT.value,
    }
    fields.update(overrides)
    db_property = Property(
        **fields,
        location_id=location.id,
        manager_cognito_id=manager_cognito_id,
    )
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    return db_property


@pytest.fixture
def listed_property(test_db, manager):
    """A property owned by the manager fixture."""
    return make_property(test_db, manager.cognito_id)
