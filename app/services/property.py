"""Property service for business logic."""

from collections.abc import Mapping

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.logging import get_logger
from app.models.enums import PropertyType
from app.models.lease import Lease
from app.models.location import Location
from app.models.manager import Manager
from app.models.property import Property
from app.schemas.property import AddressCreate, PropertyCreate
from app.services.geocoding import Geocoder
from app.services.storage import PhotoStorage

logger = get_logger(__name__)


def _number(form: Mapping[str, str | None], field: str, kind: type):
    raw = form.get(field)
    if raw is None or raw.strip() == "":
        raise ValidationFailedError(f"Missing value for {field}", field=field)
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValidationFailedError(f"Invalid number for {field}: {raw!r}", field=field) from exc


def _split(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _flag(raw: str | None) -> bool:
    return (raw or "").strip().lower() == "true"


def normalize_property_form(form: Mapping[str, str | None]) -> PropertyCreate:
    """
    Turn multipart form strings into typed property attributes.

    Comma-separated amenities/highlights become lists, "true" becomes True
    (anything else False) and numeric strings become int or float.

    Raises:
        ValidationFailedError: If a number or the property type is malformed

    """
    raw_type = (form.get("property_type") or "").strip()
    try:
        property_type = PropertyType(raw_type)
    except ValueError as exc:
        raise ValidationFailedError(
            f"Unknown property type: {raw_type!r}", field="property_type"
        ) from exc

    return PropertyCreate(
        name=form.get("name") or "",
        description=form.get("description") or "",
        price_per_month=_number(form, "price_per_month", float),
        security_deposit=_number(form, "security_deposit", float),
        application_fee=_number(form, "application_fee", float),
        beds=_number(form, "beds", int),
        baths=_number(form, "baths", float),
        square_feet=_number(form, "square_feet", int),
        property_type=property_type,
        is_pets_allowed=_flag(form.get("is_pets_allowed")),
        is_parking_included=_flag(form.get("is_parking_included")),
        amenities=_split(form.get("amenities")),
        highlights=_split(form.get("highlights")),
    )


def _discard_uploads(storage: PhotoStorage, keys: list[str]) -> None:
    try:
        storage.delete(keys)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Could not remove %d orphaned uploads %s: %s", len(keys), keys, exc)


def create_property(
    db: Session,
    property_data: PropertyCreate,
    address: AddressCreate,
    photos: list[UploadFile],
    manager_cognito_id: str,
    storage: PhotoStorage,
    geocoder: Geocoder,
) -> Property:
    """
    Create a property: upload photos, geocode the address, then persist.

    Photos are uploaded in order and their URLs kept in that order. If any
    later step fails, photos uploaded so far are deleted again.

    Raises:
        NotFoundError: If the manager does not exist
        UploadFailedError: If a photo upload fails
        ExternalServiceError: If the geocoding service fails

    """
    manager = db.query(Manager).filter(Manager.cognito_id == manager_cognito_id).first()
    if not manager:
        raise NotFoundError("Manager not found")

    uploaded_keys: list[str] = []
    try:
        photo_urls: list[str] = []
        for photo in photos:
            stored = storage.upload(photo.file, photo.filename or "photo", photo.content_type)
            uploaded_keys.append(stored.key)
            photo_urls.append(stored.url)

        coordinates = geocoder.geocode(address)

        location = Location(
            address=address.address,
            city=address.city,
            state=address.state,
            country=address.country,
            postal_code=address.postal_code,
            coordinates=coordinates,
        )
        db.add(location)
        db.flush()  # Get location.id

        db_property = Property(
            **property_data.model_dump(exclude={"property_type"}),
            property_type=property_data.property_type.value,
            photo_urls=photo_urls,
            location_id=location.id,
            manager_cognito_id=manager_cognito_id,
        )
        db.add(db_property)
        db.commit()
    except Exception:
        db.rollback()
        if uploaded_keys:
            _discard_uploads(storage, uploaded_keys)
        raise

    db.refresh(db_property)
    logger.info(
        "Created property %d for manager %s with %d photos",
        db_property.id,
        manager_cognito_id,
        len(photo_urls),
    )
    return db_property


def get_property(db: Session, property_id: int) -> Property:
    """Get a property by ID, with its location and manager loaded."""
    db_property = (
        db.query(Property)
        .options(joinedload(Property.location), joinedload(Property.manager))
        .filter(Property.id == property_id)
        .first()
    )
    if not db_property:
        raise NotFoundError("Property not found")
    return db_property


def get_properties_for_manager(db: Session, manager_cognito_id: str) -> list[Property]:
    """Get all properties a manager has listed."""
    manager = db.query(Manager).filter(Manager.cognito_id == manager_cognito_id).first()
    if not manager:
        raise NotFoundError("Manager not found")
    return (
        db.query(Property)
        .options(joinedload(Property.location))
        .filter(Property.manager_cognito_id == manager_cognito_id)
        .order_by(Property.id)
        .all()
    )


def get_property_leases(db: Session, property_id: int) -> list[Lease]:
    """Get every lease signed for a property."""
    get_property(db, property_id)
    return (
        db.query(Lease)
        .filter(Lease.property_id == property_id)
        .order_by(Lease.start_date)
        .all()
    )
