"""Property API routes."""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_geocoder, get_photo_storage
from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.core.security import AuthenticatedUser, require_roles
from app.schemas.lease import LeaseResponse
from app.schemas.property import AddressCreate, PropertyDetailResponse, PropertyResponse
from app.services import property as property_service
from app.services.geocoding import Geocoder
from app.services.property_search import parse_search_params, search_properties
from app.services.storage import PhotoStorage

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyResponse])
def list_properties(
    favorite_ids: str | None = Query(None, alias="favoriteIds"),
    price_min: str | None = Query(None, alias="priceMin"),
    price_max: str | None = Query(None, alias="priceMax"),
    beds: str | None = Query(None),
    baths: str | None = Query(None),
    property_type: str | None = Query(None, alias="propertyType"),
    square_feet_min: str | None = Query(None, alias="squareFeetMin"),
    square_feet_max: str | None = Query(None, alias="squareFeetMax"),
    amenities: str | None = Query(None, description="Comma-separated, all must match"),
    available_from: str | None = Query(None, alias="availableFrom"),
    latitude: str | None = Query(None),
    longitude: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Search properties.

    Every filter is optional and filters combine with AND. Latitude and
    longitude together restrict results to a fixed 1000 km radius.
    """
    params = parse_search_params(
        favorite_ids=favorite_ids,
        price_min=price_min,
        price_max=price_max,
        beds=beds,
        baths=baths,
        property_type=property_type,
        square_feet_min=square_feet_min,
        square_feet_max=square_feet_max,
        amenities=amenities,
        available_from=available_from,
        latitude=latitude,
        longitude=longitude,
    )
    return search_properties(db, params)


@router.get("/{property_id}", response_model=PropertyDetailResponse)
def get_property(property_id: int, db: Session = Depends(get_db)):
    """Get a property with its location coordinates."""
    return property_service.get_property(db, property_id)


@router.post("", response_model=PropertyDetailResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    name: str = Form(...),
    description: str = Form(""),
    price_per_month: str = Form(...),
    security_deposit: str = Form(...),
    application_fee: str = Form(...),
    beds: str = Form(...),
    baths: str = Form(...),
    square_feet: str = Form(...),
    property_type: str = Form(...),
    is_pets_allowed: str = Form("false"),
    is_parking_included: str = Form("false"),
    amenities: str = Form(""),
    highlights: str = Form(""),
    address: str = Form(...),
    city: str = Form(...),
    state: str = Form(...),
    country: str = Form(...),
    postal_code: str = Form(...),
    manager_cognito_id: str | None = Form(None),
    photos: list[UploadFile] | None = File(None),
    user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
    geocoder: Geocoder = Depends(get_geocoder),
):
    """Create a property from a multipart form with optional photos."""
    if manager_cognito_id and manager_cognito_id != user.id:
        raise ForbiddenError("Cannot create a property for another manager")

    property_data = property_service.normalize_property_form(
        {
            "name": name,
            "description": description,
            "price_per_month": price_per_month,
            "security_deposit": security_deposit,
            "application_fee": application_fee,
            "beds": beds,
            "baths": baths,
            "square_feet": square_feet,
            "property_type": property_type,
            "is_pets_allowed": is_pets_allowed,
            "is_parking_included": is_parking_included,
            "amenities": amenities,
            "highlights": highlights,
        }
    )
    address_data = AddressCreate(
        address=address,
        city=city,
        state=state,
        country=country,
        postal_code=postal_code,
    )
    return property_service.create_property(
        db,
        property_data,
        address_data,
        photos or [],
        manager_cognito_id=user.id,
        storage=storage,
        geocoder=geocoder,
    )


@router.get("/{property_id}/leases", response_model=list[LeaseResponse])
def list_property_leases(
    property_id: int,
    db: Session = Depends(get_db),
    _user: AuthenticatedUser = Depends(require_roles("manager")),
):
    """List the leases signed for a property."""
    return property_service.get_property_leases(db, property_id)
