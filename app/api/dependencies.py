"""API dependencies for the external clients owned by the application."""

from fastapi import Request

from app.services.geocoding import Geocoder
from app.services.storage import PhotoStorage


def get_photo_storage(request: Request) -> PhotoStorage:
    """Photo storage client created at startup."""
    return request.app.state.photo_storage


def get_geocoder(request: Request) -> Geocoder:
    """Geocoding client created at startup."""
    return request.app.state.geocoder
