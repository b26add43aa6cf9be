"""Health check route."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check():
    """Report that the service is up."""
    return {"status": "healthy", "service": "rentals"}
