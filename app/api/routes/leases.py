"""Lease API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_roles
from app.schemas.lease import LeaseResponse
from app.services import lease as lease_service

router = APIRouter(prefix="/leases", tags=["leases"])


@router.get("", response_model=list[LeaseResponse])
def list_leases(
    db: Session = Depends(get_db),
    _user: AuthenticatedUser = Depends(require_roles("manager", "tenant")),
):
    """List all leases."""
    return lease_service.get_leases(db)
