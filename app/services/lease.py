"""Lease queries."""

from sqlalchemy.orm import Session

from app.models.lease import Lease


def get_leases(db: Session) -> list[Lease]:
    """Get all leases, oldest first."""
    return db.query(Lease).order_by(Lease.start_date, Lease.id).all()
