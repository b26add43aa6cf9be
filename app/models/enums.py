"""Enum definitions for listings and applications."""

from enum import Enum


class PropertyType(str, Enum):
    """Kind of dwelling a listing offers."""

    ROOMS = "Rooms"
    TINYHOUSE = "Tinyhouse"
    APARTMENT = "Apartment"
    VILLA = "Villa"
    TOWNHOUSE = "Townhouse"
    COTTAGE = "Cottage"


class ApplicationStatus(str, Enum):
    """Known application statuses. Stored as a plain tag, so others are allowed."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class UserType(str, Enum):
    """Role names carried in the identity token."""

    TENANT = "tenant"
    MANAGER = "manager"
