"""User domain model for marketplace accounts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(slots=True)
class Location:
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "lat": self.lat, "lng": self.lng}


@dataclass(slots=True)
class RatingSummary:
    average: float = 0.0
    count: int = 0


@dataclass(slots=True)
class User:
    """
    Marketplace account.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Login key, stored lower-cased and unique
        phone: Contact phone number
        password_hash: bcrypt hash of the password
        is_verified: Whether the account has been verified
        ratings: Running average of ratings received
        location: Optional home location
        created_at: Account creation timestamp
    """

    id: int
    name: str
    email: str
    phone: str
    password_hash: str
    is_verified: bool
    ratings: RatingSummary
    location: Optional[Location]
    created_at: datetime

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} verified={self.is_verified}>"


@dataclass(slots=True)
class OwnerProfile:
    """Subset of a user that is safe to show next to a listing."""

    id: int
    name: str
    email: str
    is_verified: bool
    ratings: RatingSummary


@dataclass(frozen=True, slots=True)
class Identity:
    """Claims carried by a verified session token."""

    user_id: int
    email: str
