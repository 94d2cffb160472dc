"""Pydantic schemas for account endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from ....domain.models import Location, OwnerProfile, RatingSummary, User


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: str
    password: str


class RatingsResponse(BaseModel):
    average: float
    count: int

    @classmethod
    def from_domain(cls, ratings: RatingSummary) -> "RatingsResponse":
        return cls(average=ratings.average, count=ratings.count)


class LocationResponse(BaseModel):
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    @classmethod
    def from_domain(cls, location: Optional[Location]) -> Optional["LocationResponse"]:
        if location is None:
            return None
        return cls(address=location.address, lat=location.lat, lng=location.lng)


class OwnerResponse(BaseModel):
    """Owner details shown alongside a listing."""

    id: int
    name: str
    email: str
    is_verified: bool
    ratings: RatingsResponse

    @classmethod
    def from_domain(cls, owner: OwnerProfile) -> "OwnerResponse":
        return cls(
            id=owner.id,
            name=owner.name,
            email=owner.email,
            is_verified=owner.is_verified,
            ratings=RatingsResponse.from_domain(owner.ratings),
        )


class UserResponse(BaseModel):
    """Public profile of an account. Never carries credentials."""

    id: int
    name: str
    email: str
    phone: str
    is_verified: bool
    ratings: RatingsResponse
    location: Optional[LocationResponse] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            is_verified=user.is_verified,
            ratings=RatingsResponse.from_domain(user.ratings),
            location=LocationResponse.from_domain(user.location),
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    """Response schema for register and login."""

    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserResponse


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserResponse
