"""Pydantic schemas for listing endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ....domain.models import Listing
from .user import LocationResponse, OwnerResponse


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    category: str
    condition: str
    images: List[str]
    location: Optional[LocationResponse] = None
    is_active: bool
    created_at: datetime
    owner: Optional[OwnerResponse] = None

    @classmethod
    def from_domain(cls, listing: Listing) -> "ProductResponse":
        return cls(
            id=listing.id,
            name=listing.name,
            description=listing.description,
            price=listing.price,
            category=listing.category,
            condition=listing.condition,
            images=list(listing.images),
            location=LocationResponse.from_domain(listing.location),
            is_active=listing.is_active,
            created_at=listing.created_at,
            owner=OwnerResponse.from_domain(listing.owner) if listing.owner else None,
        )


class ProductCreatedResponse(BaseModel):
    success: bool = True
    product: ProductResponse


class ProductListResponse(BaseModel):
    success: bool = True
    products: List[ProductResponse]
    count: int

    @classmethod
    def from_domain(cls, listings: List[Listing]) -> "ProductListResponse":
        products = [ProductResponse.from_domain(listing) for listing in listings]
        return cls(products=products, count=len(products))
