from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .user import Location, OwnerProfile

CATEGORIES = (
    "Electronics",
    "Furniture",
    "Clothing",
    "Books",
    "Sports",
    "Home & Garden",
    "Toys",
    "Other",
)

CONDITIONS = ("New", "Like New", "Good", "Fair", "Poor")


@dataclass(slots=True)
class Listing:
    id: int
    owner_id: int
    name: str
    description: str
    price: float
    category: str
    condition: str
    images: List[str]
    location: Optional[Location]
    is_active: bool
    created_at: datetime
    owner: Optional[OwnerProfile] = None


@dataclass(slots=True)
class ImageUpload:
    """An uploaded file buffered in memory, not yet validated."""

    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)
