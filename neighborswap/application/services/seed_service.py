from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import bcrypt

from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

SEED_USER_EMAIL = "seed@example.com"


@dataclass(frozen=True, slots=True)
class SeedListing:
    name: str
    description: str
    price: float
    category: str
    condition: str
    image: str


DEMO_LISTINGS: List[SeedListing] = [
    SeedListing(
        "MacBook Air M2",
        "Brand new MacBook Air with M2 chip. 8GB RAM, 256GB SSD. Perfect for students and professionals.",
        999,
        "Electronics",
        "New",
        "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?w=500",
    ),
    SeedListing(
        "Vintage Leather Sofa",
        "Beautiful brown leather sofa in excellent condition. 3-seater, very comfortable.",
        450,
        "Furniture",
        "Good",
        "https://images.unsplash.com/photo-1555041469-a586c61ea9bc?w=500",
    ),
    SeedListing(
        "iPhone 14 Pro",
        "Like new iPhone 14 Pro, 128GB, Space Black. Includes original box and accessories.",
        800,
        "Electronics",
        "Like New",
        "https://images.unsplash.com/photo-1592899677977-9c10ca588bbd?w=500",
    ),
    SeedListing(
        "Mountain Bike",
        "Trek mountain bike, 21-speed, excellent for trails and city riding. Recently serviced.",
        320,
        "Sports",
        "Good",
        "https://images.unsplash.com/photo-1544191696-15693072e1c4?w=500",
    ),
    SeedListing(
        "Coffee Table",
        "Modern glass coffee table with wooden legs. Perfect centerpiece for living room.",
        150,
        "Furniture",
        "Good",
        "https://images.unsplash.com/photo-1549497538-303791108f95?w=500",
    ),
    SeedListing(
        "Gaming Chair",
        "Ergonomic gaming chair with RGB lighting. Excellent lumbar support, barely used.",
        200,
        "Furniture",
        "Like New",
        "https://images.unsplash.com/photo-1541558869434-2840d308329a?w=500",
    ),
    SeedListing(
        "Wireless Headphones",
        "Sony WH-1000XM4 noise cancelling headphones. Excellent sound quality.",
        250,
        "Electronics",
        "Good",
        "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500",
    ),
    SeedListing(
        "Designer Dress",
        "Beautiful evening dress, size M. Worn only once, perfect for special occasions.",
        80,
        "Clothing",
        "Like New",
        "https://images.unsplash.com/photo-1595777457583-95e059d581b8?w=500",
    ),
    SeedListing(
        "Kitchen Blender",
        "High-power Vitamix blender. Perfect for smoothies and food preparation.",
        45,
        "Home & Garden",
        "Good",
        "https://images.unsplash.com/photo-1570197788417-0e82375c9371?w=500",
    ),
    SeedListing(
        "Programming Books Set",
        "Collection of 5 programming books including Clean Code, Design Patterns, etc.",
        60,
        "Books",
        "Good",
        "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=500",
    ),
]


class SeedService:
    """Fills an empty store with a demo account and demo listings."""

    def __init__(self, persistence: PersistenceGateway, bcrypt_rounds: int = 12) -> None:
        self._persistence = persistence
        self._bcrypt_rounds = bcrypt_rounds

    def seed(self, seed_password: str = "password123") -> int:
        """Return the number of listings inserted, zero when listings already exist."""
        if self._persistence.count_listings() > 0:
            logger.info("Store already holds listings, skipping seed")
            return 0

        owner = self._persistence.get_user_by_email(SEED_USER_EMAIL)
        if owner is None:
            password_hash = bcrypt.hashpw(
                seed_password.encode("utf-8"), bcrypt.gensalt(rounds=self._bcrypt_rounds)
            ).decode("utf-8")
            owner = self._persistence.create_user(
                name="Seed User",
                email=SEED_USER_EMAIL,
                phone="1234567890",
                password_hash=password_hash,
                is_verified=True,
            )

        for item in DEMO_LISTINGS:
            self._persistence.create_listing(
                owner_id=owner.id,
                name=item.name,
                description=item.description,
                price=item.price,
                category=item.category,
                condition=item.condition,
                images=[item.image],
                location=None,
            )
        logger.info("Seeded %d demo listings", len(DEMO_LISTINGS))
        return len(DEMO_LISTINGS)
