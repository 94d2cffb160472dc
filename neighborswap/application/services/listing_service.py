from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from ...domain.errors import Forbidden, NotFound, ValidationError
from ...domain.filters import ListingFilter
from ...domain.models import CATEGORIES, CONDITIONS, ImageUpload, Listing, Location
from ...domain.ports.persistence import PersistenceGateway
from ...domain.ports.storage import ImageStore
from .image_validation import DEFAULT_MAX_IMAGE_BYTES, DEFAULT_MAX_IMAGES, validate_images

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 2000


@dataclass(slots=True)
class ListingDraft:
    """Raw listing fields as submitted by a client."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Union[str, int, float, None] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    location: Union[str, Dict[str, Any], None] = None


@dataclass(slots=True)
class _CleanListing:
    name: str
    description: str
    price: float
    category: str
    condition: str
    location: Optional[Location]


class ListingService:
    """Creates listings on behalf of their owners and answers listing queries."""

    def __init__(
        self,
        persistence: PersistenceGateway,
        image_store: ImageStore,
        result_limit: int = 50,
        max_images: int = DEFAULT_MAX_IMAGES,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ) -> None:
        self._persistence = persistence
        self._images = image_store
        self._result_limit = result_limit
        self._max_images = max_images
        self._max_image_bytes = max_image_bytes

    # ------------------------------------------------------------------
    def create(self, owner_id: int, draft: ListingDraft, images: Sequence[ImageUpload] = ()) -> Listing:
        """
        Validate and store a new active listing owned by ``owner_id``.

        Nothing is written unless every field and every image passes
        validation. Images already stored are removed if the listing
        itself cannot be persisted.

        Raises:
            ValidationError: If one or more fields are invalid
            UploadRejected: If the images break the upload rules
            NotFound: If the owner does not exist
        """
        clean = _validate_draft(draft)
        validate_images(images, max_count=self._max_images, max_bytes=self._max_image_bytes)

        if self._persistence.get_user_by_id(owner_id) is None:
            raise NotFound("User not found")

        stored: List[str] = []
        try:
            for image in images:
                stored.append(self._images.save(image))
            listing = self._persistence.create_listing(
                owner_id=owner_id,
                name=clean.name,
                description=clean.description,
                price=clean.price,
                category=clean.category,
                condition=clean.condition,
                images=stored,
                location=clean.location,
            )
        except Exception:
            for reference in stored:
                self._images.delete(reference)
            raise

        logger.info("User %s created listing %s with %d images", owner_id, listing.id, len(stored))
        return listing

    def list(self, criteria: Optional[ListingFilter] = None) -> List[Listing]:
        """Active listings matching ``criteria``, newest first, capped at the result limit."""
        criteria = criteria or ListingFilter()
        return self._persistence.find_listings(criteria, limit=self._result_limit)

    def list_by_owner(self, owner_id: int) -> List[Listing]:
        return self._persistence.find_listings(ListingFilter(owner_id=owner_id), limit=None)

    def deactivate(self, listing_id: int, actor_id: int) -> None:
        """
        Hide a listing from every query. Only its owner may do this.

        Raises:
            NotFound: If the listing does not exist or is already inactive
            Forbidden: If ``actor_id`` does not own the listing
        """
        listing = self._persistence.get_listing(listing_id)
        if listing is None or not listing.is_active:
            raise NotFound(f"Listing {listing_id} not found")
        if listing.owner_id != actor_id:
            raise Forbidden("Only the owner can remove this listing")
        self._persistence.deactivate_listing(listing_id)
        logger.info("User %s deactivated listing %s", actor_id, listing_id)


def _validate_draft(draft: ListingDraft) -> _CleanListing:
    invalid: List[str] = []

    name = (draft.name or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        invalid.append("name")

    description = (draft.description or "").strip()
    if not description or len(description) > MAX_DESCRIPTION_LENGTH:
        invalid.append("description")

    price = _parse_price(draft.price)
    if price is None:
        invalid.append("price")

    category = (draft.category or "").strip()
    if category not in CATEGORIES:
        invalid.append("category")

    condition = (draft.condition or "").strip()
    if condition not in CONDITIONS:
        invalid.append("condition")

    try:
        location = _parse_location(draft.location)
    except (ValueError, OverflowError):
        location = None
        invalid.append("location")

    if invalid:
        raise ValidationError("Invalid listing fields: " + ", ".join(invalid), fields=invalid)

    return _CleanListing(
        name=name,
        description=description,
        price=price,
        category=category,
        condition=condition,
        location=location,
    )


def _parse_price(value: Union[str, int, float, None]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _parse_location(value: Union[str, Dict[str, Any], None]) -> Optional[Location]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    data = json.loads(value) if isinstance(value, str) else value
    if not isinstance(data, dict):
        raise ValueError("location must be an object")
    if not data:
        return None

    address = data.get("address")
    if address is not None and not isinstance(address, str):
        raise ValueError("address must be a string")
    coordinates = []
    for key in ("lat", "lng"):
        coordinate = data.get(key)
        if coordinate is not None and (
            isinstance(coordinate, bool) or not isinstance(coordinate, (int, float))
        ):
            raise ValueError(f"{key} must be a number")
        if coordinate is None:
            coordinates.append(None)
            continue
        coordinate = float(coordinate)
        if not math.isfinite(coordinate):
            raise ValueError(f"{key} must be finite")
        coordinates.append(coordinate)
    return Location(address=address, lat=coordinates[0], lng=coordinates[1])
