"""Domain models for the NeighborSwap application."""

from .listing import CATEGORIES, CONDITIONS, ImageUpload, Listing
from .user import Identity, Location, OwnerProfile, RatingSummary, User

__all__ = [
    "CATEGORIES",
    "CONDITIONS",
    "Identity",
    "ImageUpload",
    "Listing",
    "Location",
    "OwnerProfile",
    "RatingSummary",
    "User",
]
