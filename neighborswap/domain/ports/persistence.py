from __future__ import annotations

from typing import List, Optional, Protocol

from ..filters import ListingFilter
from ..models import Listing, Location, User


class UserRepository(Protocol):
    """Persistence functions related to marketplace accounts."""

    def create_user(
        self,
        name: str,
        email: str,
        phone: str,
        password_hash: str,
        *,
        is_verified: bool = False,
    ) -> User:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...


class ListingRepository(Protocol):
    """Persistence functions related to listings."""

    def create_listing(
        self,
        owner_id: int,
        name: str,
        description: str,
        price: float,
        category: str,
        condition: str,
        images: List[str],
        location: Optional[Location],
    ) -> Listing:
        ...

    def get_listing(self, listing_id: int) -> Optional[Listing]:
        ...

    def find_listings(self, criteria: ListingFilter, limit: Optional[int]) -> List[Listing]:
        ...

    def deactivate_listing(self, listing_id: int) -> None:
        ...

    def count_listings(self) -> int:
        ...


class PersistenceGateway(UserRepository, ListingRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
