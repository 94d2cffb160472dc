from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.listing_service import ListingService
from ..application.services.seed_service import SeedService
from ..domain.ports.persistence import PersistenceGateway
from ..domain.ports.storage import ImageStore
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    image_store: ImageStore
    auth_service: AuthService
    listing_service: ListingService
    seed_service: SeedService
