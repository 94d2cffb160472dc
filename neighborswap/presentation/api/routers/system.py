from fastapi import APIRouter, Depends

from ....application.services.seed_service import SeedService
from ....core.config import Settings
from ....core.dependencies import get_seed_service, get_settings
from ....domain.errors import NotFound
from ..schemas.common import HealthResponse, SeedResponse

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.post("/seed", response_model=SeedResponse)
def seed(
    settings: Settings = Depends(get_settings),
    seed_service: SeedService = Depends(get_seed_service),
) -> SeedResponse:
    """Insert demo listings into an empty store."""
    if not settings.seed_enabled:
        raise NotFound("Seeding is disabled")
    count = seed_service.seed()
    return SeedResponse(seeded=count > 0, count=count)
