from fastapi import APIRouter, Depends

from ....application.services.listing_service import ListingService
from ....core.dependencies import get_listing_service
from ..schemas.product import ProductListResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}/products", response_model=ProductListResponse)
def list_user_products(
    user_id: int,
    service: ListingService = Depends(get_listing_service),
) -> ProductListResponse:
    """Active listings owned by one user, newest first."""
    return ProductListResponse.from_domain(service.list_by_owner(user_id))
