"""API router for browsing and publishing listings."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from ....application.services.listing_service import ListingDraft, ListingService
from ....core.config import Settings
from ....core.dependencies import get_listing_service, get_settings
from ....domain.errors import UploadRejected
from ....domain.filters import ListingFilter
from ....domain.models import Identity, ImageUpload
from ..dependencies import require_identity
from ..schemas.product import ProductCreatedResponse, ProductListResponse, ProductResponse

router = APIRouter(prefix="/api/products", tags=["products"])


async def buffer_uploads(
    files: Optional[List[UploadFile]],
    *,
    max_count: int,
    max_bytes: int,
) -> List[ImageUpload]:
    """Read uploaded files into memory, at most ``max_bytes + 1`` bytes each.

    Reading one byte past the ceiling is enough for validation to notice an
    oversized file without buffering all of it.
    """
    # Browsers submit an empty part when no file was chosen.
    selected = [item for item in files or [] if item.filename]
    if len(selected) > max_count:
        raise UploadRejected(f"At most {max_count} images are allowed", fields=["images"])

    uploads: List[ImageUpload] = []
    for item in selected:
        data = await item.read(max_bytes + 1)
        await item.close()
        uploads.append(
            ImageUpload(
                filename=item.filename or "",
                content_type=item.content_type or "",
                data=data,
            )
        )
    return uploads


@router.get("", response_model=ProductListResponse)
def list_products(
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    min_price: Optional[str] = Query(default=None, alias="minPrice"),
    max_price: Optional[str] = Query(default=None, alias="maxPrice"),
    condition: Optional[str] = Query(default=None),
    service: ListingService = Depends(get_listing_service),
) -> ProductListResponse:
    criteria = ListingFilter.from_params(
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        condition=condition,
    )
    return ProductListResponse.from_domain(service.list(criteria))


@router.post("", response_model=ProductCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    condition: Optional[str] = Form(default=None),
    location: Optional[str] = Form(default=None),
    images: Optional[List[UploadFile]] = File(default=None),
    identity: Identity = Depends(require_identity),
    service: ListingService = Depends(get_listing_service),
    settings: Settings = Depends(get_settings),
) -> ProductCreatedResponse:
    uploads = await buffer_uploads(
        images,
        max_count=settings.max_images_per_listing,
        max_bytes=settings.max_upload_bytes,
    )
    draft = ListingDraft(
        name=name,
        description=description,
        price=price,
        category=category,
        condition=condition,
        location=location,
    )
    listing = await run_in_threadpool(service.create, identity.user_id, draft, uploads)
    return ProductCreatedResponse(product=ProductResponse.from_domain(listing))


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_product(
    listing_id: int,
    identity: Identity = Depends(require_identity),
    service: ListingService = Depends(get_listing_service),
) -> Response:
    service.deactivate(listing_id, identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user/{user_id}", response_model=ProductListResponse)
def list_user_products_alias(
    user_id: int,
    service: ListingService = Depends(get_listing_service),
) -> ProductListResponse:
    return ProductListResponse.from_domain(service.list_by_owner(user_id))
