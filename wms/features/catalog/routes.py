"""API routes for the product catalog."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.catalog.schemas import (
    ProductCreate,
    ProductResponse,
    ProductStockResponse,
    ProductUpdate,
)
from wms.features.catalog.service import CatalogService, can_see_inactive
from wms.features.profiles.deps import get_optional_profile, require_roles
from wms.features.profiles.models import Profile, Role
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/products", tags=["catalog"])

require_catalog_editor = require_roles(Role.WAREHOUSE_MANAGER)


@router.get(
    "/stock",
    response_model=list[ProductStockResponse],
    summary="Storefront stock levels",
    description="""
Every active product with its `in_stock_quantity` (sum of box quantities in
status `available` or `reserved`) and an `is_out_of_stock` flag.

Public: no profile header required.
""",
)
async def product_stock(db: AsyncSession = Depends(get_db)) -> list[ProductStockResponse]:
    return await CatalogService().product_stock(db=db)


@router.get("/categories", response_model=list[str], summary="List product categories")
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[str]:
    return await CatalogService().list_categories(db=db)


@router.get(
    "",
    response_model=PaginatedResponse[ProductResponse],
    summary="List products",
    description="""
List products ordered by name.

Customers and anonymous callers only see active products; staff may pass
`is_active=false` to see deactivated ones.
""",
)
async def list_products(
    pagination: PaginationParams = Depends(),
    category: str | None = Query(None, max_length=100, description="Filter by category"),
    is_active: bool | None = Query(None, description="Filter by active flag (staff only)"),
    search: str | None = Query(None, max_length=100, description="Search name/SKU/description"),
    db: AsyncSession = Depends(get_db),
    profile: Profile | None = Depends(get_optional_profile),
) -> PaginatedResponse[ProductResponse]:
    return await CatalogService().list_products(
        db=db,
        pagination=pagination,
        category=category,
        is_active=is_active,
        search=search,
        include_inactive=can_see_inactive(profile),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
async def create_product(
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    editor: Profile = Depends(require_catalog_editor),
) -> ProductResponse:
    return await CatalogService().create_product(db=db, data=data, created_by=editor.id)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get a product")
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile | None = Depends(get_optional_profile),
) -> ProductResponse:
    return await CatalogService().get_product(
        db=db, product_id=product_id, include_inactive=can_see_inactive(profile)
    )


@router.patch("/{product_id}", response_model=ProductResponse, summary="Update a product")
async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: Profile = Depends(require_catalog_editor),
) -> ProductResponse:
    return await CatalogService().update_product(db=db, product_id=product_id, data=data)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Deactivate a product",
    description="Soft delete: the product is hidden from the storefront but history is kept.",
)
async def deactivate_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    _editor: Profile = Depends(require_catalog_editor),
) -> ProductResponse:
    return await CatalogService().deactivate_product(db=db, product_id=product_id)
