"""API routes for customer inquiries."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.inquiries.models import InquiryStatus
from wms.features.inquiries.schemas import (
    InquiryConvert,
    InquiryFilters,
    InquiryRespond,
    InquiryResponse,
    InquiryStatusUpdate,
    InquirySubmit,
)
from wms.features.inquiries.service import InquiryService
from wms.features.profiles.deps import get_optional_profile, require_roles, require_sales
from wms.features.profiles.models import Profile, Role
from wms.features.sales_orders.schemas import OrderResponse
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/inquiries", tags=["inquiries"])

require_inquiry_reader = require_roles(Role.SALES_OPERATOR, Role.CUSTOMER)


@router.post(
    "",
    response_model=InquiryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an inquiry",
    description="""
Storefront inquiry form. No profile is required; when the caller is a
logged-in customer the inquiry is linked to their profile so they can
follow it up. Every product line must reference an active product.
""",
)
async def submit_inquiry(
    data: InquirySubmit,
    db: AsyncSession = Depends(get_db),
    profile: Profile | None = Depends(get_optional_profile),
) -> InquiryResponse:
    return await InquiryService().submit_inquiry(db=db, data=data, profile=profile)


@router.get(
    "",
    response_model=PaginatedResponse[InquiryResponse],
    summary="List inquiries",
    description="Customers only see their own inquiries.",
)
async def list_inquiries(
    pagination: PaginationParams = Depends(),
    status: InquiryStatus | None = Query(None),
    search: str | None = Query(None, max_length=100, description="Name, email or company"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_inquiry_reader),
) -> PaginatedResponse[InquiryResponse]:
    filters = InquiryFilters(status=status, search=search, date_from=date_from, date_to=date_to)
    return await InquiryService().list_inquiries(
        db=db, profile=profile, pagination=pagination, filters=filters
    )


@router.get("/{inquiry_id}", response_model=InquiryResponse, summary="Get an inquiry")
async def get_inquiry(
    inquiry_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_inquiry_reader),
) -> InquiryResponse:
    return await InquiryService().get_inquiry(db=db, inquiry_id=inquiry_id, profile=profile)


@router.put(
    "/{inquiry_id}/status",
    response_model=InquiryResponse,
    summary="Mark an inquiry in progress or closed",
)
async def update_inquiry_status(
    inquiry_id: int,
    data: InquiryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> InquiryResponse:
    return await InquiryService().update_inquiry_status(
        db=db, inquiry_id=inquiry_id, new_status=data.status, actor=sales
    )


@router.post(
    "/{inquiry_id}/respond",
    response_model=InquiryResponse,
    summary="Reply to an inquiry",
)
async def respond_to_inquiry(
    inquiry_id: int,
    data: InquiryRespond,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> InquiryResponse:
    return await InquiryService().respond_to_inquiry(
        db=db, inquiry_id=inquiry_id, response=data.response, actor=sales
    )


@router.post(
    "/{inquiry_id}/convert",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Convert an inquiry into a sales order",
)
async def convert_to_order(
    inquiry_id: int,
    data: InquiryConvert | None = None,
    db: AsyncSession = Depends(get_db),
    sales: Profile = Depends(require_sales),
) -> OrderResponse:
    return await InquiryService().convert_to_order(
        db=db, inquiry_id=inquiry_id, data=data or InquiryConvert(), actor=sales
    )
