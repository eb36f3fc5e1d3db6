"""API routes for processed batches and barcode artwork."""

from datetime import date

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.batches.models import BatchStatus
from wms.features.batches.schemas import BatchDetailResponse, BatchFilters, BatchResponse
from wms.features.batches.service import BatchService
from wms.features.profiles.deps import require_staff
from wms.features.profiles.models import Profile
from wms.shared import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/batches", tags=["batches"])


@router.get(
    "",
    response_model=PaginatedResponse[BatchResponse],
    summary="List processed batches",
)
async def list_batches(
    pagination: PaginationParams = Depends(),
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    stock_in_id: int | None = Query(None),
    status: BatchStatus | None = Query(None),
    date_from: date | None = Query(None, description="Processed on or after"),
    date_to: date | None = Query(None, description="Processed on or before"),
    search: str | None = Query(None, max_length=50, description="Batch number contains"),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> PaginatedResponse[BatchResponse]:
    filters = BatchFilters(
        product_id=product_id,
        warehouse_id=warehouse_id,
        stock_in_id=stock_in_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )
    return await BatchService().list_batches(db=db, pagination=pagination, filters=filters)


@router.get(
    "/barcodes/{barcode}.svg",
    response_class=Response,
    responses={200: {"content": {"image/svg+xml": {}}}},
    summary="Render a barcode as SVG",
)
async def barcode_svg(
    barcode: str = Path(..., min_length=1, max_length=64),
    _staff: Profile = Depends(require_staff),
) -> Response:
    svg = BatchService().barcode_svg(barcode)
    return Response(content=svg, media_type="image/svg+xml")


@router.get("/{batch_id}", response_model=BatchDetailResponse, summary="Get a batch with boxes")
async def get_batch(
    batch_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> BatchDetailResponse:
    return await BatchService().get_batch(db=db, batch_id=batch_id)


@router.get(
    "/{batch_id}/barcodes",
    response_model=list[str],
    summary="List the box barcodes of a batch",
)
async def list_batch_barcodes(
    batch_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> list[str]:
    return await BatchService().list_batch_barcodes(db=db, batch_id=batch_id)


@router.get(
    "/{batch_id}/labels.pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    summary="Printable label sheet",
    description="A4 PDF with one Code128 label per box (3 x 8 labels per page).",
)
async def batch_labels_pdf(
    batch_id: int,
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> Response:
    batch_number, pdf = await BatchService().batch_labels_pdf(db=db, batch_id=batch_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{batch_number}-labels.pdf"'},
    )
