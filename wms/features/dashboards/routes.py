"""API routes for role dashboards and reports."""

from collections.abc import Sequence
from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.database import get_db
from wms.features.dashboards.schemas import (
    AdminDashboard,
    BatchTrackingRow,
    CustomerDashboard,
    InventoryStatusRow,
    ManagerDashboard,
    MovementReportRow,
    OperatorDashboard,
    ReportFormat,
    SalesDashboard,
)
from wms.features.dashboards.service import DashboardService, rows_to_csv
from wms.features.profiles.deps import (
    require_admin,
    require_manager,
    require_roles,
    require_sales,
    require_staff,
)
from wms.features.profiles.models import Profile, Role

router = APIRouter(tags=["dashboards"])

require_operator = require_roles(Role.FIELD_OPERATOR)
require_customer = require_roles(Role.CUSTOMER)


def _csv_response(rows: Sequence[BaseModel], model: type[BaseModel], name: str) -> Response:
    return Response(
        content=rows_to_csv(rows, model),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{name}-{date.today()}.csv"'},
    )


# =============================================================================
# Dashboards
# =============================================================================


@router.get("/dashboards/admin", response_model=AdminDashboard, summary="Admin dashboard")
async def admin_dashboard(
    db: AsyncSession = Depends(get_db),
    _admin: Profile = Depends(require_admin),
) -> AdminDashboard:
    return await DashboardService().admin_dashboard(db=db)


@router.get(
    "/dashboards/manager",
    response_model=ManagerDashboard,
    summary="Warehouse manager dashboard",
)
async def manager_dashboard(
    db: AsyncSession = Depends(get_db),
    _manager: Profile = Depends(require_manager),
) -> ManagerDashboard:
    return await DashboardService().manager_dashboard(db=db)


@router.get(
    "/dashboards/operator",
    response_model=OperatorDashboard,
    summary="Field operator dashboard",
    description="Counts cover the caller's own stock-ins and transfers.",
)
async def operator_dashboard(
    db: AsyncSession = Depends(get_db),
    operator: Profile = Depends(require_operator),
) -> OperatorDashboard:
    return await DashboardService().operator_dashboard(db=db, profile=operator)


@router.get("/dashboards/sales", response_model=SalesDashboard, summary="Sales dashboard")
async def sales_dashboard(
    db: AsyncSession = Depends(get_db),
    _sales: Profile = Depends(require_sales),
) -> SalesDashboard:
    return await DashboardService().sales_dashboard(db=db)


@router.get(
    "/dashboards/customer",
    response_model=CustomerDashboard,
    summary="Customer dashboard",
)
async def customer_dashboard(
    db: AsyncSession = Depends(get_db),
    customer: Profile = Depends(require_customer),
) -> CustomerDashboard:
    return await DashboardService().customer_dashboard(db=db, profile=customer)


# =============================================================================
# Reports
# =============================================================================


@router.get(
    "/reports/inventory-status",
    response_model=list[InventoryStatusRow],
    summary="Inventory status report",
    description="""
In-stock boxes and units per active product, lowest stock first. Products
below the configured low-stock threshold are flagged `low_stock`.

Pass `format=csv` to download the report as CSV.
""",
)
async def inventory_status_report(
    category: str | None = Query(None, description="Filter by category (exact match)"),
    low_stock_only: bool = Query(False, description="Only products below the threshold"),
    format: ReportFormat = Query(ReportFormat.JSON),
    db: AsyncSession = Depends(get_db),
    _staff: Profile = Depends(require_staff),
) -> list[InventoryStatusRow] | Response:
    rows = await DashboardService().inventory_status_report(
        db=db, category=category, low_stock_only=low_stock_only
    )
    if format is ReportFormat.CSV:
        return _csv_response(rows, InventoryStatusRow, "inventory-status")
    return rows


@router.get(
    "/reports/movements",
    response_model=list[MovementReportRow],
    summary="Movement report",
    description="""
Approved ledger totals per day and movement type. Scans are not counted.

The range defaults to the last 30 days and is limited by `report_max_days`.
Pass `format=csv` to download the report as CSV.
""",
)
async def movement_report(
    date_from: date | None = Query(None, description="Inclusive start date"),
    date_to: date | None = Query(None, description="Inclusive end date, defaults to today"),
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    format: ReportFormat = Query(ReportFormat.JSON),
    db: AsyncSession = Depends(get_db),
    _manager: Profile = Depends(require_manager),
) -> list[MovementReportRow] | Response:
    rows = await DashboardService().movement_report(
        db=db,
        date_from=date_from,
        date_to=date_to,
        product_id=product_id,
        warehouse_id=warehouse_id,
    )
    if format is ReportFormat.CSV:
        return _csv_response(rows, MovementReportRow, "movements")
    return rows


@router.get(
    "/reports/batch-tracking",
    response_model=list[BatchTrackingRow],
    summary="Batch tracking report",
    description="Original, remaining and sold units per batch. `format=csv` downloads CSV.",
)
async def batch_tracking_report(
    product_id: int | None = Query(None),
    date_from: date | None = Query(None, description="Processed on or after"),
    date_to: date | None = Query(None, description="Processed on or before"),
    format: ReportFormat = Query(ReportFormat.JSON),
    db: AsyncSession = Depends(get_db),
    _manager: Profile = Depends(require_manager),
) -> list[BatchTrackingRow] | Response:
    rows = await DashboardService().batch_tracking_report(
        db=db, product_id=product_id, date_from=date_from, date_to=date_to
    )
    if format is ReportFormat.CSV:
        return _csv_response(rows, BatchTrackingRow, "batch-tracking")
    return rows
