"""Import every ORM model so ``Base.metadata`` knows all tables.

Used by Alembic, scripts and the integration test fixtures.
"""

from wms.core.database import Base
from wms.features.batches.models import BatchItem, ProcessedBatch
from wms.features.catalog.models import Product
from wms.features.inquiries.models import SalesInquiry, SalesInquiryItem
from wms.features.inventory.models import InventoryItem, InventoryMovement, InventoryTransfer
from wms.features.notifications.models import Notification, NotificationRead
from wms.features.profiles.models import Profile
from wms.features.sales_orders.models import SalesOrder, SalesOrderItem
from wms.features.stock_in.models import StockIn
from wms.features.stock_out.models import StockOut, StockOutDetail
from wms.features.warehouses.models import Warehouse, WarehouseLocation

__all__ = [
    "Base",
    "BatchItem",
    "InventoryItem",
    "InventoryMovement",
    "InventoryTransfer",
    "Notification",
    "NotificationRead",
    "ProcessedBatch",
    "Product",
    "Profile",
    "SalesInquiry",
    "SalesInquiryItem",
    "SalesOrder",
    "SalesOrderItem",
    "StockIn",
    "StockOut",
    "StockOutDetail",
    "Warehouse",
    "WarehouseLocation",
]
