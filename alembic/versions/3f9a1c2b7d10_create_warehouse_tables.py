"""create_warehouse_tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def _jsonb() -> postgresql.JSONB:
    return postgresql.JSONB(astext_type=sa.Text())


def upgrade() -> None:
    """Apply migration - create every warehouse table."""
    # Profiles
    op.create_table(
        "profile",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(length=64), nullable=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("company", sa.String(length=150), nullable=True),
        sa.Column("role", sa.String(length=30), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_id"),
        sa.CheckConstraint(
            "role IN ('admin', 'warehouse_manager', 'field_operator', "
            "'sales_operator', 'customer')",
            name="ck_profile_valid_role",
        ),
    )
    op.create_index("ix_profile_username", "profile", ["username"], unique=True)
    op.create_index("ix_profile_email", "profile", ["email"])
    op.create_index("ix_profile_role", "profile", ["role"])

    # Catalog
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("sku", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("specifications", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("hsn_code", sa.String(length=20), nullable=True),
        sa.Column("gst_rate", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sku"),
        sa.ForeignKeyConstraint(["created_by"], ["profile.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "gst_rate IS NULL OR (gst_rate >= 0 AND gst_rate <= 100)",
            name="ck_product_gst_rate_range",
        ),
    )
    op.create_index("ix_product_name", "product", ["name"])
    op.create_index("ix_product_category", "product", ["category"])
    op.create_index("ix_product_is_active", "product", ["is_active"])

    # Warehouses
    op.create_table(
        "warehouse",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "warehouse_location",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False),
        sa.Column("zone", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("warehouse_id", "floor", "zone", name="uq_location_floor_zone"),
        sa.CheckConstraint("floor >= 0", name="ck_location_floor_non_negative"),
    )
    op.create_index(
        "ix_warehouse_location_warehouse_id", "warehouse_location", ["warehouse_id"]
    )

    # Stock-in
    op.create_table(
        "stock_in",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("boxes", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("submitted_by", sa.Integer(), nullable=False),
        sa.Column("processed_by", sa.Integer(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("processing_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processing_completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["submitted_by"], ["profile.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["profile.id"]),
        sa.CheckConstraint("boxes > 0", name="ck_stock_in_boxes_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'processing', 'completed', 'failed')",
            name="ck_stock_in_valid_status",
        ),
    )
    op.create_index("ix_stock_in_product_id", "stock_in", ["product_id"])
    op.create_index("ix_stock_in_status", "stock_in", ["status"])
    op.create_index("ix_stock_in_submitted_by", "stock_in", ["submitted_by"])

    # Batches
    op.create_table(
        "processed_batch",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("batch_number", sa.String(length=50), nullable=False),
        sa.Column("stock_in_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("total_boxes", sa.Integer(), nullable=False),
        sa.Column("total_quantity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("processed_by", sa.Integer(), nullable=True),
        sa.Column(
            "processed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("source", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("batch_number"),
        sa.ForeignKeyConstraint(["stock_in_id"], ["stock_in.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["warehouse_location.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["profile.id"]),
        sa.CheckConstraint("total_boxes > 0", name="ck_batch_total_boxes_positive"),
        sa.CheckConstraint("total_quantity >= 0", name="ck_batch_total_quantity_non_negative"),
        sa.CheckConstraint(
            "status IN ('processing', 'completed')", name="ck_batch_valid_status"
        ),
    )
    op.create_index("ix_processed_batch_stock_in_id", "processed_batch", ["stock_in_id"])
    op.create_index("ix_processed_batch_product_id", "processed_batch", ["product_id"])
    op.create_index("ix_processed_batch_warehouse_id", "processed_batch", ["warehouse_id"])

    op.create_table(
        "batch_item",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("batch_id", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(length=50), nullable=True),
        sa.Column("size", sa.String(length=50), nullable=True),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("barcode"),
        sa.ForeignKeyConstraint(["batch_id"], ["processed_batch.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["warehouse_location.id"]),
        sa.CheckConstraint("quantity >= 0", name="ck_batch_item_quantity_non_negative"),
    )
    op.create_index("ix_batch_item_batch_id", "batch_item", ["batch_id"])

    # Inventory
    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("batch_id", sa.Integer(), nullable=True),
        sa.Column("barcode", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(length=50), nullable=True),
        sa.Column("size", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("barcode"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["warehouse_location.id"]),
        sa.ForeignKeyConstraint(["batch_id"], ["processed_batch.id"]),
        sa.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        sa.CheckConstraint(
            "status IN ('available', 'reserved', 'sold', 'damaged', 'in_transit')",
            name="ck_inventory_valid_status",
        ),
    )
    op.create_index("ix_inventory_product_id", "inventory", ["product_id"])
    op.create_index("ix_inventory_warehouse_id", "inventory", ["warehouse_id"])
    op.create_index("ix_inventory_location_id", "inventory", ["location_id"])
    op.create_index("ix_inventory_batch_id", "inventory", ["batch_id"])
    op.create_index("ix_inventory_status", "inventory", ["status"])

    op.create_table(
        "inventory_movement",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("warehouse_id", sa.Integer(), nullable=False),
        sa.Column("location_id", sa.Integer(), nullable=False),
        sa.Column("inventory_id", sa.Integer(), nullable=True),
        sa.Column("movement_type", sa.String(length=20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("reference_table", sa.String(length=50), nullable=True),
        sa.Column("reference_id", sa.String(length=50), nullable=True),
        sa.Column("performed_by", sa.Integer(), nullable=True),
        sa.Column("details", _jsonb(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["location_id"], ["warehouse_location.id"]),
        sa.ForeignKeyConstraint(["inventory_id"], ["inventory.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["performed_by"], ["profile.id"]),
        sa.CheckConstraint(
            "movement_type IN ('in', 'out', 'adjustment', 'reserve', 'release', 'transfer')",
            name="ck_movement_valid_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'in_transit')",
            name="ck_movement_valid_status",
        ),
    )
    op.create_index("ix_inventory_movement_product_id", "inventory_movement", ["product_id"])
    op.create_index(
        "ix_inventory_movement_warehouse_id", "inventory_movement", ["warehouse_id"]
    )
    op.create_index(
        "ix_inventory_movement_inventory_id", "inventory_movement", ["inventory_id"]
    )
    op.create_index(
        "ix_inventory_movement_movement_type", "inventory_movement", ["movement_type"]
    )
    op.create_index(
        "ix_inventory_movement_performed_by", "inventory_movement", ["performed_by"]
    )
    op.create_index("ix_inventory_movement_created_at", "inventory_movement", ["created_at"])
    op.create_index(
        "ix_movement_reference", "inventory_movement", ["reference_table", "reference_id"]
    )

    op.create_table(
        "inventory_transfer",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("source_warehouse_id", sa.Integer(), nullable=False),
        sa.Column("source_location_id", sa.Integer(), nullable=False),
        sa.Column("destination_warehouse_id", sa.Integer(), nullable=False),
        sa.Column("destination_location_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("initiated_by", sa.Integer(), nullable=False),
        sa.Column("approved_by", sa.Integer(), nullable=True),
        sa.Column("barcodes", _jsonb(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["source_warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["source_location_id"], ["warehouse_location.id"]),
        sa.ForeignKeyConstraint(["destination_warehouse_id"], ["warehouse.id"]),
        sa.ForeignKeyConstraint(["destination_location_id"], ["warehouse_location.id"]),
        sa.ForeignKeyConstraint(["initiated_by"], ["profile.id"]),
        sa.ForeignKeyConstraint(["approved_by"], ["profile.id"]),
        sa.CheckConstraint("quantity > 0", name="ck_transfer_quantity_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed')",
            name="ck_transfer_valid_status",
        ),
    )
    op.create_index("ix_inventory_transfer_product_id", "inventory_transfer", ["product_id"])
    op.create_index("ix_inventory_transfer_status", "inventory_transfer", ["status"])

    # Inquiries
    op.create_table(
        "sales_inquiry",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=100), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("customer_company", sa.String(length=150), nullable=True),
        sa.Column("customer_phone", sa.String(length=30), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("customer_profile_id", sa.Integer(), nullable=True),
        sa.Column("responded_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["customer_profile_id"], ["profile.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["responded_by"], ["profile.id"]),
        sa.CheckConstraint(
            "status IN ('new', 'in_progress', 'responded', 'converted', 'completed', 'closed')",
            name="ck_inquiry_valid_status",
        ),
    )
    op.create_index("ix_sales_inquiry_customer_email", "sales_inquiry", ["customer_email"])
    op.create_index("ix_sales_inquiry_status", "sales_inquiry", ["status"])
    op.create_index(
        "ix_sales_inquiry_customer_profile_id", "sales_inquiry", ["customer_profile_id"]
    )

    op.create_table(
        "sales_inquiry_item",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("inquiry_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("specific_requirements", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["inquiry_id"], ["sales_inquiry.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.CheckConstraint("quantity > 0", name="ck_inquiry_item_quantity_positive"),
    )
    op.create_index("ix_sales_inquiry_item_inquiry_id", "sales_inquiry_item", ["inquiry_id"])

    # Sales orders
    op.create_table(
        "sales_order",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sales_order_number", sa.String(length=30), nullable=False),
        sa.Column("customer_name", sa.String(length=100), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("customer_company", sa.String(length=150), nullable=True),
        sa.Column("customer_phone", sa.String(length=30), nullable=True),
        sa.Column("inquiry_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("pushed_to_stockout", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sales_order_number"),
        sa.ForeignKeyConstraint(["inquiry_id"], ["sales_inquiry.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["profile.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'processing', 'dispatched', "
            "'completed', 'cancelled')",
            name="ck_sales_order_valid_status",
        ),
        sa.CheckConstraint("total_amount >= 0", name="ck_sales_order_total_non_negative"),
    )
    op.create_index("ix_sales_order_inquiry_id", "sales_order", ["inquiry_id"])
    op.create_index("ix_sales_order_status", "sales_order", ["status"])

    op.create_table(
        "sales_order_item",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["order_id"], ["sales_order.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.CheckConstraint("quantity > 0", name="ck_order_item_quantity_positive"),
        sa.CheckConstraint("unit_price >= 0", name="ck_order_item_price_non_negative"),
    )
    op.create_index("ix_sales_order_item_order_id", "sales_order_item", ["order_id"])

    # Stock-out
    op.create_table(
        "stock_out",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("destination", sa.String(length=200), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("requested_by", sa.Integer(), nullable=False),
        sa.Column("approved_by", sa.Integer(), nullable=True),
        sa.Column("approved_quantity", sa.Integer(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("processed_by", sa.Integer(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invoice_number", sa.String(length=50), nullable=True),
        sa.Column("packing_slip_number", sa.String(length=50), nullable=True),
        sa.Column("reference_number", sa.String(length=50), nullable=True),
        sa.Column("sales_order_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"]),
        sa.ForeignKeyConstraint(["requested_by"], ["profile.id"]),
        sa.ForeignKeyConstraint(["approved_by"], ["profile.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["profile.id"]),
        sa.ForeignKeyConstraint(["sales_order_id"], ["sales_order.id"]),
        sa.CheckConstraint("quantity > 0", name="ck_stock_out_quantity_positive"),
        sa.CheckConstraint(
            "approved_quantity IS NULL OR "
            "(approved_quantity > 0 AND approved_quantity <= quantity)",
            name="ck_stock_out_approved_quantity_range",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'processing', 'completed')",
            name="ck_stock_out_valid_status",
        ),
    )
    op.create_index("ix_stock_out_product_id", "stock_out", ["product_id"])
    op.create_index("ix_stock_out_status", "stock_out", ["status"])
    op.create_index("ix_stock_out_requested_by", "stock_out", ["requested_by"])
    op.create_index("ix_stock_out_reference_number", "stock_out", ["reference_number"])
    op.create_index("ix_stock_out_sales_order_id", "stock_out", ["sales_order_id"])

    op.create_table(
        "stock_out_detail",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("stock_out_id", sa.Integer(), nullable=False),
        sa.Column("inventory_id", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("processed_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["stock_out_id"], ["stock_out.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inventory_id"], ["inventory.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["profile.id"]),
        sa.CheckConstraint("quantity > 0", name="ck_stock_out_detail_quantity_positive"),
    )
    op.create_index("ix_stock_out_detail_stock_out_id", "stock_out_detail", ["stock_out_id"])
    op.create_index("ix_stock_out_detail_barcode", "stock_out_detail", ["barcode"])

    # Notifications
    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("role", sa.String(length=30), nullable=True),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("metadata", _jsonb(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profile.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notification_action_type", "notification", ["action_type"])
    op.create_index("ix_notification_created_at", "notification", ["created_at"])
    op.create_index("ix_notification_user_unread", "notification", ["user_id", "is_read"])
    op.create_index("ix_notification_role_unread", "notification", ["role", "is_read"])

    op.create_table(
        "notification_read",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("notification_id", sa.Integer(), nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column(
            "read_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["notification_id"], ["notification.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["profile_id"], ["profile.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "notification_id", "profile_id", name="uq_notification_read_recipient"
        ),
    )
    op.create_index("ix_notification_read_profile_id", "notification_read", ["profile_id"])


def downgrade() -> None:
    """Revert migration - drop every warehouse table."""
    for table in (
        "notification_read",
        "notification",
        "stock_out_detail",
        "stock_out",
        "sales_order_item",
        "sales_order",
        "sales_inquiry_item",
        "sales_inquiry",
        "inventory_transfer",
        "inventory_movement",
        "inventory",
        "batch_item",
        "processed_batch",
        "stock_in",
        "warehouse_location",
        "warehouse",
        "product",
        "profile",
    ):
        op.drop_table(table)
