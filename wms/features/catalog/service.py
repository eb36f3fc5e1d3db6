"""Catalog service: product CRUD and storefront stock levels."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.exceptions import ConflictError, NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.catalog.models import Product
from wms.features.catalog.schemas import (
    ProductCreate,
    ProductResponse,
    ProductStockResponse,
    ProductUpdate,
)
from wms.features.inventory.models import IN_STOCK_STATUSES, InventoryItem
from wms.features.profiles.models import STAFF_ROLES, Profile
from wms.shared import PaginatedResponse, PaginationParams, fetch_page, paginate_response

logger = get_logger(__name__)


def can_see_inactive(profile: Profile | None) -> bool:
    """Staff see deactivated products; customers and anonymous callers do not."""
    return profile is not None and profile.role in {r.value for r in STAFF_ROLES}


class CatalogService:
    """Manage products and compute sellable stock."""

    async def get_product_model(self, db: AsyncSession, product_id: int) -> Product:
        """Load a product or raise NotFoundError."""
        product = await db.get(Product, product_id)
        if product is None:
            raise NotFoundError(message=f"Product not found: {product_id}")
        return product

    async def active_products(self, db: AsyncSession, product_ids: list[int]) -> dict[int, Product]:
        """Load the products of order or inquiry lines.

        Raises:
            ValidationError: If any product is unknown or inactive.
        """
        wanted = set(product_ids)
        result = await db.execute(select(Product).where(Product.id.in_(wanted)))
        products = {p.id: p for p in result.scalars().all()}
        unknown = sorted(wanted - products.keys())
        inactive = sorted(pid for pid, p in products.items() if not p.is_active)
        if unknown or inactive:
            raise ValidationError(
                message="Unknown or inactive products",
                details={"unknown": unknown, "inactive": inactive},
            )
        return products

    async def _ensure_sku_free(
        self,
        db: AsyncSession,
        sku: str,
        exclude_id: int | None = None,
    ) -> None:
        stmt = select(Product.id).where(Product.sku == sku)
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(message=f"SKU '{sku}' already exists", details={"sku": sku})

    async def create_product(
        self,
        db: AsyncSession,
        data: ProductCreate,
        created_by: int | None,
    ) -> ProductResponse:
        """Create a product.

        Raises:
            ConflictError: If the SKU is already used.
        """
        if data.sku:
            await self._ensure_sku_free(db, data.sku)

        product = Product(**data.model_dump(), is_active=True, created_by=created_by)
        db.add(product)
        await db.flush()
        await db.refresh(product)

        logger.info(
            "catalog.product_created",
            product_id=product.id,
            sku=product.sku,
            category=product.category,
        )
        return ProductResponse.model_validate(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: int,
        data: ProductUpdate,
    ) -> ProductResponse:
        """Apply a partial update to a product."""
        product = await self.get_product_model(db, product_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("sku") and changes["sku"] != product.sku:
            await self._ensure_sku_free(db, changes["sku"], exclude_id=product_id)

        for field, value in changes.items():
            setattr(product, field, value)
        await db.flush()
        await db.refresh(product)

        logger.info("catalog.product_updated", product_id=product_id, fields=sorted(changes))
        return ProductResponse.model_validate(product)

    async def deactivate_product(self, db: AsyncSession, product_id: int) -> ProductResponse:
        """Soft-delete a product. Existing inventory and history are kept."""
        product = await self.get_product_model(db, product_id)
        product.is_active = False
        await db.flush()
        await db.refresh(product)

        logger.info("catalog.product_deactivated", product_id=product_id)
        return ProductResponse.model_validate(product)

    async def get_product(
        self,
        db: AsyncSession,
        product_id: int,
        include_inactive: bool = False,
    ) -> ProductResponse:
        """Get a product; inactive products are hidden unless requested."""
        product = await self.get_product_model(db, product_id)
        if not product.is_active and not include_inactive:
            raise NotFoundError(message=f"Product not found: {product_id}")
        return ProductResponse.model_validate(product)

    async def list_products(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        category: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        include_inactive: bool = False,
    ) -> PaginatedResponse[ProductResponse]:
        """List products ordered by name.

        Args:
            db: Database session.
            pagination: Page parameters.
            category: Exact category match.
            is_active: Active flag filter (ignored unless include_inactive).
            search: Case-insensitive match on name, SKU or description.
            include_inactive: Whether the caller may see inactive products.
        """
        stmt = select(Product)
        if not include_inactive:
            stmt = stmt.where(Product.is_active.is_(True))
        elif is_active is not None:
            stmt = stmt.where(Product.is_active == is_active)
        if category:
            stmt = stmt.where(Product.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Product.name.ilike(pattern),
                    Product.sku.ilike(pattern),
                    Product.description.ilike(pattern),
                )
            )

        rows, total = await fetch_page(db, stmt, pagination, Product.name, Product.id)
        return paginate_response(
            [ProductResponse.model_validate(p) for p in rows], total, pagination
        )

    async def list_categories(self, db: AsyncSession) -> list[str]:
        """Distinct categories of active products."""
        stmt = (
            select(Product.category)
            .where(Product.is_active.is_(True), Product.category.is_not(None))
            .distinct()
            .order_by(Product.category)
        )
        return [row for row in (await db.execute(stmt)).scalars().all() if row]

    async def product_stock(self, db: AsyncSession) -> list[ProductStockResponse]:
        """In-stock quantity for every active product.

        Sums box quantities in status available or reserved; products with
        no such boxes report zero and are flagged out of stock.
        """
        stock = (
            select(
                InventoryItem.product_id.label("product_id"),
                func.sum(InventoryItem.quantity).label("qty"),
            )
            .where(InventoryItem.status.in_(IN_STOCK_STATUSES))
            .group_by(InventoryItem.product_id)
            .subquery()
        )
        stmt = (
            select(Product, func.coalesce(stock.c.qty, 0))
            .outerjoin(stock, stock.c.product_id == Product.id)
            .where(Product.is_active.is_(True))
            .order_by(Product.name, Product.id)
        )
        result = await db.execute(stmt)

        rows = []
        for product, qty in result.all():
            quantity = int(qty)
            rows.append(
                ProductStockResponse(
                    id=product.id,
                    name=product.name,
                    sku=product.sku,
                    description=product.description,
                    image_url=product.image_url,
                    specifications=product.specifications,
                    category=product.category,
                    in_stock_quantity=quantity,
                    is_out_of_stock=quantity == 0,
                )
            )

        logger.debug("catalog.product_stock_computed", product_count=len(rows))
        return rows
