"""Customer inquiries: storefront submission, follow-up and conversion."""

from datetime import UTC, datetime, time, timedelta

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.core.exceptions import NotFoundError, ValidationError
from wms.core.logging import get_logger
from wms.features.catalog.service import CatalogService
from wms.features.inquiries.models import (
    VALID_INQUIRY_TRANSITIONS,
    InquiryStatus,
    SalesInquiry,
    SalesInquiryItem,
)
from wms.features.inquiries.schemas import (
    InquiryConvert,
    InquiryFilters,
    InquiryResponse,
    InquirySubmit,
)
from wms.features.notifications.models import NotificationAction
from wms.features.notifications.service import NotificationService
from wms.features.profiles.models import Profile, Role
from wms.features.sales_orders.schemas import OrderCreate, OrderItemInput, OrderResponse
from wms.features.sales_orders.service import SalesOrderService
from wms.shared import (
    PaginatedResponse,
    PaginationParams,
    fetch_page,
    paginate_response,
    validate_transition,
)

logger = get_logger(__name__)

# Set by dedicated operations, not by a plain status change
MANAGED_STATUSES = {InquiryStatus.RESPONDED, InquiryStatus.CONVERTED, InquiryStatus.COMPLETED}


class InquiryService:
    """Handle customer inquiries from submission to order."""

    def __init__(self) -> None:
        self.catalog = CatalogService()
        self.notifications = NotificationService()
        self.orders = SalesOrderService()

    async def _get(
        self,
        db: AsyncSession,
        inquiry_id: int,
        for_update: bool = False,
    ) -> SalesInquiry:
        stmt = (
            select(SalesInquiry)
            .options(selectinload(SalesInquiry.items))
            .where(SalesInquiry.id == inquiry_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        inquiry = (await db.execute(stmt)).scalar_one_or_none()
        if inquiry is None:
            raise NotFoundError(message=f"Inquiry not found: {inquiry_id}")
        return inquiry

    async def submit_inquiry(
        self,
        db: AsyncSession,
        data: InquirySubmit,
        profile: Profile | None = None,
    ) -> InquiryResponse:
        """Record an inquiry with its product lines and alert sales operators.

        Anonymous storefront visitors may submit; a logged-in customer's
        inquiry is linked to their profile.

        Raises:
            ValidationError: A line refers to an unknown or inactive product.
        """
        await self.catalog.active_products(db, [item.product_id for item in data.items])

        customer_profile_id = (
            profile.id if profile is not None and profile.role == Role.CUSTOMER.value else None
        )
        inquiry = SalesInquiry(
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_company=data.customer_company,
            customer_phone=data.customer_phone,
            message=data.message,
            status=InquiryStatus.NEW.value,
            customer_profile_id=customer_profile_id,
            items=[
                SalesInquiryItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    specific_requirements=item.specific_requirements,
                )
                for item in data.items
            ],
        )
        db.add(inquiry)
        await db.flush()

        await self.notifications.notify_role(
            db,
            Role.SALES_OPERATOR,
            NotificationAction.INQUIRY_SUBMITTED,
            title="New customer inquiry",
            message=f"{data.customer_name} asked about {len(data.items)} product(s)",
            metadata={"inquiry_id": inquiry.id},
        )
        logger.info(
            "inquiries.submitted",
            inquiry_id=inquiry.id,
            line_count=len(data.items),
            customer_profile_id=customer_profile_id,
        )
        return InquiryResponse.model_validate(await self._get(db, inquiry.id))

    async def list_inquiries(
        self,
        db: AsyncSession,
        profile: Profile,
        pagination: PaginationParams,
        filters: InquiryFilters,
    ) -> PaginatedResponse[InquiryResponse]:
        """List inquiries, newest first. Customers only see their own."""
        if filters.date_from and filters.date_to and filters.date_to < filters.date_from:
            raise ValidationError(message="date_to must be on or after date_from")

        stmt = select(SalesInquiry).options(selectinload(SalesInquiry.items))
        if profile.role == Role.CUSTOMER.value:
            stmt = stmt.where(SalesInquiry.customer_profile_id == profile.id)
        if filters.status is not None:
            stmt = stmt.where(SalesInquiry.status == filters.status.value)
        if filters.search:
            pattern = f"%{filters.search}%"
            stmt = stmt.where(
                or_(
                    SalesInquiry.customer_name.ilike(pattern),
                    SalesInquiry.customer_email.ilike(pattern),
                    SalesInquiry.customer_company.ilike(pattern),
                )
            )
        if filters.date_from is not None:
            start = datetime.combine(filters.date_from, time.min, tzinfo=UTC)
            stmt = stmt.where(SalesInquiry.created_at >= start)
        if filters.date_to is not None:
            end = datetime.combine(filters.date_to + timedelta(days=1), time.min, tzinfo=UTC)
            stmt = stmt.where(SalesInquiry.created_at < end)

        rows, total = await fetch_page(
            db, stmt, pagination, SalesInquiry.created_at.desc(), SalesInquiry.id.desc()
        )
        return paginate_response(
            [InquiryResponse.model_validate(i) for i in rows], total, pagination
        )

    async def get_inquiry(
        self,
        db: AsyncSession,
        inquiry_id: int,
        profile: Profile,
    ) -> InquiryResponse:
        inquiry = await self._get(db, inquiry_id)
        if profile.role == Role.CUSTOMER.value and inquiry.customer_profile_id != profile.id:
            raise NotFoundError(message=f"Inquiry not found: {inquiry_id}")
        return InquiryResponse.model_validate(inquiry)

    async def update_inquiry_status(
        self,
        db: AsyncSession,
        inquiry_id: int,
        new_status: InquiryStatus,
        actor: Profile,
    ) -> InquiryResponse:
        """Mark an inquiry in progress or closed.

        Raises:
            ValidationError: The status is set by respond/convert/dispatch instead.
            InvalidTransitionError: Not allowed from the current status.
        """
        if new_status in MANAGED_STATUSES:
            raise ValidationError(
                message=f"Status '{new_status.value}' cannot be set directly",
                details={"status": new_status.value},
            )
        inquiry = await self._get(db, inquiry_id, for_update=True)
        previous = InquiryStatus(inquiry.status)
        validate_transition(VALID_INQUIRY_TRANSITIONS, previous, new_status, "inquiry", inquiry_id)

        inquiry.status = new_status.value
        await db.flush()

        logger.info(
            "inquiries.status_changed",
            inquiry_id=inquiry_id,
            previous_status=previous.value,
            new_status=new_status.value,
            changed_by=actor.id,
        )
        return InquiryResponse.model_validate(await self._get(db, inquiry_id))

    async def respond_to_inquiry(
        self,
        db: AsyncSession,
        inquiry_id: int,
        response: str,
        actor: Profile,
    ) -> InquiryResponse:
        """Store the sales reply and notify the customer when they have a profile."""
        inquiry = await self._get(db, inquiry_id, for_update=True)
        validate_transition(
            VALID_INQUIRY_TRANSITIONS,
            InquiryStatus(inquiry.status),
            InquiryStatus.RESPONDED,
            "inquiry",
            inquiry_id,
        )

        inquiry.response = response
        inquiry.responded_by = actor.id
        inquiry.status = InquiryStatus.RESPONDED.value
        await db.flush()

        if inquiry.customer_profile_id is not None:
            await self.notifications.notify_user(
                db,
                inquiry.customer_profile_id,
                NotificationAction.INQUIRY_RESPONDED,
                title="Your inquiry has a response",
                message=f"We replied to inquiry #{inquiry.id}",
                metadata={"inquiry_id": inquiry.id},
            )
        logger.info("inquiries.responded", inquiry_id=inquiry_id, responded_by=actor.id)
        return InquiryResponse.model_validate(await self._get(db, inquiry_id))

    async def convert_to_order(
        self,
        db: AsyncSession,
        inquiry_id: int,
        data: InquiryConvert,
        actor: Profile,
    ) -> OrderResponse:
        """Create a sales order from the inquiry lines and mark it converted."""
        inquiry = await self._get(db, inquiry_id, for_update=True)
        validate_transition(
            VALID_INQUIRY_TRANSITIONS,
            InquiryStatus(inquiry.status),
            InquiryStatus.CONVERTED,
            "inquiry",
            inquiry_id,
        )

        order = await self.orders.create_order(
            db,
            OrderCreate(
                customer_name=inquiry.customer_name,
                customer_email=inquiry.customer_email,
                customer_company=inquiry.customer_company,
                customer_phone=inquiry.customer_phone,
                inquiry_id=inquiry.id,
                order_date=data.order_date,
                items=[
                    OrderItemInput(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=data.unit_prices.get(item.product_id, 0),
                        requirements=item.specific_requirements,
                    )
                    for item in inquiry.items
                ],
            ),
            creator=actor,
        )

        inquiry.status = InquiryStatus.CONVERTED.value
        await db.flush()

        logger.info(
            "inquiries.converted",
            inquiry_id=inquiry_id,
            sales_order_id=order.id,
            sales_order_number=order.sales_order_number,
        )
        return order
