"""
Order service layer
Order placement for registered users and guests, and admin status management
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from app.models import (
    Order, OrderItem, OrderStatus, OrderPaymentStatus,
    Payment, PaymentMethod, PaymentRecordStatus, Product, User
)
from app.core.config import settings
from app.core.exceptions import (
    NotFoundException, ConflictException, ProductUnavailableException,
    PriceMismatchException, TotalMismatchException
)
from app.core.hooks import PostCommitHooks
from app.api.v1.products.services import ProductService
from app.api.v1.cart.services import CartService
from app.services.order_notification import OrderNotificationService
from .schemas import OrderResponse, OrderStatusUpdate
from .state_machine import (
    OrderStateMachine, parse_order_status, parse_payment_status,
    parse_shipping_method, resolve_payment_method, payment_record_status_for
)

logger = logging.getLogger(__name__)

@dataclass
class RegisteredBuyer:
    user_id: str

@dataclass
class GuestBuyer:
    name: str
    email: str
    phone: Optional[str] = None

Buyer = Union[RegisteredBuyer, GuestBuyer]

@dataclass
class PricedItem:
    """Line validated against the catalog; price is the snapshot stored on the order"""
    product: Product
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

def order_load_options():
    return (
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.payment),
        selectinload(Order.user),
    )

class OrderService:
    """Order service for business logic"""

    def __init__(self, db: AsyncSession, notifier: Optional[OrderNotificationService] = None):
        self.db = db
        self.notifier = notifier
        self.product_service = ProductService(db)
        self.cart_service = CartService(db)
        self.state_machine = OrderStateMachine()
        self.tolerance = Decimal(str(settings.PRICE_TOLERANCE))

    async def validate_items(self, items: Sequence[Any]) -> List[PricedItem]:
        """
        Check every line against the catalog

        Items need ``product_id`` and ``quantity``; a ``price`` attribute,
        when present and not None, must match the catalog within tolerance.
        Lines without a price are priced from the catalog.

        Raises:
            NotFoundException: Unknown product
            ProductUnavailableException: Product not available
            PriceMismatchException: Client price deviates from the catalog
        """
        products = await self.product_service.get_products_by_ids(item.product_id for item in items)
        priced: List[PricedItem] = []

        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundException(f"Product {item.product_id} not found", error_code="PRODUCT_NOT_FOUND")

            if not product.availability:
                raise ProductUnavailableException(product.name)

            catalog_price = Decimal(product.price)
            submitted = getattr(item, "price", None)
            if submitted is not None and abs(Decimal(submitted) - catalog_price) > self.tolerance:
                raise PriceMismatchException(product.name, catalog_price, submitted)

            priced.append(PricedItem(product=product, quantity=item.quantity, price=catalog_price))

        return priced

    @staticmethod
    def compute_totals(items: Sequence[PricedItem], taxes: Decimal, shipping_fee: Decimal) -> Tuple[Decimal, Decimal]:
        """Return (subtotal, total)"""
        subtotal = sum((item.line_total for item in items), Decimal("0"))
        return subtotal, subtotal + Decimal(taxes) + Decimal(shipping_fee)

    def check_total(self, calculated: Decimal, declared: Decimal) -> None:
        if abs(calculated - Decimal(declared)) > self.tolerance:
            raise TotalMismatchException(calculated, declared)

    async def place_order(
        self,
        buyer: Buyer,
        items: Sequence[Any],
        *,
        shipping_address: str,
        payment_method: Optional[str],
        online_payment_option: Optional[str] = None,
        taxes: Decimal = Decimal("0"),
        shipping_fee: Decimal = Decimal("0"),
        declared_total: Optional[Decimal] = None,
        city: Optional[str] = None,
        post_code: Optional[str] = None,
        country: Optional[str] = None,
        profile_updates: Optional[Dict[str, Any]] = None
    ) -> Tuple[OrderResponse, PostCommitHooks]:
        """
        Validate and persist an order in one transaction

        Validation runs before any write: items, then the declared total
        (when given), then the payment method. The order, its items, the
        payment record for online payments, the buyer's cart clearing and
        any profile update commit together.

        Returns:
            The created order and the notifications to run after commit
        """
        priced = await self.validate_items(items)
        subtotal, total = self.compute_totals(priced, taxes, shipping_fee)
        if declared_total is not None:
            self.check_total(total, declared_total)
        stored_method = resolve_payment_method(payment_method, online_payment_option)

        is_guest = isinstance(buyer, GuestBuyer)
        order = Order(
            user_id=None if is_guest else buyer.user_id,
            is_guest=is_guest,
            guest_name=buyer.name if is_guest else None,
            guest_email=buyer.email if is_guest else None,
            guest_phone=buyer.phone if is_guest else None,
            city=city,
            post_code=post_code,
            country=country,
            status=OrderStatus.PENDING,
            payment_status=OrderPaymentStatus.NOT_PAID,
            total_price=total,
            taxes=taxes,
            shipping_fee=shipping_fee,
            payment_method=stored_method,
            shipping_address=shipping_address,
        )

        try:
            self.db.add(order)
            await self.db.flush()
            order_id = order.id

            for item in priced:
                self.db.add(OrderItem(
                    order_id=order_id,
                    product_id=item.product.id,
                    quantity=item.quantity,
                    price=item.price,
                ))

            if stored_method != PaymentMethod.COD.value:
                self.db.add(Payment(
                    order_id=order_id,
                    payment_method=stored_method,
                    status=PaymentRecordStatus.PENDING,
                    amount=total,
                ))

            if not is_guest:
                await self.cart_service.clear_cart(buyer.user_id)

                if profile_updates:
                    user = await self.db.get(User, buyer.user_id)
                    for field, value in profile_updates.items():
                        setattr(user, field, value)

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error("Order write rejected by the store: %s", e.orig)
            raise ConflictException("Order could not be created due to a conflicting record")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Order write failed; nothing was saved")
            raise

        logger.info(
            "Order %s created (guest=%s, items=%s, total=%s)",
            order_id, is_guest, len(priced), total
        )

        response = OrderResponse.from_order(await self.get_order(order_id))
        return response, self.build_hooks(response)

    def build_hooks(self, order: OrderResponse) -> PostCommitHooks:
        if self.notifier is None:
            return PostCommitHooks()

        if order.is_guest:
            email, name = order.guest.email, order.guest.name
        else:
            email, name = order.user.email, order.user.name

        return self.notifier.build_hooks(order, email, name)

    async def get_order(self, order_id: str) -> Order:
        """
        Get order with items, payment and user loaded

        Raises:
            NotFoundException: No order with this id
        """
        result = await self.db.execute(
            select(Order)
            .options(*order_load_options())
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()

        if not order:
            raise NotFoundException("Order not found", error_code="ORDER_NOT_FOUND")

        return order

    async def list_user_orders(self, user_id: str) -> List[OrderResponse]:
        """A user's orders, newest first"""
        result = await self.db.execute(
            select(Order)
            .options(*order_load_options())
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        return [OrderResponse.from_order(order) for order in result.scalars().all()]

    async def list_all_orders(
        self,
        status: Optional[str] = None,
        payment_status: Optional[str] = None
    ) -> List[OrderResponse]:
        """Registered and guest orders together, newest first"""
        query = select(Order).options(*order_load_options())

        if status:
            query = query.where(Order.status == parse_order_status(status))
        if payment_status:
            query = query.where(Order.payment_status == parse_payment_status(payment_status))

        result = await self.db.execute(query.order_by(Order.created_at.desc()))
        return [OrderResponse.from_order(order) for order in result.scalars().all()]

    async def update_order_status(self, order_id: str, data: OrderStatusUpdate) -> OrderResponse:
        """
        Apply an admin status update atomically

        Only supplied fields change. A supplied payment status is mirrored
        onto the payment record when one exists.
        """
        new_status = parse_order_status(data.status)
        payment_status = parse_payment_status(data.payment_status) if data.payment_status else None
        shipping_method = parse_shipping_method(data.shipping_method) if data.shipping_method else None

        order = await self.get_order(order_id)
        previous_status = order.status
        self.state_machine.check(order.id, previous_status, new_status)

        order.status = new_status
        if data.tracking_id:
            order.tracking_id = data.tracking_id
        if shipping_method:
            order.shipping_method = shipping_method
        if data.estimated_delivery:
            order.estimated_delivery = data.estimated_delivery

        if payment_status:
            order.payment_status = payment_status
            if order.payment:
                order.payment.status = payment_record_status_for(payment_status)

        await self.db.commit()

        logger.info(
            "Order %s status %s -> %s%s",
            order_id, previous_status.value, new_status.value,
            f" (payment {payment_status.value})" if payment_status else ""
        )

        return OrderResponse.from_order(await self.get_order(order_id))

    async def delete_order(self, order_id: str) -> None:
        """Delete an order after removing its payment and items"""
        exists = await self.db.scalar(select(Order.id).where(Order.id == order_id))
        if not exists:
            raise NotFoundException("Order not found", error_code="ORDER_NOT_FOUND")

        await self.db.execute(delete(Payment).where(Payment.order_id == order_id))
        await self.db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        await self.db.execute(delete(Order).where(Order.id == order_id))
        await self.db.commit()

        logger.info("Order %s deleted", order_id)

    async def get_order_stats(self) -> Dict[str, Any]:
        """Order counts by status and revenue from paid orders"""
        counts = dict(
            (await self.db.execute(
                select(Order.status, func.count(Order.id)).group_by(Order.status)
            )).all()
        )
        revenue = await self.db.scalar(
            select(func.coalesce(func.sum(Order.total_price), 0))
            .where(Order.payment_status == OrderPaymentStatus.PAID)
        )

        return {
            "total_orders": sum(counts.values()),
            "pending_orders": counts.get(OrderStatus.PENDING, 0),
            "processing_orders": counts.get(OrderStatus.PROCESSING, 0),
            "delivered_orders": counts.get(OrderStatus.DELIVERED, 0),
            "total_revenue": Decimal(str(revenue or 0)),
        }
