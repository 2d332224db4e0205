"""
Order API routes
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db
from app.core.security import get_current_user
from app.services.order_notification import OrderNotificationService, get_order_notifier
from .schemas import OrderCreate, GuestOrderCreate, OrderEnvelope, OrderListEnvelope
from .services import OrderService, RegisteredBuyer, GuestBuyer

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/create",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Place an order for the authenticated user; clears their cart"
)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
    notifier: OrderNotificationService = Depends(get_order_notifier),
    db: AsyncSession = Depends(get_db)
):
    """Create new order"""
    service = OrderService(db, notifier)
    order, hooks = await service.place_order(
        RegisteredBuyer(user_id=current_user["id"]),
        order_data.items,
        shipping_address=order_data.shipping_address,
        payment_method=order_data.payment_method,
        online_payment_option=order_data.online_payment_option,
        taxes=order_data.taxes,
        shipping_fee=order_data.shipping_fee,
        declared_total=order_data.total_price,
        city=order_data.city,
        post_code=order_data.post_code,
        country=order_data.country,
    )
    background_tasks.add_task(hooks.run)
    return OrderEnvelope(message="Order placed successfully", order=order)

@router.post(
    "/guest",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create guest order",
    description="Place an order without an account"
)
async def create_guest_order(
    order_data: GuestOrderCreate,
    background_tasks: BackgroundTasks,
    notifier: OrderNotificationService = Depends(get_order_notifier),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db, notifier)
    order, hooks = await service.place_order(
        GuestBuyer(
            name=order_data.guest_name,
            email=order_data.guest_email,
            phone=order_data.guest_phone.strip() if order_data.guest_phone else None,
        ),
        order_data.items,
        shipping_address=order_data.shipping_address,
        payment_method=order_data.payment_method,
        online_payment_option=order_data.online_payment_option,
        taxes=order_data.taxes,
        shipping_fee=order_data.shipping_fee,
        declared_total=order_data.total_price,
        city=order_data.city,
        post_code=order_data.post_code,
        country=order_data.country,
    )
    background_tasks.add_task(hooks.run)
    return OrderEnvelope(message="Guest order placed successfully", order=order)

@router.get(
    "/get",
    response_model=OrderListEnvelope,
    summary="List my orders"
)
async def list_my_orders(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    orders = await service.list_user_orders(current_user["id"])
    return OrderListEnvelope(orders=orders, total=len(orders))
