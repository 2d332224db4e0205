"""Admin order management endpoints"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import require_admin
from app.schemas.base import APIResponse
from app.api.v1.orders.schemas import (
    OrderStatusUpdate, OrderEnvelope, OrderListEnvelope, OrderStats, OrderStatsEnvelope
)
from app.api.v1.orders.services import OrderService

router = APIRouter()

@router.get("/orders/all", response_model=OrderListEnvelope)
async def list_all_orders(
    status: Optional[str] = Query(None),
    payment_status: Optional[str] = Query(None, alias="paymentStatus"),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Registered and guest orders, newest first"""
    service = OrderService(db)
    orders = await service.list_all_orders(status=status, payment_status=payment_status)
    return OrderListEnvelope(orders=orders, total=len(orders))

@router.get("/orders/stats", response_model=OrderStatsEnvelope)
async def get_order_stats(
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    stats = await service.get_order_stats()
    return OrderStatsEnvelope(stats=OrderStats(**stats))

@router.put("/orders/status/{order_id}", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update order status, shipping details and payment status"""
    service = OrderService(db)
    order = await service.update_order_status(order_id, data)
    return OrderEnvelope(message="Order status updated successfully", order=order)

@router.delete("/orders/{order_id}", response_model=APIResponse)
async def delete_order(
    order_id: str,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    await service.delete_order(order_id)
    return APIResponse(message="Order deleted successfully")
