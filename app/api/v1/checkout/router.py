"""Checkout router"""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user
from app.services.order_notification import OrderNotificationService, get_order_notifier
from app.services.storage import StorageService
from app.utils.dependencies import get_storage_service
from app.api.v1.orders.schemas import OrderEnvelope
from .schemas import (
    CheckoutCalculateRequest, CheckoutCalculateResponse,
    CheckoutProcessRequest, PaymentProofResponse
)
from .services import CheckoutService

router = APIRouter()

@router.post("/calculate", response_model=CheckoutCalculateResponse)
async def calculate_checkout(
    data: CheckoutCalculateRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Price the items at current catalog prices"""
    service = CheckoutService(db)
    return CheckoutCalculateResponse(**await service.calculate(data))

@router.post("/process", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def process_checkout(
    data: CheckoutProcessRequest,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
    notifier: OrderNotificationService = Depends(get_order_notifier),
    db: AsyncSession = Depends(get_db)
):
    service = CheckoutService(db, notifier)
    order, hooks = await service.process(current_user["id"], data)
    background_tasks.add_task(hooks.run)
    return OrderEnvelope(message="Order placed successfully", order=order)

@router.post("/upload-proof", response_model=PaymentProofResponse)
async def upload_payment_proof(
    order_id: str = Form(..., alias="orderId"),
    proof: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service),
    db: AsyncSession = Depends(get_db)
):
    service = CheckoutService(db, storage=storage)
    url = await service.upload_payment_proof(current_user["id"], order_id, proof)
    return PaymentProofResponse(
        message="Payment proof uploaded successfully. Our team will verify it soon.",
        payment_proof=url
    )
