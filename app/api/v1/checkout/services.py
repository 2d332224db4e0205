"""
Checkout service layer
Server-priced checkout on top of the order workflow
"""

import logging
import os
import tempfile
import time
from typing import List, Optional, Tuple
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from app.models import Order, PaymentRecordStatus
from app.core.config import settings
from app.core.exceptions import BadRequestException, NotFoundException, ForbiddenException
from app.core.hooks import PostCommitHooks
from app.services.storage import StorageService
from app.services.order_notification import OrderNotificationService
from app.utils.validators import normalize_mobile_number, validate_file_extension
from app.api.v1.orders.schemas import OrderResponse
from app.api.v1.orders.services import OrderService, RegisteredBuyer
from .schemas import CheckoutCalculateRequest, CheckoutProcessRequest, CalculatedItem

logger = logging.getLogger(__name__)

class CheckoutService:
    """Checkout for registered users"""

    def __init__(
        self,
        db: AsyncSession,
        notifier: Optional[OrderNotificationService] = None,
        storage: Optional[StorageService] = None
    ):
        self.db = db
        self.order_service = OrderService(db, notifier)
        self.storage = storage

    async def calculate(self, data: CheckoutCalculateRequest) -> dict:
        """Price items from the catalog and total them"""
        priced = await self.order_service.validate_items(data.items)
        subtotal, total = self.order_service.compute_totals(priced, data.taxes, data.shipping_fee)

        items: List[CalculatedItem] = [
            CalculatedItem(
                product_id=item.product.id,
                name=item.product.name,
                image=item.product.image,
                price=item.price,
                original_price=item.product.original_price,
                quantity=item.quantity,
                line_total=item.line_total,
            )
            for item in priced
        ]

        return {
            "items": items,
            "subtotal": subtotal,
            "taxes": data.taxes,
            "shipping_fee": data.shipping_fee,
            "total": total,
        }

    async def process(self, user_id: str, data: CheckoutProcessRequest) -> Tuple[OrderResponse, PostCommitHooks]:
        """
        Place an order from checkout details

        With ``save_info`` the shipping fields are copied to the user's
        profile in the same transaction as the order.
        """
        mobile_number = normalize_mobile_number(data.mobile_number)
        if mobile_number is None:
            raise BadRequestException("Invalid mobile number", error_code="INVALID_MOBILE_NUMBER")

        address = data.address.strip()
        city = data.city.strip()
        post_code = data.post_code.strip()
        country = data.country.strip()
        shipping_address = f"{address}, {city}, {post_code}, {country}"

        profile_updates = None
        if data.save_info:
            profile_updates = {
                "address": address,
                "city": city,
                "post_code": post_code,
                "country": country,
                "mobile_number": mobile_number,
                "shipping_address": shipping_address,
            }

        return await self.order_service.place_order(
            RegisteredBuyer(user_id=user_id),
            data.items,
            shipping_address=shipping_address,
            payment_method=data.payment_method,
            online_payment_option=data.online_payment_option,
            taxes=data.taxes,
            shipping_fee=data.shipping_fee,
            city=city,
            post_code=post_code,
            country=country,
            profile_updates=profile_updates,
        )

    async def upload_payment_proof(self, user_id: str, order_id: str, proof: UploadFile) -> str:
        """
        Attach a payment proof image to the order's pending payment

        Returns:
            URL of the uploaded image
        """
        order = await self.db.scalar(
            select(Order).options(selectinload(Order.payment)).where(Order.id == order_id)
        )
        if not order:
            raise NotFoundException("Order not found", error_code="ORDER_NOT_FOUND")
        if order.user_id != user_id:
            raise ForbiddenException("You do not have access to this order")
        if not order.payment:
            raise BadRequestException("No payment associated with this order")
        if order.payment.status != PaymentRecordStatus.PENDING:
            raise BadRequestException("Payment is not in pending status")

        if not validate_file_extension(proof.filename, settings.ALLOWED_IMAGE_EXTENSIONS):
            raise BadRequestException(
                f"Invalid file type. Allowed: {', '.join(settings.ALLOWED_IMAGE_EXTENSIONS)}",
                error_code="INVALID_FILE_TYPE"
            )

        contents = await proof.read()
        if len(contents) > settings.MAX_UPLOAD_SIZE:
            raise BadRequestException("File too large", error_code="FILE_TOO_LARGE")

        suffix = os.path.splitext(proof.filename)[1].lower()
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(contents)
            tmp_path = tmp.name

        try:
            result = await self.storage.upload_image(
                tmp_path,
                folder=settings.PAYMENT_PROOF_FOLDER,
                public_id=f"proof_{order_id}_{int(time.time())}"
            )
        finally:
            os.remove(tmp_path)

        order.payment.payment_proof = result["url"]
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error("Payment proof for order %s not saved; removing %s", order_id, result["public_id"])
            await self.storage.delete_image(result["public_id"])
            raise

        logger.info("Payment proof uploaded for order %s", order_id)
        return result["url"]
