"""Order notification service"""

import logging
from pathlib import Path
from typing import Optional
from fastapi import Depends
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings
from app.core.hooks import PostCommitHooks
from app.services.email_service import EmailService
from app.utils.dependencies import get_email_service
from app.api.v1.orders.schemas import OrderResponse

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "emails"

class OrderNotificationService:
    """Emails sent once an order has been committed"""

    def __init__(self, email_service: EmailService):
        self.email_service = email_service
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "xml"])
        )

    def _render(self, template_name: str, **context) -> str:
        context.setdefault("app_name", settings.APP_NAME)
        context.setdefault("currency", settings.CURRENCY)
        return self.env.get_template(template_name).render(**context)

    async def send_order_confirmation(self, order: OrderResponse, buyer_email: str, buyer_name: str) -> bool:
        """Confirmation to the buyer"""
        body = self._render("order_confirmation.txt", order=order, buyer_name=buyer_name)
        html_body = self._render("order_confirmation.html", order=order, buyer_name=buyer_name)

        sent = await self.email_service.send_email(
            to_email=buyer_email,
            subject=f"Order Confirmed - #{order.id}",
            body=body,
            html_body=html_body
        )
        if sent:
            logger.info("Order confirmation for %s sent to %s", order.id, buyer_email)
        else:
            logger.error("Order confirmation for %s could not be sent to %s", order.id, buyer_email)
        return sent

    async def send_admin_notification(self, order: OrderResponse, buyer_email: str, buyer_name: str) -> bool:
        """Notice to the store operator"""
        admin_email = settings.ADMIN_NOTIFICATION_EMAIL
        if not admin_email:
            logger.warning("Admin notification for order %s skipped: ADMIN_NOTIFICATION_EMAIL not set", order.id)
            return False

        kind = "Guest Order" if order.is_guest else "Order"
        body = self._render(
            "order_admin_notification.txt",
            order=order,
            buyer_email=buyer_email,
            buyer_name=buyer_name
        )

        sent = await self.email_service.send_email(
            to_email=admin_email,
            subject=f"New {kind} #{order.id}",
            body=body
        )
        if not sent:
            logger.error("Admin notification for order %s failed", order.id)
        return sent

    def build_hooks(
        self,
        order: OrderResponse,
        buyer_email: Optional[str],
        buyer_name: str,
        hooks: Optional[PostCommitHooks] = None
    ) -> PostCommitHooks:
        """Register buyer and operator emails for an order"""
        hooks = hooks or PostCommitHooks()

        if buyer_email:
            hooks.add(self.send_order_confirmation, order, buyer_email, buyer_name, name="order_confirmation")

        hooks.add(self.send_admin_notification, order, buyer_email or "", buyer_name, name="admin_notification")
        return hooks

def get_order_notifier(email_service: EmailService = Depends(get_email_service)) -> OrderNotificationService:
    """Order emails sent through the request's email service"""
    return OrderNotificationService(email_service)
