"""
Order status vocabulary and transitions
"""

import logging
from typing import Dict, List, Optional, Set

from app.core.config import settings
from app.core.exceptions import InvalidStatusException, InvalidPaymentException
from app.models import (
    OrderStatus, OrderPaymentStatus, ShippingMethod,
    PaymentMethod, OnlinePaymentOption, PaymentRecordStatus
)

logger = logging.getLogger(__name__)

# Forward lifecycle; the alternate states sit outside it
LIFECYCLE: List[OrderStatus] = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.READY_FOR_SHIPMENT,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

ALTERNATE_STATES: Set[OrderStatus] = {
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
    OrderStatus.PARTIALLY_REFUNDED,
}

def _parse(enum_cls, value, error_cls, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise error_cls(f"Invalid {label}. Must be one of: {allowed}")

def parse_order_status(value: str) -> OrderStatus:
    return _parse(OrderStatus, value, InvalidStatusException, "status")

def parse_payment_status(value: str) -> OrderPaymentStatus:
    return _parse(OrderPaymentStatus, value, InvalidStatusException, "payment status")

def parse_shipping_method(value: str) -> ShippingMethod:
    return _parse(ShippingMethod, value, InvalidStatusException, "shipping method")

def resolve_payment_method(method: Optional[str], online_option: Optional[str] = None) -> str:
    """
    Validate the payment method and return the value stored on the order

    Cash on delivery is stored as ``cod``; online payments are stored as
    the chosen option (JazzCash, EasyPaisa or BankTransfer).
    """
    if method == PaymentMethod.COD.value:
        return PaymentMethod.COD.value

    if method == PaymentMethod.ONLINE.value:
        allowed = [option.value for option in OnlinePaymentOption]
        if online_option not in allowed:
            raise InvalidPaymentException(
                f"Invalid online payment option. Must be one of: {', '.join(allowed)}"
            )
        return online_option

    raise InvalidPaymentException('Invalid payment method. Must be "cod" or "online"')

def payment_record_status_for(payment_status: OrderPaymentStatus) -> PaymentRecordStatus:
    """Map an order payment status onto the payment record vocabulary"""
    if payment_status == OrderPaymentStatus.PAID:
        return PaymentRecordStatus.COMPLETED
    if payment_status == OrderPaymentStatus.FAILED:
        return PaymentRecordStatus.FAILED
    return PaymentRecordStatus(payment_status.value)

class OrderStateMachine:
    """
    Manages order status transitions

    Updates are accepted from any state unless ``enforce`` is set, in which
    case only the transitions below are allowed. Moves against the
    lifecycle are always logged.
    """

    def __init__(self, enforce: Optional[bool] = None):
        self.enforce = settings.ENFORCE_ORDER_TRANSITIONS if enforce is None else enforce

        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {}
        for index, status in enumerate(LIFECYCLE):
            forward = set(LIFECYCLE[index + 1:])
            self.transitions[status] = forward | {OrderStatus.CANCELLED}

        # Delivered orders can only be refunded
        self.transitions[OrderStatus.DELIVERED] = {
            OrderStatus.REFUNDED,
            OrderStatus.PARTIALLY_REFUNDED,
        }
        self.transitions[OrderStatus.CANCELLED] = {OrderStatus.REFUNDED}
        self.transitions[OrderStatus.PARTIALLY_REFUNDED] = {OrderStatus.REFUNDED}
        self.transitions[OrderStatus.REFUNDED] = set()

        for status in LIFECYCLE[:-1]:
            self.transitions[status] |= {OrderStatus.REFUNDED, OrderStatus.PARTIALLY_REFUNDED}

    def can_transition(self, current_status: OrderStatus, new_status: OrderStatus) -> bool:
        """Same-status updates are always allowed"""
        if current_status == new_status:
            return True
        return new_status in self.transitions.get(current_status, set())

    def get_valid_transitions(self, current_status: OrderStatus) -> List[OrderStatus]:
        return sorted(self.transitions.get(current_status, set()), key=lambda s: s.value)

    def is_backward(self, current_status: OrderStatus, new_status: OrderStatus) -> bool:
        """True when the move goes back along the lifecycle or leaves an alternate state"""
        if current_status == new_status:
            return False
        if current_status in ALTERNATE_STATES:
            return new_status not in ALTERNATE_STATES
        if new_status in ALTERNATE_STATES:
            return False
        return LIFECYCLE.index(new_status) < LIFECYCLE.index(current_status)

    def check(self, order_id: str, current_status: OrderStatus, new_status: OrderStatus) -> None:
        """
        Validate a transition

        Raises:
            InvalidStatusException: Transition not allowed while enforcement is on
        """
        if self.can_transition(current_status, new_status):
            return

        if self.enforce:
            allowed = ", ".join(s.value for s in self.get_valid_transitions(current_status)) or "none"
            raise InvalidStatusException(
                f"Cannot change order status from {current_status.value} to {new_status.value}. "
                f"Allowed: {allowed}"
            )

        if self.is_backward(current_status, new_status):
            logger.warning(
                "Order %s moved backwards from %s to %s",
                order_id, current_status.value, new_status.value
            )
