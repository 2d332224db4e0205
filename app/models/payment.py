"""
Payment model
At most one payment record per order, created for online payments only
"""

from sqlalchemy import Column, String, Numeric, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, SerializableModel, enum_values

class PaymentMethod(str, enum.Enum):
    """Payment method chosen at checkout"""
    COD = "cod"
    ONLINE = "online"

class OnlinePaymentOption(str, enum.Enum):
    """Sub-option required for online payments"""
    JAZZCASH = "JazzCash"
    EASYPAISA = "EasyPaisa"
    BANK_TRANSFER = "BankTransfer"

class PaymentRecordStatus(str, enum.Enum):
    """Payment record status enumeration"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    NOT_PAID = "not_paid"

class Payment(Base, TimestampedModel, UUIDModel, SerializableModel):
    """Payment transaction records"""

    __tablename__ = "payments"

    order_id = Column(String(36), ForeignKey("orders.id"), unique=True, nullable=False)

    # Payment details
    payment_method = Column(String(50), nullable=False)
    status = Column(Enum(PaymentRecordStatus, name="payment_record_status", values_callable=enum_values), default=PaymentRecordStatus.PENDING, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_id = Column(String(255), nullable=True)
    payment_proof = Column(String(500), nullable=True)

    # Relationships
    order = relationship("Order", back_populates="payment")

    # Indexes
    __table_args__ = (
        Index("idx_payments_status", "status"),
    )

    def __str__(self):
        return f"Payment {self.id} - {self.amount} ({self.status})"
