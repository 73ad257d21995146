"""
Payment receipt model.

A record of money already received: cash in hand, an ACH or wire
that landed, a check, a Stripe payout. Receipts are independent of
the ledger; a treasury transfer may point at the receipt it moves.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, BigInteger, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treasury_ledger.models.base import Base, new_id
from treasury_ledger.models.enums import ReceiptMethod, ReceiptStatus


class PaymentReceipt(Base):
    __tablename__ = "payment_receipts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    method: Mapped[ReceiptMethod] = mapped_column(
        SAEnum(
            ReceiptMethod,
            name="receipt_method_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    status: Mapped[ReceiptStatus] = mapped_column(
        SAEnum(
            ReceiptStatus,
            name="receipt_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=ReceiptStatus.PENDING,
    )
    received_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    client_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    external_ref: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    transfers: Mapped[list["Transfer"]] = relationship(
        back_populates="payment_receipt"
    )

    def __repr__(self) -> str:
        return (
            f"<PaymentReceipt {self.method.value} "
            f"{self.amount_cents} ({self.status.value})>"
        )
