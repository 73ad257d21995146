"""
Treasury transfer model.

Tracks money leaving an internal account for an external destination
(the exchange, mostly). The transfer has a small state machine
governing its lifecycle. Invalid state transitions are rejected.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, DateTime, BigInteger, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treasury_ledger.models.base import Base, new_id
from treasury_ledger.models.enums import (
    TransferStatus,
    TransferMethod,
    SourceAccount,
    DestinationAccount,
)


# Valid state transitions, the source of truth for the state machine
VALID_TRANSITIONS: dict[TransferStatus, set[TransferStatus]] = {
    TransferStatus.PLANNED: {TransferStatus.SUBMITTED, TransferStatus.CANCELED},
    TransferStatus.SUBMITTED: {TransferStatus.CONFIRMED, TransferStatus.CANCELED},
    TransferStatus.CONFIRMED: set(),  # Terminal
    TransferStatus.CANCELED: set(),  # Terminal
}

TERMINAL_STATUSES = frozenset(
    status for status, allowed in VALID_TRANSITIONS.items() if not allowed
)


class Transfer(Base):
    __tablename__ = "treasury_transfers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    source_account: Mapped[SourceAccount] = mapped_column(
        SAEnum(
            SourceAccount,
            name="transfer_source_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    destination_account: Mapped[DestinationAccount] = mapped_column(
        SAEnum(
            DestinationAccount,
            name="transfer_destination_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    method: Mapped[TransferMethod] = mapped_column(
        SAEnum(
            TransferMethod,
            name="transfer_method_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    status: Mapped[TransferStatus] = mapped_column(
        SAEnum(
            TransferStatus,
            name="transfer_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=TransferStatus.PLANNED,
        index=True,
    )
    planned_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    confirmed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    bank_ref: Mapped[str | None] = mapped_column(String(200), nullable=True)
    kraken_ref: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    payment_receipt_id: Mapped[str | None] = mapped_column(
        ForeignKey("payment_receipts.id"), nullable=True, index=True
    )
    # Set when the ledger moved the amount into KRAKEN_PENDING for this
    # transfer; confirmation settles it, cancellation reverses it.
    pending_posting_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    payment_receipt: Mapped[Optional["PaymentReceipt"]] = relationship(
        back_populates="transfers"
    )

    def can_transition_to(self, new_status: TransferStatus) -> bool:
        """Check if a state transition is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __repr__(self) -> str:
        return (
            f"<Transfer {self.id} {self.method.value} "
            f"{self.amount_cents} ({self.status.value})>"
        )
