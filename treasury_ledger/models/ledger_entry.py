"""
Ledger entry model.

Each entry is one leg of a double-entry posting. A debit in one
account is always paired with a credit in another. Entries are
immutable — once posted, they are never modified.
"""

from datetime import datetime

from sqlalchemy import (
    String, DateTime, BigInteger, ForeignKey,
    Enum as SAEnum, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treasury_ledger.models.base import Base, new_id
from treasury_ledger.models.enums import EntryType, PostingKind


class LedgerEntry(Base):
    """
    An immutable debit or credit in the ledger.

    amount_cents is signed: debits positive, credits negative. The
    legs sharing a posting_id sum to zero, so every entry in the
    ledger sums to zero. LedgerService enforces this, the model is
    just the data structure.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    posting_id: Mapped[str] = mapped_column(
        String(36), nullable=False, index=True
    )
    account_id: Mapped[str] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum"),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    kind: Mapped[PostingKind] = mapped_column(
        SAEnum(PostingKind, name="posting_kind_enum"),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    client_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    vendor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    receipt_ref: Mapped[str | None] = mapped_column(String(200), nullable=True)
    transfer_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    account: Mapped["LedgerAccount"] = relationship(
        back_populates="entries"
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.entry_type.value} "
            f"{self.amount_cents} {self.account_id}>"
        )


@event.listens_for(LedgerEntry, "before_update")
def _reject_entry_update(mapper, connection, target):
    raise ValueError(
        f"Ledger entry {target.id} is immutable; post an offsetting entry instead"
    )
