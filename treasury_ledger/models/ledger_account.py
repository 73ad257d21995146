"""
Ledger account model (chart of accounts).

Cash, bank, exchange, equity, revenue and one account per expense
category. Entries are posted against these accounts.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, BigInteger, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treasury_ledger.models.base import Base
from treasury_ledger.models.enums import AccountType, EntryType


class LedgerAccount(Base):
    """
    A single account in the chart of accounts.

    balance_cents is a running total kept on the normal side of the
    account (debit side for ASSET/EXPENSE, credit side otherwise).
    Only LedgerService.post_entries changes it, always together with
    the entries that justify the change.
    """

    __tablename__ = "ledger_accounts"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    institution: Mapped[str] = mapped_column(
        String(100), nullable=False, default="Internal"
    )
    is_external: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    balance_cents: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="account"
    )

    @property
    def is_debit_normal(self) -> bool:
        return self.account_type in (AccountType.ASSET, AccountType.EXPENSE)

    def balance_delta(self, entry_type: EntryType, amount_cents: int) -> int:
        """How a positive entry amount moves this account's balance."""
        increases = (entry_type == EntryType.DEBIT) == self.is_debit_normal
        return amount_cents if increases else -amount_cents

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.id} ({self.account_type.value})>"
