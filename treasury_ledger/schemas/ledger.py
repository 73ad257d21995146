"""
Pydantic schemas for ledger operations.

These define the API contract — what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape are often different.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, computed_field, field_validator

from treasury_ledger.models.base import new_id
from treasury_ledger.models.enums import AccountType, EntryType, PostingKind
from treasury_ledger.money import cents_to_usd
from treasury_ledger.schemas.base import CamelModel
from treasury_ledger.schemas.transfer import TransferResponse


# --- Posting (internal) ---

class PostingLeg(BaseModel):
    """A single debit or credit in a posting."""
    account_id: str
    entry_type: EntryType
    amount_cents: int = Field(gt=0)


class PostingRequest(BaseModel):
    """
    A complete posting: legs that must balance.

    The tag fields are copied onto every leg so each entry can be
    read on its own.
    """
    posting_id: str = Field(default_factory=new_id)
    kind: PostingKind
    description: str = Field(min_length=1, max_length=255)
    legs: list[PostingLeg] = Field(min_length=2)
    note: str | None = None
    client_name: str | None = None
    category: str | None = None
    vendor: str | None = None
    receipt_ref: str | None = None
    transfer_id: str | None = None

    @field_validator("legs")
    @classmethod
    def must_have_debits_and_credits(cls, v: list) -> list:
        types = {leg.entry_type for leg in v}
        if EntryType.DEBIT not in types or EntryType.CREDIT not in types:
            raise ValueError(
                "posting must contain at least one debit and one credit"
            )
        return v


# --- POST /ledger ---

class LedgerActionRequest(CamelModel):
    """
    Body of POST /ledger.

    action and amount_usd stay loosely typed so that an unknown
    action or a non-numeric amount is answered with the ledger's
    own error instead of a generic validation failure.
    """
    action: str | None = None
    amount_usd: Any = None
    client_name: str | None = None
    note: str | None = None
    transfer_id: str | None = None
    reference: str | None = None
    category: str | None = None
    vendor: str | None = None
    paid_from: str | None = None
    receipt_ref: str | None = None


# --- Response Schemas ---

class LedgerEntryResponse(CamelModel):
    id: str
    posting_id: str
    account_id: str
    entry_type: EntryType
    amount_cents: int
    kind: PostingKind
    description: str
    note: str | None
    client_name: str | None
    category: str | None
    vendor: str | None
    receipt_ref: str | None
    transfer_id: str | None
    created_at: datetime


class AccountBalance(CamelModel):
    id: str
    name: str
    account_type: AccountType
    institution: str
    is_external: bool
    balance_cents: int

    @computed_field(alias="balanceUsd")
    @property
    def balance_usd(self) -> float:
        return cents_to_usd(self.balance_cents)


class CashPosition(CamelModel):
    bank_cents: int
    cash_on_hand_cents: int
    kraken_cents: int
    kraken_pending_cents: int
    total_liquid_cents: int
    total_all_cents: int
    pending_out_cents: int


class LedgerTotals(CamelModel):
    revenue_cents: int
    expenses_cents: int
    net_income_cents: int
    owner_equity_cents: int


class ExpenseBreakdown(CamelModel):
    id: str
    name: str
    schedule_c: int
    total_cents: int
    item_count: int


class ExpenseCategoryResponse(CamelModel):
    id: str
    name: str
    schedule_c: int
    description: str


class TaxEstimate(CamelModel):
    gross_income_cents: int
    total_deductions_cents: int
    net_income_cents: int
    self_employment_tax_cents: int
    estimated_income_tax_cents: int
    estimated_total_tax_cents: int
    estimated_quarterly_payment_cents: int
    effective_rate: float


class LedgerSummary(CamelModel):
    accounts: list[AccountBalance]
    recent_entries: list[LedgerEntryResponse]
    cash_position: CashPosition
    pending_transfers: list[TransferResponse]
    totals: LedgerTotals
    expenses_by_category: list[ExpenseBreakdown]
    tax_estimate: TaxEstimate
    expense_categories: list[ExpenseCategoryResponse]


class LedgerActionResult(CamelModel):
    entries: list[LedgerEntryResponse] = []
    transfer: TransferResponse | None = None
    message: str | None = None


class LedgerActionResponse(CamelModel):
    result: LedgerActionResult
    summary: LedgerSummary
