"""
Pydantic schemas for treasury transfers.

Enumerated request fields are plain strings here: the service
upper-cases and validates them so the caller gets the list of
allowed values in the error message.
"""

from datetime import datetime
from typing import Any

from pydantic import computed_field

from treasury_ledger.models.enums import (
    TransferStatus,
    TransferMethod,
    SourceAccount,
    DestinationAccount,
    ReceiptMethod,
)
from treasury_ledger.money import cents_to_usd
from treasury_ledger.schemas.base import CamelModel


# --- Request Schemas ---

class TransferCreate(CamelModel):
    amount_usd: Any = None
    source_account: str | None = None
    destination_account: str = DestinationAccount.KRAKEN.value
    method: str | None = None
    payment_receipt_id: str | None = None
    notes: str | None = None


class TransferUpdate(CamelModel):
    """
    PATCH body. Only fields present in the request are applied;
    an explicit null clears a reference field.
    """
    status: str | None = None
    bank_ref: str | None = None
    kraken_ref: str | None = None
    notes: str | None = None


# --- Response Schemas ---

class ReceiptBrief(CamelModel):
    id: str
    method: ReceiptMethod
    amount_cents: int
    client_name: str | None


class TransferResponse(CamelModel):
    id: str
    source_account: SourceAccount
    destination_account: DestinationAccount
    method: TransferMethod
    amount_cents: int
    currency: str
    status: TransferStatus
    planned_at: datetime
    submitted_at: datetime | None
    confirmed_at: datetime | None
    bank_ref: str | None
    kraken_ref: str | None
    notes: str | None
    payment_receipt_id: str | None
    payment_receipt: ReceiptBrief | None = None
    created_at: datetime

    @computed_field(alias="amountUsd")
    @property
    def amount_usd(self) -> float:
        return cents_to_usd(self.amount_cents)


class TransferEnvelope(CamelModel):
    transfer: TransferResponse


class TransferTotals(CamelModel):
    """Amount in each live or settled status, in cents."""
    planned_cents: int = 0
    submitted_cents: int = 0
    confirmed_cents: int = 0


class TransferListResponse(CamelModel):
    transfers: list[TransferResponse]
    summary: TransferTotals
    count: int
