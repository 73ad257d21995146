"""
Pydantic schemas for payment receipts.
"""

from datetime import datetime
from typing import Any

from pydantic import computed_field

from treasury_ledger.models.enums import (
    ReceiptMethod,
    ReceiptStatus,
    TransferStatus,
    DestinationAccount,
)
from treasury_ledger.money import cents_to_usd
from treasury_ledger.schemas.base import CamelModel


class ReceiptCreate(CamelModel):
    amount_usd: Any = None
    method: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    description: str | None = None
    notes: str | None = None
    external_ref: str | None = None


class TransferBrief(CamelModel):
    id: str
    status: TransferStatus
    amount_cents: int
    destination_account: DestinationAccount


class ReceiptResponse(CamelModel):
    id: str
    method: ReceiptMethod
    amount_cents: int
    currency: str
    status: ReceiptStatus
    received_at: datetime | None
    client_name: str | None
    client_email: str | None
    description: str | None
    notes: str | None
    external_ref: str | None
    created_at: datetime
    transfers: list[TransferBrief] = []

    @computed_field(alias="amountUsd")
    @property
    def amount_usd(self) -> float:
        return cents_to_usd(self.amount_cents)


class ReceiptEnvelope(CamelModel):
    receipt: ReceiptResponse


class MethodTotal(CamelModel):
    count: int = 0
    amount_cents: int = 0


class ReceiptSummary(CamelModel):
    total_received_cents: int = 0
    total_pending_cents: int = 0
    by_method: dict[str, MethodTotal] = {}


class ReceiptListResponse(CamelModel):
    receipts: list[ReceiptResponse]
    summary: ReceiptSummary
    count: int
