"""
Receipt service — records money that has already arrived.

Manual receipts (cash, ACH, wire, check) are recorded after the fact,
so they are created RECEIVED. Receipts do not post to the ledger.
"""

import logging
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from treasury_ledger.errors import InvalidAmount, InvalidOperation
from treasury_ledger.models.audit_log import AuditLog
from treasury_ledger.models.enums import ReceiptMethod, ReceiptStatus
from treasury_ledger.models.payment_receipt import PaymentReceipt
from treasury_ledger.money import usd_to_cents
from treasury_ledger.schemas.receipt import (
    MethodTotal,
    ReceiptCreate,
    ReceiptSummary,
)
from treasury_ledger.services.choices import clamp_limit, parse_choice

logger = logging.getLogger(__name__)

MANUAL_METHODS = (
    ReceiptMethod.CASH,
    ReceiptMethod.ACH,
    ReceiptMethod.WIRE,
    ReceiptMethod.CHECK,
    ReceiptMethod.OTHER,
)
MIN_RECEIPT_CENTS = 100
MAX_RECEIPT_CENTS = 1_000_000 * 100


class ReceiptService:

    def __init__(self, db: Session):
        self.db = db

    def record_manual(
        self, request: ReceiptCreate, created_by: str | None = None
    ) -> PaymentReceipt:
        """Record a cash, ACH, wire or check payment that was received."""
        if request.amount_usd is None:
            raise InvalidAmount("Amount is required")
        if not request.method:
            raise InvalidOperation("Payment method is required")

        method = parse_choice(ReceiptMethod, request.method, "method")
        if method not in MANUAL_METHODS:
            raise InvalidOperation(
                "Invalid method. Must be one of: "
                + ", ".join(m.value for m in MANUAL_METHODS)
            )

        amount_cents = usd_to_cents(request.amount_usd, field="Amount")
        if amount_cents < MIN_RECEIPT_CENTS:
            raise InvalidAmount("Minimum amount is $1")
        if amount_cents > MAX_RECEIPT_CENTS:
            raise InvalidAmount("Maximum amount is $1,000,000")

        receipt = PaymentReceipt(
            method=method,
            amount_cents=amount_cents,
            currency="USD",
            status=ReceiptStatus.RECEIVED,
            received_at=datetime.utcnow(),
            client_name=request.client_name or None,
            client_email=request.client_email or None,
            description=(
                request.description
                or f"{method.value} payment - ${amount_cents / 100:.2f}"
            ),
            notes=request.notes or None,
            external_ref=request.external_ref or None,
            created_by=created_by,
        )
        self.db.add(receipt)
        self.db.flush()

        self.db.add(AuditLog.record(
            "RECEIPT_RECORDED",
            receipt.id,
            method=method.value,
            amount_cents=amount_cents,
            actor=created_by,
        ))
        self.db.flush()

        logger.info(
            "Manual %s receipt recorded: %s cents by %s",
            method.value, amount_cents, created_by,
        )
        return receipt

    def list_receipts(
        self,
        method: str | None = None,
        status: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> tuple[list[PaymentReceipt], ReceiptSummary]:
        """Newest first, filtered, with totals across all receipts."""
        limit = clamp_limit(limit)

        query = select(PaymentReceipt).order_by(PaymentReceipt.created_at.desc())
        if method:
            query = query.where(
                PaymentReceipt.method == parse_choice(ReceiptMethod, method, "method")
            )
        if status:
            query = query.where(
                PaymentReceipt.status == parse_choice(ReceiptStatus, status, "status")
            )
        if start:
            query = query.where(PaymentReceipt.received_at >= start)
        if end:
            query = query.where(PaymentReceipt.received_at <= end)

        receipts = list(self.db.execute(query.limit(limit)).scalars().all())

        rows = self.db.execute(
            select(
                PaymentReceipt.method,
                PaymentReceipt.status,
                func.count(PaymentReceipt.id),
                func.sum(PaymentReceipt.amount_cents),
            ).group_by(PaymentReceipt.method, PaymentReceipt.status)
        ).all()

        summary = ReceiptSummary(by_method={})
        for row_method, row_status, count, amount in rows:
            amount = int(amount or 0)
            if row_status == ReceiptStatus.RECEIVED:
                summary.total_received_cents += amount
            elif row_status == ReceiptStatus.PENDING:
                summary.total_pending_cents += amount

            bucket = summary.by_method.setdefault(row_method.value, MethodTotal())
            bucket.count += count
            bucket.amount_cents += amount

        return receipts, summary
