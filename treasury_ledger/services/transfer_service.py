"""
Transfer service — the treasury transfer workflow.

Every transfer starts PLANNED and only moves forward through
VALID_TRANSITIONS:

    PLANNED   -> SUBMITTED | CANCELED
    SUBMITTED -> CONFIRMED | CANCELED

Status changes are compare-and-set against the status the caller
saw, so two concurrent confirmations cannot both succeed. When the
ledger holds the amount in KRAKEN_PENDING for a transfer,
confirmation settles it and cancellation returns it to the bank.
"""

import logging
from datetime import datetime

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from treasury_ledger.chart import BANK_FULTON, KRAKEN, KRAKEN_PENDING
from treasury_ledger.errors import (
    InvalidAmount,
    InvalidOperation,
    InvalidStatus,
    InvalidTransition,
    NoOp,
    NotFound,
)
from treasury_ledger.models.audit_log import AuditLog
from treasury_ledger.models.enums import (
    DestinationAccount,
    PostingKind,
    SourceAccount,
    TransferMethod,
    TransferStatus,
)
from treasury_ledger.models.payment_receipt import PaymentReceipt
from treasury_ledger.models.transfer import Transfer, VALID_TRANSITIONS
from treasury_ledger.money import usd_to_cents
from treasury_ledger.schemas.transfer import (
    TransferCreate,
    TransferTotals,
    TransferUpdate,
)
from treasury_ledger.services.choices import clamp_limit, parse_choice
from treasury_ledger.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

MIN_TRANSFER_CENTS = 100

REFERENCE_FIELDS = ("bank_ref", "kraken_ref", "notes")


def parse_status(value) -> TransferStatus:
    return parse_choice(TransferStatus, value, "status", error=InvalidStatus)


class TransferService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger_service = LedgerService(db)

    # --- Creation ---

    def create_transfer(
        self, request: TransferCreate, created_by: str | None = None
    ) -> Transfer:
        """
        Plan a transfer from an internal account to a destination.

        Minimum $1. The transfer starts PLANNED; it does not touch
        the ledger.
        """
        if request.amount_usd is None:
            raise InvalidAmount("Amount is required")
        if not request.source_account:
            raise InvalidOperation("Source account is required")
        if not request.method:
            raise InvalidOperation("Transfer method is required")

        source = parse_choice(SourceAccount, request.source_account, "source")
        destination = parse_choice(
            DestinationAccount, request.destination_account, "destination"
        )
        method = parse_choice(TransferMethod, request.method, "method")

        amount_cents = usd_to_cents(request.amount_usd, field="Amount")
        if amount_cents < MIN_TRANSFER_CENTS:
            raise InvalidAmount("Minimum transfer is $1")

        if request.payment_receipt_id:
            if not self.db.get(PaymentReceipt, request.payment_receipt_id):
                raise NotFound("Payment receipt not found")

        transfer = self._insert(
            source_account=source,
            destination_account=destination,
            method=method,
            amount_cents=amount_cents,
            payment_receipt_id=request.payment_receipt_id or None,
            notes=request.notes or None,
            created_by=created_by,
        )
        logger.info(
            "Transfer planned: %s cents %s -> %s via %s",
            amount_cents, source.value, destination.value, method.value,
        )
        return transfer

    def open_ledger_transfer(
        self,
        method: TransferMethod,
        amount_cents: int,
        pending_posting_id: str,
        notes: str | None = None,
        created_by: str | None = None,
    ) -> Transfer:
        """
        Plan a bank-to-exchange transfer whose amount the ledger is
        about to move into KRAKEN_PENDING under pending_posting_id.
        """
        return self._insert(
            source_account=SourceAccount.FULTON_BANK,
            destination_account=DestinationAccount.KRAKEN,
            method=method,
            amount_cents=amount_cents,
            notes=notes,
            created_by=created_by,
            pending_posting_id=pending_posting_id,
        )

    def _insert(self, **fields) -> Transfer:
        now = datetime.utcnow()
        transfer = Transfer(
            status=TransferStatus.PLANNED,
            planned_at=now,
            currency="USD",
            **fields,
        )
        self.db.add(transfer)
        self.db.flush()
        self.db.add(AuditLog.record(
            "TRANSFER_PLANNED",
            transfer.id,
            amount_cents=transfer.amount_cents,
            method=transfer.method.value,
            source=transfer.source_account.value,
            destination=transfer.destination_account.value,
            actor=transfer.created_by,
        ))
        self.db.flush()
        return transfer

    # --- Queries ---

    def get_transfer(self, transfer_id: str) -> Transfer:
        transfer = self.db.get(Transfer, transfer_id)
        if not transfer:
            raise NotFound("Transfer not found")
        return transfer

    def list_transfers(
        self, status: str | None = None, limit: int | None = None
    ) -> tuple[list[Transfer], TransferTotals]:
        """Newest first, with amount totals per status."""
        limit = clamp_limit(limit)

        query = select(Transfer).order_by(Transfer.created_at.desc())
        if status:
            query = query.where(Transfer.status == parse_status(status))

        transfers = list(self.db.execute(query.limit(limit)).scalars().all())

        rows = self.db.execute(
            select(Transfer.status, func.sum(Transfer.amount_cents))
            .group_by(Transfer.status)
        ).all()
        totals = TransferTotals()
        for row_status, amount in rows:
            field = f"{row_status.value.lower()}_cents"
            if field in TransferTotals.model_fields:
                setattr(totals, field, int(amount or 0))

        return transfers, totals

    def get_pending_ledger_transfers(self) -> list[Transfer]:
        """Transfers whose amount is still sitting in KRAKEN_PENDING."""
        transfers = self.db.execute(
            select(Transfer)
            .where(
                Transfer.pending_posting_id.is_not(None),
                Transfer.status.in_(
                    [TransferStatus.PLANNED, TransferStatus.SUBMITTED]
                ),
            )
            .order_by(Transfer.created_at.desc())
        ).scalars().all()
        return list(transfers)

    # --- Workflow ---

    def update_transfer(
        self,
        transfer_id: str,
        request: TransferUpdate,
        actor: str | None = None,
    ) -> Transfer:
        """
        Apply a PATCH: optional status change plus reference fields.

        Raises NotFound, InvalidStatus, InvalidTransition, or NoOp
        when the request carries nothing to change.
        """
        transfer = self.get_transfer(transfer_id)

        target = parse_status(request.status) if request.status else None
        if target is not None:
            self._check_transition(transfer, target)

        references = {
            field: getattr(request, field)
            for field in REFERENCE_FIELDS
            if field in request.model_fields_set
        }

        if target is None and not references:
            raise NoOp("No fields to update")

        if target is None:
            for field, value in references.items():
                setattr(transfer, field, value)
            self.db.flush()
            logger.info("Transfer %s references updated", transfer.id)
            return transfer

        return self._transition(transfer, target, references, actor)

    def complete(
        self,
        transfer_id: str,
        reference: str | None = None,
        actor: str | None = None,
    ) -> Transfer:
        """
        Drive a ledger transfer to CONFIRMED, settling its pending
        amount. A PLANNED transfer passes through SUBMITTED first so
        its history still follows the transition table.
        """
        transfer = self.get_transfer(transfer_id)
        if transfer.is_terminal:
            raise InvalidTransition(
                f"Transfer not pending: {transfer.status.value}"
            )
        if not transfer.pending_posting_id:
            raise InvalidOperation(
                f"Transfer {transfer.id} has no pending ledger amount to settle"
            )

        if transfer.status == TransferStatus.PLANNED:
            self._transition(transfer, TransferStatus.SUBMITTED, {}, actor)

        references = {"kraken_ref": reference} if reference else {}
        return self._transition(
            transfer, TransferStatus.CONFIRMED, references, actor
        )

    def _check_transition(
        self, transfer: Transfer, target: TransferStatus
    ) -> None:
        if not transfer.can_transition_to(target):
            allowed = VALID_TRANSITIONS.get(transfer.status, set())
            allowed_text = ", ".join(
                status.value for status in TransferStatus if status in allowed
            ) or "none"
            raise InvalidTransition(
                f"Cannot transition from {transfer.status.value} "
                f"to {target.value}. Allowed: {allowed_text}"
            )

    def _transition(
        self,
        transfer: Transfer,
        target: TransferStatus,
        references: dict,
        actor: str | None,
    ) -> Transfer:
        self._check_transition(transfer, target)

        previous = transfer.status
        now = datetime.utcnow()
        values = dict(references, status=target, updated_at=now)
        if target == TransferStatus.SUBMITTED:
            values["submitted_at"] = now
        elif target == TransferStatus.CONFIRMED:
            values["confirmed_at"] = now

        # Compare-and-set: only succeeds if nobody moved it meanwhile
        result = self.db.execute(
            update(Transfer)
            .where(Transfer.id == transfer.id, Transfer.status == previous)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.expire(transfer)
            raise InvalidTransition(
                f"Transfer {transfer.id} is no longer {previous.value}; "
                f"it was changed by another request"
            )
        self.db.refresh(transfer)

        if transfer.pending_posting_id:
            if target == TransferStatus.CONFIRMED:
                self._settle(transfer)
            elif target == TransferStatus.CANCELED:
                self._reverse(transfer)

        self.db.add(AuditLog.record(
            "TRANSFER_STATUS_CHANGED",
            transfer.id,
            previous=previous.value,
            status=target.value,
            actor=actor,
        ))
        self.db.flush()

        logger.info(
            "Transfer %s updated: %s -> %s",
            transfer.id, previous.value, target.value,
        )
        return transfer

    def _settle(self, transfer: Transfer) -> None:
        self.ledger_service.post_pair(
            PostingKind.TRANSFER_SETTLEMENT,
            KRAKEN,
            KRAKEN_PENDING,
            transfer.amount_cents,
            f"{transfer.method.value} to Kraken settled",
            transfer_id=transfer.id,
            note=transfer.kraken_ref,
        )

    def _reverse(self, transfer: Transfer) -> None:
        self.ledger_service.post_pair(
            PostingKind.TRANSFER_REVERSAL,
            BANK_FULTON,
            KRAKEN_PENDING,
            transfer.amount_cents,
            f"{transfer.method.value} to Kraken canceled",
            transfer_id=transfer.id,
        )
