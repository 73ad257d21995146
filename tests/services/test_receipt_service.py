"""
Tests for the ReceiptService.
"""

from datetime import datetime, timedelta

import pytest

from treasury_ledger.errors import InvalidAmount, InvalidOperation
from treasury_ledger.models.enums import ReceiptMethod, ReceiptStatus
from treasury_ledger.models.payment_receipt import PaymentReceipt
from treasury_ledger.schemas.receipt import ReceiptCreate
from treasury_ledger.services.receipt_service import ReceiptService


def record(service, **overrides):
    fields = {"amount_usd": 250, "method": "cash", "client_name": "Acme"}
    fields.update(overrides)
    return service.record_manual(ReceiptCreate(**fields), created_by="owner")


class TestRecordManual:

    def test_recorded_as_received(self, db_session):
        receipt = record(ReceiptService(db_session))
        db_session.commit()

        assert receipt.status == ReceiptStatus.RECEIVED
        assert receipt.received_at is not None
        assert receipt.amount_cents == 25000
        assert receipt.method == ReceiptMethod.CASH
        assert receipt.created_by == "owner"

    def test_default_description(self, db_session):
        receipt = record(ReceiptService(db_session), amount_usd="99.5", method="wire")
        assert receipt.description == "WIRE payment - $99.50"

    def test_stripe_not_manual(self, db_session):
        with pytest.raises(InvalidOperation, match="Invalid method"):
            record(ReceiptService(db_session), method="stripe")

    def test_method_required(self, db_session):
        with pytest.raises(InvalidOperation, match="required"):
            record(ReceiptService(db_session), method=None)

    @pytest.mark.parametrize("amount,message", [
        ("0.50", "Minimum"),
        (1_000_000.01, "Maximum"),
        (-3, "positive"),
    ])
    def test_amount_bounds(self, db_session, amount, message):
        with pytest.raises(InvalidAmount, match=message):
            record(ReceiptService(db_session), amount_usd=amount)


class TestListReceipts:

    def test_summary_by_method(self, db_session):
        service = ReceiptService(db_session)
        record(service, amount_usd=100, method="cash")
        record(service, amount_usd=50, method="cash")
        record(service, amount_usd=300, method="check")
        db_session.add(PaymentReceipt(
            method=ReceiptMethod.STRIPE,
            amount_cents=7000,
            status=ReceiptStatus.PENDING,
        ))
        db_session.commit()

        receipts, summary = service.list_receipts()
        assert len(receipts) == 4
        assert summary.total_received_cents == 45000
        assert summary.total_pending_cents == 7000
        assert summary.by_method["CASH"].count == 2
        assert summary.by_method["CASH"].amount_cents == 15000
        assert summary.by_method["STRIPE"].count == 1

    def test_filters(self, db_session):
        service = ReceiptService(db_session)
        record(service, method="cash")
        check = record(service, method="check")
        db_session.commit()

        receipts, _ = service.list_receipts(method="CHECK")
        assert [r.id for r in receipts] == [check.id]

        receipts, _ = service.list_receipts(status="pending")
        assert receipts == []

    def test_date_range(self, db_session):
        service = ReceiptService(db_session)
        record(service)
        db_session.commit()

        now = datetime.utcnow()
        receipts, _ = service.list_receipts(start=now - timedelta(hours=1))
        assert len(receipts) == 1

        receipts, _ = service.list_receipts(end=now - timedelta(hours=1))
        assert receipts == []

    def test_bad_method_filter(self, db_session):
        with pytest.raises(InvalidOperation):
            ReceiptService(db_session).list_receipts(method="barter")
