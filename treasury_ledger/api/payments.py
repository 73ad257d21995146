"""
Payment receipt API endpoints.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from treasury_ledger.auth import require_admin
from treasury_ledger.errors import LedgerError
from treasury_ledger.models.base import get_db
from treasury_ledger.schemas.receipt import (
    ReceiptCreate,
    ReceiptEnvelope,
    ReceiptListResponse,
    ReceiptResponse,
)
from treasury_ledger.services.receipt_service import ReceiptService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/manual", response_model=ReceiptEnvelope, status_code=201)
def record_manual_payment(
    request: ReceiptCreate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Record a cash, ACH, wire or check payment that already arrived."""
    service = ReceiptService(db)
    try:
        receipt = service.record_manual(request, created_by=admin["sub"])
        db.commit()
        db.refresh(receipt)
        return ReceiptEnvelope(receipt=ReceiptResponse.model_validate(receipt))
    except LedgerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=ReceiptListResponse)
def list_payments(
    method: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Newest first, filtered, with totals across all receipts."""
    service = ReceiptService(db)
    try:
        receipts, summary = service.list_receipts(
            method=method,
            status=status,
            start=start_date,
            end=end_date,
            limit=limit,
        )
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return ReceiptListResponse(
        receipts=[ReceiptResponse.model_validate(r) for r in receipts],
        summary=summary,
        count=len(receipts),
    )
