"""
Ledger API endpoints.

GET returns the dashboard summary; POST runs one named
bookkeeping action and returns its result with the fresh summary.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from treasury_ledger.auth import require_admin
from treasury_ledger.errors import LedgerError
from treasury_ledger.models.base import get_db
from treasury_ledger.schemas.ledger import (
    LedgerActionRequest,
    LedgerActionResponse,
    LedgerSummary,
)
from treasury_ledger.services.bookkeeping_service import BookkeepingService

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("", response_model=LedgerSummary)
def get_ledger_summary(
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Balances, recent entries, pending transfers and the tax estimate.

    The chart of accounts is created on first read, so this
    endpoint commits.
    """
    service = BookkeepingService(db)
    try:
        summary = service.get_ledger_summary()
        db.commit()
        return summary
    except LedgerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=LedgerActionResponse)
def perform_ledger_action(
    request: LedgerActionRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Run one bookkeeping action.

    The postings, any transfer it creates or settles, and the
    audit record commit together or not at all.
    """
    service = BookkeepingService(db)
    try:
        result = service.perform(request, actor=admin["sub"])
        db.commit()
        return LedgerActionResponse(
            result=result,
            summary=service.get_ledger_summary(),
        )
    except LedgerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
