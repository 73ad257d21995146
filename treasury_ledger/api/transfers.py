"""
Treasury transfer API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from treasury_ledger.auth import require_admin
from treasury_ledger.errors import LedgerError
from treasury_ledger.models.base import get_db
from treasury_ledger.schemas.transfer import (
    TransferCreate,
    TransferEnvelope,
    TransferListResponse,
    TransferResponse,
    TransferUpdate,
)
from treasury_ledger.services.transfer_service import TransferService

router = APIRouter(prefix="/treasury/transfers", tags=["Transfers"])


@router.post("", response_model=TransferEnvelope, status_code=201)
def create_transfer(
    request: TransferCreate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Plan a new transfer. It starts PLANNED."""
    service = TransferService(db)
    try:
        transfer = service.create_transfer(request, created_by=admin["sub"])
        db.commit()
        db.refresh(transfer)
        return TransferEnvelope(transfer=TransferResponse.model_validate(transfer))
    except LedgerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=TransferListResponse)
def list_transfers(
    status: Optional[str] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Newest first, optionally filtered by status, with per-status totals."""
    service = TransferService(db)
    try:
        transfers, totals = service.list_transfers(status=status, limit=limit)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return TransferListResponse(
        transfers=[TransferResponse.model_validate(t) for t in transfers],
        summary=totals,
        count=len(transfers),
    )


@router.get("/{transfer_id}", response_model=TransferEnvelope)
def get_transfer(
    transfer_id: str,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Get one transfer, including the receipt that funded it."""
    service = TransferService(db)
    try:
        transfer = service.get_transfer(transfer_id)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return TransferEnvelope(transfer=TransferResponse.model_validate(transfer))


@router.patch("/{transfer_id}", response_model=TransferEnvelope)
def update_transfer(
    transfer_id: str,
    request: TransferUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Change status and/or reference fields.

    Enforces the transfer state machine; only valid transitions
    are allowed.
    """
    service = TransferService(db)
    try:
        transfer = service.update_transfer(transfer_id, request, actor=admin["sub"])
        db.commit()
        db.refresh(transfer)
        return TransferEnvelope(transfer=TransferResponse.model_validate(transfer))
    except LedgerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
