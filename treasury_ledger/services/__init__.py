"""Business logic services."""

from treasury_ledger.services.ledger_service import LedgerService
from treasury_ledger.services.bookkeeping_service import BookkeepingService
from treasury_ledger.services.transfer_service import TransferService
from treasury_ledger.services.receipt_service import ReceiptService

__all__ = [
    "LedgerService",
    "BookkeepingService",
    "TransferService",
    "ReceiptService",
]
