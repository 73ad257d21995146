"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from treasury_ledger.models.base import Base
from treasury_ledger.models.enums import (
    AccountType,
    EntryType,
    PostingKind,
    LedgerAction,
    ExpenseCategory,
    PaidFrom,
    TransferStatus,
    TransferMethod,
    SourceAccount,
    DestinationAccount,
    ReceiptMethod,
    ReceiptStatus,
)
from treasury_ledger.models.audit_log import AuditLog
from treasury_ledger.models.ledger_account import LedgerAccount
from treasury_ledger.models.ledger_entry import LedgerEntry
from treasury_ledger.models.payment_receipt import PaymentReceipt
from treasury_ledger.models.transfer import Transfer

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "PostingKind",
    "LedgerAction",
    "ExpenseCategory",
    "PaidFrom",
    "TransferStatus",
    "TransferMethod",
    "SourceAccount",
    "DestinationAccount",
    "ReceiptMethod",
    "ReceiptStatus",
    "AuditLog",
    "LedgerAccount",
    "LedgerEntry",
    "PaymentReceipt",
    "Transfer",
]
